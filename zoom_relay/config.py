import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv
from fastapi import Request

REQUIRED_VARS = ("ZOOM_ACCOUNT_ID", "ZOOM_CLIENT_ID", "ZOOM_CLIENT_SECRET")


@dataclass(frozen=True)
class Settings:
    account_id: str
    client_id: str
    client_secret: str
    user_id: str = "me"
    oauth_url: str = "https://zoom.us/oauth/token"
    api_base_url: str = "https://api.zoom.us/v2"
    http_timeout: float = 10.0
    cors_allow_origins: Tuple[str, ...] = ("*",)
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    def __repr__(self) -> str:
        # keep the secret out of tracebacks and logs
        return (
            f"Settings(account_id={self.account_id!r}, client_id={self.client_id!r}, "
            f"client_secret='***', user_id={self.user_id!r}, api_base_url={self.api_base_url!r})"
        )


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build the process-wide Settings from the environment (and a .env file if present).
    Raises RuntimeError when a Zoom credential is missing.
    """
    load_dotenv(env_file)

    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        raise RuntimeError(
            f"Missing Zoom credentials: make sure {', '.join(missing)} are set in your .env"
        )

    origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

    return Settings(
        account_id=os.environ["ZOOM_ACCOUNT_ID"],
        client_id=os.environ["ZOOM_CLIENT_ID"],
        client_secret=os.environ["ZOOM_CLIENT_SECRET"],
        user_id=os.getenv("ZOOM_USER_ID", "me"),
        oauth_url=os.getenv("ZOOM_OAUTH_URL", "https://zoom.us/oauth/token"),
        api_base_url=os.getenv("ZOOM_API_BASE_URL", "https://api.zoom.us/v2").rstrip("/"),
        http_timeout=float(os.getenv("ZOOM_HTTP_TIMEOUT", "10")),
        cors_allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
