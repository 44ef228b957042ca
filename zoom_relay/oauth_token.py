import asyncio
import logging
from typing import Optional

import aiohttp

from .config import Settings, load_settings
from .errors import AuthError

logger = logging.getLogger(__name__)


def basic_auth(settings: Settings) -> aiohttp.BasicAuth:
    return aiohttp.BasicAuth(login=settings.client_id, password=settings.client_secret)


async def fetch_access_token(
    settings: Settings,
    session: Optional[aiohttp.ClientSession] = None,
) -> str:
    """
    Fetches an OAuth token using Zoom account-level (Server-to-Server) credentials.

    A new token is requested on every call; nothing is cached. Any failure is
    raised as AuthError with the upstream body kept in `details` for logging.
    """
    if session is None:
        timeout = aiohttp.ClientTimeout(total=settings.http_timeout)
        async with aiohttp.ClientSession(timeout=timeout) as own_session:
            return await fetch_access_token(settings, own_session)

    form = {
        "grant_type": "account_credentials",
        "account_id": settings.account_id,
    }
    headers = {
        "Authorization": basic_auth(settings).encode(),
        "Content-Type": "application/x-www-form-urlencoded",
    }

    try:
        async with session.post(settings.oauth_url, data=form, headers=headers) as resp:
            text = await resp.text()
            if resp.status >= 300:
                logger.error("Zoom OAuth failed: %s %s", resp.status, text)
                raise AuthError(f"Zoom OAuth failed: {resp.status}", details=text)
            try:
                data = await resp.json(content_type=None)
            except ValueError as exc:
                logger.error("Zoom OAuth returned a non-JSON body: %s", text)
                raise AuthError("Zoom OAuth returned a non-JSON body", details=text) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.error("Error fetching Zoom token: %s", exc)
        raise AuthError("Error fetching Zoom token", details=str(exc)) from exc

    token = data.get("access_token") if isinstance(data, dict) else None
    if not token:
        logger.error("Zoom OAuth response had no access_token")
        raise AuthError("Zoom OAuth response had no access_token", details=data)
    return token


if __name__ == "__main__":
    # Quick CLI check that the configured credentials work
    token = asyncio.run(fetch_access_token(load_settings()))
    print("Zoom OAuth token:", token[:20] + "...")
