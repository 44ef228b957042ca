from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class RelayError(Exception):
    """
    Base for every failure a route can report. Subclasses fix `kind` and the
    default HTTP status; `to_response()` is the only place error bodies are built.
    """

    kind = "error"
    http_status = 500

    def __init__(self, message: str, http_status: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if http_status is not None:
            self.http_status = http_status
        self.details = details

    def body(self) -> dict:
        return {"error": self.message}

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.http_status, content=self.body())


class ValidationError(RelayError):
    kind = "validation"
    http_status = 400

    def body(self) -> dict:
        out = {"error": self.message}
        if self.details is not None:
            out["details"] = self.details
        return out


class AuthError(RelayError):
    """Token exchange failed. `details` is for logs only and never returned."""

    kind = "auth"
    public_message = "Failed to get Zoom access token"

    def body(self) -> dict:
        return {"error": self.public_message}


class UpstreamError(RelayError):
    """Zoom answered with a non-2xx status."""

    kind = "upstream"

    def __init__(self, message: str, http_status: Optional[int] = None,
                 code: Any = None, details: Any = None):
        super().__init__(message, http_status=http_status or 500, details=details)
        self.code = code

    def body(self) -> dict:
        return {
            "error": f"Zoom API Error: {self.message}",
            "code": self.code,
            "details": self.details,
        }


class TransportError(RelayError):
    """Zoom could not be reached (connection error, timeout)."""

    kind = "transport"

    def body(self) -> dict:
        return {"error": self.message, "details": self.details}


class ServiceError(RelayError):
    kind = "service"


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return exc.to_response()


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "invalid request"))
    # pydantic error entries may carry non-JSON values under "ctx"
    details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors]
    return ValidationError(message, details=details).to_response()
