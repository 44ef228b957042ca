import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional
from urllib.parse import quote

import aiohttp

from ..config import Settings
from ..errors import TransportError, UpstreamError
from ..schemas import MeetingCreate, RegistrantCreate

logger = logging.getLogger(__name__)


@asynccontextmanager
async def zoom_session(settings: Settings) -> AsyncIterator[aiohttp.ClientSession]:
    """One client session per inbound request, closed when the request is done."""
    timeout = aiohttp.ClientTimeout(total=settings.http_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        yield session


def _zoom_time(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _upstream_error(status: int, reason: Optional[str], text: str, body: Any) -> UpstreamError:
    if isinstance(body, dict):
        message = body.get("message") or text or reason
        return UpstreamError(message, http_status=status, code=body.get("code"), details=body)
    return UpstreamError(text or reason or f"HTTP {status}", http_status=status, details=text or None)


async def _call(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    token: str,
    failure_message: str,
    **kwargs,
) -> Dict[str, Any]:
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }
    try:
        async with session.request(method, url, headers=headers, **kwargs) as resp:
            text = await resp.text()
            try:
                body = await resp.json(content_type=None) if text else {}
            except ValueError:
                body = None
            if resp.status >= 300:
                logger.error("%s: %s %s", failure_message, resp.status, text)
                raise _upstream_error(resp.status, resp.reason, text, body)
            if body is None:
                raise UpstreamError("Zoom returned a non-JSON body",
                                    http_status=502, details=text)
            if not isinstance(body, dict):
                logger.error("%s: unexpected body %s", failure_message, text)
                raise UpstreamError("Zoom returned an unexpected body",
                                    http_status=502, details=body)
            return body
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.error("%s: %r", failure_message, exc)
        raise TransportError(failure_message, details=str(exc) or type(exc).__name__) from exc


async def create_zoom_meeting(
    settings: Settings,
    session: aiohttp.ClientSession,
    token: str,
    meeting: MeetingCreate,
) -> dict:
    start = meeting.start_time or datetime.now(timezone.utc)
    payload = {
        "topic": meeting.topic,
        "type": 2,  # scheduled meeting
        "start_time": _zoom_time(start),
        "duration": meeting.duration,
        "timezone": meeting.timezone,
        "settings": {
            "host_video": True,
            "participant_video": True,
            "join_before_host": False,
            "mute_upon_entry": True,
        },
    }
    if meeting.password:
        payload["password"] = meeting.password
    if meeting.agenda:
        payload["agenda"] = meeting.agenda

    url = f"{settings.api_base_url}/users/{quote(settings.user_id, safe='@')}/meetings"
    return await _call(session, "POST", url, token, "Failed to create Zoom meeting", json=payload)


async def create_zoom_webinar(
    settings: Settings,
    session: aiohttp.ClientSession,
    token: str,
    payload: dict,
) -> dict:
    url = f"{settings.api_base_url}/users/{quote(settings.user_id, safe='@')}/webinars"
    return await _call(session, "POST", url, token, "Failed to create Zoom webinar", json=payload)


async def add_webinar_registrant(
    settings: Settings,
    session: aiohttp.ClientSession,
    token: str,
    webinar_id: str,
    registrant: RegistrantCreate,
) -> dict:
    url = f"{settings.api_base_url}/webinars/{quote(webinar_id, safe='')}/registrants"
    return await _call(
        session, "POST", url, token,
        f"Error creating registrant for webinar: {webinar_id}",
        json=registrant.model_dump(exclude_none=True),
    )


async def list_webinar_registrants(
    settings: Settings,
    session: aiohttp.ClientSession,
    token: str,
    webinar_id: str,
    status: str = "",
    next_page_token: str = "",
) -> dict:
    url = f"{settings.api_base_url}/webinars/{quote(webinar_id, safe='')}/registrants"
    return await _call(
        session, "GET", url, token,
        f"Error fetching registrants for webinar: {webinar_id}",
        params={"status": status, "next_page_token": next_page_token},
    )
