from fastapi import APIRouter, Depends

from .. import schemas
from ..config import Settings, get_settings
from ..errors import ServiceError, TransportError, UpstreamError
from ..oauth_token import fetch_access_token
from ..services.zoom_service import add_webinar_registrant, list_webinar_registrants, zoom_session

router = APIRouter(prefix="/{webinar_id}/registrants", tags=["registrants"])


@router.post("")
async def add_registrant(
    webinar_id: str,
    payload: schemas.RegistrantCreate,
    settings: Settings = Depends(get_settings),
):
    async with zoom_session(settings) as session:
        token = await fetch_access_token(settings, session)
        try:
            return await add_webinar_registrant(settings, session, token, webinar_id, payload)
        except (UpstreamError, TransportError) as exc:
            raise ServiceError(f"Error creating registrant for webinar: {webinar_id}") from exc


@router.get("")
async def list_registrants(
    webinar_id: str,
    status: str = "",
    next_page_token: str = "",
    settings: Settings = Depends(get_settings),
):
    """
    Zoom's registrant list, returned as-is. Both query params are always forwarded.
    """
    async with zoom_session(settings) as session:
        token = await fetch_access_token(settings, session)
        try:
            return await list_webinar_registrants(
                settings, session, token, webinar_id, status, next_page_token
            )
        except (UpstreamError, TransportError) as exc:
            raise ServiceError(f"Error fetching registrants for webinar: {webinar_id}") from exc
