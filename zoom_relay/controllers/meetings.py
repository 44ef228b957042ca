from typing import Optional

from fastapi import APIRouter, Depends

from .. import schemas
from ..config import Settings, get_settings
from ..errors import ServiceError, TransportError, UpstreamError
from ..oauth_token import fetch_access_token
from ..services.zoom_service import create_zoom_meeting, zoom_session

router = APIRouter(tags=["meetings"])


@router.post("/create-meeting", response_model=schemas.MeetingOut)
async def create_meeting(
    payload: Optional[schemas.MeetingCreate] = None,
    settings: Settings = Depends(get_settings),
):
    """
    Create a scheduled Zoom meeting. The body is optional; every field has a default.
    """
    async with zoom_session(settings) as session:
        token = await fetch_access_token(settings, session)
        try:
            zm = await create_zoom_meeting(settings, session, token, payload or schemas.MeetingCreate())
        except (UpstreamError, TransportError) as exc:
            raise ServiceError("Failed to create Zoom meeting") from exc

    return schemas.MeetingOut(
        meetingId=zm.get("id"),
        joinUrl=zm.get("join_url"),
        startUrl=zm.get("start_url"),
    )
