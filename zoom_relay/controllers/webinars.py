import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from .. import schemas
from ..config import Settings, get_settings
from ..oauth_token import fetch_access_token
from ..services.webinar_builder import build_webinar_payload
from ..services.zoom_service import create_zoom_webinar, zoom_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webinars"])


@router.post("/create-webinar", response_model=schemas.WebinarOut)
async def create_webinar(
    data: Any = Body(None),
    settings: Settings = Depends(get_settings),
):
    """
    Validate the request, fill in defaults and create the webinar on Zoom.

    Validation runs before the token exchange so a bad request never reaches Zoom.
    Upstream rejections keep Zoom's status code, message and error code.
    """
    payload = build_webinar_payload(data if isinstance(data, dict) else {})

    async with zoom_session(settings) as session:
        token = await fetch_access_token(settings, session)
        webinar = await create_zoom_webinar(settings, session, token, payload)

    logger.info("Created Zoom webinar %s", webinar.get("id"))
    return schemas.WebinarOut(
        webinarId=webinar.get("id"),
        joinUrl=webinar.get("join_url"),
        startUrl=webinar.get("start_url"),
        data=webinar,
    )
