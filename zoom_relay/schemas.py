from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr


class MeetingCreate(BaseModel):
    topic: str = "Test Meeting"
    start_time: Optional[datetime] = None
    duration: int = 60
    timezone: str = "Asia/Kolkata"
    password: Optional[str] = None
    agenda: Optional[str] = None


class MeetingOut(BaseModel):
    meetingId: Any
    joinUrl: Optional[str] = None
    startUrl: Optional[str] = None


class WebinarOut(BaseModel):
    success: bool = True
    webinarId: Any
    joinUrl: Optional[str] = None
    startUrl: Optional[str] = None
    data: Dict[str, Any]


class RegistrantCreate(BaseModel):
    email: EmailStr
    first_name: str
    last_name: Optional[str] = None
