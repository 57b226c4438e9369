"""Session tracking and notification preference schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class SessionCreate(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=255)
    user_agent: Optional[str] = Field(None, max_length=512)
    ip_address: Optional[str] = Field(None, max_length=45)


class SessionRevoke(BaseModel):
    # Row id of the session, as returned by GET /settings/sessions
    session_id: str = Field(..., min_length=1)


class DeviceInfoRead(BaseModel):
    device_type: str
    browser: str
    os: str
    is_mobile: bool


class SessionRead(BaseModel):
    id: str
    session_id: str
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime
    last_active: datetime
    is_active: bool
    is_current: bool = False
    device_info: Optional[DeviceInfoRead] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferencesUpdate(BaseModel):
    login_alerts: StrictBool
    new_device_logins: StrictBool

    model_config = ConfigDict(extra="forbid")
