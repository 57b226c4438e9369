"""Profile, preference and account deletion schemas.

Update payloads list every accepted field explicitly. Unknown keys are
rejected rather than passed through to the database.
"""
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class PreferencesUpdate(BaseModel):
    timezone: Optional[str] = Field(None, max_length=64)
    theme: Optional[Literal["light", "dark", "system"]] = None
    language: Optional[str] = Field(None, max_length=10)
    email_notifications: Optional[Dict[str, Any]] = None
    developer_preferences: Optional[Dict[str, Any]] = None
    bio: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(extra="forbid")


class SettingsUpdate(BaseModel):
    profile: Optional[ProfileUpdate] = None
    preferences: Optional[PreferencesUpdate] = None

    model_config = ConfigDict(extra="forbid")


class ProfileRead(BaseModel):
    id: str
    email: EmailStr
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    plan: str
    signup_method: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PreferencesRead(BaseModel):
    timezone: str = "UTC"
    theme: str = "system"
    language: str = "en"
    email_notifications: Dict[str, Any] = {}
    developer_preferences: Dict[str, Any] = {}
    bio: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AccountDeletionAction(BaseModel):
    action: Literal["initiate_deletion", "cancel_deletion", "delete_account_immediate"]
    reason: Optional[str] = Field(None, max_length=1000)


class AccountDeletionRead(BaseModel):
    id: str
    reason: Optional[str] = None
    scheduled_for: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
