from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, field_validator


def sanitize(value: str) -> str:
    return value.strip().replace("<", "").replace(">", "")


class SupportRequest(BaseModel):
    """Contact form submission. Angle brackets are stripped before length checks."""
    name: str
    email: EmailStr
    subject: str
    message: str
    priority: Literal["low", "medium", "high"] = "medium"
    honeypot: Optional[str] = None
    turnstile_token: Optional[str] = None

    @field_validator("name")
    def validate_name(cls, v):
        v = sanitize(v)
        if len(v) < 2 or len(v) > 100:
            raise ValueError("Name must be between 2 and 100 characters")
        return v

    @field_validator("subject")
    def validate_subject(cls, v):
        v = sanitize(v)
        if len(v) < 5 or len(v) > 200:
            raise ValueError("Subject must be between 5 and 200 characters")
        return v

    @field_validator("message")
    def validate_message(cls, v):
        v = sanitize(v)
        if len(v) < 10 or len(v) > 2000:
            raise ValueError("Message must be between 10 and 2000 characters")
        return v
