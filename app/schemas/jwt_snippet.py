"""Saved JWT snippet schemas."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class JwtSnippetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    jwt_token: str = Field(..., min_length=1)
    # Filled from the token itself when omitted
    decoded_header: Optional[Dict[str, Any]] = None
    decoded_payload: Optional[Dict[str, Any]] = None
    algorithm: Optional[str] = Field(None, max_length=20)
    expires_at: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list, max_length=20)

    model_config = ConfigDict(extra="forbid")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class JwtSnippetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    is_favorite: Optional[bool] = None
    tags: Optional[List[str]] = Field(None, max_length=20)

    model_config = ConfigDict(extra="forbid")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class JwtSnippetRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    jwt_token: str
    decoded_header: Optional[Dict[str, Any]] = None
    decoded_payload: Optional[Dict[str, Any]] = None
    algorithm: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_favorite: bool
    tags: List[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
