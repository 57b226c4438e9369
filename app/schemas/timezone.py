from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TimezoneCreate(BaseModel):
    timezone: str = Field(..., min_length=1, max_length=64)
    label: str = Field(..., min_length=1, max_length=100)
    display_order: Optional[int] = Field(None, ge=0)
    is_default: bool = False


class TimezoneUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=100)
    display_order: Optional[int] = Field(None, ge=0)
    is_default: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


class TimezoneRead(BaseModel):
    id: str
    timezone: str
    label: str
    display_order: int
    is_default: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TimezoneOrder(BaseModel):
    id: str
    display_order: int = Field(..., ge=0)


class TimezoneReorder(BaseModel):
    timezones: List[TimezoneOrder] = Field(..., min_length=1)


class WorldClockCityCreate(BaseModel):
    city_id: str = Field(..., min_length=1, max_length=100)
    city_name: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=255)
    country_code: str = Field(..., min_length=2, max_length=8)
    timezone: str = Field(..., min_length=1, max_length=64)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    region: Optional[str] = None
    population: Optional[int] = Field(None, ge=0)
    is_popular: bool = False
    custom_label: Optional[str] = Field(None, max_length=255)


class WorldClockCityUpdate(BaseModel):
    custom_label: Optional[str] = Field(None, max_length=255)
    display_order: Optional[int] = Field(None, ge=0)

    model_config = ConfigDict(extra="forbid")


class WorldClockCityOrder(BaseModel):
    city_id: str
    display_order: int = Field(..., ge=0)


class WorldClockCityReorder(BaseModel):
    cities: List[WorldClockCityOrder] = Field(..., min_length=1)
