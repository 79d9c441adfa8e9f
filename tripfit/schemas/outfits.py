import datetime
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from tripfit.schemas.base import ApiModel
from tripfit.services.payloads import coerce_object


class OutfitCreate(ApiModel):
    destination: str = Field(..., min_length=1)
    date: Optional[datetime.date] = None
    occasion: Optional[str] = None
    vibe: Optional[str] = None
    # Either an object or its JSON text; stored as an object
    weather: Optional[Dict[str, Any]] = None
    outfit: Optional[Dict[str, Any]] = None
    image_url: Optional[str] = None
    cultural_notes: Optional[str] = None
    name: Optional[str] = None

    @field_validator("weather", "outfit", mode="before")
    @classmethod
    def _coerce_payload(cls, v: Any) -> Optional[Dict[str, Any]]:
        return coerce_object(v, strict=True)

    @field_validator("date", mode="before")
    @classmethod
    def _date_only(cls, v: Any) -> Any:
        # Accept full ISO timestamps from clients and keep the day
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v


class OutfitUpdate(ApiModel):
    name: Optional[str] = None
    is_public: Optional[bool] = None


class OutfitOut(ApiModel):
    id: str
    name: Optional[str] = None
    destination: str
    date: Optional[str] = None
    occasion: Optional[str] = None
    vibe: Optional[str] = None
    weather: Optional[Dict[str, Any]] = None
    outfit: Optional[Dict[str, Any]] = None
    image_url: Optional[str] = None
    cultural_notes: Optional[str] = None
    is_public: bool = False
    share_url: Optional[str] = None
    rating: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class RatingIn(ApiModel):
    rating: Any = None


class RatingOut(ApiModel):
    outfit_id: str
    rating: int
    updated_at: Optional[str] = None
