from typing import Any, Dict, List, Optional

from tripfit.schemas.base import ApiModel


class ProfileUserOut(ApiModel):
    email: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None


class ProfileOut(ApiModel):
    id: str
    user_id: str
    gender: Optional[str] = None
    body_type: Optional[str] = None
    preferences: Dict[str, Any] = {}
    user: Optional[ProfileUserOut] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileUpdateIn(ApiModel):
    name: Optional[str] = None
    gender: Optional[str] = None
    body_type: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    style: Optional[str] = None
    favorite_colors: Optional[List[str]] = None
    favorite_brands: Optional[List[str]] = None
    size_preferences: Optional[Dict[str, Any]] = None
    seasonal_preferences: Optional[Dict[str, Any]] = None
    preferences: Optional[Dict[str, Any]] = None


class AvatarIn(ApiModel):
    image_url: Optional[str] = None
