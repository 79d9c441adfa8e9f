from typing import List, Optional

from tripfit.schemas.base import ApiModel


class WardrobeItemIn(ApiModel):
    name: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    weather: Optional[List[str]] = None
    occasions: Optional[List[str]] = None
    image_url: Optional[str] = None


class WardrobeItemOut(ApiModel):
    id: str
    name: str
    type: str
    category: str
    weather: List[str] = []
    occasions: List[str] = []
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
