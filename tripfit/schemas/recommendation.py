from typing import Any, Dict, List, Optional

from pydantic import Field

from tripfit.schemas.base import ApiModel
from tripfit.services.llm.types import OutfitRecommendation
from tripfit.services.weather import WeatherSnapshot


class RecommendationIn(ApiModel):
    destination: str = Field(..., min_length=1)
    date: str
    occasion: str = Field(..., min_length=1)
    vibe: str = Field(..., min_length=1)


class RecommendationOut(ApiModel):
    outfits: List[OutfitRecommendation]
    weather: WeatherSnapshot
    cultural_notes: str
    image_url: str
    destination: str
    date: str
    occasion: str
    vibe: str


class ReimageIn(ApiModel):
    outfit: Optional[OutfitRecommendation] = None
    occasion: str = ""
    vibe: str = ""
    weather: Optional[Dict[str, Any]] = None


class ReimageOut(ApiModel):
    image_url: str
