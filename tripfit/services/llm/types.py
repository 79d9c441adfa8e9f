from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OutfitRecommendation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    top: str
    bottom: str
    shoes: str
    accessories: List[str] = Field(default_factory=list)
    outerwear: str = ""
    top_color: str = ""
    bottom_color: str = ""
    shoes_color: str = ""
    accessories_color: str = ""
    outerwear_color: str = ""


class ParsedRecommendation(BaseModel):
    outfit: OutfitRecommendation
    cultural_notes: str = ""


@dataclass(frozen=True)
class ParseSuccess:
    data: dict


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw: str = ""


ParseResult = Union[ParseSuccess, ParseFailure]


@dataclass(frozen=True)
class ImageReady:
    data_url: str


@dataclass(frozen=True)
class ImageUnavailable:
    reason: str


ImageResult = Union[ImageReady, ImageUnavailable]


class ProviderUnavailable(RuntimeError):
    """Raised by the unconfigured provider in place of a real call."""


class RecommendationParseError(ValueError):
    def __init__(self, message: str, failure: Optional[ParseFailure] = None):
        super().__init__(message)
        self.failure = failure
