"""
Recommendation request orchestration.

One request moves strictly forward through the stages below. Anything that
fails before VALIDATED fails the request; the image stage only ever degrades
to the placeholder.

    IDLE -> WEATHER_FETCHED -> PROMPT_BUILT -> AWAITING_AI_TEXT -> VALIDATED
         -> AWAITING_AI_IMAGE -> IMAGE_READY | IMAGE_PLACEHOLDER -> COMPLETE
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from tripfit.models.models import Profile
from tripfit.services.llm import AIClients, PLACEHOLDER_IMAGE, generate_recommendation, render_outfit_image
from tripfit.services.llm.prompts import build_recommendation_prompt
from tripfit.services.llm.retry import RetryPolicy
from tripfit.services.llm.types import OutfitRecommendation
from tripfit.services.weather import WeatherClient, WeatherSnapshot

logger = logging.getLogger("uvicorn.error")

DEFAULT_GENDER = "neutral"
DEFAULT_BODY_TYPE = "average"


class RecommendationStage(str, enum.Enum):
    IDLE = "idle"
    WEATHER_FETCHED = "weather_fetched"
    PROMPT_BUILT = "prompt_built"
    AWAITING_AI_TEXT = "awaiting_ai_text"
    VALIDATED = "validated"
    AWAITING_AI_IMAGE = "awaiting_ai_image"
    IMAGE_READY = "image_ready"
    IMAGE_PLACEHOLDER = "image_placeholder"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class ProfileTraits:
    gender: str = DEFAULT_GENDER
    body_type: str = DEFAULT_BODY_TYPE

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileTraits":
        prefs = profile.preferences or {}
        gender = profile.gender or prefs.get("gender") or DEFAULT_GENDER
        body_type = profile.body_type or prefs.get("bodyType") or DEFAULT_BODY_TYPE
        return cls(gender=str(gender), body_type=str(body_type))


@dataclass(frozen=True)
class RecommendationRequest:
    destination: str
    date: str
    occasion: str
    vibe: str


@dataclass
class RecommendationResult:
    request: RecommendationRequest
    weather: WeatherSnapshot
    outfit: OutfitRecommendation
    cultural_notes: str
    image_url: str
    stage: RecommendationStage = RecommendationStage.COMPLETE


class RecommendationPipeline:
    def __init__(
        self,
        weather: WeatherClient,
        ai: AIClients,
        retry_policy: RetryPolicy,
        *,
        include_image: bool = True,
    ):
        self.weather = weather
        self.ai = ai
        self.retry_policy = retry_policy
        self.include_image = include_image
        self.stage = RecommendationStage.IDLE

    def _advance(self, stage: RecommendationStage, destination: str) -> None:
        logger.info("recommendation stage %s -> %s destination=%s", self.stage.value, stage.value, destination)
        self.stage = stage

    async def run(self, req: RecommendationRequest, traits: ProfileTraits) -> RecommendationResult:
        try:
            weather = await self.weather.lookup(req.destination)
            self._advance(RecommendationStage.WEATHER_FETCHED, req.destination)

            prompt = build_recommendation_prompt(
                weather, req.occasion, req.vibe, traits.body_type, traits.gender, req.destination
            )
            self._advance(RecommendationStage.PROMPT_BUILT, req.destination)

            self._advance(RecommendationStage.AWAITING_AI_TEXT, req.destination)
            parsed = await generate_recommendation(self.ai.text, prompt, self.retry_policy)
            self._advance(RecommendationStage.VALIDATED, req.destination)
        except Exception:
            self._advance(RecommendationStage.FAILED, req.destination)
            raise

        image_url: Optional[str] = None
        if self.include_image:
            self._advance(RecommendationStage.AWAITING_AI_IMAGE, req.destination)
            image_url = await render_outfit_image(self.ai.image, parsed.outfit, req.occasion, req.vibe, weather)
            self._advance(
                RecommendationStage.IMAGE_PLACEHOLDER if image_url == PLACEHOLDER_IMAGE else RecommendationStage.IMAGE_READY,
                req.destination,
            )

        self._advance(RecommendationStage.COMPLETE, req.destination)
        return RecommendationResult(
            request=req,
            weather=weather,
            outfit=parsed.outfit,
            cultural_notes=parsed.cultural_notes,
            image_url=image_url or PLACEHOLDER_IMAGE,
            stage=self.stage,
        )
