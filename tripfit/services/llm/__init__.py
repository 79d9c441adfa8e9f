from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tripfit.core.config import Settings
from tripfit.services.llm.parsing import parse_recommendation
from tripfit.services.llm.prompts import RECOMMENDATION_SYS, build_image_prompt
from tripfit.services.llm.providers.base import ImageProvider, NullImageProvider, NullTextProvider, TextProvider
from tripfit.services.llm.providers.openai import OpenAIImageProvider, OpenAITextProvider
from tripfit.services.llm.retry import RetryPolicy
from tripfit.services.llm.types import ImageReady, OutfitRecommendation, ParsedRecommendation
from tripfit.services.weather import WeatherSnapshot

logger = logging.getLogger("uvicorn.error")

PLACEHOLDER_IMAGE = "/placeholder.svg?height=400&width=300"


@dataclass
class AIClients:
    text: TextProvider = field(default_factory=NullTextProvider)
    image: ImageProvider = field(default_factory=NullImageProvider)

    @property
    def text_configured(self) -> bool:
        return not isinstance(self.text, NullTextProvider)


def build_ai_clients(cfg: Settings) -> AIClients:
    if not cfg.OPENAI_API_KEY:
        logger.warning("llm disabled: OPENAI_API_KEY not set")
        return AIClients()
    text = OpenAITextProvider(cfg.LLM_MODEL_TEXT, temperature=cfg.LLM_TEMPERATURE, api_key=cfg.OPENAI_API_KEY)
    if cfg.LLM_IMAGE_ENABLED:
        image: ImageProvider = OpenAIImageProvider(cfg.LLM_MODEL_IMAGE, size=cfg.LLM_IMAGE_SIZE, api_key=cfg.OPENAI_API_KEY)
    else:
        image = NullImageProvider()
    return AIClients(text=text, image=image)


async def generate_recommendation(provider: TextProvider, prompt: str, policy: RetryPolicy) -> ParsedRecommendation:
    """Ask the text model for an outfit, retrying on rate limits, and validate the answer."""
    raw = await policy.run(lambda: provider.complete(prompt, system=RECOMMENDATION_SYS))
    try:
        return parse_recommendation(raw)
    except ValueError:
        logger.warning("llm output rejected provider=%s raw=%.200r", provider.name, raw)
        raise


async def render_outfit_image(
    provider: ImageProvider,
    outfit: OutfitRecommendation,
    occasion: str,
    vibe: str,
    weather: WeatherSnapshot,
) -> str:
    """Best-effort outfit render: a data URL, or PLACEHOLDER_IMAGE when unavailable."""
    prompt = build_image_prompt(outfit, occasion, vibe, weather)
    try:
        result = await provider.render(prompt)
    except Exception as e:
        logger.warning("outfit image failed provider=%s reason=%s", provider.name, e)
        return PLACEHOLDER_IMAGE
    if isinstance(result, ImageReady):
        return result.data_url
    logger.warning("outfit image unavailable provider=%s reason=%s using placeholder", provider.name, result.reason)
    return PLACEHOLDER_IMAGE
