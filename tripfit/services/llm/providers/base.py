from __future__ import annotations

from typing import Protocol

from tripfit.services.llm.types import ImageResult, ImageUnavailable, ProviderUnavailable


class TextProvider(Protocol):
    name: str

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        ...


class ImageProvider(Protocol):
    name: str

    async def render(self, prompt: str) -> ImageResult:
        ...


class NullTextProvider:
    """Stands in for the text model when no API key is configured."""

    name = "unconfigured"

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        raise ProviderUnavailable("text provider is not configured (set OPENAI_API_KEY)")


class NullImageProvider:
    name = "unconfigured"

    async def render(self, prompt: str) -> ImageResult:
        return ImageUnavailable(reason="image_provider_unconfigured")
