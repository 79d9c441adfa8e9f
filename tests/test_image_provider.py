from types import SimpleNamespace

import httpx
import openai
import pytest

from tripfit.services.llm import PLACEHOLDER_IMAGE, render_outfit_image
from tripfit.services.llm.providers.base import NullImageProvider
from tripfit.services.llm.providers.openai import OpenAIImageProvider
from tripfit.services.llm.types import ImageReady, ImageUnavailable, OutfitRecommendation
from tripfit.services.weather import fallback_snapshot

OUTFIT = OutfitRecommendation(top="Linen shirt", bottom="Cotton trousers", shoes="Leather sandals")


class FakeImages:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.kwargs = None

    async def generate(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(data=self.data)


def _provider(images: FakeImages) -> OpenAIImageProvider:
    return OpenAIImageProvider("gpt-image-1", size="1024x1024", client=SimpleNamespace(images=images))


@pytest.mark.asyncio
async def test_openai_image_returns_data_url():
    images = FakeImages(data=[SimpleNamespace(b64_json="aGVsbG8=")])
    result = await _provider(images).render("a prompt")
    assert result == ImageReady(data_url="data:image/png;base64,aGVsbG8=")
    assert images.kwargs["model"] == "gpt-image-1"


@pytest.mark.asyncio
async def test_openai_image_without_payload_is_unavailable():
    result = await _provider(FakeImages(data=[])).render("a prompt")
    assert result == ImageUnavailable(reason="missing_image_data")


@pytest.mark.asyncio
async def test_openai_image_provider_error_is_unavailable():
    request = httpx.Request("POST", "https://api.openai.com/v1/images/generations")
    err = openai.APIConnectionError(request=request)
    result = await _provider(FakeImages(error=err)).render("a prompt")
    assert isinstance(result, ImageUnavailable)
    assert result.reason.startswith("provider_error:APIConnectionError")


@pytest.mark.asyncio
async def test_render_folds_unavailable_into_placeholder():
    url = await render_outfit_image(NullImageProvider(), OUTFIT, "dinner", "smart", fallback_snapshot("Rome"))
    assert url == PLACEHOLDER_IMAGE == "/placeholder.svg?height=400&width=300"


@pytest.mark.asyncio
async def test_render_swallows_unexpected_errors():
    class Broken:
        name = "broken"

        async def render(self, prompt):
            raise RuntimeError("socket closed")

    url = await render_outfit_image(Broken(), OUTFIT, "dinner", "smart", fallback_snapshot("Rome"))
    assert url == PLACEHOLDER_IMAGE
