from __future__ import annotations

import logging
import time
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from tripfit.services.llm.types import ImageReady, ImageResult, ImageUnavailable

logger = logging.getLogger("uvicorn.error")


class OpenAITextProvider:
    name = "openai"

    def __init__(self, model: str, *, temperature: float = 0.7, client: Optional[Any] = None, api_key: Optional[str] = None):
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        start = time.perf_counter()
        logger.info("llm:openai request model=%s", self.model)
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
        )
        latency_ms = int((time.perf_counter() - start) * 1000)
        usage = resp.usage
        logger.info(
            "llm:openai response model=%s latency_ms=%s tokens_in=%s tokens_out=%s",
            self.model,
            latency_ms,
            getattr(usage, "prompt_tokens", 0) if usage else 0,
            getattr(usage, "completion_tokens", 0) if usage else 0,
        )
        return (resp.choices[0].message.content or "") if resp.choices else ""


class OpenAIImageProvider:
    name = "openai"

    def __init__(self, model: str, *, size: str = "1024x1024", client: Optional[Any] = None, api_key: Optional[str] = None):
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model = model
        self.size = size

    async def render(self, prompt: str) -> ImageResult:
        start = time.perf_counter()
        try:
            resp = await self.client.images.generate(model=self.model, prompt=prompt, size=self.size, n=1)
        except OpenAIError as e:
            return ImageUnavailable(reason=f"provider_error:{type(e).__name__}:{e}")
        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.info("llm:openai image model=%s latency_ms=%s", self.model, latency_ms)

        data = getattr(resp, "data", None) or []
        b64 = getattr(data[0], "b64_json", None) if data else None
        if not b64:
            return ImageUnavailable(reason="missing_image_data")
        return ImageReady(data_url=f"data:image/png;base64,{b64}")
