"""
Current-weather lookup against OpenWeatherMap.

A destination the provider cannot resolve is answered with a fixed fallback
snapshot instead of an error, so a typo in the destination never blocks a
recommendation. Every other provider failure propagates.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tripfit.core.config import settings

logger = logging.getLogger("uvicorn.error")

DEFAULT_UNITS = "metric"  # Celsius


class WeatherNotConfigured(RuntimeError):
    pass


class WeatherLookupError(RuntimeError):
    def __init__(self, destination: str, reason: str):
        super().__init__(f"weather lookup failed for {destination!r}: {reason}")
        self.destination = destination
        self.reason = reason


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    temperature: float
    feels_like: float
    description: str
    icon: str = "01d"
    humidity: float
    wind_speed: float
    city: str
    country: str = ""
    date_time: str = Field(default_factory=_now_iso)
    precipitation: float = 0.0

    def to_prompt_line(self) -> str:
        place = f"{self.city}, {self.country}" if self.country else self.city
        return (
            f"{self.description} in {place}, temperature {self.temperature:g}°C "
            f"(feels like {self.feels_like:g}°C), humidity {self.humidity:g}%, "
            f"wind {self.wind_speed:g} m/s, precipitation {self.precipitation:g} mm"
        )


def fallback_snapshot(destination: str) -> WeatherSnapshot:
    return WeatherSnapshot(
        temperature=25,
        feels_like=25,
        description="Sunny",
        icon="01d",
        humidity=65,
        wind_speed=5,
        city=destination,
        country="IN",
        precipitation=0,
    )


def _snapshot_from_payload(data: dict, destination: str) -> WeatherSnapshot:
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    main = data.get("main") or {}
    weather = (data.get("weather") or [{}])[0]
    wind = data.get("wind") or {}
    sys = data.get("sys") or {}
    rain = data.get("rain") or {}
    temp = main.get("temp", 0)
    return WeatherSnapshot(
        temperature=temp,
        feels_like=main.get("feels_like", temp),
        description=weather.get("description", ""),
        icon=weather.get("icon", "01d"),
        humidity=main.get("humidity", 0),
        wind_speed=wind.get("speed", 0),
        city=data.get("name") or destination,
        country=sys.get("country", ""),
        precipitation=rain.get("1h", 0) or 0,
    )


class WeatherClient:
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = settings.OPENWEATHER_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _get(self, destination: str) -> httpx.Response:
        params = {"q": destination, "units": DEFAULT_UNITS, "appid": self.api_key}
        if self.http_client is not None:
            return await self.http_client.get(self.base_url, params=params)
        async with httpx.AsyncClient() as client:
            return await client.get(self.base_url, params=params)

    async def lookup(self, destination: str) -> WeatherSnapshot:
        if not self.configured:
            raise WeatherNotConfigured("OPENWEATHER_API_KEY is not set")
        try:
            resp = await self._get(destination)
        except httpx.HTTPError as e:
            raise WeatherLookupError(destination, str(e)) from e

        if resp.status_code == 404:
            logger.info("weather location not found destination=%s using fallback snapshot", destination)
            return fallback_snapshot(destination)
        if resp.status_code >= 400:
            raise WeatherLookupError(destination, f"status={resp.status_code}")

        try:
            snapshot = _snapshot_from_payload(resp.json(), destination)
        except ValueError as e:
            raise WeatherLookupError(destination, f"bad payload: {e}") from e
        logger.info("weather destination=%s temp=%s desc=%s", destination, snapshot.temperature, snapshot.description)
        return snapshot
