from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from tripfit.core.config import Settings
from tripfit.notifications.providers import EmailProvider
from tripfit.services.llm import AIClients, build_ai_clients
from tripfit.services.llm.retry import RetryPolicy
from tripfit.services.notifications.service import build_email_provider
from tripfit.services.weather import WeatherClient


@dataclass
class ServiceClients:
    """Outbound clients for one application instance, built at startup."""

    weather: WeatherClient
    ai: AIClients
    email: EmailProvider
    retry_policy: RetryPolicy


def build_clients(cfg: Settings) -> ServiceClients:
    return ServiceClients(
        weather=WeatherClient(cfg.OPENWEATHER_API_KEY, cfg.OPENWEATHER_BASE_URL),
        ai=build_ai_clients(cfg),
        email=build_email_provider(cfg),
        retry_policy=RetryPolicy(
            max_attempts=cfg.LLM_RETRY_MAX_ATTEMPTS,
            base_delay=cfg.LLM_RETRY_BASE_DELAY_S,
            jitter=cfg.LLM_RETRY_JITTER_S,
        ),
    )


def get_clients(request: Request) -> ServiceClients:
    return request.app.state.clients
