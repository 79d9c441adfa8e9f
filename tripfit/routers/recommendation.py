import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripfit.auth.deps import get_current_user_id
from tripfit.core.clients import ServiceClients, get_clients
from tripfit.core.db import get_session
from tripfit.models.models import Profile
from tripfit.schemas.recommendation import RecommendationIn, RecommendationOut, ReimageIn, ReimageOut
from tripfit.services.llm import render_outfit_image
from tripfit.services.llm.retry import is_rate_limit_error
from tripfit.services.llm.types import ProviderUnavailable, RecommendationParseError
from tripfit.services.recommendation import (
    ProfileTraits,
    RecommendationPipeline,
    RecommendationRequest,
)
from tripfit.services.weather import WeatherLookupError, WeatherNotConfigured, WeatherSnapshot, fallback_snapshot

router = APIRouter(prefix="/recommendation", tags=["recommendation"])
logger = logging.getLogger("uvicorn.error")


@router.post("", response_model=RecommendationOut)
async def recommend(
    body: RecommendationIn,
    session: AsyncSession = Depends(get_session),
    clients: ServiceClients = Depends(get_clients),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    res = await session.execute(select(Profile).where(Profile.user_id == user_id))
    profile = res.scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=404, detail="profile_not_found")

    destination = body.destination.strip()
    if not destination:
        raise HTTPException(status_code=400, detail="destination_required")

    req = RecommendationRequest(
        destination=destination,
        date=body.date,
        occasion=body.occasion,
        vibe=body.vibe,
    )
    pipeline = RecommendationPipeline(clients.weather, clients.ai, clients.retry_policy)
    try:
        result = await pipeline.run(req, ProfileTraits.from_profile(profile))
    except WeatherNotConfigured:
        raise HTTPException(status_code=503, detail="weather_not_configured")
    except WeatherLookupError as e:
        raise HTTPException(status_code=502, detail=f"weather_lookup_failed: {e.reason}")
    except ProviderUnavailable:
        raise HTTPException(status_code=503, detail="ai_provider_unconfigured")
    except RecommendationParseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        if is_rate_limit_error(e):
            logger.warning("recommendation rate limited user_id=%s destination=%s", user_id, req.destination)
            raise HTTPException(status_code=429, detail="rate_limited")
        raise

    return RecommendationOut(
        outfits=[result.outfit],
        weather=result.weather,
        cultural_notes=result.cultural_notes,
        image_url=result.image_url,
        destination=req.destination,
        date=req.date,
        occasion=req.occasion,
        vibe=req.vibe,
    )


@router.post("/image", response_model=ReimageOut)
async def regenerate_image(
    body: ReimageIn,
    clients: ServiceClients = Depends(get_clients),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    if body.outfit is None:
        raise HTTPException(status_code=400, detail="outfit_required")
    weather = fallback_snapshot("")
    if body.weather:
        try:
            # partial client-side snapshots fill in from the fallback
            weather = WeatherSnapshot.model_validate({**weather.model_dump(by_alias=True), **body.weather})
        except ValueError:
            logger.info("reimage weather payload unusable user_id=%s", user_id)
    url = await render_outfit_image(clients.ai.image, body.outfit, body.occasion, body.vibe, weather)
    return ReimageOut(image_url=url)
