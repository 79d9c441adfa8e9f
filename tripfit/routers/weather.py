from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from tripfit.core.clients import ServiceClients, get_clients
from tripfit.services.weather import WeatherLookupError, WeatherNotConfigured, WeatherSnapshot

router = APIRouter(prefix="/weather", tags=["weather"])


@router.get("", response_model=WeatherSnapshot)
async def get_weather(destination: Optional[str] = None, clients: ServiceClients = Depends(get_clients)):
    if not destination or not destination.strip():
        raise HTTPException(status_code=400, detail="destination_required")
    try:
        return await clients.weather.lookup(destination.strip())
    except WeatherNotConfigured:
        raise HTTPException(status_code=503, detail="weather_not_configured")
    except WeatherLookupError as e:
        raise HTTPException(status_code=502, detail=f"weather_lookup_failed: {e.reason}")
