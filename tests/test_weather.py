import httpx
import pytest

from tripfit.services.weather import WeatherClient, WeatherLookupError, WeatherNotConfigured

BASE_URL = "https://weather.test/data/2.5/weather"


def _client(handler) -> WeatherClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WeatherClient("test-key", BASE_URL, http_client=http)


@pytest.mark.asyncio
async def test_lookup_maps_provider_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "name": "Paris",
                "main": {"temp": 18.4, "feels_like": 17.9, "humidity": 72},
                "weather": [{"description": "broken clouds", "icon": "04d"}],
                "wind": {"speed": 3.6},
                "sys": {"country": "FR"},
                "rain": {"1h": 0.25},
            },
        )

    snap = await _client(handler).lookup("Paris")
    assert seen == {"q": "Paris", "units": "metric", "appid": "test-key"}
    assert snap.temperature == 18.4
    assert snap.feels_like == 17.9
    assert snap.description == "broken clouds"
    assert snap.country == "FR"
    assert snap.precipitation == 0.25
    dumped = snap.model_dump(by_alias=True)
    assert dumped["windSpeed"] == 3.6
    assert "dateTime" in dumped


@pytest.mark.asyncio
async def test_unknown_destination_falls_back_with_city_preserved():
    snap = await _client(lambda r: httpx.Response(404, json={"message": "city not found"})).lookup("Atlantisville")
    assert snap.city == "Atlantisville"
    assert snap.temperature == 25
    assert snap.description == "Sunny"
    assert snap.country == "IN"
    assert snap.humidity == 65
    assert snap.wind_speed == 5


@pytest.mark.asyncio
async def test_other_provider_errors_raise():
    with pytest.raises(WeatherLookupError) as exc:
        await _client(lambda r: httpx.Response(500)).lookup("Paris")
    assert exc.value.reason == "status=500"


@pytest.mark.asyncio
async def test_transport_errors_raise():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    with pytest.raises(WeatherLookupError):
        await _client(handler).lookup("Paris")


@pytest.mark.asyncio
async def test_unconfigured_client_refuses():
    client = WeatherClient(None, BASE_URL)
    assert not client.configured
    with pytest.raises(WeatherNotConfigured):
        await client.lookup("Paris")


@pytest.mark.asyncio
async def test_non_json_reply_is_a_lookup_error():
    with pytest.raises(WeatherLookupError) as exc:
        await _client(lambda r: httpx.Response(200, text="<html>gateway</html>")).lookup("Paris")
    assert exc.value.reason.startswith("bad payload")


@pytest.mark.asyncio
async def test_malformed_payload_is_a_lookup_error():
    payload = {"name": "Paris", "main": {"temp": None}, "weather": [{"description": "clear"}]}
    with pytest.raises(WeatherLookupError):
        await _client(lambda r: httpx.Response(200, json=payload)).lookup("Paris")
    with pytest.raises(WeatherLookupError):
        await _client(lambda r: httpx.Response(200, json=["not", "an", "object"])).lookup("Paris")
