import uuid
from typing import Optional

import httpx
import pytest
from asgi_lifespan import LifespanManager
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tripfit.auth import deps as auth_deps
from tripfit.core.clients import ServiceClients, get_clients
from tripfit.core.db import Base, get_session
from tripfit.main import app
from tripfit.models.models import Profile, User
from tripfit.services.llm import AIClients
from tripfit.services.llm.retry import RetryPolicy
from tripfit.services.llm.types import ImageReady, ImageResult
from tripfit.services.weather import WeatherSnapshot

TEST_USER_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")

PARIS_JSON = """```json
{
  "top": "Striped Breton cotton shirt",
  "bottom": "High-waisted tailored trousers",
  "shoes": "Leather ankle boots",
  "accessories": ["Silk neck scarf", "Structured leather tote"],
  "outerwear": "Beige trench coat",
  "topColor": "navy and white",
  "bottomColor": "charcoal",
  "shoesColor": "black",
  "accessoriesColor": "red",
  "outerwearColor": "beige",
  "culturalNotes": "Parisians favour understated, well-fitted neutrals."
}
```"""


class FakeWeather:
    configured = True

    def __init__(self, snapshot: Optional[WeatherSnapshot] = None, error: Optional[Exception] = None):
        self.snapshot = snapshot
        self.error = error
        self.calls: list[str] = []

    async def lookup(self, destination: str) -> WeatherSnapshot:
        self.calls.append(destination)
        if self.error:
            raise self.error
        if self.snapshot:
            return self.snapshot
        return WeatherSnapshot(
            temperature=14,
            feels_like=12,
            description="light rain",
            icon="10d",
            humidity=80,
            wind_speed=4.1,
            city=destination,
            country="FR",
            precipitation=0.4,
        )


class FakeTextProvider:
    name = "fake"

    def __init__(self, *replies):
        # each reply is returned in turn; exceptions are raised
        self.replies = list(replies)
        self.prompts: list[str] = []

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeImageProvider:
    name = "fake"

    def __init__(self, result: ImageResult = ImageReady(data_url="data:image/png;base64,aGVsbG8=")):
        self.result = result
        self.prompts: list[str] = []

    async def render(self, prompt: str) -> ImageResult:
        self.prompts.append(prompt)
        return self.result


class RecordingEmailProvider:
    def __init__(self):
        self.sent = []

    async def send(self, email) -> None:
        self.sent.append(email)


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class RateLimitedError(Exception):
    status_code = 429


@pytest.fixture(autouse=True)
def override_auth():
    app.dependency_overrides[auth_deps.get_current_user_id] = lambda: TEST_USER_ID
    yield
    app.dependency_overrides.pop(auth_deps.get_current_user_id, None)


@pytest.fixture
async def db_sessions():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def services() -> ServiceClients:
    return ServiceClients(
        weather=FakeWeather(),
        ai=AIClients(text=FakeTextProvider(PARIS_JSON), image=FakeImageProvider()),
        email=RecordingEmailProvider(),
        retry_policy=RetryPolicy(max_attempts=2, base_delay=0.5, sleep=RecordingSleep()),
    )


@pytest.fixture
async def client(db_sessions, services):
    async def _session():
        async with db_sessions() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_clients] = lambda: services
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.pop(get_session, None)
    app.dependency_overrides.pop(get_clients, None)


@pytest.fixture
async def test_user(db_sessions):
    async with db_sessions() as session:
        user = User(id=TEST_USER_ID, email="traveler@example.com", name="Traveler")
        session.add(user)
        session.add(Profile(user_id=TEST_USER_ID, gender="female", body_type="petite", preferences={}))
        await session.commit()
    return user
