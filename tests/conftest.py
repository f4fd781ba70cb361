"""Shared fixtures: an in-memory SQLite ledger behind the real ASGI app."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from busbook.db.base import Base
from busbook.db.session import get_session
from busbook.main import app
from busbook.services import auth as auth_service
from busbook.services import catalog
from busbook.services.login_throttle import LoginThrottle, get_login_throttle

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_LOGIN_ATTEMPTS = 3
DEFAULT_PASSWORD = "secret123"


class FakeRedis:
    """The handful of Redis commands the login throttle uses."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    async def expire(self, key, seconds):
        return key in self.store

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest_asyncio.fixture
async def client(session_factory, fake_redis):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_login_throttle] = lambda: LoginThrottle(
        fake_redis, max_attempts=TEST_LOGIN_ATTEMPTS, window_seconds=60
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_bus(session_factory):
    async def _make(total_seats=3, bus_number="Test Coach - KTT 001A", route_from="Nairobi", route_to="Mombasa", price=1500):
        async with session_factory() as session:
            bus = catalog.bus_from_dict(
                {
                    "bus_number": bus_number,
                    "bus_type": "Standard",
                    "total_seats": total_seats,
                    "route": {
                        "from": route_from,
                        "to": route_to,
                        "departure_time": "08:00 AM",
                        "arrival_time": "04:00 PM",
                        "price": price,
                    },
                }
            )
            session.add(bus)
            await session.commit()
            return bus.id

    return _make


@pytest.fixture
def auth_headers(client):
    async def _login(email="rider@example.com", username="rider", password=DEFAULT_PASSWORD):
        reg = await client.post("/auth/register", json={"username": username, "email": email, "password": password})
        assert reg.status_code == 201, reg.text
        login = await client.post("/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return {"Authorization": f"Bearer {login.json()['token']}"}

    return _login


@pytest.fixture
def admin_headers(session_factory):
    async def _admin(email="admin@example.com"):
        async with session_factory() as session:
            user = await auth_service.register_user(session, "admin", email, DEFAULT_PASSWORD, role="admin")
        return {"Authorization": f"Bearer {auth_service.issue_token(user)}"}

    return _admin
