import pytest

DEFAULT_PASSWORD = "secret123"
# matches the throttle configured in conftest
TEST_LOGIN_ATTEMPTS = 3


async def _register(client, email="rider@example.com", username="rider", password=DEFAULT_PASSWORD):
    return await client.post("/auth/register", json={"username": username, "email": email, "password": password})


@pytest.mark.asyncio
async def test_register_returns_created_user(client):
    resp = await _register(client)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["email"] == "rider@example.com"
    assert body["username"] == "rider"
    assert body["role"] == "user"
    assert "password" not in body and "hashed_password" not in body


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    await _register(client)
    resp = await _register(client, email="Rider@Example.com", username="other")
    assert resp.status_code == 400
    assert resp.json()["code"] == "DuplicateEmail"


@pytest.mark.asyncio
async def test_register_rejects_malformed_payload(client):
    resp = await client.post("/auth/register", json={"username": "rider", "email": "not-an-email", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 400
    assert resp.json()["code"] == "ValidationError"


@pytest.mark.asyncio
async def test_login_returns_token_and_user(client):
    await _register(client)
    resp = await client.post("/auth/login", json={"email": "rider@example.com", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["token"]
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "rider@example.com"
    assert body["user"]["role"] == "user"


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    await _register(client)
    wrong = await client.post("/auth/login", json={"email": "rider@example.com", "password": "bad-password"})
    unknown = await client.post("/auth/login", json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials", "code": "InvalidCredentials"}


@pytest.mark.asyncio
async def test_login_is_throttled_after_repeated_failures(client, fake_redis):
    await _register(client)
    for _ in range(TEST_LOGIN_ATTEMPTS):
        resp = await client.post("/auth/login", json={"email": "rider@example.com", "password": "bad-password"})
        assert resp.status_code == 401

    resp = await client.post("/auth/login", json={"email": "rider@example.com", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 429
    assert resp.json()["code"] == "TooManyAttempts"

    fake_redis.store.clear()
    resp = await client.post("/auth/login", json={"email": "rider@example.com", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_successful_login_resets_failure_count(client, fake_redis):
    await _register(client)
    await client.post("/auth/login", json={"email": "rider@example.com", "password": "bad-password"})
    assert fake_redis.store["rl:login:rider@example.com"] == "1"

    resp = await client.post("/auth/login", json={"email": "rider@example.com", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200
    assert "rl:login:rider@example.com" not in fake_redis.store


@pytest.mark.asyncio
async def test_responses_carry_trace_id(client):
    resp = await client.get("/health", headers={"X-Trace-Id": "trace-123"})
    assert resp.status_code == 200
    assert resp.headers["x-trace-id"] == "trace-123"
