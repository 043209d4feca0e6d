import pytest

from viah.auth.verify import auth_dependency


@pytest.fixture
def auth_override():
    def _override():
        return {"sub": "user-123"}

    return _override


class FakeRedis:
    def __init__(self):
        self.store: dict[str, str] = {}

    async def set_with_ttl(self, key: str, value: str, ttl_s: int | None = None) -> bool:
        self.store[key] = value
        return True

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def delete(self, key: str) -> bool:
        return self.store.pop(key, None) is not None

    async def ping(self) -> bool:
        return True


@pytest.fixture
def fake_redis(monkeypatch):
    redis = FakeRedis()
    monkeypatch.setattr("viah.services.redis_store.fast_redis", redis)
    return redis


@pytest.fixture
def apply_auth_override(auth_override):
    applied = []

    def _apply(app, claims: dict | None = None):
        app.dependency_overrides[auth_dependency] = (lambda: claims) if claims else auth_override
        applied.append(app)

    yield _apply

    for app in applied:
        app.dependency_overrides.clear()
