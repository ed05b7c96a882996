"""Shared fixtures: in-memory SQLite store, in-memory cache and recording fakes."""

from collections import Counter
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from subscription_catalog.api.app import create_app
from subscription_catalog.api.security import create_access_token
from subscription_catalog.config import Settings
from subscription_catalog.database import build_engine
from subscription_catalog.entities import SubscriptionDraft
from subscription_catalog.handlers import SubscriptionHandler
from subscription_catalog.repositories import InMemoryCacheRepository, SqlAlchemySubscriptionRepository
from subscription_catalog.services import CatalogService, NotificationService

JWT_SECRET = "test-secret"
ADMIN_EMAIL = "admin@example.com"


class RecordingNotifier:
    """Notifier that keeps every message it is asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, body: str) -> None:
        self.sent.append((to, subject, body))

    @property
    def subjects(self) -> list[str]:
        return [subject for _, subject, _ in self.sent]


class FailingNotifier:
    def send(self, to: str, subject: str, body: str) -> None:
        raise ConnectionError("mail server unreachable")


class FailingCache:
    """Cache whose every call raises."""

    def get(self, key):
        raise ConnectionError("cache down")

    def set(self, key, value, ttl):
        raise ConnectionError("cache down")

    def delete(self, *keys):
        raise ConnectionError("cache down")

    def health_check(self):
        raise ConnectionError("cache down")


class CountingStore:
    """Wraps a store and counts calls per method name."""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.calls: Counter[str] = Counter()

    def __getattr__(self, name):
        attr = getattr(self._inner, name)
        if not callable(attr):
            return attr

        def wrapper(*args, **kwargs):
            self.calls[name] += 1
            return attr(*args, **kwargs)

        return wrapper


class StepClock:
    """Timezone-aware clock that advances by ``step`` on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = build_engine("sqlite://", echo=False)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return SqlAlchemySubscriptionRepository.create(engine=engine)


@pytest.fixture
def cache():
    return InMemoryCacheRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def notifications(notifier):
    return NotificationService(notifier=notifier, admin_email=ADMIN_EMAIL)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def catalog(store, cache, notifications, clock):
    return CatalogService(store=store, cache=cache, notifications=notifications, ttl=3600, clock=clock)


@pytest.fixture
def counting_store(store):
    return CountingStore(store)


@pytest.fixture
def counted_catalog(counting_store, cache):
    """Catalog over a call-counting store, for observing cache hits."""
    return CatalogService(store=counting_store, cache=cache, ttl=3600)


@pytest.fixture
def failing_cache():
    return FailingCache()


@pytest.fixture
def failing_notifier():
    return FailingNotifier()


@pytest.fixture
def make_draft():
    """Factory for drafts with sensible defaults."""

    def _make(name: str = "Netflix", **overrides) -> SubscriptionDraft:
        fields = {
            "price": Decimal("9.99"),
            "category": "Streaming",
            "description": f"{name} plan",
            "currency": "AZN",
            "billing_period": "MONTHLY",
            "website_url": "https://example.com",
            "logo_url": "https://example.com/logo.png",
        }
        fields.update(overrides)
        return SubscriptionDraft(name=name, **fields)

    return _make


@pytest.fixture
def test_settings():
    return Settings(
        jwt_secret=JWT_SECRET,
        cache_backend="memory",
        seed_on_startup=False,
        admin_email=None,
        allow_public_writes=False,
    )


@pytest.fixture
def client(test_settings, catalog):
    """Test client bound to the in-memory catalog."""
    app = create_app(config=test_settings, handler=SubscriptionHandler(catalog_service=catalog))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    token = create_access_token("admin@example.com", ["ADMIN"], secret=JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token("user@example.com", ["USER"], secret=JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}
