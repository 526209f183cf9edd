"""Shared fixtures for ProTech site tests.

Provides:
- fake_clock: manually advanced monotonic clock for throttle/retention tests
- recorder: a sink that records every dispatched event
- registry: TrackingRegistry wired to pixel, gtag and the recorder, on fake_clock
- relay_calls / conversions_client: Conversions API client on an httpx MockTransport
- places_response / reviews_client: Google Places client on an httpx MockTransport
- client: sync TestClient for the FastAPI app with a no-op lifespan
"""

import json
import os
from contextlib import asynccontextmanager

import httpx
import pytest

# Set env vars before any protech_site imports
os.environ.setdefault("PUBLIC_URL", "https://protech-ohio.com")
os.environ.setdefault("TARGET_STATE_CODE", "OH")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("TWILIO_ACCOUNT_SID", "")
os.environ.setdefault("FB_PIXEL_ID", "")
os.environ.setdefault("FB_ACCESS_TOKEN", "")

from protech_site.services.conversions import ConversionsClient  # noqa: E402
from protech_site.services.reviews import ReviewsClient  # noqa: E402
from protech_site.services.sinks import AnalyticsSink, PixelSink, Sink, SinkResult  # noqa: E402
from protech_site.services.tracking import TrackingRegistry  # noqa: E402

BASE_URL = "https://protech-ohio.com"


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingSink(Sink):
    """Records dispatched events; raises instead when ``fail`` is set."""

    def __init__(self, name="recorder", fail=False):
        self.name = name
        self.fail = fail
        self.events = []

    def send(self, dispatched):
        if self.fail:
            raise RuntimeError(f"{self.name} unavailable")
        self.events.append(dispatched)
        return SinkResult(self.name, True)

    @property
    def event_types(self):
        return [d.event_type for d in self.events]


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recorder():
    return RecordingSink()


@pytest.fixture
def registry(fake_clock, recorder):
    def sink_factory(commands):
        return [PixelSink(commands.fbq), AnalyticsSink(commands.gtag), recorder]

    return TrackingRegistry(sink_factory, enabled=True, clock=fake_clock)


@pytest.fixture
def relay_calls():
    """Requests captured by the mocked Graph API."""
    return []


@pytest.fixture
def conversions_client(relay_calls):
    def handler(request):
        relay_calls.append({"url": str(request.url), "body": json.loads(request.content)})
        return httpx.Response(200, json={"events_received": 1, "fbtrace_id": "trace-1"})

    transport = httpx.MockTransport(handler)
    return ConversionsClient("1234567890", "test-token", transport=transport, async_transport=transport)


PLACE_RESULT = {
    "name": "ProTech HVAC",
    "rating": 4.9,
    "formatted_address": "Orrville, OH",
    "reviews": [{"author_name": "Jane D.", "rating": 5, "text": "Fixed our furnace same day."}],
}


@pytest.fixture
def places_response():
    """Mutable (status_code, body) the mocked Places API answers with."""
    return {"status_code": 200, "body": {"status": "OK", "result": PLACE_RESULT}}


@pytest.fixture
def reviews_client(places_response):
    def handler(request):
        return httpx.Response(places_response["status_code"], json=places_response["body"])

    return ReviewsClient("places-key", "place-123", transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from protech_site.routers import conversions, leads, tracking

    for limiter in (leads._contact_limiter, conversions._relay_limiter, tracking._track_limiter):
        limiter._buckets.clear()
    yield


@pytest.fixture
def client(registry, conversions_client, reviews_client):
    """Sync test client for the FastAPI app with an injected tracking registry."""
    from fastapi.testclient import TestClient

    from protech_site.app import create_app

    @asynccontextmanager
    async def noop_lifespan(app):
        yield

    app = create_app(
        tracking_registry=registry,
        conversions_client=conversions_client,
        reviews_client=reviews_client,
    )
    # Override lifespan so no scheduler starts
    app.router.lifespan_context = noop_lifespan

    with TestClient(app) as c:
        yield c
