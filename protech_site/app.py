"""FastAPI application factory."""

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from protech_site.config import (
    FB_ACCESS_TOKEN,
    FB_API_VERSION,
    FB_PIXEL_ID,
    GOOGLE_PLACE_ID,
    GOOGLE_PLACES_API_KEY,
    STATIC_DIR,
    TRACKING_CLEANUP_MINUTES,
    TRACKING_ENABLED,
    TRACKING_MAX_EVENTS,
    TRACKING_RETENTION_MINUTES,
    TRACKING_THROTTLE_MS,
)
from protech_site.routers import conversions, leads, pages, reviews, seo, tracking
from protech_site.services.conversions import ConversionsClient
from protech_site.services.reviews import ReviewsClient
from protech_site.services.sinks import AnalyticsSink, ConversionsRelaySink, PixelSink
from protech_site.services.tracking import TrackingRegistry
from protech_site.web import render

logger = logging.getLogger(__name__)


def build_tracking_registry(client: ConversionsClient, executor: Optional[ThreadPoolExecutor]) -> TrackingRegistry:
    """Registry whose sessions fan out to Meta Pixel, gtag and the Conversions API."""

    def sink_factory(commands):
        return [
            PixelSink(commands.fbq),
            AnalyticsSink(commands.gtag),
            ConversionsRelaySink(client, executor),
        ]

    return TrackingRegistry(
        sink_factory,
        enabled=TRACKING_ENABLED,
        throttle_window=TRACKING_THROTTLE_MS / 1000.0,
        retention=TRACKING_RETENTION_MINUTES * 60.0,
        max_entries=TRACKING_MAX_EVENTS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    scheduler = None
    try:
        from protech_site.scheduler import build_scheduler
        scheduler = build_scheduler(app.state.tracking)
        scheduler.start()
        logger.info("Scheduler started — purging tracking state every %d minutes", TRACKING_CLEANUP_MINUTES)
    except Exception as e:
        logger.warning("Scheduler failed to start: %s", e)

    yield

    # Shutdown
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)
    executor = getattr(app.state, "relay_executor", None)
    if executor is not None:
        executor.shutdown(wait=False)


def create_app(
    tracking_registry: Optional[TrackingRegistry] = None,
    conversions_client: Optional[ConversionsClient] = None,
    reviews_client: Optional[ReviewsClient] = None,
) -> FastAPI:
    app = FastAPI(
        title="ProTech HVAC",
        description="Service pages, lead capture and conversion tracking for ProTech HVAC.",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.state.conversions_client = conversions_client or ConversionsClient(
        FB_PIXEL_ID, FB_ACCESS_TOKEN, api_version=FB_API_VERSION,
    )
    app.state.reviews_client = reviews_client or ReviewsClient(GOOGLE_PLACES_API_KEY, GOOGLE_PLACE_ID)
    if tracking_registry is None:
        app.state.relay_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="capi-relay")
        tracking_registry = build_tracking_registry(app.state.conversions_client, app.state.relay_executor)
    app.state.tracking = tracking_registry

    if not TRACKING_ENABLED:
        logger.info("Tracking disabled (APP_ENV != production and ENABLE_DEV_TRACKING not set)")

    # Static files
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok", "tracking_sessions": len(app.state.tracking)}

    @app.exception_handler(StarletteHTTPException)
    async def not_found_page(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and not request.url.path.startswith("/api/"):
            return render(request, "404.html", {"meta": None, "detail": exc.detail}, status_code=404)
        return await http_exception_handler(request, exc)

    for r in [seo, leads, conversions, tracking, reviews]:
        app.include_router(r.router)

    # Pages last so /services/{category_id} never shadows an API route
    app.include_router(pages.router, include_in_schema=False)

    return app
