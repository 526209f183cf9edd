"""Shared request helpers — templates, visitor sessions, rate limiting."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import HTTPException, Request
from fastapi.templating import Jinja2Templates

from protech_site.config import (
    BUSINESS_PHONE,
    FB_PIXEL_ID,
    GA_MEASUREMENT_ID,
    PUBLIC_URL,
    SESSION_COOKIE,
    SITE_NAME,
    WEB_TEMPLATES_DIR,
)
from protech_site.services.events import InvalidEventError
from protech_site.services.tracking import TrackingSession

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))


class RateLimiter:
    """Per-IP sliding window. Raises 429 when a client exceeds ``limit`` per ``window`` seconds."""

    def __init__(self, limit: int, window: float = 60.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = limit
        self.window = window
        self._clock = clock
        self._buckets: dict[str, list[float]] = {}
        self._last_prune = self._clock()

    def check(self, request: Request) -> None:
        ip = client_ip(request) or "unknown"
        now = self._clock()
        cutoff = now - self.window
        bucket = [t for t in self._buckets.get(ip, ()) if t > cutoff]
        if len(bucket) >= self.limit:
            self._buckets[ip] = bucket
            raise HTTPException(status_code=429, detail="Rate limit exceeded")
        bucket.append(now)
        self._buckets[ip] = bucket
        if now - self._last_prune >= self.window:
            self._prune(cutoff)
            self._last_prune = now

    def _prune(self, cutoff: float) -> None:
        """Forget clients whose whole bucket has aged out. Runs at most once per window."""
        for ip in [ip for ip, times in self._buckets.items() if not times or times[-1] <= cutoff]:
            del self._buckets[ip]

    def __len__(self) -> int:
        return len(self._buckets)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip", "")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else ""


def tracking_session(request: Request) -> TrackingSession:
    """The visitor's tracking session, keyed by the session cookie."""
    session_id = request.cookies.get(SESSION_COOKIE) or getattr(request.state, "session_id", None)
    if not session_id:
        session_id = uuid.uuid4().hex
        request.state.new_session_id = session_id
    request.state.session_id = session_id
    return request.app.state.tracking.session(session_id)


def visitor_user_data(request: Request) -> dict:
    """Browser-side identifiers the ad platforms accept unhashed."""
    data = {
        "client_ip_address": client_ip(request),
        "client_user_agent": request.headers.get("user-agent", ""),
        "fbp": request.cookies.get("_fbp", ""),
        "fbc": request.cookies.get("_fbc", ""),
    }
    return {k: v for k, v in data.items() if v}


def event_payload(request: Request, payload: Optional[dict] = None) -> dict:
    """Fill page/url defaults and merge browser identifiers into ``user_data``."""
    body = dict(payload or {})
    body.setdefault("page_path", request.url.path)
    body.setdefault("event_source_url", str(request.url))
    body["user_data"] = {**visitor_user_data(request), **(body.get("user_data") or {})}
    return body


def track(
    request: Request,
    event_type: str,
    content_name: str = "",
    payload: Optional[dict] = None,
    unique_id: Optional[str] = None,
) -> bool:
    """Dispatch an event for the current visitor from a route handler."""
    session = tracking_session(request)
    try:
        return session.dispatcher.dispatch(event_type, content_name, unique_id, event_payload(request, payload))
    except InvalidEventError as e:
        logger.error("Dropped invalid %s event from %s: %s", event_type, request.url.path, e)
        return False


def set_session_cookie(request: Request, response) -> None:
    new_id = getattr(request.state, "new_session_id", None)
    if new_id:
        response.set_cookie(SESSION_COOKIE, new_id, max_age=60 * 60 * 24 * 30, httponly=True, samesite="lax")


def render(request: Request, template: str, context: dict, status_code: int = 200):
    """Render a page, replaying any queued pixel/gtag calls for this visitor."""
    session = tracking_session(request)
    response = templates.TemplateResponse(request, template, {
        "site_name": SITE_NAME,
        "business_phone": BUSINESS_PHONE,
        "public_url": PUBLIC_URL,
        "fb_pixel_id": FB_PIXEL_ID,
        "ga_measurement_id": GA_MEASUREMENT_ID,
        "tracking_commands": session.commands.drain(),
        **context,
    }, status_code=status_code)
    set_session_cookie(request, response)
    return response
