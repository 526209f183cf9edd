"""Analytics sinks — one adapter per external platform.

Every sink exposes ``send(dispatched) -> SinkResult``. The dispatcher calls
each one in turn and records its result; a sink that raises never stops
the others.

Client-side platforms (Meta Pixel, gtag) cannot be called from the server,
so their sinks append ``fbq(...)`` / ``gtag(...)`` calls to the session's
BrowserCommandQueue, which the next rendered page replays.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Callable, Optional

from protech_site.services.conversions import ConversionsClient, build_conversion_event

logger = logging.getLogger(__name__)

META_EVENT_NAMES = {
    "page_view": "PageView",
    "session_start": "SessionStart",
    "session_end": "SessionEnd",
    "form_started": "FormStarted",
    "form_completed": "FormCompleted",
    "lead": "Lead",
    "schedule": "Schedule",
    "contact_page_viewed": "ContactPageViewed",
    "phone_click": "Contact",
    "email_click": "Contact",
    "emergency_click": "EmergencyClicked",
    "service_viewed": "ViewContent",
    "location_search": "FindLocation",
    "location_viewed": "LocationViewed",
    "scroll_depth": "ScrollDepth",
    "time_on_page": "TimeOnPage",
}

# Meta standard events go through fbq('track'); everything else is trackCustom
META_STANDARD_EVENTS = {"Lead", "Schedule", "ViewContent", "Contact", "PageView", "FindLocation"}

GA_EVENT_NAMES = {
    "page_view": "page_view",
    "session_start": "session_start",
    "session_end": "session_end",
    "form_started": "form_start",
    "form_completed": "form_submit",
    "lead": "generate_lead",
    "schedule": "schedule_appointment",
    "contact_page_viewed": "view_contact_page",
    "phone_click": "phone_click",
    "email_click": "email_click",
    "emergency_click": "emergency_click",
    "service_viewed": "view_item",
    "location_search": "search",
    "location_viewed": "view_location",
    "scroll_depth": "scroll",
    "time_on_page": "engagement_time",
}


def ga_event_category(event_type: str) -> str:
    if event_type in ("lead", "schedule"):
        return "conversion"
    if event_type in ("form_started", "form_completed"):
        return "engagement"
    if event_type in ("phone_click", "email_click", "emergency_click"):
        return "contact"
    return "interaction"


@dataclass(frozen=True)
class DispatchedEvent:
    """An accepted event plus the ids shared by every sink."""
    event: object
    event_id: str
    event_key: str
    event_time: int

    @property
    def event_type(self) -> str:
        return self.event.event_type


@dataclass(frozen=True)
class SinkResult:
    sink: str
    ok: bool
    error: Optional[str] = None


class BrowserCommandQueue:
    """Pending SDK calls for one visitor session, drained into the next page."""

    def __init__(self) -> None:
        self._commands: list[dict] = []
        self._lock = threading.Lock()

    def _push(self, fn: str, args: tuple) -> None:
        with self._lock:
            self._commands.append({"fn": fn, "args": list(args)})

    def fbq(self, *args) -> None:
        self._push("fbq", args)

    def gtag(self, *args) -> None:
        self._push("gtag", args)

    def drain(self) -> list[dict]:
        with self._lock:
            commands, self._commands = self._commands, []
        return commands

    def __len__(self) -> int:
        with self._lock:
            return len(self._commands)


class Sink:
    name = "sink"

    def send(self, dispatched: DispatchedEvent) -> SinkResult:
        raise NotImplementedError


class PixelSink(Sink):
    """Meta Pixel — ``fbq('track', 'Lead', {...}, {eventID})``."""

    name = "meta_pixel"

    def __init__(self, call: Callable[..., None]) -> None:
        self._call = call

    def send(self, dispatched: DispatchedEvent) -> SinkResult:
        meta_name = META_EVENT_NAMES[dispatched.event_type]
        method = "track" if meta_name in META_STANDARD_EVENTS else "trackCustom"
        self._call(method, meta_name, dispatched.event.properties(), {"eventID": dispatched.event_id})
        return SinkResult(self.name, True)


class AnalyticsSink(Sink):
    """Google Analytics 4 — ``gtag('event', 'generate_lead', {...})``."""

    name = "google_analytics"

    def __init__(self, call: Callable[..., None]) -> None:
        self._call = call

    def send(self, dispatched: DispatchedEvent) -> SinkResult:
        params = dispatched.event.properties()
        params.setdefault("event_category", ga_event_category(dispatched.event_type))
        self._call("event", GA_EVENT_NAMES[dispatched.event_type], params)
        return SinkResult(self.name, True)


class ConversionsRelaySink(Sink):
    """Meta Conversions API — server-side copy of the pixel event.

    User data is hashed while the body is built, before submission. With an
    executor the POST runs in the background and failures are only logged;
    without one it runs inline.
    """

    name = "conversions_api"

    def __init__(self, client: ConversionsClient, executor: Optional[Executor] = None) -> None:
        self._client = client
        self._executor = executor

    def build_payload(self, dispatched: DispatchedEvent) -> dict:
        event = dispatched.event
        return build_conversion_event(
            event_name=META_EVENT_NAMES[dispatched.event_type],
            event_id=dispatched.event_id,
            user_data=event.user_data.to_conversions(),
            custom_data=event.properties(),
            event_source_url=event.event_source_url,
            event_time=dispatched.event_time,
        )

    def send(self, dispatched: DispatchedEvent) -> SinkResult:
        if not self._client.configured:
            return SinkResult(self.name, False, "not configured")

        payload = self.build_payload(dispatched)
        if self._executor is None:
            self._client.send(payload)
            return SinkResult(self.name, True)

        future = self._executor.submit(self._client.send, payload)
        future.add_done_callback(_log_relay_failure)
        return SinkResult(self.name, True)


def _log_relay_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Conversions API relay failed: %s", exc)
