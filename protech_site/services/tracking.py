"""Event tracking — throttled, de-duplicated fan-out to analytics sinks.

Several page components can report the same action within a few hundred
milliseconds (re-renders, navigations, repeated effects). The throttle
table keeps the last fire time per event key and suppresses repeats inside
the throttle window, so conversions are not counted twice.

Per event key:
    unseen  -> fired(t0)   first dispatch
    fired(t0) -> fired(t0) repeat inside the window (suppressed)
    fired(t0) -> fired(t1) repeat after the window (re-fired)
    fired(t) -> purged      no activity for the retention window

One TrackingContext belongs to one visitor session; TrackingRegistry keeps
them apart so sessions never share throttle state.
"""

from __future__ import annotations

import logging
import re
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Optional

from protech_site.services.events import build_event
from protech_site.services.sinks import (
    BrowserCommandQueue,
    DispatchedEvent,
    Sink,
    SinkResult,
)

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE_WINDOW = 2.0       # seconds
DEFAULT_RETENTION = 30 * 60.0       # seconds
DEFAULT_MAX_ENTRIES = 500

Clock = Callable[[], float]


@dataclass
class TrackedEvent:
    key: str
    timestamp: float
    event_type: str
    content_name: str


def event_key(event_type: str, content_name: str, unique_id: Optional[str] = None) -> str:
    """Caller-supplied ``unique_id`` wins; otherwise ``type:content`` lowercased, spaces hyphenated."""
    if unique_id:
        return unique_id
    return re.sub(r"\s+", "-", f"{event_type}:{content_name}".lower())


def is_bare_page_view(event_type: str, content_name: str) -> bool:
    return event_type == "page_view" and content_name in ("", "PageView")


class TrackingContext:
    """Throttle table and enable flag for one session."""

    def __init__(
        self,
        throttle_window: float = DEFAULT_THROTTLE_WINDOW,
        retention: float = DEFAULT_RETENTION,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        enabled: bool = True,
        clock: Clock = time.monotonic,
    ) -> None:
        self.throttle_window = throttle_window
        self.retention = retention
        self.max_entries = max_entries
        self._enabled = enabled
        self._clock = clock
        self._events: OrderedDict[str, TrackedEvent] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def try_fire(self, event_type: str, content_name: str = "", unique_id: Optional[str] = None) -> bool:
        """Record a fire and return True, or return False if disabled or throttled.

        Bare page views are never throttled and never recorded.
        """
        if not self._enabled:
            return False
        if is_bare_page_view(event_type, content_name):
            return True

        key = event_key(event_type, content_name, unique_id)
        with self._lock:
            now = self._clock()
            existing = self._events.get(key)
            if existing and now - existing.timestamp < self.throttle_window:
                logger.debug(
                    "Event throttled: %s - %s (duplicate within %.0fms)",
                    event_type, content_name, self.throttle_window * 1000,
                )
                return False

            self._events[key] = TrackedEvent(key, now, event_type, content_name)
            self._events.move_to_end(key)
            while len(self._events) > self.max_entries:
                self._events.popitem(last=False)
        return True

    def is_recent(self, event_type: str, content_name: str, unique_id: Optional[str] = None) -> bool:
        """True if the key fired within the throttle window."""
        key = event_key(event_type, content_name, unique_id)
        with self._lock:
            existing = self._events.get(key)
            return bool(existing and self._clock() - existing.timestamp < self.throttle_window)

    def purge_expired(self) -> int:
        """Drop entries older than the retention window. Returns how many were removed."""
        with self._lock:
            cutoff = self._clock() - self.retention
            stale = [k for k, e in self._events.items() if e.timestamp <= cutoff]
            for k in stale:
                del self._events[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._events


@dataclass
class DispatchOutcome:
    accepted: bool
    reason: str = ""
    event_id: Optional[str] = None
    results: list[SinkResult] = field(default_factory=list)


class Dispatcher:
    """Validates an event, applies the throttle, and fans out to every sink."""

    def __init__(
        self,
        context: TrackingContext,
        sinks: list[Sink],
        wall_clock: Clock = time.time,
    ) -> None:
        self.context = context
        self.sinks = list(sinks)
        self._wall_clock = wall_clock

    def dispatch(
        self,
        event_type: str,
        content_name: str = "",
        unique_id: Optional[str] = None,
        payload: Optional[dict] = None,
    ) -> bool:
        """Return True if the event was accepted for dispatch.

        False means tracking is disabled or the event was throttled. Raises
        InvalidEventError for malformed payloads.
        """
        return self.dispatch_detailed(event_type, content_name, unique_id, payload).accepted

    def dispatch_detailed(
        self,
        event_type: str,
        content_name: str = "",
        unique_id: Optional[str] = None,
        payload: Optional[dict] = None,
    ) -> DispatchOutcome:
        if not self.context.enabled:
            return DispatchOutcome(False, "disabled")

        event = build_event(event_type, content_name, payload)

        if not self.context.try_fire(event_type, content_name, unique_id):
            return DispatchOutcome(False, "throttled")

        dispatched = DispatchedEvent(
            event=event,
            event_id=str(uuid.uuid4()),
            event_key=event_key(event_type, content_name, unique_id),
            event_time=int(self._wall_clock()),
        )
        results = [self._send(sink, dispatched) for sink in self.sinks]
        return DispatchOutcome(True, "sent", dispatched.event_id, results)

    @staticmethod
    def _send(sink: Sink, dispatched: DispatchedEvent) -> SinkResult:
        try:
            return sink.send(dispatched)
        except Exception as e:
            logger.error("Sink %s failed for %s: %s", sink.name, dispatched.event_type, e)
            return SinkResult(sink.name, False, str(e))


@dataclass
class TrackingSession:
    session_id: str
    context: TrackingContext
    dispatcher: Dispatcher
    commands: BrowserCommandQueue
    last_seen: float


SinkFactory = Callable[[BrowserCommandQueue], list[Sink]]


class TrackingRegistry:
    """One isolated tracking session per visitor, created on first use."""

    def __init__(
        self,
        sink_factory: SinkFactory,
        enabled: bool = True,
        throttle_window: float = DEFAULT_THROTTLE_WINDOW,
        retention: float = DEFAULT_RETENTION,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock = time.monotonic,
    ) -> None:
        self._sink_factory = sink_factory
        self.enabled = enabled
        self.throttle_window = throttle_window
        self.retention = retention
        self.max_entries = max_entries
        self._clock = clock
        self._sessions: dict[str, TrackingSession] = {}
        self._lock = threading.Lock()

    def session(self, session_id: str) -> TrackingSession:
        with self._lock:
            existing = self._sessions.get(session_id)
            if existing:
                existing.last_seen = self._clock()
                return existing

            context = TrackingContext(
                throttle_window=self.throttle_window,
                retention=self.retention,
                max_entries=self.max_entries,
                enabled=self.enabled,
                clock=self._clock,
            )
            commands = BrowserCommandQueue()
            session = TrackingSession(
                session_id=session_id,
                context=context,
                dispatcher=Dispatcher(context, self._sink_factory(commands)),
                commands=commands,
                last_seen=self._clock(),
            )
            self._sessions[session_id] = session
            return session

    def purge_expired(self) -> dict:
        """Purge stale throttle entries and drop sessions idle past retention."""
        with self._lock:
            sessions = list(self._sessions.items())
        cutoff = self._clock() - self.retention

        events_removed = 0
        idle = []
        for session_id, session in sessions:
            events_removed += session.context.purge_expired()
            if session.last_seen <= cutoff and len(session.context) == 0:
                idle.append(session_id)

        # Sessions touched since the snapshot stay
        removed = 0
        with self._lock:
            for session_id in idle:
                session = self._sessions.get(session_id)
                if session is not None and session.last_seen <= cutoff and len(session.context) == 0:
                    del self._sessions[session_id]
                    removed += 1

        if events_removed or removed:
            logger.info("Tracking purge: %d events, %d idle sessions removed", events_removed, removed)
        return {"events": events_removed, "sessions": removed}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions
