"""Tracking event schemas — one validated model per semantic event.

Payloads arriving from page scripts or route handlers are parsed into a
closed, discriminated union keyed on ``event_type``. Unknown event types,
unknown fields and malformed values are rejected here, before anything
reaches the throttle table or a sink.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class InvalidEventError(ValueError):
    """Raised when an event type or payload fails validation."""


CustomValue = Union[str, int, float, bool]


class UserData(BaseModel):
    """Visitor identity fragments. PII here is hashed before any network call."""

    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    external_id: Optional[str] = None
    fbp: Optional[str] = None
    fbc: Optional[str] = None
    client_ip_address: Optional[str] = None
    client_user_agent: Optional[str] = None

    def to_conversions(self) -> dict:
        """Map to Conversions API ``user_data`` keys (still unhashed)."""
        mapped = {
            "em": self.email,
            "ph": self.phone,
            "fn": self.first_name,
            "ln": self.last_name,
            "ct": self.city,
            "st": self.state,
            "zp": self.zip_code,
            "external_id": self.external_id,
            "country": self.country.lower() if self.country else None,
            "fbp": self.fbp,
            "fbc": self.fbc,
            "client_ip_address": self.client_ip_address,
            "client_user_agent": self.client_user_agent,
        }
        return {k: v for k, v in mapped.items() if v}


class _BaseEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    content_name: str = ""
    page_path: Optional[str] = None
    event_source_url: Optional[str] = None
    user_data: UserData = Field(default_factory=UserData)
    custom: dict[str, CustomValue] = Field(default_factory=dict)

    def properties(self) -> dict:
        """Event properties for analytics sinks — no identity, no routing fields."""
        props = self.model_dump(
            exclude={"event_type", "user_data", "event_source_url", "custom"},
            exclude_none=True,
        )
        if not props.get("content_name"):
            props.pop("content_name", None)
        props.update(self.custom)
        return props


class _MonetaryEvent(_BaseEvent):
    value: Optional[float] = Field(None, ge=0)
    currency: str = Field("USD", pattern=r"^[A-Z]{3}$")


class PageViewEvent(_BaseEvent):
    event_type: Literal["page_view"]
    page_title: Optional[str] = None


class SessionEvent(_BaseEvent):
    event_type: Literal["session_start", "session_end"]


class FormStartedEvent(_BaseEvent):
    event_type: Literal["form_started"]
    form_name: str = Field(..., min_length=1)


class FormCompletedEvent(_BaseEvent):
    event_type: Literal["form_completed"]
    form_name: str = Field(..., min_length=1)
    service_name: Optional[str] = None


class LeadEvent(_MonetaryEvent):
    event_type: Literal["lead"]
    form_name: Optional[str] = None
    service_name: Optional[str] = None
    lead_id: Optional[str] = None


class ScheduleEvent(_MonetaryEvent):
    event_type: Literal["schedule"]
    appointment_type: Optional[str] = None
    preferred_time: Optional[str] = None


class ContactPageViewedEvent(_BaseEvent):
    event_type: Literal["contact_page_viewed"]


class PhoneClickEvent(_BaseEvent):
    event_type: Literal["phone_click"]
    phone_number: Optional[str] = None


class EmailClickEvent(_BaseEvent):
    event_type: Literal["email_click"]
    email_address: Optional[str] = None


class EmergencyClickEvent(_BaseEvent):
    event_type: Literal["emergency_click"]


class ViewContentEvent(_MonetaryEvent):
    event_type: Literal["service_viewed"]
    service_name: Optional[str] = None
    content_category: Optional[str] = None


class LocationSearchEvent(_BaseEvent):
    event_type: Literal["location_search"]
    location_name: str = Field(..., min_length=1)
    search_query: Optional[str] = None


class LocationViewedEvent(_BaseEvent):
    event_type: Literal["location_viewed"]
    location_name: str = Field(..., min_length=1)


class ScrollDepthEvent(_BaseEvent):
    event_type: Literal["scroll_depth"]
    scroll_percentage: int = Field(..., ge=0, le=100)


class TimeOnPageEvent(_BaseEvent):
    event_type: Literal["time_on_page"]
    time_seconds: int = Field(..., ge=0)


TrackingEvent = Annotated[
    Union[
        PageViewEvent,
        SessionEvent,
        FormStartedEvent,
        FormCompletedEvent,
        LeadEvent,
        ScheduleEvent,
        ContactPageViewedEvent,
        PhoneClickEvent,
        EmailClickEvent,
        EmergencyClickEvent,
        ViewContentEvent,
        LocationSearchEvent,
        LocationViewedEvent,
        ScrollDepthEvent,
        TimeOnPageEvent,
    ],
    Field(discriminator="event_type"),
]

_event_adapter = TypeAdapter(TrackingEvent)

EVENT_TYPES = frozenset({
    "page_view", "session_start", "session_end", "form_started", "form_completed",
    "lead", "schedule", "contact_page_viewed", "phone_click", "email_click",
    "emergency_click", "service_viewed", "location_search", "location_viewed",
    "scroll_depth", "time_on_page",
})


def build_event(event_type: str, content_name: str = "", payload: dict | None = None):
    """Validate and build the event model for ``event_type``.

    Raises InvalidEventError for unknown types or malformed payloads.
    """
    if event_type not in EVENT_TYPES:
        raise InvalidEventError(f"Unknown event type: {event_type!r}")

    data = dict(payload or {})
    if "event_type" in data and data["event_type"] != event_type:
        raise InvalidEventError("Payload event_type does not match")
    data["event_type"] = event_type
    if content_name:
        data["content_name"] = content_name
    data.setdefault("content_name", "")

    try:
        return _event_adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidEventError(f"Invalid {event_type} payload: {e.error_count()} error(s)") from e
