"""Tests for event payload validation."""

import pytest

from protech_site.services.events import (
    EVENT_TYPES,
    InvalidEventError,
    LeadEvent,
    ViewContentEvent,
    build_event,
)


class TestBuildEvent:
    def test_builds_model_for_type(self):
        event = build_event("lead", "Contact Form", {"value": 100, "form_name": "Contact Form"})
        assert isinstance(event, LeadEvent)
        assert event.value == 100
        assert event.currency == "USD"

    def test_service_viewed_is_view_content(self):
        assert isinstance(build_event("service_viewed", "Central AC"), ViewContentEvent)

    def test_explicit_content_name_wins(self):
        event = build_event("phone_click", "Header", {"content_name": "Footer"})
        assert event.content_name == "Header"

    def test_payload_content_name_used_when_none_given(self):
        assert build_event("phone_click", "", {"content_name": "Footer"}).content_name == "Footer"

    def test_every_type_builds_with_minimal_payload(self):
        required = {
            "form_started": {"form_name": "f"},
            "form_completed": {"form_name": "f"},
            "location_search": {"location_name": "Akron"},
            "location_viewed": {"location_name": "Akron"},
            "scroll_depth": {"scroll_percentage": 50},
            "time_on_page": {"time_seconds": 30},
        }
        for event_type in EVENT_TYPES:
            assert build_event(event_type, "x", required.get(event_type)).event_type == event_type

    @pytest.mark.parametrize("event_type,payload", [
        ("lead", {"value": -5}),
        ("lead", {"currency": "usd"}),
        ("form_started", {}),
        ("location_viewed", {"location_name": ""}),
        ("time_on_page", {"time_seconds": -1}),
        ("lead", {"user_data": {"email": "a@b.com", "shoe_size": 9}}),
        ("lead", {"user_data": {"country": "USA"}}),
    ])
    def test_malformed_payloads_rejected(self, event_type, payload):
        with pytest.raises(InvalidEventError):
            build_event(event_type, "x", payload)

    def test_mismatched_event_type_rejected(self):
        with pytest.raises(InvalidEventError):
            build_event("lead", "x", {"event_type": "schedule"})

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidEventError, match="Unknown event type"):
            build_event("purchase")


class TestProperties:
    def test_excludes_identity_and_routing(self):
        event = build_event("lead", "Contact Form", {
            "event_source_url": "https://protech-ohio.com/contact",
            "page_path": "/contact",
            "user_data": {"email": "jane@example.com"},
            "custom": {"campaign": "spring"},
        })
        props = event.properties()
        assert props == {
            "content_name": "Contact Form",
            "page_path": "/contact",
            "currency": "USD",
            "campaign": "spring",
        }

    def test_empty_content_name_dropped(self):
        assert "content_name" not in build_event("page_view", "").properties()

    def test_user_data_mapped_to_conversions_keys(self):
        event = build_event("lead", "x", {"user_data": {"email": "a@b.com", "zip_code": "44301", "country": "US"}})
        assert event.user_data.to_conversions() == {"em": "a@b.com", "zp": "44301", "country": "us"}
