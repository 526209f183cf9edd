"""Tests for the analytics sinks and the Conversions API client."""

import hashlib
from concurrent.futures import Future
from unittest.mock import MagicMock

import httpx
import pytest

from protech_site.services.conversions import (
    ConversionsClient,
    ConversionsError,
    build_conversion_event,
    prepare_relay_event,
)
from protech_site.services.events import EVENT_TYPES, build_event
from protech_site.services.sinks import (
    GA_EVENT_NAMES,
    META_EVENT_NAMES,
    AnalyticsSink,
    ConversionsRelaySink,
    DispatchedEvent,
    PixelSink,
    ga_event_category,
)


def _dispatched(event_type="lead", content_name="Contact Form", payload=None):
    return DispatchedEvent(
        event=build_event(event_type, content_name, payload),
        event_id="evt-1",
        event_key=f"{event_type}:{content_name}",
        event_time=1_700_000_000,
    )


class TestNameMaps:
    def test_every_event_type_mapped(self):
        assert set(META_EVENT_NAMES) == EVENT_TYPES
        assert set(GA_EVENT_NAMES) == EVENT_TYPES

    def test_meta_names(self):
        assert META_EVENT_NAMES["lead"] == "Lead"
        assert META_EVENT_NAMES["phone_click"] == "Contact"
        assert META_EVENT_NAMES["service_viewed"] == "ViewContent"

    def test_ga_names_and_categories(self):
        assert GA_EVENT_NAMES["lead"] == "generate_lead"
        assert GA_EVENT_NAMES["form_completed"] == "form_submit"
        assert ga_event_category("lead") == "conversion"
        assert ga_event_category("form_started") == "engagement"
        assert ga_event_category("phone_click") == "contact"
        assert ga_event_category("scroll_depth") == "interaction"


class TestClientSinks:
    def test_pixel_standard_event_uses_track(self):
        call = MagicMock()
        PixelSink(call).send(_dispatched("phone_click", "Header", {"phone_number": "330-555-0142"}))
        call.assert_called_once_with(
            "track", "Contact",
            {"content_name": "Header", "phone_number": "330-555-0142"},
            {"eventID": "evt-1"},
        )

    def test_pixel_custom_event_uses_track_custom(self):
        call = MagicMock()
        PixelSink(call).send(_dispatched("scroll_depth", "Home", {"scroll_percentage": 50}))
        assert call.call_args[0][:2] == ("trackCustom", "ScrollDepth")

    def test_analytics_adds_category(self):
        call = MagicMock()
        AnalyticsSink(call).send(_dispatched("form_completed", "Contact Form", {"form_name": "Contact Form"}))
        args = call.call_args[0]
        assert args[:2] == ("event", "form_submit")
        assert args[2]["event_category"] == "engagement"
        assert args[2]["form_name"] == "Contact Form"

    def test_user_data_never_reaches_client_sinks(self):
        call = MagicMock()
        AnalyticsSink(call).send(_dispatched(payload={"user_data": {"email": "jane@example.com"}}))
        assert "jane@example.com" not in repr(call.call_args)


class TestRelaySink:
    def _client(self, configured=True):
        client = MagicMock(spec=ConversionsClient)
        client.configured = configured
        return client

    def test_payload_hashes_email(self):
        sink = ConversionsRelaySink(self._client())
        payload = sink.build_payload(_dispatched(payload={"user_data": {"email": "Test@Example.com"}}))
        assert payload["user_data"]["em"] == hashlib.sha256(b"test@example.com").hexdigest()
        assert "Test@Example.com" not in repr(payload)

    def test_payload_shape(self):
        sink = ConversionsRelaySink(self._client())
        payload = sink.build_payload(_dispatched(payload={
            "event_source_url": "https://protech-ohio.com/contact",
            "value": 150,
        }))
        assert payload["event_name"] == "Lead"
        assert payload["event_id"] == "evt-1"
        assert payload["event_time"] == 1_700_000_000
        assert payload["action_source"] == "website"
        assert payload["event_source_url"] == "https://protech-ohio.com/contact"
        assert payload["custom_data"]["value"] == 150
        assert payload["custom_data"]["currency"] == "USD"

    def test_inline_send(self):
        client = self._client()
        result = ConversionsRelaySink(client).send(_dispatched())
        assert result.ok
        client.send.assert_called_once()

    def test_unconfigured_skips_network(self):
        client = self._client(configured=False)
        result = ConversionsRelaySink(client).send(_dispatched())
        assert not result.ok
        assert result.error == "not configured"
        client.send.assert_not_called()

    def test_executor_submission_is_fire_and_forget(self):
        client = self._client()
        executor = MagicMock()
        future = Future()
        executor.submit.return_value = future

        result = ConversionsRelaySink(client, executor).send(_dispatched())

        assert result.ok
        executor.submit.assert_called_once()
        assert executor.submit.call_args[0][0] is client.send
        # A failure after submission is only logged
        future.set_exception(ConversionsError("boom"))

    def test_inline_failure_propagates_to_dispatcher(self):
        client = self._client()
        client.send.side_effect = ConversionsError("rejected")
        with pytest.raises(ConversionsError):
            ConversionsRelaySink(client).send(_dispatched())


class TestConversionsClient:
    def test_send_posts_data_and_token(self):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["body"] = request.content
            return httpx.Response(200, json={"events_received": 1})

        client = ConversionsClient("999", "tok", api_version="v18.0", transport=httpx.MockTransport(handler))
        result = client.send({"event_name": "Lead"})

        assert result == {"events_received": 1}
        assert captured["url"] == "https://graph.facebook.com/v18.0/999/events"
        assert b'"access_token":"tok"' in captured["body"].replace(b" ", b"")
        assert b'"data":[{"event_name":"Lead"}]' in captured["body"].replace(b" ", b"")

    def test_error_status_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "bad"}))
        client = ConversionsClient("999", "tok", transport=transport)
        with pytest.raises(ConversionsError):
            client.send({"event_name": "Lead"})

    def test_unconfigured_raises(self):
        with pytest.raises(ConversionsError):
            ConversionsClient("", "").send({"event_name": "Lead"})


class TestRelayEventHelpers:
    def test_prepare_fills_defaults_and_hashes(self):
        prepared = prepare_relay_event(
            {"event_name": "Lead", "user_data": {"em": "Test@Example.com"}},
            client_ip="5.6.7.8",
            user_agent="UA",
            now=1_700_000_123.9,
        )
        assert prepared["user_data"]["em"] == hashlib.sha256(b"test@example.com").hexdigest()
        assert prepared["user_data"]["client_ip_address"] == "5.6.7.8"
        assert prepared["user_data"]["client_user_agent"] == "UA"
        assert prepared["event_time"] == 1_700_000_123
        assert prepared["action_source"] == "website"

    def test_prepare_keeps_supplied_values(self):
        prepared = prepare_relay_event(
            {"event_name": "Lead", "event_time": 5, "action_source": "phone_call",
             "user_data": {"client_ip_address": "9.9.9.9"}},
            client_ip="5.6.7.8",
        )
        assert prepared["event_time"] == 5
        assert prepared["action_source"] == "phone_call"
        assert prepared["user_data"]["client_ip_address"] == "9.9.9.9"

    def test_build_drops_empty_source_url_and_none_custom(self):
        event = build_conversion_event("Lead", "evt", {}, {"value": None, "currency": "USD"}, "", 1)
        assert "event_source_url" not in event
        assert event["custom_data"] == {"currency": "USD"}
