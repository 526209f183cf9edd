"""Tests for lead validation, SMS formatting and the Twilio relay."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from protech_site.services.contact import (
    ContactRequest,
    format_contact_message,
    send_lead_sms,
)

TWILIO_ENV = {
    "TWILIO_ACCOUNT_SID": "AC123",
    "TWILIO_AUTH_TOKEN": "secret",
    "TWILIO_PHONE_NUMBER": "+13305550100",
    "OWNER_PHONE_NUMBER": "+13305550199",
}


@pytest.fixture
def twilio_config():
    with patch.multiple("protech_site.services.contact", **TWILIO_ENV):
        yield


class TestContactRequest:
    def test_requires_name_and_phone(self):
        with pytest.raises(ValidationError):
            ContactRequest.model_validate({"name": "Jane"})
        with pytest.raises(ValidationError):
            ContactRequest.model_validate({"phone": "330-555-0142"})

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            ContactRequest.model_validate({"name": "   ", "phone": "330-555-0142"})

    def test_bad_email_rejected(self):
        with pytest.raises(ValidationError):
            ContactRequest.model_validate({"name": "Jane", "phone": "1", "email": "not-an-email"})

    def test_unknown_fields_ignored(self):
        contact = ContactRequest.model_validate({"name": "Jane", "phone": "1", "honeypot": "x"})
        assert not hasattr(contact, "honeypot")

    def test_user_data_split(self):
        contact = ContactRequest(name="Jane Q Doe", phone="330-555-0142", email="jane@example.com",
                                 location="Akron, OH")
        assert contact.user_data() == {
            "email": "jane@example.com",
            "phone": "330-555-0142",
            "first_name": "Jane",
            "last_name": "Q Doe",
            "city": "Akron",
            "state": "OH",
        }

    def test_user_data_zip_location(self):
        contact = ContactRequest(name="Jane", phone="1", location="44301")
        assert contact.user_data()["zip_code"] == "44301"


class TestFormatMessage:
    def test_includes_source_and_fields(self):
        contact = ContactRequest(name="Jane Doe", phone="330-555-0142", service="AC Repair", source="Schedule")
        body = format_contact_message(contact, datetime(2026, 3, 1, 14, 5, 9))
        assert body.startswith("New Schedule Form Submission:")
        assert "Name: Jane Doe" in body
        assert "Service: AC Repair" in body
        assert "Email:" not in body
        assert body.endswith("Received: 03/01/2026, 02:05:09 PM")

    def test_default_source(self):
        contact = ContactRequest(name="Jane", phone="1")
        assert format_contact_message(contact).startswith("New Contact Form Submission:")


class TestSendLeadSms:
    def test_unconfigured(self):
        with patch("protech_site.services.contact.TWILIO_ACCOUNT_SID", ""):
            result = send_lead_sms(ContactRequest(name="Jane", phone="1"))
        assert result == {"success": False, "message": "Server configuration error"}

    def test_sends_to_owner(self, twilio_config):
        fake_client = MagicMock()
        fake_client.messages.create.return_value = MagicMock(sid="SM123")
        with patch("protech_site.services.contact._get_client", return_value=fake_client):
            result = send_lead_sms(ContactRequest(name="Jane", phone="330-555-0142"))

        assert result["success"] is True
        assert result["sid"] == "SM123"
        kwargs = fake_client.messages.create.call_args.kwargs
        assert kwargs["to"] == "+13305550199"
        assert kwargs["from_"] == "+13305550100"
        assert "Name: Jane" in kwargs["body"]

    def test_twilio_failure(self, twilio_config):
        fake_client = MagicMock()
        fake_client.messages.create.side_effect = RuntimeError("twilio down")
        with patch("protech_site.services.contact._get_client", return_value=fake_client):
            result = send_lead_sms(ContactRequest(name="Jane", phone="1"))
        assert result["success"] is False
        assert result["message"] == "Failed to send message"
        assert "twilio down" in result["error"]
