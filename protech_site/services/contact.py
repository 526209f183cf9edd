"""Lead capture — validate form submissions and text them to the owner via Twilio."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from protech_site.config import (
    OWNER_PHONE_NUMBER,
    TWILIO_ACCOUNT_SID,
    TWILIO_AUTH_TOKEN,
    TWILIO_PHONE_NUMBER,
)
from protech_site.services.hashing import parse_full_name, parse_location

logger = logging.getLogger(__name__)

_MAX_FIELD_LEN = 200
_MAX_MESSAGE_LEN = 2000


class ContactRequest(BaseModel):
    """Contact / schedule form body. Name and phone are required."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=_MAX_FIELD_LEN)
    phone: str = Field(..., min_length=1, max_length=_MAX_FIELD_LEN)
    email: Optional[str] = Field(None, min_length=1, max_length=_MAX_FIELD_LEN)
    service: Optional[str] = Field(None, max_length=_MAX_FIELD_LEN)
    location: Optional[str] = Field(None, max_length=_MAX_FIELD_LEN)
    message: Optional[str] = Field(None, max_length=_MAX_MESSAGE_LEN)
    source: Optional[str] = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and "@" not in value:
            raise ValueError("Invalid email format")
        return value

    def user_data(self) -> dict:
        """Identity fields for tracking events, split the way the ad platforms expect."""
        first, last = parse_full_name(self.name)
        place = parse_location(self.location or "")
        data = {
            "email": self.email,
            "phone": self.phone,
            "first_name": first,
            "last_name": last,
            "city": place["city"],
            "state": place["state"],
            "zip_code": place["zip"],
        }
        return {k: v for k, v in data.items() if v}


def format_contact_message(contact: ContactRequest, received_at: Optional[datetime] = None) -> str:
    """Render the SMS body sent to the owner."""
    form_source = contact.source or "Contact"
    lines = [f"New {form_source} Form Submission:", ""]
    for label, value in (
        ("Name", contact.name),
        ("Phone", contact.phone),
        ("Email", contact.email),
        ("Service", contact.service),
        ("Location", contact.location),
        ("Message", contact.message),
    ):
        if value:
            lines.append(f"{label}: {value}")
    received = (received_at or datetime.now()).strftime("%m/%d/%Y, %I:%M:%S %p")
    lines.extend(["", f"Received: {received}"])
    return "\n".join(lines)


def twilio_configured() -> bool:
    return all((TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER, OWNER_PHONE_NUMBER))


def _get_client():
    """Twilio REST client, created per call so missing config never breaks import."""
    from twilio.rest import Client

    return Client(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN)


def send_lead_sms(contact: ContactRequest) -> dict:
    """Text a lead to the owner.

    Returns:
        dict with keys: success, message, sid (if sent).
    """
    if not twilio_configured():
        logger.error("Twilio not configured — TWILIO_* and OWNER_PHONE_NUMBER must be set")
        return {"success": False, "message": "Server configuration error"}

    body = format_contact_message(contact)
    try:
        result = _get_client().messages.create(
            body=body,
            from_=TWILIO_PHONE_NUMBER,
            to=OWNER_PHONE_NUMBER,
        )
    except Exception as e:
        logger.error("Lead SMS failed: %s", e)
        return {"success": False, "message": "Failed to send message", "error": str(e)}

    return {"success": True, "message": "Message sent successfully", "sid": getattr(result, "sid", "")}
