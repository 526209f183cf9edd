"""Meta Conversions API client — server-side copies of pixel events.

Builds the Graph API event body, hashes user data, and posts it with httpx.
Used by the /api/facebook-conversions relay route and by the dispatcher's
relay sink.
"""

import logging
import time
from typing import Optional

import httpx

from protech_site.services.hashing import hash_user_data

logger = logging.getLogger(__name__)

GRAPH_API_URL = "https://graph.facebook.com"
DEFAULT_ACTION_SOURCE = "website"


class ConversionsError(RuntimeError):
    """The Conversions API rejected a request or is not configured."""


def build_conversion_event(
    event_name: str,
    event_id: str,
    user_data: dict,
    custom_data: Optional[dict] = None,
    event_source_url: Optional[str] = None,
    event_time: Optional[int] = None,
    action_source: str = DEFAULT_ACTION_SOURCE,
) -> dict:
    """Assemble one Conversions API event with PII already hashed."""
    event = {
        "event_name": event_name,
        "event_time": int(event_time if event_time is not None else time.time()),
        "event_source_url": event_source_url,
        "action_source": action_source,
        "event_id": event_id,
        "user_data": hash_user_data(user_data),
        "custom_data": {k: v for k, v in (custom_data or {}).items() if v is not None},
    }
    if not event["event_source_url"]:
        del event["event_source_url"]
    return event


def prepare_relay_event(
    event: dict,
    client_ip: str = "",
    user_agent: str = "",
    now: Optional[float] = None,
) -> dict:
    """Normalize an event posted by the browser before forwarding it.

    Hashes PII, fills client IP / user agent if absent, and defaults
    ``event_time`` and ``action_source``.
    """
    prepared = dict(event)
    user_data = hash_user_data(dict(prepared.get("user_data") or {}))
    if client_ip and not user_data.get("client_ip_address"):
        user_data["client_ip_address"] = client_ip
    if user_agent and not user_data.get("client_user_agent"):
        user_data["client_user_agent"] = user_agent
    prepared["user_data"] = user_data

    if not prepared.get("event_time"):
        prepared["event_time"] = int(now if now is not None else time.time())
    if not prepared.get("action_source"):
        prepared["action_source"] = DEFAULT_ACTION_SOURCE
    return prepared


def _parse_response(response: httpx.Response) -> dict:
    if response.status_code >= 400:
        raise ConversionsError(f"Facebook Conversions API error: {response.text}")
    if "application/json" in response.headers.get("content-type", "") and response.text.strip():
        try:
            return response.json()
        except ValueError:
            logger.error("Failed to parse Conversions API response: %s", response.text)
            return {"success": True, "raw_response": response.text}
    return {"success": True}


class ConversionsClient:
    """Posts events to ``/{version}/{pixel_id}/events``."""

    def __init__(
        self,
        pixel_id: str,
        access_token: str,
        api_version: str = "v18.0",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.pixel_id = pixel_id
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport
        self._async_transport = async_transport

    @property
    def configured(self) -> bool:
        return bool(self.pixel_id and self.access_token)

    @property
    def endpoint(self) -> str:
        return f"{GRAPH_API_URL}/{self.api_version}/{self.pixel_id}/events"

    def _body(self, events: list[dict]) -> dict:
        return {"data": events, "access_token": self.access_token}

    def send(self, event: dict) -> dict:
        """POST one event synchronously. Raises ConversionsError on failure."""
        if not self.configured:
            raise ConversionsError("FB_PIXEL_ID and FB_ACCESS_TOKEN must be set")
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(self.endpoint, json=self._body([event]))
        return _parse_response(response)

    async def send_async(self, event: dict) -> dict:
        if not self.configured:
            raise ConversionsError("FB_PIXEL_ID and FB_ACCESS_TOKEN must be set")
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._async_transport) as client:
            response = await client.post(self.endpoint, json=self._body([event]))
        return _parse_response(response)
