"""Google Places reviews — server-side lookup so the API key never reaches the browser."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
PLACE_FIELDS = "name,rating,reviews,formatted_address"


class ReviewsError(RuntimeError):
    """Google Places returned an error or is not configured."""


class ReviewsClient:
    """Fetches rating and reviews for one place."""

    def __init__(
        self,
        api_key: str,
        place_id: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.place_id = place_id
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.place_id)

    async def fetch(self) -> dict:
        """Return the place ``result`` object. Raises ReviewsError on failure."""
        if not self.configured:
            raise ReviewsError("GOOGLE_PLACES_API_KEY and GOOGLE_PLACE_ID must be set")

        params = {"place_id": self.place_id, "fields": PLACE_FIELDS, "key": self.api_key}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(PLACE_DETAILS_URL, params=params)

        if response.status_code >= 400:
            raise ReviewsError(f"Google Places API error: {response.status_code}")
        try:
            data = response.json()
        except ValueError:
            raise ReviewsError("Google Places API returned invalid JSON")
        if data.get("status") != "OK":
            raise ReviewsError(f"Google Places API returned status: {data.get('status')}")
        return data.get("result") or {}
