"""Tests for the Google Places reviews client and /api/reviews proxy."""

import asyncio

import httpx
import pytest

from protech_site.services.reviews import ReviewsClient, ReviewsError
from protech_site.tests.conftest import PLACE_RESULT


class TestReviewsClient:
    def test_fetch_returns_place_result(self, reviews_client):
        assert asyncio.run(reviews_client.fetch()) == PLACE_RESULT

    def test_sends_place_and_key(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, json={"status": "OK", "result": {}})

        client = ReviewsClient("places-key", "place-123", transport=httpx.MockTransport(handler))
        asyncio.run(client.fetch())

        params = seen[0].params
        assert params["place_id"] == "place-123"
        assert params["key"] == "places-key"
        assert params["fields"] == "name,rating,reviews,formatted_address"

    def test_non_ok_status_raises(self, reviews_client, places_response):
        places_response["body"] = {"status": "REQUEST_DENIED"}
        with pytest.raises(ReviewsError, match="REQUEST_DENIED"):
            asyncio.run(reviews_client.fetch())

    def test_http_error_raises(self, reviews_client, places_response):
        places_response["status_code"] = 503
        with pytest.raises(ReviewsError, match="503"):
            asyncio.run(reviews_client.fetch())

    def test_unconfigured_raises(self):
        client = ReviewsClient("", "place-123")
        assert not client.configured
        with pytest.raises(ReviewsError):
            asyncio.run(client.fetch())


class TestReviewsRoute:
    def test_returns_result_without_key(self, client):
        resp = client.get("/api/reviews")
        assert resp.status_code == 200
        body = resp.json()
        assert body == {"result": PLACE_RESULT, "place_id": "place-123"}
        assert "places-key" not in resp.text

    def test_missing_credentials_500(self, client):
        client.app.state.reviews_client.api_key = ""
        resp = client.get("/api/reviews")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Missing API credentials"}

    def test_upstream_failure_500(self, client, places_response):
        places_response["body"] = {"status": "OVER_QUERY_LIMIT"}
        resp = client.get("/api/reviews")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to fetch reviews"}
