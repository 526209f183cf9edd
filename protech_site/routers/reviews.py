"""Google reviews proxy for the testimonials section."""

import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from protech_site.services.reviews import ReviewsError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/reviews")
async def get_reviews(request: Request):
    client = request.app.state.reviews_client
    if not client.configured:
        return JSONResponse({"error": "Missing API credentials"}, status_code=500)

    try:
        result = await client.fetch()
    except (ReviewsError, httpx.HTTPError) as e:
        logger.error("Error fetching reviews: %s", e)
        return JSONResponse({"error": "Failed to fetch reviews"}, status_code=500)

    return {"result": result, "place_id": client.place_id}
