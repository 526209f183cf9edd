"""Facebook Conversions API relay for events posted by the browser."""

import logging

import httpx
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from protech_site.services.conversions import ConversionsError, prepare_relay_event
from protech_site.web import RateLimiter, client_ip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_relay_limiter = RateLimiter(limit=60, window=60)


@router.post("/facebook-conversions")
async def facebook_conversions(request: Request):
    _relay_limiter.check(request)
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")

    event = body.get("event") if isinstance(body, dict) else None
    if not isinstance(event, dict) or not event.get("event_name"):
        raise HTTPException(status_code=400, detail="Invalid event data")

    client = request.app.state.conversions_client
    if not client.configured:
        logger.error("Conversions relay called without FB_PIXEL_ID / FB_ACCESS_TOKEN")
        return JSONResponse({"success": False, "error": "Server configuration error"}, status_code=500)

    prepared = prepare_relay_event(
        event,
        client_ip=client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
    )
    try:
        result = await client.send_async(prepared)
    except (ConversionsError, httpx.HTTPError) as e:
        logger.error("Conversions relay failed for %s: %s", event.get("event_name"), e)
        return JSONResponse({"success": False, "error": "Failed to send event"}, status_code=500)

    return {"success": True, "result": result}
