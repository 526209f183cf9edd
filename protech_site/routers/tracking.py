"""Browser tracking endpoint — page scripts report clicks, scrolls and form activity here."""

import logging
from urllib.parse import urlparse

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from protech_site.services.events import InvalidEventError
from protech_site.web import RateLimiter, event_payload, set_session_cookie, tracking_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_track_limiter = RateLimiter(limit=120, window=60)


@router.post("/track")
async def track_event(request: Request):
    _track_limiter.check(request)
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    event_type = body.get("event_type")
    content_name = body.get("content_name") or ""
    unique_id = body.get("unique_id") or None
    payload = body.get("payload") or {}
    if not isinstance(event_type, str) or not event_type:
        raise HTTPException(status_code=400, detail="event_type required")
    if not isinstance(content_name, str) or not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="content_name must be a string and payload an object")
    if unique_id is not None and not isinstance(unique_id, str):
        raise HTTPException(status_code=400, detail="unique_id must be a string")

    # Events from the browser describe the page that sent them, not this endpoint
    referer = request.headers.get("referer", "")
    if referer:
        payload.setdefault("event_source_url", referer)
        payload.setdefault("page_path", urlparse(referer).path or "/")

    session = tracking_session(request)
    try:
        sent = session.dispatcher.dispatch(
            event_type, content_name, unique_id, event_payload(request, payload),
        )
    except InvalidEventError as e:
        logger.warning("Rejected %s event: %s", event_type, e)
        raise HTTPException(status_code=422, detail=str(e))

    # Pixel and gtag calls for this event run on the page that reported it
    response = JSONResponse({"sent": sent, "commands": session.commands.drain()})
    set_session_cookie(request, response)
    return response
