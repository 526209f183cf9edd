"""Lead capture — contact/schedule form submissions and service-area lookup."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from protech_site.locations import service_area_for_zip
from protech_site.services.contact import ContactRequest, send_lead_sms
from protech_site.web import RateLimiter, set_session_cookie, track, tracking_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_contact_limiter = RateLimiter(limit=5, window=60)


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ()))
    if err.get("type") == "missing":
        return "Name and phone are required"
    return f"{field}: {err.get('msg', 'invalid value')}" if field else err.get("msg", "Invalid request")


@router.post("/contact")
async def submit_contact(request: Request):
    _contact_limiter.check(request)
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    try:
        contact = ContactRequest.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_first_error(e))

    result = await asyncio.to_thread(send_lead_sms, contact)
    if not result["success"]:
        return JSONResponse(
            {"success": False, "message": result["message"]},
            status_code=500,
        )

    form_name = f"{contact.source or 'Contact'} Form"
    track(request, "lead", form_name, payload={
        "form_name": form_name,
        "service_name": contact.service,
        "user_data": contact.user_data(),
    })
    logger.info("Lead received from %s form (sid=%s)", contact.source or "Contact", result.get("sid", ""))

    response = JSONResponse({
        "success": True,
        "message": result["message"],
        "sid": result.get("sid", ""),
        "commands": tracking_session(request).commands.drain(),
    })
    set_session_cookie(request, response)
    return response


@router.get("/service-area")
async def service_area(zip: str = ""):
    area = service_area_for_zip(zip)
    if not area:
        return {"served": False, "zip": zip.strip()}
    return {"served": True, **area}
