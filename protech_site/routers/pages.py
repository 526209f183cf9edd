"""Public pages — home, about, services, category, location hub, service detail, contact."""

from fastapi import APIRouter, HTTPException, Request

from protech_site.config import (
    BUSINESS_PHONE,
    PUBLIC_URL,
    SITE_NAME,
    SITEMAP_CATEGORY_ALLOWLIST,
    TARGET_STATE_CODE,
)
from protech_site.locations import (
    SERVICE_LOCATIONS,
    eligible_locations,
    get_location,
    is_eligible_location,
)
from protech_site.services.content import (
    canonical_url,
    category_page_meta,
    detail_page_meta,
    local_business_schema,
    location_page_meta,
    resolve_detail_page,
    service_schema,
)
from protech_site.taxonomy import SERVICE_CATEGORIES, get_category
from protech_site.web import render, track

router = APIRouter()


def _categories():
    return [c for c in SERVICE_CATEGORIES if c.id in SITEMAP_CATEGORY_ALLOWLIST]


def _static_meta(title: str, path: str, description: str) -> dict:
    return {
        "title": f"{title} | {SITE_NAME}" if title else SITE_NAME,
        "description": description,
        "canonical": canonical_url(PUBLIC_URL, path),
    }


@router.get("/")
async def home(request: Request):
    meta = _static_meta("", "/", "Heating, cooling and indoor air quality services across Northeast Ohio.")
    locations = eligible_locations(TARGET_STATE_CODE, SERVICE_LOCATIONS)
    track(request, "page_view", payload={"page_title": meta["title"]})
    return render(request, "home.html", {
        "meta": meta,
        "categories": _categories(),
        "locations": locations,
        "structured_data": [
            local_business_schema(
                PUBLIC_URL, SITE_NAME, BUSINESS_PHONE, locations, _categories(), description=meta["description"],
            ),
        ],
    })


@router.get("/about")
async def about(request: Request):
    meta = _static_meta("About Us", "/about", f"Meet the certified technicians behind {SITE_NAME}.")
    track(request, "page_view", payload={"page_title": meta["title"]})
    return render(request, "about.html", {"meta": meta})


@router.get("/services")
async def services_index(request: Request):
    meta = _static_meta("HVAC Services", "/services", "Residential and commercial HVAC services.")
    track(request, "page_view", payload={"page_title": meta["title"]})
    return render(request, "services.html", {
        "meta": meta,
        "categories": _categories(),
        "locations": eligible_locations(TARGET_STATE_CODE, SERVICE_LOCATIONS),
    })


@router.get("/contact")
async def contact_page(request: Request):
    meta = _static_meta("Contact Us", "/contact", "Request service or a free estimate.")
    track(request, "page_view", payload={"page_title": meta["title"]})
    track(request, "contact_page_viewed", "Contact Page")
    return render(request, "contact.html", {"meta": meta, "form_source": "Contact"})


@router.get("/schedule")
async def schedule_page(request: Request):
    meta = _static_meta("Schedule Service", "/schedule", "Book a service appointment.")
    track(request, "page_view", payload={"page_title": meta["title"]})
    return render(request, "contact.html", {"meta": meta, "form_source": "Schedule"})


@router.get("/free-estimate")
async def free_estimate_page(request: Request):
    meta = _static_meta("Free Estimate", "/free-estimate", "Get a free installation estimate.")
    track(request, "page_view", payload={"page_title": meta["title"]})
    return render(request, "contact.html", {"meta": meta, "form_source": "Free Estimate"})


@router.get("/services/locations/{location_id}")
async def location_hub(request: Request, location_id: str):
    location = get_location(location_id, SERVICE_LOCATIONS)
    if not location or not is_eligible_location(location, TARGET_STATE_CODE):
        raise HTTPException(status_code=404, detail="Location not found")

    meta = location_page_meta(location, PUBLIC_URL, SITE_NAME)
    track(request, "page_view", payload={"page_title": meta["title"]})
    track(request, "location_viewed", location.name, payload={"location_name": location.name})
    return render(request, "location.html", {
        "meta": meta,
        "location": location,
        "categories": _categories(),
        "structured_data": [
            local_business_schema(
                PUBLIC_URL, SITE_NAME, BUSINESS_PHONE, [location], _categories(), description=meta["description"],
            ),
        ],
    })


@router.get("/services/{category_id}")
async def category_page(request: Request, category_id: str):
    category = get_category(category_id)
    if not category or category.id not in SITEMAP_CATEGORY_ALLOWLIST:
        raise HTTPException(status_code=404, detail="Service category not found")

    meta = category_page_meta(category, PUBLIC_URL, SITE_NAME)
    track(request, "page_view", payload={"page_title": meta["title"]})
    return render(request, "category.html", {
        "meta": meta,
        "category": category,
        "locations": eligible_locations(TARGET_STATE_CODE, SERVICE_LOCATIONS),
    })


@router.get("/services/{category_id}/{system_id}/{service_type_id}/{item_id}/{location_id}")
async def service_detail(
    request: Request,
    category_id: str,
    system_id: str,
    service_type_id: str,
    item_id: str,
    location_id: str,
):
    page = resolve_detail_page(
        category_id, system_id, service_type_id, item_id, location_id,
        state_code=TARGET_STATE_CODE,
        allowed_categories=SITEMAP_CATEGORY_ALLOWLIST,
    )
    if not page:
        raise HTTPException(status_code=404, detail="Service not found")

    meta = detail_page_meta(page, PUBLIC_URL, SITE_NAME)
    service_name = f"{page['item'].name} {page['service_type'].name}"
    track(request, "page_view", payload={"page_title": meta["title"]})
    track(request, "service_viewed", f"{service_name} - {page['location'].name}", payload={
        "service_name": service_name,
        "content_category": page["category"].id,
    })
    return render(request, "service_detail.html", {
        "meta": meta,
        "structured_data": [service_schema(page, PUBLIC_URL, SITE_NAME)],
        **page,
    })
