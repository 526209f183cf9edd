"""Sitemap and robots.txt."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from protech_site.config import PUBLIC_URL, SITEMAP_CATEGORY_ALLOWLIST, TARGET_STATE_CODE
from protech_site.locations import SERVICE_LOCATIONS
from protech_site.services.sitemap import generate_sitemap
from protech_site.taxonomy import SERVICE_CATEGORIES
from protech_site.web import templates

logger = logging.getLogger(__name__)

router = APIRouter()

ROBOTS_DISALLOW = (
    "/api/",
    "/admin/",
    "/*.json$",
    "/404",
    "/500",
    "/thank-you",
    "/*?preview=*",
    "/*?draft=*",
)

# Crawlers allowed everywhere regardless of the default rule
ROBOTS_ALLOW_AGENTS = (
    "facebookexternalhit",
    "FacebookBot",
    "Facebot",
    "Mediapartners-Google",
    "Googlebot-Image",
)


@router.get("/sitemap.xml", include_in_schema=False)
async def sitemap_xml(request: Request):
    as_of = datetime.now(timezone.utc).replace(microsecond=0)
    result = generate_sitemap(
        SERVICE_CATEGORIES,
        SERVICE_LOCATIONS,
        base_url=PUBLIC_URL,
        as_of=as_of,
        state_code=TARGET_STATE_CODE,
        allowed_categories=SITEMAP_CATEGORY_ALLOWLIST,
    )
    for exclusion in result.exclusions:
        logger.debug("Sitemap exclusion: %s %s (%s)", exclusion.kind, exclusion.identifier, exclusion.reason)

    return templates.TemplateResponse(
        request,
        "sitemap.xml",
        {"entries": result.entries},
        media_type="application/xml",
        headers={
            "Cache-Control": "public, max-age=86400, s-maxage=86400",
            "X-Robots-Tag": "noindex",
            "Link": f'<{PUBLIC_URL}/sitemap.xml>; rel="canonical"',
        },
    )


@router.get("/robots.txt", include_in_schema=False)
async def robots_txt():
    lines = ["User-agent: *", "Allow: /"]
    lines += [f"Disallow: {path}" for path in ROBOTS_DISALLOW]
    for agent in ROBOTS_ALLOW_AGENTS:
        lines += ["", f"User-agent: {agent}", "Allow: /"]
    lines += ["", f"Sitemap: {PUBLIC_URL}/sitemap.xml", ""]
    return PlainTextResponse("\n".join(lines))
