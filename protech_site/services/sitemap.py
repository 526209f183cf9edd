"""Sitemap generator — expands the service taxonomy across service locations.

Produces one entry per canonical URL:
- static pages (home, about, services index, contact)
- one index page per allowed category
- one hub page per eligible location
- one detail page per valid (category, system, type, item) × location

Bad data is skipped and recorded as an Exclusion, never raised. A broken
entry must not block the rest of the sitemap from publishing.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence, Union

from protech_site.locations import location_exclusion_reason
from protech_site.models import (
    CATEGORY,
    DETAIL,
    LOCATION,
    MONTHLY,
    STATIC,
    WEEKLY,
    Exclusion,
    Location,
    ServiceCategory,
    SitemapEntry,
    SitemapResult,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ALLOWLIST = ("residential", "commercial")

# (path, change frequency, priority)
STATIC_PAGES = (
    ("", WEEKLY, 1.0),
    ("/about", MONTHLY, 0.8),
    ("/services", WEEKLY, 0.9),
    ("/contact", MONTHLY, 0.8),
)

CATEGORY_PRIORITY = 0.7
LOCATION_PRIORITY = 0.8
DETAIL_PRIORITY = 0.9

Combination = tuple[str, str, str, str]


def detail_path(category_id: str, system_id: str, service_type_id: str, item_id: str, location_id: str) -> str:
    return f"/services/{category_id}/{system_id}/{service_type_id}/{item_id}/{location_id}"


def location_path(location_id: str) -> str:
    return f"/services/locations/{location_id}"


def _format_timestamp(as_of: Union[datetime, str]) -> str:
    return as_of.isoformat() if isinstance(as_of, datetime) else str(as_of)


def build_valid_combinations(
    taxonomy: Iterable[ServiceCategory],
    exclusions: list[Exclusion] | None = None,
) -> set[Combination]:
    """Collect every (category, system, type, item) id tuple that deserves a detail page.

    A service type qualifies only when its system has types, it has at least
    one item, and none of its items has an empty id. Types flagged
    ``allow_empty_items`` with no items are skipped quietly; any other empty
    type is recorded as an exclusion.
    """
    valid: set[Combination] = set()
    excluded = exclusions if exclusions is not None else []

    for category in taxonomy:
        if not category.id:
            excluded.append(Exclusion("category", category.name or "?", "empty_id"))
            continue
        for system in category.systems:
            system_key = f"{category.id}/{system.id or '?'}"
            if not system.id:
                excluded.append(Exclusion("system", system_key, "empty_id"))
                continue
            if not system.service_types:
                excluded.append(Exclusion("system", system_key, "no_service_types"))
                continue
            for service_type in system.service_types:
                type_key = f"{system_key}/{service_type.id or '?'}"
                if not service_type.id:
                    excluded.append(Exclusion("service_type", type_key, "empty_id"))
                    continue
                if not service_type.items:
                    if not service_type.allow_empty_items:
                        excluded.append(Exclusion("service_type", type_key, "no_items"))
                    continue
                if any(not item.id or not item.id.strip() for item in service_type.items):
                    excluded.append(Exclusion("service_type", type_key, "empty_item_id"))
                    continue
                for item in service_type.items:
                    valid.add((category.id, system.id, service_type.id, item.id))

    return valid


def generate_sitemap(
    taxonomy: Sequence[ServiceCategory],
    locations: Sequence[Location],
    base_url: str,
    as_of: Union[datetime, str],
    state_code: str,
    allowed_categories: Iterable[str] = DEFAULT_CATEGORY_ALLOWLIST,
) -> SitemapResult:
    """Build the deduplicated, canonical sitemap for the site.

    Args:
        taxonomy: ordered service categories.
        locations: candidate locations; filtered here to ``state_code``.
        base_url: absolute origin with no trailing slash.
        as_of: used as ``last_modified`` for every entry in the batch.
        state_code: target service region.
        allowed_categories: category ids allowed to have pages.

    Returns:
        SitemapResult with entries (detail pages first) and exclusions.
    """
    base_url = base_url.rstrip("/")
    lastmod = _format_timestamp(as_of)
    allowed = set(allowed_categories)
    exclusions: list[Exclusion] = []

    static_entries = [
        SitemapEntry(f"{base_url}{path}", lastmod, freq, priority, bucket=STATIC)
        for path, freq, priority in STATIC_PAGES
    ]

    categories = []
    for category in taxonomy:
        if not category.id or category.id not in allowed:
            logger.info("Sitemap: excluding category %r (not in allowlist)", category.id)
            exclusions.append(Exclusion("category", category.id or "?", "not_allowed"))
            continue
        categories.append(category)

    category_entries = [
        SitemapEntry(f"{base_url}/services/{c.id}", lastmod, WEEKLY, CATEGORY_PRIORITY, bucket=CATEGORY)
        for c in categories
    ]

    eligible = []
    for loc in locations:
        reason = location_exclusion_reason(loc, state_code)
        if reason:
            logger.debug("Sitemap: excluding location %r (%s)", loc.id, reason)
            exclusions.append(Exclusion("location", loc.id or "?", reason))
            continue
        eligible.append(loc)

    # Hubs link to category services; with no categories there is nothing to list
    location_entries = [
        SitemapEntry(f"{base_url}{location_path(loc.id)}", lastmod, WEEKLY, LOCATION_PRIORITY, bucket=LOCATION)
        for loc in eligible
    ] if categories else []

    combinations = build_valid_combinations(categories, exclusions)

    detail_entries = []
    for category in categories:
        for system in category.systems:
            for service_type in system.service_types:
                for item in service_type.items:
                    if (category.id, system.id, service_type.id, item.id) not in combinations:
                        continue
                    for loc in eligible:
                        path = detail_path(category.id, system.id, service_type.id, item.id, loc.id)
                        detail_entries.append(
                            SitemapEntry(f"{base_url}{path}", lastmod, WEEKLY, DETAIL_PRIORITY, bucket=DETAIL)
                        )

    # Collapse by URL; a repeated URL keeps its first position, last value wins
    unique: dict[str, SitemapEntry] = {}
    for entry in [*detail_entries, *static_entries, *category_entries, *location_entries]:
        unique[entry.url] = entry

    result = SitemapResult(
        entries=[e for e in unique.values() if e.canonical],
        exclusions=exclusions,
    )

    stats = result.stats()
    logger.info(
        "Sitemap generated: %d URLs (%d detail, %d static, %d category, %d location), %d excluded",
        stats["total"], stats[DETAIL], stats[STATIC], stats[CATEGORY], stats[LOCATION], stats["excluded"],
    )
    return result
