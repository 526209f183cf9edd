"""Page metadata and path resolution for the service pages."""

from __future__ import annotations

from typing import Iterable, Optional

from protech_site.locations import (
    SERVICE_LOCATIONS,
    get_location,
    is_eligible_location,
    location_display_name,
)
from protech_site.models import Location, ServiceCategory
from protech_site.services.sitemap import (
    DEFAULT_CATEGORY_ALLOWLIST,
    build_valid_combinations,
    detail_path,
    location_path,
)
from protech_site.taxonomy import SERVICE_CATEGORIES, find_service

# The shipped taxonomy is static; its combinations are computed once
SITE_COMBINATIONS = frozenset(build_valid_combinations(SERVICE_CATEGORIES))


def valid_combinations(taxonomy: tuple[ServiceCategory, ...] = SERVICE_CATEGORIES) -> frozenset:
    if taxonomy is SERVICE_CATEGORIES:
        return SITE_COMBINATIONS
    return frozenset(build_valid_combinations(taxonomy))


def canonical_url(base_url: str, path: str) -> str:
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base_url.rstrip('/')}{path}" if path != "/" else base_url.rstrip("/")


def resolve_detail_page(
    category_id: str,
    system_id: str,
    service_type_id: str,
    item_id: str,
    location_id: str,
    state_code: str,
    taxonomy: tuple[ServiceCategory, ...] = SERVICE_CATEGORIES,
    locations: tuple[Location, ...] = SERVICE_LOCATIONS,
    allowed_categories: Iterable[str] = DEFAULT_CATEGORY_ALLOWLIST,
) -> Optional[dict]:
    """Resolve a detail URL to its taxonomy nodes and location.

    Only paths the sitemap would publish resolve; anything else is None.
    """
    if category_id not in set(allowed_categories):
        return None
    found = find_service(category_id, system_id, service_type_id, item_id, taxonomy)
    if not found:
        return None
    if (category_id, system_id, service_type_id, item_id) not in valid_combinations(taxonomy):
        return None

    location = get_location(location_id, locations)
    if not location or not is_eligible_location(location, state_code):
        return None

    category, system, service_type, item = found
    return {
        "category": category,
        "system": system,
        "service_type": service_type,
        "item": item,
        "location": location,
    }


def detail_page_meta(page: dict, base_url: str, site_name: str) -> dict:
    item = page["item"]
    service_type = page["service_type"]
    location = page["location"]
    place = location_display_name(location.id)
    path = detail_path(page["category"].id, page["system"].id, service_type.id, item.id, location.id)
    return {
        "title": f"{item.name} {service_type.name} in {place} | {site_name}",
        "description": (
            f"Professional {item.name} {service_type.name.lower()} services in {place}. "
            f"Fast, reliable service from certified HVAC technicians at {site_name}."
        ),
        "canonical": canonical_url(base_url, path),
    }


def location_page_meta(location: Location, base_url: str, site_name: str) -> dict:
    place = location_display_name(location.id)
    return {
        "title": f"HVAC Services in {place} | {site_name}",
        "description": (
            f"Heating, cooling and indoor air quality services in {place} and "
            f"throughout {location.county}. Residential and commercial HVAC from {site_name}."
        ),
        "canonical": canonical_url(base_url, location_path(location.id)),
    }


def category_page_meta(category: ServiceCategory, base_url: str, site_name: str) -> dict:
    return {
        "title": f"{category.name} | {site_name}",
        "description": category.description,
        "canonical": canonical_url(base_url, f"/services/{category.id}"),
    }


# --- Structured data (schema.org JSON-LD) ---

SCHEMA_CONTEXT = "https://schema.org"
BUSINESS_TYPE = "HVACBusiness"
PRICE_RANGE = "$$"
SERVICE_RADIUS_METERS = "80000"

OPENING_HOURS = [
    {
        "@type": "OpeningHoursSpecification",
        "dayOfWeek": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        "opens": "08:00",
        "closes": "17:00",
    },
]

AUDIENCE_TYPES = {
    "residential": "Residential property owners",
    "commercial": "Commercial property owners and businesses",
}


def _county_area(county: str) -> dict:
    return {"@type": "AdministrativeArea", "name": county}


def _city_area(location: Location) -> dict:
    city = {"@type": "City", "name": location.name}
    if location.county:
        city["containedInPlace"] = _county_area(location.county)
    return city


def area_served(locations: Iterable[Location]) -> list[dict]:
    """Counties in first-seen order, each followed by its cities."""
    by_county: dict[str, list[Location]] = {}
    for location in locations:
        by_county.setdefault(location.county, []).append(location)

    entries = []
    for county, cities in by_county.items():
        if county:
            entries.append({**_county_area(county), "addressRegion": cities[0].state_code.upper()})
        entries.extend(_city_area(loc) for loc in cities)
    return entries


def offer_catalog(taxonomy: Iterable[ServiceCategory]) -> dict:
    offers = []
    for category in taxonomy:
        for system in category.systems:
            for service_type in system.service_types:
                offers.append({
                    "@type": "Offer",
                    "itemOffered": {
                        "@type": "Service",
                        "name": f"{system.name} {service_type.name}",
                        "serviceType": service_type.name,
                        "category": category.name,
                    },
                })
    return {"@type": "OfferCatalog", "name": "HVAC Services", "itemListElement": offers}


def local_business_schema(
    base_url: str,
    site_name: str,
    telephone: str,
    locations: Iterable[Location],
    taxonomy: Iterable[ServiceCategory] = SERVICE_CATEGORIES,
    description: str = "",
) -> dict:
    """``HVACBusiness`` JSON-LD for the home and location hub pages.

    The service radius is centred on the primary location, or the first
    location with coordinates.
    """
    locations = list(locations)
    schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": BUSINESS_TYPE,
        "name": site_name,
        "url": base_url.rstrip("/"),
        "telephone": telephone,
        "priceRange": PRICE_RANGE,
        "openingHoursSpecification": OPENING_HOURS,
        "areaServed": area_served(locations),
        "hasOfferCatalog": offer_catalog(taxonomy),
    }
    if description:
        schema["description"] = description

    with_coordinates = [loc for loc in locations if loc.coordinates]
    centre = next((loc for loc in with_coordinates if loc.primary), None) or next(iter(with_coordinates), None)
    if centre:
        schema["serviceArea"] = {
            "@type": "GeoCircle",
            "geoMidpoint": {
                "@type": "GeoCoordinates",
                "latitude": centre.coordinates.latitude,
                "longitude": centre.coordinates.longitude,
            },
            "geoRadius": SERVICE_RADIUS_METERS,
        }
    return schema


def service_schema(page: dict, base_url: str, site_name: str) -> dict:
    """``Service`` JSON-LD for one service detail page."""
    category = page["category"]
    system = page["system"]
    service_type = page["service_type"]
    item = page["item"]
    location = page["location"]
    meta = detail_page_meta(page, base_url, site_name)
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Service",
        "name": f"{item.name} {service_type.name}",
        "description": meta["description"],
        "url": meta["canonical"],
        "serviceType": f"{system.name} {service_type.name}",
        "provider": {
            "@type": BUSINESS_TYPE,
            "name": site_name,
            "url": base_url.rstrip("/"),
            "priceRange": PRICE_RANGE,
        },
        "areaServed": _city_area(location),
        "audience": {
            "@type": "Audience",
            "audienceType": AUDIENCE_TYPES.get(category.id, "Residential and commercial property owners"),
        },
    }
