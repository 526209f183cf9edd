"""Service locations — cities, counties and ZIP codes ProTech covers.

Also holds the shared location checks used by the sitemap and the page
routes (region eligibility, slug convention), plus nearest-location and
ZIP service-area lookups.
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional

from protech_site.models import Location

_LOCATIONS = [
    # Summit County
    {"id": "akron-oh", "name": "Akron", "county": "Summit County", "state_code": "OH",
     "zip_codes": ["44301", "44302", "44303", "44304", "44305", "44306", "44307", "44308",
                   "44310", "44311", "44312", "44313", "44314", "44319", "44320", "44321",
                   "44325", "44326", "44328"],
     "coordinates": {"latitude": 41.0814, "longitude": -81.5190}, "primary": True},
    {"id": "cuyahoga-falls-oh", "name": "Cuyahoga Falls", "county": "Summit County", "state_code": "OH",
     "zip_codes": ["44221", "44223"],
     "coordinates": {"latitude": 41.1339, "longitude": -81.4846}},
    {"id": "stow-oh", "name": "Stow", "county": "Summit County", "state_code": "OH",
     "zip_codes": ["44224"],
     "coordinates": {"latitude": 41.1595, "longitude": -81.4404}},
    {"id": "tallmadge-oh", "name": "Tallmadge", "county": "Summit County", "state_code": "OH",
     "zip_codes": ["44278"],
     "coordinates": {"latitude": 41.1014, "longitude": -81.4418}},
    {"id": "hudson-oh", "name": "Hudson", "county": "Summit County", "state_code": "OH",
     "zip_codes": ["44236", "44237"],
     "coordinates": {"latitude": 41.2401, "longitude": -81.4407}},
    {"id": "norton-oh", "name": "Norton", "county": "Summit County", "state_code": "OH",
     "zip_codes": ["44203"],
     "coordinates": {"latitude": 41.0290, "longitude": -81.6382}},
    # Medina County
    {"id": "medina-oh", "name": "Medina", "county": "Medina County", "state_code": "OH",
     "zip_codes": ["44256"],
     "coordinates": {"latitude": 41.1384, "longitude": -81.8637}},
    {"id": "wadsworth-oh", "name": "Wadsworth", "county": "Medina County", "state_code": "OH",
     "zip_codes": ["44281"],
     "coordinates": {"latitude": 41.0256, "longitude": -81.7299}},
    {"id": "seville-oh", "name": "Seville", "county": "Medina County", "state_code": "OH",
     "zip_codes": ["44273"],
     "coordinates": {"latitude": 41.0103, "longitude": -81.8624}},
    {"id": "brunswick-oh", "name": "Brunswick", "county": "Medina County", "state_code": "OH",
     "zip_codes": ["44212"],
     "coordinates": {"latitude": 41.2381, "longitude": -81.8418}},
    {"id": "lodi-oh", "name": "Lodi", "county": "Medina County", "state_code": "OH",
     "zip_codes": ["44254"],
     "coordinates": {"latitude": 40.9834, "longitude": -82.0121}},
    {"id": "rittman-oh", "name": "Rittman", "county": "Medina County", "state_code": "OH",
     "zip_codes": ["44270"],
     "coordinates": {"latitude": 40.9781, "longitude": -81.7821}},
    # Wayne County
    {"id": "wooster-oh", "name": "Wooster", "county": "Wayne County", "state_code": "OH",
     "zip_codes": ["44691"],
     "coordinates": {"latitude": 40.8051, "longitude": -81.9351}},
    {"id": "orrville-oh", "name": "Orrville", "county": "Wayne County", "state_code": "OH",
     "zip_codes": ["44667"],
     "coordinates": {"latitude": 40.8437, "longitude": -81.7640}},
    {"id": "smithville-oh", "name": "Smithville", "county": "Wayne County", "state_code": "OH",
     "zip_codes": ["44677"],
     "coordinates": {"latitude": 40.8623, "longitude": -81.8618}},
    {"id": "fredericksburg-oh", "name": "Fredericksburg", "county": "Wayne County", "state_code": "OH",
     "zip_codes": ["44627"],
     "coordinates": {"latitude": 40.6767, "longitude": -81.8682}},
    {"id": "doylestown-oh", "name": "Doylestown", "county": "Wayne County", "state_code": "OH",
     "zip_codes": ["44230"],
     "coordinates": {"latitude": 40.9700, "longitude": -81.6965}},
    # Cuyahoga and Stark counties
    {"id": "cleveland-oh", "name": "Cleveland", "county": "Cuyahoga County", "state_code": "OH",
     "zip_codes": ["44101", "44102", "44103", "44104", "44105", "44106", "44107", "44108",
                   "44109", "44110", "44111", "44112", "44113", "44114"],
     "coordinates": {"latitude": 41.4993, "longitude": -81.6944}},
    {"id": "canton-oh", "name": "Canton", "county": "Stark County", "state_code": "OH",
     "zip_codes": ["44702", "44703", "44704", "44705", "44706", "44707", "44708", "44709",
                   "44710", "44714", "44718"],
     "coordinates": {"latitude": 40.7989, "longitude": -81.3784}},
]

SERVICE_LOCATIONS: tuple[Location, ...] = tuple(Location.from_dict(loc) for loc in _LOCATIONS)

_ZIP_RE = re.compile(r"^\d{5}$")
_EARTH_RADIUS_KM = 6371.0


def load_locations(raw: list[dict]) -> tuple[Location, ...]:
    return tuple(Location.from_dict(loc) for loc in raw)


def region_suffix(state_code: str) -> str:
    """Slug suffix locations in a region must carry, e.g. ``-oh``."""
    return f"-{state_code.lower()}"


def location_exclusion_reason(location: Location, state_code: str) -> Optional[str]:
    """Why a location is not eligible for the target region, or None if it is."""
    if not location.id or not location.id.strip():
        return "empty_id"
    if location.state_code != state_code.upper():
        return "outside_region"
    if not location.id.endswith(region_suffix(state_code)):
        return "slug_suffix_mismatch"
    return None


def is_eligible_location(location: Location, state_code: str) -> bool:
    return location_exclusion_reason(location, state_code) is None


def eligible_locations(
    state_code: str,
    locations: Iterable[Location] = SERVICE_LOCATIONS,
) -> list[Location]:
    """Locations that may appear in public output for a region, in input order."""
    return [loc for loc in locations if is_eligible_location(loc, state_code)]


def get_location(
    location_id: str,
    locations: Iterable[Location] = SERVICE_LOCATIONS,
) -> Optional[Location]:
    for loc in locations:
        if loc.id == location_id:
            return loc
    return None


def location_display_name(slug: str) -> str:
    """``cuyahoga-falls-oh`` → ``Cuyahoga Falls OH``."""
    words = [w for w in slug.split("-") if w]
    if not words:
        return ""
    *name_parts, last = words
    if len(last) == 2 and name_parts:
        return " ".join([*(w.capitalize() for w in name_parts), last.upper()])
    return " ".join(w.capitalize() for w in words)


def _haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return _EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def find_nearest_location(
    latitude: float,
    longitude: float,
    locations: Iterable[Location] = SERVICE_LOCATIONS,
) -> Optional[Location]:
    """Closest location with coordinates. Ties keep input order."""
    best = None
    best_distance = math.inf
    for loc in locations:
        if loc.coordinates is None:
            continue
        distance = _haversine_km(
            latitude, longitude, loc.coordinates.latitude, loc.coordinates.longitude,
        )
        if distance < best_distance:
            best, best_distance = loc, distance
    return best


def service_area_for_zip(
    zip_code: str,
    locations: Iterable[Location] = SERVICE_LOCATIONS,
) -> Optional[dict]:
    """Return ``{zip, city, county, location_id}`` if the ZIP is served, else None."""
    zip_code = (zip_code or "").strip()
    if not _ZIP_RE.match(zip_code):
        return None
    for loc in locations:
        if zip_code in loc.zip_codes:
            return {
                "zip": zip_code,
                "city": loc.name,
                "county": loc.county,
                "location_id": loc.id,
            }
    return None
