"""Service taxonomy registry — loads category definitions and exports SERVICE_CATEGORIES."""

from __future__ import annotations

from typing import Iterator, Optional

from protech_site.models import (
    ServiceCategory,
    ServiceItem,
    ServiceSystem,
    ServiceType,
)
from protech_site.taxonomy.commercial import CATEGORY as commercial
from protech_site.taxonomy.residential import CATEGORY as residential

SERVICE_CATEGORIES: tuple[ServiceCategory, ...] = tuple(
    ServiceCategory.from_dict(c) for c in (residential, commercial)
)


def load_taxonomy(raw: list[dict]) -> tuple[ServiceCategory, ...]:
    """Parse a list of category dicts into dataclasses."""
    return tuple(ServiceCategory.from_dict(c) for c in raw)


def get_category(
    category_id: str,
    taxonomy: tuple[ServiceCategory, ...] = SERVICE_CATEGORIES,
) -> Optional[ServiceCategory]:
    """Get a category definition by ID."""
    for category in taxonomy:
        if category.id == category_id:
            return category
    return None


def find_service(
    category_id: str,
    system_id: str,
    service_type_id: str,
    item_id: str,
    taxonomy: tuple[ServiceCategory, ...] = SERVICE_CATEGORIES,
) -> Optional[tuple[ServiceCategory, ServiceSystem, ServiceType, ServiceItem]]:
    """Resolve a full category → system → type → item path, or None."""
    category = get_category(category_id, taxonomy)
    if not category:
        return None
    system = next((s for s in category.systems if s.id == system_id), None)
    if not system:
        return None
    service_type = next((t for t in system.service_types if t.id == service_type_id), None)
    if not service_type:
        return None
    item = next((i for i in service_type.items if i.id == item_id), None)
    if not item:
        return None
    return category, system, service_type, item


def iter_leaf_services(
    taxonomy: tuple[ServiceCategory, ...] = SERVICE_CATEGORIES,
) -> Iterator[tuple[ServiceCategory, ServiceSystem, ServiceType, ServiceItem]]:
    """Walk every (category, system, type, item) path in taxonomy order."""
    for category in taxonomy:
        for system in category.systems:
            for service_type in system.service_types:
                for item in service_type.items:
                    yield category, system, service_type, item
