"""Core data shapes — service taxonomy, locations, sitemap entries.

Taxonomy and location definitions are written as plain dicts in their data
modules and parsed into these frozen dataclasses once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ServiceItem:
    id: str
    name: str
    icon: str = ""
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceItem":
        return cls(
            id=data.get("id") or "",
            name=data.get("name", ""),
            icon=data.get("icon", ""),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class ServiceType:
    """A kind of work (repairs, installations...) offered for a system.

    ``allow_empty_items`` marks types such as emergency service that are real
    offerings without item-level pages.
    """
    id: str
    name: str
    icon: str = ""
    description: Optional[str] = None
    items: tuple[ServiceItem, ...] = ()
    allow_empty_items: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceType":
        return cls(
            id=data.get("id") or "",
            name=data.get("name", ""),
            icon=data.get("icon", ""),
            description=data.get("description"),
            items=tuple(ServiceItem.from_dict(i) for i in data.get("items", [])),
            allow_empty_items=bool(data.get("allow_empty_items", False)),
        )


@dataclass(frozen=True)
class ServiceSystem:
    id: str
    name: str
    icon: str = ""
    description: Optional[str] = None
    service_types: tuple[ServiceType, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceSystem":
        return cls(
            id=data.get("id") or "",
            name=data.get("name", ""),
            icon=data.get("icon", ""),
            description=data.get("description"),
            service_types=tuple(ServiceType.from_dict(t) for t in data.get("service_types", [])),
        )


@dataclass(frozen=True)
class ServiceCategory:
    id: str
    name: str
    description: str = ""
    systems: tuple[ServiceSystem, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceCategory":
        return cls(
            id=data.get("id") or "",
            name=data.get("name", ""),
            description=data.get("description", ""),
            systems=tuple(ServiceSystem.from_dict(s) for s in data.get("systems", [])),
        )


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Location:
    """A service-area city. ``id`` is a slug such as ``akron-oh``."""
    id: str
    name: str
    county: str
    state_code: str
    zip_codes: tuple[str, ...] = ()
    coordinates: Optional[Coordinates] = None
    primary: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        coords = data.get("coordinates")
        return cls(
            id=data.get("id") or "",
            name=data.get("name", ""),
            county=data.get("county", ""),
            state_code=(data.get("state_code") or "").upper(),
            zip_codes=tuple(data.get("zip_codes", [])),
            coordinates=Coordinates(coords["latitude"], coords["longitude"]) if coords else None,
            primary=bool(data.get("primary", False)),
        )


# Sitemap buckets, in emitted order
DETAIL = "detail"
STATIC = "static"
CATEGORY = "category"
LOCATION = "location"
BUCKETS = (DETAIL, STATIC, CATEGORY, LOCATION)

WEEKLY = "weekly"
MONTHLY = "monthly"
CHANGE_FREQUENCIES = (WEEKLY, MONTHLY)


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    last_modified: str
    change_frequency: str
    priority: float
    canonical: bool = True
    bucket: str = DETAIL

    def __post_init__(self) -> None:
        if self.change_frequency not in CHANGE_FREQUENCIES:
            raise ValueError(f"Unsupported change frequency: {self.change_frequency}")
        if not 0.0 <= self.priority <= 1.0:
            raise ValueError(f"Priority out of range: {self.priority}")


@dataclass(frozen=True)
class Exclusion:
    """Something the sitemap generator skipped, and why."""
    kind: str
    identifier: str
    reason: str


@dataclass
class SitemapResult:
    entries: list[SitemapEntry] = field(default_factory=list)
    exclusions: list[Exclusion] = field(default_factory=list)

    @property
    def urls(self) -> list[str]:
        return [e.url for e in self.entries]

    def stats(self) -> dict:
        """Total and per-bucket counts, derived from the entries."""
        counts = {bucket: 0 for bucket in BUCKETS}
        for entry in self.entries:
            counts[entry.bucket] = counts.get(entry.bucket, 0) + 1
        return {
            "total": len(self.entries),
            **counts,
            "excluded": len(self.exclusions),
        }
