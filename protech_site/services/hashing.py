"""Customer-data hashing for the Meta Conversions API.

Meta requires PII in ``user_data`` to be SHA-256 hashed (lowercased and
trimmed first). Richer, correctly hashed identity improves Event Match
Quality. Hashing always happens before anything leaves the process.
"""

import hashlib
import re

# Conversions API user_data keys that must be hashed
HASHED_FIELDS = ("em", "ph", "fn", "ln", "ct", "st", "zp", "external_id")

_SHA256_HEX_RE = re.compile(r"^[0-9a-f]{64}$")
_ZIP_RE = re.compile(r"^\d{5}$")


def sha256_normalized(value: str) -> str:
    """SHA-256 hex digest of the lowercased, trimmed value."""
    return hashlib.sha256(value.strip().lower().encode("utf-8")).hexdigest()


def is_hashed(value: str) -> bool:
    return bool(_SHA256_HEX_RE.match(value))


def _normalize_phone(value: str) -> str:
    return re.sub(r"\D", "", value)


def hash_user_data(user_data: dict) -> dict:
    """Return a copy of ``user_data`` with every PII field hashed.

    Already-hashed values (64 lowercase hex chars) pass through unchanged.
    Empty values are dropped. Non-PII keys (fbp, fbc, client_ip_address,
    client_user_agent, country) are copied as-is.
    """
    hashed = {}
    for key, value in user_data.items():
        if value is None or value == "":
            continue
        if key not in HASHED_FIELDS:
            hashed[key] = value
            continue
        value = str(value)
        if is_hashed(value):
            hashed[key] = value
            continue
        if key == "ph":
            value = _normalize_phone(value)
            if not value:
                continue
        hashed[key] = sha256_normalized(value)
    return hashed


def parse_full_name(full_name: str) -> tuple[str, str]:
    """Split a full name into (first, last). Everything after the first word is the last name."""
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def parse_location(location: str) -> dict:
    """Parse ``"Cleveland, OH"`` or ``"44101"`` into city/state/zip."""
    location = (location or "").strip()
    if _ZIP_RE.match(location):
        return {"city": "", "state": "", "zip": location}

    parts = [p.strip() for p in location.split(",")]
    if len(parts) >= 2:
        return {"city": parts[0], "state": parts[1], "zip": ""}

    return {"city": "", "state": "", "zip": ""}
