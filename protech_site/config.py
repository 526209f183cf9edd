"""ProTech site configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

REPO_ROOT = Path(__file__).resolve().parent.parent

# Jinja2 templates for the public pages
WEB_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

# Site identity
PUBLIC_URL = os.environ.get("PUBLIC_URL", "https://protech-ohio.com").rstrip("/")
SITE_NAME = os.environ.get("SITE_NAME", "ProTech HVAC")
BUSINESS_PHONE = os.environ.get("BUSINESS_PHONE", "(330) 555-0142")

# Service region
TARGET_STATE_CODE = os.environ.get("TARGET_STATE_CODE", "OH").upper()
SITEMAP_CATEGORY_ALLOWLIST = tuple(
    c.strip()
    for c in os.environ.get("SITEMAP_CATEGORY_ALLOWLIST", "residential,commercial").split(",")
    if c.strip()
)

# Tracking is off outside production unless ENABLE_DEV_TRACKING is set
APP_ENV = os.environ.get("APP_ENV", "development")
ENABLE_DEV_TRACKING = os.environ.get("ENABLE_DEV_TRACKING", "false").lower() == "true"
TRACKING_ENABLED = APP_ENV == "production" or ENABLE_DEV_TRACKING
TRACKING_THROTTLE_MS = int(os.environ.get("TRACKING_THROTTLE_MS", "2000"))
TRACKING_RETENTION_MINUTES = int(os.environ.get("TRACKING_RETENTION_MINUTES", "30"))
TRACKING_CLEANUP_MINUTES = int(os.environ.get("TRACKING_CLEANUP_MINUTES", "10"))
TRACKING_MAX_EVENTS = int(os.environ.get("TRACKING_MAX_EVENTS", "500"))
SESSION_COOKIE = os.environ.get("SESSION_COOKIE", "ps_session")

# Meta Pixel / Conversions API
FB_PIXEL_ID = os.environ.get("FB_PIXEL_ID", "")
FB_ACCESS_TOKEN = os.environ.get("FB_ACCESS_TOKEN", "")
FB_API_VERSION = os.environ.get("FB_API_VERSION", "v18.0")

# Google Analytics (gtag)
GA_MEASUREMENT_ID = os.environ.get("GA_MEASUREMENT_ID", "")

# Google Places (reviews proxy)
GOOGLE_PLACES_API_KEY = os.environ.get("GOOGLE_PLACES_API_KEY", "")
GOOGLE_PLACE_ID = os.environ.get("GOOGLE_PLACE_ID", "")

# Twilio (lead SMS relay)
TWILIO_ACCOUNT_SID = os.environ.get("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.environ.get("TWILIO_AUTH_TOKEN", "")
TWILIO_PHONE_NUMBER = os.environ.get("TWILIO_PHONE_NUMBER", "")
OWNER_PHONE_NUMBER = os.environ.get("OWNER_PHONE_NUMBER", "")

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
