#!/usr/bin/env python3
"""ProTech HVAC — public site.

Launch: python3 serve.py
Serves at http://0.0.0.0:8000 (or PORT env var)
"""

import uvicorn

from protech_site.config import (
    APP_ENV,
    FB_ACCESS_TOKEN,
    FB_PIXEL_ID,
    HOST,
    PORT,
    PUBLIC_URL,
    TRACKING_ENABLED,
)
from protech_site.services.contact import twilio_configured


def main():
    print("=" * 60)
    print("  ProTech HVAC — Public Site")
    print("=" * 60)

    # Warn about missing integrations, keep serving pages regardless
    if not twilio_configured():
        print("\n  WARNING: Twilio not configured. Contact forms will return 500.")
        print("    TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER, OWNER_PHONE_NUMBER")
    if not (FB_PIXEL_ID and FB_ACCESS_TOKEN):
        print("\n  WARNING: FB_PIXEL_ID / FB_ACCESS_TOKEN not set. Conversions API relay disabled.")

    print(f"\n  Environment: {APP_ENV} (tracking {'on' if TRACKING_ENABLED else 'off'})")
    print(f"  Public URL:  {PUBLIC_URL}")
    print(f"  Listening:   http://{HOST}:{PORT}")
    print("  Press Ctrl+C to stop\n")

    from protech_site.app import create_app
    app = create_app()
    uvicorn.run(app, host=HOST, port=PORT, log_level="info")


if __name__ == "__main__":
    main()
