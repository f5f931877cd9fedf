import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower().strip() in ("1", "true", "yes", "on")


# Empty -> offline mode, every request is served by the fallback store
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
BASE_URL = os.getenv("BASE_URL", "http://localhost:8000").rstrip("/")

# Directory holding login.html, admin.html and the rest of the frontend
STATIC_DIR = os.getenv("STATIC_DIR", "frontend").strip() or "frontend"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Fallback store
FALLBACK_SAMPLE_DATA = _flag("FALLBACK_SAMPLE_DATA", "1")
# Keep the old fallback behaviour: no active/capacity checks, raw lists
FALLBACK_LEGACY_PARITY = _flag("FALLBACK_LEGACY_PARITY", "0")
# Record registrations in the fallback store when the live path blows up
ALLOW_DEGRADED_REGISTRATION = _flag("ALLOW_DEGRADED_REGISTRATION", "1")

# SendGrid
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY", "").strip()
# Must be a verified sender in SendGrid
EMAIL_USER = os.getenv("EMAIL_USER", "").strip()
EMAIL_EU_RESIDENCY = _flag("EMAIL_EU_RESIDENCY", "0")
REGISTRATION_EMAILS_ENABLED = _flag("REGISTRATION_EMAILS_ENABLED", "0")

# Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "").strip()
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "").strip()
STRIPE_CURRENCY = os.getenv("STRIPE_CURRENCY", "inr").lower().strip()
