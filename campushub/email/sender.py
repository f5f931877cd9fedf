import requests

from campushub.core.config import EMAIL_EU_RESIDENCY, EMAIL_USER, SENDGRID_API_KEY
from campushub.core.logging import logger

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"
SENDGRID_EU_URL = "https://api.eu.sendgrid.com/v3/mail/send"


def _check_credentials() -> None:
    if not SENDGRID_API_KEY or not SENDGRID_API_KEY.startswith("SG."):
        raise RuntimeError("Invalid SENDGRID_API_KEY: set it in the environment")
    if not EMAIL_USER:
        raise RuntimeError("EMAIL_USER not set: configure a verified sender address")


def send_email(to_email: str, subject: str, body_html: str, eu: bool = False):
    """Send an HTML email through SendGrid, returning the provider message id.

    ``eu`` routes the request through SendGrid's EU data residency endpoint.
    """
    _check_credentials()
    r = requests.post(
        SENDGRID_EU_URL if eu else SENDGRID_URL,
        headers={
            "Authorization": f"Bearer {SENDGRID_API_KEY}",
            "Content-Type": "application/json",
        },
        json={
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {"email": EMAIL_USER},
            "subject": subject,
            "content": [{"type": "text/html", "value": body_html}],
        },
        timeout=20,
    )
    if not r.ok:
        logger.error("SendGrid error: status=%s body=%s", r.status_code, r.text[:500])
    r.raise_for_status()
    logger.info("Email sent to %s (status %s)", to_email, r.status_code)
    return r.headers.get("X-Message-Id")
