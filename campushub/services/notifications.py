from typing import Optional

from campushub.core.config import EMAIL_EU_RESIDENCY
from campushub.core.logging import log_evt
from campushub.email.sender import send_email
from campushub.email.templates import registration_confirmation_html, registration_confirmation_subject


def send_registration_confirmation(registration: dict, event: Optional[dict] = None) -> None:
    """Email the registrant. Raises on provider failure, callers decide whether that matters."""
    to_email = registration["registrantEmail"]
    try:
        message_id = send_email(
            to_email,
            registration_confirmation_subject(registration),
            registration_confirmation_html(registration, event),
            eu=EMAIL_EU_RESIDENCY,
        )
    except Exception:
        log_evt("error", "confirmation_failed", event_id=registration.get("eventId"), recipient=to_email)
        raise
    log_evt(
        "info",
        "confirmation_sent",
        event_id=registration.get("eventId"),
        recipient=to_email,
        provider_message_id=message_id,
    )
