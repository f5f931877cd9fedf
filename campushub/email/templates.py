import html
from typing import Optional

from campushub.core.config import BASE_URL


def _esc(value) -> str:
    return html.escape(str(value)) if value is not None else "-"


def registration_confirmation_subject(registration: dict) -> str:
    return f"Registration received: {registration.get('eventTitle') or 'Event'}"


def registration_confirmation_html(registration: dict, event: Optional[dict] = None) -> str:
    """Email sent to a registrant once their registration is stored.

    ``event`` adds date/time/venue lines when the event is known.
    """
    event_lines = ""
    if event:
        event_lines = f"""
    <div>📅 <b>Date:</b> {_esc(event.get("date"))} {_esc(event.get("time"))}</div>
    <div>📍 <b>Venue:</b> {_esc(event.get("venue"))}</div>"""

    return f"""
<div style="font-family:Arial,sans-serif;max-width:640px;margin:0 auto;color:#111;">
  <h2 style="margin-bottom:4px;">{_esc(registration.get("eventTitle"))}</h2>
  <p>Hi <b>{_esc(registration.get("registrantName"))}</b>,</p>
  <p>
    we received your registration. A committee member will review it shortly,
    you will hear from us once it is approved.
  </p>
  <div style="border:1px solid #eee;border-radius:12px;padding:14px;background:#fafafa;">{event_lines}
    <div>🎓 <b>Class:</b> {_esc(registration.get("registrantClass"))}</div>
    <div>🪪 <b>Roll no:</b> {_esc(registration.get("registrantRollNo"))}</div>
    <div>🔖 <b>PRN:</b> {_esc(registration.get("registrantPRN"))}</div>
    <div>📞 <b>Phone:</b> {_esc(registration.get("registrantPhone"))}</div>
    <div>🧾 <b>Registration id:</b> {_esc(registration.get("_id"))}</div>
    <div>⏳ <b>Status:</b> {_esc(registration.get("status"))}</div>
  </div>
  <p style="font-size:12px;color:#777;margin-top:18px;">
    <a href="{BASE_URL}/" style="color:#666;">{html.escape(BASE_URL)}</a>
  </p>
</div>
"""
