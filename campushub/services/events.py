"""Event service - all event and registration business logic lives here.

The service talks to two stores through the same ``EventStore`` interface: the
live database store and the in-memory fallback store. Per call it probes
``live.is_connected()`` once and picks a backend; store failures on the list,
create and register paths degrade to the fallback store, everywhere else they
become ``OperationFailed``.
"""

from dataclasses import dataclass
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from campushub.core.errors import (
    Conflict,
    InvalidInput,
    NotFound,
    OperationFailed,
    ServiceError,
    StoreError,
    ValidationError,
)
from campushub.core.logging import log_evt, logger
from campushub.db.models import DEFAULT_MAX_PARTICIPANTS
from campushub.db.stores import EventStore

# Where a write ended up
LIVE = "live"
FALLBACK = "fallback"  # database offline
DEGRADED = "degraded"  # database (or something else) failed mid-request

REGISTRATION_STATUSES = ("pending", "approved", "rejected")

UNKNOWN_EVENT_TITLE = "Unknown Event"

EVENT_REQUIRED = {
    "title": "Title is required",
    "description": "Description is required",
    "date": "Date is required",
    "time": "Time is required",
}

REGISTRATION_REQUIRED = {
    "registrantName": "Name is required",
    "registrantPhone": "Phone is required",
    "registrantClass": "Class is required",
    "registrantRollNo": "Roll number is required",
    "registrantPRN": "PRN is required",
}

EMAIL_MESSAGE = "Valid email is required"

REGISTRANT_FIELDS = tuple(REGISTRATION_REQUIRED) + ("registrantEmail",)


@dataclass
class Outcome:
    document: dict
    source: str = LIVE
    # The event a registration was taken for, when known
    event: Optional[dict] = None


def _missing(data: dict, required: dict) -> list:
    errors = []
    for field, msg in required.items():
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value):
            errors.append({"field": field, "msg": msg})
    return errors


def _email_valid(value) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class EventService:
    def __init__(
        self,
        live: EventStore,
        fallback: EventStore,
        allow_degraded_registration: bool = True,
        legacy_parity: bool = False,
    ) -> None:
        self._live = live
        self._fallback = fallback
        self.allow_degraded_registration = allow_degraded_registration
        # Legacy parity: the fallback path skips active/capacity checks and
        # returns its lists unfiltered and unsorted
        self.legacy_parity = legacy_parity

    # Events

    def list_events(self) -> list[dict]:
        try:
            if self._live.is_connected():
                return self._live.find_events(active_only=True, newest_first=True)
            log_evt("info", "fallback_used", op="list_events", reason="offline")
        except StoreError as ex:
            logger.error("Error fetching events: %s", ex)
            log_evt("warning", "fallback_used", op="list_events", reason="store_error")

        strict = not self.legacy_parity
        return self._fallback.find_events(active_only=strict, newest_first=strict)

    def get_event(self, event_id: str) -> dict:
        try:
            event = self._live.find_event(event_id)
        except StoreError as ex:
            logger.error("Error fetching event %s: %s", event_id, ex)
            raise OperationFailed("Failed to fetch event") from ex
        if event is None:
            raise NotFound("Event not found")
        return event

    def create_event(self, data: dict) -> Outcome:
        errors = _missing(data, EVENT_REQUIRED)
        if errors:
            raise ValidationError(errors)

        doc = dict(data)
        doc["createdBy"] = data.get("createdBy") or "admin"

        try:
            if self._live.is_connected():
                event = self._live.create_event(doc)
                log_evt("info", "event_created", event_id=event["_id"], backend=LIVE)
                return Outcome(event, LIVE)
            source = FALLBACK
        except StoreError as ex:
            logger.error("Error creating event: %s", ex)
            source = DEGRADED

        event = self._fallback.create_event(doc)
        log_evt("warning", "event_created", event_id=event["_id"], backend=source)
        return Outcome(event, source)

    def update_event(self, event_id: str, patch: dict) -> dict:
        try:
            event = self._live.update_event(event_id, patch)
        except StoreError as ex:
            logger.error("Error updating event %s: %s", event_id, ex)
            raise OperationFailed("Failed to update event") from ex
        if event is None:
            raise NotFound("Event not found")
        log_evt("info", "event_updated", event_id=event_id, fields=",".join(sorted(patch)) or None)
        return event

    def delete_event(self, event_id: str) -> int:
        """Delete the event and every registration pointing at it; returns how many registrations went."""
        try:
            if not self._live.delete_event(event_id):
                raise NotFound("Event not found")
            removed = self._live.delete_registrations_for_event(event_id)
        except StoreError as ex:
            logger.error("Error deleting event %s: %s", event_id, ex)
            raise OperationFailed("Failed to delete event") from ex
        log_evt("info", "event_deleted", event_id=event_id, registrations_removed=removed)
        return removed

    # Registrations

    def list_registrations_for_event(self, event_id: str) -> list[dict]:
        try:
            return self._live.find_registrations(event_id=event_id, newest_first=True)
        except StoreError as ex:
            logger.error("Error fetching registrations for %s: %s", event_id, ex)
            raise OperationFailed("Failed to fetch registrations") from ex

    def list_all_registrations(self) -> list[dict]:
        try:
            if self._live.is_connected():
                return self._live.find_registrations_with_events(newest_first=True)
            log_evt("info", "fallback_used", op="list_all_registrations", reason="offline")
        except StoreError as ex:
            logger.error("Error fetching all registrations: %s", ex)
            log_evt("warning", "fallback_used", op="list_all_registrations", reason="store_error")

        if self.legacy_parity:
            return self._fallback.find_registrations()
        return self._fallback.find_registrations_with_events(newest_first=True)

    def register_for_event(self, event_id: str, data: dict) -> Outcome:
        errors = _missing(data, REGISTRATION_REQUIRED)
        if not _email_valid(data.get("registrantEmail")):
            errors.append({"field": "registrantEmail", "msg": EMAIL_MESSAGE})
        if errors:
            raise ValidationError(errors)

        registrant = {k: data[k] for k in REGISTRANT_FIELDS}

        try:
            if self._live.is_connected():
                return self._register_live(event_id, registrant)
            return self._register_fallback(event_id, registrant)
        except ServiceError:
            raise
        except Exception as ex:
            logger.exception("Error registering for event %s", event_id)
            if not self.allow_degraded_registration:
                raise OperationFailed("Failed to register for event") from ex
            return self._register_degraded(event_id, registrant)

    def _already_registered(self, event_id: str, email: str, store: EventStore) -> bool:
        if store.find_registration(event_id, email) is not None:
            return True
        # Registrations taken while the database was down live in the fallback store
        return store is not self._fallback and self._fallback.find_registration(event_id, email) is not None

    def _check_open(self, event: dict, store: EventStore, email: str, full_checks: bool) -> None:
        event_id = event["_id"]
        if full_checks and not event.get("isActive", True):
            log_evt("info", "registration_rejected", event_id=event_id, reason="inactive")
            raise Conflict("Event is currently inactive")

        if self._already_registered(event_id, email, store):
            log_evt("info", "registration_rejected", event_id=event_id, reason="duplicate", email=email)
            raise Conflict("You are already registered for this event")

        if full_checks:
            limit = event.get("maxParticipants")
            if limit is None:
                limit = DEFAULT_MAX_PARTICIPANTS
            taken = store.count_registrations(event_id)
            if store is not self._fallback:
                taken += self._fallback.count_registrations(event_id)
            if taken >= limit:
                log_evt("info", "registration_rejected", event_id=event_id, reason="full")
                raise Conflict("Event is full")

    def _register_live(self, event_id: str, registrant: dict) -> Outcome:
        event = self._live.find_event(event_id)
        if event is None:
            raise NotFound("Event not found")
        self._check_open(event, self._live, registrant["registrantEmail"], full_checks=True)

        registration = self._live.create_registration(
            {**registrant, "eventId": event_id, "eventTitle": event["title"]}
        )
        log_evt("info", "registration_created", event_id=event_id, backend=LIVE, registration_id=registration["_id"])
        return Outcome(registration, LIVE, event)

    def _register_fallback(self, event_id: str, registrant: dict) -> Outcome:
        log_evt("info", "fallback_used", event_id=event_id, op="register", reason="offline")
        event = self._fallback.find_event(event_id)
        if event is None:
            raise NotFound("Event not found")
        self._check_open(
            event, self._fallback, registrant["registrantEmail"], full_checks=not self.legacy_parity
        )

        registration = self._fallback.create_registration(
            {**registrant, "eventId": event_id, "eventTitle": event.get("title")}
        )
        log_evt("info", "registration_created", event_id=event_id, backend=FALLBACK, registration_id=registration["_id"])
        return Outcome(registration, FALLBACK, event)

    def _register_degraded(self, event_id: str, registrant: dict) -> Outcome:
        if self._fallback.find_registration(event_id, registrant["registrantEmail"]) is not None:
            raise Conflict("You are already registered for this event")

        registration = self._fallback.create_registration(
            {**registrant, "eventId": event_id, "eventTitle": UNKNOWN_EVENT_TITLE}
        )
        log_evt("warning", "registration_created", event_id=event_id, backend=DEGRADED, registration_id=registration["_id"])
        return Outcome(registration, DEGRADED)

    def update_registration_status(self, registration_id: str, status: Optional[str]) -> dict:
        if status not in REGISTRATION_STATUSES:
            raise InvalidInput("Invalid status")
        try:
            registration = self._live.update_registration_status(registration_id, status)
        except StoreError as ex:
            logger.error("Error updating registration %s: %s", registration_id, ex)
            raise OperationFailed("Failed to update registration status") from ex
        if registration is None:
            raise NotFound("Registration not found")
        log_evt("info", "registration_status_updated", registration_id=registration_id, status=status)
        return registration

    def store_connected(self) -> bool:
        return self._live.is_connected()

    def health(self) -> dict:
        connected = self.store_connected()
        return {
            "ok": True,
            "store": "connected" if connected else "offline",
            "fallback": {
                "events": len(self._fallback.find_events()),
                "registrations": len(self._fallback.find_registrations()),
            },
        }
