from typing import Optional

from fastapi import APIRouter, Depends

from campushub.api.deps import get_event_service
from campushub.api.schemas import EventCreate, EventUpdate, RegistrationRequest, StatusUpdate
from campushub.core.config import REGISTRATION_EMAILS_ENABLED
from campushub.core.logging import logger
from campushub.core.security import require_admin
from campushub.services.events import DEGRADED, FALLBACK, EventService
from campushub.services.notifications import send_registration_confirmation

router = APIRouter(prefix="/api/events", tags=["events"])

_SUFFIX = {
    FALLBACK: " (mock data)",
    DEGRADED: " (fallback to mock data)",
}


@router.get("")
def list_events(service: EventService = Depends(get_event_service)):
    return service.list_events()


@router.get("/admin-stats")
def event_stats():
    return {
        "totalEvents": 12,
        "upcomingEvents": 5,
        "totalRegistrations": 89,
        "popularEvents": [
            {"id": "1", "title": "Tech Workshop", "registrations": 45},
            {"id": "2", "title": "Cultural Night", "registrations": 32},
            {"id": "3", "title": "Sports Tournament", "registrations": 28},
        ],
    }


@router.get("/admin/all-registrations")
def list_all_registrations(
    service: EventService = Depends(get_event_service),
    _: None = Depends(require_admin),
):
    return service.list_all_registrations()


@router.get("/{event_id}")
def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    return service.get_event(event_id)


@router.post("", status_code=201)
def create_event(
    payload: EventCreate,
    service: EventService = Depends(get_event_service),
    _: None = Depends(require_admin),
):
    outcome = service.create_event(payload.model_dump(exclude_none=True))
    return {
        "message": "Event created successfully" + _SUFFIX.get(outcome.source, ""),
        "event": outcome.document,
    }


@router.put("/{event_id}")
def update_event(
    event_id: str,
    payload: EventUpdate,
    service: EventService = Depends(get_event_service),
    _: None = Depends(require_admin),
):
    event = service.update_event(event_id, payload.model_dump(exclude_unset=True))
    return {"message": "Event updated successfully", "event": event}


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
    _: None = Depends(require_admin),
):
    service.delete_event(event_id)
    return {"message": "Event deleted successfully"}


@router.get("/{event_id}/registrations")
def list_event_registrations(
    event_id: str,
    service: EventService = Depends(get_event_service),
    _: None = Depends(require_admin),
):
    return service.list_registrations_for_event(event_id)


@router.post("/{event_id}/register", status_code=201)
def register_for_event(
    event_id: str,
    payload: RegistrationRequest,
    service: EventService = Depends(get_event_service),
):
    data = payload.model_dump()
    data["registrantEmail"] = str(payload.registrantEmail)

    outcome = service.register_for_event(event_id, data)

    if REGISTRATION_EMAILS_ENABLED:
        try:
            send_registration_confirmation(outcome.document, outcome.event)
        except Exception:
            logger.exception("CONFIRMATION EMAIL FAILED")

    return {
        "message": "Registration successful" + _SUFFIX.get(outcome.source, ""),
        "registrationId": outcome.document["_id"],
    }


@router.put("/registrations/{registration_id}/status")
def update_registration_status(
    registration_id: str,
    payload: Optional[StatusUpdate] = None,
    service: EventService = Depends(get_event_service),
    _: None = Depends(require_admin),
):
    registration = service.update_registration_status(registration_id, payload.status if payload else None)
    return {"message": "Registration status updated", "registration": registration}
