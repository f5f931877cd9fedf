import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

DEFAULT_MAX_PARTICIPANTS = 100


def _new_id() -> str:
    return uuid.uuid4().hex


class Event(Base):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True, default=_new_id)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(String(40), nullable=False)
    time = Column(String(40), nullable=False)
    venue = Column(String(255), nullable=True)
    image = Column(String(1024), nullable=True)

    max_participants = Column(Integer, nullable=False, default=DEFAULT_MAX_PARTICIPANTS)
    is_active = Column(Boolean, nullable=False, default=True)

    created_by = Column(String(120), nullable=False, default="admin")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class EventRegistration(Base):
    __tablename__ = "event_registrations"

    id = Column(String(32), primary_key=True, default=_new_id)
    # No FK: events and registrations are linked by id only, cascade is done by the service
    event_id = Column(String(64), nullable=False, index=True)
    event_title = Column(String(255), nullable=False)

    registrant_name = Column(String(255), nullable=False)
    registrant_email = Column(String(255), nullable=False, index=True)
    registrant_phone = Column(String(80), nullable=False)
    registrant_class = Column(String(80), nullable=False)
    registrant_roll_no = Column(String(80), nullable=False)
    registrant_prn = Column(String(80), nullable=False)

    registration_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")  # pending/approved/rejected


# camelCase document key -> column attribute
EVENT_FIELDS = {
    "title": "title",
    "description": "description",
    "date": "date",
    "time": "time",
    "venue": "venue",
    "image": "image",
    "maxParticipants": "max_participants",
    "isActive": "is_active",
    "createdBy": "created_by",
}

REGISTRATION_FIELDS = {
    "eventId": "event_id",
    "eventTitle": "event_title",
    "registrantName": "registrant_name",
    "registrantEmail": "registrant_email",
    "registrantPhone": "registrant_phone",
    "registrantClass": "registrant_class",
    "registrantRollNo": "registrant_roll_no",
    "registrantPRN": "registrant_prn",
    "status": "status",
}


def event_to_dict(e: Event) -> dict:
    return {
        "_id": e.id,
        "title": e.title,
        "description": e.description,
        "date": e.date,
        "time": e.time,
        "venue": e.venue,
        "image": e.image,
        "maxParticipants": e.max_participants,
        "isActive": bool(e.is_active),
        "createdBy": e.created_by,
        "createdAt": e.created_at.isoformat() if e.created_at else None,
    }


def registration_to_dict(r: EventRegistration) -> dict:
    return {
        "_id": r.id,
        "eventId": r.event_id,
        "eventTitle": r.event_title,
        "registrantName": r.registrant_name,
        "registrantEmail": r.registrant_email,
        "registrantPhone": r.registrant_phone,
        "registrantClass": r.registrant_class,
        "registrantRollNo": r.registrant_roll_no,
        "registrantPRN": r.registrant_prn,
        "registrationDate": r.registration_date.isoformat() if r.registration_date else None,
        "status": r.status,
    }
