import copy
import itertools
from datetime import datetime
from typing import Optional

from campushub.db.models import DEFAULT_MAX_PARTICIPANTS
from campushub.db.stores import EventStore, event_summary

SAMPLE_EVENTS = [
    {
        "_id": "mock1",
        "title": "Tech Workshop",
        "description": "Learn the latest in web development",
        "date": "2024-01-15",
        "time": "10:00 AM",
        "venue": "Computer Lab",
        "image": "https://via.placeholder.com/400x200?text=Tech+Workshop",
        "createdBy": "admin",
    },
    {
        "_id": "mock2",
        "title": "Cultural Festival",
        "description": "Annual cultural celebration with performances",
        "date": "2024-01-20",
        "time": "6:00 PM",
        "venue": "Main Auditorium",
        "image": "https://via.placeholder.com/400x200?text=Cultural+Festival",
        "createdBy": "admin",
    },
]

SAMPLE_REGISTRATIONS = [
    {
        "_id": "reg1",
        "eventId": "mock1",
        "eventTitle": "Tech Workshop",
        "registrantName": "John Doe",
        "registrantEmail": "john@example.com",
        "registrantPhone": "1234567890",
        "registrantClass": "CS-3",
        "registrantRollNo": "CS2023001",
        "registrantPRN": "PRN123456",
        "status": "pending",
    },
]


def _now() -> str:
    return datetime.utcnow().isoformat()


class FallbackStore(EventStore):
    """Process-local stand-in for the database.

    Keeps the service answering while the database is down; nothing survives a
    restart. Every lookup is a linear scan over a handful of documents.
    """

    def __init__(self, events: Optional[list] = None, registrations: Optional[list] = None):
        stamp = _now()
        self._events = [dict(e, createdAt=e.get("createdAt", stamp)) for e in copy.deepcopy(events or [])]
        self._registrations = [
            dict(r, registrationDate=r.get("registrationDate", stamp)) for r in copy.deepcopy(registrations or [])
        ]
        self._event_seq = itertools.count(len(self._events) + 1)
        self._registration_seq = itertools.count(len(self._registrations) + 1)

    @classmethod
    def with_sample_data(cls) -> "FallbackStore":
        return cls(events=SAMPLE_EVENTS, registrations=SAMPLE_REGISTRATIONS)

    def is_connected(self) -> bool:
        return True

    def _next_id(self, prefix: str, seq, existing: list) -> str:
        taken = {doc["_id"] for doc in existing}
        while True:
            candidate = f"{prefix}{next(seq)}"
            if candidate not in taken:
                return candidate

    # Events

    def find_events(self, active_only: bool = False, newest_first: bool = False) -> list[dict]:
        events = [dict(e) for e in self._events]
        if active_only:
            events = [e for e in events if e.get("isActive", True)]
        if newest_first:
            events.sort(key=lambda e: e.get("createdAt") or "", reverse=True)
        return events

    def find_event(self, event_id: str) -> Optional[dict]:
        for e in self._events:
            if e["_id"] == event_id:
                return dict(e)
        return None

    def create_event(self, data: dict) -> dict:
        event = {
            "isActive": True,
            "maxParticipants": DEFAULT_MAX_PARTICIPANTS,
            **data,
            "_id": self._next_id("mock", self._event_seq, self._events),
            "createdAt": _now(),
        }
        self._events.append(event)
        return dict(event)

    def update_event(self, event_id: str, patch: dict) -> Optional[dict]:
        for e in self._events:
            if e["_id"] == event_id:
                e.update({k: v for k, v in patch.items() if k not in ("_id", "createdAt")})
                return dict(e)
        return None

    def delete_event(self, event_id: str) -> bool:
        for i, e in enumerate(self._events):
            if e["_id"] == event_id:
                del self._events[i]
                return True
        return False

    # Registrations

    def find_registrations(self, event_id: Optional[str] = None, newest_first: bool = False) -> list[dict]:
        regs = [dict(r) for r in self._registrations if event_id is None or r.get("eventId") == event_id]
        if newest_first:
            regs.sort(key=lambda r: r.get("registrationDate") or "", reverse=True)
        return regs

    def find_registrations_with_events(self, newest_first: bool = False) -> list[dict]:
        items = []
        for r in self.find_registrations(newest_first=newest_first):
            r["eventId"] = event_summary(self.find_event(r.get("eventId")), r.get("eventId"))
            items.append(r)
        return items

    def find_registration_by_id(self, registration_id: str) -> Optional[dict]:
        for r in self._registrations:
            if r["_id"] == registration_id:
                return dict(r)
        return None

    def find_registration(self, event_id: str, email: str) -> Optional[dict]:
        for r in self._registrations:
            if r.get("eventId") == event_id and r.get("registrantEmail") == email:
                return dict(r)
        return None

    def count_registrations(self, event_id: str) -> int:
        return sum(1 for r in self._registrations if r.get("eventId") == event_id)

    def create_registration(self, data: dict) -> dict:
        registration = {
            **data,
            "_id": self._next_id("reg", self._registration_seq, self._registrations),
            "registrationDate": _now(),
            "status": "pending",
        }
        self._registrations.append(registration)
        return dict(registration)

    def update_registration_status(self, registration_id: str, status: str) -> Optional[dict]:
        for r in self._registrations:
            if r["_id"] == registration_id:
                r["status"] = status
                return dict(r)
        return None

    def delete_registrations_for_event(self, event_id: str) -> int:
        before = len(self._registrations)
        self._registrations = [r for r in self._registrations if r.get("eventId") != event_id]
        return before - len(self._registrations)
