"""Store interface (repository pattern) and the SQLAlchemy-backed live store.

Both stores speak plain documents: dicts keyed by camelCase field names with
the identifier under ``_id``, which is exactly what the routers serialize.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from campushub.core.errors import StoreOperationFailed, StoreUnavailable
from campushub.core.logging import logger
from campushub.db.models import (
    EVENT_FIELDS,
    REGISTRATION_FIELDS,
    Event,
    EventRegistration,
    event_to_dict,
    registration_to_dict,
)
from campushub.db.session import init_db


class EventStore(ABC):
    """Interface for event and registration persistence."""

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    def find_events(self, active_only: bool = False, newest_first: bool = False) -> list[dict]:
        """Return events, optionally only active ones ordered by createdAt descending."""
        ...

    @abstractmethod
    def find_event(self, event_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    def create_event(self, data: dict) -> dict:
        ...

    @abstractmethod
    def update_event(self, event_id: str, patch: dict) -> Optional[dict]:
        """Apply ``patch`` and return the updated event, or None if it doesn't exist."""
        ...

    @abstractmethod
    def delete_event(self, event_id: str) -> bool:
        ...

    @abstractmethod
    def find_registrations(self, event_id: Optional[str] = None, newest_first: bool = False) -> list[dict]:
        ...

    @abstractmethod
    def find_registrations_with_events(self, newest_first: bool = False) -> list[dict]:
        """Return registrations with ``eventId`` replaced by a summary of the event
        (``_id``, title, date, time, venue). When the store doesn't hold the
        event only ``{"_id": ...}`` is left."""
        ...

    @abstractmethod
    def find_registration_by_id(self, registration_id: str) -> Optional[dict]:
        """Direct lookup for admin tooling and store checks; the event service goes
        through ``find_registration`` and the status update instead."""
        ...

    @abstractmethod
    def find_registration(self, event_id: str, email: str) -> Optional[dict]:
        ...

    @abstractmethod
    def count_registrations(self, event_id: str) -> int:
        ...

    @abstractmethod
    def create_registration(self, data: dict) -> dict:
        ...

    @abstractmethod
    def update_registration_status(self, registration_id: str, status: str) -> Optional[dict]:
        ...

    @abstractmethod
    def delete_registrations_for_event(self, event_id: str) -> int:
        ...


def event_summary(event: Optional[dict], event_id: Optional[str] = None) -> Optional[dict]:
    if event is None:
        # Keep registrations for events this store doesn't hold traceable
        return {"_id": event_id} if event_id else None
    return {k: event.get(k) for k in ("_id", "title", "date", "time", "venue")}


class LiveStore(EventStore):
    """Database-backed store. A store built without an engine is permanently offline."""

    def __init__(self, engine: Optional[Engine]):
        self._engine = engine
        self._sessionmaker = (
            sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
            if engine is not None
            else None
        )
        self._tables_ready = False

    def is_connected(self) -> bool:
        if self._engine is None:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        if not self._tables_ready:
            # The database may have come up after startup
            self._tables_ready = init_db(self._engine)
        return self._tables_ready

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._sessionmaker is None:
            raise StoreUnavailable("database is not configured")
        db = self._sessionmaker()
        try:
            yield db
        except (OperationalError, InterfaceError) as ex:
            db.rollback()
            if ex.connection_invalidated:
                logger.warning("Database connection lost: %s", ex)
            raise StoreUnavailable(str(ex)) from ex
        except SQLAlchemyError as ex:
            db.rollback()
            raise StoreOperationFailed(str(ex)) from ex
        finally:
            db.close()

    # Events

    def find_events(self, active_only: bool = False, newest_first: bool = False) -> list[dict]:
        with self._session() as db:
            query = db.query(Event)
            if active_only:
                query = query.filter(Event.is_active.is_(True))
            if newest_first:
                query = query.order_by(Event.created_at.desc())
            return [event_to_dict(e) for e in query.all()]

    def find_event(self, event_id: str) -> Optional[dict]:
        with self._session() as db:
            e = db.get(Event, event_id)
            return event_to_dict(e) if e else None

    def create_event(self, data: dict) -> dict:
        values = {col: data[key] for key, col in EVENT_FIELDS.items() if data.get(key) is not None}
        with self._session() as db:
            e = Event(**values)
            db.add(e)
            db.commit()
            db.refresh(e)
            return event_to_dict(e)

    def update_event(self, event_id: str, patch: dict) -> Optional[dict]:
        with self._session() as db:
            e = db.get(Event, event_id)
            if not e:
                return None
            for key, col in EVENT_FIELDS.items():
                if key in patch:
                    setattr(e, col, patch[key])
            db.commit()
            db.refresh(e)
            return event_to_dict(e)

    def delete_event(self, event_id: str) -> bool:
        with self._session() as db:
            e = db.get(Event, event_id)
            if not e:
                return False
            db.delete(e)
            db.commit()
            return True

    # Registrations

    def find_registrations(self, event_id: Optional[str] = None, newest_first: bool = False) -> list[dict]:
        with self._session() as db:
            query = db.query(EventRegistration)
            if event_id is not None:
                query = query.filter(EventRegistration.event_id == event_id)
            if newest_first:
                query = query.order_by(EventRegistration.registration_date.desc())
            return [registration_to_dict(r) for r in query.all()]

    def find_registrations_with_events(self, newest_first: bool = False) -> list[dict]:
        with self._session() as db:
            query = db.query(EventRegistration, Event).outerjoin(
                Event, Event.id == EventRegistration.event_id
            )
            if newest_first:
                query = query.order_by(EventRegistration.registration_date.desc())

            items = []
            for r, e in query.all():
                row = registration_to_dict(r)
                row["eventId"] = event_summary(event_to_dict(e) if e else None, r.event_id)
                items.append(row)
            return items

    def find_registration_by_id(self, registration_id: str) -> Optional[dict]:
        with self._session() as db:
            r = db.get(EventRegistration, registration_id)
            return registration_to_dict(r) if r else None

    def find_registration(self, event_id: str, email: str) -> Optional[dict]:
        with self._session() as db:
            r = (
                db.query(EventRegistration)
                .filter(
                    EventRegistration.event_id == event_id,
                    EventRegistration.registrant_email == email,
                )
                .first()
            )
            return registration_to_dict(r) if r else None

    def count_registrations(self, event_id: str) -> int:
        with self._session() as db:
            return db.query(EventRegistration).filter(EventRegistration.event_id == event_id).count()

    def create_registration(self, data: dict) -> dict:
        values = {col: data[key] for key, col in REGISTRATION_FIELDS.items() if data.get(key) is not None}
        with self._session() as db:
            r = EventRegistration(**values)
            db.add(r)
            db.commit()
            db.refresh(r)
            return registration_to_dict(r)

    def update_registration_status(self, registration_id: str, status: str) -> Optional[dict]:
        with self._session() as db:
            r = db.get(EventRegistration, registration_id)
            if not r:
                return None
            r.status = status
            db.commit()
            db.refresh(r)
            return registration_to_dict(r)

    def delete_registrations_for_event(self, event_id: str) -> int:
        with self._session() as db:
            deleted = (
                db.query(EventRegistration)
                .filter(EventRegistration.event_id == event_id)
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted
