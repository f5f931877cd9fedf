import pytest

from campushub.core.errors import Conflict, InvalidInput, NotFound, OperationFailed, ValidationError
from campushub.db.fallback import FallbackStore
from campushub.db.stores import LiveStore
from campushub.services.events import DEGRADED, FALLBACK, LIVE, UNKNOWN_EVENT_TITLE, EventService

from conftest import FlakyLiveStore, event_payload, registrant


def test_create_event_echoes_fields_and_defaults_created_by(live_service):
    outcome = live_service.create_event(event_payload())
    event = outcome.document

    assert outcome.source == LIVE
    assert (event["title"], event["description"], event["date"], event["time"]) == (
        "Hackathon",
        "24h build sprint",
        "2024-03-01",
        "09:00",
    )
    assert event["createdBy"] == "admin"
    assert live_service.get_event(event["_id"]) == event


def test_create_event_keeps_explicit_created_by(live_service):
    event = live_service.create_event(event_payload(createdBy="tech-committee")).document
    assert event["createdBy"] == "tech-committee"


def test_create_event_requires_fields(live_service):
    with pytest.raises(ValidationError) as exc:
        live_service.create_event({"title": "", "date": "2024-01-01"})
    fields = [e["field"] for e in exc.value.errors]
    assert fields == ["title", "description", "time"]


def test_create_event_offline_goes_to_fallback(offline_service):
    outcome = offline_service.create_event({"title": "A", "description": "B", "date": "2024-01-01", "time": "10:00"})
    assert outcome.source == FALLBACK
    assert outcome.document["_id"].startswith("mock")
    assert outcome.document["createdAt"]


def test_create_event_store_error_goes_to_fallback():
    fallback = FallbackStore()
    service = EventService(FlakyLiveStore(), fallback)
    outcome = service.create_event(event_payload())
    assert outcome.source == DEGRADED
    assert fallback.find_event(outcome.document["_id"]) is not None


def test_list_events_live_only_active(live_service):
    live_service.create_event(event_payload(title="on"))
    live_service.create_event(event_payload(title="off", isActive=False))
    assert [e["title"] for e in live_service.list_events()] == ["on"]


def test_list_events_offline_filters_fallback(offline_store):
    fallback = FallbackStore.with_sample_data()
    fallback.create_event(event_payload(title="hidden", isActive=False))
    service = EventService(offline_store, fallback)

    titles = [e["title"] for e in service.list_events()]
    assert "hidden" not in titles
    assert set(titles) == {"Tech Workshop", "Cultural Festival"}


def test_list_events_legacy_parity_returns_raw_fallback(offline_store):
    fallback = FallbackStore.with_sample_data()
    fallback.create_event(event_payload(title="hidden", isActive=False))
    service = EventService(offline_store, fallback, legacy_parity=True)

    assert [e["title"] for e in service.list_events()] == ["Tech Workshop", "Cultural Festival", "hidden"]


def test_list_events_store_error_uses_fallback():
    service = EventService(FlakyLiveStore(), FallbackStore.with_sample_data())
    assert len(service.list_events()) == 2


def test_get_event_not_found_and_store_failure(live_service, offline_service):
    with pytest.raises(NotFound):
        live_service.get_event("missing")
    with pytest.raises(OperationFailed):
        offline_service.get_event("mock1")


def test_update_event(live_service):
    event = live_service.create_event(event_payload()).document
    updated = live_service.update_event(event["_id"], {"title": "Renamed"})
    assert updated["title"] == "Renamed"

    with pytest.raises(NotFound):
        live_service.update_event("missing", {"title": "x"})


def test_update_event_has_no_fallback(offline_service):
    with pytest.raises(OperationFailed):
        offline_service.update_event("mock1", {"title": "x"})


def test_delete_event_cascades(live_service, live_store):
    event = live_service.create_event(event_payload(maxParticipants=10)).document
    ids = [
        live_service.register_for_event(event["_id"], registrant(f"p{i}@example.com")).document["_id"]
        for i in range(3)
    ]
    other = live_service.create_event(event_payload(title="other")).document
    kept = live_service.register_for_event(other["_id"], registrant()).document["_id"]

    assert live_service.delete_event(event["_id"]) == 3

    for reg_id in ids:
        assert live_store.find_registration_by_id(reg_id) is None
        with pytest.raises(NotFound):
            live_service.update_registration_status(reg_id, "approved")
    assert live_store.find_registration_by_id(kept) is not None

    with pytest.raises(NotFound):
        live_service.delete_event(event["_id"])


def test_register_live_denormalizes_title(live_service, live_store):
    event = live_service.create_event(event_payload()).document
    outcome = live_service.register_for_event(event["_id"], registrant())

    assert outcome.source == LIVE
    assert outcome.event["_id"] == event["_id"]
    stored = live_store.find_registration_by_id(outcome.document["_id"])
    assert stored["eventTitle"] == "Hackathon"
    assert stored["status"] == "pending"


def test_register_validation(live_service):
    with pytest.raises(ValidationError) as exc:
        live_service.register_for_event("x", registrant(email="not-an-email", registrantPRN=""))
    assert {e["field"] for e in exc.value.errors} == {"registrantEmail", "registrantPRN"}


def test_register_live_rejections(live_service):
    with pytest.raises(NotFound):
        live_service.register_for_event("missing", registrant())

    closed = live_service.create_event(event_payload(isActive=False)).document
    with pytest.raises(Conflict, match="Event is currently inactive"):
        live_service.register_for_event(closed["_id"], registrant())

    event = live_service.create_event(event_payload(maxParticipants=2)).document
    live_service.register_for_event(event["_id"], registrant("a@example.com"))
    with pytest.raises(Conflict, match="You are already registered for this event"):
        live_service.register_for_event(event["_id"], registrant("a@example.com"))

    live_service.register_for_event(event["_id"], registrant("b@example.com"))
    with pytest.raises(Conflict, match="Event is full"):
        live_service.register_for_event(event["_id"], registrant("c@example.com"))


def test_register_offline_duplicate_rejected(offline_store):
    service = EventService(offline_store, FallbackStore(events=[{"_id": "mock1", "title": "Tech Workshop"}]))

    first = service.register_for_event("mock1", registrant("john@example.com"))
    assert first.source == FALLBACK
    with pytest.raises(Conflict, match="You are already registered for this event"):
        service.register_for_event("mock1", registrant("john@example.com"))


def test_register_offline_unknown_event(offline_service):
    with pytest.raises(NotFound):
        offline_service.register_for_event("nope", registrant())


def test_register_offline_enforces_capacity_unless_legacy(offline_store):
    events = [{"_id": "tiny", "title": "Tiny", "maxParticipants": 1}]

    strict = EventService(offline_store, FallbackStore(events=events))
    strict.register_for_event("tiny", registrant("a@example.com"))
    with pytest.raises(Conflict, match="Event is full"):
        strict.register_for_event("tiny", registrant("b@example.com"))

    legacy = EventService(offline_store, FallbackStore(events=events), legacy_parity=True)
    legacy.register_for_event("tiny", registrant("a@example.com"))
    assert legacy.register_for_event("tiny", registrant("b@example.com")).source == FALLBACK


def test_register_offline_inactive_rejected_unless_legacy(offline_store):
    events = [{"_id": "off", "title": "Off", "isActive": False}]

    with pytest.raises(Conflict, match="inactive"):
        EventService(offline_store, FallbackStore(events=events)).register_for_event("off", registrant())

    legacy = EventService(offline_store, FallbackStore(events=events), legacy_parity=True)
    assert legacy.register_for_event("off", registrant()).source == FALLBACK


def test_live_path_sees_fallback_registrations(live_store):
    event = live_store.create_event(event_payload())
    fallback = FallbackStore()
    fallback.create_registration({"eventId": event["_id"], "registrantEmail": "asha@example.com"})
    service = EventService(live_store, fallback)

    with pytest.raises(Conflict):
        service.register_for_event(event["_id"], registrant("asha@example.com"))


def test_capacity_counts_fallback_registrations(live_store):
    event = live_store.create_event(event_payload(maxParticipants=2))
    fallback = FallbackStore()
    fallback.create_registration({"eventId": event["_id"], "registrantEmail": "early@example.com"})
    service = EventService(live_store, fallback)

    assert service.register_for_event(event["_id"], registrant("asha@example.com")).source == LIVE
    with pytest.raises(Conflict, match="Event is full"):
        service.register_for_event(event["_id"], registrant("ravi@example.com"))
    assert live_store.count_registrations(event["_id"]) == 1


def test_degraded_registration_on_store_failure():
    fallback = FallbackStore()
    service = EventService(FlakyLiveStore(), fallback)

    outcome = service.register_for_event("abc", registrant())
    assert outcome.source == DEGRADED
    stored = fallback.find_registration_by_id(outcome.document["_id"])
    assert stored["eventTitle"] == UNKNOWN_EVENT_TITLE
    assert stored["eventId"] == "abc"

    with pytest.raises(Conflict):
        service.register_for_event("abc", registrant())


def test_degraded_registration_stays_traceable_offline():
    fallback = FallbackStore()
    EventService(FlakyLiveStore(), fallback).register_for_event("live-event-42", registrant())

    rows = EventService(LiveStore(None), fallback).list_all_registrations()
    assert rows[0]["eventId"] == {"_id": "live-event-42"}
    assert rows[0]["eventTitle"] == UNKNOWN_EVENT_TITLE


def test_degraded_registration_can_be_disabled():
    service = EventService(FlakyLiveStore(), FallbackStore(), allow_degraded_registration=False)
    with pytest.raises(OperationFailed):
        service.register_for_event("abc", registrant())


def test_unexpected_error_also_degrades(live_store, monkeypatch):
    fallback = FallbackStore()
    service = EventService(live_store, fallback)

    def boom(*args, **kwargs):
        raise KeyError("title")

    monkeypatch.setattr(live_store, "find_event", boom)
    outcome = service.register_for_event("x", registrant())
    assert outcome.source == DEGRADED
    assert fallback.count_registrations("x") == 1


def test_update_registration_status(live_service):
    event = live_service.create_event(event_payload()).document
    reg_id = live_service.register_for_event(event["_id"], registrant()).document["_id"]

    assert live_service.update_registration_status(reg_id, "approved")["status"] == "approved"

    with pytest.raises(InvalidInput, match="Invalid status"):
        live_service.update_registration_status(reg_id, "archived")
    assert live_service.list_registrations_for_event(event["_id"])[0]["status"] == "approved"

    with pytest.raises(NotFound):
        live_service.update_registration_status("missing", "rejected")


def test_list_all_registrations(live_service, offline_service):
    event = live_service.create_event(event_payload(venue="Lab 2")).document
    live_service.register_for_event(event["_id"], registrant())

    rows = live_service.list_all_registrations()
    assert rows[0]["eventId"]["title"] == "Hackathon"
    assert rows[0]["eventId"]["venue"] == "Lab 2"

    offline_rows = offline_service.list_all_registrations()
    assert offline_rows[0]["eventId"]["_id"] == "mock1"


def test_list_all_registrations_legacy_is_unjoined(offline_store):
    service = EventService(offline_store, FallbackStore.with_sample_data(), legacy_parity=True)
    assert service.list_all_registrations()[0]["eventId"] == "mock1"


def test_list_registrations_for_event_fails_offline(offline_service):
    with pytest.raises(OperationFailed):
        offline_service.list_registrations_for_event("mock1")


def test_health(live_service, offline_service):
    assert live_service.health()["store"] == "connected"
    offline = offline_service.health()
    assert offline["store"] == "offline"
    assert offline["fallback"] == {"events": 2, "registrations": 1}
