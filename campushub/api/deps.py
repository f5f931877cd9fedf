from fastapi import Request

from campushub.services.events import EventService


def get_event_service(request: Request) -> EventService:
    return request.app.state.event_service
