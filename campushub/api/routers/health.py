from fastapi import APIRouter, Depends

from campushub.api.deps import get_event_service
from campushub.services.events import EventService

router = APIRouter()


@router.get("/health")
def health(service: EventService = Depends(get_event_service)):
    return service.health()
