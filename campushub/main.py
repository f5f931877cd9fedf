import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from campushub.api.routers import community as community_router
from campushub.api.routers import events as events_router
from campushub.api.routers import health as health_router
from campushub.api.routers import pages as pages_router
from campushub.api.routers import payments as payments_router
from campushub.core.config import (
    ALLOW_DEGRADED_REGISTRATION,
    FALLBACK_LEGACY_PARITY,
    FALLBACK_SAMPLE_DATA,
    SENDGRID_API_KEY,
    STATIC_DIR,
)
from campushub.core.errors import ServiceError, ValidationError
from campushub.core.logging import logger
from campushub.db.fallback import FallbackStore
from campushub.db.session import default_engine
from campushub.db.stores import LiveStore
from campushub.services.events import EMAIL_MESSAGE, EVENT_REQUIRED, REGISTRATION_REQUIRED, EventService

FIELD_MESSAGES = {**EVENT_REQUIRED, **REGISTRATION_REQUIRED, "registrantEmail": EMAIL_MESSAGE}

# pydantic error types that mean "the field is missing or empty"
EMPTY_ERROR_TYPES = ("missing", "string_too_short")


def build_event_service() -> EventService:
    fallback = FallbackStore.with_sample_data() if FALLBACK_SAMPLE_DATA else FallbackStore()
    return EventService(
        LiveStore(default_engine()),
        fallback,
        allow_degraded_registration=ALLOW_DEGRADED_REGISTRATION,
        legacy_parity=FALLBACK_LEGACY_PARITY,
    )


def _validation_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        field = str(err.get("loc", ["body"])[-1])
        msg = err.get("msg")
        if field in FIELD_MESSAGES and (err.get("type") in EMPTY_ERROR_TYPES or field == "registrantEmail"):
            msg = FIELD_MESSAGES[field]
        errors.append({"field": field, "msg": msg})
    return errors


def create_app(event_service: Optional[EventService] = None) -> FastAPI:
    app = FastAPI(title="CampusHub API")
    app.state.event_service = event_service or build_event_service()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError):
        logger.info("Validation errors: %s", exc.errors)
        return JSONResponse({"errors": exc.errors}, status_code=400)

    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        errors = _validation_errors(exc)
        logger.info("Validation errors: %s", errors)
        return JSONResponse({"errors": errors}, status_code=400)

    # API routers
    app.include_router(health_router.router)
    app.include_router(events_router.router)
    app.include_router(community_router.router)
    app.include_router(payments_router.router)

    uploads = os.path.join(STATIC_DIR, "uploads")
    if os.path.isdir(uploads):
        app.mount("/uploads", StaticFiles(directory=uploads), name="uploads")

    # Frontend + login catch-all, must stay last
    app.include_router(pages_router.router)

    @app.on_event("startup")
    def _startup():
        if app.state.event_service.store_connected():
            logger.info("Store connected successfully")
        else:
            logger.warning("Running in offline mode - data will not persist")
        logger.info("SENDGRID_API_KEY loaded: %s", "OK" if SENDGRID_API_KEY.startswith("SG.") else "invalid")

    return app


app = create_app()
