"""FastAPI application exposing the availability engine as JSON routes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from campavail.errors import (
    BlockConflictError,
    BookingValidationError,
    CampNotBookableError,
    DateUnavailableError,
    DuplicateUserBookingError,
    InvalidDateRangeError,
    RecordNotFoundError,
    StoreError,
    is_permission_denied,
)
from campavail.modules.availability import validate_booking_dates
from campavail.modules.booking import BookingRequest
from campavail.modules.search import filter_available_camps
from campavail.scheduler import create_scheduler
from campavail.services import Services, build_services, close_services

logger = logging.getLogger(__name__)

SIGN_IN_AGAIN = "Permission denied while reading availability. Please sign in again."
STORE_UNAVAILABLE = "Could not verify availability. Please try again."


class BookingDatesIn(BaseModel):
    check_in: date
    check_out: date


class BookingIn(BaseModel):
    user_id: str
    day: date = Field(alias="date")
    guests: int = Field(default=1, ge=1)
    total_price: float = Field(default=0.0, ge=0)
    payment_method: str = "card"
    guest_email: str | None = None


class BlockIn(BaseModel):
    host_id: str
    start_date: date
    end_date: date
    reason: str = "Not specified"
    category: str = "other"
    notes: str | None = None


class CancelIn(BaseModel):
    cancelled_by: str | None = None


def create_app(
    services: Services | None = None,
    *,
    start_scheduler: bool = True,
) -> FastAPI:
    """Build the app. Injected services are used as-is and not closed on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        logger.info("Starting campavail...")
        owned = services is None
        app.state.services = services or build_services()

        scheduler = None
        if start_scheduler:
            scheduler = create_scheduler(app.state.services)
            scheduler.start()
            logger.info("Scheduler started.")

        yield

        if scheduler is not None:
            scheduler.shutdown()
        if owned:
            close_services(app.state.services)
        logger.info("campavail shut down.")

    app = FastAPI(title="campavail", lifespan=lifespan)
    _register_error_handlers(app)
    _register_routes(app)
    return app


def _svc(request: Request) -> Services:
    return request.app.state.services


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message, **extra})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreError)
    async def store_error(request: Request, exc: StoreError):
        if is_permission_denied(exc):
            return _error(401, SIGN_IN_AGAIN)
        return _error(503, STORE_UNAVAILABLE)

    @app.exception_handler(RecordNotFoundError)
    async def not_found(request: Request, exc: RecordNotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(InvalidDateRangeError)
    async def invalid_range(request: Request, exc: InvalidDateRangeError):
        return _error(422, str(exc))

    @app.exception_handler(BookingValidationError)
    async def invalid_booking(request: Request, exc: BookingValidationError):
        return _error(422, "Invalid booking dates", errors=exc.errors)

    @app.exception_handler(DateUnavailableError)
    async def unavailable(request: Request, exc: DateUnavailableError):
        return _error(409, exc.result.message, availability=exc.result.to_dict())

    @app.exception_handler(BlockConflictError)
    async def block_conflict(request: Request, exc: BlockConflictError):
        return _error(409, str(exc), booking_ids=[b.id for b in exc.bookings])

    @app.exception_handler(DuplicateUserBookingError)
    async def duplicate_booking(request: Request, exc: DuplicateUserBookingError):
        return _error(409, "You already have a reservation on this date.")

    @app.exception_handler(CampNotBookableError)
    async def not_bookable(request: Request, exc: CampNotBookableError):
        return _error(409, str(exc))

    @app.exception_handler(ValueError)
    async def bad_value(request: Request, exc: ValueError):
        return _error(422, str(exc))


def _register_routes(app: FastAPI) -> None:
    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/camps/{camp_id}/availability")
    def check_availability(request: Request, camp_id: str, day: date = Query(alias="date")):
        result = _svc(request).evaluator.check_availability_with_retry(camp_id, day)
        return result.to_dict()

    @app.get("/camps/{camp_id}/booked-dates")
    def booked_dates(request: Request, camp_id: str):
        return [d.isoformat() for d in _svc(request).evaluator.get_booked_dates(camp_id)]

    @app.get("/camps/{camp_id}/blocked-dates")
    def blocked_dates(request: Request, camp_id: str):
        return [d.isoformat() for d in _svc(request).evaluator.get_blocked_dates(camp_id)]

    @app.get("/camps/{camp_id}/calendar")
    def month_calendar(
        request: Request,
        camp_id: str,
        year: int = Query(ge=1970, le=9999),
        month: int = Query(ge=1, le=12),
    ):
        days = _svc(request).evaluator.get_calendar(camp_id, year, month)
        return [
            {"date": d.date.isoformat(), "status": d.status, "conflicting_id": d.conflicting_id}
            for d in days
        ]

    @app.get("/camps/{camp_id}/conflicts")
    def conflicts(request: Request, camp_id: str, start: date, end: date):
        return _svc(request).detector.detect_conflicts(camp_id, start, end).to_dict()

    @app.get("/camps/{camp_id}/double-bookings")
    def double_bookings(request: Request, camp_id: str):
        found = _svc(request).detector.find_double_bookings(camp_id)
        return {day.isoformat(): [b.id for b in bookings] for day, bookings in found.items()}

    @app.post("/bookings/validate")
    def validate_dates(request: Request, payload: BookingDatesIn):
        today = _svc(request).clock()
        return validate_booking_dates(payload.check_in, payload.check_out, today=today).to_dict()

    @app.post("/camps/{camp_id}/bookings", status_code=201)
    def create_booking(request: Request, camp_id: str, payload: BookingIn):
        booking = _svc(request).bookings.create_booking(BookingRequest(camp_id=camp_id, **payload.model_dump()))
        return {"id": booking.id, "status": booking.status, "date": booking.check_in_date.isoformat()}

    @app.post("/bookings/{booking_id}/cancel")
    def cancel_booking(request: Request, booking_id: str, payload: CancelIn):
        booking = _svc(request).bookings.cancel_booking(booking_id, payload.cancelled_by)
        return {"id": booking.id, "status": booking.status}

    @app.post("/camps/{camp_id}/blocks", status_code=201)
    def block_dates(request: Request, camp_id: str, payload: BlockIn):
        block_id = _svc(request).blocking.block_dates(
            camp_id,
            payload.host_id,
            payload.start_date,
            payload.end_date,
            reason=payload.reason,
            category=payload.category,
            notes=payload.notes,
        )
        return {"id": block_id}

    @app.delete("/blocks/{block_id}", status_code=204)
    def unblock_dates(request: Request, block_id: str):
        _svc(request).blocking.unblock_dates(block_id)
        return Response(status_code=204)

    @app.get("/search")
    def search(request: Request, day: date = Query(alias="date")):
        services = _svc(request)
        camps = filter_available_camps(services.store.list_camps(status="active"), day, services.evaluator)
        return [{"id": c.id, "title": c.title} for c in camps]


app = create_app()
