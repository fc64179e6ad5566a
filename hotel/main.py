"""FastAPI application bootstrap and lifecycle wiring."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from hotel.controllers.admin_controller import router as admin_router
from hotel.controllers.reservation_controller import router as reservation_router
from hotel.repository.stores import CustomerStore, ReservationStore, RoomStore
from hotel.services.auth_service import AuthService
from hotel.services.booking_service import BookingService
from hotel.services.reporting_service import ReportingService
from hotel.services.scheduler_service import Scheduler
from hotel.utils.config import Settings, get_settings
from hotel.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app with every store and service wired explicitly on app.state."""
    settings = settings or get_settings()

    rooms = RoomStore()
    reservations = ReservationStore()
    customers = CustomerStore()
    scheduler = Scheduler(rooms, reservations)
    reporting_service = ReportingService(
        rooms=rooms,
        reservations=reservations,
        customers=customers,
        scheduler=scheduler,
        settings=settings,
    )
    booking_service = BookingService(
        rooms=rooms,
        reservations=reservations,
        customers=customers,
        scheduler=scheduler,
        reporting_service=reporting_service,
        settings=settings,
    )
    auth_service = AuthService(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.include_router(reservation_router)
    app.include_router(admin_router)

    app.state.rooms = rooms
    app.state.reservations = reservations
    app.state.customers = customers
    app.state.scheduler = scheduler
    app.state.reporting_service = reporting_service
    app.state.booking_service = booking_service
    app.state.auth_service = auth_service

    return app


def startup(app: FastAPI) -> None:
    """Seed the room inventory once before serving requests."""
    booking_service: BookingService = app.state.booking_service
    booking_service.initialize()
    logger.info(
        "System startup completed | rooms=%s",
        len(app.state.rooms),
    )


app = create_app()
