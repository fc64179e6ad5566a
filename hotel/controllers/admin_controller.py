"""Controller layer for admin login, the occupancy report and the bulk reschedule."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from hotel.controllers.dependencies import (
    get_auth_service,
    get_booking_service,
    get_reporting_service,
    require_admin,
)
from hotel.domain.models import ReservationStatus
from hotel.services.auth_service import (
    AdminTokenNotConfiguredError,
    AuthService,
    InvalidAdminTokenError,
)
from hotel.services.booking_service import BookingService
from hotel.services.reporting_service import ReportingService
from hotel.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


class LoginRequest(BaseModel):
    admin_token: str = Field(min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class OccupancyReportResponse(BaseModel):
    total_rooms: int = Field(ge=0)
    rooms_in_use: int = Field(ge=0)
    occupancy_rate: float = Field(ge=0.0, le=100.0)
    status_counts: dict[ReservationStatus, int]
    total_reservations: int = Field(ge=0)


class RescheduleResponse(BaseModel):
    room_assignments: dict[int, list[int]]
    rooms_used: int = Field(ge=0)
    occupancy_rate: float = Field(ge=0.0, le=100.0)
    unassigned_reservation_ids: list[int]


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    try:
        bearer = auth_service.login(payload.admin_token)
        return LoginResponse(access_token=bearer)
    except (AdminTokenNotConfiguredError, InvalidAdminTokenError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected login failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to login",
        ) from exc


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def logout(auth_service: AuthService = Depends(get_auth_service)) -> None:
    auth_service.logout()


@router.post(
    "/admin/reschedule",
    response_model=RescheduleResponse,
    dependencies=[Depends(require_admin)],
)
async def reschedule(
    service: BookingService = Depends(get_booking_service),
) -> RescheduleResponse:
    try:
        with service.scheduler.lock:
            assignments = service.reschedule_all()
            unassigned = [
                reservation.reservation_id
                for reservation in service.list_reservations()
                if reservation.status == ReservationStatus.PENDING
            ]
            rooms_used = service.scheduler.rooms_used()
            occupancy_rate = service.scheduler.occupancy_rate()
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected reschedule failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reschedule reservations",
        ) from exc
    return RescheduleResponse(
        room_assignments=assignments,
        rooms_used=rooms_used,
        occupancy_rate=occupancy_rate,
        unassigned_reservation_ids=unassigned,
    )


@router.get(
    "/admin/occupancy",
    response_model=OccupancyReportResponse,
    dependencies=[Depends(require_admin)],
)
async def occupancy(
    reporting: ReportingService = Depends(get_reporting_service),
) -> OccupancyReportResponse:
    report = reporting.occupancy_report()
    return OccupancyReportResponse(
        total_rooms=report.total_rooms,
        rooms_in_use=report.rooms_in_use,
        occupancy_rate=report.occupancy_rate,
        status_counts=report.status_counts,
        total_reservations=report.total_reservations,
    )

