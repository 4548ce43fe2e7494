from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.orm import Session

from ..deps import get_guest_repo, get_host_repo, get_reservation_service, get_session
from ..domain.result import Result
from ..infrastructure.repositories import SqlAlchemyGuestRepository, SqlAlchemyHostRepository
from ..models import Guest, Host, Reservation
from ..schemas import QuoteRead, QuoteRequest, ReservationCreate, ReservationRead, ReservationUpdate
from ..usecases.reservations import ReservationService
from ..utils.audit_log import AuditAction, emit_audit_log

router = APIRouter(prefix="", tags=["reservations"])


def _rejected(result: Result) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"errors": result.errors})


def _audit(action: AuditAction, reservation: Reservation) -> None:
    try:
        emit_audit_log(
            action=action,
            reservation_id=reservation.id,
            host_id=reservation.host_id,
            guest_id=reservation.guest_id,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
            total=reservation.total,
        )
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed") from exc


@router.get("/hosts/{host_id}/reservations", response_model=List[ReservationRead])
def list_host_reservations(
    host_id: str,
    service: ReservationService = Depends(get_reservation_service),
) -> list[ReservationRead]:
    return [ReservationRead.from_db(reservation=r) for r in service.find_by_host_id(host_id)]


@router.post("/reservations", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation(
    payload: ReservationCreate,
    session: Session = Depends(get_session),
    service: ReservationService = Depends(get_reservation_service),
    host_repo: SqlAlchemyHostRepository = Depends(get_host_repo),
    guest_repo: SqlAlchemyGuestRepository = Depends(get_guest_repo),
) -> ReservationRead:
    # Unknown emails become transient placeholders; the service reports them as missing.
    host = host_repo.find_by_email(payload.host_email) or Host(email=payload.host_email)
    guest = guest_repo.find_by_email(payload.guest_email) or Guest(email=payload.guest_email)
    reservation = Reservation(
        host=host,
        guest=guest,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )

    result = service.make_reservation(reservation)
    if not result.is_success or result.payload is None:
        session.rollback()
        raise _rejected(result)
    session.commit()

    _audit("reservation.created", result.payload)
    return ReservationRead.from_db(reservation=result.payload)


@router.post("/reservations/quote", response_model=QuoteRead)
def quote_reservation(
    payload: QuoteRequest,
    service: ReservationService = Depends(get_reservation_service),
    host_repo: SqlAlchemyHostRepository = Depends(get_host_repo),
) -> QuoteRead:
    host = host_repo.find_by_email(payload.host_email)
    if host is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="host not found")
    if payload.start_date >= payload.end_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start_date must be earlier than end_date")
    return QuoteRead(
        host_id=host.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        total=service.calculate_total(payload.start_date, payload.end_date, host),
    )


@router.put("/hosts/{host_id}/reservations/{reservation_id}", response_model=ReservationRead)
def update_reservation(
    payload: ReservationUpdate,
    host_id: str,
    reservation_id: int = Path(..., ge=1),
    session: Session = Depends(get_session),
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationRead:
    current = next((r for r in service.find_by_host_id(host_id) if r.id == reservation_id), None)
    if current is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")

    updated = Reservation(
        id=current.id,
        host_id=current.host_id,
        guest_id=current.guest_id,
        host=current.host,
        guest=current.guest,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    # The service keeps whatever total it is handed on update.
    if current.host is not None and payload.start_date < payload.end_date:
        updated.total = service.calculate_total(payload.start_date, payload.end_date, current.host)

    result = service.update_reservation(updated)
    if not result.is_success or result.payload is None:
        session.rollback()
        raise _rejected(result)
    session.commit()

    _audit("reservation.updated", result.payload)
    return ReservationRead.from_db(reservation=result.payload)


@router.delete("/hosts/{host_id}/reservations/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_reservation(
    host_id: str,
    reservation_id: int = Path(..., ge=1),
    session: Session = Depends(get_session),
    service: ReservationService = Depends(get_reservation_service),
) -> Response:
    current = next((r for r in service.find_by_host_id(host_id) if r.id == reservation_id), None)

    result = service.delete_reservation(reservation_id, host_id)
    if not result.is_success or not result.payload:
        session.rollback()
        raise _rejected(result)
    session.commit()

    if current is not None:
        _audit("reservation.cancelled", current)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
