from __future__ import annotations

from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..domain.errors import DataAccessError
from ..domain.repositories import GuestRepository, HostRepository, ReservationRepository
from ..models import Guest, Host, Reservation


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_host_id(self, host_id: str) -> List[Reservation]:
        stmt = (
            select(Reservation)
            .options(joinedload(Reservation.host), joinedload(Reservation.guest))
            .where(Reservation.host_id == host_id)
            .order_by(Reservation.start_date, Reservation.id)
        )
        return list(self.session.scalars(stmt).all())

    def add(self, reservation: Reservation) -> Reservation:
        host_id = reservation.host.id if reservation.host is not None else reservation.host_id
        try:
            with self.session.begin_nested():
                next_id = self.session.scalar(
                    select(func.coalesce(func.max(Reservation.id), 0) + 1).where(Reservation.host_id == host_id)
                )
                reservation.id = int(next_id or 1)
                reservation.host_id = host_id
                if reservation.guest is not None:
                    reservation.guest_id = reservation.guest.id
                self.session.add(reservation)
                self.session.flush()
        except SQLAlchemyError as exc:
            raise DataAccessError(f"could not insert reservation for host {host_id}") from exc
        return reservation

    def update(self, reservation: Reservation) -> bool:
        try:
            with self.session.begin_nested():
                stored = self.session.get(Reservation, (reservation.host_id, reservation.id))
                if stored is None:
                    return False
                if stored is not reservation:
                    stored.start_date = reservation.start_date
                    stored.end_date = reservation.end_date
                    stored.total = reservation.total
                    if reservation.guest is not None:
                        stored.guest = reservation.guest
                self.session.flush()
        except SQLAlchemyError as exc:
            raise DataAccessError(f"could not update reservation {reservation.id}") from exc
        return True

    def delete(self, reservation: Reservation) -> bool:
        try:
            with self.session.begin_nested():
                stored = self.session.get(Reservation, (reservation.host_id, reservation.id))
                if stored is None:
                    return False
                self.session.delete(stored)
                self.session.flush()
        except SQLAlchemyError as exc:
            raise DataAccessError(f"could not delete reservation {reservation.id}") from exc
        return True


class SqlAlchemyHostRepository(HostRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_email(self, email: str) -> Host | None:
        return self.session.scalar(select(Host).where(Host.email == email))

    def find_by_id(self, host_id: str) -> Host | None:
        return self.session.get(Host, host_id)


class SqlAlchemyGuestRepository(GuestRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_email(self, email: str) -> Guest | None:
        return self.session.scalar(select(Guest).where(Guest.email == email))
