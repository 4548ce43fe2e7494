from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import get_settings
from .database import session_factory
from .infrastructure.repositories import (
    SqlAlchemyGuestRepository,
    SqlAlchemyHostRepository,
    SqlAlchemyReservationRepository,
)
from .usecases.reservations import ReservationService


def get_session() -> Iterator[Session]:
    with session_factory() as session:
        yield session


def get_host_repo(session: Session = Depends(get_session)) -> SqlAlchemyHostRepository:
    return SqlAlchemyHostRepository(session)


def get_guest_repo(session: Session = Depends(get_session)) -> SqlAlchemyGuestRepository:
    return SqlAlchemyGuestRepository(session)


def get_reservation_service(session: Session = Depends(get_session)) -> ReservationService:
    return ReservationService(
        SqlAlchemyReservationRepository(session),
        SqlAlchemyHostRepository(session),
        SqlAlchemyGuestRepository(session),
        update_excludes_self=get_settings().update_excludes_self,
    )
