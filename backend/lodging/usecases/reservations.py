import logging
from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Callable, List, cast

from ..domain.repositories import GuestRepository, HostRepository, ReservationRepository
from ..domain.result import Result
from ..domain.services import calculate_total, disjoint, overlaps
from ..models import Host, Reservation
from ..utils.time import today

logger = logging.getLogger(__name__)


class ValidationMode(StrEnum):
    CREATE = "create"
    UPDATE = "update"


class ReservationService:
    """Validates, prices and persists reservations through the injected repositories."""

    def __init__(
        self,
        reservation_repo: ReservationRepository,
        host_repo: HostRepository,
        guest_repo: GuestRepository,
        *,
        clock: Callable[[], date] = today,
        update_excludes_self: bool = False,
    ) -> None:
        self.reservation_repo = reservation_repo
        self.host_repo = host_repo
        self.guest_repo = guest_repo
        self.clock = clock
        self.update_excludes_self = update_excludes_self

    def find_by_host_id(self, host_id: str) -> List[Reservation]:
        return list(self.reservation_repo.find_by_host_id(host_id))

    def make_reservation(self, reservation: Reservation) -> Result[Reservation]:
        result = self.validate(reservation, ValidationMode.CREATE)
        if not result.is_success:
            return result

        result.payload = None
        host = cast(Host, reservation.host)
        reservation.total = self.calculate_total(reservation.start_date, reservation.end_date, host)

        try:
            self.reservation_repo.add(reservation)
        except Exception as exc:
            logger.exception("failed to save reservation for host %s", host.id)
            result.add_error(f"Failed to save the reservation: {exc}")
            return result

        result.payload = reservation
        return result

    def update_reservation(self, updated: Reservation) -> Result[Reservation]:
        result = self.validate(updated, ValidationMode.UPDATE)
        if not result.is_success:
            return result
        result.payload = None

        host = cast(Host, updated.host)
        existing = self.reservation_repo.find_by_host_id(host.id)
        if not any(r.id == updated.id for r in existing):
            result.add_error("Reservation does not exist.")
            return result

        conflict = any(not disjoint(updated, r) for r in existing if r.id != updated.id)
        if conflict:
            result.add_error("Updated reservation conflicts with an existing reservation.")
            return result

        try:
            replaced = self.reservation_repo.update(updated)
        except Exception as exc:
            logger.exception("failed to update reservation %s for host %s", updated.id, host.id)
            result.add_error(f"Failed to update the reservation: {exc}")
            return result
        if not replaced:
            result.add_error("Failed to update the reservation.")
            return result

        result.payload = updated
        return result

    def delete_reservation(self, reservation_id: int, host_id: str) -> Result[bool]:
        result: Result[bool] = Result(payload=False)
        try:
            target = next(
                (r for r in self.reservation_repo.find_by_host_id(host_id) if r.id == reservation_id),
                None,
            )
            if target is None:
                result.add_error(f"Reservation with ID {reservation_id} does not exist.")
                return result

            if not target.start_date > self.clock():
                result.add_error("Cannot cancel a reservation that's in the past.")
                return result

            if not self.reservation_repo.delete(target):
                result.add_error("Failed to delete the reservation.")
                return result
        except Exception as exc:
            logger.exception("failed to delete reservation %s for host %s", reservation_id, host_id)
            result.add_error(f"Failed to delete the reservation: {exc}")
            return result

        result.payload = True
        return result

    def calculate_total(self, start_date: date, end_date: date, host: Host) -> Decimal:
        return calculate_total(start_date, end_date, host)

    def validate(self, reservation: Reservation, mode: ValidationMode) -> Result[Reservation]:
        """
        Accumulate every rule violation for `reservation`.
        On success the payload is the reservation itself, unmodified.
        """
        result: Result[Reservation] = Result()
        guest = reservation.guest
        host = reservation.host
        start, end = reservation.start_date, reservation.end_date

        if guest is None:
            result.add_error("Guest is required.")
        if host is None:
            result.add_error("Host is required.")

        if start is None or end is None:
            result.add_error("Start and end dates are required.")
        elif not start < end:
            result.add_error("Start date must come before end date.")

        if start is not None and not start > self.clock():
            result.add_error("Start date must be in the future.")

        if guest is not None and self.guest_repo.find_by_email(guest.email) is None:
            result.add_error("Guest does not exist.")
        if host is not None and self.host_repo.find_by_email(host.email) is None:
            result.add_error("Host does not exist.")

        # Runs in update mode too, so the stored version of the same reservation
        # counts as a conflict unless update_excludes_self is set.
        if host is not None and start is not None and end is not None:
            exclude_id = reservation.id if mode == ValidationMode.UPDATE and self.update_excludes_self else None
            if not self._is_range_free(reservation, host.id, exclude_id=exclude_id):
                result.add_error("Reservation dates overlap with an existing reservation.")

        if result.is_success:
            result.payload = reservation
        else:
            logger.info("reservation rejected (%s): %s", mode.value, "; ".join(result.errors))
        return result

    def _is_range_free(self, candidate: Reservation, host_id: str, *, exclude_id: int | None = None) -> bool:
        for existing in self.reservation_repo.find_by_host_id(host_id):
            if exclude_id is not None and existing.id == exclude_id:
                continue
            if overlaps(candidate, existing):
                return False
        return True
