from __future__ import annotations

from typing import Protocol, Sequence

from ..models import Guest, Host, Reservation


class ReservationRepository(Protocol):
    def find_by_host_id(self, host_id: str) -> Sequence[Reservation]: ...

    def add(self, reservation: Reservation) -> Reservation: ...

    def update(self, reservation: Reservation) -> bool: ...

    def delete(self, reservation: Reservation) -> bool: ...


class HostRepository(Protocol):
    def find_by_email(self, email: str) -> Host | None: ...

    def find_by_id(self, host_id: str) -> Host | None: ...


class GuestRepository(Protocol):
    def find_by_email(self, email: str) -> Guest | None: ...
