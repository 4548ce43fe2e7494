from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql.sqltypes import Date, Integer, Numeric, String


class Base(DeclarativeBase):
    pass


class Host(Base):
    __tablename__ = "hosts"
    __table_args__ = (
        UniqueConstraint("email", name="uq_hosts_email"),
        CheckConstraint("standard_rate >= 0", name="chk_hosts_standard_rate"),
        CheckConstraint("weekend_rate >= 0", name="chk_hosts_weekend_rate"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    standard_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    weekend_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)


class Guest(Base):
    __tablename__ = "guests"
    __table_args__ = (UniqueConstraint("email", name="uq_guests_email"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class Reservation(Base):
    """A guest's stay at a host. `id` is only unique within the host."""

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("start_date < end_date", name="chk_res_dates"),
        Index("idx_res_guest", "guest_id"),
    )

    host_id: Mapped[str] = mapped_column(ForeignKey("hosts.id"), primary_key=True)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    guest_id: Mapped[int] = mapped_column(ForeignKey("guests.id"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    # No back_populates: a transient Reservation must never land in a Host collection.
    host: Mapped[Optional["Host"]] = relationship()
    guest: Mapped[Optional["Guest"]] = relationship()
