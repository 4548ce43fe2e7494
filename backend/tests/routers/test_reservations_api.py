from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient
from lodging.database import enable_sqlite_savepoints
from lodging.deps import get_session
from lodging.main import app
from lodging.models import Base, Guest, Host
from lodging.routers import reservations as router
from lodging.utils.time import today
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

STANDARD = Decimal("100")
WEEKEND = Decimal("150")


def _expected_total(start: date, end: date) -> Decimal:
    total = Decimal("0")
    day = start
    while day <= end:
        total += WEEKEND if day.weekday() >= 5 else STANDARD
        day += timedelta(days=1)
    return total


@pytest.fixture()
def client() -> Iterator[TestClient]:
    engine = enable_sqlite_savepoints(
        create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(engine, expire_on_commit=False)
    with factory() as s:
        s.add_all(
            [
                Host(id="h-1", email="host@example.com", standard_rate=STANDARD, weekend_rate=WEEKEND),
                Guest(id=1, email="guest@example.com", first_name="Ada", last_name="Lovelace"),
            ]
        )
        s.commit()

    def override_get_session() -> Iterator[Session]:
        with factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


def _create(client: TestClient, start: date, end: date, **overrides: Any) -> Any:
    body = {
        "host_email": "host@example.com",
        "guest_email": "guest@example.com",
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
    }
    body.update(overrides)
    return client.post("/reservations", json=body)


def test_health_sets_request_id(client: TestClient) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}
    assert res.headers.get("X-Request-ID")


def test_create_and_list_reservation(client: TestClient) -> None:
    start = today() + timedelta(days=30)
    end = start + timedelta(days=4)

    res = _create(client, start, end)

    assert res.status_code == 201
    body = res.json()
    assert body["reservation_id"] == 1
    assert body["host_id"] == "h-1"
    assert body["guest_email"] == "guest@example.com"
    assert Decimal(body["total"]) == _expected_total(start, end)

    listed = client.get("/hosts/h-1/reservations")
    assert listed.status_code == 200
    assert [r["reservation_id"] for r in listed.json()] == [1]
    assert listed.json() == client.get("/hosts/h-1/reservations").json()


def test_create_rejects_overlap_on_boundary_day(client: TestClient) -> None:
    start = today() + timedelta(days=30)
    assert _create(client, start, start + timedelta(days=5)).status_code == 201

    res = _create(client, start + timedelta(days=5), start + timedelta(days=10))

    assert res.status_code == 400
    assert res.json()["detail"]["errors"] == ["Reservation dates overlap with an existing reservation."]


def test_create_reports_unknown_guest_and_host(client: TestClient) -> None:
    start = today() + timedelta(days=30)

    res = _create(client, start, start + timedelta(days=2), guest_email="nobody@example.com", host_email="ghost@example.com")

    assert res.status_code == 400
    assert res.json()["detail"]["errors"] == ["Guest does not exist.", "Host does not exist."]
    assert client.get("/hosts/h-1/reservations").json() == []


def test_create_rejects_past_start(client: TestClient) -> None:
    start = today()

    res = _create(client, start, start + timedelta(days=2))

    assert res.status_code == 400
    assert res.json()["detail"]["errors"] == ["Start date must be in the future."]


def test_update_moves_reservation(client: TestClient) -> None:
    start = today() + timedelta(days=30)
    _create(client, start, start + timedelta(days=2))
    new_start = start + timedelta(days=20)
    new_end = new_start + timedelta(days=6)

    res = client.put(
        "/hosts/h-1/reservations/1",
        json={"start_date": new_start.isoformat(), "end_date": new_end.isoformat()},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["start_date"] == new_start.isoformat()
    assert Decimal(body["total"]) == _expected_total(new_start, new_end)
    (stored,) = client.get("/hosts/h-1/reservations").json()
    assert stored["end_date"] == new_end.isoformat()


def test_update_overlapping_its_own_dates_is_rejected(client: TestClient) -> None:
    start = today() + timedelta(days=30)
    _create(client, start, start + timedelta(days=4))

    res = client.put(
        "/hosts/h-1/reservations/1",
        json={"start_date": (start + timedelta(days=2)).isoformat(), "end_date": (start + timedelta(days=6)).isoformat()},
    )

    assert res.status_code == 400
    assert res.json()["detail"]["errors"] == ["Reservation dates overlap with an existing reservation."]


def test_update_unknown_reservation_returns_404(client: TestClient) -> None:
    start = today() + timedelta(days=30)
    res = client.put(
        "/hosts/h-1/reservations/9",
        json={"start_date": start.isoformat(), "end_date": (start + timedelta(days=1)).isoformat()},
    )
    assert res.status_code == 404


def test_delete_future_reservation(client: TestClient) -> None:
    start = today() + timedelta(days=30)
    _create(client, start, start + timedelta(days=2))

    res = client.delete("/hosts/h-1/reservations/1")

    assert res.status_code == 204
    assert client.get("/hosts/h-1/reservations").json() == []


def test_delete_missing_reservation_is_rejected(client: TestClient) -> None:
    res = client.delete("/hosts/h-1/reservations/3")
    assert res.status_code == 400
    assert res.json()["detail"]["errors"] == ["Reservation with ID 3 does not exist."]


def test_quote_prices_stay(client: TestClient) -> None:
    start = today() + timedelta(days=10)
    end = start + timedelta(days=6)

    res = client.post(
        "/reservations/quote",
        json={"host_email": "host@example.com", "start_date": start.isoformat(), "end_date": end.isoformat()},
    )

    assert res.status_code == 200
    assert Decimal(res.json()["total"]) == 5 * STANDARD + 2 * WEEKEND


def test_quote_unknown_host_returns_404(client: TestClient) -> None:
    start = today() + timedelta(days=10)
    res = client.post(
        "/reservations/quote",
        json={"host_email": "ghost@example.com", "start_date": start.isoformat(), "end_date": (start + timedelta(days=1)).isoformat()},
    )
    assert res.status_code == 404


def test_quote_rejects_reversed_range(client: TestClient) -> None:
    start = today() + timedelta(days=10)
    res = client.post(
        "/reservations/quote",
        json={"host_email": "host@example.com", "start_date": start.isoformat(), "end_date": start.isoformat()},
    )
    assert res.status_code == 400


def test_create_emits_audit(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []

    def fake_emit(**kwargs: Any) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(router, "emit_audit_log", fake_emit)
    start = today() + timedelta(days=30)

    assert _create(client, start, start + timedelta(days=1)).status_code == 201
    assert client.delete("/hosts/h-1/reservations/1").status_code == 204

    assert [c["action"] for c in calls] == ["reservation.created", "reservation.cancelled"]
    assert calls[0]["reservation_id"] == 1
    assert calls[0]["host_id"] == "h-1"


def test_audit_failure_returns_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_emit(**kwargs: Any) -> None:
        raise RuntimeError("fail log")

    monkeypatch.setattr(router, "emit_audit_log", fake_emit)
    start = today() + timedelta(days=30)

    res = _create(client, start, start + timedelta(days=1))

    assert res.status_code == 500
