"""Concurrent writers racing for beds and payments against a file-backed database."""

import threading
from datetime import date

import pytest

from hostel.models import Room
from hostel.services import (
    AssignmentService,
    PaymentService,
    ResidentService,
    RoomService,
    create_db_engine,
    create_session_factory,
    init_db,
)
from hostel.services.assignment_service import TransferResult
from hostel.services.db import unit_of_work
from hostel.services.errors import CapacityError, PaymentMismatchError
from hostel.services.payment_service import PaymentReceipt


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'race.db'}")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


def _resident_payload(n):
    return {
        "name": f"Racer {'ABC'[n]}",
        "cnic": f"35202-000000{n}-1",
        "department": "Physics",
        "phone": "03001234567",
        "address": "Hall Road Lahore",
    }


def run_concurrently(*targets):
    barrier = threading.Barrier(len(targets))
    outcomes = [None] * len(targets)

    def worker(index, target):
        barrier.wait()
        try:
            outcomes[index] = target()
        except Exception as e:
            outcomes[index] = e

    threads = [threading.Thread(target=worker, args=(i, t)) for i, t in enumerate(targets)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return outcomes


def test_last_bed_goes_to_exactly_one_resident(file_session_factory):
    residents = ResidentService(file_session_factory)
    first = residents.create_resident(_resident_payload(0))
    second = residents.create_resident(_resident_payload(1))
    room = RoomService(file_session_factory).create_room(
        {"room_number": "9", "capacity": 1, "monthly_fee": 4000}
    )
    service = AssignmentService(file_session_factory, clock=lambda: date(2025, 3, 1))

    outcomes = run_concurrently(
        lambda: service.assign(first.id, room.id),
        lambda: service.assign(second.id, room.id),
    )

    failures = [o for o in outcomes if isinstance(o, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], CapacityError)
    with unit_of_work(file_session_factory) as session:
        assert session.get(Room, room.id).occupancy == 1


def test_same_resident_assigned_once(file_session_factory):
    resident = ResidentService(file_session_factory).create_resident(_resident_payload(0))
    rooms = RoomService(file_session_factory)
    room_a = rooms.create_room({"room_number": "1", "capacity": 2, "monthly_fee": 4000})
    room_b = rooms.create_room({"room_number": "2", "capacity": 2, "monthly_fee": 4000})
    service = AssignmentService(file_session_factory, clock=lambda: date(2025, 3, 1))

    outcomes = run_concurrently(
        lambda: service.assign(resident.id, room_a.id),
        lambda: service.assign(resident.id, room_b.id),
    )

    assert sum(isinstance(o, Exception) for o in outcomes) == 1
    with unit_of_work(file_session_factory) as session:
        total = session.get(Room, room_a.id).occupancy + session.get(Room, room_b.id).occupancy
    assert total == 1


def _occupancies(session_factory, *room_ids):
    with unit_of_work(session_factory) as session:
        return [session.get(Room, room_id).occupancy for room_id in room_ids]


def test_late_payment_accepted_once(file_session_factory):
    resident = ResidentService(file_session_factory).create_resident(_resident_payload(0))
    room = RoomService(file_session_factory).create_room(
        {"room_number": "5", "capacity": 1, "monthly_fee": 5000}
    )
    AssignmentService(file_session_factory, clock=lambda: date(2025, 1, 1)).assign(resident.id, room.id)
    PaymentService(file_session_factory, clock=lambda: date(2025, 1, 1)).record_payment(resident.id, 5000)
    # Three days past the 2025-01-31 due date: 5000 + 3 * 100
    late = PaymentService(file_session_factory, clock=lambda: date(2025, 2, 3))

    outcomes = run_concurrently(*[lambda: late.record_payment(resident.id, 5300)] * 3)

    assert sum(isinstance(o, PaymentReceipt) for o in outcomes) == 1
    assert sum(isinstance(o, PaymentMismatchError) for o in outcomes) == 2
    assert len(late.list_payments(resident.id)) == 2


def test_transfers_into_last_bed(file_session_factory):
    residents = ResidentService(file_session_factory)
    first = residents.create_resident(_resident_payload(0))
    second = residents.create_resident(_resident_payload(1))
    rooms = RoomService(file_session_factory)
    room_a = rooms.create_room({"room_number": "1", "capacity": 2, "monthly_fee": 4000})
    room_b = rooms.create_room({"room_number": "2", "capacity": 2, "monthly_fee": 4000})
    room_c = rooms.create_room({"room_number": "3", "capacity": 1, "monthly_fee": 4000})
    service = AssignmentService(file_session_factory, clock=lambda: date(2025, 3, 1))
    service.assign(first.id, room_a.id)
    service.assign(second.id, room_b.id)

    outcomes = run_concurrently(
        lambda: service.transfer(first.id, room_c.id),
        lambda: service.transfer(second.id, room_c.id),
    )

    assert sum(isinstance(o, TransferResult) for o in outcomes) == 1
    assert sum(isinstance(o, CapacityError) for o in outcomes) == 1
    occupancy_a, occupancy_b, occupancy_c = _occupancies(file_session_factory, room_a.id, room_b.id, room_c.id)
    assert occupancy_c == 1
    assert occupancy_a + occupancy_b == 1


def test_crossing_transfers(file_session_factory):
    residents = ResidentService(file_session_factory)
    first = residents.create_resident(_resident_payload(0))
    second = residents.create_resident(_resident_payload(1))
    rooms = RoomService(file_session_factory)
    room_a = rooms.create_room({"room_number": "1", "capacity": 2, "monthly_fee": 4000})
    room_b = rooms.create_room({"room_number": "2", "capacity": 2, "monthly_fee": 4000})
    service = AssignmentService(file_session_factory, clock=lambda: date(2025, 3, 1))
    service.assign(first.id, room_a.id)
    service.assign(second.id, room_b.id)

    outcomes = run_concurrently(
        lambda: service.transfer(first.id, room_b.id),
        lambda: service.transfer(second.id, room_a.id),
    )

    assert outcomes == [
        TransferResult(from_room_id=room_a.id, to_room_id=room_b.id),
        TransferResult(from_room_id=room_b.id, to_room_id=room_a.id),
    ]
    for occupancy in _occupancies(file_session_factory, room_a.id, room_b.id):
        assert 0 <= occupancy <= 2
    assert sum(_occupancies(file_session_factory, room_a.id, room_b.id)) == 2
