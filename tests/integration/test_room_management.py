"""Integration tests for room and resident CRUD."""

from decimal import Decimal

import pytest

from hostel.services.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)


class TestRooms:
    """RoomService."""

    def test_create_room_starts_empty(self, room_service):
        room = room_service.create_room({"room_number": "201", "capacity": 4, "monthly_fee": "7000"})

        assert room.id is not None
        assert room.occupancy == 0
        assert room.free_beds == 4
        assert room.monthly_fee == Decimal("7000")
        assert room.room_type == "Standard"

    def test_duplicate_room_number(self, room_service, make_room):
        make_room(room_number="301")

        with pytest.raises(ConflictError, match="Room number already exists"):
            room_service.create_room({"room_number": "301", "capacity": 1, "monthly_fee": 1})

    def test_update_fields(self, room_service, make_room):
        room = make_room()

        updated = room_service.update_room(
            room.id, {"monthly_fee": 6500, "wifi_available": "true", "room_type": "Deluxe"}
        )

        assert updated.monthly_fee == Decimal("6500")
        assert updated.wifi_available is True
        assert updated.room_type == "Deluxe"

    def test_update_capacity_below_occupancy(self, room_service, assignment_service, make_resident, make_room):
        room = make_room(capacity=3)
        for _ in range(2):
            assignment_service.assign(make_resident().id, room.id)

        with pytest.raises(InvalidStateError):
            room_service.update_room(room.id, {"capacity": 1, "monthly_fee": 9000})

        unchanged, _ = room_service.get_room(room.id)
        assert unchanged.capacity == 3
        assert unchanged.monthly_fee == Decimal("5000")

    def test_update_capacity_to_occupancy(self, room_service, assignment_service, make_resident, make_room):
        room = make_room(capacity=3)
        assignment_service.assign(make_resident().id, room.id)

        assert room_service.update_room(room.id, {"capacity": 1}).capacity == 1

    def test_update_rename_conflict(self, room_service, make_room):
        make_room(room_number="A1")
        other = make_room(room_number="A2")

        with pytest.raises(ConflictError):
            room_service.update_room(other.id, {"room_number": "A1"})

    def test_empty_update(self, room_service, make_room):
        room = make_room()

        with pytest.raises(ValidationError, match="No updates provided"):
            room_service.update_room(room.id, {})

    def test_update_missing_room(self, room_service):
        with pytest.raises(NotFoundError):
            room_service.update_room(77, {"monthly_fee": 100})

    def test_delete_room_lifecycle(self, room_service, assignment_service, make_resident, make_room):
        room = make_room()
        resident = make_resident()
        assignment_service.assign(resident.id, room.id)

        with pytest.raises(ConflictError):
            room_service.delete_room(room.id)

        assignment_service.release(resident.id)
        room_service.delete_room(room.id)

        with pytest.raises(NotFoundError):
            room_service.get_room(room.id)

    def test_get_room_lists_residents(self, room_service, assignment_service, make_resident, make_room):
        room = make_room()
        zain = make_resident(name="Zain Ahmed")
        amna = make_resident(name="Amna Tariq")
        assignment_service.assign(zain.id, room.id)
        assignment_service.assign(amna.id, room.id)

        loaded, residents = room_service.get_room(room.id)

        assert loaded.occupancy == 2
        assert [r.name for r in residents] == ["Amna Tariq", "Zain Ahmed"]

    def test_list_rooms_sorted(self, room_service, make_room):
        make_room(room_number="B2")
        make_room(room_number="A9")

        assert [r.room_number for r in room_service.list_rooms()] == ["A9", "B2"]


class TestResidents:
    """ResidentService."""

    def test_duplicate_cnic(self, resident_service, make_resident):
        make_resident(cnic="11111-2222222-3")

        with pytest.raises(ConflictError, match="CNIC already exists"):
            make_resident(cnic="11111-2222222-3")

    def test_update_resident(self, resident_service, make_resident):
        resident = make_resident()

        updated = resident_service.update_resident(
            resident.id,
            {
                "name": "New Name",
                "cnic": resident.cnic,
                "department": "Mathematics",
                "phone": "03331234567",
                "address": "Block C Model Town",
            },
        )

        assert updated.name == "New Name"
        assert resident_service.get_resident(resident.id).department == "Mathematics"

    def test_update_missing_resident(self, resident_service):
        payload = {
            "name": "Nobody",
            "cnic": "12345-1234567-1",
            "department": "None",
            "phone": "03001234567",
            "address": "Nowhere Street",
        }
        with pytest.raises(NotFoundError):
            resident_service.update_resident(404, payload)

    def test_search_and_sort(self, resident_service, make_resident):
        make_resident(name="Bilal Shah", department="Physics")
        make_resident(name="Hina Aslam", department="Chemistry")
        make_resident(name="Asad Shah", department="Physics")

        physics = resident_service.list_residents(search="physics", sort_by="name", order="desc")

        assert [r.name for r in physics] == ["Bilal Shah", "Asad Shah"]
        assert len(resident_service.list_residents(search="shah")) == 2
        assert len(resident_service.list_residents()) == 3
