"""Payload validation for residents and rooms.

Each validator collects every problem with a payload, then raises a single
ValidationError whose message joins them with "; ". On success it returns a
cleaned dict containing only the fields that were supplied (plus defaults when
``require_all`` is set).
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from hostel.services.config import settings
from hostel.services.errors import ValidationError

CNIC_REGEX = re.compile(r"^\d{5}-\d{7}-\d$")
PHONE_REGEX = re.compile(r"^(?:\+92|0)?3\d{2}-?\d{7}$")
NAME_REGEX = re.compile(r"^[A-Za-z ]+$")

ADDRESS_MIN_LENGTH = 6
ADDRESS_MAX_LENGTH = 100
MAX_FLOOR_LEVEL = 200
COMPLAINT_MIN_LENGTH = 3
COMPLAINT_MAX_LENGTH = 500


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip()


def parse_bool(value: Any) -> bool:
    """Accept the loose truthy forms HTML forms and JSON clients send."""
    return value is True or value == 1 or str(value).lower() in ("true", "1")


def parse_decimal(value: Any) -> Decimal | None:
    """Parse a finite Decimal, or return None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def validate_resident_payload(payload: dict) -> dict:
    """
    Validate and clean a resident payload. Every field is required.

    Args:
        payload: Raw field values (name, cnic, department, phone, address)

    Returns:
        Dict of stripped field values

    Raises:
        ValidationError: With all problems joined by "; "
    """
    errors = []
    clean = {
        field: _clean_text(payload.get(field))
        for field in ("name", "cnic", "department", "phone", "address")
    }

    if not clean["name"]:
        errors.append("Name is required")
    elif not NAME_REGEX.match(clean["name"]):
        errors.append("Name must contain only letters and spaces")

    if not clean["department"]:
        errors.append("Department is required")
    elif not NAME_REGEX.match(clean["department"]):
        errors.append("Department must contain only letters and spaces")

    if not clean["cnic"]:
        errors.append("CNIC is required")
    elif not CNIC_REGEX.match(clean["cnic"]):
        errors.append("CNIC must follow 12345-1234567-1 format")

    if not clean["phone"]:
        errors.append("Phone is required")
    elif not PHONE_REGEX.match(clean["phone"]):
        errors.append("Phone must be a valid Pakistani mobile number")

    address = clean["address"]
    if not address:
        errors.append("Address is required")
    elif len(address) < ADDRESS_MIN_LENGTH:
        errors.append(f"Address must be at least {ADDRESS_MIN_LENGTH} characters")
    elif len(address) > ADDRESS_MAX_LENGTH:
        errors.append(f"Address cannot exceed {ADDRESS_MAX_LENGTH} characters")

    if errors:
        raise ValidationError("; ".join(errors))
    return clean


def validate_room_payload(
    payload: dict,
    require_all: bool = False,
    max_capacity: int | None = None,
    max_monthly_fee: int | None = None,
) -> dict:
    """
    Validate and clean a room payload.

    Args:
        payload: Raw field values; absent keys are left untouched
        require_all: Creation mode, room_number/capacity/monthly_fee are required
            and floor_level/wifi_available/room_type get defaults
        max_capacity: Upper bound for capacity (default: settings.max_room_capacity)
        max_monthly_fee: Upper bound for monthly_fee (default: settings.max_monthly_fee)

    Returns:
        Dict with validated values (capacity/floor_level as int, monthly_fee as Decimal)

    Raises:
        ValidationError: With all problems joined by "; "
    """
    if max_capacity is None:
        max_capacity = settings.max_room_capacity
    if max_monthly_fee is None:
        max_monthly_fee = settings.max_monthly_fee
    errors = []
    clean: dict[str, Any] = {}

    if payload.get("room_number") is not None:
        room_number = _clean_text(payload["room_number"])
        max_length = settings.room_number_max_length
        if not room_number:
            errors.append("Room number is required")
        elif len(room_number) > max_length:
            errors.append(f"Room number must be under {max_length} characters")
        else:
            numeric = parse_decimal(room_number)
            if numeric is not None and numeric < 0:
                errors.append("Room number cannot be negative")
            else:
                clean["room_number"] = room_number
    elif require_all:
        errors.append("Room number is required")

    if payload.get("room_type") is not None:
        clean["room_type"] = _clean_text(payload["room_type"]) or "Standard"
    elif require_all:
        clean["room_type"] = "Standard"

    if payload.get("capacity") is not None:
        capacity = parse_decimal(payload["capacity"])
        if capacity is None or capacity != capacity.to_integral_value() or not 0 < capacity <= max_capacity:
            errors.append(f"Capacity must be between 1 and {max_capacity}")
        else:
            clean["capacity"] = int(capacity)
    elif require_all:
        errors.append("Capacity is required")

    if payload.get("monthly_fee") is not None:
        fee = parse_decimal(payload["monthly_fee"])
        if fee is None or not 0 <= fee <= max_monthly_fee:
            errors.append(f"Monthly fee must be between 0 and {max_monthly_fee} {settings.currency}")
        else:
            clean["monthly_fee"] = fee
    elif require_all:
        errors.append("Monthly fee is required")

    if payload.get("floor_level") is not None:
        floor = parse_decimal(payload["floor_level"])
        if floor is None or floor != floor.to_integral_value() or not 0 <= floor <= MAX_FLOOR_LEVEL:
            errors.append(f"Floor must be an integer between 0 and {MAX_FLOOR_LEVEL}")
        else:
            clean["floor_level"] = int(floor)
    elif require_all:
        clean["floor_level"] = 0

    if payload.get("wifi_available") is not None:
        clean["wifi_available"] = parse_bool(payload["wifi_available"])
    elif require_all:
        clean["wifi_available"] = False

    if errors:
        raise ValidationError("; ".join(errors))
    return clean


def validate_complaint_text(text: Any) -> str:
    """Strip a complaint text and check its length (3..500 characters)."""
    clean = _clean_text(text) or ""
    if len(clean) < COMPLAINT_MIN_LENGTH:
        raise ValidationError(f"Complaint must be at least {COMPLAINT_MIN_LENGTH} characters")
    if len(clean) > COMPLAINT_MAX_LENGTH:
        raise ValidationError(f"Complaint cannot exceed {COMPLAINT_MAX_LENGTH} characters")
    return clean


__all__ = [
    "parse_bool",
    "parse_decimal",
    "validate_complaint_text",
    "validate_resident_payload",
    "validate_room_payload",
]
