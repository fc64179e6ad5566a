"""Domain-level validation rules for configuration, customers and stays."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class HotelConfig:
    invoice_tax_rate: float
    default_check_in_hour: int
    default_check_out_hour: int


def validate_hotel_config(config: HotelConfig) -> None:
    if not 0.0 <= config.invoice_tax_rate <= 1.0:
        raise ValueError("invoice_tax_rate must be between 0 and 1")
    if not 0 <= config.default_check_in_hour <= 23:
        raise ValueError("default_check_in_hour must be between 0 and 23")
    if not 0 <= config.default_check_out_hour <= 23:
        raise ValueError("default_check_out_hour must be between 0 and 23")


def validate_stay_window(check_in: datetime, check_out: datetime) -> None:
    if check_out <= check_in:
        raise ValueError("check_out must be after check_in")


def validate_room_rate(price_per_night: float) -> None:
    if price_per_night < 0:
        raise ValueError("price_per_night must be >= 0")


def is_valid_name(name: str) -> bool:
    stripped = name.strip()
    if not stripped or stripped.isdigit():
        return False
    return any(char.isalpha() for char in stripped)


def is_valid_email(email: str) -> bool:
    if not email or " " in email:
        return False
    at_pos = email.find("@")
    if at_pos <= 0 or at_pos == len(email) - 1:
        return False
    dot_pos = email.find(".", at_pos + 1)
    if dot_pos == -1 or dot_pos == at_pos + 1 or dot_pos == len(email) - 1:
        return False
    return True


def is_valid_phone(phone: str) -> bool:
    digits = phone[1:] if phone.startswith("+") else phone
    if not digits.isdigit():
        return False
    return 7 <= len(digits) <= 15


def validate_customer_fields(name: str, email: str, phone: str) -> None:
    if not is_valid_name(name):
        raise ValueError("name must contain letters and cannot be digits only")
    if not is_valid_email(email):
        raise ValueError("email must look like user@example.com")
    if not is_valid_phone(phone):
        raise ValueError("phone must be 7-15 digits with an optional leading '+'")
