"""Tests for configuration and customer-field validation rules."""

from __future__ import annotations

from datetime import datetime

import pytest

from hotel.domain.constraints import (
    HotelConfig,
    is_valid_email,
    is_valid_name,
    is_valid_phone,
    validate_customer_fields,
    validate_hotel_config,
    validate_stay_window,
)


def valid_config(**overrides) -> HotelConfig:
    """Return a valid baseline HotelConfig, optionally overriding fields."""
    defaults = {
        "invoice_tax_rate": 0.10,
        "default_check_in_hour": 14,
        "default_check_out_hour": 11,
    }
    defaults.update(overrides)
    return HotelConfig(**defaults)


# --- Baseline pass ---

def test_valid_config_passes() -> None:
    validate_hotel_config(valid_config())


# --- invoice_tax_rate ---

def test_tax_rate_below_zero_raises() -> None:
    with pytest.raises(ValueError):
        validate_hotel_config(valid_config(invoice_tax_rate=-0.01))


def test_tax_rate_above_one_raises() -> None:
    with pytest.raises(ValueError):
        validate_hotel_config(valid_config(invoice_tax_rate=1.5))


def test_tax_rate_zero_passes() -> None:
    validate_hotel_config(valid_config(invoice_tax_rate=0.0))


# --- default hours ---

def test_check_in_hour_out_of_range_raises() -> None:
    with pytest.raises(ValueError):
        validate_hotel_config(valid_config(default_check_in_hour=24))


def test_check_out_hour_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_hotel_config(valid_config(default_check_out_hour=-1))


# --- stay window ---

def test_check_out_equal_to_check_in_raises() -> None:
    instant = datetime(2030, 1, 1, 14)
    with pytest.raises(ValueError):
        validate_stay_window(instant, instant)


# --- customer fields ---

@pytest.mark.parametrize("name", ["Ada Lovelace", "J", "R2D2"])
def test_valid_names(name: str) -> None:
    assert is_valid_name(name)


@pytest.mark.parametrize("name", ["", "   ", "12345", "!!!"])
def test_invalid_names(name: str) -> None:
    assert not is_valid_name(name)


@pytest.mark.parametrize("email", ["user@example.com", "a.b@mail.co.uk"])
def test_valid_emails(email: str) -> None:
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    ["", "user example.com", "@example.com", "user@", "user@.com", "user@example.", "userexample.com"],
)
def test_invalid_emails(email: str) -> None:
    assert not is_valid_email(email)


@pytest.mark.parametrize("phone", ["5551234", "+441234567890", "123456789012345"])
def test_valid_phones(phone: str) -> None:
    assert is_valid_phone(phone)


@pytest.mark.parametrize("phone", ["", "+", "123456", "555-1234", "1234567890123456"])
def test_invalid_phones(phone: str) -> None:
    assert not is_valid_phone(phone)


def test_validate_customer_fields_reports_first_bad_field() -> None:
    with pytest.raises(ValueError, match="email"):
        validate_customer_fields("Ada", "not-an-email", "5551234")
