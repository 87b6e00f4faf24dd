"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from exhibitions.domain import Actor, Capacity, EventId, EventType, Money, Role
from exhibitions.domain.errors import ErrorCode, EventNotFoundError, InvalidEventDataError
from exhibitions.domain.models import check_event_fields

START = datetime(2026, 11, 20, 9, 0, tzinfo=timezone.utc)


def _fields(**overrides):
    fields = {
        "code": "SCI-FAIR_2026",
        "event_type": EventType.FREE,
        "price": Decimal("0"),
        "max_capacity": None,
        "start_date": START,
        "end_date": START + timedelta(hours=8),
        "registration_start_date": START - timedelta(days=30),
        "registration_end_date": START - timedelta(days=1),
    }
    fields.update(overrides)
    return fields


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(Decimal("49.99")).amount == Decimal("49.99")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(Decimal("0")).amount == 0

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-1"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("5"))) == "5.00"


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        """Capacity can be created with positive value."""
        assert Capacity(250).value == 250

    def test_capacity_rejects_zero(self):
        """Zero is not a capacity; unlimited is expressed as None."""
        with pytest.raises(ValueError):
            Capacity(0)

    def test_capacity_rejects_value_above_limit(self):
        """Capacity raises ValueError above 100,000."""
        with pytest.raises(ValueError):
            Capacity(100_001)


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_uuid(self):
        """EventId.from_string parses valid UUID."""
        raw = "7a1c7a02-5e0b-4d4e-9b55-2f0c1c7a9e10"
        event_id = EventId.from_string(raw)
        assert event_id.value == UUID(raw)
        assert str(event_id) == raw

    def test_from_string_invalid_uuid(self):
        """EventId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")


class TestActor:
    def test_admin_role_is_admin(self):
        assert Actor(uuid4(), Role.ADMIN).is_admin

    def test_manager_role_is_not_admin(self):
        assert not Actor(uuid4(), Role.EVENT_MANAGER).is_admin


class TestDomainErrors:
    def test_error_str_includes_code(self):
        """str() of a domain error shows the code and message."""
        error = EventNotFoundError("abc")
        assert str(error) == "EVENT_NOT_FOUND: Event not found"
        assert error.code is ErrorCode.EVENT_NOT_FOUND
        assert error.event_id == "abc"


class TestCheckEventFields:
    """Tests for the invariants every stored event satisfies."""

    def test_valid_free_event_passes(self):
        check_event_fields(_fields())

    def test_valid_paid_event_passes(self):
        check_event_fields(_fields(event_type=EventType.PAID, price=Decimal("150.00")))

    @pytest.mark.parametrize("code", ["sci-fair", "SCI FAIR", "FAIR!"])
    def test_rejects_malformed_code(self, code):
        with pytest.raises(InvalidEventDataError, match="uppercase"):
            check_event_fields(_fields(code=code))

    def test_paid_event_requires_price(self):
        with pytest.raises(InvalidEventDataError, match="greater than 0"):
            check_event_fields(_fields(event_type=EventType.PAID, price=Decimal("0")))

    def test_paid_event_price_ceiling(self):
        with pytest.raises(InvalidEventDataError, match="cannot exceed"):
            check_event_fields(_fields(event_type=EventType.PAID, price=Decimal("100000.01")))

    def test_free_event_cannot_have_price(self):
        with pytest.raises(InvalidEventDataError, match="Free events"):
            check_event_fields(_fields(price=Decimal("10")))

    @pytest.mark.parametrize("capacity", [0, 100_001])
    def test_capacity_out_of_range(self, capacity):
        with pytest.raises(InvalidEventDataError, match="Max capacity"):
            check_event_fields(_fields(max_capacity=capacity))

    def test_start_must_precede_end(self):
        with pytest.raises(InvalidEventDataError, match="start date must be before end"):
            check_event_fields(_fields(end_date=START))

    def test_registration_window_must_be_ordered(self):
        with pytest.raises(InvalidEventDataError, match="Registration start"):
            check_event_fields(
                _fields(
                    registration_start_date=START - timedelta(days=1),
                    registration_end_date=START - timedelta(days=2),
                )
            )

    def test_registration_closes_before_start(self):
        """Registration ending after the event starts is rejected."""
        with pytest.raises(InvalidEventDataError, match="close before event starts"):
            check_event_fields(_fields(registration_end_date=START + timedelta(hours=1)))

    def test_registration_may_close_exactly_at_start(self):
        check_event_fields(_fields(registration_end_date=START))
