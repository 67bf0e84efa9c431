"""Tests for grant expiration classification."""

from __future__ import annotations

import uuid
from datetime import date, timedelta

from paid_leave.models.grant import LeaveGrant
from paid_leave.services.expiration import (
    EXPIRING_SOON_DAYS,
    GrantStatus,
    classify,
    expiration_date_for,
    is_expiring_within,
)

EXPIRES = date(2026, 7, 1)


def _grant(expiration_date: date = EXPIRES) -> LeaveGrant:
    return LeaveGrant(
        employee_id=uuid.uuid4(),
        grant_date=date(2024, 7, 1),
        days_granted=11,
        expiration_date=expiration_date,
    )


class TestExpirationDateFor:
    """Tests for expiration_date_for."""

    def test_two_calendar_years(self) -> None:
        assert expiration_date_for(date(2023, 7, 1)) == date(2025, 7, 1)

    def test_leap_day_clamps(self) -> None:
        assert expiration_date_for(date(2024, 2, 29)) == date(2026, 2, 28)


class TestClassify:
    """Tests for classify."""

    def test_expiration_day_is_expired(self) -> None:
        assert classify(_grant(), EXPIRES) == GrantStatus(
            is_expired=True,
            days_until_expiration=0,
            is_expiring_soon=False,
        )

    def test_day_before_expiration_is_active_and_expiring_soon(self) -> None:
        status = classify(_grant(), EXPIRES - timedelta(days=1))
        assert status.is_expired is False
        assert status.days_until_expiration == 1
        assert status.is_expiring_soon is True

    def test_expiring_soon_window_is_inclusive(self) -> None:
        assert classify(_grant(), EXPIRES - timedelta(days=EXPIRING_SOON_DAYS)).is_expiring_soon is True
        assert classify(_grant(), EXPIRES - timedelta(days=EXPIRING_SOON_DAYS + 1)).is_expiring_soon is False

    def test_long_expired_has_negative_days(self) -> None:
        status = classify(_grant(), date(2026, 8, 1))
        assert status.is_expired is True
        assert status.days_until_expiration == -31
        assert status.is_expiring_soon is False

    def test_fresh_grant(self) -> None:
        status = classify(_grant(), date(2024, 7, 1))
        assert status.is_expired is False
        assert status.days_until_expiration == 730
        assert status.is_expiring_soon is False


class TestIsExpiringWithin:
    """Tests for is_expiring_within."""

    def test_inside_window(self) -> None:
        assert is_expiring_within(_grant(), date(2026, 6, 15), 30) is True

    def test_window_end_inclusive(self) -> None:
        assert is_expiring_within(_grant(), EXPIRES - timedelta(days=30), 30) is True

    def test_beyond_window(self) -> None:
        assert is_expiring_within(_grant(), EXPIRES - timedelta(days=31), 30) is False

    def test_already_expired_excluded(self) -> None:
        assert is_expiring_within(_grant(), EXPIRES, 30) is False

    def test_wider_window(self) -> None:
        assert is_expiring_within(_grant(), date(2026, 5, 1), 90) is True
