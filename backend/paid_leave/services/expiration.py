"""Grant expiration: lapse checks and days-to-expiry for a reference date."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from dateutil.relativedelta import relativedelta

GRANT_VALIDITY_MONTHS = 24
EXPIRING_SOON_DAYS = 30


class ExpiringGrant(Protocol):
    expiration_date: date


@dataclass(frozen=True)
class GrantStatus:
    """Expiration state of one grant as of a reference date."""

    is_expired: bool
    days_until_expiration: int
    is_expiring_soon: bool


def expiration_date_for(grant_date: date) -> date:
    """Return the date on which a grant issued on grant_date lapses."""
    return grant_date + relativedelta(months=GRANT_VALIDITY_MONTHS)


def classify(grant: ExpiringGrant, reference_date: date) -> GrantStatus:
    """Classify a grant as expired, expiring soon, or active.

    A grant is expired from its expiration date onward, so a grant expiring
    on the reference date itself counts as expired. ``days_until_expiration``
    goes negative for grants that have already lapsed.
    """
    is_expired = reference_date >= grant.expiration_date
    days_until_expiration = (grant.expiration_date - reference_date).days
    return GrantStatus(
        is_expired=is_expired,
        days_until_expiration=days_until_expiration,
        is_expiring_soon=not is_expired and days_until_expiration <= EXPIRING_SOON_DAYS,
    )


def is_expiring_within(grant: ExpiringGrant, reference_date: date, within_days: int) -> bool:
    """True when the grant is still active but lapses within the next within_days."""
    horizon = reference_date + timedelta(days=within_days)
    return reference_date < grant.expiration_date <= horizon
