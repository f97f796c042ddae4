"""
Contract Expiry Classifier

    expired        end_date <  today
    expiring_soon  today <= end_date < today + 1 month
    active         otherwise

A contract ending today is not expired yet: it is expiring_soon with
days_remaining == 0. The window follows calendar months, so it is 28 days
long from Feb 1 and 31 days long from Mar 1.
"""
import calendar
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class ContractStatus(str, Enum):
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ContractClassification:
    status: ContractStatus
    days_remaining: int


def add_one_month(day: date) -> date:
    """
    Same day next month, clamped to the month's end: Jan 31 -> Feb 28/29.
    """
    if day.month == 12:
        year, month = day.year + 1, 1
    else:
        year, month = day.year, day.month + 1
    _, last_day = calendar.monthrange(year, month)
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def _day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def classify(rent, now=None) -> ContractClassification:
    today = _day(now) if now is not None else date.today()
    end_date = _day(rent.end_date)
    days_remaining = (end_date - today).days

    if end_date < today:
        status = ContractStatus.EXPIRED
    elif end_date < add_one_month(today):
        status = ContractStatus.EXPIRING_SOON
    else:
        status = ContractStatus.ACTIVE
    return ContractClassification(status=status, days_remaining=days_remaining)


def classify_all(
    rents: Iterable,
    now=None,
    status: Optional[ContractStatus] = None,
) -> List[Tuple[object, ContractClassification]]:
    """Classify every rent, optionally keeping one status; soonest end first."""
    results = []
    for rent in rents:
        classification = classify(rent, now)
        if status is None or classification.status == status:
            results.append((rent, classification))
    results.sort(key=lambda pair: pair[1].days_remaining)
    return results
