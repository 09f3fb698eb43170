"""Revenue rules shared by one-off and recurring sale rows."""

import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Protocol

from webx_crm.services.dashboard.calendar import first_of_month, last_of_month


class AmountRow(Protocol):
    """Anything carrying the three amount columns."""

    amount: Any
    quantity: Any
    unit_amount: Any


@dataclass(frozen=True, slots=True)
class RecurringRevenueRow:
    """Snapshot of a recurring sale, with dates already normalized."""

    id: int
    amount: Decimal | float | None
    quantity: int | None
    unit_amount: Decimal | float | None
    start_date: date | None
    end_date: date | None
    active: bool | None
    billing_cycle: str | None


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def effective_amount(row: AmountRow) -> float:
    """Resolve a row's value: explicit amount, else quantity * unit_amount.

    Non-numeric or non-finite results count as 0.
    """
    try:
        if row.amount is not None:
            value = _number(row.amount)
        else:
            value = _number(row.quantity) * _number(row.unit_amount)
    except (TypeError, ValueError, ArithmeticError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def is_active_in_month(row: RecurringRevenueRow, month: date) -> bool:
    """Whether a recurring row bills in the calendar month containing ``month``."""
    active = row.active is None or row.active in (True, 1)
    monthly = str(row.billing_cycle or "monthly").lower() == "monthly"

    window_start = first_of_month(month)
    window_end = last_of_month(month)
    after_start = row.start_date is None or row.start_date <= window_end
    before_end = row.end_date is None or row.end_date >= window_start

    return active and monthly and after_start and before_end


def sum_recurring_for_month(rows: list[RecurringRevenueRow], month: date) -> float:
    """Total effective amount of the rows billing in ``month``."""
    return sum(
        (effective_amount(row) for row in rows if is_active_in_month(row, month)),
        0.0,
    )
