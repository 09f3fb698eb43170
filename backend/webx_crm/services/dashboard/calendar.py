"""Calendar helpers for month windows and the April-March fiscal year."""

from datetime import date

from dateutil.relativedelta import relativedelta

# Fiscal year runs April 1 to March 31
FISCAL_YEAR_START_MONTH = 4


def first_of_month(d: date) -> date:
    """Return the 1st of the month containing ``d``."""
    return d.replace(day=1)


def last_of_month(d: date) -> date:
    """Return the final calendar day of the month containing ``d``."""
    return d + relativedelta(day=31)


def next_month(d: date) -> date:
    """Advance to the first day of the following month."""
    return first_of_month(d) + relativedelta(months=1)


def fiscal_year_start(d: date) -> date:
    """Return April 1 of the fiscal year that ``d`` falls in."""
    year = d.year if d.month >= FISCAL_YEAR_START_MONTH else d.year - 1
    return date(year, FISCAL_YEAR_START_MONTH, 1)


def months_left_in_fiscal_year(d: date) -> int:
    """Whole months after the current one until the fiscal year ends in March.

    Hard-wired to a March year end; must change together with
    ``FISCAL_YEAR_START_MONTH``.
    """
    m = d.month - 1
    return 2 - m if m <= 2 else 14 - m
