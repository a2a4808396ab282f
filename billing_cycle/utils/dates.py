from __future__ import annotations
from datetime import date, datetime, timedelta
from enum import Enum
import calendar


class ClosingDayOverflow(str, Enum):
    """How a closing day missing from a month (31 in April) becomes a date."""

    ROLL = "ROLL"    # spill the extra days into the next month: Apr 31 -> May 1
    CLAMP = "CLAMP"  # use the last day of the month: Apr 31 -> Apr 30


def as_calendar_date(d: date | datetime) -> date:
    # datetime is a subclass of date
    if isinstance(d, datetime):
        return d.date()
    return d


def month_range(d: date) -> tuple[date, date]:
    first = d.replace(day=1)
    last_day = calendar.monthrange(first.year, first.month)[1]
    last = first.replace(day=last_day)
    return first, last


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(y: int, m: int, delta: int) -> tuple[int, int]:
    total = (y * 12 + (m - 1)) + delta
    return total // 12, (total % 12) + 1


def resolve_day_in_month(year: int, month: int, desired_day: int) -> date:
    day = min(desired_day, last_day_of_month(year, month))
    return date(year, month, day)


def roll_day_in_month(year: int, month: int, desired_day: int) -> date:
    """
    日付コンストラクタの繰り上がりと同じ挙動:
      roll_day_in_month(2025, 4, 31) -> 2025-05-01
      roll_day_in_month(2025, 2, 0)  -> 2025-01-31
    """
    return date(year, month, 1) + timedelta(days=desired_day - 1)


def day_in_month(
    year: int,
    month: int,
    desired_day: int,
    *,
    overflow: ClosingDayOverflow | str = ClosingDayOverflow.ROLL,
) -> date:
    mode = ClosingDayOverflow(overflow)
    # 15.0 / Decimal("15") も有効な締め日として受け付ける
    desired_day = int(desired_day)
    if mode is ClosingDayOverflow.CLAMP:
        return resolve_day_in_month(year, month, desired_day)
    return roll_day_in_month(year, month, desired_day)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5  # Sat/Sun


def is_business_day(d: date) -> bool:
    return not is_weekend(d)


def shift_to_business_day(d: date, *, direction: str) -> date:
    """
    direction:
      - "prev": 直前の営業日へ（前倒し）
      - "next": 直後の営業日へ（後ろ倒し）
    """
    if direction not in ("prev", "next"):
        raise ValueError(f"direction must be 'prev' or 'next', got {direction!r}")

    step = -1 if direction == "prev" else 1
    while not is_business_day(d):
        d = d + timedelta(days=step)
    return d
