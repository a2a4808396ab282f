from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from numbers import Real
from typing import Callable, Iterable, TypeVar
import logging
import re

from billing_cycle.utils.dates import (
    ClosingDayOverflow,
    add_months,
    as_calendar_date,
    day_in_month,
    month_range,
    shift_to_business_day,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

BILLING_MONTH_RE = re.compile(r"(?P<y>\d{4})-(?P<m>\d{2})")


class RolloverPolicy(str, Enum):
    """Weekend closing rule of a card; the value is the persisted/wire string."""

    NEXT = "NEXT"
    PREVIOUS = "PREVIOUS"


@dataclass(frozen=True)
class BillingStatement:
    billing_month: str
    period_start: date
    period_end: date
    closing_date: date
    adjusted_closing_date: date
    due_date: date


def format_year_month(year: int, month: int) -> str:
    # YYYY-MM は 7 文字固定なので 9999-12 が上限
    if not 1 <= year <= 9999:
        raise ValueError(f"year out of range for YYYY-MM label: {year}")
    return f"{year:04d}-{month:02d}"


def parse_billing_month(billing_month: str) -> tuple[int, int]:
    m = BILLING_MONTH_RE.fullmatch(billing_month or "")
    if not m:
        raise ValueError(f"invalid billing month (expected YYYY-MM): {billing_month!r}")
    year, month = int(m.group("y")), int(m.group("m"))
    if not 1 <= month <= 12:
        raise ValueError(f"invalid billing month (month out of range): {billing_month!r}")
    return year, month


def next_billing_month(billing_month: str, months: int = 1) -> str:
    y, m = parse_billing_month(billing_month)
    return format_year_month(*add_months(y, m, months))


def adjust_to_business_day(d: date) -> date:
    """土日の締め日は直前の金曜日へ（土: -1日, 日: -2日）。平日はそのまま。"""
    return shift_to_business_day(as_calendar_date(d), direction="prev")


def is_valid_closing_day(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        return False
    try:
        if value != int(value):
            return False
    except (OverflowError, ValueError):
        # inf / nan
        return False
    return 1 <= value <= 31


def effective_closing_date(
    year: int,
    month: int,
    closing_day: int,
    *,
    overflow: ClosingDayOverflow | str = ClosingDayOverflow.ROLL,
) -> date:
    closing = day_in_month(year, month, closing_day, overflow=overflow)
    return adjust_to_business_day(closing)


def derive_billing_month(
    tx_date: date | datetime,
    closing_day: int,
    policy: RolloverPolicy | str = RolloverPolicy.NEXT,
    *,
    overflow: ClosingDayOverflow | str = ClosingDayOverflow.ROLL,
) -> str:
    """
    取引日 → 請求月ラベル（YYYY-MM）

    1. 取引日の年月で締め日を作る（overflow で月末超過の扱いを決める）
    2. 土日なら直前の金曜日に寄せる
    3. 締め日（調整後）より後なら翌月分、当日までなら当月分

    例: 締め日 9 / 2025-11-09 は日曜 → 11-07（金）
      2025-11-07 -> "2025-11"
      2025-11-08 -> "2025-12"
    締め日当日はどちらのポリシーでも当月分になる。
    """
    tx = as_calendar_date(tx_date)
    policy = RolloverPolicy(policy)
    year, month = tx.year, tx.month

    closing = effective_closing_date(year, month, closing_day, overflow=overflow)

    # NEXT / PREVIOUS 共通の境界: 締め日当日は当月分
    if tx > closing:
        year, month = add_months(year, month, 1)

    label = format_year_month(year, month)
    logger.debug(
        "billing month tx=%s closing_day=%s policy=%s closing=%s -> %s",
        tx, closing_day, policy.value, closing, label,
    )
    return label


def calculate_due_date(
    billing_month: str,
    closing_day: int,
    days_after_closing: int = 10,
    *,
    overflow: ClosingDayOverflow | str = ClosingDayOverflow.ROLL,
) -> date:
    """締め日（営業日調整なし）+ days_after_closing 日"""
    year, month = parse_billing_month(billing_month)
    closing = day_in_month(year, month, closing_day, overflow=overflow)
    return closing + timedelta(days=days_after_closing)


def billing_period(
    billing_month: str,
    closing_day: int,
    *,
    overflow: ClosingDayOverflow | str = ClosingDayOverflow.ROLL,
) -> tuple[date, date]:
    """
    derive_billing_month がこのラベルに割り当てる取引日の範囲（両端含む）。

    ラベル月 M の取引は「M の取引で締め日(M)以前」と
    「M-1 の取引で締め日(M-1)より後」の和集合。
    NEXT / PREVIOUS は境界が同じなのでポリシーに依存しない。
    """
    year, month = parse_billing_month(billing_month)
    prev_y, prev_m = add_months(year, month, -1)

    month_first, month_last = month_range(date(year, month, 1))
    prev_first, prev_last = month_range(date(prev_y, prev_m, 1))

    prev_closing = effective_closing_date(prev_y, prev_m, closing_day, overflow=overflow)
    closing = effective_closing_date(year, month, closing_day, overflow=overflow)

    start = max(prev_closing + timedelta(days=1), prev_first)
    if start > prev_last:
        # 前月の締め日が当月にずれ込んでいる → 前月分の取引はない
        start = month_first

    if closing < month_first:
        # 当月の締め日が前月に前倒し → 当月分の取引はない
        end = prev_last
    else:
        end = min(closing, month_last)

    return start, end


def build_billing_statement(
    billing_month: str,
    closing_day: int,
    *,
    days_after_closing: int = 10,
    overflow: ClosingDayOverflow | str = ClosingDayOverflow.ROLL,
) -> BillingStatement:
    year, month = parse_billing_month(billing_month)
    period_start, period_end = billing_period(billing_month, closing_day, overflow=overflow)
    closing = day_in_month(year, month, closing_day, overflow=overflow)
    return BillingStatement(
        billing_month=format_year_month(year, month),
        period_start=period_start,
        period_end=period_end,
        closing_date=closing,
        adjusted_closing_date=adjust_to_business_day(closing),
        due_date=calculate_due_date(
            billing_month, closing_day, days_after_closing, overflow=overflow
        ),
    )


def group_by_billing_month(
    items: Iterable[T],
    closing_day: int,
    policy: RolloverPolicy | str = RolloverPolicy.NEXT,
    *,
    key: Callable[[T], date | datetime] | None = None,
    overflow: ClosingDayOverflow | str = ClosingDayOverflow.ROLL,
) -> dict[str, list[T]]:
    """
    請求月ラベルごとにまとめる（ラベル昇順、各グループ内は入力順）。
    key を省略した場合 items は日付そのもの。
    """
    groups: dict[str, list[T]] = {}
    for item in items:
        tx_date = key(item) if key is not None else item
        label = derive_billing_month(tx_date, closing_day, policy, overflow=overflow)
        groups.setdefault(label, []).append(item)
    return {label: groups[label] for label in sorted(groups)}
