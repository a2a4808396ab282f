from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable
import logging
import unicodedata

from billing_cycle.config import load_settings
from billing_cycle.services.card_billing import RolloverPolicy, derive_billing_month
from billing_cycle.utils.dates import ClosingDayOverflow

logger = logging.getLogger(__name__)


@dataclass
class CardOrigin:
    id: str
    user_id: str
    name: str | None
    type: str | None
    closing_day: int | None
    billing_rollover_policy: RolloverPolicy | str | None = None
    active: bool | None = True


@dataclass
class ExpenseRecord:
    id: str
    origin_id: str
    user_id: str
    date: date | datetime
    billing_month: str | None = None


@dataclass
class BackfillResult:
    updates: dict[str, str] = field(default_factory=dict)
    invalidations: dict[str, set[str]] = field(default_factory=dict)

    @property
    def updated(self) -> int:
        return len(self.updates)


def normalize_origin_type(value: str | None) -> str:
    """アクセント除去 + 小文字化（"Cartão" -> "cartao"）"""
    if not value:
        return ""
    s = unicodedata.normalize("NFD", value)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    return s.strip().lower()


def is_card_origin(origin_type: str | None) -> bool:
    return normalize_origin_type(origin_type) == "cartao"


def backfill_billing_months(
    origins: Iterable[CardOrigin],
    expenses: Iterable[ExpenseRecord],
    *,
    default_policy: RolloverPolicy | str | None = None,
    overflow: ClosingDayOverflow | str | None = None,
) -> BackfillResult:
    """
    billing_month が未設定の支出に請求月を埋める（保存は呼び出し側）。

    - 対象: active な「Cartão」で closing_day が設定済みのもの
    - ポリシー未設定のカードは default_policy（未指定なら設定値 PREVIOUS）
    - invalidations: user_id -> 影響を受けた請求月（キャッシュ破棄用）
    """
    if default_policy is None or overflow is None:
        settings = load_settings()
        if default_policy is None:
            default_policy = settings.default_rollover_policy
        if overflow is None:
            overflow = settings.closing_day_overflow

    cards = [
        o for o in origins
        if o.closing_day is not None and o.active is not False and is_card_origin(o.type)
    ]
    logger.info("backfill: %d card(s) with closing_day configured", len(cards))

    result = BackfillResult()
    if not cards:
        logger.warning("backfill: no card origins found, nothing to do")
        return result

    pending: dict[str, list[ExpenseRecord]] = {}
    for e in expenses:
        if e.billing_month is None:
            pending.setdefault(e.origin_id, []).append(e)

    for card in cards:
        policy = RolloverPolicy(card.billing_rollover_policy or default_policy)
        todo = pending.get(card.id, [])
        logger.info(
            "backfill: card=%s closing_day=%s policy=%s pending=%d",
            card.name or card.id, card.closing_day, policy.value, len(todo),
        )

        for e in todo:
            label = derive_billing_month(e.date, card.closing_day, policy, overflow=overflow)
            result.updates[e.id] = label
            result.invalidations.setdefault(e.user_id, set()).add(label)

    logger.info("backfill: done, %d expense(s) updated", result.updated)
    return result
