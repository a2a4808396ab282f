from __future__ import annotations
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from billing_cycle.config import BillingSettings, check_locale, load_settings
from billing_cycle.services.billing_format import format_billing_month
from billing_cycle.services.card_billing import (
    RolloverPolicy,
    build_billing_statement,
    calculate_due_date,
    derive_billing_month,
    is_valid_closing_day,
)
from billing_cycle.utils.dates import ClosingDayOverflow


class CardBillingConfig(BaseModel):
    closing_day: int = Field(strict=True)
    billing_rollover_policy: RolloverPolicy = RolloverPolicy.PREVIOUS
    days_after_closing: int = Field(default=10, ge=0)
    closing_day_overflow: ClosingDayOverflow = ClosingDayOverflow.ROLL
    locale: str = "pt-BR"

    @field_validator("closing_day", mode="before")
    @classmethod
    def _closing_day_in_range(cls, v):
        if not is_valid_closing_day(v):
            raise ValueError("closing_day must be an integer between 1 and 31")
        return v

    @field_validator("locale")
    @classmethod
    def _supported_locale(cls, v: str) -> str:
        return check_locale(v)

    @classmethod
    def from_settings(
        cls,
        closing_day: int,
        settings: BillingSettings | None = None,
        **overrides,
    ) -> "CardBillingConfig":
        settings = settings or load_settings()
        values = {
            "billing_rollover_policy": settings.default_rollover_policy,
            "days_after_closing": settings.days_after_closing,
            "closing_day_overflow": settings.closing_day_overflow,
            "locale": settings.locale,
        }
        values.update(overrides)
        return cls(closing_day=closing_day, **values)

    def billing_month_for(self, tx_date: date | datetime) -> str:
        return derive_billing_month(
            tx_date,
            self.closing_day,
            self.billing_rollover_policy,
            overflow=self.closing_day_overflow,
        )

    def due_date_for(self, billing_month: str) -> date:
        return calculate_due_date(
            billing_month,
            self.closing_day,
            self.days_after_closing,
            overflow=self.closing_day_overflow,
        )

    def format_month(self, billing_month: str, format_type: Literal["long", "short"] = "long") -> str:
        return format_billing_month(billing_month, self.locale, format_type)

    def statement_for(self, billing_month: str) -> "BillingStatementOut":
        stmt = build_billing_statement(
            billing_month,
            self.closing_day,
            days_after_closing=self.days_after_closing,
            overflow=self.closing_day_overflow,
        )
        return BillingStatementOut.model_validate(stmt)


class BillingStatementOut(BaseModel):
    billing_month: str = Field(pattern=r"^\d{4}-\d{2}$")
    period_start: date
    period_end: date
    closing_date: date
    adjusted_closing_date: date
    due_date: date

    class Config:
        from_attributes = True
