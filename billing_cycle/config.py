from __future__ import annotations
import logging
import os
import sys

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from billing_cycle.services.card_billing import RolloverPolicy
from billing_cycle.utils.dates import ClosingDayOverflow
from billing_cycle.utils.month_names import get_month_names

load_dotenv()

LOGGER_NAME = "billing_cycle"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def check_locale(v: str) -> str:
    # 月名テーブルが無いロケールは表示に使えない
    get_month_names(v)
    return v


class BillingSettings(BaseModel):
    locale: str = Field(default="pt-BR", min_length=2)
    days_after_closing: int = Field(default=10, ge=0)
    default_rollover_policy: RolloverPolicy = RolloverPolicy.PREVIOUS
    closing_day_overflow: ClosingDayOverflow = ClosingDayOverflow.ROLL
    log_level: str = "INFO"

    @field_validator("locale")
    @classmethod
    def _supported_locale(cls, v: str) -> str:
        return check_locale(v)

    @field_validator("default_rollover_policy", "closing_day_overflow", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v!r}")
        return level


def load_settings() -> BillingSettings:
    # import時固定じゃなく毎回読む
    return BillingSettings(
        locale=os.getenv("BILLING_LOCALE", "pt-BR"),
        days_after_closing=os.getenv("BILLING_DAYS_AFTER_CLOSING", "10"),
        default_rollover_policy=os.getenv("BILLING_DEFAULT_ROLLOVER_POLICY", "PREVIOUS"),
        closing_day_overflow=os.getenv("BILLING_CLOSING_DAY_OVERFLOW", "ROLL"),
        log_level=os.getenv("BILLING_LOG_LEVEL", "INFO"),
    )


class BillingLogHandler(logging.StreamHandler):
    """Stream handler installed by configure_logging."""


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Attach one stream handler to the package logger; later calls only update the level."""
    logger = logging.getLogger(LOGGER_NAME)
    if level is None:
        level = load_settings().log_level
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(isinstance(h, BillingLogHandler) for h in logger.handlers):
        handler = BillingLogHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    return logger
