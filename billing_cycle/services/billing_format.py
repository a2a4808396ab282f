from __future__ import annotations
from typing import Literal

from billing_cycle.services.card_billing import parse_billing_month
from billing_cycle.utils.month_names import MonthNameProvider, get_month_names


def _capitalize_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def format_billing_month(
    billing_month: str,
    locale: str = "pt-BR",
    format_type: Literal["long", "short"] = "long",
    *,
    names: MonthNameProvider | None = None,
) -> str:
    """
    "2025-11"                      -> "Novembro 2025"
    "2025-11", "pt-BR", "short"    -> "Nov/25"
    "2025-11", "en-US", "short"    -> "Nov/25"
    """
    if format_type not in ("long", "short"):
        raise ValueError(f"format_type must be 'long' or 'short', got {format_type!r}")

    year, month = parse_billing_month(billing_month)
    provider = names if names is not None else get_month_names(locale)
    month_name = _capitalize_first(provider.month_name(month, format_type))

    if format_type == "short":
        return f"{month_name}/{year % 100:02d}"
    return f"{month_name} {year}"
