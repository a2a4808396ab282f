from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Protocol

MonthStyle = Literal["long", "short"]


class MonthNameProvider(Protocol):
    def month_name(self, month: int, style: MonthStyle) -> str: ...


@dataclass(frozen=True)
class TableMonthNames:
    """Month names from two fixed 12-item tables (January first)."""

    long: tuple[str, ...]
    short: tuple[str, ...]

    def month_name(self, month: int, style: MonthStyle) -> str:
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1-12, got {month}")
        if style == "long":
            return self.long[month - 1]
        if style == "short":
            return self.short[month - 1]
        raise ValueError(f"style must be 'long' or 'short', got {style!r}")


PT = TableMonthNames(
    long=(
        "janeiro", "fevereiro", "março", "abril", "maio", "junho",
        "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
    ),
    short=("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"),
)

EN = TableMonthNames(
    long=(
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    short=("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
)

ES = TableMonthNames(
    long=(
        "enero", "febrero", "marzo", "abril", "mayo", "junio",
        "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
    ),
    short=("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"),
)

_BY_LOCALE: dict[str, TableMonthNames] = {
    "pt": PT,
    "pt-br": PT,
    "en": EN,
    "en-us": EN,
    "es": ES,
    "es-es": ES,
}


def get_month_names(locale: str) -> MonthNameProvider:
    """
    "pt-BR" / "pt_BR" / "pt" -> PT
    未対応の地域は言語部分にフォールバック（"pt-PT" -> PT）
    """
    key = (locale or "").strip().replace("_", "-").lower()
    if key in _BY_LOCALE:
        return _BY_LOCALE[key]
    lang = key.split("-", 1)[0]
    if lang in _BY_LOCALE:
        return _BY_LOCALE[lang]
    raise ValueError(f"unsupported locale: {locale!r}")
