from decimal import Decimal
from typing import Any, Optional

from paintperfect.services.estimator import room_summary
from paintperfect.services.request_service import next_status, status_label


def format_number(value: Any, decimal_sep: str = ".", thousand_sep: str = ",") -> str:
    # simple formatter: 12345.6 -> 12,345.60
    d = Decimal(str(value or 0))
    s = f"{d:.2f}"
    sign = ""
    if s.startswith("-"):
        sign, s = "-", s[1:]
    whole, frac = s.split(".")
    parts = []
    while whole:
        parts.append(whole[-3:])
        whole = whole[:-3]
    whole = thousand_sep.join(reversed(parts))
    return f"{sign}{whole}{decimal_sep}{frac}"


def format_money(value: Any, currency_symbol: str = "$") -> str:
    return f"{currency_symbol}{format_number(value)}"


def format_area_sqft(length: Optional[float], breadth: Optional[float]) -> str:
    if not length or not breadth:
        return "-"
    return f"{length:g} x {breadth:g} ft ({Decimal(str(length)) * Decimal(str(breadth)):.0f} sq ft)"


def format_date(value: Any) -> str:
    if not value:
        return ""
    return value.strftime("%b %d, %Y")


FILTERS = {
    "money": format_money,
    "area": format_area_sqft,
    "date": format_date,
    "status_label": status_label,
    "next_status": next_status,
    "room_summary": room_summary,
}
