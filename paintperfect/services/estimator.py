"""
Cost estimation for painting requests.

A request selects a number of rooms per room category ("Bedroom": 2, ...)
and optionally the floor dimensions of a room in feet. Each room category
has a price row:

- per_sq_ft: price_value * length * breadth * count
- per_room:  price_value * count

Missing or unusable dimensions fall back to DEFAULT_SIDE_FT per side.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from paintperfect.core.settings import settings
from paintperfect.models.enums import PriceType

ROOM_CATEGORY_TYPE = "room"
CENT = Decimal("0.01")


@dataclass(frozen=True)
class RoomRate:
    room: str
    price_type: PriceType
    price_value: Decimal


def build_rate_table(categories: Iterable[Any], pricing: Iterable[Any]) -> Dict[str, RoomRate]:
    """
    Map room name -> rate.

    `categories` and `pricing` are ORM rows (or anything with the same
    attributes). Only room categories count, and the first price row per
    category wins. Rooms without a finite price row are left out.
    """
    first_price: Dict[str, Any] = {}
    for p in pricing:
        if p.category_id is not None and p.category_id not in first_price:
            first_price[p.category_id] = p

    table: Dict[str, RoomRate] = {}
    for cat in categories:
        if cat.type != ROOM_CATEGORY_TYPE or cat.value in table:
            continue
        price = first_price.get(cat.id)
        if price is None:
            continue
        value = Decimal(str(price.price_value))
        if not value.is_finite():
            continue
        table[cat.value] = RoomRate(
            room=cat.value,
            price_type=PriceType(price.price_type),
            price_value=value,
        )
    return table


def parse_side(value: Any) -> Optional[float]:
    """A usable side length in feet, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        side = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(side) or side <= 0:
        return None
    return side


def resolve_dimensions(length: Any, breadth: Any) -> Tuple[float, float]:
    default = settings.DEFAULT_SIDE_FT
    l = parse_side(length)
    b = parse_side(breadth)
    return (l if l is not None else default, b if b is not None else default)


def dimensions_payload(length: Any, breadth: Any) -> Optional[Dict[str, float]]:
    """Dimensions as stored on a request; only when both sides are given."""
    l = parse_side(length)
    b = parse_side(breadth)
    if l is None or b is None:
        return None
    return {"length": l, "breadth": b}


def selected_rooms(room_counts: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    """Rooms with a positive count, counts coerced to int."""
    selected: Dict[str, int] = {}
    for room, count in (room_counts or {}).items():
        try:
            n = int(count)
        except (TypeError, ValueError):
            continue
        if n > 0:
            selected[str(room)] = n
    return selected


def adjust_room_count(room_counts: Mapping[str, int], room: str, delta: int) -> Dict[str, int]:
    counts = dict(room_counts or {})
    counts[room] = max(0, int(counts.get(room, 0)) + int(delta))
    return counts


def estimate_cost(
    room_counts: Optional[Mapping[str, Any]],
    length: Any,
    breadth: Any,
    rates: Mapping[str, RoomRate],
) -> Decimal:
    l, b = resolve_dimensions(length, breadth)
    area = Decimal(str(l)) * Decimal(str(b))

    total = Decimal("0")
    for room, count in selected_rooms(room_counts).items():
        rate = rates.get(room)
        if rate is None:
            continue
        if rate.price_type is PriceType.PER_ROOM:
            total += rate.price_value * count
        else:
            total += rate.price_value * area * count
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def room_summary(room_types: Optional[Mapping[str, Any]]) -> str:
    if not room_types:
        return "No rooms specified"
    parts = []
    for room, count in room_types.items():
        suffix = "s" if _as_int(count) > 1 else ""
        parts.append(f"{count} {room}{suffix}")
    return ", ".join(parts)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
