# catering_orders/src/services/quantity_format.py
from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

from src.domain.entities import Unit
from src.services.scaling_engine import round_half_up

# Display labels. Callers pass their own table for other languages.
DEFAULT_UNIT_LABELS: Dict[str, str] = {
    "kilogram": "kg",
    "gram": "gm",
    "liter": "L",
    "milliliter": "ml",
    "piece": "piece",
    "pieces": "pieces",
    "jabla": "જબલા",
    "and": "and",
}


def _labels(labels: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """Caller labels over the English defaults, so partial tables still render."""
    return {**DEFAULT_UNIT_LABELS, **(labels or {})}


def _fmt_number(value: float) -> str:
    """2.0 -> '2', 2.50 -> '2.5'."""
    v = round_half_up(value, 2)
    if v == int(v):
        return str(int(v))
    return f"{v:.2f}".rstrip("0").rstrip(".")


def _split(quantity: float, big: str, small: str, labels: Mapping[str, str]) -> Tuple[str, Dict[str, int]]:
    """Split a kg/L amount into whole big units and the 1/1000 remainder."""
    big_label, small_label = labels.get(big, big), labels.get(small, small)
    if quantity <= 0:
        return f"0 {small_label}", {small: 0}

    total_small = int(round_half_up(quantity * 1000))
    whole, rest = divmod(total_small, 1000)

    parts: Dict[str, int] = {}
    text = ""
    if whole > 0:
        parts[big] = whole
        text = f"{whole} {big_label}"
    if rest > 0:
        parts[small] = rest
        rest_text = f"{rest} {small_label}"
        text = f"{text} {labels.get('and', 'and')} {rest_text}" if text else rest_text
    if not text:
        parts[small] = 0
        text = f"0 {small_label}"
    return text, parts


def split_kilograms(kg: float, labels: Optional[Mapping[str, str]] = None) -> Tuple[str, Dict[str, int]]:
    """
    1.25 -> ("1 kg and 250 gm", {"kilogram": 1, "gram": 250})
    0.8  -> ("800 gm", {"gram": 800})
    """
    return _split(kg, "kilogram", "gram", _labels(labels))


def split_liters(liters: float, labels: Optional[Mapping[str, str]] = None) -> Tuple[str, Dict[str, int]]:
    return _split(liters, "liter", "milliliter", _labels(labels))


def format_quantity_for_unit(quantity: float, unit: str, labels: Optional[Mapping[str, str]] = None) -> str:
    labels = _labels(labels)
    u = Unit.parse(unit)

    if u is Unit.KILOGRAM:
        return split_kilograms(quantity, labels)[0]
    if u is Unit.LITER:
        return split_liters(quantity, labels)[0]
    if u is Unit.GRAM:
        return f"{int(round_half_up(quantity))} {labels.get('gram', 'gm')}"
    if u is Unit.MILLILITER:
        return f"{int(round_half_up(quantity))} {labels.get('milliliter', 'ml')}"
    if u is Unit.PIECE:
        n = int(round_half_up(quantity))
        label = labels.get("piece", "piece") if n == 1 else labels.get("pieces", "pieces")
        return f"{n} {label}"
    if u is Unit.JABLA:
        return f"{_fmt_number(quantity)} {labels.get('jabla', Unit.JABLA.value)}"
    return f"{_fmt_number(quantity)} {unit}".strip()
