# catering_orders/src/services/scaling_engine.py
"""
Ingredient quantity scaling and aggregation.

Recipes store quantities per 100 servings. The engine scales them to an
order's headcount, rounds per unit and sums them per ingredient across all
menu items of the order. It is pure: no I/O besides the optional ingredient
lookup supplied by the caller, and no state outside a single call.

Totals are re-rounded after every addition (not once at the end). Existing
orders were printed with these totals, so the behaviour is kept as-is.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from src.core.config import (
    DEFAULT_INCREMENT_AMOUNT,
    DEFAULT_INCREMENT_THRESHOLD,
    DEFAULT_INGREDIENT_VALUE,
    UNKNOWN_INGREDIENT_NAME,
    UNKNOWN_INGREDIENT_UNIT,
)
from src.domain.entities import (
    LegacyQuantity,
    OrderMenuItemSelection,
    RecipeIngredientLine,
    ScaledIngredientResult,
    ServingStyle,
    StyledQuantity,
    Unit,
)
from src.domain.repositories import IngredientLookup

log = logging.getLogger("app.scaling")


# ----------------------------
# Rounding
# ----------------------------
def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from -inf (2.5 -> 3, -2.5 -> -2), not to even."""
    m = 10 ** digits
    return math.floor(value * m + 0.5) / m


def round_for_unit(value: float, unit: str) -> float:
    """Whole numbers for pieces, 2 decimals for everything else."""
    u = Unit.parse(unit)
    if u is not None and u.is_discrete:
        return round_half_up(value)
    return round_half_up(value, 2)


# ----------------------------
# Ingredient resolution
# ----------------------------
@dataclass(frozen=True)
class ResolvedIngredient:
    name: str
    unit: str
    default_value: float
    increment_threshold: int
    increment_amount: float


def _first(*values):
    for v in values:
        if v is not None:
            return v
    return None


def _placeholder(line: RecipeIngredientLine) -> ResolvedIngredient:
    return ResolvedIngredient(
        name=UNKNOWN_INGREDIENT_NAME,
        unit=UNKNOWN_INGREDIENT_UNIT,
        default_value=_first(line.default_value, DEFAULT_INGREDIENT_VALUE),
        increment_threshold=_first(line.increment_threshold, DEFAULT_INCREMENT_THRESHOLD),
        increment_amount=_first(line.increment_amount, DEFAULT_INCREMENT_AMOUNT),
    )


def _well_formed(selections: Iterable[OrderMenuItemSelection]) -> Iterator[Tuple[OrderMenuItemSelection, RecipeIngredientLine]]:
    for sel in selections or []:
        if sel is None or sel.ingredients is None:
            log.debug("Skipping selection without ingredients: %s", getattr(sel, "menu_item_id", None))
            continue
        for line in sel.ingredients:
            if line is None or not line.ingredient_id:
                continue
            yield sel, line


def quantity_for_style(line: RecipeIngredientLine, style: ServingStyle) -> float:
    """Per-100 quantity of a non-default line for the given serving style."""
    if line.quantities is not None:
        return line.quantities.for_style(style)
    q = line.recipe_quantity
    if isinstance(q, StyledQuantity):
        return q.single.for_style(style)
    if isinstance(q, LegacyQuantity):
        return q.value
    return 0.0


# ----------------------------
# Engine
# ----------------------------
class ScalingEngine:
    """
    Turns order menu-item selections + headcount into per-ingredient totals.

    Policies:
      - scale: per-style quantities, default ingredients at their fixed value
      - scale_with_menu_item_awareness: single/multi sets chosen by how many
        menu items in the order share the ingredient
      - scale_with_default_increments: default ingredients counted once and
        bumped when shared by more menu items than their threshold

    With a lookup, the ingredient record is authoritative for name, unit and
    default config; a missing record degrades to "Unknown Ingredient"/piece.
    Without one, the selection snapshot is used.
    """

    def __init__(self, lookup: Optional[IngredientLookup] = None) -> None:
        self._lookup = lookup

    def _resolve(self, line: RecipeIngredientLine, cache: Dict[str, ResolvedIngredient]) -> ResolvedIngredient:
        hit = cache.get(line.ingredient_id)
        if hit is not None:
            return hit

        if self._lookup is not None:
            record = self._lookup(line.ingredient_id)
            if record is None:
                log.debug("Ingredient %s not found; using placeholder", line.ingredient_id)
                info = _placeholder(line)
            else:
                info = ResolvedIngredient(
                    name=record.name or UNKNOWN_INGREDIENT_NAME,
                    unit=record.unit or UNKNOWN_INGREDIENT_UNIT,
                    default_value=_first(record.default_value, line.default_value, DEFAULT_INGREDIENT_VALUE),
                    increment_threshold=_first(
                        record.increment_threshold, line.increment_threshold, DEFAULT_INCREMENT_THRESHOLD
                    ),
                    increment_amount=_first(record.increment_amount, line.increment_amount, DEFAULT_INCREMENT_AMOUNT),
                )
        else:
            fallback = _placeholder(line)
            info = ResolvedIngredient(
                name=line.ingredient_name or fallback.name,
                unit=line.unit or fallback.unit,
                default_value=fallback.default_value,
                increment_threshold=fallback.increment_threshold,
                increment_amount=fallback.increment_amount,
            )

        cache[line.ingredient_id] = info
        return info

    @staticmethod
    def _add(acc: ScaledIngredientResult, qty: float) -> None:
        acc.total_quantity = round_for_unit(acc.total_quantity + qty, acc.unit)

    def scale(
        self, selections: Iterable[OrderMenuItemSelection], number_of_people: float
    ) -> List[ScaledIngredientResult]:
        factor = number_of_people / 100
        cache: Dict[str, ResolvedIngredient] = {}
        acc: Dict[str, ScaledIngredientResult] = {}

        for sel, line in _well_formed(selections):
            info = self._resolve(line, cache)
            if line.is_default_ingredient:
                per100 = info.default_value
            else:
                per100 = quantity_for_style(line, sel.selected_type)
            qty = round_for_unit(per100 * factor, info.unit)

            existing = acc.get(line.ingredient_id)
            if existing is not None:
                self._add(existing, qty)
                existing.menu_item_count = (existing.menu_item_count or 0) + 1
            else:
                acc[line.ingredient_id] = ScaledIngredientResult(
                    ingredient_id=line.ingredient_id,
                    ingredient_name=info.name,
                    unit=info.unit,
                    total_quantity=qty,
                    menu_item_count=1,
                )

        return list(acc.values())

    def scale_with_menu_item_awareness(
        self, selections: Iterable[OrderMenuItemSelection], number_of_people: float
    ) -> List[ScaledIngredientResult]:
        selections = list(selections or [])
        factor = number_of_people / 100
        cache: Dict[str, ResolvedIngredient] = {}
        acc: Dict[str, ScaledIngredientResult] = {}
        using: Dict[str, int] = {}

        # pass 1: how many menu items use each ingredient
        for _, line in _well_formed(selections):
            if line.recipe_quantity is None:
                continue
            if line.ingredient_id in acc:
                using[line.ingredient_id] += 1
                continue
            info = self._resolve(line, cache)
            acc[line.ingredient_id] = ScaledIngredientResult(
                ingredient_id=line.ingredient_id,
                ingredient_name=info.name,
                unit=info.unit,
                total_quantity=0.0,
            )
            using[line.ingredient_id] = 1

        # pass 2: pick single or multi values and accumulate
        for sel, line in _well_formed(selections):
            entry = acc.get(line.ingredient_id)
            q = line.recipe_quantity
            if entry is None or q is None:
                continue
            if isinstance(q, StyledQuantity):
                chosen = q.single if using[line.ingredient_id] == 1 else q.multi
                per100 = chosen.for_style(sel.selected_type)
            else:
                per100 = q.value
            self._add(entry, round_for_unit(per100 * factor, entry.unit))

        return list(acc.values())

    def scale_with_default_increments(
        self, selections: Iterable[OrderMenuItemSelection], number_of_people: float
    ) -> List[ScaledIngredientResult]:
        selections = list(selections or [])
        factor = number_of_people / 100
        cache: Dict[str, ResolvedIngredient] = {}
        acc: Dict[str, ScaledIngredientResult] = {}

        for _, line in _well_formed(selections):
            entry = acc.get(line.ingredient_id)
            if entry is not None:
                entry.menu_item_count += 1
                continue
            info = self._resolve(line, cache)
            acc[line.ingredient_id] = ScaledIngredientResult(
                ingredient_id=line.ingredient_id,
                ingredient_name=info.name,
                unit=info.unit,
                total_quantity=0.0,
                menu_item_count=1,
                is_default=line.is_default_ingredient,
            )

        counted_defaults = set()
        for sel, line in _well_formed(selections):
            entry = acc[line.ingredient_id]
            info = self._resolve(line, cache)
            if line.is_default_ingredient:
                # shared default ingredients are prepared once for the whole order
                if line.ingredient_id in counted_defaults:
                    continue
                counted_defaults.add(line.ingredient_id)
                per100 = info.default_value
                extra = entry.menu_item_count - info.increment_threshold
                if extra > 0:
                    per100 += extra * info.increment_amount
            else:
                per100 = quantity_for_style(line, sel.selected_type)
            self._add(entry, round_for_unit(per100 * factor, entry.unit))

        return list(acc.values())


def sort_for_report(results: Iterable[ScaledIngredientResult]) -> List[ScaledIngredientResult]:
    """Default ingredients first, then by name."""
    return sorted(results, key=lambda r: (0 if r.is_default else 1, (r.ingredient_name or "").casefold()))


def scale(
    selections: Iterable[OrderMenuItemSelection],
    number_of_people: float,
    lookup: Optional[IngredientLookup] = None,
) -> List[ScaledIngredientResult]:
    return ScalingEngine(lookup).scale(selections, number_of_people)


def scale_with_menu_item_awareness(
    selections: Iterable[OrderMenuItemSelection],
    number_of_people: float,
    lookup: Optional[IngredientLookup] = None,
) -> List[ScaledIngredientResult]:
    return ScalingEngine(lookup).scale_with_menu_item_awareness(selections, number_of_people)
