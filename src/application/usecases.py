# catering_orders/src/application/usecases.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

from src.core.config import (
    DEFAULT_INCREMENT_AMOUNT,
    DEFAULT_INCREMENT_THRESHOLD,
    DEFAULT_INGREDIENT_VALUE,
    MULTI_ITEM_FACTOR,
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
from src.domain.repositories import ClientRepo, IngredientRepo, MenuItemRepo, OrderRepo
from src.services.quantity_format import format_quantity_for_unit
from src.services.scaling_engine import ScalingEngine, sort_for_report

log = logging.getLogger("app.usecases")

POLICIES = ("auto", "basic", "aware", "defaults")


# ----------------------------
# Ingredient summaries
# ----------------------------
def pick_policy(selections: List[OrderMenuItemSelection], policy: str = "auto") -> str:
    """'auto' uses single/multi values when any line carries them."""
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy: {policy}. Must be one of: {', '.join(POLICIES)}")
    if policy != "auto":
        return policy
    for sel in selections:
        for line in sel.ingredients or []:
            if isinstance(line.recipe_quantity, StyledQuantity):
                return "aware"
    return "defaults"


def run_policy(
    engine: ScalingEngine, policy: str, selections: List[OrderMenuItemSelection], number_of_people: float
) -> List[ScaledIngredientResult]:
    if policy == "basic":
        return engine.scale(selections, number_of_people)
    if policy == "aware":
        return engine.scale_with_menu_item_awareness(selections, number_of_people)
    return engine.scale_with_default_increments(selections, number_of_people)


def summarize(
    results: List[ScaledIngredientResult], labels: Optional[Mapping[str, str]] = None
) -> List[Dict[str, Any]]:
    rows = []
    for r in sort_for_report(results):
        row = r.to_dict()
        row["formattedQuantity"] = format_quantity_for_unit(r.total_quantity, r.unit, labels)
        rows.append(row)
    return rows


def _require_positive_people(number_of_people: Any) -> float:
    try:
        n = float(number_of_people)
    except (TypeError, ValueError):
        raise ValueError("numberOfPeople must be a positive number")
    if not math.isfinite(n) or n <= 0:
        raise ValueError("numberOfPeople must be a positive number")
    return n


@dataclass(frozen=True)
class ComputeOrderIngredients:
    """Ingredient summary of a saved order, computed from its own snapshot."""

    order_repo: OrderRepo

    def __call__(
        self, order_id: str, policy: str = "auto", labels: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        order = self.order_repo.by_id(order_id)
        if order is None:
            raise LookupError(f"Order not found: {order_id}")

        chosen = pick_policy(order.menu_items, policy)
        results = run_policy(ScalingEngine(), chosen, order.menu_items, order.number_of_people)
        return {
            "orderId": order.id,
            "numberOfPeople": order.number_of_people,
            "policy": chosen,
            "ingredients": summarize(results, labels),
        }


@dataclass(frozen=True)
class PreviewOrderIngredients:
    """Live preview for an order form that has not been saved yet."""

    menu_item_repo: MenuItemRepo
    ingredient_repo: IngredientRepo

    def _dual_line(self, line: RecipeIngredientLine) -> RecipeIngredientLine:
        """
        Give every line a recipe quantity the menu-item-aware policy can use.

        Lines with only per-style values get a multi-item set of
        MULTI_ITEM_FACTOR times the single one. Default ingredients get their
        fixed value, so they still show up in the preview.
        """
        if isinstance(line.recipe_quantity, StyledQuantity):
            return line
        if line.is_default_ingredient:
            record = self.ingredient_repo.by_id(line.ingredient_id)
            value = record.default_value if record is not None else None
            if value is None:
                value = line.default_value if line.default_value is not None else DEFAULT_INGREDIENT_VALUE
            return replace(line, recipe_quantity=LegacyQuantity(value))
        if line.quantities is not None:
            single = line.quantities
            return replace(line, recipe_quantity=StyledQuantity(single, single.scaled(MULTI_ITEM_FACTOR)))
        return line

    def __call__(
        self,
        menu_items: List[Dict[str, Any]],
        number_of_people: Any,
        policy: str = "auto",
        labels: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        n = _require_positive_people(number_of_people)

        selections: List[OrderMenuItemSelection] = []
        for item in menu_items or []:
            menu_item_id = str(item.get("menuItemId") or "")
            menu = self.menu_item_repo.by_id(menu_item_id)
            if menu is None:
                raise LookupError(f"Menu item not found: {menu_item_id}")
            selections.append(
                OrderMenuItemSelection(
                    menu_item_id=menu.id,
                    selected_type=ServingStyle.parse(item.get("selectedType") or menu.type),
                    ingredients=[self._dual_line(line) for line in menu.ingredients],
                    name=menu.name,
                    category=menu.category,
                )
            )

        # the order form always shows single/multi values
        chosen = "aware" if policy == "auto" else pick_policy(selections, policy)
        # recipes here are live, so names and default config come from the ingredient records
        engine = ScalingEngine(lookup=self.ingredient_repo.by_id)
        results = run_policy(engine, chosen, selections, n)
        return {"numberOfPeople": n, "policy": chosen, "ingredients": summarize(results, labels)}


# ----------------------------
# Order snapshots
# ----------------------------
@dataclass(frozen=True)
class SnapshotOrderMenuItems:
    """
    Freeze menu items into an order. Later edits to a menu item or ingredient
    do not change orders that were already placed.
    """

    menu_item_repo: MenuItemRepo
    ingredient_repo: IngredientRepo

    def _snapshot_line(self, line: RecipeIngredientLine) -> RecipeIngredientLine:
        record = self.ingredient_repo.by_id(line.ingredient_id)
        if record is None:
            log.warning("Ingredient %s missing while snapshotting order", line.ingredient_id)
        return RecipeIngredientLine(
            ingredient_id=line.ingredient_id,
            ingredient_name=record.name if record else UNKNOWN_INGREDIENT_NAME,
            unit=record.unit if record else UNKNOWN_INGREDIENT_UNIT,
            is_default_ingredient=line.is_default_ingredient,
            quantities=line.quantities,
            recipe_quantity=line.recipe_quantity,
            default_value=record.default_value if record else None,
            increment_threshold=record.increment_threshold if record else None,
            increment_amount=record.increment_amount if record else None,
        )

    def __call__(self, menu_items: List[Dict[str, Any]]) -> List[OrderMenuItemSelection]:
        out: List[OrderMenuItemSelection] = []
        for item in menu_items:
            menu_item_id = str(item.get("menuItemId") or "")
            menu = self.menu_item_repo.by_id(menu_item_id)
            if menu is None:
                raise LookupError(f"Menu item not found: {menu_item_id}")

            # already a snapshot (e.g. an order being re-saved): keep its lines
            if isinstance(item.get("ingredients"), list):
                for line in item["ingredients"]:
                    if not isinstance(line, dict) or not line.get("ingredientId"):
                        raise ValueError(f"Each ingredient of menu item {menu_item_id} needs an ingredientId")
                out.append(OrderMenuItemSelection.from_dict(item))
                continue

            out.append(
                OrderMenuItemSelection(
                    menu_item_id=menu.id,
                    selected_type=ServingStyle.parse(item.get("selectedType") or menu.type),
                    ingredients=[self._snapshot_line(line) for line in menu.ingredients],
                    name=menu.name,
                    category=menu.category,
                )
            )
        return out


def _validate_order_fields(payload: Dict[str, Any], partial: bool = False) -> None:
    if not partial or "numberOfPeople" in payload:
        _require_positive_people(payload.get("numberOfPeople"))
    if not partial or "menuItems" in payload:
        if not payload.get("menuItems"):
            raise ValueError("At least one menu item is required")


@dataclass(frozen=True)
class CreateOrder:
    order_repo: OrderRepo
    client_repo: ClientRepo
    snapshot: SnapshotOrderMenuItems

    def __call__(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        _validate_order_fields(payload)

        client_id = payload.get("clientId")
        if not client_id and not payload.get("clientSnapshot"):
            raise ValueError("Either clientId or clientSnapshot is required")
        if client_id and self.client_repo.by_id(client_id) is None:
            raise ValueError("Client not found")

        data = dict(payload)
        data["menuItems"] = [s.to_dict() for s in self.snapshot(payload["menuItems"])]
        order = self.order_repo.create(data)
        log.info("Order %s created with %d menu items", order.id, len(order.menu_items))
        return order.to_dict()


@dataclass(frozen=True)
class UpdateOrder:
    order_repo: OrderRepo
    client_repo: ClientRepo
    snapshot: SnapshotOrderMenuItems

    def __call__(self, order_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        _validate_order_fields(payload, partial=True)

        client_id = payload.get("clientId")
        if client_id and self.client_repo.by_id(client_id) is None:
            raise ValueError("Client not found")

        data = dict(payload)
        if "menuItems" in payload:
            data["menuItems"] = [s.to_dict() for s in self.snapshot(payload["menuItems"])]
        order = self.order_repo.update(order_id, data)
        if order is None:
            raise LookupError(f"Order not found: {order_id}")
        return order.to_dict()


# ----------------------------
# Menu items & ingredients
# ----------------------------
def _has_positive_quantity(line: RecipeIngredientLine) -> bool:
    if line.quantities is not None and line.quantities.any_positive():
        return True
    q = line.recipe_quantity
    if isinstance(q, StyledQuantity):
        return q.single.any_positive() or q.multi.any_positive()
    if isinstance(q, LegacyQuantity):
        return q.value > 0
    return False


@dataclass(frozen=True)
class SaveMenuItem:
    menu_item_repo: MenuItemRepo
    ingredient_repo: IngredientRepo

    def _validate(self, payload: Dict[str, Any]) -> None:
        ingredients = payload.get("ingredients")
        if not ingredients:
            raise ValueError("At least one ingredient is required")
        for raw in ingredients:
            line = RecipeIngredientLine.from_dict(raw)
            if not line.ingredient_id:
                raise ValueError("Each ingredient must have an ingredientId")
            if self.ingredient_repo.by_id(line.ingredient_id) is None:
                raise ValueError(f"Ingredient with ID {line.ingredient_id} not found")
            if not line.is_default_ingredient and not _has_positive_quantity(line):
                raise ValueError(
                    f"Ingredient {line.ingredient_id} needs at least one quantity greater than 0"
                )

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._validate(payload)
        return self.menu_item_repo.create(payload).to_dict()

    def update(self, menu_item_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if "ingredients" in payload:
            self._validate(payload)
        menu = self.menu_item_repo.update(menu_item_id, payload)
        if menu is None:
            raise LookupError(f"Menu item not found: {menu_item_id}")
        return menu.to_dict()


def _ingredient_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(payload)
    if "unit" in data:
        unit = Unit.parse(data["unit"])
        if unit is None:
            allowed = ", ".join(u.value for u in Unit)
            raise ValueError(f"Invalid unit. Must be one of: {allowed}")
        data["unit"] = unit.value
    if data.get("isDefault"):
        data["defaultValue"] = data.get("defaultValue") or DEFAULT_INGREDIENT_VALUE
        data["incrementThreshold"] = data.get("incrementThreshold") or DEFAULT_INCREMENT_THRESHOLD
        data["incrementAmount"] = data.get("incrementAmount") or DEFAULT_INCREMENT_AMOUNT
    return data


@dataclass(frozen=True)
class SaveIngredient:
    ingredient_repo: IngredientRepo

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not (payload.get("name") or "").strip():
            raise ValueError("Name and unit are required")
        return self.ingredient_repo.create(_ingredient_fields(payload)).to_dict()

    def update(self, ingredient_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        ing = self.ingredient_repo.update(ingredient_id, _ingredient_fields(payload))
        if ing is None:
            raise LookupError(f"Ingredient not found: {ingredient_id}")
        return ing.to_dict()
