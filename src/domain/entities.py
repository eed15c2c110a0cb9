# catering_orders/src/domain/entities.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ServingStyle(str, Enum):
    """How a menu item is prepared; each style has its own per-100 quantities."""

    ONLY_BHAJIYA_KG = "only_bhajiya_kg"
    DISH_WITH_ONLY_BHAJIYA = "dish_with_only_bhajiya"
    DISH_HAVE_NO_CHART = "dish_have_no_chart"
    DISH_HAVE_CHART_BHAJIYA = "dish_have_chart_bhajiya"

    @classmethod
    def parse(cls, value: Any) -> "ServingStyle":
        """Unknown or missing values fall back to the first style."""
        if isinstance(value, ServingStyle):
            return value
        key = str(value or "").strip()
        return _STYLE_ALIASES.get(key) or _STYLE_ALIASES.get(key.lower()) or cls.ONLY_BHAJIYA_KG


_STYLE_ALIASES: Dict[str, ServingStyle] = {
    # enum values
    "only_bhajiya_kg": ServingStyle.ONLY_BHAJIYA_KG,
    "dish_with_only_bhajiya": ServingStyle.DISH_WITH_ONLY_BHAJIYA,
    "dish_have_no_chart": ServingStyle.DISH_HAVE_NO_CHART,
    "dish_have_chart_bhajiya": ServingStyle.DISH_HAVE_CHART_BHAJIYA,
    # quantity field names
    "onlyBhajiyaKG": ServingStyle.ONLY_BHAJIYA_KG,
    "dishWithOnlyBhajiya": ServingStyle.DISH_WITH_ONLY_BHAJIYA,
    "dishHaveNoChart": ServingStyle.DISH_HAVE_NO_CHART,
    "dishHaveChartAndBhajiya": ServingStyle.DISH_HAVE_CHART_BHAJIYA,
    # older naming scheme, mapped by position
    "only_dish": ServingStyle.ONLY_BHAJIYA_KG,
    "only_dish_with_chart": ServingStyle.DISH_WITH_ONLY_BHAJIYA,
    "dish_without_chart": ServingStyle.DISH_HAVE_NO_CHART,
    "dish_with_chart": ServingStyle.DISH_HAVE_CHART_BHAJIYA,
}


class Unit(str, Enum):
    GRAM = "gram"
    KILOGRAM = "kilogram"
    MILLILITER = "milliliter"
    LITER = "liter"
    PIECE = "piece"
    JABLA = "જબલા"  # traditional count unit

    @classmethod
    def parse(cls, value: Any) -> Optional["Unit"]:
        if isinstance(value, Unit):
            return value
        key = str(value or "").strip()
        if not key:
            return None
        return _UNIT_ALIASES.get(key) or _UNIT_ALIASES.get(key.lower())

    @classmethod
    def canonical(cls, value: Any) -> str:
        """Stored name of a unit ("kg" -> "kilogram"); unknown text is returned as given."""
        u = cls.parse(value)
        return u.value if u is not None else str(value or "")

    @property
    def is_discrete(self) -> bool:
        return self is Unit.PIECE


_UNIT_ALIASES: Dict[str, Unit] = {
    "gram": Unit.GRAM, "grams": Unit.GRAM, "g": Unit.GRAM, "gm": Unit.GRAM,
    "kilogram": Unit.KILOGRAM, "kilograms": Unit.KILOGRAM, "kg": Unit.KILOGRAM,
    "milliliter": Unit.MILLILITER, "millilitre": Unit.MILLILITER, "ml": Unit.MILLILITER,
    "liter": Unit.LITER, "litre": Unit.LITER, "l": Unit.LITER, "L": Unit.LITER,
    "piece": Unit.PIECE, "pieces": Unit.PIECE, "pcs": Unit.PIECE, "pc": Unit.PIECE,
    "જબલા": Unit.JABLA, "jabla": Unit.JABLA,
}


def _num(v: Any) -> float:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return 0.0
    return f if f == f else 0.0  # NaN -> 0


def _opt_num(v: Any) -> Optional[float]:
    if v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


# ----------------------------
# Recipe quantities
# ----------------------------
@dataclass(frozen=True)
class StyleQuantities:
    """Per-100-servings amounts, one per ServingStyle."""

    only_bhajiya_kg: float = 0.0
    dish_with_only_bhajiya: float = 0.0
    dish_have_no_chart: float = 0.0
    dish_have_chart_and_bhajiya: float = 0.0

    def for_style(self, style: Any) -> float:
        s = ServingStyle.parse(style)
        if s is ServingStyle.DISH_WITH_ONLY_BHAJIYA:
            return self.dish_with_only_bhajiya
        if s is ServingStyle.DISH_HAVE_NO_CHART:
            return self.dish_have_no_chart
        if s is ServingStyle.DISH_HAVE_CHART_BHAJIYA:
            return self.dish_have_chart_and_bhajiya
        return self.only_bhajiya_kg

    def any_positive(self) -> bool:
        return any(v > 0 for v in (
            self.only_bhajiya_kg,
            self.dish_with_only_bhajiya,
            self.dish_have_no_chart,
            self.dish_have_chart_and_bhajiya,
        ))

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "StyleQuantities":
        d = d or {}

        def pick(*keys: str) -> float:
            for k in keys:
                if d.get(k) is not None:
                    return _num(d[k])
            return 0.0

        return cls(
            only_bhajiya_kg=pick("onlyBhajiyaKG", "only_bhajiya_kg", "onlyDishQuantity"),
            dish_with_only_bhajiya=pick("dishWithOnlyBhajiya", "dish_with_only_bhajiya", "onlyDishWithChartQuantity"),
            dish_have_no_chart=pick("dishHaveNoChart", "dish_have_no_chart", "dishWithoutChartQuantity"),
            dish_have_chart_and_bhajiya=pick(
                "dishHaveChartAndBhajiya", "dish_have_chart_and_bhajiya", "dishWithChartQuantity"
            ),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "onlyBhajiyaKG": self.only_bhajiya_kg,
            "dishWithOnlyBhajiya": self.dish_with_only_bhajiya,
            "dishHaveNoChart": self.dish_have_no_chart,
            "dishHaveChartAndBhajiya": self.dish_have_chart_and_bhajiya,
        }

    def scaled(self, factor: float) -> "StyleQuantities":
        return StyleQuantities(
            only_bhajiya_kg=self.only_bhajiya_kg * factor,
            dish_with_only_bhajiya=self.dish_with_only_bhajiya * factor,
            dish_have_no_chart=self.dish_have_no_chart * factor,
            dish_have_chart_and_bhajiya=self.dish_have_chart_and_bhajiya * factor,
        )


@dataclass(frozen=True)
class LegacyQuantity:
    """Flat per-100 value, used as-is whatever the serving style."""

    value: float


@dataclass(frozen=True)
class StyledQuantity:
    """Single-item and multi-item per-style sets."""

    single: StyleQuantities
    multi: StyleQuantities


RecipeQuantity = Union[LegacyQuantity, StyledQuantity]


def parse_recipe_quantity(d: Dict[str, Any]) -> Optional[RecipeQuantity]:
    single, multi = d.get("singleItems"), d.get("multiItems")
    if isinstance(single, dict) and isinstance(multi, dict):
        return StyledQuantity(StyleQuantities.from_dict(single), StyleQuantities.from_dict(multi))
    legacy = _opt_num(d.get("quantityPer100"))
    if legacy is not None:
        return LegacyQuantity(legacy)
    return None


def recipe_quantity_to_dict(q: Optional[RecipeQuantity]) -> Dict[str, Any]:
    if isinstance(q, StyledQuantity):
        return {"singleItems": q.single.to_dict(), "multiItems": q.multi.to_dict()}
    if isinstance(q, LegacyQuantity):
        return {"quantityPer100": q.value}
    return {}


# ----------------------------
# Records
# ----------------------------
@dataclass(frozen=True)
class Ingredient:
    id: str
    name: str
    unit: str
    is_default: bool = False
    default_value: Optional[float] = None
    increment_threshold: Optional[int] = None
    increment_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Ingredient":
        threshold = _opt_num(d.get("incrementThreshold"))
        return cls(
            id=str(d.get("id") or d.get("_id") or ""),
            name=str(d.get("name") or "").strip(),
            unit=str(d.get("unit") or ""),
            is_default=bool(d.get("isDefault", False)),
            default_value=_opt_num(d.get("defaultValue")),
            increment_threshold=int(threshold) if threshold is not None else None,
            increment_amount=_opt_num(d.get("incrementAmount")),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "isDefault": self.is_default,
            "defaultValue": self.default_value,
            "incrementThreshold": self.increment_threshold,
            "incrementAmount": self.increment_amount,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    phone: str
    address: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Client":
        return cls(
            id=str(d.get("id") or d.get("_id") or ""),
            name=str(d.get("name") or "").strip(),
            phone=str(d.get("phone") or "").strip(),
            address=str(d.get("address") or "").strip(),
            reference=d.get("reference"),
            notes=d.get("notes"),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "reference": self.reference,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class RecipeIngredientLine:
    ingredient_id: str
    ingredient_name: str = ""
    unit: str = ""
    is_default_ingredient: bool = False
    quantities: Optional[StyleQuantities] = None
    recipe_quantity: Optional[RecipeQuantity] = None
    # default-ingredient config copied from the Ingredient record
    default_value: Optional[float] = None
    increment_threshold: Optional[int] = None
    increment_amount: Optional[float] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RecipeIngredientLine":
        q = d.get("quantities")
        threshold = _opt_num(d.get("incrementThreshold"))
        return cls(
            ingredient_id=str(d.get("ingredientId") or ""),
            ingredient_name=str(d.get("ingredientName") or "").strip(),
            unit=str(d.get("unit") or ""),
            is_default_ingredient=bool(d.get("isDefaultIngredient", False)),
            quantities=StyleQuantities.from_dict(q) if isinstance(q, dict) else None,
            recipe_quantity=parse_recipe_quantity(d),
            default_value=_opt_num(d.get("defaultValue")),
            increment_threshold=int(threshold) if threshold is not None else None,
            increment_amount=_opt_num(d.get("incrementAmount")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "ingredientId": self.ingredient_id,
            "ingredientName": self.ingredient_name,
            "unit": self.unit,
            "isDefaultIngredient": self.is_default_ingredient,
        }
        if self.quantities is not None:
            out["quantities"] = self.quantities.to_dict()
        out.update(recipe_quantity_to_dict(self.recipe_quantity))
        if self.default_value is not None:
            out["defaultValue"] = self.default_value
        if self.increment_threshold is not None:
            out["incrementThreshold"] = self.increment_threshold
        if self.increment_amount is not None:
            out["incrementAmount"] = self.increment_amount
        return out


@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    category: str
    type: ServingStyle
    ingredients: List[RecipeIngredientLine]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MenuItem":
        return cls(
            id=str(d.get("id") or d.get("_id") or ""),
            name=str(d.get("name") or "").strip(),
            category=str(d.get("category") or "").strip(),
            type=ServingStyle.parse(d.get("type")),
            ingredients=[RecipeIngredientLine.from_dict(i) for i in (d.get("ingredients") or []) if isinstance(i, dict)],
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "type": self.type.value,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class OrderMenuItemSelection:
    """A menu item as chosen within an order, with its recipe frozen at order time."""

    menu_item_id: str
    selected_type: ServingStyle = ServingStyle.ONLY_BHAJIYA_KG
    ingredients: Optional[List[RecipeIngredientLine]] = None
    name: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OrderMenuItemSelection":
        raw = d.get("ingredients")
        ingredients = (
            [RecipeIngredientLine.from_dict(i) for i in raw if isinstance(i, dict)]
            if isinstance(raw, list)
            else None
        )
        return cls(
            menu_item_id=str(d.get("menuItemId") or ""),
            selected_type=ServingStyle.parse(d.get("selectedType")),
            ingredients=ingredients,
            name=str(d.get("name") or ""),
            category=str(d.get("category") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "menuItemId": self.menu_item_id,
            "selectedType": self.selected_type.value,
            "name": self.name,
            "category": self.category,
            "ingredients": [i.to_dict() for i in (self.ingredients or [])],
        }


@dataclass(frozen=True)
class Order:
    id: str
    number_of_people: float
    address: str
    order_type: str
    order_date: Optional[datetime]
    order_time: str
    menu_items: List[OrderMenuItemSelection]
    client_id: Optional[str] = None
    client_snapshot: Optional[Dict[str, Any]] = None
    vehicle_owner_name: Optional[str] = None
    phone_number: Optional[str] = None
    vehicle_number_placeholder: Optional[str] = None
    time: Optional[str] = None
    chef_name: Optional[str] = None
    chef_phone_number: Optional[str] = None
    add_helper: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Order":
        return cls(
            id=str(d.get("id") or d.get("_id") or ""),
            number_of_people=_num(d.get("numberOfPeople")),
            address=str(d.get("address") or ""),
            order_type=str(d.get("orderType") or ""),
            order_date=d.get("orderDate"),
            order_time=str(d.get("orderTime") or ""),
            menu_items=[OrderMenuItemSelection.from_dict(m) for m in (d.get("menuItems") or []) if isinstance(m, dict)],
            client_id=d.get("clientId"),
            client_snapshot=d.get("clientSnapshot"),
            vehicle_owner_name=d.get("vehicleOwnerName"),
            phone_number=d.get("phoneNumber"),
            vehicle_number_placeholder=d.get("vehicleNumberPlaceholder"),
            time=d.get("time"),
            chef_name=d.get("chefName"),
            chef_phone_number=d.get("chefPhoneNumber"),
            add_helper=d.get("addHelper"),
            notes=d.get("notes"),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "clientId": self.client_id,
            "clientSnapshot": self.client_snapshot,
            "numberOfPeople": self.number_of_people,
            "address": self.address,
            "orderType": self.order_type,
            "orderDate": self.order_date,
            "orderTime": self.order_time,
            "menuItems": [m.to_dict() for m in self.menu_items],
            "vehicleOwnerName": self.vehicle_owner_name,
            "phoneNumber": self.phone_number,
            "vehicleNumberPlaceholder": self.vehicle_number_placeholder,
            "time": self.time,
            "chefName": self.chef_name,
            "chefPhoneNumber": self.chef_phone_number,
            "addHelper": self.add_helper,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


# ----------------------------
# Engine output
# ----------------------------
@dataclass
class ScaledIngredientResult:
    ingredient_id: str
    ingredient_name: str
    unit: str
    total_quantity: float = 0.0
    menu_item_count: Optional[int] = None
    is_default: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "ingredientId": self.ingredient_id,
            "ingredientName": self.ingredient_name,
            "unit": self.unit,
            "totalQuantity": self.total_quantity,
        }
        if self.menu_item_count is not None:
            out["menuItemCount"] = self.menu_item_count
        if self.is_default is not None:
            out["isDefault"] = self.is_default
        return out
