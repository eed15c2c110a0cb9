# catering_orders/src/api/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.entities import ServingStyle


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    def to_doc(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="python")


class StyleQuantitiesIn(CamelModel):
    """Amounts per 100 people for each serving style."""

    only_bhajiya_kg: float = Field(default=0, ge=0, alias="onlyBhajiyaKG")
    dish_with_only_bhajiya: float = Field(default=0, ge=0, alias="dishWithOnlyBhajiya")
    dish_have_no_chart: float = Field(default=0, ge=0, alias="dishHaveNoChart")
    dish_have_chart_and_bhajiya: float = Field(default=0, ge=0, alias="dishHaveChartAndBhajiya")


class RecipeLineIn(CamelModel):
    ingredient_id: str = Field(..., min_length=1)
    is_default_ingredient: bool = False
    quantities: Optional[StyleQuantitiesIn] = None
    single_items: Optional[StyleQuantitiesIn] = None
    multi_items: Optional[StyleQuantitiesIn] = None
    quantity_per100: Optional[float] = Field(default=None, ge=0)


class MenuItemIn(CamelModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    type: ServingStyle
    ingredients: List[RecipeLineIn]


class MenuItemUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    type: Optional[ServingStyle] = None
    ingredients: Optional[List[RecipeLineIn]] = None


class IngredientIn(CamelModel):
    name: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1, examples=["kg"])
    is_default: bool = False
    default_value: Optional[float] = Field(default=None, gt=0)
    increment_threshold: Optional[int] = Field(default=None, ge=0)
    increment_amount: Optional[float] = Field(default=None, ge=0)


class IngredientUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    unit: Optional[str] = None
    is_default: Optional[bool] = None
    default_value: Optional[float] = Field(default=None, gt=0)
    increment_threshold: Optional[int] = Field(default=None, ge=0)
    increment_amount: Optional[float] = Field(default=None, ge=0)


class ClientIn(CamelModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    reference: Optional[str] = None
    notes: Optional[str] = None


class ClientUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = Field(default=None, min_length=1)
    reference: Optional[str] = None
    notes: Optional[str] = None


class ClientSnapshotIn(CamelModel):
    name: str
    phone: str
    address: str
    reference: Optional[str] = None


class OrderMenuItemIn(CamelModel):
    menu_item_id: str = Field(..., min_length=1)
    selected_type: Optional[str] = None
    # present when the client re-sends an existing snapshot
    ingredients: Optional[List[Dict[str, Any]]] = None
    name: Optional[str] = None
    category: Optional[str] = None


class OrderIn(CamelModel):
    client_id: Optional[str] = None
    client_snapshot: Optional[ClientSnapshotIn] = None
    number_of_people: float = Field(..., gt=0, allow_inf_nan=False, description="Headcount the order is cooked for")
    address: str = Field(..., min_length=1)
    order_type: str = Field(..., min_length=1)
    order_date: datetime
    order_time: str = Field(..., min_length=1)
    menu_items: List[OrderMenuItemIn]

    vehicle_owner_name: Optional[str] = None
    phone_number: Optional[str] = None
    vehicle_number_placeholder: Optional[str] = None
    time: Optional[str] = None
    chef_name: Optional[str] = None
    chef_phone_number: Optional[str] = None
    add_helper: Optional[str] = None
    notes: Optional[str] = None


class OrderUpdate(CamelModel):
    client_id: Optional[str] = None
    client_snapshot: Optional[ClientSnapshotIn] = None
    number_of_people: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    address: Optional[str] = None
    order_type: Optional[str] = None
    order_date: Optional[datetime] = None
    order_time: Optional[str] = None
    menu_items: Optional[List[OrderMenuItemIn]] = None

    vehicle_owner_name: Optional[str] = None
    phone_number: Optional[str] = None
    vehicle_number_placeholder: Optional[str] = None
    time: Optional[str] = None
    chef_name: Optional[str] = None
    chef_phone_number: Optional[str] = None
    add_helper: Optional[str] = None
    notes: Optional[str] = None


class PreviewIngredientsRequest(CamelModel):
    number_of_people: float = Field(..., allow_inf_nan=False)
    menu_items: List[OrderMenuItemIn] = Field(default_factory=list)
    policy: str = "auto"
