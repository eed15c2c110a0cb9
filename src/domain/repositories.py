# catering_orders/src/domain/repositories.py
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

from src.domain.entities import Client, Ingredient, MenuItem, Order

T = TypeVar("T")

# ingredient_id -> record, or None when the record is gone
IngredientLookup = Callable[[str], Optional[Ingredient]]


class CrudRepo(Protocol[T]):
    """Document-store CRUD keyed by an opaque string id."""

    def create(self, data: Dict[str, Any]) -> T: ...

    def all(self) -> List[T]: ...

    def by_id(self, entity_id: str) -> Optional[T]: ...

    def update(self, entity_id: str, fields: Dict[str, Any]) -> Optional[T]: ...

    def delete(self, entity_id: str) -> bool: ...

    def search(self, term: str) -> List[T]: ...


class ClientRepo(CrudRepo[Client], Protocol):
    pass


class IngredientRepo(CrudRepo[Ingredient], Protocol):
    def find_by_unit(self, unit: str) -> List[Ingredient]: ...


class MenuItemRepo(CrudRepo[MenuItem], Protocol):
    def find_by_category(self, category: str) -> List[MenuItem]: ...


class OrderRepo(CrudRepo[Order], Protocol):
    def find_by_client(self, client_id: str) -> List[Order]: ...
