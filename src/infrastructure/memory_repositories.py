# catering_orders/src/infrastructure/memory_repositories.py
from __future__ import annotations

import copy
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from src.domain.entities import Client, Ingredient, MenuItem, Order, Unit

T = TypeVar("T")


def _get_path(doc: Dict[str, Any], path: str) -> Any:
    cur: Any = doc
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
    return cur


class InMemoryCrudRepository(Generic[T]):
    """Same contract as the Mongo repositories, kept in a dict. Used for dev runs and tests."""

    search_fields: Sequence[str] = ("name",)

    def __init__(self, parse: Callable[[Dict[str, Any]], T]) -> None:
        self._parse_doc = parse
        self._data: Dict[str, Dict[str, Any]] = {}

    def _parse(self, doc: Dict[str, Any]) -> T:
        return self._parse_doc(copy.deepcopy(doc))

    def _sort_key(self, doc: Dict[str, Any]) -> Any:
        return str(doc.get("name") or "").casefold()

    def _find(self, pred: Callable[[Dict[str, Any]], bool]) -> List[T]:
        docs = sorted((d for d in self._data.values() if pred(d)), key=self._sort_key)
        return [self._parse(d) for d in docs]

    def create(self, data: Dict[str, Any]) -> T:
        now = datetime.now(timezone.utc)
        entity_id = uuid.uuid4().hex
        doc = {k: v for k, v in copy.deepcopy(data).items() if k not in ("id", "_id", "createdAt")}
        doc.update({"id": entity_id, "createdAt": now, "updatedAt": now})
        self._data[entity_id] = doc
        return self._parse(doc)

    def all(self) -> List[T]:
        return self._find(lambda d: True)

    def by_id(self, entity_id: str) -> Optional[T]:
        doc = self._data.get(str(entity_id))
        return self._parse(doc) if doc else None

    def update(self, entity_id: str, fields: Dict[str, Any]) -> Optional[T]:
        doc = self._data.get(str(entity_id))
        if doc is None:
            return None
        doc.update({k: v for k, v in copy.deepcopy(fields).items() if k not in ("id", "_id", "createdAt")})
        doc["updatedAt"] = datetime.now(timezone.utc)
        return self._parse(doc)

    def delete(self, entity_id: str) -> bool:
        return self._data.pop(str(entity_id), None) is not None

    def search(self, term: str) -> List[T]:
        q = (term or "").strip()
        if not q:
            return self.all()
        rx = re.compile(re.escape(q), re.IGNORECASE)
        return self._find(
            lambda d: any(rx.search(str(_get_path(d, f) or "")) for f in self.search_fields)
        )


class InMemoryClientRepository(InMemoryCrudRepository[Client]):
    search_fields = ("name", "phone", "address")

    def __init__(self) -> None:
        super().__init__(Client.from_dict)


class InMemoryIngredientRepository(InMemoryCrudRepository[Ingredient]):

    def __init__(self) -> None:
        super().__init__(Ingredient.from_dict)

    def find_by_unit(self, unit: str) -> List[Ingredient]:
        wanted = Unit.canonical(unit)
        return self._find(lambda d: d.get("unit") == wanted)


class InMemoryMenuItemRepository(InMemoryCrudRepository[MenuItem]):
    search_fields = ("name", "category")

    def __init__(self) -> None:
        super().__init__(MenuItem.from_dict)

    def find_by_category(self, category: str) -> List[MenuItem]:
        return self._find(lambda d: d.get("category") == category)


class InMemoryOrderRepository(InMemoryCrudRepository[Order]):
    search_fields = ("clientSnapshot.name", "address", "orderType")

    def __init__(self) -> None:
        super().__init__(Order.from_dict)

    def _sort_key(self, doc: Dict[str, Any]) -> Any:
        return str(doc.get("createdAt") or "")

    def find_by_client(self, client_id: str) -> List[Order]:
        return self._find(lambda d: d.get("clientId") == client_id)
