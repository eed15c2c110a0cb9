# catering_orders/src/infrastructure/mongo_repositories.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar
import logging
import re

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from bson import ObjectId
from bson.errors import InvalidId

from src.domain.entities import Client, Ingredient, MenuItem, Order, Unit

log = logging.getLogger("infra.mongo_repo")

T = TypeVar("T")


def _as_str_id(v: Any) -> str:
    if isinstance(v, ObjectId):
        return str(v)
    return str(v)


def _object_id(entity_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(str(entity_id))
    except (InvalidId, TypeError):
        return None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _strip_ids(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in ("id", "_id", "createdAt")}


class MongoCrudRepository(Generic[T]):
    """
    CRUD repository over one MongoDB collection.
    Documents are stored with camelCase keys; `_id` is exposed as a string `id`.
    An id that is not a valid ObjectId is treated as "not found".
    """

    search_fields: Sequence[str] = ("name",)
    sort: Sequence[Tuple[str, int]] = (("name", ASCENDING),)

    def __init__(self, col: Collection, parse: Callable[[Dict[str, Any]], T]) -> None:
        self._col = col
        self._parse_doc = parse

    def _parse(self, doc: Dict[str, Any]) -> T:
        try:
            d = dict(doc)
            d["id"] = _as_str_id(d.pop("_id", d.get("id", "")))
            return self._parse_doc(d)
        except Exception as e:
            log.exception("Invalid document in %s: %s", self._col.name, doc)
            raise ValueError(f"Invalid document: {e}") from e

    def _find(self, query: Dict[str, Any]) -> List[T]:
        return [self._parse(doc) for doc in self._col.find(query).sort(list(self.sort))]

    def create(self, data: Dict[str, Any]) -> T:
        now = _now()
        doc = {**_strip_ids(data), "createdAt": now, "updatedAt": now}
        result = self._col.insert_one(doc)
        doc["_id"] = result.inserted_id
        log.info("Created %s %s", self._col.name, result.inserted_id)
        return self._parse(doc)

    def all(self) -> List[T]:
        return self._find({})

    def by_id(self, entity_id: str) -> Optional[T]:
        oid = _object_id(entity_id)
        if oid is None:
            return None
        doc = self._col.find_one({"_id": oid})
        return self._parse(doc) if doc else None

    def update(self, entity_id: str, fields: Dict[str, Any]) -> Optional[T]:
        oid = _object_id(entity_id)
        if oid is None:
            return None
        doc = self._col.find_one_and_update(
            {"_id": oid},
            {"$set": {**_strip_ids(fields), "updatedAt": _now()}},
            return_document=ReturnDocument.AFTER,
        )
        return self._parse(doc) if doc else None

    def delete(self, entity_id: str) -> bool:
        oid = _object_id(entity_id)
        if oid is None:
            return False
        return self._col.delete_one({"_id": oid}).deleted_count > 0

    def search(self, term: str) -> List[T]:
        q = (term or "").strip()
        if not q:
            return self.all()
        pattern = {"$regex": re.escape(q), "$options": "i"}
        return self._find({"$or": [{f: pattern} for f in self.search_fields]})


class MongoClientRepository(MongoCrudRepository[Client]):
    search_fields = ("name", "phone", "address")

    def __init__(self, col: Collection) -> None:
        super().__init__(col, Client.from_dict)


class MongoIngredientRepository(MongoCrudRepository[Ingredient]):

    def __init__(self, col: Collection) -> None:
        super().__init__(col, Ingredient.from_dict)

    def find_by_unit(self, unit: str) -> List[Ingredient]:
        return self._find({"unit": Unit.canonical(unit)})


class MongoMenuItemRepository(MongoCrudRepository[MenuItem]):
    search_fields = ("name", "category")

    def __init__(self, col: Collection) -> None:
        super().__init__(col, MenuItem.from_dict)

    def find_by_category(self, category: str) -> List[MenuItem]:
        return self._find({"category": category})


class MongoOrderRepository(MongoCrudRepository[Order]):
    search_fields = ("clientSnapshot.name", "address", "orderType")
    sort = (("orderDate", DESCENDING), ("createdAt", DESCENDING))

    def __init__(self, col: Collection) -> None:
        super().__init__(col, Order.from_dict)

    def find_by_client(self, client_id: str) -> List[Order]:
        return self._find({"clientId": client_id})
