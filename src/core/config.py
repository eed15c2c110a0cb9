# catering_orders/src/core/config.py
from __future__ import annotations
from dataclasses import dataclass
import os
import logging

from dotenv import load_dotenv

load_dotenv()

# Mongo settings
MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB: str = os.getenv("MONGO_DB", "catering")
MONGO_CLIENTS_COL: str = os.getenv("MONGO_CLIENTS_COL", "clients")
MONGO_INGREDIENTS_COL: str = os.getenv("MONGO_INGREDIENTS_COL", "ingredients")
MONGO_MENU_ITEMS_COL: str = os.getenv("MONGO_MENU_ITEMS_COL", "menu_items")
MONGO_ORDERS_COL: str = os.getenv("MONGO_ORDERS_COL", "orders")
MONGO_TIMEOUT_MS: int = int(os.getenv("MONGO_TIMEOUT_MS", "3000"))

# Default ingredient policy (quantities are per 100 people)
DEFAULT_INGREDIENT_VALUE: float = float(os.getenv("DEFAULT_INGREDIENT_VALUE", "12"))
DEFAULT_INCREMENT_THRESHOLD: int = int(os.getenv("DEFAULT_INCREMENT_THRESHOLD", "3"))
DEFAULT_INCREMENT_AMOUNT: float = float(os.getenv("DEFAULT_INCREMENT_AMOUNT", "3"))

# Multi-item share of a recipe quantity when a line only has single values
MULTI_ITEM_FACTOR: float = float(os.getenv("MULTI_ITEM_FACTOR", "0.7"))

UNKNOWN_INGREDIENT_NAME = "Unknown Ingredient"
UNKNOWN_INGREDIENT_UNIT = "piece"


@dataclass(frozen=True)
class Server:
    HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("API_PORT", "8081"))


# Global logging (module-level loggers inherit this)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
LOGGER = logging.getLogger("catering_orders")
