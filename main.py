from __future__ import annotations

import logging
import uvicorn
from fastapi import FastAPI
from pymongo import MongoClient
from dotenv import load_dotenv
load_dotenv()
from src.api.routes import router
from src.api.errors import register_error_handlers
from src.core.config import (
    MONGO_URI, MONGO_DB, MONGO_TIMEOUT_MS,
    MONGO_CLIENTS_COL, MONGO_INGREDIENTS_COL, MONGO_MENU_ITEMS_COL, MONGO_ORDERS_COL,
    Server,
)

from src.application.container import build_services
from src.infrastructure.mongo_repositories import (
    MongoClientRepository,
    MongoIngredientRepository,
    MongoMenuItemRepository,
    MongoOrderRepository,
)

log = logging.getLogger("app")
app = FastAPI(title="Catering Orders")
app.include_router(router)
register_error_handlers(app)

_mongo_client: MongoClient | None = None


@app.on_event("startup")
def on_startup() -> None:
    global _mongo_client

    _mongo_client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=MONGO_TIMEOUT_MS)
    db = _mongo_client[MONGO_DB]

    # DI for routes.py
    app.state.services = build_services(
        clients=MongoClientRepository(db[MONGO_CLIENTS_COL]),
        ingredients=MongoIngredientRepository(db[MONGO_INGREDIENTS_COL]),
        menu_items=MongoMenuItemRepository(db[MONGO_MENU_ITEMS_COL]),
        orders=MongoOrderRepository(db[MONGO_ORDERS_COL]),
    )
    log.info("Startup complete (db=%s)", MONGO_DB)


@app.on_event("shutdown")
def on_shutdown() -> None:
    global _mongo_client
    if _mongo_client:
        _mongo_client.close()


if __name__ == "__main__":
    uvicorn.run("main:app", host=Server.HOST, port=Server.PORT, reload=False)
