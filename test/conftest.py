from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.errors import register_error_handlers
from src.api.routes import router
from src.application.container import Services, build_services
from src.infrastructure.memory_repositories import (
    InMemoryClientRepository,
    InMemoryIngredientRepository,
    InMemoryMenuItemRepository,
    InMemoryOrderRepository,
)


@pytest.fixture()
def services() -> Services:
    return build_services(
        clients=InMemoryClientRepository(),
        ingredients=InMemoryIngredientRepository(),
        menu_items=InMemoryMenuItemRepository(),
        orders=InMemoryOrderRepository(),
    )


@pytest.fixture()
def client(services: Services) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    register_error_handlers(app)
    app.state.services = services
    return TestClient(app)
