# catering_orders/src/api/routes.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.schemas import (
    ClientIn,
    ClientUpdate,
    IngredientIn,
    IngredientUpdate,
    MenuItemIn,
    MenuItemUpdate,
    OrderIn,
    OrderUpdate,
    PreviewIngredientsRequest,
)
from src.application.container import Services

log = logging.getLogger("api.routes")
router = APIRouter()


# -------------------------
# Dependencies via app.state
# -------------------------
def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("services not initialized. Check app startup wiring.")
    return services


def _ok(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}


def _call(action: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Dict[str, Any]:
    """Run a use-case and map its errors onto HTTP status codes."""
    try:
        return _ok(fn(*args, **kwargs))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        log.exception("Failed to %s", action)
        raise HTTPException(status_code=500, detail=f"Failed to {action}")


def _found(entity: Optional[Any], what: str) -> Dict[str, Any]:
    if entity is None:
        raise LookupError(f"{what} not found")
    return entity.to_dict()


@router.get("/healthz")
def healthz() -> Dict[str, Any]:
    return _ok({"status": "ok"})


# -------------------------
# Clients
# -------------------------
@router.get("/clients")
def list_clients(search: Optional[str] = None, svc: Services = Depends(get_services)) -> Any:
    return _call("fetch clients", lambda: [c.to_dict() for c in svc.clients.search(search or "")])


@router.post("/clients", status_code=201)
def create_client(req: ClientIn, svc: Services = Depends(get_services)) -> Any:
    return _call("create client", lambda: svc.clients.create(req.to_doc()).to_dict())


@router.get("/clients/{client_id}")
def get_client(client_id: str, svc: Services = Depends(get_services)) -> Any:
    return _call("fetch client", lambda: _found(svc.clients.by_id(client_id), "Client"))


@router.put("/clients/{client_id}")
def update_client(client_id: str, req: ClientUpdate, svc: Services = Depends(get_services)) -> Any:
    return _call("update client", lambda: _found(svc.clients.update(client_id, req.to_doc()), "Client"))


@router.delete("/clients/{client_id}")
def delete_client(client_id: str, svc: Services = Depends(get_services)) -> Any:
    if not svc.clients.delete(client_id):
        raise HTTPException(status_code=404, detail="Client not found")
    return _ok({"id": client_id})


# -------------------------
# Ingredients
# -------------------------
@router.get("/ingredients")
def list_ingredients(
    search: Optional[str] = None, unit: Optional[str] = None, svc: Services = Depends(get_services)
) -> Any:
    def run():
        items = svc.ingredients.find_by_unit(unit) if unit else svc.ingredients.search(search or "")
        return [i.to_dict() for i in items]

    return _call("fetch ingredients", run)


@router.post("/ingredients", status_code=201)
def create_ingredient(req: IngredientIn, svc: Services = Depends(get_services)) -> Any:
    return _call("create ingredient", svc.save_ingredient.create, req.to_doc())


@router.get("/ingredients/{ingredient_id}")
def get_ingredient(ingredient_id: str, svc: Services = Depends(get_services)) -> Any:
    return _call("fetch ingredient", lambda: _found(svc.ingredients.by_id(ingredient_id), "Ingredient"))


@router.put("/ingredients/{ingredient_id}")
def update_ingredient(ingredient_id: str, req: IngredientUpdate, svc: Services = Depends(get_services)) -> Any:
    return _call("update ingredient", svc.save_ingredient.update, ingredient_id, req.to_doc())


@router.delete("/ingredients/{ingredient_id}")
def delete_ingredient(ingredient_id: str, svc: Services = Depends(get_services)) -> Any:
    if not svc.ingredients.delete(ingredient_id):
        raise HTTPException(status_code=404, detail="Ingredient not found")
    return _ok({"id": ingredient_id})


# -------------------------
# Menu items
# -------------------------
@router.get("/menu-items")
def list_menu_items(
    search: Optional[str] = None, category: Optional[str] = None, svc: Services = Depends(get_services)
) -> Any:
    def run():
        items = svc.menu_items.find_by_category(category) if category else svc.menu_items.search(search or "")
        return [m.to_dict() for m in items]

    return _call("fetch menu items", run)


@router.post("/menu-items", status_code=201)
def create_menu_item(req: MenuItemIn, svc: Services = Depends(get_services)) -> Any:
    return _call("create menu item", svc.save_menu_item.create, req.to_doc())


@router.get("/menu-items/{menu_item_id}")
def get_menu_item(menu_item_id: str, svc: Services = Depends(get_services)) -> Any:
    return _call("fetch menu item", lambda: _found(svc.menu_items.by_id(menu_item_id), "Menu item"))


@router.put("/menu-items/{menu_item_id}")
def update_menu_item(menu_item_id: str, req: MenuItemUpdate, svc: Services = Depends(get_services)) -> Any:
    return _call("update menu item", svc.save_menu_item.update, menu_item_id, req.to_doc())


@router.delete("/menu-items/{menu_item_id}")
def delete_menu_item(menu_item_id: str, svc: Services = Depends(get_services)) -> Any:
    if not svc.menu_items.delete(menu_item_id):
        raise HTTPException(status_code=404, detail="Menu item not found")
    return _ok({"id": menu_item_id})


# -------------------------
# Orders
# -------------------------
@router.get("/orders")
def list_orders(
    search: Optional[str] = None, client_id: Optional[str] = Query(default=None, alias="clientId"),
    svc: Services = Depends(get_services),
) -> Any:
    def run():
        items = svc.orders.find_by_client(client_id) if client_id else svc.orders.search(search or "")
        return [o.to_dict() for o in items]

    return _call("fetch orders", run)


@router.post("/orders", status_code=201)
def create_order(req: OrderIn, svc: Services = Depends(get_services)) -> Any:
    return _call("create order", svc.create_order, req.to_doc())


@router.post("/orders/preview-ingredients")
def preview_order_ingredients(req: PreviewIngredientsRequest, svc: Services = Depends(get_services)) -> Any:
    return _call(
        "preview ingredients",
        svc.preview_ingredients,
        [m.to_doc() for m in req.menu_items],
        req.number_of_people,
        policy=req.policy,
    )


@router.get("/orders/{order_id}")
def get_order(order_id: str, svc: Services = Depends(get_services)) -> Any:
    return _call("fetch order", lambda: _found(svc.orders.by_id(order_id), "Order"))


@router.put("/orders/{order_id}")
def update_order(order_id: str, req: OrderUpdate, svc: Services = Depends(get_services)) -> Any:
    return _call("update order", svc.update_order, order_id, req.to_doc())


@router.delete("/orders/{order_id}")
def delete_order(order_id: str, svc: Services = Depends(get_services)) -> Any:
    if not svc.orders.delete(order_id):
        raise HTTPException(status_code=404, detail="Order not found")
    return _ok({"id": order_id})


@router.get("/orders/{order_id}/ingredients")
def order_ingredients(order_id: str, policy: str = "auto", svc: Services = Depends(get_services)) -> Any:
    return _call("compute order ingredients", svc.order_ingredients, order_id, policy=policy)
