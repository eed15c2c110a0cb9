# catering_orders/src/application/container.py
from __future__ import annotations

from dataclasses import dataclass

from src.application.usecases import (
    ComputeOrderIngredients,
    CreateOrder,
    PreviewOrderIngredients,
    SaveIngredient,
    SaveMenuItem,
    SnapshotOrderMenuItems,
    UpdateOrder,
)
from src.domain.repositories import ClientRepo, IngredientRepo, MenuItemRepo, OrderRepo


@dataclass(frozen=True)
class Services:
    clients: ClientRepo
    ingredients: IngredientRepo
    menu_items: MenuItemRepo
    orders: OrderRepo

    save_ingredient: SaveIngredient
    save_menu_item: SaveMenuItem
    create_order: CreateOrder
    update_order: UpdateOrder
    order_ingredients: ComputeOrderIngredients
    preview_ingredients: PreviewOrderIngredients


def build_services(
    clients: ClientRepo,
    ingredients: IngredientRepo,
    menu_items: MenuItemRepo,
    orders: OrderRepo,
) -> Services:
    snapshot = SnapshotOrderMenuItems(menu_item_repo=menu_items, ingredient_repo=ingredients)
    return Services(
        clients=clients,
        ingredients=ingredients,
        menu_items=menu_items,
        orders=orders,
        save_ingredient=SaveIngredient(ingredients),
        save_menu_item=SaveMenuItem(menu_item_repo=menu_items, ingredient_repo=ingredients),
        create_order=CreateOrder(order_repo=orders, client_repo=clients, snapshot=snapshot),
        update_order=UpdateOrder(order_repo=orders, client_repo=clients, snapshot=snapshot),
        order_ingredients=ComputeOrderIngredients(orders),
        preview_ingredients=PreviewOrderIngredients(menu_item_repo=menu_items, ingredient_repo=ingredients),
    )
