from __future__ import annotations

from datetime import datetime

import pytest

from src.application.container import Services
from src.application.usecases import pick_policy
from src.domain.entities import OrderMenuItemSelection, RecipeIngredientLine, StyledQuantity, StyleQuantities


def _quantities(v: float):
    return {"onlyBhajiyaKG": v, "dishWithOnlyBhajiya": 0, "dishHaveNoChart": 0, "dishHaveChartAndBhajiya": 0}


@pytest.fixture()
def catalog(services: Services):
    onion = services.save_ingredient.create({"name": "Onion", "unit": "kg"})
    oil = services.save_ingredient.create({"name": "Oil", "unit": "kilogram", "isDefault": True})
    menu = services.save_menu_item.create({
        "name": "Bhajiya",
        "category": "Snacks",
        "type": "only_bhajiya_kg",
        "ingredients": [
            {"ingredientId": onion["id"], "quantities": _quantities(5)},
            {"ingredientId": oil["id"], "isDefaultIngredient": True},
        ],
    })
    return {"onion": onion, "oil": oil, "menu": menu}


def _order_payload(menu_id: str, people: float = 200):
    return {
        "clientSnapshot": {"name": "Patel", "phone": "999", "address": "Surat"},
        "numberOfPeople": people,
        "address": "Surat",
        "orderType": "wedding",
        "orderDate": datetime(2026, 10, 19),
        "orderTime": "19:00",
        "menuItems": [{"menuItemId": menu_id, "selectedType": "only_bhajiya_kg"}],
    }


def test_ingredient_defaults_are_filled_for_default_ingredients(catalog):
    oil = catalog["oil"]
    assert (oil["defaultValue"], oil["incrementThreshold"], oil["incrementAmount"]) == (12, 3, 3)
    assert catalog["onion"]["unit"] == "kilogram"


def test_invalid_unit_is_rejected(services):
    with pytest.raises(ValueError):
        services.save_ingredient.create({"name": "Sugar", "unit": "cups"})


def test_menu_item_needs_a_positive_quantity_for_non_default_lines(services, catalog):
    with pytest.raises(ValueError):
        services.save_menu_item.create({
            "name": "Empty", "category": "x", "type": "only_bhajiya_kg",
            "ingredients": [{"ingredientId": catalog["onion"]["id"], "quantities": _quantities(0)}],
        })


def test_menu_item_rejects_unknown_ingredient(services):
    with pytest.raises(ValueError):
        services.save_menu_item.create({
            "name": "Ghost", "category": "x", "type": "only_bhajiya_kg",
            "ingredients": [{"ingredientId": "nope", "quantities": _quantities(1)}],
        })


def test_order_summary_scales_snapshot(services, catalog):
    order = services.create_order(_order_payload(catalog["menu"]["id"]))
    summary = services.order_ingredients(order["id"])

    assert summary["policy"] == "defaults"
    rows = summary["ingredients"]
    assert [r["ingredientName"] for r in rows] == ["Oil", "Onion"]
    assert rows[0]["totalQuantity"] == 24
    assert rows[1]["totalQuantity"] == 10
    assert rows[1]["formattedQuantity"] == "10 kg"


def test_menu_item_edits_do_not_change_placed_orders(services, catalog):
    order = services.create_order(_order_payload(catalog["menu"]["id"]))
    services.save_menu_item.update(catalog["menu"]["id"], {
        "ingredients": [{"ingredientId": catalog["onion"]["id"], "quantities": _quantities(50)}],
    })
    services.ingredients.update(catalog["onion"]["id"], {"name": "Red onion"})

    rows = {r["ingredientId"]: r for r in services.order_ingredients(order["id"])["ingredients"]}
    assert rows[catalog["onion"]["id"]]["totalQuantity"] == 10
    assert rows[catalog["onion"]["id"]]["ingredientName"] == "Onion"


def test_order_validation(services, catalog):
    with pytest.raises(ValueError):
        services.create_order(_order_payload(catalog["menu"]["id"], people=0))

    payload = _order_payload(catalog["menu"]["id"])
    payload.pop("clientSnapshot")
    with pytest.raises(ValueError):
        services.create_order(payload)

    payload["clientId"] = "missing"
    with pytest.raises(ValueError):
        services.create_order(payload)

    with pytest.raises(LookupError):
        services.create_order({**_order_payload("missing-menu")})


def test_preview_uses_live_records_and_tolerates_deleted_ingredients(services, catalog):
    services.ingredients.delete(catalog["onion"]["id"])
    preview = services.preview_ingredients(
        [{"menuItemId": catalog["menu"]["id"], "selectedType": "only_bhajiya_kg"}], 100
    )
    names = {r["ingredientName"]: r for r in preview["ingredients"]}
    assert names["Unknown Ingredient"]["unit"] == "piece"
    assert names["Unknown Ingredient"]["totalQuantity"] == 5
    assert names["Oil"]["totalQuantity"] == 12


def test_preview_rejects_non_positive_headcount(services, catalog):
    with pytest.raises(ValueError):
        services.preview_ingredients([{"menuItemId": catalog["menu"]["id"]}], 0)


def test_unknown_order_raises_lookup_error(services):
    with pytest.raises(LookupError):
        services.order_ingredients("nope")


def test_pick_policy():
    plain = OrderMenuItemSelection(menu_item_id="a", ingredients=[RecipeIngredientLine("x")])
    dual = OrderMenuItemSelection(
        menu_item_id="b",
        ingredients=[RecipeIngredientLine("y", recipe_quantity=StyledQuantity(StyleQuantities(1), StyleQuantities(1)))],
    )
    assert pick_policy([plain]) == "defaults"
    assert pick_policy([plain, dual]) == "aware"
    assert pick_policy([plain], "basic") == "basic"
    with pytest.raises(ValueError):
        pick_policy([plain], "fastest")


@pytest.mark.parametrize("people", [float("inf"), float("nan"), "Infinity"])
def test_non_finite_headcount_is_rejected(services, catalog, people):
    with pytest.raises(ValueError):
        services.preview_ingredients([{"menuItemId": catalog["menu"]["id"]}], people)
    with pytest.raises(ValueError):
        services.create_order(_order_payload(catalog["menu"]["id"], people=people))


def test_preview_uses_multi_item_share_when_menu_items_share_an_ingredient(services, catalog):
    second = services.save_menu_item.create({
        "name": "Onion pakoda",
        "category": "Snacks",
        "type": "only_bhajiya_kg",
        "ingredients": [{"ingredientId": catalog["onion"]["id"], "quantities": _quantities(10)}],
    })
    first = services.save_menu_item.update(catalog["menu"]["id"], {
        "ingredients": [
            {"ingredientId": catalog["onion"]["id"], "quantities": _quantities(10)},
            {"ingredientId": catalog["oil"]["id"], "isDefaultIngredient": True},
        ],
    })
    picked = [{"menuItemId": m["id"], "selectedType": "only_bhajiya_kg"} for m in (first, second)]

    preview = services.preview_ingredients(picked, 100)
    assert preview["policy"] == "aware"
    rows = {r["ingredientName"]: r for r in preview["ingredients"]}
    assert rows["Onion"]["totalQuantity"] == 14
    assert rows["Oil"]["totalQuantity"] == 12

    alone = services.preview_ingredients(picked[1:], 100)
    assert {r["ingredientName"]: r["totalQuantity"] for r in alone["ingredients"]} == {"Onion": 10}


def test_resent_snapshot_must_reference_an_existing_menu_item(services, catalog):
    line = {"ingredientId": catalog["onion"]["id"], "ingredientName": "Onion", "unit": "kilogram",
            "quantities": _quantities(5)}
    payload = _order_payload(catalog["menu"]["id"])
    payload["menuItems"] = [{"menuItemId": "made-up", "selectedType": "only_bhajiya_kg", "ingredients": [line]}]
    with pytest.raises(LookupError):
        services.create_order(payload)

    payload["menuItems"] = [{
        "menuItemId": catalog["menu"]["id"], "selectedType": "only_bhajiya_kg",
        "ingredients": [{"ingredientName": "Saffron", "quantities": _quantities(5)}],
    }]
    with pytest.raises(ValueError):
        services.create_order(payload)

    payload["menuItems"][0]["ingredients"] = [line]
    order = services.create_order(payload)
    rows = services.order_ingredients(order["id"])["ingredients"]
    assert [(r["ingredientName"], r["totalQuantity"]) for r in rows] == [("Onion", 10)]
