from __future__ import annotations

import pytest

from src.domain.entities import (
    Ingredient,
    LegacyQuantity,
    OrderMenuItemSelection,
    RecipeIngredientLine,
    ServingStyle,
    StyledQuantity,
    StyleQuantities,
)
from src.services.scaling_engine import (
    ScalingEngine,
    round_for_unit,
    round_half_up,
    scale,
    scale_with_menu_item_awareness,
    sort_for_report,
)

ALL_STYLES = list(ServingStyle)


def line(ingredient_id="onion", unit="kilogram", name=None, **kw) -> RecipeIngredientLine:
    return RecipeIngredientLine(ingredient_id=ingredient_id, ingredient_name=name or ingredient_id, unit=unit, **kw)


def styled(single: float, multi: float) -> StyledQuantity:
    return StyledQuantity(single=StyleQuantities(only_bhajiya_kg=single), multi=StyleQuantities(only_bhajiya_kg=multi))


def sel(*lines, style=ServingStyle.ONLY_BHAJIYA_KG, menu_item_id="m1") -> OrderMenuItemSelection:
    return OrderMenuItemSelection(menu_item_id=menu_item_id, selected_type=style, ingredients=list(lines))


def by_id(results):
    return {r.ingredient_id: r for r in results}


# ----------------------------
# rounding
# ----------------------------
def test_round_half_up_is_not_bankers_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(-2.5) == -2


def test_rounding_by_unit():
    assert round_for_unit(3.6, "piece") == 4
    assert round_for_unit(3.456, "kilogram") == 3.46
    assert round_for_unit(3.456, "kg") == 3.46
    assert round_for_unit(1.234, "જબલા") == 1.23


def test_scaled_quantities_are_rounded_per_unit():
    selections = [
        sel(
            line("eggs", unit="piece", quantities=StyleQuantities(only_bhajiya_kg=3.6)),
            line("flour", unit="kilogram", quantities=StyleQuantities(only_bhajiya_kg=3.456)),
        )
    ]
    out = by_id(scale(selections, 100))
    assert out["eggs"].total_quantity == 4
    assert out["flour"].total_quantity == 3.46


# ----------------------------
# basic policy
# ----------------------------
def test_empty_selections_give_empty_result():
    assert scale([], 100) == []
    assert scale([], 0) == []
    assert scale_with_menu_item_awareness([], 250) == []


def test_scale_is_linear_in_headcount_for_continuous_units():
    selections = [
        sel(line("onion", quantities=StyleQuantities(only_bhajiya_kg=5)),
            line("oil", unit="liter", quantities=StyleQuantities(only_bhajiya_kg=3.3))),
        sel(line("onion", quantities=StyleQuantities(only_bhajiya_kg=1.25)), menu_item_id="m2"),
    ]
    at_100 = by_id(scale(selections, 100))
    at_200 = by_id(scale(selections, 200))
    for key in ("onion", "oil"):
        assert at_200[key].total_quantity == pytest.approx(2 * at_100[key].total_quantity, abs=0.011)


@pytest.mark.parametrize("style", ALL_STYLES)
def test_default_ingredient_ignores_serving_style(style):
    quantities = StyleQuantities(1, 2, 3, 4)
    selections = [sel(line("salt", is_default_ingredient=True, default_value=12, quantities=quantities), style=style)]
    (result,) = scale(selections, 100)
    assert result.total_quantity == 12


def test_default_ingredient_falls_back_to_12():
    (result,) = scale([sel(line("salt", is_default_ingredient=True))], 100)
    assert result.total_quantity == 12


def test_same_ingredient_is_summed_across_menu_items():
    q = StyleQuantities(only_bhajiya_kg=5)
    selections = [sel(line("x", quantities=q), menu_item_id="a"), sel(line("x", quantities=q), menu_item_id="b")]
    (result,) = scale(selections, 100)
    assert result.total_quantity == 10
    assert result.menu_item_count == 2


def test_selected_type_picks_matching_quantity():
    q = StyleQuantities(1, 2, 3, 4)
    totals = [scale([sel(line("x", quantities=q), style=s)], 100)[0].total_quantity for s in ALL_STYLES]
    assert totals == [1, 2, 3, 4]


def test_unknown_selected_type_falls_back_to_first_style():
    q = StyleQuantities(7, 2, 3, 4)
    selections = [OrderMenuItemSelection(menu_item_id="m", selected_type=ServingStyle.parse("bogus"),
                                         ingredients=[line("x", quantities=q)])]
    assert scale(selections, 100)[0].total_quantity == 7


def test_re_rounding_after_each_addition_is_kept():
    # each 0.4 piece rounds to 0 before being added, so three of them stay 0
    q = StyleQuantities(only_bhajiya_kg=0.4)
    selections = [sel(line("chili", unit="piece", quantities=q), menu_item_id=str(i)) for i in range(3)]
    assert scale(selections, 100)[0].total_quantity == 0


def test_malformed_selections_and_lines_are_skipped():
    selections = [
        OrderMenuItemSelection(menu_item_id="broken", ingredients=None),
        sel(line("", quantities=StyleQuantities(only_bhajiya_kg=1)), line("ok", quantities=StyleQuantities(only_bhajiya_kg=2))),
    ]
    out = scale(selections, 100)
    assert [r.ingredient_id for r in out] == ["ok"]


def test_non_positive_headcount_is_not_rejected():
    q = StyleQuantities(only_bhajiya_kg=5)
    assert scale([sel(line("x", quantities=q))], 0)[0].total_quantity == 0
    assert scale([sel(line("x", quantities=q))], -100)[0].total_quantity == -5


def test_legacy_only_line_is_used_by_basic_policy():
    (result,) = scale([sel(line("x", recipe_quantity=LegacyQuantity(8)))], 50)
    assert result.total_quantity == 4


# ----------------------------
# ingredient lookup
# ----------------------------
def test_missing_ingredient_record_degrades_to_placeholder():
    engine = ScalingEngine(lookup=lambda _id: None)
    (result,) = engine.scale([sel(line("ghost", unit="kilogram", quantities=StyleQuantities(only_bhajiya_kg=2.4)))], 100)
    assert result.ingredient_name == "Unknown Ingredient"
    assert result.unit == "piece"
    assert result.total_quantity == 2


def test_snapshot_without_name_uses_placeholder():
    bare = RecipeIngredientLine(ingredient_id="x", quantities=StyleQuantities(only_bhajiya_kg=1))
    (result,) = scale([sel(bare)], 100)
    assert (result.ingredient_name, result.unit) == ("Unknown Ingredient", "piece")


def test_lookup_record_supplies_name_unit_and_default_value():
    records = {"ghee": Ingredient(id="ghee", name="Ghee", unit="kilogram", is_default=True, default_value=6)}
    calls = []

    def lookup(ingredient_id):
        calls.append(ingredient_id)
        return records.get(ingredient_id)

    selections = [sel(RecipeIngredientLine(ingredient_id="ghee", is_default_ingredient=True), menu_item_id=str(i))
                  for i in range(2)]
    (result,) = ScalingEngine(lookup).scale(selections, 150)
    assert (result.ingredient_name, result.unit) == ("Ghee", "kilogram")
    assert result.total_quantity == 18
    assert calls == ["ghee"]


# ----------------------------
# menu-item-aware policy
# ----------------------------
def test_single_item_values_when_ingredient_used_once():
    (result,) = scale_with_menu_item_awareness([sel(line("y", recipe_quantity=styled(10, 7)))], 100)
    assert result.total_quantity == 10
    assert result.menu_item_count is None


def test_multi_item_values_when_ingredient_shared():
    selections = [
        sel(line("y", recipe_quantity=styled(10, 7)), menu_item_id="a"),
        sel(line("y", recipe_quantity=styled(10, 7)), line("z", recipe_quantity=styled(2, 1)), menu_item_id="b"),
    ]
    out = by_id(scale_with_menu_item_awareness(selections, 100))
    assert out["y"].total_quantity == 14
    assert out["z"].total_quantity == 2


def test_aware_policy_uses_selected_style_of_chosen_set():
    q = StyledQuantity(single=StyleQuantities(1, 2, 3, 4), multi=StyleQuantities(0.5, 1, 1.5, 2))
    (result,) = scale_with_menu_item_awareness([sel(line("y", recipe_quantity=q), style=ServingStyle.DISH_HAVE_NO_CHART)], 200)
    assert result.total_quantity == 6


def test_aware_policy_uses_legacy_value_as_is_and_skips_lines_without_values():
    selections = [
        sel(line("legacy", recipe_quantity=LegacyQuantity(4)), menu_item_id="a"),
        sel(line("legacy", recipe_quantity=LegacyQuantity(4)), line("plain", quantities=StyleQuantities(9)), menu_item_id="b"),
    ]
    out = by_id(scale_with_menu_item_awareness(selections, 100))
    assert out["legacy"].total_quantity == 8
    assert "plain" not in out


# ----------------------------
# default increments policy
# ----------------------------
def _salt(**kw):
    return line("salt", is_default_ingredient=True, default_value=12, increment_threshold=3, increment_amount=3, **kw)


def test_shared_default_ingredient_counted_once_up_to_threshold():
    selections = [sel(_salt(), menu_item_id=str(i)) for i in range(3)]
    (result,) = ScalingEngine().scale_with_default_increments(selections, 100)
    assert result.total_quantity == 12
    assert result.menu_item_count == 3
    assert result.is_default is True


def test_shared_default_ingredient_bumped_above_threshold():
    selections = [sel(_salt(), menu_item_id=str(i)) for i in range(5)]
    (result,) = ScalingEngine().scale_with_default_increments(selections, 100)
    assert result.total_quantity == 18


def test_non_default_lines_are_summed_under_default_increments():
    q = StyleQuantities(only_bhajiya_kg=2.5)
    selections = [sel(_salt(), line("potato", quantities=q), menu_item_id=str(i)) for i in range(2)]
    out = by_id(ScalingEngine().scale_with_default_increments(selections, 200))
    assert out["salt"].total_quantity == 24
    assert out["potato"].total_quantity == 10


def test_sort_for_report_puts_defaults_first():
    selections = [sel(line("b", name="banana", quantities=StyleQuantities(1)),
                      line("a", name="Apple", quantities=StyleQuantities(1)),
                      _salt())]
    ordered = sort_for_report(ScalingEngine().scale_with_default_increments(selections, 100))
    assert [r.ingredient_id for r in ordered] == ["salt", "a", "b"]
