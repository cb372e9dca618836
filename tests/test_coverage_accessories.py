import logging

from app.core.taxonomy import ACCESSORY_SUBCATEGORIES, ALL_SCENARIOS_NAME, Season
from app.services.coverage.accessories import (
    accessory_subcategory_targets,
    calculate_accessory_coverage,
    resolve_subcategory,
)
from app.services.coverage.types import CategoryTarget, GapType, LifestyleAnalysis, LifestyleType, WardrobeItem

INDOOR = LifestyleAnalysis(type=LifestyleType.INDOOR_FOCUSED, confidence=0.9, factors=["home"])


def _acc(item_id, subcategory, season=None):
    return WardrobeItem(id=item_id, category="accessory", name=item_id, subcategory=subcategory, season=season)


def _by_sub(records):
    return {r.subcategory: r for r in records}


def test_one_record_per_subcategory():
    records = calculate_accessory_coverage("u1", "winter", [])
    assert [r.subcategory for r in records] == ACCESSORY_SUBCATEGORIES
    for r in records:
        assert r.category == "accessory"
        assert r.gap_type != GapType.CRITICAL
        assert r.priority_level == 4


def test_summer_scarf_does_not_cover_winter():
    items = [_acc("linen-scarf", "Scarf", ["summer"]), _acc("tote", "Tote")]
    winter = _by_sub(calculate_accessory_coverage("u1", "winter", items))
    summer = _by_sub(calculate_accessory_coverage("u1", "summer", items))

    assert winter["Scarf"].current_items == 0
    assert summer["Scarf"].current_items == 1
    assert winter["Bag"].current_items == 1
    assert summer["Bag"].current_items == 1


def test_every_subcategory_is_scenario_agnostic():
    records = _by_sub(calculate_accessory_coverage("u1", "winter", []))

    scarf = records["Scarf"]
    assert (scarf.scenario_id, scarf.scenario_name, scarf.season) == (None, ALL_SCENARIOS_NAME, "winter")

    bag = records["Bag"]
    assert (bag.scenario_id, bag.scenario_name, bag.season) == (None, ALL_SCENARIOS_NAME, Season.ALL_SEASONS.value)
    assert all(r.scenario_frequency is None for r in records.values())


def test_default_targets_without_lifestyle():
    targets = accessory_subcategory_targets(2)
    assert targets["Bag"] == CategoryTarget(3, 4, 6)
    assert targets["Jewelry"] == CategoryTarget(0, 3, 999)
    assert targets["Socks"] == CategoryTarget(0, 3, 12)
    assert targets["Watch"] == CategoryTarget(0, 1, 3)


def test_indoor_lifestyle_targets():
    targets = accessory_subcategory_targets(30, INDOOR)
    assert targets["Bag"] == CategoryTarget(3, 4, 5)
    # ceil(30 * 0.4 * 0.8) = 10
    assert targets["Jewelry"].ideal == 10
    # socks are not scaled by lifestyle: ceil(30 * 0.3) = 9, capped at 8
    assert targets["Socks"].ideal == 8


def test_ideal_is_clamped():
    targets = accessory_subcategory_targets(200)
    assert targets["Jewelry"].ideal == 12
    assert targets["Hat"].ideal == 3
    assert all(t.min <= t.ideal <= t.max for t in targets.values())


def test_bag_styles_fold_into_bag():
    assert resolve_subcategory(_acc("b", "Backpack")) == "Bag"
    assert resolve_subcategory(_acc("b", "clutch")) == "Bag"
    assert resolve_subcategory(_acc("h", "hat")) == "Hat"


def test_unknown_subcategory_defaults_to_jewelry(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_subcategory(_acc("x", "Brooch holder")) == "Jewelry"
        assert resolve_subcategory(_acc("y", None)) == "Jewelry"
    assert len(caplog.records) == 2


def test_owned_accessories_improve_gap():
    items = [_acc("belt-1", "Belt")]
    belt = _by_sub(calculate_accessory_coverage("u1", "summer", items))["Belt"]
    assert belt.current_items == 1
    assert belt.gap_type == GapType.IMPROVEMENT
    assert belt.gap_count == 1
    assert belt.priority_level == 5
    assert belt.coverage_percent == 50


def test_jewelry_expansion_gap_stops_at_ideal_ceiling():
    items = [_acc(f"ring-{i}", "Jewelry") for i in range(5)]
    jewelry = _by_sub(calculate_accessory_coverage("u1", "summer", items))["Jewelry"]
    assert jewelry.needed_items_max == 999
    assert jewelry.gap_type == GapType.EXPANSION
    # ideal ceiling is 12
    assert jewelry.gap_count == 7

    hoard = [_acc(f"ring-{i}", "Jewelry") for i in range(40)]
    jewelry = _by_sub(calculate_accessory_coverage("u1", "summer", hoard))["Jewelry"]
    assert jewelry.gap_type == GapType.EXPANSION
    assert jewelry.gap_count == 1
