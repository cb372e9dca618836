import pytest

from app.core.taxonomy import Season
from app.services.coverage.lifestyle import (
    LIFESTYLE_RULES,
    OUTDOOR_DEFAULT_RULE,
    LifestyleCache,
    describe_lifestyle,
    detect_lifestyle_type,
    get_lifestyle_multiplier,
    get_lifestyle_targets,
    get_outerwear_targets,
    scenario_fingerprint,
)
from app.services.coverage.types import CategoryTarget, LifestyleType, Scenario


def _scenarios(*names):
    return [Scenario(id=f"s{i}", name=name, frequency="2 times per week") for i, name in enumerate(names)]


def test_no_scenarios_defaults_outdoor_with_low_confidence():
    for empty in (None, []):
        analysis = detect_lifestyle_type(empty)
        assert analysis.type == LifestyleType.OUTDOOR_FOCUSED
        assert analysis.confidence == 0.5
        assert analysis.factors


def test_remote_work_wins_over_outdoor_triggers():
    analysis = detect_lifestyle_type(
        _scenarios("Office Work", "Driving kids to school", "Playground", "Remote Work", "Social Outings")
    )
    assert analysis.type == LifestyleType.INDOOR_FOCUSED
    assert analysis.confidence == 0.9
    assert analysis.factors == ["Works from home - minimal outerwear needs"]


def test_home_without_outdoor_is_indoor():
    analysis = detect_lifestyle_type(_scenarios("Staying at Home", "Housekeeping"))
    assert analysis.type == LifestyleType.INDOOR_FOCUSED
    assert "Home-focused" in analysis.factors[0]


def test_home_with_outdoor_activity_is_outdoor():
    analysis = detect_lifestyle_type(_scenarios("Staying at Home", "Playground visits"))
    assert analysis.type == LifestyleType.OUTDOOR_FOCUSED
    assert "playground activities" in analysis.factors[0]


def test_outdoor_reasons_are_listed():
    analysis = detect_lifestyle_type(_scenarios("OFFICE WORK", "Driving"))
    assert analysis.type == LifestyleType.OUTDOOR_FOCUSED
    factor = analysis.factors[0]
    assert "office commute" in factor
    assert "driving kids around" in factor
    assert "regular outdoor activities" in factor


def test_unclear_activities_default_outdoor():
    analysis = detect_lifestyle_type(_scenarios("Gym Sessions"))
    assert analysis.type == LifestyleType.OUTDOOR_FOCUSED
    assert analysis.confidence == 0.9
    assert analysis.factors == ["Mixed or unclear activities, defaulting to outdoor for safety"]


def test_rule_table_only_holds_indoor_rules():
    assert all(rule.lifestyle == LifestyleType.INDOOR_FOCUSED for rule in LIFESTYLE_RULES)
    assert OUTDOOR_DEFAULT_RULE.lifestyle == LifestyleType.OUTDOOR_FOCUSED
    analysis = detect_lifestyle_type(_scenarios("Book club"))
    assert analysis.factors == [OUTDOOR_DEFAULT_RULE.factor(["book club"])]


def test_fingerprint_ignores_order():
    a = [Scenario("1", "Office Work", "daily"), Scenario("2", "Gym", "2 times per week")]
    assert scenario_fingerprint(a) == scenario_fingerprint(list(reversed(a)))


def test_cache_holds_one_entry():
    cache = LifestyleCache()
    remote = _scenarios("Remote Work")
    office = _scenarios("Office Work")

    first = cache.get(remote)
    assert cache.get(remote) is first
    assert (cache.hits, cache.misses) == (1, 1)

    assert cache.get(office).type == LifestyleType.OUTDOOR_FOCUSED
    # previous entry was evicted
    cache.get(remote)
    assert cache.misses == 3


def test_cache_recomputes_when_frequency_changes():
    cache = LifestyleCache()
    cache.get([Scenario("1", "Remote Work", "daily")])
    cache.get([Scenario("1", "Remote Work", "2 times per week")])
    assert cache.misses == 2
    cache.clear()
    cache.get([Scenario("1", "Remote Work", "2 times per week")])
    assert cache.misses == 3


@pytest.mark.parametrize(
    "season,expected",
    [
        (Season.SUMMER, CategoryTarget(1, 2, 3)),
        (Season.WINTER, CategoryTarget(2, 3, 4)),
        (Season.TRANSITIONAL, CategoryTarget(3, 4, 5)),
        ("monsoon", CategoryTarget(2, 3, 4)),
    ],
)
def test_outdoor_outerwear_uses_base_table(season, expected):
    assert get_outerwear_targets(season, LifestyleType.OUTDOOR_FOCUSED) == expected


@pytest.mark.parametrize(
    "season,expected",
    [
        (Season.SUMMER, CategoryTarget(1, 1, 2)),
        (Season.WINTER, CategoryTarget(1, 2, 2)),
        (Season.TRANSITIONAL, CategoryTarget(2, 2, 3)),
    ],
)
def test_indoor_outerwear_is_scaled_down_with_floors(season, expected):
    assert get_outerwear_targets(season, LifestyleType.INDOOR_FOCUSED) == expected


def test_lifestyle_targets_share_minimum():
    indoor = get_lifestyle_targets("footwear", LifestyleType.INDOOR_FOCUSED)
    outdoor = get_lifestyle_targets("footwear", LifestyleType.OUTDOOR_FOCUSED)
    assert indoor == CategoryTarget(3, 4, 5)
    assert outdoor == CategoryTarget(3, 6, 8)
    assert get_lifestyle_targets("bags", LifestyleType.OUTDOOR_FOCUSED) == CategoryTarget(3, 5, 7)


def test_lifestyle_targets_reject_unknown_category():
    with pytest.raises(ValueError):
        get_lifestyle_targets("hats", LifestyleType.OUTDOOR_FOCUSED)


def test_accessory_multiplier():
    assert get_lifestyle_multiplier(LifestyleType.INDOOR_FOCUSED) == 0.8
    assert get_lifestyle_multiplier(LifestyleType.OUTDOOR_FOCUSED) == 1.0


def test_describe_lifestyle_reports_example_targets():
    described = describe_lifestyle(_scenarios("Remote Work"))
    assert described["analysis"].type == LifestyleType.INDOOR_FOCUSED
    assert described["example_targets"]["spring_fall_outerwear"].ideal == 2
    assert described["example_targets"]["bags"].ideal == 4
