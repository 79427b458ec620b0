from dinostats.models.dino import Dino
from dinostats.services.query_service import (
    filter_by_category,
    filter_by_name,
    filter_by_stat,
    find,
)


def _dinos():
    return {
        "Rex": Dino(
            name="Rex",
            url="https://x/rex",
            stats={"Core": {"Speed": "5,6,7,8,9", "HealthPoints": "100"}, "Combat": {"Bite": "40"}},
        ),
        "Trike": Dino(
            name="Trike",
            url="https://x/trike",
            stats={"Core": {"HealthPoints": "120"}, "Multiplier": {"SpeedMul": "1.1"}},
        ),
        "Stegosaurus": Dino(name="Stegosaurus", url="", stats={"Combat": {"Tail Swipe": "30"}}),
    }


def test_filter_by_name_is_case_insensitive_substring():
    out = filter_by_name("REX", _dinos())
    assert list(out) == ["Rex"]
    assert out["Rex"].stats["Combat"] == {"Bite": "40"}


def test_filter_by_name_empty_matches_all():
    assert set(filter_by_name("", _dinos())) == {"Rex", "Trike", "Stegosaurus"}


def test_filter_by_stat_keeps_only_matches():
    out = filter_by_stat("speed", _dinos())
    assert out["Rex"].stats == {"Core": {"Speed": "5,6,7,8,9"}}
    assert out["Trike"].stats == {"Multiplier": {"SpeedMul": "1.1"}}
    assert "Stegosaurus" not in out


def test_filter_by_stat_matches_category_prefix():
    out = filter_by_stat("core.health", _dinos())
    assert set(out) == {"Rex", "Trike"}
    assert out["Rex"].stats == {"Core": {"HealthPoints": "100"}}


def test_filter_by_stat_no_match_is_empty():
    store = {"Rex": Dino(name="Rex", url="", stats={"Core": {"Speed": "5,6,7,8,9"}})}
    assert filter_by_stat("nomatch", store) == {}
    assert filter_by_stat("speed", store)["Rex"].stats == {"Core": {"Speed": "5,6,7,8,9"}}


def test_filter_by_stat_is_idempotent():
    once = filter_by_stat("speed", _dinos())
    assert filter_by_stat("speed", once) == once


def test_name_and_stat_filters_commute():
    d = _dinos()
    assert filter_by_stat("health", filter_by_name("r", d)) == filter_by_name("r", filter_by_stat("health", d))


def test_filter_by_category_empty_is_identity():
    d = _dinos()
    assert filter_by_category([], d) == d
    assert filter_by_category(set(), d) == d


def test_filter_by_category_drops_other_categories():
    out = filter_by_category({"Core"}, _dinos())
    assert out["Rex"].stats == {"Core": {"Speed": "5,6,7,8,9", "HealthPoints": "100"}}
    assert out["Stegosaurus"].stats == {}


def test_filters_do_not_mutate_input():
    d = _dinos()
    filter_by_stat("speed", d)
    filter_by_category(["Combat"], d)
    assert d == _dinos()


def test_find_applies_name_stat_category_in_order():
    out = find(_dinos(), "r", "health", ["Core"])
    assert set(out) == {"Rex", "Trike"}
    assert out["Trike"].stats == {"Core": {"HealthPoints": "120"}}
    out = find(_dinos(), "r", None, ["Multiplier"])
    assert out["Rex"].stats == {}
    assert out["Trike"].stats == {"Multiplier": {"SpeedMul": "1.1"}}
