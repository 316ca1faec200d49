import pytest

from src.domain.levels import expand_level
from src.domain.records import SupportLevel


GOLD = SupportLevel(id="l-gold", name="Gold", level=1)
SILVER = SupportLevel(id="l-silver", name="Silver", level=2)
BRONZE = SupportLevel(id="l-bronze", name="Bronze", level=3)
BASIC = SupportLevel(id="l-basic", name="Basic", level=5)

# Deliberately out of order.
CATALOG = [BRONZE, GOLD, BASIC, SILVER]


def test_expand_lowest_level_includes_every_higher_level_in_order():
    assert expand_level(GOLD, CATALOG) == [GOLD, SILVER, BRONZE, BASIC]


def test_expand_highest_level_is_just_itself():
    assert expand_level(BASIC, CATALOG) == [BASIC]


@pytest.mark.parametrize("selected", CATALOG, ids=lambda level: level.name)
def test_expand_contains_selected_then_strictly_higher_levels(selected):
    expanded = expand_level(selected, CATALOG)

    assert expanded[0] == selected
    tail = expanded[1:]
    assert all(level.level > selected.level for level in tail)
    assert [level.level for level in tail] == sorted(level.level for level in tail)
    assert {level.id for level in tail} == {level.id for level in CATALOG if level.level > selected.level}
    assert len({level.id for level in expanded}) == len(expanded)


def test_expand_none_is_empty():
    assert expand_level(None, CATALOG) == []


def test_expand_level_without_ordering_value_is_empty():
    unordered = SupportLevel(id="l-x", name="Unranked", level=None)
    assert expand_level(unordered, CATALOG) == []


def test_expand_ignores_catalog_entries_without_ordering_value():
    catalog = CATALOG + [SupportLevel(id="l-x", name="Unranked", level=None)]
    assert expand_level(BRONZE, catalog) == [BRONZE, BASIC]


def test_expand_does_not_repeat_levels():
    duplicate_basic = SupportLevel(id="l-basic", name="Basic", level=5)
    assert expand_level(BRONZE, CATALOG + [duplicate_basic]) == [BRONZE, BASIC]


def test_expand_selected_level_missing_from_catalog_still_fans_out():
    platinum = SupportLevel(id="l-platinum", name="Platinum", level=0)
    assert expand_level(platinum, CATALOG) == [platinum, GOLD, SILVER, BRONZE, BASIC]
