import pytest

from places.categories import (
    CATEGORY_FILTERS,
    CATEGORY_LABELS,
    DEFAULT_CATEGORY,
    PlaceCategory,
    category_filter,
    resolve_category,
)


@pytest.mark.parametrize(
    "category,expected",
    [
        ("police", '["amenity"="police"]'),
        ("coffee", '["amenity"="cafe"]'),
        ("mall", '["shop"="mall"]'),
        ("bank", '["amenity"="bank"]'),
        ("library", '["amenity"="library"]'),
        ("restaurant", '["amenity"="restaurant"]'),
        ("fastfood", '["amenity"="fast_food"]'),
    ],
)
def test_known_categories(category, expected):
    assert category_filter(category) == expected


@pytest.mark.parametrize("category", ["", "museum", "Coffee", "zoo "])
def test_unknown_category_falls_back_to_cafe(category):
    assert resolve_category(category) is DEFAULT_CATEGORY
    assert category_filter(category) == '["amenity"="cafe"]'


def test_default_is_coffee():
    assert DEFAULT_CATEGORY is PlaceCategory.COFFEE


def test_every_category_has_filter_and_label():
    for category in PlaceCategory:
        assert category in CATEGORY_FILTERS
        assert category in CATEGORY_LABELS
        assert resolve_category(category.value) is category
