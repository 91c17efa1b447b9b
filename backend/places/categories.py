import enum


class PlaceCategory(str, enum.Enum):
    POLICE = "police"
    COFFEE = "coffee"
    MALL = "mall"
    BANK = "bank"
    LIBRARY = "library"
    RESTAURANT = "restaurant"
    FASTFOOD = "fastfood"


DEFAULT_CATEGORY = PlaceCategory.COFFEE

# Overpass QL tag filters, one per category.
CATEGORY_FILTERS: dict[PlaceCategory, str] = {
    PlaceCategory.POLICE: '["amenity"="police"]',
    PlaceCategory.COFFEE: '["amenity"="cafe"]',
    PlaceCategory.MALL: '["shop"="mall"]',
    PlaceCategory.BANK: '["amenity"="bank"]',
    PlaceCategory.LIBRARY: '["amenity"="library"]',
    PlaceCategory.RESTAURANT: '["amenity"="restaurant"]',
    PlaceCategory.FASTFOOD: '["amenity"="fast_food"]',
}

CATEGORY_LABELS: dict[PlaceCategory, str] = {
    PlaceCategory.POLICE: "Police Station",
    PlaceCategory.COFFEE: "Coffee Shop",
    PlaceCategory.MALL: "Shopping Mall",
    PlaceCategory.BANK: "Bank Lobby",
    PlaceCategory.LIBRARY: "Library",
    PlaceCategory.RESTAURANT: "Restaurant",
    PlaceCategory.FASTFOOD: "Fast Food",
}


def resolve_category(category: str) -> PlaceCategory:
    """Map a caller-supplied string to a category, falling back to the default."""
    match category:
        case PlaceCategory.POLICE.value:
            return PlaceCategory.POLICE
        case PlaceCategory.COFFEE.value:
            return PlaceCategory.COFFEE
        case PlaceCategory.MALL.value:
            return PlaceCategory.MALL
        case PlaceCategory.BANK.value:
            return PlaceCategory.BANK
        case PlaceCategory.LIBRARY.value:
            return PlaceCategory.LIBRARY
        case PlaceCategory.RESTAURANT.value:
            return PlaceCategory.RESTAURANT
        case PlaceCategory.FASTFOOD.value:
            return PlaceCategory.FASTFOOD
        case _:
            return DEFAULT_CATEGORY


def category_filter(category: str) -> str:
    """Overpass tag filter for any category string. Never raises."""
    return CATEGORY_FILTERS[resolve_category(category)]
