"""Static seed catalog wrapped into typed rows."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos_register.codec import MealKind, is_reserved_name
from pos_register.constant import (
    CATEGORY_META_BY_ID,
    INGREDIENT_META_BY_ID,
    MENU_META_BY_NAME,
    RECIPE_BY_MENU_NAME,
)

MEAL_CATEGORY_ID = 1
BASE_CATEGORY_ID = 2
ENTREE_CATEGORY_ID = 3


@dataclass(frozen=True)
class CategoryMeta:
    category_id: int
    name: str
    search_key: str | None = None


@dataclass(frozen=True)
class MenuSeed:
    """One menu item row of the seed catalog."""

    name: str
    category_id: int
    price_cents: int
    active: bool = True


@dataclass(frozen=True)
class IngredientSeed:
    ingredient_id: int
    name: str
    unit: str
    current_quantity: Decimal


def check_menu_name(name: str) -> None:
    """Reject names the meal codec would mistake for a composite meal."""
    if is_reserved_name(name):
        raise ValueError(f"Menu item name {name!r} collides with a meal label")


CATEGORIES: dict[int, CategoryMeta] = {
    category_id: CategoryMeta(
        category_id=category_id,
        name=str(meta["name"]),
        search_key=meta["search_key"],
    )
    for category_id, meta in CATEGORY_META_BY_ID.items()
}

MENU_SEED: list[MenuSeed] = [
    MenuSeed(
        name=name,
        category_id=int(meta["category_id"]),
        price_cents=int(meta["price_cents"]),
        active=bool(meta["active"]),
    )
    for name, meta in MENU_META_BY_NAME.items()
]

INGREDIENT_SEED: list[IngredientSeed] = [
    IngredientSeed(
        ingredient_id=ingredient_id,
        name=str(meta["name"]),
        unit=str(meta["unit"]),
        current_quantity=Decimal(str(meta["current_quantity"])),
    )
    for ingredient_id, meta in INGREDIENT_META_BY_ID.items()
]

RECIPE_SEED: dict[str, dict[int, Decimal]] = {
    name: {ingredient_id: Decimal(str(qty)) for ingredient_id, qty in rows.items()}
    for name, rows in RECIPE_BY_MENU_NAME.items()
}

SEARCH_CATEGORY_BY_KEY: dict[str, CategoryMeta] = {
    meta.search_key: meta for meta in CATEGORIES.values() if meta.search_key
}

MEAL_KIND_BY_KEY: dict[str, MealKind] = {
    "1": MealKind.BOWL,
    "2": MealKind.PLATE,
    "3": MealKind.BIGGER_PLATE,
}

for _seed in MENU_SEED:
    check_menu_name(_seed.name)
