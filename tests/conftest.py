"""Shared fixtures: in-memory stores built from the seed catalog, and SQLite databases under tmp_path."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from pos_register.codec import Meal, MealKind, SimpleItem
from pos_register.data import INGREDIENT_SEED, MENU_SEED, RECIPE_SEED
from pos_register.ledger import OrderLedger
from pos_register.memory import InMemoryCatalogStore, InMemoryInventoryStore, StockRow
from pos_register.models import MenuComponent, OrderSnapshot, RecipeEntry, money
from pos_register.persistence import bootstrap_schema, seed_catalog

RICE = 1
CHICKEN = 2
SPRING_ROLL = 12

SCENARIO_MEAL = Meal(MealKind.BOWL, "Fried Rice", ("Orange Chicken",))
SCENARIO_ROLL = SimpleItem("Veggie Spring Roll")


def build_catalog() -> InMemoryCatalogStore:
    components = [
        MenuComponent(
            id=idx,
            name=seed.name,
            unit_price=money(Decimal(seed.price_cents) / 100),
            category_id=seed.category_id,
            active=seed.active,
        )
        for idx, seed in enumerate(MENU_SEED, start=1)
    ]
    ids = {component.name: component.id for component in components}
    ingredients = {row.ingredient_id: row for row in INGREDIENT_SEED}
    recipes = [
        RecipeEntry(
            menu_component_id=ids[name],
            ingredient_id=ingredient_id,
            quantity_per_unit=qty,
            ingredient_name=ingredients[ingredient_id].name,
            unit=ingredients[ingredient_id].unit,
        )
        for name, rows in RECIPE_SEED.items()
        for ingredient_id, qty in rows.items()
    ]
    return InMemoryCatalogStore(components, recipes)


def build_inventory(**overrides: Decimal) -> InMemoryInventoryStore:
    """Seed stock; ``overrides`` maps ``"i<ingredient_id>"`` to a quantity."""
    rows = []
    for seed in INGREDIENT_SEED:
        quantity = overrides.get(f"i{seed.ingredient_id}", seed.current_quantity)
        rows.append(StockRow(seed.ingredient_id, seed.name, seed.unit, Decimal(quantity)))
    return InMemoryInventoryStore(rows)


def scenario_snapshot() -> OrderSnapshot:
    ledger = OrderLedger()
    ledger.add_selection(SCENARIO_MEAL, Decimal("7.50"))
    ledger.add_selection(SCENARIO_ROLL, Decimal("2.00"))
    ledger.add_selection(SCENARIO_ROLL, Decimal("2.00"))
    return ledger.snapshot()


@pytest.fixture
def catalog() -> InMemoryCatalogStore:
    return build_catalog()


@pytest.fixture
def inventory() -> InMemoryInventoryStore:
    return build_inventory()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "register.db"
    bootstrap_schema(path)
    seed_catalog(path)
    return path
