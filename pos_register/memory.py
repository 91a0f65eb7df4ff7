"""In-memory catalog and inventory stores.

Dictionary-backed implementations of :class:`~pos_register.stores.CatalogStore`
and :class:`~pos_register.stores.InventoryStore` for tests and demos. Not
thread-safe; data is lost when the process exits.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from pos_register.data import BASE_CATEGORY_ID, ENTREE_CATEGORY_ID
from pos_register.errors import TransactionFailure
from pos_register.models import MenuComponent, OrderSnapshot, RecipeEntry


@dataclass
class StockRow:
    ingredient_id: int
    name: str
    unit: str
    current_quantity: Decimal


class InMemoryCatalogStore:
    """Catalog backed by a list of menu items and a list of recipe rows."""

    def __init__(self, components: Iterable[MenuComponent], recipes: Iterable[RecipeEntry] = ()) -> None:
        self._by_name: dict[str, MenuComponent] = {component.name: component for component in components}
        self._recipes: dict[int, list[RecipeEntry]] = {}
        for entry in recipes:
            self._recipes.setdefault(entry.menu_component_id, []).append(entry)

    def find_menu_component(self, name: str) -> MenuComponent | None:
        return self._by_name.get(name)

    def list_category(self, category_id: int) -> list[MenuComponent]:
        items = [c for c in self._by_name.values() if c.category_id == category_id and c.active]
        return sorted(items, key=lambda c: c.name)

    def list_entrees(self) -> list[MenuComponent]:
        return self.list_category(ENTREE_CATEGORY_ID)

    def list_bases(self) -> list[MenuComponent]:
        return self.list_category(BASE_CATEGORY_ID)

    def recipe_for(self, menu_component_id: int) -> list[RecipeEntry]:
        return list(self._recipes.get(menu_component_id, []))


class InMemoryInventoryStore:
    """Inventory whose transactions work on a private copy of the stock rows.

    ``commit`` swaps the copy in; ``rollback`` drops it, so nothing applied
    inside a transaction is visible to readers until it commits.
    """

    def __init__(self, rows: Iterable[StockRow]) -> None:
        self._rows: dict[int, StockRow] = {row.ingredient_id: row for row in rows}
        self._pending: dict[int, StockRow] | None = None
        self._pending_orders: list[OrderSnapshot] = []
        self.orders: list[OrderSnapshot] = []

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    def quantity(self, ingredient_id: int) -> Decimal:
        """Committed quantity, as an outside reader would see it."""
        return self._rows[ingredient_id].current_quantity

    def _require_transaction(self) -> dict[int, StockRow]:
        if self._pending is None:
            raise TransactionFailure("No open inventory transaction")
        return self._pending

    def begin_transaction(self) -> None:
        if self._pending is not None:
            raise TransactionFailure("Inventory transaction already open")
        self._pending = deepcopy(self._rows)
        self._pending_orders = []

    def quantity_on_hand(self, ingredient_id: int) -> Decimal:
        row = self._require_transaction().get(ingredient_id)
        if row is None:
            raise TransactionFailure(f"Ingredient {ingredient_id} not found")
        return row.current_quantity

    def apply_delta(self, ingredient_id: int, delta: Decimal) -> Decimal:
        row = self._require_transaction().get(ingredient_id)
        if row is None:
            raise TransactionFailure(f"Ingredient {ingredient_id} not found")
        row.current_quantity += delta
        return row.current_quantity

    def record_order(self, snapshot: OrderSnapshot) -> int | None:
        self._require_transaction()
        self._pending_orders.append(snapshot)
        return len(self.orders) + len(self._pending_orders)

    def commit(self) -> None:
        self._rows = self._require_transaction()
        self.orders.extend(self._pending_orders)
        self._pending = None
        self._pending_orders = []

    def rollback(self) -> None:
        self._pending = None
        self._pending_orders = []
