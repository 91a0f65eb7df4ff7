"""Store contracts the register core talks to.

Two implementations ship with the package: :mod:`pos_register.persistence`
(SQLite) and :mod:`pos_register.memory` (dictionaries, used by the tests).
Every component receives its store handle explicitly.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from pos_register.models import MenuComponent, OrderSnapshot, RecipeEntry


class CatalogStore(Protocol):
    """Read-only menu items and recipes."""

    def find_menu_component(self, name: str) -> MenuComponent | None:
        """Return the menu item with exactly this name, or ``None``."""
        ...

    def list_entrees(self) -> list[MenuComponent]:
        """Active entrees ordered by name, for the meal wizard."""
        ...

    def list_bases(self) -> list[MenuComponent]:
        """Active bases (sides) ordered by name, for the meal wizard."""
        ...

    def list_category(self, category_id: int) -> list[MenuComponent]:
        """Active items of one category ordered by name."""
        ...

    def recipe_for(self, menu_component_id: int) -> list[RecipeEntry]:
        """Every recipe row of a menu item."""
        ...


class InventoryStore(Protocol):
    """Mutable ingredient stock, changed only inside a transaction.

    ``apply_delta``, ``quantity_on_hand`` and ``record_order`` must only be
    called between ``begin_transaction`` and ``commit``/``rollback``. A
    missing ingredient row raises :class:`~pos_register.errors.TransactionFailure`.
    """

    def begin_transaction(self) -> None:
        ...

    def quantity_on_hand(self, ingredient_id: int) -> Decimal:
        ...

    def apply_delta(self, ingredient_id: int, delta: Decimal) -> Decimal:
        """Add ``delta`` to the stock row and return the new quantity."""
        ...

    def record_order(self, snapshot: OrderSnapshot) -> int | None:
        """Persist the paid order and return its ticket id."""
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
