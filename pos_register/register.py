"""The register facade the presentation layer drives."""

from __future__ import annotations

from typing import Iterable, Union

import structlog

from pos_register.codec import Meal, MealKind, Selection, SimpleItem, parse
from pos_register.data import MEAL_CATEGORY_ID
from pos_register.errors import InvalidSelection, NotFound
from pos_register.ledger import OrderLedger
from pos_register.models import OrderLine, OrderSnapshot, SettlementReport
from pos_register.settlement import Settlement, SettlementPolicy
from pos_register.stores import CatalogStore, InventoryStore

logger = structlog.get_logger(__name__)

LineRef = Union[Selection, str]


class Register:
    """One terminal session: an order ledger plus explicit store handles.

    Selections are priced from the catalog when they are rung up. Paying runs
    a fresh :class:`~pos_register.settlement.Settlement`; the order is only
    cleared once it commits, so a failed payment can be retried or cancelled.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        inventory: InventoryStore,
        policy: SettlementPolicy | None = None,
    ) -> None:
        self.catalog = catalog
        self.inventory = inventory
        self.policy = policy or SettlementPolicy()
        self.ledger = OrderLedger()

    @property
    def order(self) -> OrderSnapshot:
        return self.ledger.snapshot()

    def select_meal(self, kind: MealKind, base: str, entrees: Iterable[str]) -> OrderLine:
        meal = Meal(kind, base, tuple(entrees))
        bases = {component.name for component in self.catalog.list_bases()}
        if meal.base not in bases:
            raise InvalidSelection(f"{meal.base!r} is not an available base")
        available = {component.name for component in self.catalog.list_entrees()}
        for entree in meal.entrees:
            if entree not in available:
                raise InvalidSelection(f"{entree!r} is not an available entree")

        priced = self.catalog.find_menu_component(kind.label)
        if priced is None:
            raise NotFound(f"No price for {kind.label!r} in the catalog")
        line = self.ledger.add_selection(meal, priced.unit_price)
        logger.info("meal_selected", line=line.display_name, quantity=line.quantity, total=str(self.ledger.total))
        return line

    def select_simple_item(self, name: str) -> OrderLine:
        component = self.catalog.find_menu_component(name)
        if component is None or not component.active:
            raise NotFound(f"{name!r} is not on the menu")
        if component.category_id == MEAL_CATEGORY_ID:
            raise InvalidSelection(f"{name!r} needs a base and entrees; ring it up as a meal")
        line = self.ledger.add_selection(SimpleItem(component.name), component.unit_price)
        logger.info("item_selected", line=line.display_name, quantity=line.quantity, total=str(self.ledger.total))
        return line

    def remove_one_unit(self, target: LineRef) -> OrderSnapshot:
        """Take one unit off a line, given its selection or its display name."""
        if isinstance(target, str):
            try:
                target = parse(target)
            except InvalidSelection:
                raise NotFound(f"{target!r} is not on the order") from None
        self.ledger.remove_one(target)
        logger.info("unit_removed", line=target.display_name, total=str(self.ledger.total))
        return self.ledger.snapshot()

    def cancel_order(self) -> OrderSnapshot:
        self.ledger.clear()
        logger.info("order_cancelled")
        return self.ledger.snapshot()

    def settle(self) -> SettlementReport:
        """Pay for the current order; raises a ``SettlementFailure`` and keeps the order on failure."""
        report = Settlement(self.catalog, self.inventory, self.policy).run(self.ledger.snapshot())
        self.ledger.clear()
        return report
