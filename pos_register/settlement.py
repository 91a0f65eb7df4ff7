"""All-or-nothing settlement of one order against the inventory store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog
from structlog.typing import FilteringBoundLogger

from pos_register.errors import (
    ComponentNotFound,
    EmptyOrder,
    InsufficientStock,
    SettlementFailure,
    TransactionFailure,
    UnresolvedComponent,
)
from pos_register.models import IngredientUsage, OrderSnapshot, SettlementReport
from pos_register.recipes import RecipeResolver
from pos_register.stores import CatalogStore, InventoryStore
from pos_register.usage import UsageAggregator

logger = structlog.get_logger(__name__)


class UnresolvedPolicy(Enum):
    """What to do with an order component the catalog does not know."""

    SKIP_AND_WARN = "skip_and_warn"
    FAIL_FAST = "fail_fast"


class SettlementState(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class SettlementPolicy:
    unresolved: UnresolvedPolicy = UnresolvedPolicy.FAIL_FAST
    allow_negative_stock: bool = False


class Settlement:
    """One pay attempt: ``IDLE -> IN_PROGRESS -> COMMITTED | ROLLED_BACK``.

    Inside a single inventory transaction the coordinator expands every order
    line into its components, resolves each component's recipe, folds the
    consumption into per-ingredient totals and applies them as negative
    deltas. Any failure rolls back every delta already applied and is raised
    as a :class:`~pos_register.errors.SettlementFailure`.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        inventory: InventoryStore,
        policy: SettlementPolicy | None = None,
    ) -> None:
        self.resolver = RecipeResolver(catalog)
        self.inventory = inventory
        self.policy = policy or SettlementPolicy()
        self.state = SettlementState.IDLE
        self.skipped: list[str] = []

    def run(self, snapshot: OrderSnapshot) -> SettlementReport:
        if self.state is not SettlementState.IDLE:
            raise RuntimeError(f"Settlement already {self.state.value}")
        if snapshot.is_empty:
            raise EmptyOrder("Nothing to settle")

        log = logger.bind(lines=len(snapshot.lines), total=str(snapshot.total))
        try:
            self.inventory.begin_transaction()
        except SettlementFailure as exc:
            self.state = SettlementState.ROLLED_BACK
            log.error("settlement_begin_failed", error=repr(exc))
            raise
        except Exception as exc:
            self.state = SettlementState.ROLLED_BACK
            log.error("settlement_begin_failed", error=repr(exc))
            raise TransactionFailure(f"Could not open inventory transaction: {exc}") from exc

        self.state = SettlementState.IN_PROGRESS
        log.info("settlement_started")
        try:
            usages = self._aggregate(snapshot)
            for usage in usages:
                self._deduct(usage)
            order_id = self.inventory.record_order(snapshot)
            self.inventory.commit()
        except SettlementFailure as exc:
            self._rollback(log, exc)
            raise
        except Exception as exc:
            self._rollback(log, exc)
            raise TransactionFailure(f"Settlement aborted: {exc}") from exc

        self.state = SettlementState.COMMITTED
        log.info("settlement_committed", order_id=order_id, ingredients=len(usages), skipped=len(self.skipped))
        return SettlementReport(
            order_id=order_id,
            usages=usages,
            total=snapshot.total,
            skipped=tuple(self.skipped),
        )

    def _aggregate(self, snapshot: OrderSnapshot) -> tuple[IngredientUsage, ...]:
        aggregator = UsageAggregator()
        for line in snapshot.lines:
            for name in line.selection.components():
                try:
                    resolved = self.resolver.resolve(name)
                except ComponentNotFound:
                    if self.policy.unresolved is UnresolvedPolicy.FAIL_FAST:
                        raise UnresolvedComponent(name) from None
                    logger.warning("settlement_component_skipped", component=name, line=line.display_name)
                    self.skipped.append(name)
                    continue
                aggregator.add(resolved.entries, line.quantity)
        return aggregator.usages()

    def _deduct(self, usage: IngredientUsage) -> None:
        if not self.policy.allow_negative_stock:
            on_hand = self.inventory.quantity_on_hand(usage.ingredient_id)
            if on_hand - usage.total_quantity < 0:
                raise InsufficientStock(usage.ingredient_id, usage.name, on_hand, usage.total_quantity)
        self.inventory.apply_delta(usage.ingredient_id, -usage.total_quantity)

    def _rollback(self, log: FilteringBoundLogger, exc: BaseException) -> None:
        self.state = SettlementState.ROLLED_BACK
        try:
            self.inventory.rollback()
        except TransactionFailure as rollback_exc:
            log.error("settlement_rollback_failed", error=repr(rollback_exc))
        log.warning("settlement_rolled_back", error=repr(exc))


def settle(
    snapshot: OrderSnapshot,
    catalog: CatalogStore,
    inventory: InventoryStore,
    policy: SettlementPolicy | None = None,
) -> SettlementReport:
    """Run a fresh :class:`Settlement` for ``snapshot``."""
    return Settlement(catalog, inventory, policy).run(snapshot)
