"""Unit tests for the settlement coordinator against the in-memory stores."""

from decimal import Decimal

import pytest

from conftest import CHICKEN, RICE, SPRING_ROLL, build_inventory, scenario_snapshot
from pos_register.codec import Meal, MealKind, SimpleItem
from pos_register.errors import (
    EmptyOrder,
    InsufficientStock,
    NotFound,
    SettlementFailure,
    TransactionFailure,
    UnresolvedComponent,
)
from pos_register.ledger import OrderLedger
from pos_register.memory import InMemoryCatalogStore, InMemoryInventoryStore
from pos_register.settlement import (
    Settlement,
    SettlementPolicy,
    SettlementState,
    UnresolvedPolicy,
    settle,
)

SKIP = SettlementPolicy(unresolved=UnresolvedPolicy.SKIP_AND_WARN)


class FlakyInventoryStore(InMemoryInventoryStore):
    """Fails the ``fail_on``-th ``apply_delta`` call."""

    def __init__(self, rows, fail_on: int, error: Exception | None = None) -> None:
        super().__init__(rows)
        self.fail_on = fail_on
        self.error = error or TransactionFailure("connection lost")
        self.calls = 0

    def apply_delta(self, ingredient_id: int, delta: Decimal) -> Decimal:
        self.calls += 1
        if self.calls == self.fail_on:
            raise self.error
        return super().apply_delta(ingredient_id, delta)


def flaky_inventory(fail_on: int, error: Exception | None = None) -> FlakyInventoryStore:
    seeded = build_inventory()
    return FlakyInventoryStore(seeded._rows.values(), fail_on, error)


def snapshot_with_unknown_entree():
    ledger = OrderLedger()
    ledger.add_selection(Meal(MealKind.BOWL, "Fried Rice", ("Mystery Chicken",)), Decimal("7.50"))
    ledger.add_selection(SimpleItem("Veggie Spring Roll"), Decimal("2.00"))
    return ledger.snapshot()


def levels(inventory: InMemoryInventoryStore) -> dict[int, Decimal]:
    return {ingredient_id: inventory.quantity(ingredient_id) for ingredient_id in (RICE, CHICKEN, SPRING_ROLL)}


class TestScenario:
    """Bowl plus two spring rolls, settled end to end."""

    def test_report_and_deductions(self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore) -> None:
        snapshot = scenario_snapshot()
        assert snapshot.total == Decimal("11.50")

        report = settle(snapshot, catalog, inventory)

        assert [(u.ingredient_id, u.total_quantity) for u in report.usages] == [
            (RICE, Decimal("4")),
            (CHICKEN, Decimal("3")),
            (SPRING_ROLL, Decimal("2")),
        ]
        assert report.total == Decimal("11.50")
        assert report.as_text() == (
            "Inventory items used:\n"
            "- Rice: 4.00 oz\n"
            "- Chicken: 3.00 oz\n"
            "- Spring Roll Stock: 2.00 units\n"
            "\n"
            "Total Paid: $11.50"
        )
        assert levels(inventory) == {RICE: Decimal("1596"), CHICKEN: Decimal("1197"), SPRING_ROLL: Decimal("148")}

    def test_order_is_recorded_with_commit(
        self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore
    ) -> None:
        report = settle(scenario_snapshot(), catalog, inventory)

        assert report.order_id == 1
        assert len(inventory.orders) == 1
        assert inventory.orders[0].total == Decimal("11.50")
        assert not inventory.in_transaction

    def test_state_walks_to_committed(self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore) -> None:
        settlement = Settlement(catalog, inventory)
        assert settlement.state is SettlementState.IDLE

        settlement.run(scenario_snapshot())

        assert settlement.state is SettlementState.COMMITTED

    def test_settlement_cannot_run_twice(
        self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore
    ) -> None:
        settlement = Settlement(catalog, inventory)
        settlement.run(scenario_snapshot())

        with pytest.raises(RuntimeError):
            settlement.run(scenario_snapshot())
        assert len(inventory.orders) == 1


class TestUnresolvedPolicy:
    """Unknown components either abort or are skipped, never silently by default."""

    def test_fail_fast_aborts_without_changes(
        self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore
    ) -> None:
        before = levels(inventory)
        settlement = Settlement(catalog, inventory)

        with pytest.raises(UnresolvedComponent) as exc_info:
            settlement.run(snapshot_with_unknown_entree())

        assert exc_info.value.name == "Mystery Chicken"
        assert isinstance(exc_info.value, NotFound)
        assert isinstance(exc_info.value, SettlementFailure)
        assert settlement.state is SettlementState.ROLLED_BACK
        assert levels(inventory) == before
        assert inventory.orders == []

    def test_skip_and_warn_settles_the_rest(
        self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore
    ) -> None:
        report = Settlement(catalog, inventory, SKIP).run(snapshot_with_unknown_entree())

        assert report.skipped == ("Mystery Chicken",)
        assert [(u.ingredient_id, u.total_quantity) for u in report.usages] == [
            (RICE, Decimal("4")),
            (SPRING_ROLL, Decimal("1")),
        ]
        assert levels(inventory)[CHICKEN] == Decimal("1200")
        assert "Not deducted (unknown items): Mystery Chicken" in report.as_text()
        assert report.as_text().endswith("Total Paid: $9.50")


class TestFloorCheck:
    """Stock may not go below zero unless explicitly allowed."""

    def test_insufficient_stock_rolls_back_everything(self, catalog: InMemoryCatalogStore) -> None:
        inventory = build_inventory(i2=Decimal("2.5"))
        before = levels(inventory)

        with pytest.raises(InsufficientStock) as exc_info:
            settle(scenario_snapshot(), catalog, inventory)

        assert exc_info.value.ingredient_id == CHICKEN
        assert exc_info.value.on_hand == Decimal("2.5")
        assert exc_info.value.required == Decimal("3")
        assert levels(inventory) == before
        assert inventory.orders == []

    def test_exact_stock_reaches_zero(self, catalog: InMemoryCatalogStore) -> None:
        inventory = build_inventory(i2=Decimal("3"))

        settle(scenario_snapshot(), catalog, inventory)

        assert inventory.quantity(CHICKEN) == Decimal("0")

    def test_negative_stock_allowed_when_configured(self, catalog: InMemoryCatalogStore) -> None:
        inventory = build_inventory(i12=Decimal("1"))
        policy = SettlementPolicy(allow_negative_stock=True)

        settle(scenario_snapshot(), catalog, inventory, policy)

        assert inventory.quantity(SPRING_ROLL) == Decimal("-1")


class TestAtomicity:
    """A failure part way through leaves every quantity untouched."""

    @pytest.mark.parametrize("fail_on", [1, 2, 3])
    def test_store_failure_on_nth_delta(self, catalog: InMemoryCatalogStore, fail_on: int) -> None:
        inventory = flaky_inventory(fail_on)
        before = levels(inventory)
        settlement = Settlement(catalog, inventory)

        with pytest.raises(TransactionFailure):
            settlement.run(scenario_snapshot())

        assert settlement.state is SettlementState.ROLLED_BACK
        assert levels(inventory) == before
        assert not inventory.in_transaction
        assert inventory.orders == []

    def test_unexpected_error_surfaces_as_transaction_failure(self, catalog: InMemoryCatalogStore) -> None:
        inventory = flaky_inventory(2, RuntimeError("disk on fire"))
        before = levels(inventory)

        with pytest.raises(TransactionFailure) as exc_info:
            settle(scenario_snapshot(), catalog, inventory)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert levels(inventory) == before

    def test_unexpected_begin_error_surfaces_as_transaction_failure(self, catalog: InMemoryCatalogStore) -> None:
        class UnreachableInventoryStore(InMemoryInventoryStore):
            def begin_transaction(self) -> None:
                raise OSError("read-only file system")

        inventory = UnreachableInventoryStore(build_inventory()._rows.values())
        settlement = Settlement(catalog, inventory)

        with pytest.raises(TransactionFailure) as exc_info:
            settlement.run(scenario_snapshot())

        assert isinstance(exc_info.value.__cause__, OSError)
        assert settlement.state is SettlementState.ROLLED_BACK
        assert inventory.orders == []

    def test_begin_failure_leaves_state_rolled_back(
        self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore
    ) -> None:
        inventory.begin_transaction()
        settlement = Settlement(catalog, inventory)

        with pytest.raises(TransactionFailure):
            settlement.run(scenario_snapshot())

        assert settlement.state is SettlementState.ROLLED_BACK


class TestEmptyOrder:
    def test_empty_snapshot_is_refused(self, catalog: InMemoryCatalogStore, inventory: InMemoryInventoryStore) -> None:
        settlement = Settlement(catalog, inventory)

        with pytest.raises(EmptyOrder):
            settlement.run(OrderLedger().snapshot())

        assert settlement.state is SettlementState.IDLE
        assert not inventory.in_transaction
