"""Drive the terminal app with Textual's pilot."""

import asyncio
from contextlib import closing
from decimal import Decimal
from pathlib import Path

import pytest

from conftest import SPRING_ROLL
from pos_register import register_app
from pos_register.codec import Meal, MealKind, SimpleItem
from pos_register.errors import TransactionFailure
from pos_register.meal_modal import MealModal
from pos_register.persistence import SqliteCatalogStore, SqliteInventoryStore, connect, inventory_levels
from pos_register.register import Register
from pos_register.register_app import RegisterApp
from pos_register.report_modal import ReportModal


@pytest.fixture
def app(db_path: Path, monkeypatch: pytest.MonkeyPatch) -> RegisterApp:
    monkeypatch.setattr(register_app, "check_printer_dependencies", lambda: (False, "Printer unavailable: test"))
    register = Register(SqliteCatalogStore(db_path), SqliteInventoryStore(db_path))
    return RegisterApp(register, db_path)


def test_ring_up_and_pay(app: RegisterApp, db_path: Path) -> None:
    async def scenario() -> None:
        async with app.run_test() as pilot:
            # Bowl: bases are listed by name, so Fried Rice is second and Orange Chicken fifth.
            await pilot.press("1")
            assert isinstance(app.screen, MealModal)
            await pilot.press("j", "enter")
            await pilot.press("j", "j", "j", "j", "enter")
            await pilot.pause()

            await pilot.press("a", "v", "e", "g", "enter", "enter")
            app.action_cancel_active_mode()
            await pilot.pause()

            order = app.register.order
            assert order.line_for(Meal(MealKind.BOWL, "Fried Rice", ("Orange Chicken",))) is not None
            assert order.line_for(SimpleItem("Veggie Spring Roll")).quantity == 2
            assert order.total == Decimal("11.50")

            await pilot.press("ctrl+s")
            await pilot.pause()

            assert isinstance(app.screen, ReportModal)
            assert app.screen.title_text == "Payment complete"
            assert app.screen.body_text.plain.endswith("Total Paid: $11.50")
            assert app.register.order.is_empty

    asyncio.run(scenario())

    assert inventory_levels(db_path)[SPRING_ROLL] == Decimal("148")
    with closing(connect(db_path)) as conn:
        statuses = [row["status"] for row in conn.execute("SELECT status FROM orders")]
    assert statuses == ["PRINT_SKIPPED"]


def test_escape_cancels_meal_wizard(app: RegisterApp) -> None:
    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("2", "enter", "escape")
            await pilot.pause()

            assert not isinstance(app.screen, MealModal)
            assert app.register.order.is_empty

    asyncio.run(scenario())


def test_remove_and_cancel_keys(app: RegisterApp) -> None:
    async def scenario() -> None:
        async with app.run_test() as pilot:
            app.register.select_simple_item("Bottled Water")
            app.register.select_simple_item("Bottled Water")
            app.register.select_simple_item("Fountain Drink")
            app._refresh_orders()

            await pilot.press("j", "d")
            assert app.register.order.line_for(SimpleItem("Bottled Water")).quantity == 1

            await pilot.press("x")
            assert app.register.order.is_empty

    asyncio.run(scenario())


def test_payment_stands_when_receipt_status_cannot_be_saved(
    app: RegisterApp, db_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def locked(order_id: int, status: str, db_path: Path) -> None:
        raise TransactionFailure("Store order status update failed: database is locked")

    monkeypatch.setattr(register_app, "update_order_status", locked)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app.register.select_simple_item("Veggie Spring Roll")
            app._refresh_orders()

            await pilot.press("ctrl+s")
            await pilot.pause()

            assert isinstance(app.screen, ReportModal)
            assert app.screen.title_text == "Payment complete"
            assert "Receipt status not saved (PRINT_SKIPPED)" in app.screen.status_text
            assert app.register.order.is_empty

    asyncio.run(scenario())

    assert inventory_levels(db_path)[SPRING_ROLL] == Decimal("149")
    with closing(connect(db_path)) as conn:
        statuses = [row["status"] for row in conn.execute("SELECT status FROM orders")]
    assert statuses == ["PAID"]
