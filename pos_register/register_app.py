"""Main Textual app class."""

from __future__ import annotations

from pathlib import Path

import structlog
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from pos_register.config import DB_PATH
from pos_register.data import MEAL_KIND_BY_KEY, SEARCH_CATEGORY_BY_KEY
from pos_register.errors import InvalidSelection, NotFound, SettlementFailure, TransactionFailure
from pos_register.meal_modal import MealChoice, MealModal
from pos_register.models import MealKind, MenuComponent, OrderLine, OrderSnapshot, SettlementReport
from pos_register.persistence import update_order_status
from pos_register.printer import check_printer_dependencies, print_receipt
from pos_register.register import Register
from pos_register.rendering import format_failure, format_money, format_order_row, format_report, format_total
from pos_register.report_modal import ReportModal

logger = structlog.get_logger(__name__)


class RegisterApp(App):
    """A Textual cashier terminal: ring up items and meals, then pay."""

    TITLE = "Register"
    SUB_TITLE = "Bowls / Plates / A la carte"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #orders-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #orders-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #order-total {
        height: 1;
        margin-top: 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    mode = reactive("e")
    query = reactive("")
    selected_index = reactive(0)
    order_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "register_selected", "Ring up"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "pay", "Pay", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, register: Register, db_path: str | Path = DB_PATH) -> None:
        super().__init__()
        self.register = register
        self.db_path = db_path
        self.system_status = ""
        self.printer_ready = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="orders-pane"):
                yield Static("Current Order", classes="pane-title")
                yield Static("(no items yet)", id="orders-list")
                yield Static(id="order-total")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        self.printer_ready, msg = check_printer_dependencies()
        self.system_status = msg
        logger.info("app_mounted", printer_status=msg)
        self._refresh_all()

    def _modal_open(self) -> bool:
        return isinstance(self.screen, (MealModal, ReportModal))

    def on_key(self, event: Key) -> None:
        if self._modal_open():
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return
        if not event.character.isalnum():
            return

        key = event.character.lower()
        if self.input_state == "normal":
            if key == "j":
                self._move_order_selection(1)
            elif key == "k":
                self._move_order_selection(-1)
            elif key == "d":
                self._remove_selected_unit()
            elif key == "x":
                self._cancel_order()
            elif key in MEAL_KIND_BY_KEY:
                self._open_meal_wizard(MEAL_KIND_BY_KEY[key])
            elif key in SEARCH_CATEGORY_BY_KEY:
                self.mode = key
                self.input_state = "active"
                self.query = ""
                self.selected_index = 0
                self._refresh_search()
            else:
                return
            event.stop()
            return

        self.query += event.character
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if self._modal_open():
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if self._modal_open():
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_register_selected(self) -> None:
        if self._modal_open():
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        item = results[self.selected_index]
        try:
            line = self.register.select_simple_item(item.name)
        except (InvalidSelection, NotFound) as exc:
            self.system_status = str(exc)
            self._refresh_search()
            return
        self._select_line(line)

    def action_backspace_query(self) -> None:
        if self._modal_open():
            return
        if self.input_state != "active":
            return

        if not self.query:
            return
        self.query = self.query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_pay(self) -> None:
        if self._modal_open():
            return
        if self.input_state != "normal":
            self.system_status = "Pay only in NORMAL mode (Ctrl+C to exit search)"
            self._refresh_search()
            return

        snapshot = self.register.order
        if snapshot.is_empty:
            self.system_status = "Nothing to pay"
            self._refresh_search()
            return

        try:
            report = self.register.settle()
        except SettlementFailure as exc:
            self.system_status = f"Payment failed: {exc.reason}"
            self._refresh_search()
            self.push_screen(ReportModal("Payment failed", format_failure(exc)))
            return

        status = self._print_receipt(snapshot, report)
        self.order_selected_index = None
        self.system_status = f"Paid {format_money(report.total)}"
        self._refresh_all()
        self.push_screen(ReportModal("Payment complete", format_report(report), status))

    def _print_receipt(self, snapshot: OrderSnapshot, report: SettlementReport) -> str:
        """Print after commit; a printer problem never undoes the payment."""
        if report.order_id is None:
            return ""
        if not self.printer_ready:
            return self._mark_receipt(report.order_id, "PRINT_SKIPPED", "Receipt not printed (printer unavailable)")
        try:
            print_receipt(snapshot, report)
        except Exception as exc:
            logger.error("receipt_print_failed", order_id=report.order_id, error=repr(exc))
            return self._mark_receipt(report.order_id, "PRINT_FAILED", f"Receipt print failed: {exc}")
        logger.info("receipt_printed", order_id=report.order_id)
        return self._mark_receipt(report.order_id, "PRINTED", "")

    def _mark_receipt(self, order_id: int, status: str, message: str) -> str:
        """Record the receipt status; the payment itself is already committed."""
        try:
            update_order_status(order_id, status, self.db_path)
        except TransactionFailure as exc:
            logger.error("receipt_status_failed", order_id=order_id, status=status, error=exc.reason)
            note = f"Receipt status not saved ({status}): {exc.reason}"
            return f"{message}\n{note}" if message else note
        return message

    def _open_meal_wizard(self, kind: MealKind) -> None:
        bases = [component.name for component in self.register.catalog.list_bases()]
        entrees = [component.name for component in self.register.catalog.list_entrees()]

        def on_done(choice: MealChoice | None) -> None:
            if choice is None:
                return
            base, chosen = choice
            try:
                line = self.register.select_meal(kind, base, chosen)
            except (InvalidSelection, NotFound) as exc:
                self.system_status = str(exc)
                self._refresh_search()
                return
            self._select_line(line)

        self.push_screen(MealModal(kind, bases, entrees), on_done)

    def _select_line(self, line: OrderLine) -> None:
        lines = self.register.ledger.lines
        for idx, existing in enumerate(lines):
            if existing.selection == line.selection:
                self.order_selected_index = idx
                break
        self._refresh_orders()

    def _remove_selected_unit(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        try:
            self.register.remove_one_unit(line.selection)
        except NotFound as exc:
            self.system_status = str(exc)
            self._refresh_search()
        self._refresh_orders()

    def _cancel_order(self) -> None:
        if self.register.ledger.is_empty:
            return
        self.register.cancel_order()
        self.order_selected_index = None
        self.system_status = "Order cancelled"
        self._refresh_all()

    def _filtered_results(self) -> list[MenuComponent]:
        category = SEARCH_CATEGORY_BY_KEY[self.mode]
        source = self.register.catalog.list_category(category.category_id)
        if not self.query:
            return source
        q = self.query.lower()
        return [item for item in source if q in item.name.lower()]

    def _refresh_all(self) -> None:
        self._refresh_orders()
        self._refresh_search()

    def _move_order_selection(self, delta: int) -> None:
        count = len(self.register.ledger.lines)
        if not count:
            return

        if self.order_selected_index is None:
            self.order_selected_index = 0 if delta > 0 else count - 1
        else:
            self.order_selected_index = (self.order_selected_index + delta) % count
        self._refresh_orders()

    def _selected_line(self) -> OrderLine | None:
        lines = self.register.ledger.lines
        if self.order_selected_index is None:
            return None
        if not (0 <= self.order_selected_index < len(lines)):
            return None
        return lines[self.order_selected_index]

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_orders(self) -> None:
        try:
            orders_widget = self.query_one("#orders-list", Static)
            total_widget = self.query_one("#order-total", Static)
        except NoMatches:
            return
        total_widget.update(format_total(self.register.ledger.total))

        lines = self.register.ledger.lines
        if not lines:
            self.order_selected_index = None
            orders_widget.update("(no items yet)")
            return

        if self.order_selected_index is not None and self.order_selected_index >= len(lines):
            self.order_selected_index = len(lines) - 1

        visible_rows = self._visible_rows(orders_widget)
        start, end = self._window_bounds(len(lines), visible_rows, self.order_selected_index)

        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                text.append("\n")

            pointer = "➤ " if idx == self.order_selected_index else "  "
            text.append(pointer)
            text.append(f"{idx + 1}. ")
            text.append_text(format_order_row(lines[idx]))

        if end < len(lines):
            text.append("\n⋮", style="dim")

        orders_widget.update(text)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(
                "A/E/S/R search, 1/2/3 Bowl/Plate/Bigger Plate.\n"
                f"D remove one, X cancel, Ctrl+S pay.\n{status}"
            )
            return

        category = SEARCH_CATEGORY_BY_KEY[self.mode]
        text = Text()
        text.append(f" {category.name} ", style="bold #ffffff on #2f6db5")
        text.append(f": {self.query or ''}")
        bar.update(text)

    def _refresh_results(self, results: list[MenuComponent]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            text.append(f"{pointer}{results[idx].name}")
            text.append(f"  {format_money(results[idx].unit_price)}", style="dim")

        if end < len(results):
            text.append("\n⋮", style="dim")

        results_widget.update(text)
