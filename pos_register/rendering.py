"""Rendering helpers for order lines, totals and settlement reports."""

from __future__ import annotations

from decimal import Decimal

from rich.text import Text

from pos_register.codec import Meal, MealKind
from pos_register.errors import InsufficientStock, SettlementFailure, UnresolvedComponent
from pos_register.models import OrderLine, SettlementReport

_MEAL_BADGE = {
    MealKind.BOWL: "B",
    MealKind.PLATE: "P",
    MealKind.BIGGER_PLATE: "BP",
}


def badge_style(kind: MealKind) -> str:
    """Return a consistent badge style for meal sizes."""
    if kind is MealKind.BOWL:
        return "bold #0b1f0f on #5fbf72"
    if kind is MealKind.PLATE:
        return "bold #ffffff on #2f6db5"
    return "bold #ffffff on #b23a48"


def format_money(amount: Decimal) -> str:
    return f"${amount:.2f}"


def format_order_label(line: OrderLine) -> Text:
    """Render an order line label, tagging meals with a colored size badge."""
    text = Text()
    selection = line.selection
    if isinstance(selection, Meal):
        text.append(_MEAL_BADGE[selection.kind], style=badge_style(selection.kind))
        text.append(f" {selection.kind.label}: ")
        text.append(", ".join(selection.components()), style="italic")
    else:
        text.append(selection.name)
    return text


def format_order_row(line: OrderLine) -> Text:
    """Label plus quantity and line total."""
    text = format_order_label(line)
    text.append(f"  x{line.quantity}", style="bold")
    text.append(f"  {format_money(line.line_total)}", style="dim")
    return text


def format_total(total: Decimal) -> Text:
    return Text(f"Total: {format_money(total)}", style="bold")


def format_report(report: SettlementReport) -> Text:
    """Render a committed settlement the way the receipt confirmation reads."""
    text = Text()
    if report.order_id is not None:
        text.append(f"Ticket #{report.order_id}\n\n", style="bold")
    text.append(report.as_text(), style="yellow" if report.skipped else "")
    return text


def format_failure(exc: SettlementFailure) -> Text:
    """Render why a payment was refused; the order stays on screen."""
    text = Text()
    text.append("Payment not completed\n\n", style="bold #ffb3b3")
    if isinstance(exc, InsufficientStock):
        text.append(f"Not enough {exc.name}: {exc.on_hand:.2f} on hand, {exc.required:.2f} needed")
    elif isinstance(exc, UnresolvedComponent):
        text.append(f"{exc.name!r} has no menu entry, inventory cannot be deducted")
    else:
        text.append(exc.reason)
    text.append("\n\nInventory was not changed. Retry, or cancel the order.", style="dim")
    return text
