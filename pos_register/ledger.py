"""The in-memory working set of a single customer order."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from pos_register.errors import NotFound
from pos_register.models import OrderLine, OrderSnapshot, Selection


class OrderLedger:
    """Deduplicated order lines with a running total.

    The total is adjusted on every mutation instead of being recomputed, so it
    always matches what the cashier has been shown. Prices are ``Decimal``, so
    the running value never drifts from ``sum(unit_price * quantity)``.

    A ledger belongs to one terminal session and is not locked.
    """

    def __init__(self) -> None:
        self._lines: list[OrderLine] = []
        self._total = Decimal("0.00")

    @property
    def total(self) -> Decimal:
        return self._total

    @property
    def lines(self) -> list[OrderLine]:
        return [replace(line) for line in self._lines]

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def _find(self, selection: Selection) -> int | None:
        for idx, line in enumerate(self._lines):
            if line.selection == selection:
                return idx
        return None

    def add_selection(self, selection: Selection, unit_price: Decimal) -> OrderLine:
        """Add one unit, merging into an existing line for the same selection."""
        idx = self._find(selection)
        if idx is None:
            line = OrderLine(selection=selection, unit_price=unit_price, quantity=1)
            self._lines.append(line)
        else:
            line = self._lines[idx]
            line.quantity += 1
        # A merged line keeps the price it was first rung up at.
        self._total += line.unit_price
        return replace(line)

    def remove_one(self, selection: Selection) -> OrderLine | None:
        """Take one unit off a line; returns the remaining line or ``None`` once it is gone."""
        idx = self._find(selection)
        if idx is None:
            raise NotFound(f"{selection.display_name!r} is not on the order")

        line = self._lines[idx]
        self._total -= line.unit_price
        line.quantity -= 1
        if line.quantity == 0:
            del self._lines[idx]
            return None
        return replace(line)

    def clear(self) -> None:
        self._lines.clear()
        self._total = Decimal("0.00")

    def snapshot(self) -> OrderSnapshot:
        return OrderSnapshot(lines=tuple(replace(line) for line in self._lines), total=self._total)
