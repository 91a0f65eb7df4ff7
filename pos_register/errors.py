"""Exceptions raised by the register core."""

from __future__ import annotations

from decimal import Decimal


class RegisterError(Exception):
    """Base class for every error the register core raises on purpose."""


class InvalidSelection(RegisterError):
    """A meal was composed with the wrong number of entrees."""


class NotFound(RegisterError):
    """A line or menu component does not exist."""


class ComponentNotFound(NotFound):
    """A component name has no matching menu item in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No menu item named {name!r}")
        self.name = name


class SettlementFailure(RegisterError):
    """Settlement aborted; every applied inventory delta was rolled back."""

    @property
    def reason(self) -> str:
        return str(self)


class EmptyOrder(SettlementFailure):
    """Nothing to settle."""


class UnresolvedComponent(ComponentNotFound, SettlementFailure):
    """A component could not be resolved while the fail-fast policy is active."""


class InsufficientStock(SettlementFailure):
    """Settling would push an ingredient below zero."""

    def __init__(self, ingredient_id: int, name: str, on_hand: Decimal, required: Decimal) -> None:
        super().__init__(f"Insufficient stock for {name}: on hand {on_hand}, required {required}")
        self.ingredient_id = ingredient_id
        self.name = name
        self.on_hand = on_hand
        self.required = required


class TransactionFailure(SettlementFailure):
    """The inventory store failed (connectivity, lock timeout, constraint, missing row)."""
