"""Domain models for pos-register."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from pos_register.codec import Meal, MealKind, Selection, SimpleItem

CENTS = Decimal("0.01")

__all__ = [
    "IngredientUsage",
    "Meal",
    "MealKind",
    "MenuComponent",
    "OrderLine",
    "OrderSnapshot",
    "RecipeEntry",
    "ResolvedComponent",
    "Selection",
    "SettlementReport",
    "SimpleItem",
    "money",
]


def money(value: Decimal | int | str) -> Decimal:
    """Quantize a price to cents."""
    return Decimal(value).quantize(CENTS)


@dataclass(frozen=True)
class MenuComponent:
    """A catalog menu item."""

    id: int
    name: str
    unit_price: Decimal
    category_id: int
    active: bool = True


@dataclass(frozen=True)
class RecipeEntry:
    """How much of one ingredient a single unit of a menu item consumes."""

    menu_component_id: int
    ingredient_id: int
    quantity_per_unit: Decimal
    ingredient_name: str
    unit: str


@dataclass(frozen=True)
class ResolvedComponent:
    """A component name matched to its menu item and recipe."""

    component: MenuComponent
    entries: tuple[RecipeEntry, ...]


@dataclass
class OrderLine:
    """One deduplicated order row."""

    selection: Selection
    unit_price: Decimal
    quantity: int = 1

    @property
    def display_name(self) -> str:
        return self.selection.display_name

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderSnapshot:
    """Copied, read-only view of an order."""

    lines: tuple[OrderLine, ...]
    total: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def line_for(self, selection: Selection) -> OrderLine | None:
        for line in self.lines:
            if line.selection == selection:
                return line
        return None


@dataclass
class IngredientUsage:
    """Running total of one ingredient consumed by a settlement."""

    ingredient_id: int
    name: str
    unit: str
    total_quantity: Decimal = Decimal(0)


@dataclass(frozen=True)
class SettlementReport:
    """What a committed settlement consumed and charged."""

    order_id: int | None
    usages: tuple[IngredientUsage, ...]
    total: Decimal
    skipped: tuple[str, ...] = field(default_factory=tuple)

    def usage_lines(self) -> list[str]:
        return [f"- {usage.name}: {usage.total_quantity:.2f} {usage.unit}" for usage in self.usages]

    def as_text(self) -> str:
        lines = ["Inventory items used:", *self.usage_lines()]
        if self.skipped:
            lines.append("")
            lines.append("Not deducted (unknown items): " + ", ".join(self.skipped))
        lines.append("")
        lines.append(f"Total Paid: ${self.total:.2f}")
        return "\n".join(lines)
