"""Fold recipe consumption into per-ingredient totals."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from pos_register.models import IngredientUsage, RecipeEntry

UsageMap = dict[int, IngredientUsage]


def accumulate(entries: Iterable[RecipeEntry], line_quantity: int, usage_map: UsageMap) -> UsageMap:
    """Add ``quantity_per_unit * line_quantity`` of every entry into ``usage_map``.

    Quantities are ``Decimal``, so the result does not depend on the order in
    which lines are folded in.
    """
    if line_quantity <= 0:
        raise ValueError("line_quantity must be positive")

    for entry in entries:
        if entry.quantity_per_unit < 0:
            raise ValueError(f"Negative recipe quantity for ingredient {entry.ingredient_id}")
        consumed = entry.quantity_per_unit * line_quantity
        usage = usage_map.get(entry.ingredient_id)
        if usage is None:
            usage_map[entry.ingredient_id] = IngredientUsage(
                ingredient_id=entry.ingredient_id,
                name=entry.ingredient_name,
                unit=entry.unit,
                total_quantity=consumed,
            )
        else:
            usage.total_quantity += consumed
    return usage_map


class UsageAggregator:
    """Accumulator for one settlement attempt."""

    def __init__(self) -> None:
        self._usage: UsageMap = {}

    def add(self, entries: Iterable[RecipeEntry], line_quantity: int) -> None:
        accumulate(entries, line_quantity, self._usage)

    def usages(self) -> tuple[IngredientUsage, ...]:
        """Usages sorted by ingredient id, so reports and lock order are stable."""
        return tuple(self._usage[key] for key in sorted(self._usage))

    def total_for(self, ingredient_id: int) -> Decimal:
        usage = self._usage.get(ingredient_id)
        return usage.total_quantity if usage is not None else Decimal(0)

    def __len__(self) -> int:
        return len(self._usage)
