"""Composite meal identities and their display-text codec.

Order lines carry a :data:`Selection` (either a :class:`SimpleItem` or a
:class:`Meal`). The display string ``"Plate (Chow Mein, Orange Chicken, Kung Pao Chicken)"``
only exists at the presentation boundary: :func:`encode` renders it and
:func:`decode` / :func:`parse` read it back.

Menu item names that start with a meal label followed by ``" ("`` cannot be
told apart from a meal and are rejected by the catalog loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from pos_register.errors import InvalidSelection

_SEPARATOR = ", "


class MealKind(Enum):
    """Meal sizes and the number of entree slots each one has."""

    BOWL = ("Bowl", 1)
    PLATE = ("Plate", 2)
    BIGGER_PLATE = ("Bigger Plate", 3)

    def __init__(self, label: str, slots: int) -> None:
        self.label = label
        self.slots = slots

    @property
    def prefix(self) -> str:
        return f"{self.label} ("

    @classmethod
    def from_label(cls, label: str) -> MealKind:
        for kind in cls:
            if kind.label == label:
                return kind
        raise InvalidSelection(f"Unknown meal kind {label!r}")


def _check_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidSelection("Menu item names must not be blank")
    if _SEPARATOR in name:
        raise InvalidSelection(f"{name!r} cannot be part of a meal (contains {_SEPARATOR!r})")


@dataclass(frozen=True)
class SimpleItem:
    """A bare menu item ordered on its own."""

    name: str

    @property
    def display_name(self) -> str:
        return self.name

    def components(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class Meal:
    """A base plus an ordered run of entrees. Entree order is part of identity."""

    kind: MealKind
    base: str
    entrees: tuple[str, ...]

    def __post_init__(self) -> None:
        # Accept any iterable but store a tuple so the meal stays hashable.
        object.__setattr__(self, "entrees", tuple(self.entrees))
        if len(self.entrees) != self.kind.slots:
            raise InvalidSelection(
                f"{self.kind.label} needs {self.kind.slots} entree(s), got {len(self.entrees)}"
            )
        _check_name(self.base)
        for entree in self.entrees:
            _check_name(entree)

    @property
    def display_name(self) -> str:
        return f"{self.kind.prefix}{_SEPARATOR.join(self.components())})"

    def components(self) -> list[str]:
        return [self.base, *self.entrees]


Selection = Union[SimpleItem, Meal]


def encode(kind: MealKind, base: str, entrees: Iterable[str]) -> str:
    """Render a meal as its canonical display name."""
    return Meal(kind, base, tuple(entrees)).display_name


def meal_kind_of(display_name: str) -> MealKind | None:
    """Return the meal kind a display name starts with, if any."""
    for kind in MealKind:
        if display_name.startswith(kind.prefix):
            return kind
    return None


def decode(display_name: str) -> list[str]:
    """Split a display name back into its component menu item names."""
    if meal_kind_of(display_name) is None:
        return [display_name]
    start = display_name.find("(") + 1
    end = display_name.rfind(")")
    if end < start:
        raise InvalidSelection(f"Malformed meal name {display_name!r}")
    return display_name[start:end].split(_SEPARATOR)


def parse(display_name: str) -> Selection:
    """Rebuild the selection behind a display name."""
    kind = meal_kind_of(display_name)
    if kind is None:
        return SimpleItem(display_name)
    if not display_name.endswith(")"):
        raise InvalidSelection(f"Malformed meal name {display_name!r}")
    base, *entrees = decode(display_name)
    return Meal(kind, base, tuple(entrees))


def is_reserved_name(name: str) -> bool:
    """True for names that would be read back as a meal."""
    return meal_kind_of(name) is not None
