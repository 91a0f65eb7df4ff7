"""Meal wizard modal: pick a base, then one entree per slot."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from pos_register.codec import MealKind

MealChoice = tuple[str, list[str]]


class MealModal(ModalScreen[MealChoice | None]):
    """Centered modal that walks through base and entree selection for one meal."""

    BINDINGS = [
        ("escape", "cancel", "Cancel meal"),
        ("q", "cancel", "Cancel meal"),
        ("ctrl+c", "cancel", "Cancel meal"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "choose_current", "Choose"),
        ("backspace", "step_back", "Back"),
    ]

    CSS = """
    MealModal {
        align: center middle;
        background: $background 60%;
    }

    #meal-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #meal-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #meal-body {
        margin-bottom: 1;
        color: white;
    }

    #meal-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, kind: MealKind, bases: list[str], entrees: list[str]) -> None:
        super().__init__()
        self.kind = kind
        self.bases = bases
        self.entrees = entrees
        self.base: str | None = None
        self.chosen_entrees: list[str] = []

    @property
    def step(self) -> int:
        """0 while choosing the base, then 1..slots for each entree."""
        if self.base is None:
            return 0
        return 1 + len(self.chosen_entrees)

    def compose(self) -> ComposeResult:
        with Container(id="meal-dialog"):
            yield Static(self.kind.label, id="meal-title")
            yield Static(id="meal-body")
            yield Static(id="meal-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def _options(self) -> list[str]:
        return self.bases if self.step == 0 else self.entrees

    def action_cancel(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        options = self._options()
        if not options:
            return
        self.cursor_index = (self.cursor_index + delta) % len(options)
        self._refresh_content()

    def action_step_back(self) -> None:
        if self.chosen_entrees:
            self.chosen_entrees.pop()
        elif self.base is not None:
            self.base = None
        self.cursor_index = 0
        self._refresh_content()

    def action_choose_current(self) -> None:
        options = self._options()
        if not options:
            return
        choice = options[self.cursor_index]
        if self.base is None:
            self.base = choice
        else:
            self.chosen_entrees.append(choice)

        if len(self.chosen_entrees) == self.kind.slots:
            self.dismiss((self.base, list(self.chosen_entrees)))
            return
        self.cursor_index = 0
        self._refresh_content()

    def _prompt(self) -> str:
        if self.step == 0:
            return f"Select base for {self.kind.label}"
        return f"Select entree {self.step} of {self.kind.slots} for {self.kind.label}"

    def _refresh_content(self) -> None:
        body = self.query_one("#meal-body", Static)
        help_text = self.query_one("#meal-help", Static)

        content = Text(style="white")
        content.append(self._prompt(), style="bold")
        picked = ([self.base] if self.base else []) + self.chosen_entrees
        if picked:
            content.append("\n" + ", ".join(picked), style="italic")

        options = self._options()
        if self.cursor_index >= len(options):
            self.cursor_index = max(0, len(options) - 1)

        content.append("\n\n")
        if not options:
            content.append("(nothing available)", style="dim")
        for idx, option in enumerate(options):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            style = "bold white" if idx == self.cursor_index else "white"
            content.append(f"{pointer}{option}", style=style)

        help_text.update("J/K/↑/↓ move, Enter choose, Backspace back, Esc/q/Ctrl+C cancel")
        body.update(content)
