"""Settlement result modal."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class ReportModal(ModalScreen[None]):
    """Show a settlement report (or why the payment failed) until dismissed."""

    CSS = """
    ReportModal {
        align: center middle;
        background: $background 60%;
    }

    #report-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #report-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #report-body {
        color: white;
        margin-bottom: 1;
    }

    #report-status {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #report-help {
        color: #dddddd;
    }
    """

    def __init__(self, title: str, body: Text, status: str = "") -> None:
        super().__init__()
        self.title_text = title
        self.body_text = body
        self.status_text = status

    def compose(self) -> ComposeResult:
        with Container(id="report-dialog"):
            yield Static(self.title_text, id="report-title")
            yield Static(self.body_text, id="report-body")
            yield Static(self.status_text, id="report-status")
            yield Static("Enter / Esc / q to close.", id="report-help")

    def on_key(self, event: Key) -> None:
        if event.key in {"enter", "escape", "q", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
