# =============================================================================
# Help Overlay
# =============================================================================
# A modal screen listing the key bindings. It is pushed while the focus
# state machine is in its help overlay state and popped when it leaves it.
# The screen has no bindings: keys reach the app-level key handler.
# =============================================================================

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

from termail.ui.keymap import HELP_ENTRIES


class HelpScreen(ModalScreen[None]):
    """Modal screen showing the key bindings."""

    CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #help-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .help-entry {
        height: auto;
    }

    #help-footer {
        margin-top: 1;
        color: $text-muted;
        text-align: center;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the help dialog."""
        with Vertical(id="help-dialog"):
            yield Static("Help", id="help-title")
            for keys, description in HELP_ENTRIES:
                yield Static(
                    f"{keys:<24}{description}", classes="help-entry", markup=False
                )
            yield Static("<ESC>, <Enter> or <q> to close", id="help-footer", markup=False)
