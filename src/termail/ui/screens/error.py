# =============================================================================
# Error Overlay
# =============================================================================
# A modal screen showing the message of an error raised while handling a
# selection (unreadable mailbox, message that can't be moved, ...).
# =============================================================================

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static


class ErrorScreen(ModalScreen[None]):
    """
    Modal screen for an error message.

    Args:
        message: Text of the error.
    """

    CSS = """
    ErrorScreen {
        align: center middle;
    }

    #error-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $error;
    }

    #error-title {
        text-align: center;
        text-style: bold;
        color: $error;
        margin-bottom: 1;
    }

    #error-message {
        color: $error;
        height: auto;
    }

    #error-footer {
        margin-top: 1;
        color: $text-muted;
        text-align: center;
    }
    """

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        """Compose the error dialog."""
        with Vertical(id="error-dialog"):
            yield Static("Error", id="error-title")
            yield Static(self.message, id="error-message", markup=False)
            yield Static("<ESC>, <Enter> or <q> to close", id="error-footer", markup=False)
