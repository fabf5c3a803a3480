# =============================================================================
# Mail Body Widget
# =============================================================================
# Displays the extracted text lines of the opened message.
#
# The extractor has already reduced the message to plain lines, so the body
# is a single Static inside a scroll container. Scrolling follows the state
# machine's body scroll position, one line per step.
# =============================================================================

from rich.text import Text
from textual.containers import ScrollableContainer
from textual.widgets import Static


PLACEHOLDER = "No mail available."


class MailBody(ScrollableContainer):
    """
    A widget for displaying message text.

    Usage:
        >>> body = MailBody(id="mail-body")
        >>> body.show(["Hello", "World"], scroll=0)
    """

    can_focus = False

    DEFAULT_CSS = """
    MailBody {
        padding: 0 1;
    }

    MailBody > #body-text {
        height: auto;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._lines: list[str] | None = None

    def compose(self):
        """Compose the widget."""
        yield Static(PLACEHOLDER, id="body-text")

    def show(self, lines: list[str], scroll: int) -> None:
        """
        Draw message lines and scroll to a line.

        Args:
            lines: Body lines. An empty list shows the placeholder.
            scroll: First line to show.
        """
        if lines != self._lines:
            text = Text("\n".join(lines)) if lines else PLACEHOLDER
            self.query_one("#body-text", Static).update(text)
            self._lines = list(lines)

        self.scroll_to(y=scroll, animate=False)
