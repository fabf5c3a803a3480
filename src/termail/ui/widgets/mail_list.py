# =============================================================================
# Mail List Widget
# =============================================================================
# A table of the messages in the selected mailbox.
#
# Features:
#   - Columns: Idx, Time, From, Title
#   - Unread messages in bold green
#   - Row cursor mirrors the focus state machine
# =============================================================================

from datetime import datetime

from rich.text import Text
from textual.widgets import DataTable

from termail.core import MailRow


class MailList(DataTable):
    """
    A table widget displaying the rows of a mail index.

    Usage:
        >>> mail_list = MailList(date_format="%y-%m-%d %H:%M")
        >>> mail_list.show(index.rows(), cursor=0)
    """

    can_focus = False

    # Column configuration
    COLUMNS = [
        ("Idx", 5),
        ("Time", 16),
        ("From", 28),
        ("Title", 0),   # Flexible width
    ]

    def __init__(self, date_format: str = "%y-%m-%d %H:%M", **kwargs) -> None:
        """
        Initialize the mail list.

        Args:
            date_format: strftime format of the Time column.
            **kwargs: Additional arguments passed to DataTable.
        """
        super().__init__(**kwargs)
        self.date_format = date_format
        self._rows: list[MailRow] = []

        self.cursor_type = "row"

    def on_mount(self) -> None:
        """Set up columns when widget is mounted."""
        self._ensure_columns()

    def _ensure_columns(self) -> None:
        if self.columns:
            return
        for label, width in self.COLUMNS:
            if width > 0:
                self.add_column(label, width=width)
            else:
                self.add_column(label)

    def show(self, rows: list[MailRow], cursor: int) -> None:
        """
        Draw mail rows and place the cursor.

        Args:
            rows: Rows in display order.
            cursor: Selected row position.
        """
        self._ensure_columns()

        if rows != self._rows:
            self.clear()
            for row in rows:
                self.add_row(*row_cells(row, self.date_format))
            self._rows = list(rows)

        if rows:
            self.move_cursor(row=cursor)


def row_cells(row: MailRow, date_format: str) -> tuple[Text, ...]:
    """
    Cells of one table row. Unread rows are bold green.

    Cells are Text objects so mail content is never parsed as markup.
    """
    style = "bold green" if row.unread else ""
    return tuple(
        Text(cell, style=style)
        for cell in (
            str(row.index),
            format_time(row.timestamp, date_format),
            row.sender,
            row.subject,
        )
    )


def format_time(timestamp: int, date_format: str) -> str:
    """Format an epoch timestamp in local time. Negative values show as 0."""
    try:
        return datetime.fromtimestamp(max(timestamp, 0)).strftime(date_format)
    except (OverflowError, OSError, ValueError):
        return ""
