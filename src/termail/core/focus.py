# =============================================================================
# Focus and Command Model
# =============================================================================
# The vocabulary shared by the input translation layer (termail.ui.keymap),
# the focus state machine (termail.focus) and the rendering layer:
#
#   - Panel: which panel currently owns the keyboard
#   - Command: normalized input, independent of raw key encodings
#   - FocusState: active panel plus the cursors of the two list panels
# =============================================================================

from dataclasses import dataclass
from enum import Enum, auto


class Panel(Enum):
    """The panels (and overlays) that can hold focus."""
    MAILBOX_TREE = auto()
    MAIL_LIST = auto()
    MAIL_BODY = auto()
    HELP_OVERLAY = auto()
    ERROR_OVERLAY = auto()

    @property
    def is_overlay(self) -> bool:
        """Returns True for the panels drawn on top of the main layout."""
        return self in (Panel.HELP_OVERLAY, Panel.ERROR_OVERLAY)


class Direction(Enum):
    """Cursor movement directions."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    TOP = auto()        # Jump to first entry
    BOTTOM = auto()     # Jump to last entry


class CommandKind(Enum):
    """The normalized command set consumed by the focus state machine."""
    NAVIGATE = auto()
    SELECT_NODE = auto()
    SELECT_ROW = auto()
    SWITCH_FOCUS = auto()
    DISMISS_OVERLAY = auto()
    TOGGLE_HELP = auto()
    QUIT = auto()


@dataclass(frozen=True)
class Command:
    """
    A single normalized input command.

    Attributes:
        kind: What the command does.
        direction: Movement direction, only set for NAVIGATE.

    Usage:
        >>> Command.navigate(Direction.DOWN)
        Command(kind=<CommandKind.NAVIGATE: 1>, direction=<Direction.DOWN: 2>)
        >>> Command(CommandKind.QUIT)
    """
    kind: CommandKind
    direction: Direction | None = None

    @classmethod
    def navigate(cls, direction: Direction) -> "Command":
        return cls(CommandKind.NAVIGATE, direction)


@dataclass
class FocusState:
    """
    Which panel owns input, and where the panel cursors are.

    Attributes:
        panel: The active panel.
        selected_node: Identifier (path) of the node under the tree cursor.
        selected_row: Index of the row under the mail list cursor.
        prior_panel: Panel to restore when the active overlay is dismissed.
                     Only set while an overlay is active.
    """
    panel: Panel = Panel.MAILBOX_TREE
    selected_node: str = ""
    selected_row: int = 0
    prior_panel: Panel | None = None

    @property
    def overlay_active(self) -> bool:
        return self.panel.is_overlay
