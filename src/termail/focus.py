# =============================================================================
# Focus State Machine
# =============================================================================
# Owns all client state (mailbox tree, loaded index, opened body, focus) and
# applies normalized commands to it. Nothing else mutates this state; the UI
# only reads it during a render pass.
#
# Panels and the commands they react to:
#
#   MAILBOX_TREE   navigate, switch focus (-> list), select node, help
#   MAIL_LIST      navigate, switch focus (-> tree), select row, help
#   MAIL_BODY      navigate (scroll), switch focus (-> tree), help
#   HELP_OVERLAY   dismiss / toggle help
#   ERROR_OVERLAY  dismiss
#
# Quit is honoured from every panel. Errors raised while handling a
# selection open the error overlay and remember the panel to return to.
#
# The TickLoop below feeds commands into the machine one per tick.
# =============================================================================

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from termail.core import (
    Command,
    CommandKind,
    Direction,
    FocusState,
    MailboxNode,
    MailRow,
    Panel,
    SelectionError,
    StorageAccessError,
    TermailError,
)
from termail.rendering.text import ContentExtractor
from termail.storage.index import MailIndex, load_mailbox
from termail.storage.tree import DEFAULT_SCAN_DEPTH, MailboxTree

logger = logging.getLogger(__name__)

# Seconds between two ticks of the run loop
TICK_INTERVAL = 0.02


@dataclass
class AppState:
    """
    Everything the client knows, in one place.

    Attributes:
        tree: Scanned mailbox tree of the mail root.
        focus: Active panel and panel cursors.
        index: Messages of the last selected mailbox, if any.
        body: Lines of the last opened message.
        body_scroll: First body line shown.
        expanded: Identifiers of expanded tree nodes.
        error_message: Text of the error overlay while it is shown.
        running: False once quit was requested.
    """
    tree: MailboxTree
    focus: FocusState = field(default_factory=FocusState)
    index: MailIndex | None = None
    body: list[str] = field(default_factory=list)
    body_scroll: int = 0
    expanded: set[str] = field(default_factory=set)
    error_message: str = ""
    running: bool = True


class FocusStateMachine:
    """
    Routes commands to the focused panel and performs their side effects.

    Usage:
        >>> machine = FocusStateMachine.create("~/.local/share/mail")
        >>> machine.handle(Command(CommandKind.SELECT_NODE))
        True
        >>> machine.focus.panel
        <Panel.MAIL_LIST: 2>
    """

    def __init__(
        self,
        state: AppState,
        extractor: ContentExtractor | None = None,
    ) -> None:
        """
        Initialize the machine around an existing state aggregate.

        Args:
            state: State to drive. Its tree must already be scanned.
            extractor: Content extractor used when a message is opened.
        """
        self.state = state
        self.extractor = extractor or ContentExtractor()

        self._handlers: dict[Panel, Callable[[Command], bool]] = {
            Panel.MAILBOX_TREE: self._on_mailbox_tree,
            Panel.MAIL_LIST: self._on_mail_list,
            Panel.MAIL_BODY: self._on_mail_body,
            Panel.HELP_OVERLAY: self._on_help_overlay,
            Panel.ERROR_OVERLAY: self._on_error_overlay,
        }
        missing = set(Panel) - self._handlers.keys()
        if missing:
            raise RuntimeError(f"No handler for panels: {sorted(p.name for p in missing)}")

        if not state.focus.selected_node:
            state.focus.selected_node = state.tree.root.id
        state.expanded.add(state.tree.root.id)

    @classmethod
    def create(
        cls,
        root_path: str | Path,
        depth: int = DEFAULT_SCAN_DEPTH,
        extractor: ContentExtractor | None = None,
    ) -> "FocusStateMachine":
        """Scan a mail root and build a machine focused on its tree."""
        return cls(AppState(tree=MailboxTree(root_path, depth)), extractor)

    # -------------------------------------------------------------------------
    # Read access for the rendering layer
    # -------------------------------------------------------------------------

    @property
    def focus(self) -> FocusState:
        return self.state.focus

    @property
    def tree_root(self) -> MailboxNode:
        return self.state.tree.root

    @property
    def running(self) -> bool:
        return self.state.running

    def visible_nodes(self) -> list[MailboxNode]:
        """Tree nodes in display order, honouring collapsed nodes."""
        nodes: list[MailboxNode] = []

        def visit(node: MailboxNode) -> None:
            nodes.append(node)
            if node.id in self.state.expanded:
                for child in node.children:
                    visit(child)

        visit(self.state.tree.root)
        return nodes

    def selected_tree_node(self) -> MailboxNode | None:
        return self.state.tree.find(self.state.focus.selected_node)

    def rows(self) -> list[MailRow]:
        """Mail list rows of the loaded mailbox (empty before any load)."""
        if self.state.index is None:
            return []
        return self.state.index.rows()

    def body_lines(self) -> list[str]:
        return self.state.body

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def handle(self, command: Command) -> bool:
        """
        Apply one command.

        Args:
            command: The normalized command.

        Returns:
            True if anything visible changed and a render pass is due.
        """
        if command.kind is CommandKind.QUIT:
            self.state.running = False
            return True
        return self._handlers[self.state.focus.panel](command)

    def _on_mailbox_tree(self, command: Command) -> bool:
        if command.kind is CommandKind.NAVIGATE:
            return self._move_tree_cursor(command.direction)
        if command.kind is CommandKind.SWITCH_FOCUS:
            return self._set_panel(Panel.MAIL_LIST)
        if command.kind is CommandKind.SELECT_NODE:
            return self._select_node()
        if command.kind is CommandKind.TOGGLE_HELP:
            return self._open_overlay(Panel.HELP_OVERLAY)
        return False

    def _on_mail_list(self, command: Command) -> bool:
        if command.kind is CommandKind.NAVIGATE:
            return self._move_row_cursor(command.direction)
        if command.kind is CommandKind.SWITCH_FOCUS:
            return self._set_panel(Panel.MAILBOX_TREE)
        if command.kind is CommandKind.SELECT_ROW:
            return self._select_row()
        if command.kind is CommandKind.TOGGLE_HELP:
            return self._open_overlay(Panel.HELP_OVERLAY)
        return False

    def _on_mail_body(self, command: Command) -> bool:
        if command.kind is CommandKind.NAVIGATE:
            return self._scroll_body(command.direction)
        if command.kind is CommandKind.SWITCH_FOCUS:
            return self._set_panel(Panel.MAILBOX_TREE)
        if command.kind is CommandKind.TOGGLE_HELP:
            return self._open_overlay(Panel.HELP_OVERLAY)
        return False

    def _on_help_overlay(self, command: Command) -> bool:
        if command.kind in (CommandKind.DISMISS_OVERLAY, CommandKind.TOGGLE_HELP):
            return self._dismiss_overlay()
        return False

    def _on_error_overlay(self, command: Command) -> bool:
        if command.kind is CommandKind.DISMISS_OVERLAY:
            return self._dismiss_overlay()
        return False

    # -------------------------------------------------------------------------
    # Focus and Overlays
    # -------------------------------------------------------------------------

    def _set_panel(self, panel: Panel) -> bool:
        self.state.focus.panel = panel
        return True

    def _open_overlay(self, overlay: Panel, return_to: Panel | None = None) -> bool:
        focus = self.state.focus
        if focus.overlay_active:
            return False
        focus.prior_panel = return_to or focus.panel
        focus.panel = overlay
        return True

    def _dismiss_overlay(self) -> bool:
        focus = self.state.focus
        focus.panel = focus.prior_panel or Panel.MAILBOX_TREE
        focus.prior_panel = None
        self.state.error_message = ""
        return True

    def _show_error(self, error: TermailError, return_to: Panel | None = None) -> bool:
        logger.warning("%s: %s", type(error).__name__, error)
        self.state.error_message = str(error)
        return self._open_overlay(Panel.ERROR_OVERLAY, return_to)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def _select_node(self) -> bool:
        """Load a leaf mailbox, or expand/collapse a non-leaf one."""
        node = self.selected_tree_node()
        if node is None:
            return self._show_error(
                SelectionError(f"Mailbox no longer exists: {self.state.focus.selected_node}")
            )

        if not node.is_leaf:
            if node.id in self.state.expanded:
                self.state.expanded.discard(node.id)
            else:
                self.state.expanded.add(node.id)
            return True

        try:
            index = load_mailbox(node.path)
        except TermailError as e:
            return self._show_error(e)

        self.state.index = index
        self.state.focus.selected_row = 0
        return self._set_panel(Panel.MAIL_LIST)

    def _select_row(self) -> bool:
        """Open the message under the list cursor, marking it read."""
        index = self.state.index
        try:
            if index is None:
                raise SelectionError("No mailbox loaded")
            record = index.record(self.state.focus.selected_row)
            try:
                raw = record.read_bytes()
            except OSError as e:
                raise StorageAccessError(f"Cannot read message {record.id}: {e}") from e
        except TermailError as e:
            return self._show_error(e)

        self.state.body = self.extractor.extract(raw)
        self.state.body_scroll = 0
        self._set_panel(Panel.MAIL_BODY)

        if record.is_unread:
            try:
                if index.mark_read(record):
                    self._rescan()
            except StorageAccessError as e:
                return self._show_error(e, return_to=Panel.MAIL_LIST)
        return True

    def _rescan(self) -> None:
        """Replace the mailbox tree, keeping the cursor when possible."""
        tree = self.state.tree
        tree.refresh()
        if tree.find(self.state.focus.selected_node) is None:
            self.state.focus.selected_node = tree.root.id
        self.state.expanded.add(tree.root.id)

    # -------------------------------------------------------------------------
    # Cursors
    # -------------------------------------------------------------------------

    def _move_tree_cursor(self, direction: Direction | None) -> bool:
        nodes = self.visible_nodes()
        ids = [node.id for node in nodes]
        focus = self.state.focus
        expanded = self.state.expanded

        before = (focus.selected_node, frozenset(expanded))
        pos = ids.index(focus.selected_node) if focus.selected_node in ids else 0
        node = nodes[pos]

        if direction is Direction.UP:
            pos = max(pos - 1, 0)
        elif direction is Direction.DOWN:
            pos = min(pos + 1, len(nodes) - 1)
        elif direction is Direction.TOP:
            pos = 0
        elif direction is Direction.BOTTOM:
            pos = len(nodes) - 1
        elif direction is Direction.LEFT:
            if not node.is_leaf and node.id in expanded:
                expanded.discard(node.id)
            else:
                parent = self.state.tree.root.parent_of(node.id)
                if parent is not None:
                    pos = ids.index(parent.id)
        elif direction is Direction.RIGHT:
            if not node.is_leaf:
                expanded.add(node.id)

        focus.selected_node = ids[pos]
        return before != (focus.selected_node, frozenset(expanded))

    def _move_row_cursor(self, direction: Direction | None) -> bool:
        count = len(self.state.index) if self.state.index is not None else 0
        if count == 0:
            return False
        focus = self.state.focus
        row = _step(focus.selected_row, direction, count)
        if row == focus.selected_row:
            return False
        focus.selected_row = row
        return True

    def _scroll_body(self, direction: Direction | None) -> bool:
        count = len(self.state.body)
        if count == 0:
            return False
        scroll = _step(self.state.body_scroll, direction, count)
        if scroll == self.state.body_scroll:
            return False
        self.state.body_scroll = scroll
        return True


def _step(position: int, direction: Direction | None, count: int) -> int:
    """Move a list position one step (or to an end), clamped to the list."""
    if direction is Direction.UP:
        position -= 1
    elif direction is Direction.DOWN:
        position += 1
    elif direction is Direction.TOP:
        position = 0
    elif direction is Direction.BOTTOM:
        position = count - 1
    return min(max(position, 0), count - 1)


# =============================================================================
# Run Loop
# =============================================================================

class TickLoop:
    """
    Cooperative single-threaded run loop around a FocusStateMachine.

    Each tick applies at most one pending command. Callers render when a
    tick reports a change, then wait for the next tick. The Textual app
    drives tick() from a timer; run() is a self-contained loop for other
    front ends.

    Usage:
        >>> loop = TickLoop(machine)
        >>> loop.submit(Command(CommandKind.SWITCH_FOCUS))
        >>> loop.tick()
        True
    """

    def __init__(self, machine: FocusStateMachine) -> None:
        self.machine = machine
        self._pending: deque[Command] = deque()

    @property
    def running(self) -> bool:
        return self.machine.running

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, command: Command) -> None:
        """Queue a command for a later tick."""
        self._pending.append(command)

    def tick(self) -> bool:
        """
        Apply the oldest pending command, if any.

        Returns:
            True if a render pass is due.
        """
        if not self._pending or not self.running:
            return False
        return self.machine.handle(self._pending.popleft())

    def run(
        self,
        poll: Callable[[], Command | None],
        render: Callable[[FocusStateMachine], None],
        interval: float = TICK_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Run until quit: poll one input, apply it, render on change, sleep.

        Args:
            poll: Returns the next command, or None when there is no input.
            render: Draws the machine's current state.
            interval: Sleep between ticks, in seconds.
            sleep: Sleep function.
        """
        render(self.machine)
        while self.running:
            command = poll()
            if command is not None:
                self.submit(command)
            if self.tick():
                render(self.machine)
            sleep(interval)
