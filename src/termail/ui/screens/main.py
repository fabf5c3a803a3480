# =============================================================================
# Main Screen
# =============================================================================
# The only full-screen view of termail, showing:
#   - Left panel: Mailbox tree
#   - Top right panel: Mail list
#   - Bottom right panel: Mail body
#   - Bottom line: Help hint and version
#
# The screen holds no state of its own. After every state change the app
# calls show_state() with the focus state machine, and the panels are
# redrawn from it. The focused panel gets the "focused" class.
# =============================================================================

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Static

from termail import __version__
from termail.core import Panel
from termail.focus import FocusStateMachine
from termail.ui.widgets import MailBody, MailboxTreeView, MailList

HELP_HINT = f"Press <CTRL+H> or <?> for help. Version: {__version__}"


class MainScreen(Screen):
    """
    The mail reading screen.

    Panel ids:
        - #mailbox-tree: MailboxTreeView
        - #mail-list: MailList
        - #mail-body: MailBody
    """

    # CSS for this screen
    CSS = """
    #main-container {
        height: 1fr;
    }

    #mailbox-tree {
        width: 2fr;
    }

    #content {
        width: 5fr;
    }

    #mail-list {
        height: 1fr;
    }

    #mail-body {
        height: 1fr;
    }

    .panel {
        border: round $primary-darken-2;
        border-title-color: $text-muted;
    }

    .panel.focused {
        border: round $accent;
        border-title-color: $accent;
        border-title-style: bold;
    }

    #help-label {
        height: 1;
        background: $surface-darken-2;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self, date_format: str = "%y-%m-%d %H:%M") -> None:
        """
        Initialize the main screen.

        Args:
            date_format: strftime format of the mail list Time column.
        """
        super().__init__()
        self.date_format = date_format

    def compose(self) -> ComposeResult:
        """
        Compose the main screen layout.

        The layout is:
        +----------+---------------------------------------+
        | Mailbox  |          Mail List                    |
        |  Tree    |---------------------------------------|
        |          |          Mail Body                    |
        +----------+---------------------------------------+
        | Help hint                                        |
        +--------------------------------------------------+
        """
        with Horizontal(id="main-container"):
            tree = MailboxTreeView(id="mailbox-tree", classes="panel")
            tree.border_title = "Mailboxes"
            yield tree

            with Vertical(id="content"):
                mail_list = MailList(
                    date_format=self.date_format, id="mail-list", classes="panel"
                )
                mail_list.border_title = "Mails"
                yield mail_list

                body = MailBody(id="mail-body", classes="panel")
                body.border_title = "Mail"
                yield body

        yield Static(HELP_HINT, id="help-label", markup=False)

    def show_state(self, machine: FocusStateMachine) -> None:
        """
        Redraw every panel from the state machine.

        Args:
            machine: The machine whose state is drawn.
        """
        visible = [node.id for node in machine.visible_nodes()]
        selected = machine.focus.selected_node
        cursor = visible.index(selected) if selected in visible else 0

        self.query_one(MailboxTreeView).show(
            machine.tree_root, machine.state.expanded, cursor
        )
        self.query_one(MailList).show(machine.rows(), machine.focus.selected_row)
        self.query_one(MailBody).show(machine.body_lines(), machine.state.body_scroll)

        self._mark_focus(machine.focus.panel, machine.focus.prior_panel)

    def _mark_focus(self, panel: Panel, prior_panel: Panel | None) -> None:
        # While an overlay is shown, keep marking the panel underneath
        if panel.is_overlay and prior_panel is not None:
            panel = prior_panel

        self.query_one(MailboxTreeView).set_class(
            panel is Panel.MAILBOX_TREE, "focused"
        )
        self.query_one(MailList).set_class(panel is Panel.MAIL_LIST, "focused")
        self.query_one(MailBody).set_class(panel is Panel.MAIL_BODY, "focused")
