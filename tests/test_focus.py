# =============================================================================
# Focus State Machine Tests
# =============================================================================

import shutil
from pathlib import Path

import pytest

from termail.core import Command, CommandKind, Direction, Panel
from termail.focus import AppState, FocusStateMachine
from termail.storage.tree import MailboxTree


SELECT_NODE = Command(CommandKind.SELECT_NODE)
SELECT_ROW = Command(CommandKind.SELECT_ROW)
SWITCH = Command(CommandKind.SWITCH_FOCUS)
HELP = Command(CommandKind.TOGGLE_HELP)
DISMISS = Command(CommandKind.DISMISS_OVERLAY)
QUIT = Command(CommandKind.QUIT)
UP = Command.navigate(Direction.UP)
DOWN = Command.navigate(Direction.DOWN)
LEFT = Command.navigate(Direction.LEFT)
RIGHT = Command.navigate(Direction.RIGHT)
TOP = Command.navigate(Direction.TOP)
BOTTOM = Command.navigate(Direction.BOTTOM)


@pytest.fixture
def machine(mail_store):
    return FocusStateMachine.create(mail_store)


def node_id(path: Path) -> str:
    return str(path.absolute())


def visible_names(machine: FocusStateMachine) -> list[str]:
    return [node.name for node in machine.visible_nodes()]


def open_inbox(machine: FocusStateMachine) -> None:
    """mail -> personal (expand) -> Inbox (load)."""
    machine.handle(DOWN)
    machine.handle(SELECT_NODE)
    machine.handle(DOWN)
    machine.handle(SELECT_NODE)


class TestInitialState:
    def test_starts_on_tree_root(self, machine, mail_store):
        assert machine.focus.panel is Panel.MAILBOX_TREE
        assert machine.focus.selected_node == node_id(mail_store)
        assert machine.running

    def test_root_starts_expanded(self, machine):
        assert visible_names(machine) == ["mail", "personal", "work"]

    def test_nothing_loaded(self, machine):
        assert machine.rows() == []
        assert machine.body_lines() == []


class TestTreeNavigation:
    def test_up_and_down_clamp(self, machine):
        assert machine.handle(UP) is False
        assert machine.handle(DOWN) is True
        assert machine.selected_tree_node().name == "personal"
        machine.handle(DOWN)
        assert machine.handle(DOWN) is False
        assert machine.selected_tree_node().name == "work"

    def test_top_and_bottom(self, machine):
        machine.handle(BOTTOM)
        assert machine.selected_tree_node().name == "work"
        machine.handle(TOP)
        assert machine.selected_tree_node().name == "mail"

    def test_right_expands_and_left_collapses(self, machine):
        machine.handle(DOWN)

        machine.handle(RIGHT)
        assert visible_names(machine) == ["mail", "personal", "Inbox", "Sent", "work"]

        machine.handle(LEFT)
        assert visible_names(machine) == ["mail", "personal", "work"]
        assert machine.selected_tree_node().name == "personal"

    def test_left_on_leaf_moves_to_parent(self, machine):
        machine.handle(DOWN)
        machine.handle(RIGHT)
        machine.handle(DOWN)
        assert machine.selected_tree_node().name == "Inbox"

        machine.handle(LEFT)

        assert machine.selected_tree_node().name == "personal"

    def test_navigation_does_not_change_panel(self, machine):
        machine.handle(DOWN)

        assert machine.focus.panel is Panel.MAILBOX_TREE


class TestSelectNode:
    def test_non_leaf_toggles_expansion(self, machine):
        machine.handle(DOWN)

        assert machine.handle(SELECT_NODE) is True
        assert "Inbox" in visible_names(machine)
        assert machine.focus.panel is Panel.MAILBOX_TREE

        machine.handle(SELECT_NODE)
        assert "Inbox" not in visible_names(machine)

    def test_leaf_loads_index_and_focuses_list(self, machine):
        open_inbox(machine)

        assert machine.focus.panel is Panel.MAIL_LIST
        assert machine.focus.selected_row == 0
        assert [row.subject for row in machine.rows()] == ["B", "A", "C"]

    def test_vanished_mailbox_opens_error_overlay(self, machine, mail_store):
        machine.handle(DOWN)
        machine.handle(SELECT_NODE)
        machine.handle(DOWN)
        machine.handle(DOWN)
        assert machine.selected_tree_node().name == "Sent"
        shutil.rmtree(mail_store / "personal" / "Sent")

        machine.handle(SELECT_NODE)

        assert machine.focus.panel is Panel.ERROR_OVERLAY
        assert machine.focus.prior_panel is Panel.MAILBOX_TREE
        assert "Sent" in machine.state.error_message
        assert machine.rows() == []


class TestMailList:
    def test_row_cursor_clamps(self, machine):
        open_inbox(machine)

        assert machine.handle(UP) is False
        machine.handle(BOTTOM)
        assert machine.focus.selected_row == 2
        assert machine.handle(DOWN) is False
        machine.handle(TOP)
        assert machine.focus.selected_row == 0

    def test_select_row_opens_body_and_marks_read(self, machine, inbox):
        open_inbox(machine)
        inbox_id = node_id(inbox)
        assert machine.state.tree.find(inbox_id).unread_count == 2

        machine.handle(SELECT_ROW)

        assert machine.focus.panel is Panel.MAIL_BODY
        assert machine.body_lines() == ["Message B"]
        assert machine.state.index.records[0].is_unread is False
        assert machine.state.tree.find(inbox_id).unread_count == 1
        assert machine.tree_root.label == "mail(2)"
        assert (inbox / "cur" / "b:2,S").exists()

    def test_rescan_keeps_cursor_and_expansion(self, machine, inbox):
        open_inbox(machine)

        machine.handle(SELECT_ROW)

        assert machine.focus.selected_node == node_id(inbox)
        assert "Inbox" in visible_names(machine)

    def test_select_read_row_does_not_rescan(self, machine):
        open_inbox(machine)
        machine.handle(BOTTOM)
        root_before = machine.tree_root

        machine.handle(SELECT_ROW)

        assert machine.body_lines() == ["Message C"]
        assert machine.tree_root is root_before

    def test_select_row_in_empty_list_shows_error(self, machine):
        machine.handle(SWITCH)

        machine.handle(SELECT_ROW)

        assert machine.focus.panel is Panel.ERROR_OVERLAY
        assert machine.focus.prior_panel is Panel.MAIL_LIST

    def test_failed_mark_read_shows_error_and_returns_to_list(self, machine, inbox, monkeypatch):
        open_inbox(machine)

        def rename(self, target):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "rename", rename)

        machine.handle(SELECT_ROW)

        assert machine.focus.panel is Panel.ERROR_OVERLAY
        assert machine.focus.prior_panel is Panel.MAIL_LIST
        assert machine.body_lines() == ["Message B"]
        assert machine.state.index.records[0].is_unread is True
        assert (inbox / "new" / "b").exists()

        machine.handle(DISMISS)
        assert machine.focus.panel is Panel.MAIL_LIST
        assert machine.state.error_message == ""

    def test_deleted_message_shows_error(self, machine, inbox):
        open_inbox(machine)
        (inbox / "new" / "b").unlink()

        machine.handle(SELECT_ROW)

        assert machine.focus.panel is Panel.ERROR_OVERLAY
        assert machine.body_lines() == []


class TestMailBody:
    @pytest.fixture
    def long_mail(self, inbox, message_factory):
        body = "\n".join(f"line {n}" for n in range(10))
        (inbox / "new" / "long").write_bytes(
            message_factory(subject="Long", timestamp=900, body=body)
        )

    def test_scrolling_clamps(self, machine, long_mail):
        open_inbox(machine)
        machine.handle(SELECT_ROW)
        assert machine.body_lines()[0] == "line 0"

        assert machine.handle(UP) is False
        machine.handle(DOWN)
        assert machine.state.body_scroll == 1
        machine.handle(BOTTOM)
        assert machine.state.body_scroll == 9
        assert machine.handle(DOWN) is False
        machine.handle(TOP)
        assert machine.state.body_scroll == 0

    def test_switch_focus_returns_to_tree(self, machine):
        open_inbox(machine)
        machine.handle(SELECT_ROW)

        machine.handle(SWITCH)

        assert machine.focus.panel is Panel.MAILBOX_TREE


class TestFocusSwitching:
    def test_cycles_between_tree_and_list(self, machine):
        machine.handle(SWITCH)
        assert machine.focus.panel is Panel.MAIL_LIST
        machine.handle(SWITCH)
        assert machine.focus.panel is Panel.MAILBOX_TREE

    def test_select_row_ignored_on_tree(self, machine):
        assert machine.handle(SELECT_ROW) is False
        assert machine.focus.panel is Panel.MAILBOX_TREE


class TestOverlays:
    @pytest.mark.parametrize("switches", [0, 1])
    def test_help_remembers_prior_panel(self, machine, switches):
        for _ in range(switches):
            machine.handle(SWITCH)
        prior = machine.focus.panel

        machine.handle(HELP)

        assert machine.focus.panel is Panel.HELP_OVERLAY
        assert machine.focus.prior_panel is prior

        machine.handle(DISMISS)
        assert machine.focus.panel is prior
        assert machine.focus.prior_panel is None

    def test_help_toggles_closed(self, machine):
        machine.handle(HELP)

        machine.handle(HELP)

        assert machine.focus.panel is Panel.MAILBOX_TREE

    def test_overlay_owns_input(self, machine):
        machine.handle(HELP)

        for command in (DOWN, SWITCH, SELECT_NODE, SELECT_ROW):
            assert machine.handle(command) is False
        assert machine.focus.panel is Panel.HELP_OVERLAY
        assert machine.focus.selected_node == machine.tree_root.id

    def test_error_overlay_ignores_help(self, machine):
        machine.handle(SWITCH)
        machine.handle(SELECT_ROW)

        assert machine.handle(HELP) is False
        assert machine.focus.panel is Panel.ERROR_OVERLAY

    def test_help_from_body(self, machine):
        open_inbox(machine)
        machine.handle(SELECT_ROW)

        machine.handle(HELP)
        machine.handle(DISMISS)

        assert machine.focus.panel is Panel.MAIL_BODY


class TestQuit:
    @pytest.mark.parametrize("setup", [[], [SWITCH], [HELP], [SWITCH, SELECT_ROW]])
    def test_quit_from_any_panel(self, machine, setup):
        for command in setup:
            machine.handle(command)

        assert machine.handle(QUIT) is True
        assert machine.running is False


class TestConstruction:
    def test_every_panel_has_a_handler(self, machine):
        assert set(machine._handlers) == set(Panel)

    def test_explicit_state(self, mail_store):
        state = AppState(tree=MailboxTree(mail_store, depth=1))

        machine = FocusStateMachine(state)

        assert machine.state is state
        assert all(node.is_leaf for node in machine.tree_root.children)

    def test_missing_root(self, temp_dir):
        machine = FocusStateMachine.create(temp_dir / "nowhere")

        assert visible_names(machine) == ["nowhere"]
        assert machine.handle(DOWN) is False
