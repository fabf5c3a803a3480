# =============================================================================
# Application Tests
# =============================================================================
# End-to-end checks through Textual's headless test driver, plus the CLI.
# =============================================================================

import pytest

from termail.app import TermailApp, main, parse_args
from termail.config import Config
from termail.core import Panel
from termail.ui.screens import ErrorScreen, HelpScreen, MainScreen
from termail.ui.widgets import MailBody, MailList, MailboxTreeView


@pytest.fixture
def config(mail_store, temp_dir, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(temp_dir / "state"))
    return Config(mail_dir=str(mail_store))


async def settle(pilot, ticks: int = 10) -> None:
    """Give the tick timer time to drain queued commands."""
    for _ in range(ticks):
        await pilot.pause(0.03)


async def test_open_mail_and_mark_read(config, inbox):
    app = TermailApp(config=config)

    async with app.run_test() as pilot:
        assert isinstance(app.screen, MainScreen)
        tree = app.screen.query_one(MailboxTreeView)
        assert str(tree.root.label) == "mail(3)"

        # personal -> expand -> Inbox -> open -> first mail
        await pilot.press("j", "enter", "j", "enter")
        await settle(pilot)
        assert app.machine.focus.panel is Panel.MAIL_LIST
        assert app.screen.query_one(MailList).row_count == 3

        await pilot.press("enter")
        await settle(pilot)
        assert app.machine.focus.panel is Panel.MAIL_BODY
        assert app.machine.body_lines() == ["Message B"]
        assert str(tree.root.label) == "mail(2)"
        assert app.screen.query_one(MailBody).has_class("focused")

    assert (inbox / "cur" / "b:2,S").exists()


async def test_help_overlay(config):
    app = TermailApp(config=config)

    async with app.run_test() as pilot:
        await pilot.press("question_mark")
        await settle(pilot)
        assert isinstance(app.screen, HelpScreen)

        await pilot.press("escape")
        await settle(pilot)
        assert isinstance(app.screen, MainScreen)
        assert app.machine.running


async def test_error_overlay(config):
    app = TermailApp(config=config)

    async with app.run_test() as pilot:
        # Open a message with no mailbox loaded
        await pilot.press("tab", "enter")
        await settle(pilot)
        assert isinstance(app.screen, ErrorScreen)

        await pilot.press("enter")
        await settle(pilot)
        assert isinstance(app.screen, MainScreen)
        assert app.machine.focus.panel is Panel.MAIL_LIST


async def test_quit(config):
    app = TermailApp(config=config)

    async with app.run_test() as pilot:
        await pilot.press("q")
        for _ in range(20):
            if not app.machine.running:
                break
            await pilot.pause(0.03)

    assert app.machine.running is False


def test_parse_args_directory(mail_store):
    args = parse_args([str(mail_store), "--debug"])

    assert args.directory == mail_store
    assert args.debug is True


def test_missing_directory_exits_with_usage(temp_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_args([str(temp_dir / "nowhere")])

    assert excinfo.value.code == 1
    assert "usage:" in capsys.readouterr().err


def test_main_paths(config, capsys):
    assert main(["--paths"]) == 0

    assert "config.toml" in capsys.readouterr().out


def test_format_time_clamps_negative_timestamps():
    from termail.ui.widgets.mail_list import format_time

    assert format_time(-500, "%Y") == format_time(0, "%Y")
    assert format_time(200, "%Y") in ("1970", "1969")


@pytest.mark.parametrize("unread", [True, False])
@pytest.mark.parametrize("sender", ["Bob \\", "[admin] Carol", "list\\[x]"])
def test_row_cells_keep_mail_content_literal(unread, sender):
    from termail.core import MailRow
    from termail.ui.widgets.mail_list import row_cells

    row = MailRow(index=0, timestamp=0, sender=sender, subject="[Re] hi \\", unread=unread)

    cells = row_cells(row, "%Y")

    assert cells[2].plain == sender
    assert cells[3].plain == "[Re] hi \\"
    assert all(cell.style == ("bold green" if unread else "") for cell in cells)
