# =============================================================================
# Key Map
# =============================================================================
# Translates raw Textual key names into the normalized commands understood
# by the focus state machine. This is the only place that knows about key
# encodings; the state machine never sees a key name.
#
# Bindings (vim style, as listed in the help overlay):
#   j/k/h/l, arrows      move cursor
#   g/G, home/end        jump to first/last entry
#   Enter or l           open mailbox / message
#   Tab                  switch focus between mailboxes and mail list
#   Ctrl+H or ?          toggle help
#   Esc or q/Q           quit (dismiss when an overlay is shown)
# =============================================================================

from termail.core import Command, CommandKind, Direction, Panel

NAVIGATION_KEYS: dict[str, Direction] = {
    "j": Direction.DOWN,
    "down": Direction.DOWN,
    "k": Direction.UP,
    "up": Direction.UP,
    "h": Direction.LEFT,
    "left": Direction.LEFT,
    "l": Direction.RIGHT,
    "right": Direction.RIGHT,
    "g": Direction.TOP,
    "home": Direction.TOP,
    "G": Direction.BOTTOM,
    "end": Direction.BOTTOM,
}

SELECT_KEYS = frozenset({"enter", "l"})
SWITCH_FOCUS_KEYS = frozenset({"tab"})
# Terminals deliver Ctrl+H as the backspace control code
HELP_KEYS = frozenset({"ctrl+h", "backspace", "question_mark"})
QUIT_KEYS = frozenset({"escape", "q", "Q"})

# Overlays take Esc/Enter/q as "close"; Q still quits
DISMISS_KEYS = frozenset({"escape", "enter", "q"})
OVERLAY_QUIT_KEYS = frozenset({"Q"})

# (keys, description) rows for the help overlay
HELP_ENTRIES: list[tuple[str, str]] = [
    ("<ESC> or <q/Q>", "Exit"),
    ("<TAB>", "Switch focus"),
    ("<h,j,k,l,g,G>", "Move cursor (vim style)"),
    ("<Enter> or <l>", "Open mailbox / mail"),
    ("<CTRL+H> or <?>", "Toggle this help"),
    ("<ESC>, <Enter> or <q>", "Close popup"),
]


def translate(key: str, panel: Panel) -> Command | None:
    """
    Translate a key press into a command for the focused panel.

    Args:
        key: Textual key name (e.g. "j", "enter", "ctrl+h").
        panel: The panel that currently has focus.

    Returns:
        The command, or None if the key means nothing in this panel.
    """
    if panel.is_overlay:
        if key in DISMISS_KEYS:
            return Command(CommandKind.DISMISS_OVERLAY)
        if key in OVERLAY_QUIT_KEYS:
            return Command(CommandKind.QUIT)
        if key in HELP_KEYS and panel is Panel.HELP_OVERLAY:
            return Command(CommandKind.TOGGLE_HELP)
        return None

    if key in SELECT_KEYS:
        if panel is Panel.MAILBOX_TREE:
            return Command(CommandKind.SELECT_NODE)
        if panel is Panel.MAIL_LIST:
            return Command(CommandKind.SELECT_ROW)
        # Mail body: "l" falls through to navigation

    if key in SWITCH_FOCUS_KEYS:
        return Command(CommandKind.SWITCH_FOCUS)
    if key in HELP_KEYS:
        return Command(CommandKind.TOGGLE_HELP)
    if key in QUIT_KEYS:
        return Command(CommandKind.QUIT)

    direction = NAVIGATION_KEYS.get(key)
    if direction is not None:
        return Command.navigate(direction)
    return None
