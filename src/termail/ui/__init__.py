# =============================================================================
# UI Module
# =============================================================================
# Textual-based user interface for termail.
#
# Structure:
#   - keymap: Key names -> state machine commands
#   - screens/: Main screen and the help/error overlays
#   - widgets/: Mailbox tree, mail list and mail body panels
#
# The UI draws the focus state machine's state and feeds it commands; it
# never changes mail state itself.
# =============================================================================

from termail.ui.screens import ErrorScreen, HelpScreen, MainScreen
from termail.ui.widgets import MailBody, MailboxTreeView, MailList

__all__ = [
    "MainScreen",
    "HelpScreen",
    "ErrorScreen",
    "MailboxTreeView",
    "MailList",
    "MailBody",
]
