# =============================================================================
# UI Screens
# =============================================================================
# Screens are the top-level containers in Textual. The app shows one screen
# at a time, and screens can be pushed/popped like a stack.
#
#   - MainScreen: Mailbox tree, mail list and mail body
#   - HelpScreen: Key binding overlay
#   - ErrorScreen: Error message overlay
# =============================================================================

from termail.ui.screens.error import ErrorScreen
from termail.ui.screens.help import HelpScreen
from termail.ui.screens.main import MainScreen

__all__ = ["MainScreen", "HelpScreen", "ErrorScreen"]
