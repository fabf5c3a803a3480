# =============================================================================
# termail: A Terminal Reader for Local Maildir Mail
# =============================================================================
#
# termail shows the mail that a sync tool (mbsync, offlineimap, ...) keeps
# in a local maildir tree, in three panes: mailboxes, messages, message text.
#
# Features:
#   - Mailbox tree with recursive unread counts
#   - Unread-first, newest-first message list
#   - Plain text and HTML bodies shown as text
#   - Opening a message marks it read (new/ -> cur/)
#   - Vim style keys
#   - XDG Base Directory compliant
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "termail"

# Main entry point - this is what gets called by the 'termail' command
from termail.app import main

__all__ = ["main", "__version__", "__app_name__"]
