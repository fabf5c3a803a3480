# =============================================================================
# UI Widgets
# =============================================================================
# The three panels of the main screen:
#   - MailboxTreeView: Mailbox directory navigation
#   - MailList: Messages of the selected mailbox
#   - MailBody: Text of the opened message
#
# None of them takes keyboard focus; they draw state owned by the focus
# state machine.
# =============================================================================

from termail.ui.widgets.mail_body import MailBody
from termail.ui.widgets.mail_list import MailList
from termail.ui.widgets.mailbox_tree import MailboxTreeView

__all__ = ["MailboxTreeView", "MailList", "MailBody"]
