# =============================================================================
# Storage Module
# =============================================================================
# Read access to the local maildir store.
#
#   - tree: Scans the mail root into a MailboxNode tree with unread counts
#   - index: Lists, orders and marks read the messages of one mailbox
#
# All operations are synchronous; the store is local disk.
# =============================================================================

from termail.storage.index import MailIndex, load_mailbox
from termail.storage.tree import MailboxTree, scan

__all__ = ["MailboxTree", "scan", "MailIndex", "load_mailbox"]
