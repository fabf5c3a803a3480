# =============================================================================
# Mailbox Tree Scanner
# =============================================================================
# Turns a directory hierarchy of maildirs into a tree of MailboxNode objects
# annotated with unread counts.
#
# Rules:
#   - Every readable sub-directory is a mailbox node, except the maildir
#     storage directories cur/, new/ and tmp/ of the directory itself.
#   - Regular files are never nodes.
#   - Recursion stops after `depth` levels below the root.
#   - Unread count = messages in the node's own new/ directory plus the
#     unread counts of all scanned descendants.
#   - Unreadable directories are skipped (logged), the scan carries on.
#
# There is no incremental update: after any change the caller scans again
# and replaces its whole tree.
# =============================================================================

import logging
import os
from pathlib import Path

from termail.core import MailboxNode

logger = logging.getLogger(__name__)

# Directory depth scanned below the mail root
DEFAULT_SCAN_DEPTH = 3

# Maildir storage directories, never shown as mailboxes
MAILDIR_SUBDIRS = frozenset({"cur", "new", "tmp"})


def scan(root: str | Path, depth: int = DEFAULT_SCAN_DEPTH) -> MailboxNode:
    """
    Scan a mail directory into a mailbox tree.

    Args:
        root: Mail root directory. "~" is expanded.
        depth: Number of directory levels to visit below the root.

    Returns:
        The root node. A missing or unreadable root yields a childless node
        with no unread messages rather than an error.
    """
    root_path = Path(root).expanduser().absolute()
    node = _scan_dir(root_path, depth)
    if node is None:
        node = MailboxNode.for_path(root_path)
    logger.debug(
        "Scanned %s (depth %d): %d unread",
        root_path, depth, node.unread_count,
    )
    return node


def count_unread(mailbox: Path) -> int:
    """
    Count the messages in a mailbox's new/ directory.

    Files are counted without parsing their headers. Returns 0 when the
    directory has no new/ or it cannot be read.
    """
    try:
        with os.scandir(mailbox / "new") as entries:
            return sum(1 for entry in entries if _is_message_entry(entry))
    except OSError:
        return 0


def _scan_dir(path: Path, depth: int) -> MailboxNode | None:
    """Recursively scan one directory. Returns None if it can't be read."""
    try:
        child_paths = _list_mailboxes(path)
    except OSError as e:
        logger.warning("Skipping unreadable mailbox %s: %s", path, e)
        return None

    node = MailboxNode.for_path(path)
    unread = count_unread(path)

    if depth > 0:
        for child_path in child_paths:
            child = _scan_dir(child_path, depth - 1)
            if child is not None:
                node.children.append(child)
                unread += child.unread_count

    node.unread_count = unread
    return node


def _list_mailboxes(path: Path) -> list[Path]:
    """
    List the child mailbox directories of a directory.

    Raises:
        OSError: If the directory cannot be listed.
    """
    with os.scandir(path) as entries:
        children = [entry for entry in entries if _is_mailbox_entry(entry)]

    # Stable collation: directory listing order is filesystem dependent
    children.sort(key=lambda entry: (entry.name.casefold(), entry.name))
    return [Path(entry.path) for entry in children]


def _is_mailbox_entry(entry: os.DirEntry) -> bool:
    if entry.name in MAILDIR_SUBDIRS:
        return False
    try:
        return entry.is_dir()
    except OSError:
        return False


def _is_message_entry(entry: os.DirEntry) -> bool:
    # Maildir readers ignore dot files
    if entry.name.startswith("."):
        return False
    try:
        return entry.is_file()
    except OSError:
        return False


class MailboxTree:
    """
    Owns the current mailbox tree for one mail root.

    The tree is replaced wholesale on refresh(); nodes handed out earlier
    keep describing the previous scan.

    Usage:
        >>> tree = MailboxTree("~/.local/share/mail", depth=3)
        >>> tree.root.label
        'mail(4)'
        >>> tree.refresh()  # after a message was marked read
    """

    def __init__(self, root_path: str | Path, depth: int = DEFAULT_SCAN_DEPTH) -> None:
        self.root_path = Path(root_path).expanduser().absolute()
        self.depth = depth
        self.root: MailboxNode = scan(self.root_path, depth)

    def refresh(self) -> MailboxNode:
        """Rescan the mail root and replace the cached tree."""
        self.root = scan(self.root_path, self.depth)
        return self.root

    def find(self, node_id: str) -> MailboxNode | None:
        """Look up a node by identifier in the current tree."""
        return self.root.find(node_id)
