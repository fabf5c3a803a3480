# =============================================================================
# Mailbox Node Model
# =============================================================================
# Represents one mailbox directory in the local mail store. The scanner in
# termail.storage.tree builds a tree of these nodes from the directory
# hierarchy, e.g.:
#
#   mail/                     <- root node
#     personal/               <- account directory (non-leaf)
#       Inbox/{cur,new,tmp}   <- mailbox (leaf)
#       Sent/{cur,new,tmp}
#
# Nodes are rebuilt on every scan, never patched in place.
# =============================================================================

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator


@dataclass
class MailboxNode:
    """
    A mailbox directory in the scanned tree.

    Attributes:
        path: Absolute path of the directory. Doubles as the node identifier.
        name: Base name of the directory (no unread suffix).
        unread_count: Unread messages in this mailbox and every scanned
                      descendant (see termail.storage.tree).
        children: Child mailboxes in collation order.

    Example:
        >>> node = MailboxNode(path="/mail/Inbox", name="Inbox", unread_count=2)
        >>> node.label
        'Inbox(2)'
    """

    path: str
    name: str
    unread_count: int = 0
    children: list["MailboxNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        """The node identifier (its absolute path)."""
        return self.path

    @property
    def is_leaf(self) -> bool:
        """Returns True if the node has no child mailboxes."""
        return not self.children

    @property
    def label(self) -> str:
        """
        Display label: base name, suffixed with ``(N)`` when N > 0 unread.
        """
        if self.unread_count > 0:
            return f"{self.name}({self.unread_count})"
        return self.name

    def walk(self) -> Iterator["MailboxNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: str) -> "MailboxNode | None":
        """Return the node with the given identifier, or None."""
        for node in self.walk():
            if node.path == node_id:
                return node
        return None

    def parent_of(self, node_id: str) -> "MailboxNode | None":
        """Return the parent of the node with the given identifier, or None."""
        for node in self.walk():
            if any(child.path == node_id for child in node.children):
                return node
        return None

    @classmethod
    def for_path(cls, path: Path) -> "MailboxNode":
        """Create an empty node for a directory path."""
        # Path("/").name is empty
        return cls(path=str(path), name=path.name or str(path))

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return (
            f"MailboxNode(path={self.path!r}, unread={self.unread_count}, "
            f"children={len(self.children)})"
        )
