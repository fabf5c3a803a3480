# =============================================================================
# Mailbox Tree Widget
# =============================================================================
# A hierarchical view of the scanned mailbox directories.
#
# Features:
#   - One node per mailbox directory, labelled "Name(unread)"
#   - Expansion state and cursor mirror the focus state machine
#   - Rebuilt only when the tree or its expansion state changes
#
# The widget never takes keyboard focus: keys are handled at the app level
# and turned into state machine commands. This widget only draws.
# =============================================================================

from rich.text import Text
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from termail.core import MailboxNode


class MailboxTreeView(Tree[str]):
    """
    A tree widget displaying mailbox directories.

    Node data is the mailbox identifier (its absolute path).

    Usage:
        >>> tree = MailboxTreeView(id="mailbox-tree")
        >>> tree.show(root, expanded={root.id}, cursor=0)
    """

    can_focus = False

    def __init__(self, label: str = "Mailboxes", **kwargs) -> None:
        """
        Initialize the mailbox tree.

        Args:
            label: Root label shown until the first scan is drawn.
            **kwargs: Additional arguments passed to Tree.
        """
        super().__init__(label, **kwargs)
        self.auto_expand = False
        self.show_root = True
        self._signature: tuple | None = None

    def show(self, root: MailboxNode, expanded: set[str], cursor: int) -> None:
        """
        Draw a mailbox tree.

        Args:
            root: Root of the scanned tree.
            expanded: Identifiers of expanded nodes.
            cursor: Position of the selected node among the visible ones.
        """
        signature = (id(root), frozenset(expanded))
        if signature != self._signature:
            self._rebuild(root, expanded)
            self._signature = signature

        self.cursor_line = cursor

    def _rebuild(self, root: MailboxNode, expanded: set[str]) -> None:
        """Replace every node with the given tree."""
        self.clear()
        self.root.set_label(Text(root.label))
        self.root.data = root.id
        self._add_children(self.root, root, expanded)

        if root.id in expanded:
            self.root.expand()
        else:
            self.root.collapse()

    def _add_children(
        self,
        parent: TreeNode,
        mailbox: MailboxNode,
        expanded: set[str],
    ) -> None:
        for child in mailbox.children:
            label = Text(child.label)
            if child.is_leaf:
                parent.add_leaf(label, data=child.id)
            else:
                node = parent.add(label, data=child.id, expand=child.id in expanded)
                self._add_children(node, child, expanded)
