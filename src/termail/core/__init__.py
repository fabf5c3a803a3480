# =============================================================================
# Termail Core Module
# =============================================================================
# This module contains the core domain models for termail. These are pure
# Python dataclasses and enums with no external dependencies, so they can be
# imported anywhere without causing circular imports.
#
# The core models represent:
#   - MailboxNode: A mailbox directory in the scanned tree
#   - MailRecord: A message in the loaded mailbox
#   - MailRow: A mail list row handed to the UI
#   - Panel / Command / FocusState: Input routing vocabulary
#   - Error taxonomy shared by storage, rendering and the state machine
# =============================================================================

from termail.core.errors import (
    ParseError,
    SelectionError,
    StorageAccessError,
    TermailError,
)
from termail.core.focus import Command, CommandKind, Direction, FocusState, Panel
from termail.core.mailbox import MailboxNode
from termail.core.record import MailRecord, MailRow

__all__ = [
    "MailboxNode",
    "MailRecord",
    "MailRow",
    "Panel",
    "Direction",
    "CommandKind",
    "Command",
    "FocusState",
    "TermailError",
    "StorageAccessError",
    "ParseError",
    "SelectionError",
]
