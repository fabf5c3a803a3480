# =============================================================================
# Mail Record Model
# =============================================================================
# Represents one message in a maildir mailbox. The message body is never
# kept in memory: a record only carries the envelope fields needed by the
# mail list plus the location of the message file.
#
# Maildir keeps the read state in the file's location:
#   - new/<id>            unread, never opened by a client
#   - cur/<id>:2,<flags>  read (moved out of new/ when first opened)
# =============================================================================

from dataclasses import dataclass
from pathlib import Path


@dataclass
class MailRecord:
    """
    Represents a message in the currently loaded mailbox.

    Attributes:
        id: Stable maildir unique name (file name up to the ':' separator).
            Survives the move from new/ to cur/.
        is_unread: True while the message file lives in new/.
        timestamp: Date header as seconds since the epoch. Signed, 0 when
                   the header is missing or malformed.
        sender: Decoded From header.
        subject: Decoded Subject header.
        path: Current location of the message file.

    Only termail.storage.index.MailIndex mutates is_unread and path.
    """

    id: str
    is_unread: bool
    timestamp: int
    sender: str
    subject: str
    path: Path

    def read_bytes(self) -> bytes:
        """Read the raw message from its current location."""
        return self.path.read_bytes()

    def __str__(self) -> str:
        marker = "*" if self.is_unread else " "
        return f"{marker} {self.sender}: {self.subject}"


@dataclass(frozen=True)
class MailRow:
    """
    One row of the mail list table handed to the rendering layer.

    Attributes:
        index: Position in the sorted index.
        timestamp: Seconds since the epoch (may be negative or 0).
        sender: From header.
        subject: Subject header.
        unread: Whether the row should be emphasised.
    """
    index: int
    timestamp: int
    sender: str
    subject: str
    unread: bool
