# =============================================================================
# Mail Index - Messages of One Mailbox
# =============================================================================
# Enumerates the messages of a maildir mailbox into an ordered list of
# MailRecord objects and handles the single mutation the client performs:
# moving an opened message from new/ to cur/.
#
# Ordering:
#   1. Unread (new/) before read (cur/)
#   2. Within each group, newest Date header first
#   3. Remaining ties keep discovery order (file name order per directory)
#
# Only headers are parsed here. Bodies are read on demand by the content
# extractor when a message is opened.
# =============================================================================

import email.errors
import email.header
import email.utils
import logging
import os
from datetime import timezone
from email.message import Message as EmailMessage
from email.parser import BytesHeaderParser
from pathlib import Path

from termail.core import MailRecord, MailRow, ParseError, SelectionError, StorageAccessError

logger = logging.getLogger(__name__)

# Maildir info suffix added when a message moves to cur/ ("2," + Seen flag)
SEEN_INFO = ":2,S"

# Fallbacks for missing envelope headers
NO_SENDER = "No Sender"
NO_SUBJECT = "No Subject"


class MailIndex:
    """
    The sorted message list of one mailbox.

    The index is a snapshot: it reflects the new/cur split at the moment of
    the last load(). mark_read() updates the affected record in place but
    does not re-sort, so rows keep their position for the rest of the
    session.

    Usage:
        >>> index = MailIndex("/home/me/mail/Inbox")
        >>> records = index.load()
        >>> index.mark_read(records[0])
        True

    Attributes:
        path: Mailbox directory (holding new/ and cur/).
        records: Records from the last load, in display order.
    """

    def __init__(self, mailbox_path: str | Path) -> None:
        """
        Initialize an empty index for a mailbox.

        Args:
            mailbox_path: Directory of the mailbox to index.
        """
        self.path = Path(mailbox_path)
        self.records: list[MailRecord] = []

    def __len__(self) -> int:
        return len(self.records)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> list[MailRecord]:
        """
        Read the mailbox and rebuild the record list.

        Messages whose header block can't be parsed, or whose file can't be
        read, are skipped. A missing new/ or cur/ directory counts as empty.

        Returns:
            The records in display order.

        Raises:
            StorageAccessError: If the mailbox itself is missing or one of
                its storage directories cannot be listed.
        """
        if not self.path.is_dir():
            raise StorageAccessError(f"Mailbox not found: {self.path}")

        unread = self._load_subset("new", is_unread=True)
        read = self._load_subset("cur", is_unread=False)

        # sorted() is stable, so ties keep discovery order
        self.records = sorted(unread + read, key=_sort_key)
        logger.debug(
            "Loaded %s: %d unread, %d read", self.path, len(unread), len(read)
        )
        return self.records

    def _load_subset(self, subdir: str, is_unread: bool) -> list[MailRecord]:
        """Build records for every message file in new/ or cur/."""
        directory = self.path / subdir
        try:
            with os.scandir(directory) as entries:
                names = sorted(
                    entry.name for entry in entries
                    if not entry.name.startswith(".") and _is_file(entry)
                )
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageAccessError(f"Cannot read {directory}: {e}") from e

        records = []
        for name in names:
            try:
                records.append(read_record(directory / name, is_unread))
            except ParseError as e:
                logger.warning("Skipping message %s: %s", name, e)
            except OSError as e:
                logger.warning("Skipping unreadable message %s: %s", name, e)
        return records

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def record(self, index: int) -> MailRecord:
        """
        Get the record at a display position.

        Raises:
            SelectionError: If the position is outside the loaded list.
        """
        if not 0 <= index < len(self.records):
            raise SelectionError(
                f"No message at position {index} ({len(self.records)} loaded)"
            )
        return self.records[index]

    def rows(self) -> list[MailRow]:
        """Rows for the mail list table, in display order."""
        return [
            MailRow(
                index=idx,
                timestamp=record.timestamp,
                sender=record.sender,
                subject=record.subject,
                unread=record.is_unread,
            )
            for idx, record in enumerate(self.records)
        ]

    @property
    def unread_count(self) -> int:
        return sum(1 for record in self.records if record.is_unread)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def mark_read(self, record: MailRecord) -> bool:
        """
        Move an unread message from new/ to cur/ and flag it as read.

        The record keeps its position in the index. The caller should rescan
        the mailbox tree when this returns True so unread counts follow.

        Args:
            record: A record of this index.

        Returns:
            True if the message was moved, False if it was already read.

        Raises:
            StorageAccessError: If the file can't be moved. The record is
                left untouched.
        """
        if not record.is_unread:
            return False

        target = self.path / "cur" / f"{record.id}{SEEN_INFO}"
        # rename() silently replaces an existing file
        if target.exists():
            raise StorageAccessError(
                f"Cannot mark message {record.id} as read: {target} already exists"
            )
        try:
            target.parent.mkdir(exist_ok=True)
            record.path.rename(target)
        except OSError as e:
            raise StorageAccessError(
                f"Cannot mark message {record.id} as read: {e}"
            ) from e

        logger.debug("Moved %s to %s", record.path, target)
        record.path = target
        record.is_unread = False
        return True


# =============================================================================
# Header Parsing
# =============================================================================

def read_record(path: Path, is_unread: bool) -> MailRecord:
    """
    Build a MailRecord from a message file's header block.

    Args:
        path: Message file inside new/ or cur/.
        is_unread: Whether the file lives in new/.

    Raises:
        ParseError: If the file has no parseable header at all.
        OSError: If the file can't be read.
    """
    with open(path, "rb") as f:
        headers = BytesHeaderParser().parse(f)

    if not headers.keys():
        raise ParseError("no header block")

    return MailRecord(
        id=message_id_from_name(path.name),
        is_unread=is_unread,
        timestamp=parse_timestamp(headers),
        sender=decode_header(headers.get("From")) or NO_SENDER,
        subject=decode_header(headers.get("Subject")) or NO_SUBJECT,
        path=path,
    )


def message_id_from_name(name: str) -> str:
    """Strip the maildir info suffix (":2,FLAGS") from a file name."""
    return name.split(":", 1)[0]


def parse_timestamp(headers: EmailMessage) -> int:
    """
    Date header as seconds since the epoch, or 0 if missing/malformed.

    Dates without a timezone are taken as UTC.
    """
    date_str = headers.get("Date")
    if not date_str:
        return 0
    try:
        date = email.utils.parsedate_to_datetime(str(date_str))
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        return int(date.timestamp())
    except (TypeError, ValueError, OverflowError, IndexError):
        return 0


def decode_header(value) -> str:
    """Decode an RFC 2047 encoded header value."""
    if value is None:
        return ""
    value = str(value)
    try:
        result = ""
        for part, charset in email.header.decode_header(value):
            if isinstance(part, bytes):
                try:
                    result += part.decode(charset or "utf-8", errors="replace")
                except LookupError:
                    # Unknown charset name
                    result += part.decode("utf-8", errors="replace")
            else:
                result += part
        return " ".join(result.split())
    except email.errors.HeaderParseError:
        return value


def _sort_key(record: MailRecord) -> tuple[bool, int]:
    return (not record.is_unread, -record.timestamp)


def _is_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


def load_mailbox(mailbox_path: str | Path) -> MailIndex:
    """Create and load the index of a mailbox in one step."""
    index = MailIndex(mailbox_path)
    index.load()
    return index
