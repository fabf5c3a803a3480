# =============================================================================
# Error Taxonomy
# =============================================================================
# All recoverable errors raised by the core. The focus state machine catches
# TermailError around user-initiated actions and shows the message in the
# error overlay; batch operations (scan, load) catch per entry and continue.
#
# Configuration errors live in termail.config next to the code raising them.
# =============================================================================


class TermailError(Exception):
    """Base exception for recoverable termail errors."""
    pass


class StorageAccessError(TermailError):
    """Raised when a directory or message file cannot be read or moved."""
    pass


class ParseError(TermailError):
    """Raised when a message header block cannot be parsed."""
    pass


class SelectionError(TermailError):
    """Raised when a selection refers to a stale or out-of-range entry."""
    pass
