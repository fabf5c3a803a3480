# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the termail test suite.
#
# Maildir fixtures are real directories in a temporary location. The sample
# store used by most tests looks like this:
#
#   mail/
#     personal/
#       Inbox/   new: a (t=100), b (t=200)   cur: c:2,S (t=50)
#       Sent/    empty
#     work/
#       Archive/ new: d (t=300)
# =============================================================================

import email.utils
import tempfile
from pathlib import Path

import pytest


def build_message(
    subject: str | None = "Hello",
    sender: str | None = "Alice <alice@example.com>",
    timestamp: int | None = 100,
    body: str = "Hello there.",
    date: str | None = None,
) -> bytes:
    """Build a minimal single-part plain-text message."""
    headers = []
    if sender is not None:
        headers.append(f"From: {sender}")
    headers.append("To: me@example.com")
    if subject is not None:
        headers.append(f"Subject: {subject}")
    if date is None and timestamp is not None:
        date = email.utils.formatdate(timestamp, usegmt=True)
    if date is not None:
        headers.append(f"Date: {date}")
    headers.append("Content-Type: text/plain; charset=utf-8")
    return ("\n".join(headers) + "\n\n" + body + "\n").encode("utf-8")


def make_mailbox(
    path: Path,
    new: dict[str, bytes] | None = None,
    cur: dict[str, bytes] | None = None,
) -> Path:
    """Create a maildir with the given new/ and cur/ messages."""
    for subdir in ("cur", "new", "tmp"):
        (path / subdir).mkdir(parents=True, exist_ok=True)
    for name, raw in (new or {}).items():
        (path / "new" / name).write_bytes(raw)
    for name, raw in (cur or {}).items():
        (path / "cur" / name).write_bytes(raw)
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def message_factory():
    """Builder for raw plain-text messages."""
    return build_message


@pytest.fixture
def mailbox_factory():
    """Builder for maildir directories."""
    return make_mailbox


@pytest.fixture
def mail_store(temp_dir):
    """Create the sample mail store described at the top of this file."""
    root = temp_dir / "mail"

    make_mailbox(
        root / "personal" / "Inbox",
        new={
            "a": build_message(subject="A", timestamp=100, body="Message A"),
            "b": build_message(subject="B", timestamp=200, body="Message B"),
        },
        cur={
            "c:2,S": build_message(subject="C", timestamp=50, body="Message C"),
        },
    )
    make_mailbox(root / "personal" / "Sent")
    make_mailbox(
        root / "work" / "Archive",
        new={"d": build_message(subject="D", timestamp=300, body="Message D")},
    )
    return root


@pytest.fixture
def inbox(mail_store):
    """Path of the sample Inbox mailbox."""
    return mail_store / "personal" / "Inbox"


@pytest.fixture
def sample_html_email():
    """Sample HTML email content for rendering tests."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Newsletter</title>
        <style>
            body { font-family: Arial, sans-serif; }
        </style>
    </head>
    <body>
        <div class="header">
            <h1>Welcome to Our Newsletter!</h1>
        </div>
        <div class="content">
            <p>Hello <strong>User</strong>,</p>
            <ul>
                <li>Bold text: <b>bold</b></li>
                <li>Links: <a href="https://example.com">Click here</a></li>
            </ul>
            <p>First line<br>Second line</p>
        </div>
        <script>trackOpen();</script>
    </body>
    </html>
    """
