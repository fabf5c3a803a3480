# =============================================================================
# Message Content Extraction
# =============================================================================
# Turns a raw RFC 822 message into the lines shown in the mail body panel.
#
# The body is walked depth-first:
#   - text/plain leaf: payload taken verbatim (transfer encoding undone)
#   - text/html leaf: markup stripped with BeautifulSoup, text kept
#   - any other leaf (images, attachments, ...): no text
#   - multipart/alternative: one alternative is chosen (plain text wins
#     by default, see ExtractOptions.prefer_plain)
#   - any other multipart: every part, in order
#
# The result is split into lines, each line trimmed, empty lines dropped.
# Extraction is best-effort: broken structures give partial or empty output.
# =============================================================================

import email
import logging
from dataclasses import dataclass
from email.message import Message as EmailMessage

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

PLAIN_TEXT = "text/plain"
MARKUP_TEXT = "text/html"


@dataclass
class ExtractOptions:
    """
    Options for content extraction.

    Attributes:
        prefer_plain: In multipart/alternative, take the text/plain
                      alternative when it has content. When False, the last
                      alternative with content wins (the RFC 2046 "richest
                      last" order), usually the HTML one.
        skip_attachments: Parts with Content-Disposition: attachment yield
                          no text even when they are text/plain.
    """
    prefer_plain: bool = True
    skip_attachments: bool = True


class ContentExtractor:
    """
    Extracts displayable text lines from raw messages.

    Usage:
        >>> extractor = ContentExtractor()
        >>> extractor.extract(b"Subject: hi\\n\\n  Hello  \\n\\nWorld\\n")
        ['Hello', 'World']
    """

    # Elements whose text content is never shown
    SKIP_ELEMENTS = ["script", "style", "head", "title", "meta", "link", "noscript"]

    # Elements that start and end a line of text
    BLOCK_ELEMENTS = [
        "p", "div", "table", "tr", "li", "ul", "ol", "dl", "dt", "dd",
        "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre", "hr",
        "section", "article", "header", "footer", "address",
    ]

    def __init__(self, options: ExtractOptions | None = None) -> None:
        """
        Initialize the extractor.

        Args:
            options: Extraction options.
        """
        self.options = options or ExtractOptions()

    def extract(self, raw_message: bytes) -> list[str]:
        """
        Extract the body of a raw message as trimmed, non-empty lines.

        Args:
            raw_message: Complete message bytes (headers and body).

        Returns:
            The body lines. Empty if nothing displayable was found.
        """
        try:
            message = email.message_from_bytes(raw_message)
            text = self._part_text(message)
        except Exception as e:
            # The email package is lenient, but decoders below it are not
            logger.error(f"Error extracting message body: {e}")
            return []

        return split_lines(text)

    # -------------------------------------------------------------------------
    # Part Walk
    # -------------------------------------------------------------------------

    def _part_text(self, part: EmailMessage) -> str:
        """Recursively collect the text of a part and its sub-parts."""
        if part.is_multipart():
            subparts = part.get_payload()
            if not isinstance(subparts, list):
                return ""
            if part.get_content_type() == "multipart/alternative":
                return self._alternative_text(subparts)
            return "\n".join(self._part_text(sub) for sub in subparts)

        if self.options.skip_attachments and _is_attachment(part):
            return ""

        content_type = part.get_content_type()
        if content_type == PLAIN_TEXT:
            return decode_part(part)
        if content_type == MARKUP_TEXT:
            return strip_markup(decode_part(part))
        return ""

    def _alternative_text(self, alternatives: list[EmailMessage]) -> str:
        """Pick the text of one alternative."""
        texts = [(alt, self._part_text(alt)) for alt in alternatives]

        if self.options.prefer_plain:
            for alt, text in texts:
                if alt.get_content_type() == PLAIN_TEXT and text.strip():
                    return text

        for _, text in reversed(texts):
            if text.strip():
                return text
        return ""


# =============================================================================
# Helpers
# =============================================================================

def decode_part(part: EmailMessage) -> str:
    """Decode a leaf part's payload to a string."""
    payload = part.get_payload(decode=True)
    if isinstance(payload, bytes):
        # Try the declared charset, fall back to UTF-8
        charset = part.get_content_charset() or "utf-8"
        try:
            return payload.decode(charset, errors="replace")
        except (LookupError, UnicodeDecodeError):
            return payload.decode("utf-8", errors="replace")
    return str(payload) if payload else ""


def strip_markup(html: str) -> str:
    """
    Remove all markup from an HTML document and keep its text nodes.

    Block elements and <br> break lines so paragraphs don't run together.
    """
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(html, "lxml")

    for element in soup.find_all(ContentExtractor.SKIP_ELEMENTS):
        # Already gone with an enclosing skipped element (e.g. <title> in <head>)
        if not element.decomposed:
            element.decompose()

    for br in soup.find_all("br"):
        br.replace_with("\n")

    for block in soup.find_all(ContentExtractor.BLOCK_ELEMENTS):
        block.insert_before("\n")
        block.insert_after("\n")

    # get_text() skips comments, doctypes and processing instructions
    return soup.get_text()


def split_lines(text: str) -> list[str]:
    """Split text into lines, trim each, and drop the empty ones."""
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if line:
            lines.append(line)
    return lines


def _is_attachment(part: EmailMessage) -> bool:
    disposition = part.get_content_disposition()
    return disposition == "attachment"


_default_extractor = ContentExtractor()


def extract_text(raw_message: bytes) -> list[str]:
    """Extract body lines using the default options."""
    return _default_extractor.extract(raw_message)
