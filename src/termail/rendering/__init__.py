# =============================================================================
# Rendering Module
# =============================================================================
# Turns raw messages into the plain text lines shown in the body panel.
#
# The terminal only ever shows text, so every MIME structure ends up as a
# list of trimmed lines:
#   - text/plain parts are shown as they are
#   - text/html parts are stripped down to their text (BeautifulSoup + lxml)
#   - everything else (images, attachments) is left out
# =============================================================================

from termail.rendering.text import ContentExtractor, ExtractOptions, extract_text

__all__ = ["ContentExtractor", "ExtractOptions", "extract_text"]
