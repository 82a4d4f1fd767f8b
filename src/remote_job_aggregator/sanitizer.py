import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

EXCERPT_LENGTH = 200

_CDATA_RE = re.compile(r"<!\[CDATA\[|\]\]>")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize(fragment: str | None) -> str:
    """
    Convert an HTML/XML fragment into plain text.

    Removes CDATA markers and tags, decodes HTML entities and collapses
    whitespace (non-breaking spaces included) into single spaces.
    """
    if not fragment:
        return ""

    text = _CDATA_RE.sub("", fragment)
    # Feed descriptions are sometimes just a URL or a file name
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        text = BeautifulSoup(text, "html.parser").get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate(text: str, limit: int = EXCERPT_LENGTH) -> str:
    """Truncate text at the last word boundary within limit, appending '...'."""
    text = text.strip()
    if len(text) <= limit:
        return text
    cut = text[:limit].rsplit(" ", 1)[0].rstrip()
    return cut + "..."
