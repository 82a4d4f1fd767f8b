import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any, Protocol
from urllib.parse import urlsplit, urlunsplit

from pydantic import ValidationError

from remote_job_aggregator.models import Job

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when a payload cannot be parsed in the expected shape."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to parse payload from {source}: {reason}")


class SourceParser(Protocol):
    """Maps a raw payload from one source into Job records."""

    def parse(self, payload: str, source_name: str) -> list[Job]: ...


def strip_query(url: str) -> str:
    """Drop query string and fragment so tracking parameters don't split duplicates."""
    parts = urlsplit(url.strip())
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def parse_date(value: Any, now: datetime | None = None) -> datetime:
    """
    Parse an RFC 822, ISO-8601 or epoch timestamp.
    Falls back to `now` (ingestion time) when the value is missing or unparsable.
    """
    fallback = now or datetime.now(tz=UTC)

    if isinstance(value, bool) or value is None:
        return fallback

    if isinstance(value, int | float):
        ts = float(value)
        # Some APIs return epoch milliseconds
        if ts > 1e12:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return fallback

    if not isinstance(value, str) or not value.strip():
        return fallback

    text = value.strip()
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparsable date '{text}', using ingestion time")
            return fallback

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def build_job(**fields: Any) -> Job | None:
    """Validate a record, returning None when it fails required-field checks."""
    try:
        return Job(**fields)
    except ValidationError as e:
        logger.debug(f"Dropped record from {fields.get('source')}: {e.error_count()} validation errors")
        return None
