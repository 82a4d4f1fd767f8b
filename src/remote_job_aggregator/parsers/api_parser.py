import json
import logging
from datetime import UTC, datetime
from typing import Any

from remote_job_aggregator.models import DEFAULT_LOCATION, Job
from remote_job_aggregator.parsers.base import ParseError, build_job, parse_date, strip_query
from remote_job_aggregator.sanitizer import truncate

logger = logging.getLogger(__name__)

MAX_SOURCE_TAGS = 5

# Candidate keys per field, in priority order
TITLE_KEYS = ("title", "position")
COMPANY_KEYS = ("company_name", "company")
URL_KEYS = ("url", "apply_url")
DATE_KEYS = ("publication_date", "date", "created_at", "epoch")
LOCATION_KEYS = ("candidate_required_location", "location")


class ApiParser:
    """
    Parses JSON job board APIs (Remotive, Arbeitnow, RemoteOK style).

    Values are taken as plain text. The listing is read from `listing_field`;
    a root that is itself a list is used directly.
    """

    def __init__(self, listing_field: str = "jobs") -> None:
        self.listing_field = listing_field

    def parse(self, payload: str, source_name: str) -> list[Job]:
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as e:
            raise ParseError(source_name, "malformed-json") from e

        listing = self._find_listing(data)
        if listing is None:
            logger.warning(f"{source_name}: no '{self.listing_field}' list in response")
            return []

        now = datetime.now(tz=UTC)
        jobs: list[Job] = []

        for posting in listing:
            if not isinstance(posting, dict):
                continue
            job = self._parse_posting(posting, source_name, now)
            if job:
                jobs.append(job)

        logger.info(f"{source_name}: {len(jobs)} items extracted")
        return jobs

    def _find_listing(self, data: Any) -> list[Any] | None:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            listing = data.get(self.listing_field)
            if isinstance(listing, list):
                return listing
        return None

    def _parse_posting(self, posting: dict[str, Any], source_name: str, now: datetime) -> Job | None:
        title = self._first_text(posting, TITLE_KEYS)
        url = self._first_text(posting, URL_KEYS)
        if not title or not url:
            return None

        tags = posting.get("tags")
        source_tags = [str(t).strip() for t in tags if t] if isinstance(tags, list) else []

        category = posting.get("category")

        return build_job(
            title=title,
            company=self._first_text(posting, COMPANY_KEYS) or None,
            source=source_name,
            source_url=strip_query(url),
            posted_at=parse_date(self._first_value(posting, DATE_KEYS), now=now),
            location=self._first_text(posting, LOCATION_KEYS) or DEFAULT_LOCATION,
            excerpt=truncate(self._first_text(posting, ("description",))),
            tags=source_tags[:MAX_SOURCE_TAGS],
            source_categories=[category.strip()] if isinstance(category, str) and category.strip() else [],
        )

    @staticmethod
    def _first_value(posting: dict[str, Any], keys: tuple[str, ...]) -> Any:
        for key in keys:
            value = posting.get(key)
            if value not in (None, ""):
                return value
        return None

    def _first_text(self, posting: dict[str, Any], keys: tuple[str, ...]) -> str:
        value = self._first_value(posting, keys)
        if isinstance(value, str):
            return value.strip()
        return ""
