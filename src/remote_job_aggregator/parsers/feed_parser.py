import logging
import re
from datetime import UTC, datetime

from remote_job_aggregator.inference import extract_company
from remote_job_aggregator.models import DEFAULT_LOCATION, Job
from remote_job_aggregator.parsers.base import build_job, parse_date, strip_query
from remote_job_aggregator.sanitizer import sanitize, truncate

logger = logging.getLogger(__name__)

# Lazy match stops each block at its own closing tag
ITEM_RE = re.compile(r"<(item|entry)(?:\s[^>]*)?>([\s\S]*?)</\1>", re.IGNORECASE)
CATEGORY_RE = re.compile(r"<category[^>]*>([\s\S]*?)</category>", re.IGNORECASE)
# Atom: <category term="..."/>
CATEGORY_TERM_RE = re.compile(r"<category[^>]*\bterm=\"([^\"]*)\"", re.IGNORECASE)
ATOM_LINK_RE = re.compile(r"<link\b[^>]*\bhref=\"([^\"]+)\"", re.IGNORECASE)

DATE_TAGS = ("pubDate", "updated", "published", "dc:date")
DESCRIPTION_TAGS = ("description", "content:encoded", "summary", "content")
LINK_FALLBACK_TAGS = ("guid", "id")


class FeedParser:
    """
    Parses RSS 2.0 and Atom feeds into Job records.

    Feeds are matched with regular expressions rather than an XML parser:
    job boards frequently publish feeds that are not well-formed XML.
    """

    def parse(self, payload: str, source_name: str) -> list[Job]:
        if not payload:
            return []

        now = datetime.now(tz=UTC)
        jobs: list[Job] = []

        for match in ITEM_RE.finditer(payload):
            job = self._parse_item(match.group(2), source_name, now)
            if job:
                jobs.append(job)

        logger.info(f"{source_name}: {len(jobs)} items extracted")
        return jobs

    def _parse_item(self, block: str, source_name: str, now: datetime) -> Job | None:
        title = sanitize(self._pick(block, "title"))
        link = self._find_link(block)
        if not title or not link:
            return None

        posted_at = parse_date(self._pick_first(block, DATE_TAGS), now=now)
        raw_description = self._pick_first(block, DESCRIPTION_TAGS)
        description = sanitize(raw_description)

        categories = [sanitize(c) for c in CATEGORY_RE.findall(block)]
        categories += [sanitize(c) for c in CATEGORY_TERM_RE.findall(block)]

        return build_job(
            title=title,
            company=extract_company(title, raw_description),
            source=source_name,
            source_url=strip_query(link),
            posted_at=posted_at,
            location=sanitize(self._pick(block, "location")) or DEFAULT_LOCATION,
            excerpt=truncate(description),
            source_categories=[c for c in categories if c],
        )

    def _find_link(self, block: str) -> str:
        """
        Find the posting URL: <link> text, then an Atom <link href>, then guid/id.
        Only absolute http(s) URLs are accepted.
        """
        candidates = [sanitize(self._pick(block, "link"))]
        atom_link = ATOM_LINK_RE.search(block)
        if atom_link:
            candidates.append(sanitize(atom_link.group(1)))
        candidates += [sanitize(self._pick(block, tag)) for tag in LINK_FALLBACK_TAGS]

        for candidate in candidates:
            if candidate.lower().startswith(("http://", "https://")):
                return candidate
        return ""

    @staticmethod
    def _pick(block: str, tag: str) -> str:
        """Return the raw inner content of the first <tag> element in block."""
        match = re.search(
            rf"<{re.escape(tag)}(?:\s[^>]*)?>([\s\S]*?)</{re.escape(tag)}>",
            block,
            re.IGNORECASE,
        )
        return match.group(1) if match else ""

    def _pick_first(self, block: str, tags: tuple[str, ...]) -> str:
        """Return the first non-empty value among tags, in priority order."""
        for tag in tags:
            value = self._pick(block, tag)
            if value.strip():
                return value
        return ""
