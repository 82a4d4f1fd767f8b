import asyncio
import logging
from collections.abc import Iterable
from datetime import UTC, datetime

import httpx

from remote_job_aggregator.filters import BeginnerFilter
from remote_job_aggregator.inference import categorize, combined_text, extract_company, generate_tags
from remote_job_aggregator.models import Job, ResultDocument, SourceDescriptor, unique_tags
from remote_job_aggregator.parsers.api_parser import ApiParser
from remote_job_aggregator.parsers.base import ParseError, SourceParser
from remote_job_aggregator.parsers.feed_parser import FeedParser
from remote_job_aggregator.transport import FEED_ACCEPT, JSON_ACCEPT, FetchError, fetch_body

logger = logging.getLogger(__name__)

MAX_JOBS = 2000
MAX_CONCURRENCY = 4
HTTP_TIMEOUT = 20.0  # seconds

ACCEPT_BY_KIND = {"rss": FEED_ACCEPT, "json": JSON_ACCEPT}


def get_parser(source: SourceDescriptor) -> SourceParser:
    """Select the parser for a source by its kind."""
    if source.kind == "json":
        return ApiParser(listing_field=source.listing_field)
    return FeedParser()


async def fetch_source(
    client: httpx.AsyncClient,
    source: SourceDescriptor,
    user_agent: str | None = None,
) -> list[Job]:
    """
    Fetch and parse one source. Failures are logged and yield no jobs,
    so one broken feed never aborts the run.
    """
    logger.info(f"Processing source: {source.name}")
    try:
        body = await fetch_body(client, source.url, accept=ACCEPT_BY_KIND[source.kind], user_agent=user_agent)
        return get_parser(source).parse(body, source.name)
    except FetchError as e:
        logger.error(f"Source error {source.name}: {e}")
    except ParseError as e:
        logger.error(f"Source error {source.name}: {e.reason}")
    except Exception as e:
        logger.error(f"Unexpected error processing {source.name}: {e}")
    return []


async def collect(
    client: httpx.AsyncClient,
    sources: list[SourceDescriptor],
    user_agent: str | None = None,
    max_concurrency: int = MAX_CONCURRENCY,
) -> list[Job]:
    """Fetch all sources with bounded concurrency and merge results in source order."""
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _bounded(source: SourceDescriptor) -> list[Job]:
        async with semaphore:
            return await fetch_source(client, source, user_agent=user_agent)

    results = await asyncio.gather(*(_bounded(source) for source in sources))

    merged: list[Job] = []
    for jobs in results:
        merged.extend(jobs)
    return merged


def enrich(job: Job, beginner_filter: BeginnerFilter | None = None) -> Job | None:
    """
    Fill in company, category and tags from the posting text.
    Returns None when the beginner filter rejects the job.
    """
    text = combined_text(job.title, job.excerpt, job.source_categories)

    if beginner_filter is not None and not beginner_filter.is_beginner_friendly(text):
        return None

    category = categorize(text)
    tags = generate_tags(text, category) + job.tags

    return job.model_copy(
        update={
            "company": job.company or extract_company(job.title),
            "category": category,
            # model_copy does not validate
            "tags": unique_tags(tags),
        }
    )


def dedupe(jobs: Iterable[Job]) -> list[Job]:
    """Drop later jobs whose fingerprint was already seen, keeping first-seen order."""
    seen: set[str] = set()
    unique: list[Job] = []
    for job in jobs:
        fingerprint = job.fingerprint
        if fingerprint in seen:
            continue
        seen.add(fingerprint)
        unique.append(job)
    return unique


def sort_jobs(jobs: list[Job]) -> list[Job]:
    """Sort jobs by posted_at, most recent first. Ties keep their order."""
    return sorted(jobs, key=lambda j: j.posted_at, reverse=True)


def truncate_jobs(jobs: list[Job], limit: int = MAX_JOBS) -> list[Job]:
    return jobs[:limit]


def build_document(jobs: list[Job], sources: list[SourceDescriptor]) -> ResultDocument:
    return ResultDocument(
        updated_at=datetime.now(tz=UTC),
        total_jobs=len(jobs),
        sources=[source.name for source in sources],
        jobs=jobs,
    )


async def run_pipeline(
    sources: list[SourceDescriptor],
    max_jobs: int = MAX_JOBS,
    beginner_filter: bool = True,
    user_agent: str | None = None,
    timeout: float = HTTP_TIMEOUT,
) -> ResultDocument:
    """Run one fetch-parse-enrich-dedupe-sort-truncate cycle and return the result document."""
    logger.info("Starting job fetch process...")

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=False) as client:
        raw_jobs = await collect(client, sources, user_agent=user_agent)
    logger.info(f"Total raw jobs collected: {len(raw_jobs)}")

    job_filter = BeginnerFilter() if beginner_filter else None
    enriched = [job for job in (enrich(j, job_filter) for j in raw_jobs) if job is not None]
    if job_filter is not None:
        logger.info(f"Beginner-friendly jobs: {len(enriched)}")

    jobs = dedupe(enriched)
    logger.info(f"After deduplication: {len(jobs)}")

    jobs = truncate_jobs(sort_jobs(jobs), limit=max_jobs)
    logger.info(f"Final job count: {len(jobs)}")

    return build_document(jobs, sources)
