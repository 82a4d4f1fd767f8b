import logging

from remote_job_aggregator.models import SourceDescriptor

logger = logging.getLogger(__name__)

# Public feeds that allow republishing
SOURCES: tuple[SourceDescriptor, ...] = (
    SourceDescriptor(name="Remote OK - All", kind="rss", url="https://remoteok.com/rss"),
    SourceDescriptor(name="Remote.co - All", kind="rss", url="https://remote.co/remote-jobs/feed/"),
    SourceDescriptor(name="Jobicy - All", kind="rss", url="https://jobicy.com/feed"),
    SourceDescriptor(name="Himalayas - Jobs", kind="rss", url="https://himalayas.app/jobs/rss"),
    SourceDescriptor(name="We Work Remotely", kind="rss", url="https://weworkremotely.com/remote-jobs.rss"),
    SourceDescriptor(name="AngelList Remote", kind="rss", url="https://angel.co/jobs.rss?remote=true"),
    SourceDescriptor(
        name="Remotive API",
        kind="json",
        url="https://remotive.com/api/remote-jobs",
        listing_field="jobs",
    ),
    SourceDescriptor(
        name="Arbeitnow API",
        kind="json",
        url="https://www.arbeitnow.com/api/job-board-api",
        listing_field="data",
    ),
)


def select_sources(
    names: list[str] | None = None,
    catalogue: tuple[SourceDescriptor, ...] = SOURCES,
) -> list[SourceDescriptor]:
    """
    Return the descriptors whose names are listed, in catalogue order.
    An empty or missing selection returns the whole catalogue.
    """
    if not names:
        return list(catalogue)

    wanted = {name.strip().lower() for name in names}
    selected = [source for source in catalogue if source.name.lower() in wanted]

    known = {source.name.lower() for source in catalogue}
    for name in sorted(wanted - known):
        logger.warning(f"Unknown source '{name}' ignored")

    return selected
