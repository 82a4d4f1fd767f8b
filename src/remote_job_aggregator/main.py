import argparse
import asyncio
import logging
import sys

from remote_job_aggregator.config import (
    BEGINNER_FILTER,
    ENABLED_SOURCES,
    HTTP_TIMEOUT,
    MAX_JOBS,
    OUTPUT_PATH,
    USER_AGENT,
)
from remote_job_aggregator.output import write_document
from remote_job_aggregator.pipeline import run_pipeline
from remote_job_aggregator.sources import select_sources

# Set up logging once, in the application entry point only
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO
)
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="remote-job-aggregator",
        description=(
            "Fetch remote job feeds, normalize and deduplicate postings, "
            "and write a single JSON document."
        ),
    )

    parser.add_argument(
        "--output",
        default=None,
        metavar="PATH",
        help="Output JSON path (overrides OUTPUT_PATH env var).",
    )
    parser.add_argument(
        "--max-jobs",
        type=int,
        default=None,
        metavar="N",
        help="Maximum number of jobs to keep (overrides MAX_JOBS env var).",
    )
    parser.add_argument(
        "--source",
        action="append",
        dest="sources",
        default=None,
        metavar="NAME",
        help="Only fetch this source. Can be given multiple times.",
    )
    parser.add_argument(
        "--no-beginner-filter",
        action="store_true",
        help="Keep all jobs instead of only beginner-friendly ones.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)


def cli(argv: list[str] | None = None) -> None:
    """CLI entry point for the package."""
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Determine limit: CLI flag > env var > default (2000)
    if args.max_jobs is not None:
        if args.max_jobs <= 0:
            logger.error("--max-jobs must be a positive integer.")
            sys.exit(1)
        max_jobs = args.max_jobs
    else:
        max_jobs = MAX_JOBS

    sources = select_sources(args.sources or ENABLED_SOURCES)
    if not sources:
        logger.error("No known sources selected.")
        sys.exit(1)

    output_path = args.output or OUTPUT_PATH
    beginner_filter = BEGINNER_FILTER and not args.no_beginner_filter

    document = asyncio.run(
        run_pipeline(
            sources,
            max_jobs=max_jobs,
            beginner_filter=beginner_filter,
            user_agent=USER_AGENT,
            timeout=HTTP_TIMEOUT,
        )
    )

    try:
        write_document(document, output_path)
    except OSError as e:
        logger.error(f"Error writing {output_path}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
