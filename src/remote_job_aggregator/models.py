import hashlib
import re
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator, model_validator

MAX_TAGS = 6
DEFAULT_LOCATION = "Remote"

CATEGORIES = (
    "customer-service",
    "marketing",
    "sales",
    "writing",
    "design",
    "development",
    "data",
    "virtual-assistant",
    "project-management",
    "other",
)


def unique_tags(tags: list[str]) -> list[str]:
    """Deduplicate tags preserving first-seen order, capped at MAX_TAGS."""
    seen: set[str] = set()
    unique: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            unique.append(tag)
    return unique[:MAX_TAGS]


def _normalize_key(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip().lower()


class SourceDescriptor(BaseModel):
    """Static description of one external feed and how to parse it."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    kind: Literal["rss", "json"]
    # Key holding the list of postings in a JSON API response
    listing_field: str = "jobs"


class Job(BaseModel):
    """
    Canonical, normalized job posting.
    All parsers must return instances of this model.
    """

    title: str
    company: str | None = None
    source: str
    source_url: HttpUrl
    posted_at: datetime
    location: str = DEFAULT_LOCATION
    excerpt: str = ""
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    # Free-text categories supplied by the source, only used for inference
    source_categories: list[str] = Field(default_factory=list, exclude=True)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("posted_at")
    @classmethod
    def _posted_at_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str | None) -> str | None:
        if value is not None and value not in CATEGORIES:
            raise ValueError(f"unknown category '{value}'")
        return value

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        return unique_tags(value)

    @property
    def fingerprint(self) -> str:
        """Content hash of title and URL, used only to detect duplicates."""
        key = f"{_normalize_key(self.title)}|{_normalize_key(str(self.source_url))}"
        return hashlib.md5(key.encode("utf-8")).hexdigest()


class ResultDocument(BaseModel):
    """The single artifact produced by one pipeline run."""

    updated_at: datetime
    total_jobs: int
    sources: list[str]
    jobs: list[Job]

    @model_validator(mode="after")
    def _total_matches_jobs(self) -> "ResultDocument":
        if self.total_jobs != len(self.jobs):
            raise ValueError(
                f"total_jobs ({self.total_jobs}) does not match number of jobs ({len(self.jobs)})"
            )
        return self
