import os
from datetime import UTC, datetime

import pytest

# Set environment variables for tests before any imports happen
os.environ["OUTPUT_PATH"] = "test-output/jobs.json"
os.environ["BEGINNER_FILTER"] = "true"
os.environ["ENABLED_SOURCES"] = ""

from remote_job_aggregator.models import Job, SourceDescriptor  # noqa: E402

SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
<channel>
    <title>Remote Jobs</title>
    <link>https://example.com</link>
    <item>
        <title>Customer Support Rep</title>
        <link>https://example.com/job/1?ref=abc</link>
        <pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>
        <description>Entry level support role.</description>
    </item>
    <item>
        <title><![CDATA[Junior Data Analyst at DataCo]]></title>
        <link>https://example.com/job/2</link>
        <pubDate>Tue, 02 Jan 2024 09:30:00 GMT</pubDate>
        <category>Data</category>
        <description><![CDATA[<p>Work with <b>SQL</b> &amp; dashboards.</p>]]></description>
    </item>
</channel>
</rss>
"""


@pytest.fixture
def sample_rss():
    """A small RSS 2.0 feed with two job items."""
    return SAMPLE_RSS


@pytest.fixture
def make_job():
    """Factory for Job records with sensible defaults."""

    def _make_job(**overrides) -> Job:
        fields = {
            "title": "Virtual Assistant",
            "source": "Test Feed",
            "source_url": "https://example.com/job/va",
            "posted_at": datetime(2024, 1, 1, tzinfo=UTC),
            "excerpt": "Help our team with scheduling.",
        }
        fields.update(overrides)
        return Job(**fields)

    return _make_job


@pytest.fixture
def rss_source():
    return SourceDescriptor(name="Test RSS", url="https://feeds.example.com/rss", kind="rss")


@pytest.fixture
def json_source():
    return SourceDescriptor(
        name="Test API", url="https://api.example.com/jobs", kind="json", listing_field="jobs"
    )
