"""
Heuristic field inference for job postings.

Company, category and tags are derived from free text when a source does not
supply them. Category and tag rules are ordered tables evaluated first-match
wins, so rules can be tested and extended independently. Reordering
CATEGORY_RULES changes classification results.
"""

import re

from bs4 import BeautifulSoup

from remote_job_aggregator.filters import BeginnerFilter
from remote_job_aggregator.models import MAX_TAGS

MAX_COMPANY_LENGTH = 50
OTHER_CATEGORY = "other"

_NAME = r"([A-Z][\w&.,' ]*?)"
_NAME_END = r"(?:\s*[-–—|(]|\s*$)"

COMPANY_PATTERNS = [
    # "Support Specialist at Acme Inc"
    re.compile(r"\s(?i:at)\s+" + _NAME + _NAME_END),
    # "Support Specialist | Acme Inc"
    re.compile(r"\|\s*" + _NAME + _NAME_END),
    # "Support Specialist - Acme Inc"
    re.compile(r"\s-\s+" + _NAME + _NAME_END),
]
DASH_SEPARATOR_RE = re.compile(r"\s+[-–—]\s+")

CATEGORY_RULES: list[tuple[str, re.Pattern[str]]] = [
    ("customer-service", re.compile(r"customer.service|support|help.?desk|customer.success")),
    ("marketing", re.compile(r"marketing|social.media|\bseo\b|content.marketing|digital.marketing")),
    ("sales", re.compile(r"\bsales\b|account.manager|business.development|\bsdr\b|\bbdr\b")),
    ("writing", re.compile(r"writer|content|copywriter|editor|\bblog|technical.writer")),
    ("design", re.compile(r"design|\bui\b|\bux\b|graphic|visual|figma|sketch")),
    ("development", re.compile(r"developer|programmer|engineer|coding|software|frontend|backend")),
    ("data", re.compile(r"\bdata\b|analyst|analytics|\bsql\b|excel|tableau|\bbi\b")),
    ("virtual-assistant", re.compile(r"virtual.assistant|\bva\b|\badmin\b|assistant|administrative")),
    ("project-management", re.compile(r"project.manager|coordinator|scrum|agile|project.coordinator")),
]

EXPERIENCE_TAG_RULES: list[tuple[str, re.Pattern[str]]] = [
    ("junior", re.compile(r"\bjunior\b|1-2.years")),
    ("senior", re.compile(r"\b(?:senior|sr|lead|principal)\b")),
]

# Mutually exclusive, first match wins
EMPLOYMENT_TYPE_RULES: list[tuple[str, re.Pattern[str]]] = [
    ("part-time", re.compile(r"part.?time|parttime")),
    ("contract", re.compile(r"contract|contractor|freelance")),
    ("internship", re.compile(r"\bintern\b|internship")),
]
DEFAULT_EMPLOYMENT_TYPE = "full-time"

NO_EXPERIENCE_RE = re.compile(r"no.experience|entry.level|beginner")

_beginner_filter = BeginnerFilter()


def combined_text(*parts: str | list[str] | None) -> str:
    """Join title, description and category text into one lower-cased string for matching."""
    chunks: list[str] = []
    for part in parts:
        if not part:
            continue
        if isinstance(part, list):
            chunks.extend(part)
        else:
            chunks.append(part)
    return " ".join(chunks).lower()


def extract_company(title: str, description: str | None = None) -> str | None:
    """
    Guess the hiring company from title patterns, then from the first
    emphasized span of the description markup. Returns None when nothing fits.
    """
    for pattern in COMPANY_PATTERNS:
        match = pattern.search(title)
        if match:
            name = match.group(1).strip(" .,")
            if name and len(name) < MAX_COMPANY_LENGTH:
                return name

    segments = DASH_SEPARATOR_RE.split(title.strip(), maxsplit=1)
    if len(segments) == 2:
        name = segments[0].strip()
        if name and len(name) < MAX_COMPANY_LENGTH:
            return name

    if description:
        return _emphasized_name(description)
    return None


def _emphasized_name(markup: str) -> str | None:
    markup = markup.replace("<![CDATA[", "").replace("]]>", "")
    soup = BeautifulSoup(markup, "html.parser")
    # Entity-escaped HTML decodes to markup on the first pass
    if not soup.find(["strong", "b"]) and "<" in soup.get_text():
        soup = BeautifulSoup(soup.get_text(), "html.parser")

    tag = soup.find(["strong", "b"])
    if tag is None:
        return None
    name = tag.get_text(" ", strip=True)
    if name and len(name) < MAX_COMPANY_LENGTH:
        return name
    return None


def categorize(text: str) -> str:
    """Return the first matching category for the text, or 'other'."""
    text = text.lower()
    for category, pattern in CATEGORY_RULES:
        if pattern.search(text):
            return category
    return OTHER_CATEGORY


def generate_tags(text: str, category: str) -> list[str]:
    """
    Build an ordered, deduplicated tag list, most salient first.
    Earlier tags survive the MAX_TAGS cap.
    """
    text = text.lower()
    tags: list[str] = []

    if _beginner_filter.has_beginner_keyword(text):
        tags.append("entry-level")
    for tag, pattern in EXPERIENCE_TAG_RULES:
        if pattern.search(text):
            tags.append(tag)

    for tag, pattern in EMPLOYMENT_TYPE_RULES:
        if pattern.search(text):
            tags.append(tag)
            break
    else:
        tags.append(DEFAULT_EMPLOYMENT_TYPE)

    tags.append("remote")

    if category != OTHER_CATEGORY:
        tags.append(category)

    if NO_EXPERIENCE_RE.search(text):
        tags.append("no-experience")

    return list(dict.fromkeys(tags))[:MAX_TAGS]
