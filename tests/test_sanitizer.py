import warnings

import pytest

from remote_job_aggregator.sanitizer import EXCERPT_LENGTH, sanitize, truncate


@pytest.mark.parametrize(
    "fragment, expected",
    [
        ("<p>Hello <b>world</b></p>", "Hello world"),
        ("<![CDATA[Support Specialist]]>", "Support Specialist"),
        ("<![CDATA[<p>Remote &amp; flexible</p>]]>", "Remote & flexible"),
        ("Tom &amp; Jerry", "Tom & Jerry"),
        ("&lt;3 years&gt;", "<3 years>"),
        ("&quot;quoted&quot; &#39;single&#39;", "\"quoted\" 'single'"),
        ("a&nbsp;b", "a b"),
        ("2020&mdash;2024 &ndash; now&hellip;", "2020—2024 – now…"),
        ("  lots \n\n of\t whitespace  ", "lots of whitespace"),
        ("line<br/>break", "line break"),
        ("", ""),
        (None, ""),
    ],
)
def test_sanitize(fragment, expected):
    """Test tag stripping, entity decoding and whitespace collapsing."""
    assert sanitize(fragment) == expected


def test_sanitize_plain_url_is_kept():
    assert sanitize("https://example.com/job/1") == "https://example.com/job/1"


def test_sanitize_url_like_input_does_not_warn():
    """Test that the locator warning is silenced inside sanitize only."""
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert sanitize("https://example.com/job/1") == "https://example.com/job/1"


def test_truncate_short_text_unchanged():
    assert truncate("Short description.") == "Short description."


def test_truncate_long_text_at_word_boundary():
    """Test that long text is cut on a word boundary and gets an ellipsis."""
    text = "word " * 100
    result = truncate(text)

    assert result.endswith("...")
    assert len(result) <= EXCERPT_LENGTH + 3
    assert not result[:-3].endswith(" ")
    assert result[:-3].split(" ")[-1] == "word"


def test_truncate_exact_limit_unchanged():
    text = "x" * EXCERPT_LENGTH
    assert truncate(text) == text


def test_truncate_custom_limit():
    assert truncate("one two three four", limit=9) == "one two..."
