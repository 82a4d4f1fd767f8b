from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest

from remote_job_aggregator.main import cli, parse_args
from remote_job_aggregator.models import ResultDocument
from remote_job_aggregator.sources import SOURCES

EMPTY_DOCUMENT = ResultDocument(
    updated_at=datetime(2024, 1, 1, tzinfo=UTC),
    total_jobs=0,
    sources=[],
    jobs=[],
)


# --- parse_args ---


def test_parse_args_defaults():
    args = parse_args([])

    assert args.output is None
    assert args.max_jobs is None
    assert args.sources is None
    assert args.no_beginner_filter is False
    assert args.verbose is False


def test_parse_args_all_flags():
    args = parse_args(
        [
            "--output",
            "out/jobs.json",
            "--max-jobs",
            "50",
            "--source",
            "Remotive API",
            "--source",
            "Jobicy - All",
            "--no-beginner-filter",
            "--verbose",
        ]
    )

    assert args.output == "out/jobs.json"
    assert args.max_jobs == 50
    assert args.sources == ["Remotive API", "Jobicy - All"]
    assert args.no_beginner_filter is True
    assert args.verbose is True


def test_parse_args_rejects_non_integer_max_jobs():
    with pytest.raises(SystemExit):
        parse_args(["--max-jobs", "many"])


# --- cli ---


def test_cli_runs_pipeline_with_config_defaults():
    """Test that without flags the whole catalogue and env config are used."""
    with (
        patch(
            "remote_job_aggregator.main.run_pipeline",
            new_callable=AsyncMock,
            return_value=EMPTY_DOCUMENT,
        ) as mock_run,
        patch("remote_job_aggregator.main.write_document", return_value=True) as mock_write,
        patch("remote_job_aggregator.main.MAX_JOBS", 2000),
        patch("remote_job_aggregator.main.ENABLED_SOURCES", []),
        patch("remote_job_aggregator.main.OUTPUT_PATH", "site/public/jobs.json"),
    ):
        cli([])

    mock_run.assert_awaited_once()
    sources = mock_run.call_args.args[0]
    assert sources == list(SOURCES)
    assert mock_run.call_args.kwargs["max_jobs"] == 2000
    assert mock_run.call_args.kwargs["beginner_filter"] is True
    mock_write.assert_called_once_with(EMPTY_DOCUMENT, "site/public/jobs.json")


def test_cli_flags_override_config():
    with (
        patch(
            "remote_job_aggregator.main.run_pipeline",
            new_callable=AsyncMock,
            return_value=EMPTY_DOCUMENT,
        ) as mock_run,
        patch("remote_job_aggregator.main.write_document", return_value=True) as mock_write,
        patch("remote_job_aggregator.main.ENABLED_SOURCES", ["Jobicy - All"]),
    ):
        cli(
            [
                "--output",
                "custom.json",
                "--max-jobs",
                "10",
                "--source",
                "remotive api",
                "--no-beginner-filter",
            ]
        )

    sources = mock_run.call_args.args[0]
    assert [s.name for s in sources] == ["Remotive API"]
    assert mock_run.call_args.kwargs["max_jobs"] == 10
    assert mock_run.call_args.kwargs["beginner_filter"] is False
    mock_write.assert_called_once_with(EMPTY_DOCUMENT, "custom.json")


def test_cli_uses_enabled_sources_from_config():
    with (
        patch(
            "remote_job_aggregator.main.run_pipeline",
            new_callable=AsyncMock,
            return_value=EMPTY_DOCUMENT,
        ) as mock_run,
        patch("remote_job_aggregator.main.write_document", return_value=True),
        patch("remote_job_aggregator.main.ENABLED_SOURCES", ["Arbeitnow API", "Jobicy - All"]),
    ):
        cli([])

    # Catalogue order, not selection order
    assert [s.name for s in mock_run.call_args.args[0]] == ["Jobicy - All", "Arbeitnow API"]


def test_cli_beginner_filter_disabled_by_config():
    with (
        patch(
            "remote_job_aggregator.main.run_pipeline",
            new_callable=AsyncMock,
            return_value=EMPTY_DOCUMENT,
        ) as mock_run,
        patch("remote_job_aggregator.main.write_document", return_value=True),
        patch("remote_job_aggregator.main.BEGINNER_FILTER", False),
    ):
        cli([])

    assert mock_run.call_args.kwargs["beginner_filter"] is False


@pytest.mark.parametrize("value", ["0", "-5"])
def test_cli_rejects_non_positive_max_jobs(value):
    with (
        patch("remote_job_aggregator.main.run_pipeline", new_callable=AsyncMock) as mock_run,
        pytest.raises(SystemExit) as exc_info,
    ):
        cli(["--max-jobs", value])

    assert exc_info.value.code == 1
    mock_run.assert_not_called()


def test_cli_exits_when_no_known_sources():
    with (
        patch("remote_job_aggregator.main.run_pipeline", new_callable=AsyncMock) as mock_run,
        pytest.raises(SystemExit) as exc_info,
    ):
        cli(["--source", "Nonexistent Board"])

    assert exc_info.value.code == 1
    mock_run.assert_not_called()


def test_cli_exits_on_write_error():
    with (
        patch(
            "remote_job_aggregator.main.run_pipeline",
            new_callable=AsyncMock,
            return_value=EMPTY_DOCUMENT,
        ),
        patch(
            "remote_job_aggregator.main.write_document",
            side_effect=PermissionError("read-only file system"),
        ),
        pytest.raises(SystemExit) as exc_info,
    ):
        cli([])

    assert exc_info.value.code == 1


def test_cli_unchanged_output_exits_normally():
    """Test that a skipped write is not treated as an error."""
    with (
        patch(
            "remote_job_aggregator.main.run_pipeline",
            new_callable=AsyncMock,
            return_value=EMPTY_DOCUMENT,
        ),
        patch("remote_job_aggregator.main.write_document", return_value=False) as mock_write,
    ):
        cli([])

    mock_write.assert_called_once()


def test_cli_writes_real_file(tmp_path):
    output = tmp_path / "nested" / "jobs.json"

    with patch(
        "remote_job_aggregator.main.run_pipeline",
        new_callable=AsyncMock,
        return_value=EMPTY_DOCUMENT,
    ):
        cli(["--output", str(output)])

    assert output.exists()
    assert '"total_jobs": 0' in output.read_text()
