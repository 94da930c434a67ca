"""Tests for the command line entry point."""

from datetime import datetime
from unittest.mock import Mock

import pytest
from structlog.testing import capture_logs

from oic_monitor.core.models import PipelineRun
from oic_monitor.main import main


def finished_run(status, error=None):
    return PipelineRun(run_id="r1", start_time=datetime(2024, 1, 1), status=status,
                       error_message=error)


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr("oic_monitor.main.setup_logging", lambda level="INFO": None)


@pytest.fixture
def pipeline():
    return Mock()


def test_run_success_exits_zero(settings, pipeline):
    pipeline.run.return_value = finished_run("completed")

    with pytest.raises(SystemExit) as excinfo:
        main(["run"], settings=settings, pipeline=pipeline)

    assert excinfo.value.code == 0
    pipeline.run.assert_called_once_with(dry_run=False)


def test_run_failure_exits_non_zero(settings, pipeline):
    pipeline.run.return_value = finished_run("failed", "Search failed (drug): 500")

    with pytest.raises(SystemExit) as excinfo:
        main(["run", "--dry-run"], settings=settings, pipeline=pipeline)

    assert excinfo.value.code == 1
    pipeline.run.assert_called_once_with(dry_run=True)


def test_failed_run_is_logged_once(settings, pipeline):
    pipeline.run.return_value = finished_run("failed", "Attachment failed (700): 500")

    with capture_logs() as logs:
        with pytest.raises(SystemExit):
            main(["run"], settings=settings, pipeline=pipeline)

    assert [entry["event"] for entry in logs] == ["Starting pipeline execution"]


def test_health_reports_failure(settings, pipeline, capsys):
    pipeline.health_check.return_value = {"orders_in_council_portal": False, "feed_output": True}

    with pytest.raises(SystemExit) as excinfo:
        main(["health"], settings=settings, pipeline=pipeline)

    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "Orders In Council Portal: FAILED" in out
    assert "ISSUES DETECTED" in out


def test_stats_prints_keyword_counts(settings, pipeline, capsys):
    pipeline.store_stats.return_value = {
        "total_documents": 3,
        "with_pc_number": 2,
        "with_date": 1,
        "keyword_matches": {"cannabis": 3},
    }

    main(["stats"], settings=settings, pipeline=pipeline)

    out = capsys.readouterr().out
    assert "Documents: 3" in out
    assert "cannabis: 3" in out


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 1
    assert "usage" in capsys.readouterr().out
