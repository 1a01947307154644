"""CLI smoke tests against the seeded in-memory backend."""

import pytest
from typer.testing import CliRunner

from hireboard.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def memory_backend(monkeypatch):
    monkeypatch.setenv("HIREBOARD_BACKEND_KIND", "memory")
    monkeypatch.setenv("HIREBOARD_SIMULATION_ENABLED", "false")
    monkeypatch.delenv("HIREBOARD_ENV", raising=False)


def test_jobs_lists_first_page():
    result = runner.invoke(app, ["jobs"])

    assert result.exit_code == 0, result.output
    assert "Page 1 of 3 (25 jobs)" in result.output


def test_jobs_rejects_bad_page():
    result = runner.invoke(app, ["jobs", "--page", "0"])

    assert result.exit_code == 1


def test_unknown_candidate_exits_non_zero():
    result = runner.invoke(app, ["move", "nobody@example.com", "tech"])

    assert result.exit_code == 1
    assert "Candidate not found" in result.output


def test_assessment_for_unknown_job():
    result = runner.invoke(app, ["assessment", "no-such-role"])

    assert result.exit_code == 1
    assert "Job not found" in result.output
