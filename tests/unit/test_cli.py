# tests/unit/test_cli.py: Unit tests for the regionctl command line.

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from regionbuild.cli import app
from regionbuild.engine import Decision, Reason
from regionbuild.models import PlainRevision, PullRequestRevision
from regionbuild.state import RevisionStore

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "strategy.yaml"
    path.write_text(
        f"included_regions: |\n  src/**\n  docs/**\nrepo:\n  path: {tmp_path}\nlogging:\n  json: false\n"
    )
    return path


@pytest.fixture
def mock_engine():
    with patch('regionbuild.cli.setup_logging'), \
         patch('regionbuild.cli.git_rev_parse', side_effect=lambda repo, ref: f"sha-{ref}"), \
         patch('regionbuild.cli.DecisionEngine') as engine_cls:
        engine = MagicMock()
        engine_cls.return_value = engine
        yield engine


def test_decide_build_exits_zero_and_records(config_file, tmp_path, mock_engine):
    mock_engine.evaluate.return_value = Decision(True, Reason.MATCHED, "src/**", "src/a.py")
    state = tmp_path / "last_built.json"

    result = runner.invoke(app, [
        "--config", str(config_file), "decide", "feature", "HEAD",
        "--prev", "HEAD~3", "--record", "--state-file", str(state),
    ])

    assert result.exit_code == 0
    _, head, curr, prev = mock_engine.evaluate.call_args.args
    assert head.name == "feature"
    assert curr == PlainRevision(head, "sha-HEAD")
    assert prev == PlainRevision(head, "sha-HEAD~3")
    assert RevisionStore(state).get("feature") == "sha-HEAD"


def test_decide_skip_exits_one_without_recording(config_file, tmp_path, mock_engine):
    mock_engine.evaluate.return_value = Decision(False, Reason.NO_MATCH)
    state = tmp_path / "last_built.json"

    result = runner.invoke(app, [
        "--config", str(config_file), "decide", "feature", "HEAD",
        "--prev", "HEAD~1", "--record", "--state-file", str(state),
    ])

    assert result.exit_code == 1
    assert RevisionStore(state).get("feature") is None


def test_decide_uses_recorded_previous_revision(config_file, tmp_path, mock_engine):
    mock_engine.evaluate.return_value = Decision(False, Reason.NO_MATCH)
    state = tmp_path / "last_built.json"
    RevisionStore(state).record("feature", "abc")

    runner.invoke(app, ["--config", str(config_file), "decide", "feature", "HEAD", "--state-file", str(state)])

    _, head, _, prev = mock_engine.evaluate.call_args.args
    assert prev == PlainRevision(head, "sha-abc")


def test_decide_new_branch_has_no_previous(config_file, tmp_path, mock_engine):
    mock_engine.evaluate.return_value = Decision(True, Reason.INITIAL_BUILD)

    result = runner.invoke(app, [
        "--config", str(config_file), "decide", "feature", "HEAD",
        "--state-file", str(tmp_path / "last_built.json"),
    ])

    assert result.exit_code == 0
    assert mock_engine.evaluate.call_args.args[3] is None


def test_decide_pull_request(config_file, tmp_path, mock_engine):
    mock_engine.evaluate.return_value = Decision(False, Reason.NO_MATCH)

    runner.invoke(app, [
        "--config", str(config_file), "decide", "PR-5", "HEAD", "--target", "main",
        "--state-file", str(tmp_path / "last_built.json"),
    ])

    _, head, curr, prev = mock_engine.evaluate.call_args.args
    assert head.is_pull_request
    assert isinstance(curr, PullRequestRevision)
    assert curr.pull.hash == "sha-HEAD"
    assert curr.target.hash == "sha-main"
    assert prev is None


def test_decide_missing_config(tmp_path):
    result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "decide", "feature", "HEAD"])
    assert result.exit_code == 2
    assert "Configuration file not found" in result.output


def test_match_command(config_file):
    result = runner.invoke(app, ["--config", str(config_file), "match", "src/a.py", "README.md"])
    assert result.exit_code == 0
    assert "src/**" in result.output
    assert "README.md" in result.output


def test_show_config(config_file):
    result = runner.invoke(app, ["--config", str(config_file), "show-config"])
    assert result.exit_code == 0
    assert "closed" in result.output
    assert "docs/**" in result.output


def test_decide_reports_state_write_failure(config_file, tmp_path, mock_engine):
    mock_engine.evaluate.return_value = Decision(True, Reason.MATCHED, "src/**", "src/a.py")
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    result = runner.invoke(app, [
        "--config", str(config_file), "decide", "feature", "HEAD",
        "--prev", "HEAD~1", "--record", "--state-file", str(blocker / "last_built.json"),
    ])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Cannot write revision store" in result.output
