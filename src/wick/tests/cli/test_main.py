"""Tests for the wick command line, driven against an in-memory router."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tests.session.fake_session import FakeConnector
from wick.cli.main import app
from wick.session.domain.session import Invocation, InvokeResult

FIXTURES = Path(__file__).parent.parent / "fixtures"

runner = CliRunner()


async def _echo(invocation: Invocation) -> InvokeResult:
    return InvokeResult(args=invocation.args, kwargs=invocation.kwargs)


@pytest.fixture
def connector(monkeypatch: pytest.MonkeyPatch) -> FakeConnector:
    fake = FakeConnector()
    monkeypatch.setattr("wick.cli.main.load_connector", lambda reference: fake)
    return fake


class TestPublishCommand:
    """publish sends typed arguments and closes its sessions."""

    def test_publish_once(self, connector: FakeConnector) -> None:
        result = runner.invoke(
            app,
            ["--log-format", "json", "publish", "io.xconn.news", "1", "true", "-k", "who=me"],
        )
        assert result.exit_code == 0, result.output
        assert connector.broker.publications == [
            ("io.xconn.news", [1, True], {"who": "me"}, {})
        ]
        assert all(session.closed for session in connector.sessions)

    def test_parallel_sessions_repeat(self, connector: FakeConnector) -> None:
        result = runner.invoke(
            app,
            [
                "--log-format",
                "json",
                "publish",
                "io.xconn.news",
                "--parallel",
                "3",
                "--repeat",
                "2",
                "--concurrency",
                "2",
            ],
        )
        assert result.exit_code == 0, result.output
        assert connector.attempts == 3
        assert len(connector.broker.publications) == 6

    def test_malformed_kwarg_is_a_usage_error(self, connector: FakeConnector) -> None:
        result = runner.invoke(app, ["publish", "io.xconn.news", "-k", "novalue"])
        assert result.exit_code == 2
        assert connector.attempts == 0


class TestCallCommand:
    """call reaches registered procedures and fails on broker errors."""

    def test_call_registered_procedure(self, connector: FakeConnector) -> None:
        connector.broker.registrations["io.xconn.echo"] = _echo
        result = runner.invoke(
            app, ["--log-format", "json", "call", "io.xconn.echo", "hello", "-o", "timeout=1000"]
        )
        assert result.exit_code == 0, result.output
        assert connector.broker.calls == [
            ("io.xconn.echo", ["hello"], {}, {"timeout": 1000})
        ]

    def test_call_unknown_procedure_exits_1(self, connector: FakeConnector) -> None:
        result = runner.invoke(app, ["--log-format", "json", "call", "io.xconn.missing"])
        assert result.exit_code == 1
        assert "no_such_procedure" in result.output
        assert all(session.closed for session in connector.sessions)

    def test_invalid_repeat_exits_1(self, connector: FakeConnector) -> None:
        result = runner.invoke(app, ["call", "io.xconn.echo", "--repeat", "0"])
        assert result.exit_code == 1
        assert "Failed to validate options" in result.output
        assert connector.attempts == 0

    def test_connection_failure_exits_1(self, connector: FakeConnector) -> None:
        connector.fail_attempts = {0}
        result = runner.invoke(app, ["--log-format", "json", "call", "io.xconn.echo"])
        assert result.exit_code == 1
        assert "attempt 0 refused" in result.output


class TestComposeCommand:
    """compose runs a file on two sessions and closes them afterwards."""

    def test_runs_compose_file(self, connector: FakeConnector) -> None:
        result = runner.invoke(
            app, ["--log-format", "json", "compose", str(FIXTURES / "valid_compose.yaml")]
        )
        assert result.exit_code == 0, result.output
        assert connector.attempts == 2
        assert len(connector.broker.calls) == 1
        assert len(connector.broker.publications) == 1
        assert all(session.closed for session in connector.sessions)

    def test_missing_compose_file_exits_1(self, connector: FakeConnector, tmp_path: Path) -> None:
        result = runner.invoke(app, ["compose", str(tmp_path / "absent.yaml")])
        assert result.exit_code == 1
        assert "file not found" in result.output
        assert connector.attempts == 0


class TestGlobalOptions:
    """Connection options are validated before any session is opened."""

    def test_invalid_log_format(self, connector: FakeConnector) -> None:
        result = runner.invoke(app, ["--log-format", "xml", "publish", "t"])
        assert result.exit_code == 1
        assert "Invalid log format" in result.output

    def test_credentials_must_match_auth_method(self, connector: FakeConnector) -> None:
        result = runner.invoke(
            app,
            ["--log-format", "json", "--authmethod", "anonymous", "--ticket", "s3cret", "publish", "t"],
        )
        assert result.exit_code == 1
        assert "ticket not needed for anonymous auth" in result.output
        assert connector.attempts == 0

    def test_missing_connector(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WICK_CONNECTOR", raising=False)
        result = runner.invoke(app, ["--log-format", "json", "publish", "t"])
        assert result.exit_code == 1
        assert "no connector given" in result.output
