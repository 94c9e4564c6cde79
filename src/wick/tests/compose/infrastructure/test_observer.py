"""Tests for StructlogComposeObserver event names and levels."""

from structlog.testing import capture_logs

from wick.compose.infrastructure.observer import StructlogComposeObserver


class TestStructlogComposeObserver:
    """Compose events are logged under dotted names."""

    def test_mismatch_is_logged_as_error(self) -> None:
        with capture_logs() as logs:
            StructlogComposeObserver().expectation_mismatch(
                subject="event",
                target="io.xconn.news",
                expected_args=["a"],
                expected_kwargs={},
                actual_args=[],
                actual_kwargs={},
            )
        assert logs[0]["event"] == "compose.expectation_mismatch"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["message"] == "actual event is not equal to expected event"

    def test_call_output_is_logged(self) -> None:
        with capture_logs() as logs:
            StructlogComposeObserver().called(
                name="call echo", procedure="io.xconn.echo", output="args: [1]"
            )
        assert logs == [
            {
                "event": "compose.called",
                "log_level": "info",
                "name": "call echo",
                "procedure": "io.xconn.echo",
                "output": "args: [1]",
            }
        ]

    def test_task_failure_is_logged_as_error(self) -> None:
        with capture_logs() as logs:
            StructlogComposeObserver().task_failed(
                index=2, name="bad", kind="publish", reason="topic is required for publish"
            )
        assert logs[0]["event"] == "compose.task_failed"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["index"] == 2
