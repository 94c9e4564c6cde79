"""Invocation handlers for registered procedures.

A handler prints each invocation, optionally answers it with the stdout of a
shell command, and can retire its own registration after a fixed number of
invocations:

    ACTIVE(remaining=N) -> ... -> ACTIVE(remaining=1) -> UNREGISTERING
        -> (after the grace delay) CLOSED

The grace-delay close is an asyncio task, so a registration torn down from the
outside can cancel it with ``cancel_pending_close`` instead of leaving a
dangling close on a session that is already gone.
"""

import asyncio
from enum import StrEnum

from wick.codec.domain.formatting import format_args_kwargs
from wick.operation.application.errors import HandlerConfigError, RegistrationClosedError
from wick.operation.domain.observer import OperationObserver
from wick.session.domain.session import (
    INTERNAL_ERROR_URI,
    Invocation,
    InvokeResult,
    Session,
)

CLOSE_GRACE_SECONDS = 1.0


class RegistrationState(StrEnum):
    ACTIVE = "active"
    UNREGISTERING = "unregistering"
    CLOSED = "closed"


class SelfTerminatingHandler:
    """Callable invocation handler bound to one registration.

    Satisfies the InvocationHandler type structurally.
    """

    def __init__(
        self,
        session: Session,
        procedure: str,
        command: str,
        max_invocations: int | None,
        observer: OperationObserver,
        grace_seconds: float,
    ) -> None:
        self._session = session
        self._procedure = procedure
        self._command = command
        self._remaining = max_invocations
        self._observer = observer
        self._grace_seconds = grace_seconds
        self._state = RegistrationState.ACTIVE
        self._close_task: asyncio.Task[None] | None = None
        self._closed = asyncio.Event()

    @property
    def procedure(self) -> str:
        return self._procedure

    @property
    def state(self) -> RegistrationState:
        return self._state

    @property
    def remaining(self) -> int | None:
        """Invocations left before the registration retires, or None if unlimited."""
        return self._remaining

    async def __call__(self, invocation: Invocation) -> InvokeResult:
        if self._state is RegistrationState.CLOSED:
            raise RegistrationClosedError(procedure=self._procedure)

        try:
            output = format_args_kwargs(invocation.args, invocation.kwargs, None)
        except (TypeError, ValueError) as exc:
            return InvokeResult(error=INTERNAL_ERROR_URI, args=[str(exc)])
        self._observer.invocation_received(procedure=self._procedure, output=output)

        result = ""
        if self._command:
            result = await self._run_command()

        if self._remaining is not None and self._state is RegistrationState.ACTIVE:
            self._remaining -= 1
            if self._remaining == 0:
                await self._retire()

        return InvokeResult(args=[result])

    def cancel_pending_close(self) -> bool:
        """Cancel a scheduled close. Returns True if one was pending.

        Only a close still waiting out its grace period can be cancelled; once
        the session close has started it runs to completion and this returns
        False. After a successful cancel whoever tore the registration down
        owns the session.
        """
        if (
            self._close_task is None
            or self._close_task.done()
            or self._state is RegistrationState.CLOSED
        ):
            return False
        self._close_task.cancel()
        self._state = RegistrationState.CLOSED
        self._closed.set()
        self._observer.session_close_cancelled(procedure=self._procedure)
        return True

    async def wait_closed(self) -> None:
        """Wait until the registration has retired and its close has run or been cancelled."""
        await self._closed.wait()

    async def _run_command(self) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                "sh",
                "-c",
                self._command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except OSError as exc:
            self._observer.command_failed(
                procedure=self._procedure,
                command=self._command,
                reason=str(exc),
                stderr="",
            )
            return ""

        if process.returncode != 0:
            self._observer.command_failed(
                procedure=self._procedure,
                command=self._command,
                reason=f"exit status {process.returncode}",
                stderr=stderr.decode("utf-8", errors="replace"),
            )
            return ""
        return stdout.decode("utf-8", errors="replace")

    async def _retire(self) -> None:
        self._state = RegistrationState.UNREGISTERING
        self._observer.invocation_limit_reached(procedure=self._procedure)
        try:
            await self._session.unregister(self._procedure)
        except Exception as exc:  # noqa: BLE001
            self._observer.unregister_failed(procedure=self._procedure, reason=str(exc))
        self._close_task = asyncio.get_running_loop().create_task(
            self._close_after_grace(),
            name=f"wick-close-{self._procedure}",
        )

    async def _close_after_grace(self) -> None:
        await asyncio.sleep(self._grace_seconds)
        self._observer.session_closing(procedure=self._procedure)
        self._state = RegistrationState.CLOSED
        try:
            await self._session.close()
        except Exception as exc:  # noqa: BLE001
            self._observer.session_close_failed(procedure=self._procedure, reason=str(exc))
        finally:
            self._closed.set()


class InvocationHandlerBuilder:
    """Builds the handler a registered procedure answers invocations with."""

    def __init__(
        self,
        observer: OperationObserver,
        grace_seconds: float = CLOSE_GRACE_SECONDS,
    ) -> None:
        self._observer = observer
        self._grace_seconds = grace_seconds

    def build(
        self,
        session: Session,
        procedure: str,
        command: str = "",
        max_invocations: int | None = None,
    ) -> SelfTerminatingHandler:
        """
        Return a handler for ``procedure`` registered on ``session``.

        Raises:
            HandlerConfigError: if max_invocations is given and is less than 1.
        """
        if max_invocations is not None and max_invocations < 1:
            raise HandlerConfigError(
                f"invocation count must be greater than zero, got {max_invocations}"
            )
        return SelfTerminatingHandler(
            session=session,
            procedure=procedure,
            command=command,
            max_invocations=max_invocations,
            observer=self._observer,
            grace_seconds=self._grace_seconds,
        )
