"""OperationExecutor — runs broker operations with delay, repeat and concurrency."""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence

from wick.codec.domain.formatting import format_args_kwargs, format_progress
from wick.core.fanout import describe_error, fan_out
from wick.operation.application.errors import OperationBatchError
from wick.operation.application.handler import (
    InvocationHandlerBuilder,
    SelfTerminatingHandler,
)
from wick.operation.domain.observer import OperationObserver
from wick.operation.domain.spec import (
    OperationKind,
    OperationSpec,
    RegistrationSpec,
    SubscriptionSpec,
)
from wick.session.domain.session import CallResult, Event, Session

RECEIVE_PROGRESS_OPTION = "receive_progress"


class OperationExecutor:
    """Executes call/publish operations as best-effort bounded fan-out.

    One failed repetition never cancels the others; every failure is reported
    together once all repetitions have finished.
    """

    def __init__(
        self,
        observer: OperationObserver,
        handler_builder: InvocationHandlerBuilder | None = None,
    ) -> None:
        self._observer = observer
        self._handler_builder = handler_builder or InvocationHandlerBuilder(
            observer=observer
        )

    async def call(self, session: Session, spec: OperationSpec) -> None:
        """Call ``spec.target`` ``spec.repeat`` times.

        Raises:
            OperationBatchError: if one or more calls failed.
        """

        async def _call_once() -> None:
            on_progress = None
            if spec.options.get(RECEIVE_PROGRESS_OPTION):
                on_progress = self._progress_reporter(procedure=spec.target)
            result = await session.call(
                spec.target,
                spec.args,
                spec.kwargs,
                spec.options,
                on_progress=on_progress,
            )
            self._observer.call_result(
                procedure=spec.target,
                output=format_args_kwargs(result.args, result.kwargs, None),
            )

        await self._repeat(kind=OperationKind.CALL, spec=spec, operation=_call_once)

    async def publish(self, session: Session, spec: OperationSpec) -> None:
        """Publish to ``spec.target`` ``spec.repeat`` times.

        Raises:
            OperationBatchError: if one or more publications failed.
        """

        async def _publish_once() -> None:
            await session.publish(spec.target, spec.args, spec.kwargs, spec.options)

        await self._repeat(
            kind=OperationKind.PUBLISH, spec=spec, operation=_publish_once
        )

    async def call_on_sessions(
        self, sessions: Sequence[Session], spec: OperationSpec, concurrency: int
    ) -> None:
        """Run ``call`` once per session, at most ``concurrency`` sessions at a time.

        Raises:
            OperationBatchError: if the operation failed on one or more sessions.
        """
        await self._on_sessions(
            kind=OperationKind.CALL,
            sessions=sessions,
            spec=spec,
            concurrency=concurrency,
            operation=self.call,
        )

    async def publish_on_sessions(
        self, sessions: Sequence[Session], spec: OperationSpec, concurrency: int
    ) -> None:
        """Run ``publish`` once per session, at most ``concurrency`` sessions at a time.

        Raises:
            OperationBatchError: if the operation failed on one or more sessions.
        """
        await self._on_sessions(
            kind=OperationKind.PUBLISH,
            sessions=sessions,
            spec=spec,
            concurrency=concurrency,
            operation=self.publish,
        )

    async def register(
        self, session: Session, spec: RegistrationSpec
    ) -> SelfTerminatingHandler:
        """Register ``spec.procedure`` after the optional delay.

        Returns the installed handler so the caller can wait for, or cancel,
        its self-termination.
        """
        handler = self._handler_builder.build(
            session=session,
            procedure=spec.procedure,
            command=spec.command,
            max_invocations=spec.max_invocations,
        )
        await _delay(spec.delay_ms)
        started_at = time.monotonic()
        await session.register(spec.procedure, handler, spec.options)
        self._observer.registered(
            procedure=spec.procedure,
            elapsed_ms=_elapsed_ms(started_at) if spec.log_time else None,
        )
        return handler

    async def subscribe(self, session: Session, spec: SubscriptionSpec) -> None:
        """Subscribe to ``spec.topic`` after the optional delay."""

        async def _on_event(event: Event) -> None:
            details = event.details if spec.print_details else None
            self._observer.event_received(
                topic=spec.topic,
                output=format_args_kwargs(event.args, event.kwargs, details),
            )

        await _delay(spec.delay_ms)
        started_at = time.monotonic()
        await session.subscribe(spec.topic, _on_event, spec.options)
        self._observer.subscribed(
            topic=spec.topic,
            elapsed_ms=_elapsed_ms(started_at) if spec.log_time else None,
        )

    async def _repeat(
        self,
        kind: OperationKind,
        spec: OperationSpec,
        operation: Callable[[], Awaitable[None]],
    ) -> None:
        await _delay(spec.delay_ms)

        self._observer.operation_started(
            kind=kind.value,
            target=spec.target,
            repeat=spec.repeat,
            concurrency=spec.concurrency,
            delay_ms=spec.delay_ms,
        )
        started_at = time.monotonic()

        async def _unit(index: int) -> None:
            self._observer.repetition_started(
                kind=kind.value, target=spec.target, index=index
            )
            unit_started = time.monotonic()
            try:
                await operation()
            except Exception as exc:
                self._observer.repetition_failed(
                    kind=kind.value,
                    target=spec.target,
                    index=index,
                    reason=describe_error(exc),
                )
                raise
            self._observer.repetition_completed(
                kind=kind.value,
                target=spec.target,
                index=index,
                elapsed_ms=_elapsed_ms(unit_started) if spec.log_time else None,
            )

        failures = await fan_out(_unit, count=spec.repeat, concurrency=spec.concurrency)

        self._observer.operation_completed(
            kind=kind.value,
            target=spec.target,
            total=spec.repeat,
            failed=len(failures),
            elapsed_seconds=time.monotonic() - started_at,
        )
        if failures:
            raise OperationBatchError(
                kind=kind.value,
                target=spec.target,
                failures=failures,
                total=spec.repeat,
            )

    async def _on_sessions(
        self,
        kind: OperationKind,
        sessions: Sequence[Session],
        spec: OperationSpec,
        concurrency: int,
        operation: Callable[[Session, OperationSpec], Awaitable[None]],
    ) -> None:
        async def _unit(index: int) -> None:
            await operation(sessions[index], spec)

        failures = await fan_out(_unit, count=len(sessions), concurrency=concurrency)
        if failures:
            raise OperationBatchError(
                kind=kind.value,
                target=spec.target,
                failures=failures,
                total=len(sessions),
            )

    def _progress_reporter(self, procedure: str) -> Callable[[CallResult], None]:
        def _report(result: CallResult) -> None:
            self._observer.call_progress(
                procedure=procedure,
                output=format_progress(result.args, result.kwargs),
            )

        return _report


async def _delay(delay_ms: int) -> None:
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)


def _elapsed_ms(started_at: float) -> int:
    return int((time.monotonic() - started_at) * 1000)
