"""ComposeRunner — executes compose tasks in order against two sessions."""

import time

from wick.codec.domain.formatting import format_progress
from wick.compose.application.errors import ComposeTaskError, ComposeValidationError
from wick.compose.application.validation import parse_task
from wick.compose.domain.diff import equal_args_kwargs
from wick.compose.domain.observer import ComposeObserver
from wick.compose.domain.task import (
    ArgsKwargs,
    CallTask,
    Compose,
    PublishTask,
    RegisterTask,
    SubscribeTask,
    Task,
)
from wick.core.fanout import describe_error
from wick.session.domain.session import Event, Invocation, InvokeResult, Session


class ComposeRunner:
    """Runs every task of a compose file strictly one after another.

    Registrations and subscriptions are made on the producer session; calls
    and publications go through the consumer session. Payloads that differ
    from a task's expectations are reported to the observer and never stop
    the run; an invalid task or a broker error does.
    """

    def __init__(self, observer: ComposeObserver) -> None:
        self._observer = observer

    async def run(self, compose: Compose, producer: Session, consumer: Session) -> None:
        """
        Execute ``compose.tasks`` in order.

        Each task is validated just before it runs, so tasks ahead of an invalid
        one have already taken effect when the error is raised.

        Raises:
            ComposeValidationError: if a task's fields do not fit its type.
            ComposeTaskError: if the broker rejects a registration, call,
                subscription or publication.
        """
        task_count = len(compose.tasks)
        self._observer.compose_started(version=compose.version, task_count=task_count)
        started_at = time.monotonic()

        for index, raw in enumerate(compose.tasks):
            try:
                task = parse_task(raw)
            except ComposeValidationError as exc:
                self._observer.task_failed(
                    index=index, name=raw.name, kind=raw.type, reason=exc.reason
                )
                raise
            self._observer.task_started(index=index, name=task.name, kind=task.type)
            try:
                await self._execute(task=task, producer=producer, consumer=consumer)
            except Exception as exc:
                reason = describe_error(exc)
                self._observer.task_failed(
                    index=index, name=task.name, kind=task.type, reason=reason
                )
                raise ComposeTaskError(
                    task_name=task.name, kind=task.type, reason=reason
                ) from exc

        self._observer.compose_completed(
            task_count=task_count, elapsed_seconds=time.monotonic() - started_at
        )

    async def _execute(self, task: Task, producer: Session, consumer: Session) -> None:
        if isinstance(task, RegisterTask):
            await self._register(task=task, session=producer)
        elif isinstance(task, CallTask):
            await self._call(task=task, session=consumer)
        elif isinstance(task, SubscribeTask):
            await self._subscribe(task=task, session=producer)
        else:
            await self._publish(task=task, session=consumer)

    async def _register(self, task: RegisterTask, session: Session) -> None:
        expected = task.invocation
        answer = task.yield_

        async def _on_invocation(invocation: Invocation) -> InvokeResult:
            if expected is not None:
                self._check(
                    subject="invocation",
                    target=task.procedure,
                    expected=expected,
                    actual_args=invocation.args,
                    actual_kwargs=invocation.kwargs,
                )
            self._observer.invocation_received(
                procedure=task.procedure,
                output=format_progress(invocation.args, invocation.kwargs),
            )
            if answer is None:
                return InvokeResult()
            return InvokeResult(args=list(answer.args), kwargs=dict(answer.kwargs))

        await session.register(task.procedure, _on_invocation, task.options)
        self._observer.registered(name=task.name, procedure=task.procedure)

    async def _call(self, task: CallTask, session: Session) -> None:
        if task.parameters is None:
            result = await session.call(task.procedure, None, None, task.options)
        else:
            result = await session.call(
                task.procedure,
                list(task.parameters.args),
                dict(task.parameters.kwargs),
                task.options,
            )
        if task.result is not None:
            self._check(
                subject="call result",
                target=task.procedure,
                expected=task.result,
                actual_args=result.args,
                actual_kwargs=result.kwargs,
            )
        self._observer.called(
            name=task.name,
            procedure=task.procedure,
            output=format_progress(result.args, result.kwargs),
        )

    async def _subscribe(self, task: SubscribeTask, session: Session) -> None:
        expected = task.event

        async def _on_event(event: Event) -> None:
            if expected is not None:
                self._check(
                    subject="event",
                    target=task.topic,
                    expected=expected,
                    actual_args=event.args,
                    actual_kwargs=event.kwargs,
                )
            self._observer.event_received(
                topic=task.topic, output=format_progress(event.args, event.kwargs)
            )

        await session.subscribe(task.topic, _on_event, task.options)
        self._observer.subscribed(name=task.name, topic=task.topic)

    async def _publish(self, task: PublishTask, session: Session) -> None:
        if task.parameters is None:
            await session.publish(task.topic, None, None, task.options)
        else:
            await session.publish(
                task.topic,
                list(task.parameters.args),
                dict(task.parameters.kwargs),
                task.options,
            )
        self._observer.published(name=task.name, topic=task.topic)

    def _check(
        self,
        subject: str,
        target: str,
        expected: ArgsKwargs,
        actual_args: list,
        actual_kwargs: dict,
    ) -> None:
        if equal_args_kwargs(expected.args, actual_args, expected.kwargs, actual_kwargs):
            return
        self._observer.expectation_mismatch(
            subject=subject,
            target=target,
            expected_args=expected.args,
            expected_kwargs=expected.kwargs,
            actual_args=actual_args,
            actual_kwargs=actual_kwargs,
        )
