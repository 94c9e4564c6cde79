"""CLI entrypoint for wick — typer app driving a WAMP router."""

import asyncio
import logging
import sys
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

import structlog
import typer
from pydantic import BaseModel, ValidationError

from wick.cli.connector import load_connector
from wick.codec.infrastructure.arguments import (
    parse_key_value_pairs,
    to_keyword_args,
    to_positional_args,
)
from wick.compose.application.runner import ComposeRunner
from wick.compose.infrastructure.observer import StructlogComposeObserver
from wick.compose.infrastructure.yaml_loader import YamlComposeLoader
from wick.config.domain.connection import ConnectionConfig
from wick.config.infrastructure.connection_builder import ConnectionConfigBuilder
from wick.config.infrastructure.observer import StructlogConfigObserver
from wick.core.errors import WickError
from wick.operation.application.executor import OperationExecutor
from wick.operation.application.handler import RegistrationState
from wick.operation.domain.observer import OperationObserver
from wick.operation.domain.spec import OperationSpec, RegistrationSpec, SubscriptionSpec
from wick.operation.infrastructure.composite_observer import CompositeOperationObserver
from wick.operation.infrastructure.observer import StructlogOperationObserver
from wick.operation.infrastructure.progress_observer import ProgressOperationObserver
from wick.session.application.pool import SessionPoolBuilder
from wick.session.domain.session import Session
from wick.session.infrastructure.observer import StructlogSessionObserver

app = typer.Typer(add_completion=False, no_args_is_help=True)


class GlobalOptions(BaseModel, frozen=True):
    """Connection and logging options shared by every command."""

    url: str
    realm: str
    serializer: str
    authmethod: str | None
    authid: str
    authrole: str
    ticket: str
    secret: str
    private_key: str
    connector: str
    log_format: str


def _configure_structlog(log_format: str, debug: bool) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


@app.callback()
def main(
    ctx: typer.Context,
    url: str = typer.Option(
        "ws://localhost:8080/ws", "--url", envvar="WICK_URL", help="Router URL"
    ),
    realm: str = typer.Option("realm1", "--realm", envvar="WICK_REALM"),
    serializer: str = typer.Option(
        "json", "--serializer", envvar="WICK_SERIALIZER", help="json, msgpack or cbor"
    ),
    authmethod: str | None = typer.Option(
        None,
        "--authmethod",
        envvar="WICK_AUTHMETHOD",
        help="anonymous, ticket, wampcra or cryptosign; inferred when omitted",
    ),
    authid: str = typer.Option("", "--authid", envvar="WICK_AUTHID"),
    authrole: str = typer.Option("", "--authrole", envvar="WICK_AUTHROLE"),
    ticket: str = typer.Option("", "--ticket", envvar="WICK_TICKET"),
    secret: str = typer.Option("", "--secret", envvar="WICK_SECRET"),
    private_key: str = typer.Option("", "--private-key", envvar="WICK_PRIVATE_KEY"),
    connector: str = typer.Option(
        "",
        "--connector",
        envvar="WICK_CONNECTOR",
        help="Connector implementation as 'module:attribute'",
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        envvar="WICK_LOG_FORMAT",
        help="Log format: 'console' or 'json'",
    ),
    debug: bool = typer.Option(False, "--debug", envvar="WICK_DEBUG"),
) -> None:
    """Call, publish, register and subscribe against a WAMP router."""
    _configure_structlog(log_format=log_format, debug=debug)
    ctx.obj = GlobalOptions(
        url=url,
        realm=realm,
        serializer=serializer,
        authmethod=authmethod,
        authid=authid,
        authrole=authrole,
        ticket=ticket,
        secret=secret,
        private_key=private_key,
        connector=connector,
        log_format=log_format,
    )


@app.command()
def call(
    ctx: typer.Context,
    procedure: str = typer.Argument(..., help="Procedure to call"),
    args: list[str] | None = typer.Argument(None, help="Positional arguments"),
    kwarg: list[str] | None = typer.Option(
        None, "--kwarg", "-k", help="Keyword argument as key=value"
    ),
    option: list[str] | None = typer.Option(
        None, "--option", "-o", help="Call option as key=value"
    ),
    parallel: int = typer.Option(1, "--parallel", help="Number of sessions"),
    concurrency: int = typer.Option(1, "--concurrency", help="Calls in flight"),
    repeat: int = typer.Option(1, "--repeat", help="Calls per session"),
    delay: int = typer.Option(0, "--delay", help="Milliseconds to wait first"),
    keepalive: int = typer.Option(0, "--keepalive", help="Keepalive seconds"),
    log_time: bool = typer.Option(False, "--time", help="Log each call's latency"),
) -> None:
    """Call a procedure, optionally many times from many sessions."""
    options: GlobalOptions = ctx.obj
    _run(
        lambda: _repeat_operation(
            options=options,
            kind="call",
            spec=OperationSpec(
                target=procedure,
                args=to_positional_args(args),
                kwargs=to_keyword_args(_pairs(kwarg, "--kwarg")),
                options=to_keyword_args(_pairs(option, "--option"), check_file=False),
                repeat=repeat,
                delay_ms=delay,
                concurrency=concurrency,
                log_time=log_time,
            ),
            parallel=parallel,
            keepalive=keepalive,
        )
    )


@app.command()
def publish(
    ctx: typer.Context,
    topic: str = typer.Argument(..., help="Topic to publish to"),
    args: list[str] | None = typer.Argument(None, help="Positional arguments"),
    kwarg: list[str] | None = typer.Option(
        None, "--kwarg", "-k", help="Keyword argument as key=value"
    ),
    option: list[str] | None = typer.Option(
        None, "--option", "-o", help="Publish option as key=value"
    ),
    parallel: int = typer.Option(1, "--parallel", help="Number of sessions"),
    concurrency: int = typer.Option(1, "--concurrency", help="Publications in flight"),
    repeat: int = typer.Option(1, "--repeat", help="Publications per session"),
    delay: int = typer.Option(0, "--delay", help="Milliseconds to wait first"),
    keepalive: int = typer.Option(0, "--keepalive", help="Keepalive seconds"),
    log_time: bool = typer.Option(False, "--time", help="Log each publication's latency"),
) -> None:
    """Publish to a topic, optionally many times from many sessions."""
    options: GlobalOptions = ctx.obj
    _run(
        lambda: _repeat_operation(
            options=options,
            kind="publish",
            spec=OperationSpec(
                target=topic,
                args=to_positional_args(args),
                kwargs=to_keyword_args(_pairs(kwarg, "--kwarg")),
                options=to_keyword_args(_pairs(option, "--option"), check_file=False),
                repeat=repeat,
                delay_ms=delay,
                concurrency=concurrency,
                log_time=log_time,
            ),
            parallel=parallel,
            keepalive=keepalive,
        )
    )


@app.command()
def register(
    ctx: typer.Context,
    procedure: str = typer.Argument(..., help="Procedure to register"),
    command: str = typer.Option(
        "", "--command", "-c", help="Shell command whose stdout answers each call"
    ),
    invoke_count: int | None = typer.Option(
        None, "--invoke-count", help="Unregister after this many invocations"
    ),
    option: list[str] | None = typer.Option(
        None, "--option", "-o", help="Register option as key=value"
    ),
    delay: int = typer.Option(0, "--delay", help="Milliseconds to wait first"),
    keepalive: int = typer.Option(0, "--keepalive", help="Keepalive seconds"),
    log_time: bool = typer.Option(False, "--time", help="Log the registration latency"),
) -> None:
    """Register a procedure and answer invocations until stopped."""
    options: GlobalOptions = ctx.obj
    _run(
        lambda: _serve_registration(
            options=options,
            spec=RegistrationSpec(
                procedure=procedure,
                options=to_keyword_args(_pairs(option, "--option"), check_file=False),
                delay_ms=delay,
                command=command,
                max_invocations=invoke_count,
                log_time=log_time,
            ),
            keepalive=keepalive,
        )
    )


@app.command()
def subscribe(
    ctx: typer.Context,
    topic: str = typer.Argument(..., help="Topic to subscribe to"),
    option: list[str] | None = typer.Option(
        None, "--option", "-o", help="Subscribe option as key=value"
    ),
    details: bool = typer.Option(False, "--details", "-d", help="Print event details"),
    delay: int = typer.Option(0, "--delay", help="Milliseconds to wait first"),
    keepalive: int = typer.Option(0, "--keepalive", help="Keepalive seconds"),
    log_time: bool = typer.Option(False, "--time", help="Log the subscription latency"),
) -> None:
    """Subscribe to a topic and print events until stopped."""
    options: GlobalOptions = ctx.obj
    _run(
        lambda: _serve_subscription(
            options=options,
            spec=SubscriptionSpec(
                topic=topic,
                options=to_keyword_args(_pairs(option, "--option"), check_file=False),
                delay_ms=delay,
                print_details=details,
                log_time=log_time,
            ),
            keepalive=keepalive,
        )
    )


@app.command()
def compose(
    ctx: typer.Context,
    compose_path: Path = typer.Argument(..., help="Path to compose YAML"),
    keepalive: int = typer.Option(0, "--keepalive", help="Keepalive seconds"),
    wait: bool = typer.Option(
        False, "--wait", help="Keep registrations and subscriptions open until stopped"
    ),
) -> None:
    """Run the tasks of a compose file in order."""
    options: GlobalOptions = ctx.obj
    _run(
        lambda: _run_compose(
            options=options,
            compose_path=compose_path,
            keepalive=keepalive,
            wait=wait,
        )
    )


# ---------------------------------------------------------------------------
# Command bodies
# ---------------------------------------------------------------------------


async def _repeat_operation(
    options: GlobalOptions,
    kind: str,
    spec: OperationSpec,
    parallel: int,
    keepalive: int,
) -> None:
    pool = _pool_builder(options=options)
    sessions = await pool.build(
        config=_connection_config(options=options),
        count=parallel,
        concurrency=max(spec.concurrency, 1),
        keepalive=keepalive,
        log_time=spec.log_time,
    )
    # One progress bar per (kind, target): only meaningful for a single session.
    show_progress = options.log_format != "json" and parallel == 1 and spec.repeat > 1
    executor = OperationExecutor(observer=_operation_observer(show_progress))
    try:
        if len(sessions) == 1:
            if kind == "call":
                await executor.call(sessions[0], spec)
            else:
                await executor.publish(sessions[0], spec)
        elif kind == "call":
            await executor.call_on_sessions(sessions, spec, spec.concurrency)
        else:
            await executor.publish_on_sessions(sessions, spec, spec.concurrency)
    finally:
        await pool.close(sessions)


async def _serve_registration(
    options: GlobalOptions, spec: RegistrationSpec, keepalive: int
) -> None:
    pool = _pool_builder(options=options)
    session = await _open_one(pool=pool, options=options, keepalive=keepalive)
    executor = OperationExecutor(observer=_operation_observer(show_progress=False))
    try:
        handler = await executor.register(session, spec)
    except BaseException:
        await pool.close([session])
        raise

    try:
        if spec.max_invocations is None:
            await _wait_until_stopped()
        else:
            await handler.wait_closed()
    finally:
        # A pending grace-period close is superseded by closing here; one that
        # has already started is left to finish.
        if handler.cancel_pending_close() or handler.state is not RegistrationState.CLOSED:
            await pool.close([session])
        else:
            await handler.wait_closed()


async def _serve_subscription(
    options: GlobalOptions, spec: SubscriptionSpec, keepalive: int
) -> None:
    pool = _pool_builder(options=options)
    session = await _open_one(pool=pool, options=options, keepalive=keepalive)
    executor = OperationExecutor(observer=_operation_observer(show_progress=False))
    try:
        await executor.subscribe(session, spec)
        await _wait_until_stopped()
    finally:
        await pool.close([session])


async def _run_compose(
    options: GlobalOptions, compose_path: Path, keepalive: int, wait: bool
) -> None:
    observer = StructlogComposeObserver()
    compose_file = YamlComposeLoader(observer=observer).load(path=compose_path)
    pool = _pool_builder(options=options)
    producer, consumer = await pool.build(
        config=_connection_config(options=options),
        count=2,
        concurrency=2,
        keepalive=keepalive,
    )
    try:
        await ComposeRunner(observer=observer).run(
            compose=compose_file, producer=producer, consumer=consumer
        )
        if wait:
            await _wait_until_stopped()
    finally:
        await pool.close([producer, consumer])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(make_coro: Callable[[], Coroutine[Any, Any, None]]) -> None:
    """Build the command's coroutine, run it, and map failures to exit code 1."""
    try:
        asyncio.run(make_coro())
    except KeyboardInterrupt:
        typer.echo("Interrupted.")
        sys.exit(1)
    except WickError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except ValidationError as exc:
        typer.echo(f"Failed to validate options: {exc}")
        sys.exit(1)


def _pairs(values: list[str] | None, param_hint: str) -> dict[str, str]:
    try:
        return parse_key_value_pairs(values)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint=param_hint) from exc


def _connection_config(options: GlobalOptions) -> ConnectionConfig:
    builder = ConnectionConfigBuilder(observer=StructlogConfigObserver())
    return builder.build(
        url=options.url,
        realm=options.realm,
        serializer=options.serializer,
        authmethod=options.authmethod,
        authid=options.authid,
        authrole=options.authrole,
        ticket=options.ticket,
        secret=options.secret,
        private_key=options.private_key,
    )


def _pool_builder(options: GlobalOptions) -> SessionPoolBuilder:
    return SessionPoolBuilder(
        connector=load_connector(options.connector),
        observer=StructlogSessionObserver(),
    )


async def _open_one(
    pool: SessionPoolBuilder, options: GlobalOptions, keepalive: int
) -> Session:
    sessions = await pool.build(
        config=_connection_config(options=options),
        count=1,
        concurrency=1,
        keepalive=keepalive,
    )
    return sessions[0]


def _operation_observer(show_progress: bool) -> OperationObserver:
    observers: list[OperationObserver] = [StructlogOperationObserver()]
    if show_progress:
        observers.append(ProgressOperationObserver())
    return CompositeOperationObserver(observers=observers)


async def _wait_until_stopped() -> None:
    await asyncio.Event().wait()


if __name__ == "__main__":
    app()
