"""CLI entry point for gateway-session-store.

Invoked as::

    gateway-session-store [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m gateway_session_store.cli.main

Commands
--------
- version   — Show version information
- backends  — List the supported storage backends
- get       — Read a session from the configured backend
- put       — Write a session to the configured backend
"""
from __future__ import annotations

import asyncio
import json
import sys
from datetime import datetime, timedelta, timezone
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gateway_session_store.codec import BytesCodec, Codec, JsonCodec, TextCodec
from gateway_session_store.config import StoreConfig
from gateway_session_store.errors import ConfigurationError, DecodeError, StoreError
from gateway_session_store.factory import create_store
from gateway_session_store.session import Session, SessionId
from gateway_session_store.storage.base import SessionStore

console = Console()

_CODECS: dict[str, Codec[Any]] = {
    "text": TextCodec(),
    "json": JsonCodec(),
    "bytes": BytesCodec(),
}

# ---------------------------------------------------------------------------
# Store factory
# ---------------------------------------------------------------------------


def _load_config(
    config_file: str | None,
    backend: str | None,
    url: str | None,
) -> StoreConfig:
    """Resolve the store configuration from a file, options and environment.

    Command-line options win over the file, which wins over
    ``SESSION_STORE_*`` environment variables.
    """
    if config_file is not None:
        config = StoreConfig.from_yaml(config_file)
    else:
        config = StoreConfig.from_env()
    overrides = {k: v for k, v in {"backend": backend, "url": url}.items() if v is not None}
    if overrides:
        config = StoreConfig.from_mapping({**config.model_dump(), **overrides})
    return config


def _make_store(ctx: click.Context) -> SessionStore:
    return create_store(ctx.obj["config"])


def _parse_id(session_id: str, expires: datetime) -> SessionId:
    try:
        return SessionId.from_base64(session_id, expires)
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(2)


def _parse_value(value: str, codec_name: str) -> Any:
    if codec_name == "json":
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            console.print(f"[red]Error:[/red] VALUE is not valid JSON: {escape(str(exc))}")
            sys.exit(2)
    if codec_name == "bytes":
        return value.encode("utf-8")
    return value


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="gateway-session-store")
@click.option(
    "--config",
    "config_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with a session_store section.",
)
@click.option(
    "--backend",
    default=None,
    type=click.Choice(["memory", "memcached", "redis"], case_sensitive=False),
    help="Storage backend to use (overrides --config).",
)
@click.option("--url", default=None, help="Backend connection URL (overrides --config).")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    backend: str | None,
    url: str | None,
) -> None:
    """Pluggable session persistence for an authentication gateway"""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = _load_config(config_file, backend, url)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(2)


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show version information."""
    from gateway_session_store import __version__

    console.print(f"[bold]gateway-session-store[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# backends
# ---------------------------------------------------------------------------


@cli.command(name="backends")
def backends_command() -> None:
    """List the supported storage backends."""
    table = Table(title="Backends", show_lines=False)
    table.add_column("Name", style="cyan")
    table.add_column("Client", style="green")
    table.add_column("Expiration")
    table.add_column("Rewrite")

    table.add_row("memcached", "aiomcache", "exptime (relative or absolute)", "overwrite")
    table.add_row("redis", "redis.asyncio", "SETEX seconds", "overwrite")
    table.add_row("memory", "-", "none", "rejected")

    console.print(table)


# ---------------------------------------------------------------------------
# get
# ---------------------------------------------------------------------------


@cli.command(name="get")
@click.argument("session_id")
@click.option(
    "--codec",
    "codec_name",
    default="text",
    show_default=True,
    type=click.Choice(sorted(_CODECS)),
    help="Payload codec.",
)
@click.pass_context
def get_command(ctx: click.Context, session_id: str, codec_name: str) -> None:
    """Read and print the session stored under SESSION_ID (base64)."""
    key = _parse_id(session_id, datetime.now(timezone.utc))
    codec = _CODECS[codec_name]

    async def _run() -> Session[Any] | None:
        async with _make_store(ctx) as store:
            return await store.get(key, codec)

    try:
        session = asyncio.run(_run())
    except DecodeError as exc:
        console.print(f"[red]Undecodable session:[/red] {escape(str(exc))}")
        sys.exit(1)

    if session is None:
        console.print(f"[red]Session not found:[/red] {session_id}")
        sys.exit(1)

    if codec_name == "json":
        console.print_json(json.dumps(session.data))
    else:
        # Stored text is printed verbatim, never parsed as rich markup.
        shown = repr(session.data) if codec_name == "bytes" else session.data
        console.print(shown, markup=False, highlight=False)


# ---------------------------------------------------------------------------
# put
# ---------------------------------------------------------------------------


@cli.command(name="put")
@click.argument("session_id")
@click.argument("value")
@click.option("--ttl", default=3600, show_default=True, type=click.IntRange(min=1), help="Lifetime in seconds.")
@click.option(
    "--codec",
    "codec_name",
    default="text",
    show_default=True,
    type=click.Choice(sorted(_CODECS)),
    help="Payload codec.",
)
@click.pass_context
def put_command(
    ctx: click.Context,
    session_id: str,
    value: str,
    ttl: int,
    codec_name: str,
) -> None:
    """Store VALUE under SESSION_ID (base64) for TTL seconds."""
    expires = datetime.now(timezone.utc) + timedelta(seconds=ttl)
    session = Session(_parse_id(session_id, expires), _parse_value(value, codec_name))
    codec = _CODECS[codec_name]

    async def _run() -> None:
        async with _make_store(ctx) as store:
            await store.update(session, codec)

    try:
        asyncio.run(_run())
    except StoreError as exc:
        console.print(f"[red]Update failed:[/red] {escape(str(exc))}")
        sys.exit(1)

    console.print(f"[green]Session stored:[/green] {session_id} (expires {expires.isoformat()})")


if __name__ == "__main__":
    cli()
