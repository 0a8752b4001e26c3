"""
Command-line interface for neo-cache-admin.
Inspect, aggregate, delete and flush Redis cache keys by prefix.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .application.services.server_util import CacheServerUtil, create_cache_server_util
from .config.settings import CacheAdminSettings
from .core.exceptions import CacheTimeout, NeoCacheAdminError

console = Console()

T = TypeVar("T")

ABSENT_MESSAGE = "[yellow]absent: keys could not be enumerated (store unavailable)[/yellow]"


def _settings(ctx: click.Context) -> CacheAdminSettings:
    overrides: Dict[str, Any] = {}
    if ctx.obj.get("redis_url"):
        overrides["redis_url"] = ctx.obj["redis_url"]
    return CacheAdminSettings(**overrides)


def _run(ctx: click.Context, operation: Callable[[CacheServerUtil], Awaitable[T]]) -> T:
    """Run one operation against a fresh util and close it afterwards."""

    async def runner() -> T:
        async with create_cache_server_util(_settings(ctx)) as util:
            return await operation(util)

    try:
        return asyncio.run(runner())
    except CacheTimeout as e:
        console.print(f"[red]Timed out: {escape(str(e))}[/red]")
        ctx.exit(1)
    except NeoCacheAdminError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        ctx.exit(1)


def _display_key(key: str) -> str:
    # Undecodable key bytes print as \xNN escapes
    return escape(key.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace"))


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str, ensure_ascii=False)


@click.group()
@click.option('--redis-url', envvar='NEO_CACHE_REDIS_URL', help='Redis URL (overrides settings)')
@click.option('--timeout', type=float, default=None, help='Per-operation timeout in seconds')
@click.pass_context
def cli(ctx, redis_url, timeout):
    """Neo cache administration CLI"""
    ctx.ensure_object(dict)
    ctx.obj['redis_url'] = redis_url
    ctx.obj['timeout'] = timeout


@cli.command()
@click.argument('prefix')
@click.option('--sub-prefix', default=None, help='Sub-prefix joined to PREFIX with ":"')
@click.pass_context
def keys(ctx, prefix, sub_prefix):
    """List keys starting with PREFIX"""
    timeout = ctx.obj['timeout']
    found = _run(ctx, lambda util: util.list_keys(prefix, sub_prefix, timeout=timeout))

    if found is None:
        console.print(ABSENT_MESSAGE)
        ctx.exit(1)

    if not found:
        console.print("[dim]No keys found[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Key", style="cyan")
    for index, key in enumerate(found, start=1):
        table.add_row(str(index), _display_key(key))

    console.print(table)
    console.print(f"[green]{len(found)} keys[/green]")


@cli.command()
@click.argument('prefix')
@click.option('--sub-prefix', default=None, help='Sub-prefix joined to PREFIX with ":"')
@click.option('--raw', is_flag=True, help='Show raw string values without decoding')
@click.option('--field', default=None, help='Read this field of hash values')
@click.pass_context
def values(ctx, prefix, sub_prefix, raw, field):
    """Show values of keys starting with PREFIX"""
    if raw and field:
        raise click.UsageError("--raw and --field cannot be combined")

    timeout = ctx.obj['timeout']
    if field:
        found = _run(ctx, lambda util: util.get_hash_field_values(
            prefix, field, sub_prefix=sub_prefix, timeout=timeout
        ))
    elif raw:
        found = _run(ctx, lambda util: util.get_raw_values(prefix, sub_prefix, timeout=timeout))
    else:
        found = _run(ctx, lambda util: util.get_values(prefix, sub_prefix, timeout=timeout))

    if found is None:
        console.print(ABSENT_MESSAGE)
        ctx.exit(1)

    if not found:
        console.print("[dim]No values found[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column(f"Field {escape(field)}" if field else "Value", style="green")
    for key, value in found.items():
        table.add_row(_display_key(key), escape(_format_value(value)))

    console.print(table)


@cli.command()
@click.argument('prefix')
@click.option('--sub-prefix', default=None, help='Sub-prefix joined to PREFIX with ":"')
@click.option('--fire-and-forget', is_flag=True, help='Do not wait for delete replies')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_context
def delete(ctx, prefix, sub_prefix, fire_and_forget, yes):
    """Delete all keys starting with PREFIX"""
    if not yes:
        click.confirm(f"Delete all keys starting with '{prefix}'?", abort=True)

    timeout = ctx.obj['timeout']
    report = _run(ctx, lambda util: util.delete_by_prefix(
        prefix, sub_prefix, fire_and_forget=fire_and_forget, timeout=timeout
    ))

    if report.keys_found == 0:
        console.print(f"[dim]No keys matching {escape(report.pattern)}[/dim]")
        return

    verb = "Dispatched" if report.fire_and_forget else "Deleted"
    console.print(
        f"[green]{verb} {len(report.deleted)} of {report.keys_found} keys "
        f"matching {escape(report.pattern)}[/green]"
    )

    if report.failed:
        table = Table(show_header=True, header_style="bold red")
        table.add_column("Failed key", style="cyan")
        table.add_column("Error")
        for outcome in report.outcomes:
            if not outcome.success:
                table.add_row(_display_key(outcome.key), escape(outcome.error or ""))
        console.print(table)
        ctx.exit(1)


@cli.command()
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_context
def flush(ctx, yes):
    """Flush every key on the server"""
    if not yes:
        click.confirm("Flush ALL keys on the Redis server?", abort=True)

    timeout = ctx.obj['timeout']
    if _run(ctx, lambda util: util.flush_all(timeout=timeout)):
        console.print("[green]✅ Server flushed[/green]")
    else:
        console.print("[red]❌ Flush failed, see logs[/red]")
        ctx.exit(1)


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == '__main__':
    main()
