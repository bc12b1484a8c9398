"""Click CLI with commands: sync, diff, show."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import click
import structlog

from feedsync.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from feedsync.db import get_engine, ping
from feedsync.errors import ConfigError, FeedSyncError
from feedsync.logging import setup_logging
from feedsync.reconcile import Policy
from feedsync.remote import load_remote
from feedsync.storage import PluginKeyValueStore
from feedsync.sync import SyncResult, run_sync

_POLICY_CHOICE = click.Choice([p.value for p in Policy])


def _fail(exc: FeedSyncError, log: structlog.stdlib.BoundLogger | None = None) -> NoReturn:
    if log is not None:
        log.error("feedsync.failed", error=str(exc), error_type=type(exc).__name__)
    click.echo(f"error: {exc}", err=True)
    raise SystemExit(1)


@contextmanager
def _open_store(cfg: AppConfig) -> Iterator[PluginKeyValueStore]:
    """Connected store for the configured row; the engine is disposed on every exit path."""
    engine = get_engine(cfg.settings.sqlalchemy_url())
    try:
        ping(engine)
        yield PluginKeyValueStore(engine, cfg.sync.plugin_id, cfg.sync.key)
    finally:
        engine.dispose()


def _print_diff(result: SyncResult) -> None:
    for sub in result.reconciled.removed:
        click.echo(click.style(f"-\t{sub.url}", fg="red"))
    for sub in result.reconciled.added:
        click.echo(click.style(f"+\t{sub.url}", fg="green"))


@click.group()
@click.option("--config", "config_path", default=DEFAULT_CONFIG_PATH, help="Path to config YAML file.")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """Keep Mattermost RSS feed subscriptions in sync with a feed list."""
    ctx.ensure_object(dict)
    try:
        cfg = load_config(config_path)
    except FeedSyncError as exc:
        _fail(exc)
    ctx.obj["config"] = cfg
    try:
        ctx.obj["log"] = setup_logging(cfg.settings.log_dir or None, level=cfg.settings.log_level)
    except OSError as exc:
        _fail(ConfigError(f"cannot set up logging in {cfg.settings.log_dir}: {exc}"))


@cli.command()
@click.option("--feed-file", type=click.Path(dir_okay=False), help="Feed list to declare (default from config).")
@click.option("--channel", "channel_id", help="Destination channel id (default from config).")
@click.option("--policy", type=_POLICY_CHOICE, help="prune removes undeclared feeds; additive only adds.")
@click.option("--dry-run", is_flag=True, help="Show the diff without writing.")
@click.pass_context
def sync(ctx: click.Context, feed_file: str | None, channel_id: str | None, policy: str | None, dry_run: bool) -> None:
    """Reconcile the feed list with the stored subscriptions."""
    cfg: AppConfig = ctx.obj["config"]
    log = ctx.obj["log"]

    try:
        with _open_store(cfg) as store:
            result = run_sync(
                store,
                feed_file or cfg.sync.feed_file,
                channel_id or cfg.sync.channel_id,
                log,
                policy=Policy(policy) if policy else cfg.sync.policy,
                dry_run=dry_run,
            )
    except FeedSyncError as exc:
        _fail(exc, log)

    _print_diff(result)
    if not result.changed:
        click.echo("remote in sync with feed list")
    elif not result.written:
        changes = len(result.reconciled.added) + len(result.reconciled.removed)
        click.echo(f"dry run: {changes} changes not written")
    else:
        click.echo(f"{result.rows_affected} rows affected")


@cli.command()
@click.option("--feed-file", type=click.Path(dir_okay=False), help="Feed list to declare (default from config).")
@click.option("--channel", "channel_id", help="Destination channel id (default from config).")
@click.option("--policy", type=_POLICY_CHOICE, help="prune removes undeclared feeds; additive only adds.")
@click.pass_context
def diff(ctx: click.Context, feed_file: str | None, channel_id: str | None, policy: str | None) -> None:
    """Show what sync would change, without writing."""
    ctx.invoke(sync, feed_file=feed_file, channel_id=channel_id, policy=policy, dry_run=True)


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """List the stored subscriptions."""
    cfg: AppConfig = ctx.obj["config"]
    log = ctx.obj["log"]

    try:
        with _open_store(cfg) as store:
            remote = load_remote(store, log)
    except FeedSyncError as exc:
        _fail(exc, log)

    for key in sorted(remote.subscriptions):
        sub = remote.subscriptions[key]
        click.echo(f"{sub.channel_id}\t{sub.url}")
    click.echo(f"{len(remote)} subscriptions")
