"""Command-line interface for GitPanel."""

from __future__ import annotations

import json
import sys
import threading
import time
from pathlib import Path
from typing import Any

import click

from .bootstrap import Bootstrapper, has_github_remote, is_git_repository
from .config import CONFIG_FILENAME, ConfigError, GitPanelConfig, load_config, save_config
from .ext_api import StatusStore, serve_status
from .logging import setup_logging
from .tracker import PushState, SessionContext, SyncTracker
from .util import env_first

WATCH_TICK_SECONDS = 0.5


def _config(ctx: click.Context) -> GitPanelConfig:
    return ctx.obj["config"]


def _print_files(files: list[str]) -> None:
    if not files:
        click.echo("Working tree clean.")
        return
    click.echo("Changed Files:")
    for entry in files:
        click.echo(f"  {entry}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v for INFO, -vv for DEBUG)")
@click.option("-q", "--quiet", is_flag=True, help="Suppress all output except errors")
@click.pass_context
def cli(ctx: click.Context, verbose: int, quiet: bool) -> None:
    """GitPanel commits, pushes and bootstraps GitHub repositories."""
    ctx.ensure_object(dict)
    try:
        config = load_config()
    except ConfigError as exc:
        click.echo(f"[warn] {exc} Using defaults.", err=True)
        config = GitPanelConfig()
    ctx.obj["config"] = config
    setup_logging(level=config.log_level, verbose=verbose, quiet=quiet)


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Report whether this is a git repository with a GitHub remote."""
    config = _config(ctx)
    root = Path.cwd()
    repo = is_git_repository(root)
    remote = has_github_remote(root, host=config.host)
    click.echo(f"{'✓' if repo else '✗'} Git repository")
    click.echo(f"{'✓' if remote else '✗'} Remote on {config.host}")
    if not repo:
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """List changed files in the working tree."""
    tracker = SyncTracker(config=_config(ctx))
    _print_files(tracker.refresh_status())


@cli.command()
@click.argument("message")
@click.pass_context
def commit(ctx: click.Context, message: str) -> None:
    """Stage all changes and commit them with MESSAGE."""
    tracker = SyncTracker(config=_config(ctx))
    if not tracker.commit(message):
        click.echo("Nothing committed.", err=True)
        sys.exit(1)
    _print_files(tracker.context.changed_files)


@cli.command()
@click.pass_context
def push(ctx: click.Context) -> None:
    """Push the current branch and wait for the outcome."""
    tracker = SyncTracker(config=_config(ctx))
    if not tracker.can_push():
        click.echo(f"No remote on {tracker.config.host} to push to.", err=True)
        sys.exit(1)
    handle = tracker.push()
    click.echo(tracker.push_status.label)
    result = handle.wait()
    if result is None or result.state is not PushState.SUCCESS:
        click.echo(result.message if result else "Push did not finish.", err=True)
        sys.exit(1)
    click.echo(result.message)


@cli.command("create-repo")
@click.argument("name")
@click.option("--token", help="Access token (defaults to the configured environment variables).")
@click.pass_context
def create_repo(ctx: click.Context, name: str, token: str | None) -> None:
    """Create repository NAME on GitHub and push a first commit."""
    config = _config(ctx)
    token = token or env_first(*config.token_env)
    if not token:
        click.echo(f"No token given and none of {', '.join(config.token_env)} is set.", err=True)
        sys.exit(1)
    url = Bootstrapper(config=config).create_repository(name, token)
    if url is None:
        click.echo("Repository creation failed.", err=True)
        sys.exit(1)
    click.echo(f"Remote: {url}")


@cli.command()
@click.pass_context
def ignore(ctx: click.Context) -> None:
    """Add the required patterns to .gitignore."""
    added = Bootstrapper(config=_config(ctx)).ensure_gitignore()
    if not added:
        click.echo(".gitignore already up to date.")
        return
    click.echo(f"Added {len(added)} pattern(s) to .gitignore:")
    for pattern in added:
        click.echo(f"  {pattern}")


@cli.command()
@click.option("--status-port", default=0, type=int, help="Expose status API on this port.")
@click.pass_context
def watch(ctx: click.Context, status_port: int) -> None:
    """Poll the working tree and serve its status until interrupted."""
    config = _config(ctx)
    store = StatusStore()
    last_seen: dict[str, Any] = {}
    # on_change fires from both the tick loop and the push thread.
    echo_lock = threading.Lock()

    def on_change(context: SessionContext) -> None:
        with echo_lock:
            snapshot = tracker.snapshot()
            store.update(snapshot)
            if snapshot["changed_files"] != last_seen.get("changed_files"):
                _print_files(snapshot["changed_files"])
            if snapshot["push"] != last_seen.get("push"):
                click.echo(f"[{snapshot['push']['label']}] {snapshot['push']['message']}".rstrip())
            last_seen.update(snapshot)

    tracker = SyncTracker(config=config, on_change=on_change)
    server = serve_status(store=store, port=status_port)
    click.echo(
        f"Polling every {config.refresh_interval}. "
        f"Status API on http://127.0.0.1:{server.port}/status"
    )
    tracker.enable()
    on_change(tracker.context)
    try:
        while True:
            tracker.tick()
            time.sleep(WATCH_TICK_SECONDS)
    except KeyboardInterrupt:
        click.echo("\nStopping watcher…")
    finally:
        tracker.close()
        server.stop()


@cli.command()
@click.option("--host", default="github.com", show_default=True)
@click.option("--refresh-interval", default="5s", show_default=True)
@click.option("--grace-period", default="3s", show_default=True)
def setup(host: str, refresh_interval: str, grace_period: str) -> None:
    """Write a baseline .gitpanel.yml configuration."""
    config_path = Path(CONFIG_FILENAME)
    if config_path.exists() and not click.confirm(f"{CONFIG_FILENAME} exists. Overwrite?", default=False):
        click.echo("Aborted.")
        return

    data = {
        "host": host,
        "refresh_interval": refresh_interval,
        "grace_period": grace_period,
    }
    try:
        config = GitPanelConfig.from_dict(data)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    save_config(config)
    click.echo(f"Saved configuration to {config_path}")


@cli.command()
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text")
@click.pass_context
def config(ctx: click.Context, output_format: str) -> None:
    """Show current GitPanel configuration."""
    cfg = _config(ctx)
    if output_format == "json":
        click.echo(json.dumps(cfg.raw or GitPanelConfig.from_dict({}).raw, indent=2))
        return
    click.echo("GitPanel Configuration:")
    click.echo(f"  Host:              {cfg.host}")
    click.echo(f"  API URL:           {cfg.api_url}")
    click.echo(f"  Remote / Branch:   {cfg.remote}/{cfg.branch}")
    click.echo(f"  Refresh Interval:  {cfg.refresh_interval}")
    click.echo(f"  Grace Period:      {cfg.grace_period}")
    click.echo(f"  Push Timeout:      {cfg.push_timeout}")
    click.echo(f"  Log Level:         {cfg.log_level}")
    click.echo(f"  Token Variables:   {', '.join(cfg.token_env)}")
    if cfg.ignore_patterns:
        click.echo(f"\nExtra Ignore Patterns: {', '.join(cfg.ignore_patterns)}")


def main() -> None:
    """Console script entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        sys.exit(1)


if __name__ == "__main__":
    main()
