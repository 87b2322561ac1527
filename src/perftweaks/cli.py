"""Command line interface for managing plugin settings."""

from __future__ import annotations

import sys

import click

from .config import BaseConfig
from .context import PluginContext, create_plugin_context
from .errors import StoreWriteError, ValidationError
from .logging_config import setup_logging
from .services import lifecycle
from .services.admin_settings import current_settings
from .services.features import BOOLEAN_KEYS, FEATURES, NUMERIC_FEATURES

_CONTEXT_KEY = "perftweaks.context"


def _plugin(ctx: click.Context) -> PluginContext:
    """Build the plugin context once per invocation."""

    plugin = ctx.meta.get(_CONTEXT_KEY)
    if plugin is None:
        config = BaseConfig()
        setup_logging(config)
        plugin = create_plugin_context(config)
        ctx.meta[_CONTEXT_KEY] = plugin
    return plugin


@click.group()
def cli():
    """Network & Performance Tweaks settings."""


@cli.command()
@click.pass_context
def activate(ctx):
    """Create the settings table and seed default values."""
    try:
        written = lifecycle.activate(_plugin(ctx).store)
    except StoreWriteError as exc:
        click.echo(f"[ERROR] {exc}", err=True)
        sys.exit(1)
    if written:
        click.echo(f"[OK] Defaults written: {', '.join(written)}")
    else:
        click.echo("[OK] All settings already present.")


@cli.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def uninstall(ctx, yes):
    """Remove all plugin data if cleanup_on_uninstall is enabled."""
    if not yes:
        click.confirm("Remove plugin data (if cleanup is enabled)?", abort=True)
    if lifecycle.uninstall(_plugin(ctx).store):
        click.echo("[OK] Plugin data removed.")
    else:
        click.echo("[SKIP] Cleanup did not run; settings table kept.")


@cli.command("get")
@click.argument("key")
@click.pass_context
def get_setting(ctx, key):
    """Print the current value of KEY."""
    feature = FEATURES.get(key)
    value = _plugin(ctx).store.get(key, feature.default if feature else None)
    if value is None:
        click.echo(f"Error: setting '{key}' is not set.", err=True)
        sys.exit(1)
    click.echo(value)


@cli.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_setting(ctx, key, value):
    """Store VALUE under KEY."""
    if key in BOOLEAN_KEYS and value not in ("0", "1"):
        click.echo(f"Error: {key} must be 0 or 1.", err=True)
        sys.exit(1)
    feature = NUMERIC_FEATURES.get(key)
    if feature is not None:
        try:
            number = int(value)
        except ValueError:
            click.echo(f"Error: {key} must be an integer.", err=True)
            sys.exit(1)
        if not feature.in_bounds(number):
            click.echo(
                f"Error: {key} must be between {feature.minimum} and {feature.maximum}.",
                err=True,
            )
            sys.exit(1)
        value = str(number)
    try:
        _plugin(ctx).store.update(key, value)
    except (ValidationError, StoreWriteError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"[OK] {key} = {value}")


@cli.command()
@click.pass_context
def show(ctx):
    """List every setting with its current value."""
    store = _plugin(ctx).store
    if store.is_degraded:
        click.echo(click.style("Settings unreadable; showing defaults.", fg="yellow"))
    for key, value in current_settings(store).items():
        click.echo(f"  {key:<26} {value}")


if __name__ == "__main__":
    cli()
