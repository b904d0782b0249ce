"""CLI: specify config show|set-url|reset"""

import click
from rich.console import Console

from specifythat.transport.http import DEFAULT_BASE_URL

console = Console()


def _load_config() -> dict:
    from specifythat.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from specifythat.cli.main import _save_config
    _save_config(cfg)


@click.group()
def config():
    """Backend configuration."""


@config.command("show")
def config_show():
    """Show the backend URL in use."""
    cfg = _load_config()
    url = cfg.get("base_url")
    if url:
        console.print(f"Base URL: [bold]{url}[/bold]")
    else:
        console.print(f"Base URL: [bold]{DEFAULT_BASE_URL}[/bold] [dim](default)[/dim]")


@config.command("set-url")
@click.argument("base_url")
def config_set_url(base_url: str):
    """Save a backend URL for later commands."""
    _save_config({**_load_config(), "base_url": base_url.rstrip("/")})
    console.print(f"[green]Base URL set to {base_url.rstrip('/')}[/green]")


@config.command("reset")
def config_reset():
    """Forget saved settings."""
    _save_config({})
    console.print("[green]Configuration cleared.[/green]")
