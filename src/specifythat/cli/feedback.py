"""CLI: specify feedback"""

from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from specifythat.errors import SpecifyThatError

console = Console()


def _get_client(base_url: Optional[str] = None):
    from specifythat.cli.main import _get_client
    return _get_client(base_url)


def _run(coro):
    from specifythat.cli.main import _run
    return _run(coro)


@click.command("feedback")
@click.argument("message")
@click.option("--url", default=None, help="Page or context the feedback is about")
@click.option("--base-url", default=None, help="SpecifyThat base URL")
def feedback_cmd(message: str, url: Optional[str], base_url: Optional[str]):
    """Send feedback to the SpecifyThat team."""

    async def _send():
        client = _get_client(base_url)
        try:
            with console.status("Sending feedback..."):
                await client.feedback.send(message, url=url, user_agent="specifythat-cli")
        finally:
            await client.close()

    try:
        _run(_send())
    except SpecifyThatError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise SystemExit(1)
    console.print("[green]Thanks! Feedback sent.[/green]")
