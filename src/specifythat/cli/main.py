"""
SpecifyThat CLI — `specify` command.

Commands:
  specify interview          Interactive interview, ends with a generated spec
  specify check <text>       Run the input-quality checks on some text
  specify feedback <message> Send feedback to the SpecifyThat team
  specify config <cmd>       Show or change the saved backend URL
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from specifythat.client import AsyncSpecifyThat
from specifythat.transport.http import DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = Path.home() / ".specifythat" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client(base_url: Optional[str] = None) -> AsyncSpecifyThat:
    cfg = _load_config()
    return AsyncSpecifyThat(base_url=base_url or cfg.get("base_url", DEFAULT_BASE_URL))


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log state transitions and service calls")
def main(verbose: bool):
    """SpecifyThat CLI — turn a project idea into a buildable spec."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands from separate modules
from specifythat.cli.check import check_cmd
from specifythat.cli.config import config
from specifythat.cli.feedback import feedback_cmd
from specifythat.cli.interview import interview_cmd

main.add_command(interview_cmd)
main.add_command(check_cmd)
main.add_command(feedback_cmd)
main.add_command(config)


if __name__ == "__main__":
    main()
