"""CLI: specify check — run the input gate locally, no backend needed."""

import json
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from specifythat.questions import QUESTIONS
from specifythat.quality import is_gibberish_input, vowel_ratio
from specifythat.sanitize import sanitize_markdown, sanitize_project_name
from specifythat.validation import validate_answer

console = Console()


@click.command("check")
@click.argument("text")
@click.option("-q", "--question", "question_id", type=int, default=None,
              help="Also validate against this question's rules")
@click.option("--json-output", "--json", is_flag=True)
def check_cmd(text: str, question_id: Optional[int], json_output: bool):
    """Show how an answer would be judged and sanitized."""
    result = {
        "gibberish": is_gibberish_input(text),
        "vowel_ratio": round(vowel_ratio(text), 3),
        "sanitized": sanitize_markdown(text),
        "sanitized_name": sanitize_project_name(text),
    }
    if question_id is not None:
        question = next((q for q in QUESTIONS if q.id == question_id), None)
        if question is None:
            raise click.BadParameter(f"no question with id {question_id}", param_hint="--question")
        result["validation_error"] = validate_answer(text, question.validation)

    if json_output:
        click.echo(json.dumps(result, indent=2))
        return

    table = Table(title="Input check", show_header=False)
    table.add_column("Check", style="bold")
    table.add_column("Result")
    verdict = "[red]gibberish[/red]" if result["gibberish"] else "[green]meaningful[/green]"
    table.add_row("Verdict", verdict)
    table.add_row("Vowel ratio", str(result["vowel_ratio"]))
    table.add_row("Sanitized", escape(result["sanitized"]))
    table.add_row("As project name", escape(result["sanitized_name"]))
    if "validation_error" in result:
        table.add_row("Validation", escape(result["validation_error"] or "ok"))
    console.print(table)
