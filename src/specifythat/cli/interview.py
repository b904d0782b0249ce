"""CLI: specify interview"""

import asyncio
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from specifythat.errors import InputRejectedError, ServiceError
from specifythat.interview import InterviewState, InterviewStateMachine
from specifythat.questions import PROJECT_DESCRIPTION_QUESTION_ID, PROJECT_NAME_QUESTION_ID

console = Console()

IDEATION_PROMPTS = (
    ("problem", "What problem would you like to solve?"),
    ("audience", "Who has this problem?"),
    ("today", "How do they deal with it today?"),
    ("better", "What would make it easier for them?"),
)


class _Quit(Exception):
    pass


def _get_client(base_url: Optional[str] = None):
    from specifythat.cli.main import _get_client
    return _get_client(base_url)


def _run(coro):
    from specifythat.cli.main import _run
    return _run(coro)


async def _prompt(label: str, **kwargs) -> str:
    # Off the loop thread so background name generation keeps running
    return await asyncio.to_thread(click.prompt, label, prompt_suffix=": ", **kwargs)


def _navigate(machine: InterviewStateMachine, command: str) -> bool:
    """Handle /quit, /back and /reset. True if the command was consumed."""
    if command == "/quit":
        raise _Quit()
    if command == "/back":
        machine.go_back()
        return True
    if command == "/reset":
        machine.reset()
        console.print("[yellow]Starting over.[/yellow]")
        return True
    return False


def compose_ideation_description(notes: dict[str, str]) -> str:
    """Turn the guided ideation answers into a question-2 description."""
    return (
        f"{notes['problem'].rstrip('.')}. "
        f"This is for {notes['audience'].rstrip('.')}. "
        f"Today they {notes['today'].rstrip('.')}. "
        f"The project should {notes['better'].rstrip('.')}."
    )


async def _analyze(machine: InterviewStateMachine, description: str, attachment: Optional[str] = None) -> None:
    try:
        with console.status("Analyzing your project... This may take a moment."):
            await machine.analyze_description(description, attachment)
    except InputRejectedError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
    except ServiceError as e:
        console.print(f"[red]{escape(e.message)}[/red] [dim](try again)[/dim]")
        machine.dismiss_error()


async def _suggest(machine: InterviewStateMachine) -> None:
    try:
        with console.status("Thinking of an answer..."):
            suggestion = await machine.suggest_answer()
    except ServiceError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        machine.dismiss_error()
        return
    if suggestion is None:
        return
    console.print(Panel(escape(suggestion), title="Suggested answer", border_style="cyan"))
    if await asyncio.to_thread(click.confirm, "Use this answer?", default=True):
        machine.accept_generated_answer(suggestion)
    else:
        machine.discard_suggestion()


def _read_attachment(path: str) -> Optional[str]:
    try:
        return Path(path).expanduser().read_text()
    except OSError as e:
        console.print(f"[red]Could not read {escape(path)}: {escape(str(e))}[/red]")
        return None


async def _ask(machine: InterviewStateMachine) -> None:
    question = machine.current_question
    number = machine.session.current_question_index + 1
    console.print(f"\n[bold]Question {number}/{machine.total_questions}[/bold] [dim]({machine.progress}%)[/dim]")
    console.print(f"[bold cyan]{escape(question.text)}[/bold cyan]")
    if question.help_text:
        console.print(f"[dim]{escape(question.help_text)}[/dim]")
    if machine.is_generating_name:
        console.print("[dim]Naming your project in the background...[/dim]")

    text = await _prompt("You")
    command = text.strip().lower()
    if _navigate(machine, command):
        return

    if command == "/skip":
        if question.id == PROJECT_NAME_QUESTION_ID:
            machine.defer_first_question()
            console.print("[dim]No problem, we'll suggest a name once we know what you're building.[/dim]")
        elif question.id == PROJECT_DESCRIPTION_QUESTION_ID:
            machine.enter_ideation_mode()
        else:
            await _suggest(machine)
        return

    if question.id == PROJECT_DESCRIPTION_QUESTION_ID:
        attachment = None
        if question.allow_file_upload:
            path = await _prompt(f"Attach a file ({', '.join(question.file_types)}), blank to skip",
                                 default="", show_default=False)
            if path.strip():
                attachment = _read_attachment(path.strip())
        await _analyze(machine, text, attachment)
        return

    try:
        machine.submit_answer(text)
    except InputRejectedError as e:
        console.print(f"[red]{escape(e.message)}[/red]")


async def _choose_unit(machine: InterviewStateMachine) -> None:
    units = machine.session.all_units or ()
    table = Table(title=f"Your project has {len(units)} buildable phases")
    table.add_column("#", style="bold")
    table.add_column("Phase")
    table.add_column("Description")
    for unit in units:
        table.add_row(str(unit.id), escape(unit.name), escape(unit.description))
    console.print(table)
    console.print("Which phase do you want to spec first? You can come back for the others later.")

    choice = (await _prompt("Phase number (or /back)")).strip()
    if _navigate(machine, choice.lower()):
        return
    unit = next((u for u in units if str(u.id) == choice), None)
    if unit is None:
        console.print(f"[red]Pick one of: {', '.join(str(u.id) for u in units)}[/red]")
        return
    machine.select_unit(unit)


async def _ideate(machine: InterviewStateMachine) -> None:
    console.print(Panel("Let's figure out what to build. Type /cancel at any point to go back.",
                        title="Ideation mode", border_style="magenta"))
    notes: dict[str, str] = {}
    for key, prompt in IDEATION_PROMPTS:
        reply = (await _prompt(prompt)).strip()
        if reply.lower() == "/cancel":
            machine.cancel_ideation_mode()
            return
        notes[key] = reply

    description = machine.exit_ideation_mode(compose_ideation_description(notes))
    console.print(Panel(escape(description), title="Project description", border_style="cyan"))
    # Review before analysis; the interview never submits it on its own
    description = await _prompt("Edit or press enter to use it", default=description, show_default=False)
    await _analyze(machine, description)


async def _finish(machine: InterviewStateMachine, output: Optional[str]) -> bool:
    """Completion screen. True when the interview loop should stop."""
    if machine.is_generating_name:
        with console.status("Naming your project..."):
            await machine.wait_for_pending()
    console.print(f"\n[green]Interview complete![/green] You've answered all {machine.total_questions} questions "
                  f"for [bold]{escape(machine.session.project_name)}[/bold].")

    action = await asyncio.to_thread(
        click.prompt, "Generate spec (g), go back (b) or quit (q)",
        type=click.Choice(["g", "b", "q"]), default="g",
    )
    if action == "q":
        return True
    if action == "b":
        machine.go_back()
        return False

    try:
        with console.status("Generating your spec... This may take a moment."):
            spec = await machine.generate_spec()
    except ServiceError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        machine.dismiss_error()
        return False

    if output:
        Path(output).write_text(spec or "")
        console.print(f"[green]Spec written to {escape(output)}[/green]")
    else:
        console.print(Markdown(spec or ""))
    return True


@click.command("interview")
@click.option("--base-url", default=None, help="SpecifyThat base URL")
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False),
              help="Write the generated spec to this file")
def interview_cmd(base_url: Optional[str], output: Optional[str]):
    """Answer a few questions and get a project spec."""

    async def _interview():
        client = _get_client(base_url)
        machine = client.start_interview()
        console.print("[cyan]Commands: /skip (I don't know), /back, /reset, /quit[/cyan]")
        try:
            while True:
                state = machine.state
                if state is InterviewState.COMPLETED:
                    if await _finish(machine, output):
                        break
                elif state is InterviewState.UNIT_SELECTION:
                    await _choose_unit(machine)
                elif state is InterviewState.IDEATION:
                    await _ideate(machine)
                else:
                    await _ask(machine)
        except (_Quit, KeyboardInterrupt, click.Abort):
            console.print("\n[dim]Bye.[/dim]")
        finally:
            await client.close()

    _run(_interview())
