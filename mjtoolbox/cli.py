"""
Command-line interface for MJ-Toolbox.

Provides commands for:
- Decomposing a prompt into images, description and parameters
- Browsing the parameter catalog
- Adding, updating and removing parameters
- Translating the description with sentence-by-sentence alignment
- Managing translation provider credentials

Usage:
    mjtoolbox analyze "https://x.io/cat.png A cat on a roof. --ar 16:9"
    mjtoolbox params chaos
    mjtoolbox add "A cat --ar 16:9" style
    mjtoolbox set "A cat --chaos 0" chaos 50
    mjtoolbox translate "A cat. A dog! --v 6.0" --backend baidu
    mjtoolbox keys list
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mjtoolbox import __version__
from mjtoolbox.catalog import available_parameters, describe, iter_definitions, lookup, resolve_default
from mjtoolbox.config import APP_NAME, DEFAULT_BACKEND, DEFAULT_SOURCE_LANG, DEFAULT_TARGET_LANG
from mjtoolbox.decompose import analyze as analyze_prompt
from mjtoolbox.editor import (
    ParameterNotFoundError,
    add_parameter,
    remove_parameter,
    update_parameter,
)
from mjtoolbox.models import PromptAnalysis
from mjtoolbox.session import PromptSession, SessionConfig

app = typer.Typer(
    name="mjtoolbox",
    help="MJ-Toolbox: analyse, edit and translate Midjourney prompts",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{APP_NAME} v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable debug logging",
    ),
):
    """MJ-Toolbox: prompt decomposition and translation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _print_analysis(analysis: PromptAnalysis) -> None:
    if analysis.is_empty:
        console.print("[yellow]Nothing found in prompt.[/]")
        return

    if analysis.image_urls:
        table = Table(title="Images")
        table.add_column("#", style="dim")
        table.add_column("URL", style="cyan")
        for i, url in enumerate(analysis.image_urls, 1):
            table.add_row(str(i), url)
        console.print(table)

    if analysis.descriptions:
        console.print(Panel("\n".join(analysis.descriptions), title="Description"))

    if analysis.parameters:
        table = Table(title="Parameters")
        table.add_column("Flag", style="cyan")
        table.add_column("Value", style="green")
        table.add_column("Name")
        table.add_column("Range", style="dim")
        for param in analysis.parameters:
            definition = lookup(param.name)
            table.add_row(
                f"--{param.name}",
                param.value or "-",
                definition.display_name if definition else "[dim]unknown[/]",
                definition.range_label if definition else "",
            )
        console.print(table)

    remaining = [d.key for d in available_parameters(analysis)]
    if remaining:
        console.print(f"[dim]Available to add: {', '.join(remaining)}[/]")


@app.command()
def analyze(
    prompt: str = typer.Argument(..., help="Prompt text to decompose"),
    json_output: bool = typer.Option(
        False, "--json",
        help="Print the analysis as JSON",
    ),
):
    """Split a prompt into images, description and parameters."""
    analysis = analyze_prompt(prompt)
    if json_output:
        typer.echo(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2))
        return
    _print_analysis(analysis)


@app.command()
def params(
    key: Optional[str] = typer.Argument(None, help="Show details for one parameter"),
    json_output: bool = typer.Option(
        False, "--json",
        help="Print the catalog entries as JSON",
    ),
):
    """List known parameters, or describe one."""
    if json_output:
        keys = [key] if key else None
        entries = [definition.to_dict() for definition in iter_definitions(keys)]
        typer.echo(json.dumps(entries, ensure_ascii=False, indent=2))
        return

    if key:
        console.print(describe(key))
        return

    table = Table(title="Parameter Catalog")
    table.add_column("Flag", style="cyan")
    table.add_column("Name")
    table.add_column("Type", style="yellow")
    table.add_column("Values / Range")
    table.add_column("Default", style="green")
    for definition in iter_definitions():
        values = ", ".join(definition.allowed_values) or (
            definition.range_label if definition.minimum is not None else "-"
        )
        table.add_row(
            f"--{definition.key}",
            definition.display_name,
            definition.value_type.value,
            values,
            resolve_default(definition.key),
        )
    console.print(table)


@app.command()
def add(
    prompt: str = typer.Argument(..., help="Current prompt"),
    key: str = typer.Argument(..., help="Parameter to add"),
):
    """Append a parameter with its default value and print the new prompt."""
    typer.echo(add_parameter(prompt, key))


@app.command("set")
def set_parameter(
    prompt: str = typer.Argument(..., help="Current prompt"),
    key: str = typer.Argument(..., help="Parameter to update"),
    value: str = typer.Argument("", help="New value (blank for the default)"),
):
    """Update a parameter already in the prompt and print the new prompt."""
    try:
        typer.echo(update_parameter(prompt, key, value))
    except ParameterNotFoundError as e:
        console.print(f"[red]Error:[/] {e}")
        console.print(f"Add it first with: [cyan]mjtoolbox add \"...\" {key}[/]")
        raise typer.Exit(1)


@app.command()
def remove(
    prompt: str = typer.Argument(..., help="Current prompt"),
    key: str = typer.Argument(..., help="Parameter to remove"),
):
    """Remove a parameter from the prompt and print the new prompt."""
    try:
        typer.echo(remove_parameter(prompt, key))
    except ParameterNotFoundError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)


@app.command()
def translate(
    prompt: str = typer.Argument(..., help="Prompt whose description to translate"),
    backend: str = typer.Option(
        DEFAULT_BACKEND, "--backend", "-b",
        help="Translation backend (google, baidu, echo)",
    ),
    source_lang: str = typer.Option(
        DEFAULT_SOURCE_LANG, "--source", "-s",
        help="Source language code",
    ),
    target_lang: str = typer.Option(
        DEFAULT_TARGET_LANG, "--target", "-t",
        help="Target language code",
    ),
    json_output: bool = typer.Option(
        False, "--json",
        help="Print the session config and translation state as JSON",
    ),
):
    """Translate the description and show it aligned sentence by sentence."""
    try:
        session = PromptSession(SessionConfig(
            backend=backend,
            source_lang=source_lang,
            target_lang=target_lang,
        ))
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    session.set_prompt(prompt)
    if json_output:
        state = asyncio.run(session.translate())
        typer.echo(json.dumps(
            {"config": session.config.to_dict(), "translation": state.to_dict()},
            ensure_ascii=False, indent=2,
        ))
        if state.failed:
            raise typer.Exit(1)
        return

    if not session.analysis.descriptions:
        console.print("[yellow]No description text to translate.[/]")
        return

    with console.status(f"Translating with {session.translator.name}..."):
        state = asyncio.run(session.translate())

    if state.failed:
        console.print(f"[red]{state.translated_text}:[/] {state.error}")
        raise typer.Exit(1)

    table = Table(title=f"Aligned translation ({session.translator.name})")
    table.add_column("#", style="dim")
    table.add_column("Original", style="cyan")
    table.add_column("Translated", style="green")
    for pair in state.pairs:
        table.add_row(str(pair.index + 1), pair.original, pair.translated or "[dim]-[/]")
    console.print(table)


@app.command()
def keys(
    action: str = typer.Argument(..., help="Action: list, set, delete"),
    service: Optional[str] = typer.Argument(None, help="Service name (baidu-appid, baidu-secret)"),
    value: Optional[str] = typer.Option(
        None, "--value",
        help="Credential value (prompted for when omitted)",
    ),
):
    """Manage translation provider credentials.

    Examples:
        mjtoolbox keys list
        mjtoolbox keys set baidu-appid
        mjtoolbox keys delete baidu-secret
    """
    from mjtoolbox.keys import KeyManager, SERVICES

    km = KeyManager()

    if action == "list":
        table = Table(title="Credentials Status")
        table.add_column("Service", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Source", style="yellow")
        table.add_column("Value", style="dim")

        for key_info in km.list_keys():
            status = "✓ Set" if key_info.is_set else "✗ Not set"
            status_color = "green" if key_info.is_set else "red"
            table.add_row(
                key_info.service,
                f"[{status_color}]{status}[/]",
                key_info.source,
                key_info.masked_value if key_info.is_set else "-",
            )

        console.print(table)
        console.print("\n[dim]Priority: env > keychain > config file[/]")

    elif action == "set":
        if not service:
            console.print("[red]Error:[/] Service name required")
            console.print(f"Available services: {', '.join(SERVICES)}")
            raise typer.Exit(1)

        if value is None:
            from getpass import getpass
            value = getpass(f"Enter credential for {service}: ")

        if not value:
            console.print("[red]Error:[/] Value cannot be empty")
            raise typer.Exit(1)

        storage = km.set_key(service, value)
        console.print(f"[green]✓[/] Credential for {service} saved to {storage}")

    elif action == "delete":
        if not service:
            console.print("[red]Error:[/] Service name required")
            raise typer.Exit(1)

        if km.delete_key(service):
            console.print(f"[green]✓[/] Credential for {service} deleted")
        else:
            console.print(f"[yellow]⚠[/] No credential found to delete for {service}")

    else:
        console.print(f"[red]Error:[/] Unknown action '{action}'")
        console.print("Available actions: list, set, delete")
        raise typer.Exit(1)
