# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for ai-completion.

Commands:
    languages        List registered languages
    analyze          Show the analyzed context at a position
    complete         Run the full completion pipeline at a position
    config           Show effective settings
    test-connection  Probe the completion backend

Positions are zero-based, as in the editor protocol.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ai_completion import __version__
from ai_completion.analysis import CodeContext, ContextAnalyzer
from ai_completion.completion import CancellationToken, CompletionOrchestrator
from ai_completion.completion.backends import HTTPCompletionBackend
from ai_completion.config import DEFAULT_LOG_LEVEL, CompletionSettings
from ai_completion.document import InMemoryDocument, Position
from ai_completion.errors import CompletionError
from ai_completion.languages import LanguageConfigRegistry
from ai_completion.logging_config import configure_logging
from ai_completion.usage import TokenCounter

app = typer.Typer(
    name="ai-completion",
    help="AI inline code completion from the command line",
    add_completion=False,
)

console = Console()

CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="YAML settings file (defaults to environment only)"
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"ai-completion v{__version__}")
        raise typer.Exit()

@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="none, error, warn, info or debug (defaults to the log_level setting)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """AI inline code completion."""
    ctx.obj = {"log_level": log_level}
    if log_level is None:
        try:
            log_level = CompletionSettings().log_level
        except ValidationError:
            # Reported by the command that loads the settings
            log_level = DEFAULT_LOG_LEVEL
    configure_logging(log_level)


def _load_settings(ctx: typer.Context, config: Optional[Path]) -> CompletionSettings:
    """Load settings and apply their log level unless --log-level was given."""
    try:
        if config is not None:
            settings = CompletionSettings.from_yaml(config)
        else:
            settings = CompletionSettings()
    except (CompletionError, ValidationError) as e:
        console.print(f"[bold red]Invalid settings:[/] {e}")
        raise typer.Exit(1)

    if not (ctx.obj or {}).get("log_level"):
        configure_logging(settings.log_level)
    return settings


def _load_document(
    file: Path, registry: LanguageConfigRegistry, language: Optional[str]
) -> InMemoryDocument:
    if not file.is_file():
        console.print(f"[bold red]Error:[/] File not found: {file}")
        raise typer.Exit(1)
    return InMemoryDocument.from_path(file, language_id=language, registry=registry)


def _check_position(document: InMemoryDocument, line: int, column: int) -> Position:
    if not 0 <= line < document.line_count:
        console.print(
            f"[bold red]Error:[/] Line {line} out of range (0-{document.line_count - 1})"
        )
        raise typer.Exit(1)
    return Position(line=line, character=max(0, min(column, len(document.line_at(line)))))


@app.command()
def languages() -> None:
    """List registered languages."""
    registry = LanguageConfigRegistry.with_builtin_languages()

    table = Table(title="Supported Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Name")
    table.add_column("Aliases", style="dim")
    table.add_column("Extensions", style="green")

    for name in registry.languages():
        config = registry.lookup(name)
        table.add_row(
            name,
            config.display_name,
            ", ".join(config.aliases) or "-",
            ", ".join(config.extensions),
        )

    console.print(table)


def _render_context(context: CodeContext) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Language", context.language)
    table.add_row("Line kind", context.line_kind.value)
    table.add_row("Indentation", repr(context.indentation))
    table.add_row("Prefix", repr(context.current_line_prefix))

    func = context.enclosing_function
    if func:
        signature = f"{func.name}({', '.join(func.parameter_names)})"
        if func.return_type_hint:
            signature += f" -> {func.return_type_hint}"
        if func.is_async:
            signature = "async " + signature
        table.add_row("Function", f"{signature}  [dim]line {func.declaration_line}[/]")
    else:
        table.add_row("Function", "-")

    cls = context.enclosing_class
    if cls:
        label = cls.name + (f"({cls.base_name})" if cls.base_name else "")
        table.add_row("Class", f"{label}  [dim]line {cls.declaration_line}[/]")
        table.add_row("Methods", ", ".join(cls.method_names) or "-")
        table.add_row("Properties", ", ".join(cls.property_names) or "-")
    else:
        table.add_row("Class", "-")

    table.add_row("Imports", "\n".join(context.imports) or "-")
    variables = [
        f"{v.name} [dim]({v.scope.value}, line {v.line})[/]" for v in context.in_scope_variables()
    ]
    table.add_row("Variables", "\n".join(variables) or "-")
    return table


@app.command()
def analyze(
    file: Path = typer.Argument(..., help="Source file"),
    line: int = typer.Option(..., "--line", "-n", help="Zero-based line"),
    column: int = typer.Option(0, "--column", help="Zero-based character offset"),
    language: Optional[str] = typer.Option(
        None, "--language", help="Language id (detected from the extension if omitted)"
    ),
) -> None:
    """Show the analyzed code context at a position."""
    registry = LanguageConfigRegistry.with_builtin_languages()
    document = _load_document(file, registry, language)
    position = _check_position(document, line, column)

    context = ContextAnalyzer(registry).analyze(document, position)
    console.print(Panel(_render_context(context), title=f"{file.name}:{position}"))


async def _run_completion(
    settings: CompletionSettings, document: InMemoryDocument, position: Position
) -> tuple[list[str], TokenCounter]:
    backend = HTTPCompletionBackend(settings)
    counter = TokenCounter()
    orchestrator = CompletionOrchestrator(backend=backend, settings=settings, usage_sink=counter)
    try:
        result = await orchestrator.provide_completion_items(
            document, position, CancellationToken()
        )
    finally:
        await backend.close()
    return [item.insert_text or item.label for item in result.items], counter


@app.command()
def complete(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Source file"),
    line: int = typer.Option(..., "--line", "-n", help="Zero-based line"),
    column: int = typer.Option(0, "--column", help="Zero-based character offset"),
    language: Optional[str] = typer.Option(None, "--language", help="Language id override"),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Request a completion at a position."""
    settings = _load_settings(ctx, config)
    if not settings.api_key:
        console.print("[bold red]Error:[/] API key is not configured (AI_COMPLETION_API_KEY)")
        raise typer.Exit(1)

    registry = LanguageConfigRegistry.with_builtin_languages()
    document = _load_document(file, registry, language)
    position = _check_position(document, line, column)

    suggestions, counter = asyncio.run(_run_completion(settings, document, position))
    if not suggestions:
        console.print("[yellow]No suggestion.[/] Run with --log-level info for details.")
        raise typer.Exit(1)

    for text in suggestions:
        console.print(Syntax(text, document.language_id, theme="ansi_dark"))
    console.print(f"[dim]{counter.formatted_stats()}[/]")


@app.command("config")
def show_config(ctx: typer.Context, config: Optional[Path] = CONFIG_OPTION) -> None:
    """Show effective settings with the API key masked."""
    settings = _load_settings(ctx, config)

    table = Table(title="Completion Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in settings.to_dict().items():
        table.add_row(key, "-" if value is None else str(value))
    console.print(table)

    errors = settings.validation_errors()
    if errors:
        for error in errors:
            console.print(f"[yellow]![/] {error}")
    else:
        console.print("[green]Configuration is valid[/]")


@app.command("test-connection")
def test_connection(ctx: typer.Context, config: Optional[Path] = CONFIG_OPTION) -> None:
    """Send a one-token probe to the backend."""
    settings = _load_settings(ctx, config)

    async def probe() -> bool:
        backend = HTTPCompletionBackend(settings)
        try:
            return await backend.is_healthy()
        finally:
            await backend.close()

    with console.status(f"Contacting {settings.base_url}..."):
        healthy = asyncio.run(probe())

    if healthy:
        console.print(f"[green]Connected[/] to {settings.base_url} (model {settings.model})")
    else:
        console.print(f"[bold red]Connection failed[/] to {settings.base_url}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
