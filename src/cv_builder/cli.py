"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from cv_builder.config import load_config
from cv_builder.errors import ValidationError
from cv_builder.forms import FORMS, form_for
from cv_builder.forms.base import DatedItemForm, ItemForm
from cv_builder.forms.references import ReferenceForm
from cv_builder.logging.activity_store import ActivityStore
from cv_builder.pipeline.export import EXPORT_FORMATS
from cv_builder.pipeline.orchestrator import BuilderSession
from cv_builder.registry import get_ordered_sections, get_section_label
from cv_builder.templates import list_templates
from cv_builder.templates.html_renderer import render_html, save_html
from cv_builder.templates.text_renderer import render_text

app = typer.Typer(
    name="cv-builder",
    help="Build, preview and export an Irish-market CV",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _open_session(document_id: str | None = None, *, required: bool = True) -> BuilderSession:
    session = BuilderSession.from_config(load_config())
    loaded = asyncio.run(session.open(document_id))
    if required and not loaded:
        if session.store.error:
            console.print(f"[red]Could not load CV: {session.store.error}[/red]")
        else:
            console.print("[yellow]No saved CV found. Run `cv-builder new` first.[/yellow]")
        raise typer.Exit(1)
    return session


def _save(session: BuilderSession, *, force: bool = False) -> None:
    saved = session.store.save_document(force=True) if force else session.save()
    if asyncio.run(saved):
        console.print("[green]Saved.[/green]")
    else:
        console.print(f"[red]Save failed: {session.store.error}[/red]")
        raise typer.Exit(1)


def _print_errors(errors: dict[str, list[str]]) -> None:
    for field, messages in errors.items():
        for message in messages:
            prefix = "" if field == "__root__" else f"{field}: "
            console.print(f"  [red]{prefix}{message}[/red]")


@app.command()
def new(
    name: str = typer.Option("", "--name", help="Your full name"),
    title: str = typer.Option("", "--title", help="Professional title"),
    template: str = typer.Option(None, "--template", "-t", help="Template id"),
) -> None:
    """Start a new, blank CV and save it."""
    session = _open_session(required=False)
    session.store.reset_document()
    try:
        if name or title:
            session.store.update_personal(full_name=name, title=title)
        session.store.set_template(template or load_config().export.default_template)
    except ValidationError as exc:
        _print_errors(exc.errors)
        raise typer.Exit(1)
    _save(session)
    console.print(f"[dim]Document id: {session.document.id}[/dim]")


@app.command()
def show(
    template: str = typer.Option(None, "--template", "-t", help="Render with this template"),
    document_id: str = typer.Option(None, "--id", help="Document id (default: latest)"),
) -> None:
    """Print the CV as plain text."""
    session = _open_session(document_id)
    text = render_text(session.document, template)
    template_id = template or session.document.template_id or load_config().export.default_template
    console.print(Panel(text.rstrip(), title=f"CV ({template_id})"))


@app.command()
def templates() -> None:
    """List the available CV templates."""
    for tmpl in list_templates():
        console.print(
            f"  [bold]{tmpl.id}[/bold]: {tmpl.name} ({tmpl.layout}) [dim]{tmpl.description}[/dim]"
        )


@app.command()
def sections(
    document_id: str = typer.Option(None, "--id", help="Document id (default: latest)"),
) -> None:
    """Show every section in display order with its visibility."""
    session = _open_session(document_id)
    doc = session.document
    table = Table(title="Sections")
    table.add_column("#", justify="right")
    table.add_column("Section")
    table.add_column("Id", style="dim")
    table.add_column("Visible")
    table.add_column("Entries", justify="right")
    for position, entry in enumerate(
        get_ordered_sections(doc.section_visibility, doc.section_order, include_hidden=True)
    ):
        section = doc.get_section(entry.id)
        if section is None:
            count = "-"
        elif entry.id == "summary":
            count = "1" if section.markdown.strip() else "0"
        else:
            count = str(len(section.items))
        table.add_row(
            str(position),
            entry.label,
            entry.id,
            "[green]yes[/green]" if entry.visible else "[red]no[/red]",
            count,
        )
    console.print(table)


@app.command()
def toggle(
    section: str = typer.Argument(help="Section id, e.g. awards"),
    show_section: bool = typer.Option(None, "--show/--hide", help="Set instead of flipping"),
) -> None:
    """Show or hide a section."""
    session = _open_session()
    try:
        session.store.toggle_section_visibility(section, show_section)
    except ValidationError as exc:
        _print_errors(exc.errors)
        raise typer.Exit(1)
    state = "visible" if session.document.is_visible(section) else "hidden"
    console.print(f"{get_section_label(section)} is now {state}.")
    _save(session)


@app.command()
def move(
    section: str = typer.Argument(help="Section id to move"),
    position: int = typer.Argument(help="New position (1 = right after personal details)"),
) -> None:
    """Move a section to a new position in the CV."""
    session = _open_session()
    try:
        session.store.move_section(section, position)
    except ValidationError as exc:
        _print_errors(exc.errors)
        raise typer.Exit(1)
    _save(session)


def _prompt_form(form) -> None:
    """Prompt for every field, showing the current draft as the default."""
    for field in form.fields:
        label = form.label(field)
        if field in form.choices:
            label = f"{label} ({'/'.join(form.choices[field])})"
        if isinstance(form, DatedItemForm) and field == "end":
            form.present = typer.confirm("Currently here (end date = Present)?", default=form.present)
            if form.present:
                continue
        if field == "bullets":
            console.print("[dim]One achievement per line; finish with an empty line.[/dim]")
            lines = []
            while True:
                line = typer.prompt("  -", default="", show_default=False)
                if not line.strip():
                    break
                lines.append(line)
            if lines:
                form.set(field, "\n".join(lines))
            continue
        form.set(field, typer.prompt(label, default=form.values[field], show_default=True))


@app.command()
def edit(
    section: str = typer.Argument(help="Section id: personal, summary, experience, ..."),
    index: int = typer.Option(None, "--index", "-i", help="Entry to edit (default: add new)"),
    mode: str = typer.Option(None, "--mode", help="References only: on-request or detailed"),
) -> None:
    """Edit a section interactively."""
    if section not in FORMS:
        console.print(f"[red]Unknown section {section!r}. Use one of: {', '.join(FORMS)}[/red]")
        raise typer.Exit(1)
    if index is not None and index < 0:
        console.print(f"[red]Entry position must be 0 or greater, got {index}[/red]")
        raise typer.Exit(1)
    session = _open_session()
    try:
        form = form_for(section, session.store, index)
    except IndexError:
        console.print(f"[red]No {section} entry at position {index}[/red]")
        raise typer.Exit(1)

    if isinstance(form, ReferenceForm) and mode:
        if not form.set_mode(mode):
            _print_errors(form.errors)
            raise typer.Exit(1)
        if mode == "on-request":
            _save(session)
            return

    console.print(f"[bold]{get_section_label(section)}[/bold]")
    if isinstance(form, ItemForm) and not form.is_editing:
        console.print("[dim]Adding a new entry.[/dim]")

    while True:
        _prompt_form(form)
        try:
            if form.submit():
                break
        except ValidationError as exc:
            form.errors = exc.errors
        console.print("[yellow]Please fix the following:[/yellow]")
        _print_errors(form.errors)
        if not typer.confirm("Try again?", default=True):
            raise typer.Exit(1)
    _save(session)


@app.command()
def export(
    fmt: str = typer.Option("pdf", "--format", "-f", help="pdf, docx or html"),
    template: str = typer.Option(None, "--template", "-t", help="Template id"),
    output: Path = typer.Option(None, "--output", "-o", help="Output file or directory"),
) -> None:
    """Export the CV to PDF, DOCX or HTML."""
    if fmt not in EXPORT_FORMATS:
        console.print(f"[red]Unknown format {fmt!r}. Use one of: {', '.join(EXPORT_FORMATS)}[/red]")
        raise typer.Exit(1)
    session = _open_session()
    store = session.store

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Exporting...", total=100)

        def on_change(event: str, _store) -> None:
            if event == "export":
                state = store.pdf_generation
                progress.update(task, completed=state.progress, description=state.stage or "exporting")

        unsubscribe = store.subscribe(on_change)
        result = asyncio.run(store.export(fmt, template_id=template, destination=output))
        unsubscribe()

    if result is None:
        console.print(f"[red]Export failed: {store.pdf_generation.error}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Saved {result.format.upper()}: {result.path}[/green] ({result.size:,} bytes)")


@app.command()
def preview(
    template: str = typer.Option(None, "--template", "-t", help="Template id"),
) -> None:
    """Write the CV as HTML and open it in the browser."""
    session = _open_session()
    config = load_config()
    html_path = config.export.resolved_output_dir / "preview.html"
    save_html(render_html(session.document, template), html_path)
    console.print(f"[green]HTML written: {html_path}[/green]")
    webbrowser.open(html_path.resolve().as_uri())


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Replace the CV with a blank one."""
    session = _open_session(required=False)
    if not yes and not typer.confirm("Start over with a blank CV?", default=False):
        raise typer.Exit(0)
    session.request_reset(lambda message: True)
    # reset_document() marks the store clean; write the blank document regardless
    _save(session, force=True)


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of entries"),
) -> None:
    """Show recent saves, exports and resets."""
    config = load_config()
    if not config.activity.enabled:
        console.print("[yellow]Activity logging is disabled in config.yaml.[/yellow]")
        return
    store = ActivityStore(config.activity.resolved_db_path)
    logs = store.get_logs(limit=limit)
    if not logs:
        console.print("[dim]No activity yet.[/dim]")
        return

    table = Table(title="Recent activity")
    table.add_column("When")
    table.add_column("Action")
    table.add_column("Template")
    table.add_column("Format")
    table.add_column("Result")
    for log in logs:
        result = "[green]ok[/green]" if log.success else f"[red]{log.error_message or 'failed'}[/red]"
        table.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M"),
            log.action,
            log.template_id or "-",
            log.export_format or "-",
            result,
        )
    console.print(table)
    stats = store.get_stats()
    console.print(f"[dim]{stats['total']} actions, {stats['success_rate']:.0f}% succeeded[/dim]")


if __name__ == "__main__":
    app()
