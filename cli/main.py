import typer
import requests
from typing import Optional, List, Dict, Any
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from app.core.config import settings
from bansuri.exceptions import InvalidThemeError, MidiReadError
from bansuri.finder import reveal_next, search_notes
from bansuri.flutes import FLUTES, derive_scale, get_root_note, resolve_flute, score_flute
from bansuri.holes import annotate_holes
from bansuri.theory import parse_notes_with_diagnostics
from cli.preferences import load_theme, save_theme, toggle_theme

# Initialize Typer app
app = typer.Typer(
    name="bansuri",
    help="Bansuri Flute Finder CLI Tool",
    add_completion=False
)

# Initialize console
console = Console()

EMPTY_INPUT_MESSAGE = "Please enter some notes to get recommendations."

# Rich styles per display theme
PALETTES: Dict[str, Dict[str, str]] = {
    "light": {
        "header": "bold magenta",
        "name": "cyan",
        "default": "bold green",
        "avoid": "red",
        "extra": "bold yellow",
        "dim": "dim",
    },
    "dark": {
        "header": "bold bright_magenta",
        "name": "bright_cyan",
        "default": "bold bright_green",
        "avoid": "bright_red",
        "extra": "bold bright_yellow",
        "dim": "grey70",
    },
}

def get_palette() -> Dict[str, str]:
    """Rich styles for the saved display theme."""
    return PALETTES[load_theme()]

def _holes_table(scale: List[str], notes: List[str], palette: Dict[str, str]) -> Table:
    """Hole diagram as a one-row table, blow hole first."""
    view = annotate_holes(scale, notes)
    table = Table(show_header=True, header_style=palette["header"], box=None, padding=(0, 2))
    cells = []
    for item in view.holes:
        table.add_column(item.hole.display_label, justify="center")
        cells.append(f"[{palette[item.state]}]{item.hole.note}[/]")
    if view.extra_notes:
        table.add_column("not in scale", justify="center")
        cells.append(f"[{palette['extra']}]{' '.join(view.extra_notes)}[/]")
    table.add_row(*cells)
    return table

def _report_rejected(rejected: List[str], palette: Dict[str, str]):
    if rejected:
        console.print(f"[{palette['extra']}]⚠ Ignored unrecognized notes: {escape(', '.join(rejected))}[/]")

def _display_result(rank: int, result: Dict[str, Any], notes: List[str], palette: Dict[str, str]):
    """Display one ranked flute as a result card."""
    lines = [
        f"Plays [bold]{result['root_note']} Major[/bold]",
        f"Scale: {' - '.join(result['scale_notes'])}",
        f"Matching: {', '.join(result['matching_notes']) or 'none'}",
    ]
    if result["extra_notes"]:
        lines.append(f"Not in scale: {', '.join(result['extra_notes'])}")

    console.print(Panel(
        "\n".join(lines),
        title=f"#{rank} {result['flute_name']} Flute  [{palette['default']}]{result['match_percent']}% match[/]",
        title_align="left",
        border_style=palette["name"]
    ))
    console.print(_holes_table(result["scale_notes"], notes, palette))

@app.command()
def flutes():
    """List the twelve flutes and the scale each one plays."""
    palette = get_palette()
    table = Table(title="Bansuri Flutes", show_header=True, header_style=palette["header"])
    table.add_column("Flute", style=palette["name"])
    table.add_column("Plays", style="white")
    table.add_column("Scale", style="white")

    for name in FLUTES:
        table.add_row(name, f"{get_root_note(name)} Major", " - ".join(derive_scale(name)))

    console.print(table)

@app.command()
def scale(
    flute: str = typer.Argument(..., help="Flute name, e.g. A or Bb"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes to highlight")
):
    """Show the scale and hole layout of one flute."""
    palette = get_palette()
    name = resolve_flute(flute)
    if name is None:
        console.print(f"[bold red]✗ Unknown flute: {escape(flute)}[/bold red]")
        raise typer.Exit(1)

    report = parse_notes_with_diagnostics(notes)
    _report_rejected(report.rejected, palette)

    scale_notes = list(derive_scale(name))
    console.print(Panel(
        f"[bold]{name} Flute[/bold] plays [bold]{get_root_note(name)} Major[/bold]\n"
        f"Scale: {' - '.join(scale_notes)}",
        border_style=palette["name"]
    ))
    console.print(_holes_table(scale_notes, report.notes, palette))

    if report.notes:
        result = score_flute(name, report.notes)
        console.print(f"Match: [{palette['default']}]{result.match_percent}%[/] "
                      f"({result.match_count} of {len(report.notes)} notes)")

@app.command()
def parse(text: str = typer.Argument(..., help="Notes, space or comma separated")):
    """Show how note text is understood."""
    palette = get_palette()
    report = parse_notes_with_diagnostics(text)
    console.print(f"Notes: {', '.join(report.notes) or 'none'}")
    _report_rejected(report.rejected, palette)

@app.command()
def recommend(
    notes: Optional[str] = typer.Argument(None, help="Notes, space or comma separated"),
    count: int = typer.Option(1, "--count", "-c", min=1, max=12, help="Number of flutes to show"),
    show_all: bool = typer.Option(False, "--all", "-a", help="Show all twelve flutes"),
    midi: Optional[str] = typer.Option(None, "--midi", "-m", help="Read notes from a MIDI file"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Ask a running Flute Finder API instead")
):
    """Recommend the flutes that best fit a set of notes."""
    palette = get_palette()
    wanted = len(FLUTES) if show_all else count

    if api_url and midi:
        console.print("[bold red]✗ --midi cannot be combined with --api-url[/bold red]")
        raise typer.Exit(1)

    if api_url:
        _recommend_via_api(api_url, notes or "", wanted, palette)
        return

    if midi:
        from processing.midi.reader import notes_from_midi
        try:
            parsed = notes_from_midi(midi)
        except MidiReadError as e:
            console.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
            raise typer.Exit(1)
        console.print(f"[{palette['dim']}]Notes from {escape(midi)}: {', '.join(parsed) or 'none'}[/]")
    else:
        report = parse_notes_with_diagnostics(notes)
        _report_rejected(report.rejected, palette)
        parsed = report.notes

    state = search_notes(parsed, revealed=0)
    if state.is_empty:
        console.print(f"[{palette['dim']}]{EMPTY_INPUT_MESSAGE}[/]")
        return

    while state.revealed < wanted and state.has_more:
        state = reveal_next(state)
        _display_result(state.revealed, state.results[state.revealed - 1].to_dict(), parsed, palette)

    if state.has_more:
        remaining = len(state.results) - state.revealed
        console.print(f"[{palette['dim']}]{remaining} more flutes; use --count or --all to see them[/]")

def _recommend_via_api(api_url: str, notes: str, revealed: int, palette: Dict[str, str]):
    """Recommend flutes via a running API."""
    try:
        with console.status("[bold green]Asking the Flute Finder API..."):
            response = requests.post(
                f"{api_url.rstrip('/')}{settings.API_V1_STR}/recommend",
                json={"notes": notes, "revealed": revealed},
                timeout=10
            )
    except requests.RequestException as e:
        console.print(f"[bold red]✗ Error contacting API: {str(e)}[/bold red]")
        raise typer.Exit(1)

    if response.status_code != 200:
        console.print(f"[bold red]✗ API request failed: {response.text}[/bold red]")
        raise typer.Exit(1)

    data = response.json()
    _report_rejected(data.get("rejected_tokens", []), palette)
    if not data["results"]:
        console.print(f"[{palette['dim']}]{data.get('message') or EMPTY_INPUT_MESSAGE}[/]")
        return

    for rank, result in enumerate(data["results"], start=1):
        _display_result(rank, result, data["notes"], palette)

@app.command()
def theme(
    value: Optional[str] = typer.Argument(None, help="light, dark or toggle")
):
    """Show or change the display theme."""
    try:
        if value is None:
            current = load_theme()
        elif value.lower() == "toggle":
            current = toggle_theme()
        else:
            current = save_theme(value)
    except InvalidThemeError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
        raise typer.Exit(1)

    console.print(f"Theme: [bold]{current}[/bold]")

@app.command()
def render(
    flute: str = typer.Argument(..., help="Flute name, e.g. A or Bb"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes to highlight"),
    orientation: str = typer.Option("horizontal", "--orientation", help="horizontal or vertical"),
    output_dir: str = typer.Option(settings.OUTPUT_DIR, "--output-dir", "-o", help="Output directory")
):
    """Render a flute hole diagram to a PNG image."""
    from processing.visualization.visualizer import ORIENTATIONS, render_flute

    name = resolve_flute(flute)
    if name is None:
        console.print(f"[bold red]✗ Unknown flute: {escape(flute)}[/bold red]")
        raise typer.Exit(1)
    if orientation not in ORIENTATIONS:
        console.print(f"[bold red]✗ Orientation must be one of {', '.join(ORIENTATIONS)}[/bold red]")
        raise typer.Exit(1)

    image_path = render_flute(
        derive_scale(name),
        parse_notes_with_diagnostics(notes).notes,
        flute_name=name,
        theme=load_theme(),
        orientation=orientation,
        output_dir=output_dir,
    )
    if image_path is None:
        console.print("[bold red]✗ Error rendering flute diagram[/bold red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Diagram saved to {image_path}[/green]")

@app.command()
def serve(
    host: str = typer.Option(settings.HOST, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.PORT, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload")
):
    """Start the FastAPI server."""
    import uvicorn

    console.print(f"[bold green]Starting Bansuri Flute Finder server on {host}:{port}[/bold green]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower()
    )

def main():
    """Main entry point."""
    app()

if __name__ == "__main__":
    main()
