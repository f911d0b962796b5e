"""
CLI application for caption-fixer
"""
from pathlib import Path
from typing import Optional, Annotated, Callable, Tuple
import typer

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from caption_fixer import (
    Diagnostics,
    FixSettings,
    LogLevel,
    ProfileError,
    TimestampFormatError,
    fix_captions,
    add_speaker_dashes,
    process_all,
    caption_stats,
    parse_document,
    read_vtt,
    write_vtt,
    get_profile,
    list_profiles,
    settings_from_profile,
)
from caption_fixer.diagnostics import LEVEL_STYLES

app = typer.Typer(
    help="Normalize WebVTT captions to line, duration and gap quality rules",
    add_completion=False,
)
console = Console()

Operation = Callable[[str, FixSettings, Diagnostics], Tuple[str, Diagnostics]]

def _load_settings(profile: Optional[str], **overrides) -> FixSettings:
    profile_settings = get_profile(profile) if profile else None
    try:
        return settings_from_profile(profile_settings, **overrides)
    except ProfileError as e:
        console.print(f"[red]Invalid settings: {e}[/red]")
        raise typer.Exit(1)

def _read_input(input_file: Path) -> str:
    if not input_file.exists():
        console.print(f"[red]Input file not found: {input_file}[/red]")
        raise typer.Exit(1)
    return read_vtt(input_file)

def _print_summary(diagnostics: Diagnostics) -> None:
    table = Table(title="Diagnostics")
    table.add_column("Level")
    table.add_column("Entries", justify="right")
    for level, count in diagnostics.counts().items():
        table.add_row(f"[{LEVEL_STYLES[level]}]{level.value}[/{LEVEL_STYLES[level]}]", str(count))
    console.print(table)

    for entry in diagnostics.by_level(LogLevel.ERROR):
        console.print(f"[red]✗ {escape(entry.message)}[/red]")

def _run(
    operation: Operation,
    input_file: Path,
    output_file: Path,
    settings: FixSettings,
    verbose: bool,
) -> None:
    content = _read_input(input_file)
    diagnostics = Diagnostics(console=console if verbose else None)

    try:
        result, diagnostics = operation(content, settings, diagnostics)
    except TimestampFormatError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    write_vtt(result, output_file)
    _print_summary(diagnostics)
    console.print(f"[green]✓ Wrote {output_file}[/green]")

@app.command()
def fix(
    input_file: Annotated[Path, typer.Argument(help="Input WebVTT file")],
    output_file: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output path")] = None,
    profile: Annotated[Optional[str], typer.Option(help="Use a quality profile")] = None,
    redistribute: Annotated[Optional[bool], typer.Option("--redistribute/--no-redistribute", help="Divide text when splitting cues")] = None,
    verbose: Annotated[bool, typer.Option(help="Print every diagnostic entry")] = False,
):
    """Wrap, split, merge and retime captions"""
    settings = _load_settings(profile, redistribute_text=redistribute)
    _run(fix_captions, input_file, output_file or input_file.with_suffix(".fixed.vtt"), settings, verbose)

@app.command()
def dashes(
    input_file: Annotated[Path, typer.Argument(help="Input WebVTT file")],
    output_file: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output path")] = None,
    profile: Annotated[Optional[str], typer.Option(help="Use a quality profile")] = None,
    rule: Annotated[Optional[str], typer.Option(help="Speaker turn rule: sentence_end or continuation")] = None,
    trim_previous: Annotated[Optional[bool], typer.Option("--trim-previous/--no-trim-previous", help="Trim the previous line before the turn check")] = None,
    verbose: Annotated[bool, typer.Option(help="Print every diagnostic entry")] = False,
):
    """Add speaker dashes to caption lines"""
    settings = _load_settings(profile, speaker_turn_rule=rule, trim_previous_line=trim_previous)
    _run(add_speaker_dashes, input_file, output_file or input_file.with_suffix(".dashes.vtt"), settings, verbose)

@app.command(name="all")
def all_steps(
    input_file: Annotated[Path, typer.Argument(help="Input WebVTT file")],
    output_file: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output path")] = None,
    profile: Annotated[Optional[str], typer.Option(help="Use a quality profile")] = None,
    redistribute: Annotated[Optional[bool], typer.Option("--redistribute/--no-redistribute", help="Divide text when splitting cues")] = None,
    rule: Annotated[Optional[str], typer.Option(help="Speaker turn rule: sentence_end or continuation")] = None,
    verbose: Annotated[bool, typer.Option(help="Print every diagnostic entry")] = False,
):
    """Fix, cover screen, add speaker dashes and sync"""
    settings = _load_settings(profile, redistribute_text=redistribute, speaker_turn_rule=rule)
    _run(process_all, input_file, output_file or input_file.with_suffix(".fixed.vtt"), settings, verbose)

@app.command()
def stats(
    input_file: Annotated[Path, typer.Argument(help="Input WebVTT file")],
):
    """Show cue statistics"""
    content = _read_input(input_file)
    try:
        document = parse_document(content)
    except TimestampFormatError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title=str(input_file.name))
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in caption_stats(document).items():
        table.add_row(key, f"{value:.1f}" if isinstance(value, float) else str(value))
    console.print(table)

@app.command()
def profiles():
    """List available quality profiles"""
    profiles = list_profiles()
    console.print("[bold]Available caption quality profiles:[/bold]")
    for name, settings in profiles.items():
        console.print(f"[bold cyan]{name}[/bold cyan]")
        for key, value in settings.items():
            console.print(f"  {key}: {value}")
        console.print()

if __name__ == "__main__":
    app()
