"""
Command-line interface for SRTEdit.

Batch access to the editing core: check, export, caption track
generation, playback lookups and single-cue edits.
"""

import functools
import sys
from pathlib import Path

import click
from tqdm import tqdm

from . import __version__
from .exporter import SRTExport, export_to_vtt
from .session import EditorSession
from .utils import (
    EmptyResultError,
    SRTEditError,
    SubtitleLoadError,
    format_duration,
    format_timecode,
    get_logger,
    parse_timecode,
    setup_logging,
)

logger = get_logger(__name__)


def handle_errors(func):
    """Turn library errors into a message and a non-zero exit code."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SRTEditError as e:
            click.echo(f"\n❌ Error: {e}\n", err=True)
            logger.error(f"Command failed: {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            click.echo("\n\n⚠️  Interrupted by user\n", err=True)
            sys.exit(130)

    return wrapper


def load_session(srt_path: str, video_name: str = None) -> EditorSession:
    session = EditorSession()
    if video_name:
        session.set_video(video_name)
    session.load_file(srt_path)
    return session


def display_advisories(export: SRTExport):
    if export.invalid_timing:
        click.echo("⚠️  Some lines have invalid timing (end time before or equal to start time)", err=True)
    if export.overlap:
        click.echo("⚠️  Some lines overlap the previous line", err=True)


def write_back(session: EditorSession, srt_path: str, output_path: str = None):
    """Write the edited sequence to output_path, or over the input file."""
    target = output_path or srt_path
    export = session.exporter.export_to_file(session.cues, target, force=True)
    display_advisories(export)
    click.echo(f"✅ Saved {export.cue_count} subtitles to: {target}")


def describe_cue(position: int, cue) -> str:
    start = format_timecode(cue.start_time)
    end = format_timecode(cue.end_time)
    return f"#{position + 1}  {start} --> {end}\n{cue.text}"


@click.group()
@click.version_option(version=__version__, prog_name="SRTEdit")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging",
)
@click.option(
    "--log-file",
    type=click.Path(),
    envvar="SRTEDIT_LOG_FILE",
    help="Optional log file path (or set SRTEDIT_LOG_FILE env var)",
)
def main(verbose, log_file):
    """
    SRTEdit - SRT subtitle editing toolkit

    Check, fix, re-time and export SRT subtitle files.

    \b
    Example:
        srtedit check movie.srt
        srtedit export movie.srt --video movie.mp4
        srtedit retime movie.srt 3 end 00:00:12,500
    """
    setup_logging(verbose=verbose, log_file=log_file)


@main.command()
@click.argument("srt_paths", nargs=-1, required=True, type=click.Path())
@handle_errors
def check(srt_paths):
    """Parse SRT files and report warnings and timing problems."""
    failures = 0
    reports = []

    for srt_path in tqdm(srt_paths, desc="Checking", unit="file", disable=len(srt_paths) < 2):
        session = EditorSession()
        try:
            session.load_file(srt_path)
        except (SubtitleLoadError, EmptyResultError) as e:
            failures += 1
            reports.append((srt_path, None, str(e)))
            continue
        reports.append((srt_path, session, None))

    for srt_path, session, error in reports:
        click.echo(f"\n{'='*60}")
        click.echo(f"File:     {srt_path}")
        if error:
            click.echo(f"❌ {error}", err=True)
            continue

        cues = session.cues
        span = cues[-1].end_time if cues else 0.0
        click.echo(f"Cues:     {len(cues)}")
        click.echo(f"Span:     {format_duration(span)}")
        click.echo(f"Warnings: {len(session.parse_warnings)}")
        for warning in session.parse_warnings:
            click.echo(f"   • {warning.message}")
        if cues:
            display_advisories(session.export())

    click.echo(f"{'='*60}")
    if failures:
        click.echo(f"\n❌ {failures} file(s) could not be parsed\n", err=True)
        sys.exit(1)


@main.command()
@click.argument("srt_path", type=click.Path(exists=True))
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    help="Output SRT file path. Default: <video>_edited.srt next to the input",
)
@click.option("--video", "video_name", help="Video file name used to name the export")
@click.option("-y", "--yes", is_flag=True, help="Export even if timing problems are found")
@handle_errors
def export(srt_path, output_path, video_name, yes):
    """Renumber and re-export an SRT file (UTF-8 with BOM)."""
    session = load_session(srt_path, video_name)
    result = session.export()

    if result.has_advisories:
        display_advisories(result)
        if not yes and not click.confirm("The exported file may not work correctly. Export anyway?"):
            click.echo("Export cancelled.", err=True)
            sys.exit(1)

    directory = str(Path(srt_path).resolve().parent)
    if output_path is None:
        output_path = str(Path(directory) / session.export_filename)
    session.write_export(output_path, force=True)
    click.echo(f"\n✅ Success! Subtitles saved to: {output_path}\n")


@main.command()
@click.argument("srt_path", type=click.Path(exists=True))
@click.option("-o", "--output", "output_path", required=True, type=click.Path(), help="Output VTT file path")
@handle_errors
def vtt(srt_path, output_path):
    """Write the WebVTT caption track used for live preview."""
    session = load_session(srt_path)
    stats = export_to_vtt(session.cues, output_path)
    click.echo(
        f"✅ Wrote {stats['output_cues']}/{stats['input_cues']} cues to: {output_path}"
    )


@main.command()
@click.argument("srt_path", type=click.Path(exists=True))
@click.argument("timecode")
@handle_errors
def at(srt_path, timecode):
    """Show the cue active at TIMECODE (HH:MM:SS,mmm)."""
    session = load_session(srt_path)
    position = parse_timecode(timecode)
    transition = session.position_jumped(position)

    if transition.current is None:
        click.echo(f"No active cue at {format_timecode(position)}")
        return
    click.echo(describe_cue(transition.current, session.cues[transition.current]))


@main.command()
@click.argument("srt_path", type=click.Path(exists=True))
@click.argument("index", type=int)
@click.option("--above", "position", flag_value="above", help="Insert before the cue")
@click.option("--below", "position", flag_value="below", default=True, help="Insert after the cue (default)")
@click.option("--duration", type=float, help="Video duration in seconds, limits cues after the last one")
@click.option("--text", help="Text of the new cue")
@click.option("-o", "--output", "output_path", type=click.Path(), help="Output path. Default: edit in place")
@handle_errors
def insert(srt_path, index, position, duration, text, output_path):
    """Insert a new cue next to cue INDEX (1-based)."""
    session = load_session(srt_path)
    if duration:
        session.metadata_ready(duration)
    new_index = session.insert_adjacent(index - 1, position)
    if text is not None:
        session.set_text(new_index, text)

    click.echo(describe_cue(new_index, session.cues[new_index]))
    write_back(session, srt_path, output_path)


@main.command()
@click.argument("srt_path", type=click.Path(exists=True))
@click.argument("index", type=int)
@click.option("-o", "--output", "output_path", type=click.Path(), help="Output path. Default: edit in place")
@handle_errors
def delete(srt_path, index, output_path):
    """Delete cue INDEX (1-based)."""
    session = load_session(srt_path)
    removed = session.delete(index - 1)
    click.echo(f"Deleted: {removed.text[:50]}")
    write_back(session, srt_path, output_path)


@main.command()
@click.argument("srt_path", type=click.Path(exists=True))
@click.argument("index", type=int)
@click.argument("field", type=click.Choice(["start", "end"]))
@click.argument("timecode")
@click.option("-o", "--output", "output_path", type=click.Path(), help="Output path. Default: edit in place")
@handle_errors
def retime(srt_path, index, field, timecode, output_path):
    """Set the start or end of cue INDEX (1-based) to TIMECODE."""
    session = load_session(srt_path)
    new_index = session.retime(index - 1, field, timecode)
    if session.store.overlaps(new_index):
        click.echo("⚠️  The cue now overlaps a neighbouring cue", err=True)

    click.echo(describe_cue(new_index, session.cues[new_index]))
    write_back(session, srt_path, output_path)


@main.command("set-text")
@click.argument("srt_path", type=click.Path(exists=True))
@click.argument("index", type=int)
@click.argument("text")
@click.option("-o", "--output", "output_path", type=click.Path(), help="Output path. Default: edit in place")
@handle_errors
def set_text(srt_path, index, text, output_path):
    """Replace the text of cue INDEX (1-based)."""
    session = load_session(srt_path)
    # Shells pass "\n" literally
    session.set_text(index - 1, text.replace("\\n", "\n"))
    write_back(session, srt_path, output_path)


if __name__ == "__main__":
    main()
