"""
Caption quality fixing for the caption fixer package.

The module-level functions run one operation with a fresh diagnostics
collector and return ``(text, diagnostics)``. ``CaptionQualityFixer`` wraps
them for callers that only want the text back.
"""
from typing import Any, Dict, Optional, Tuple

from rich.console import Console

from .diagnostics import Diagnostics
from .exceptions import TimestampFormatError
from .media import cover_screen as _cover_screen, sync_subtitles as _sync_subtitles
from .models import Document, cues_of
from .passes import FIX_PASSES, PassContext, format_output, run_passes
from .profiles import FixSettings
from .speaker import add_speaker_dashes_pass
from .vtt_io import parse_document, render_document

def _context(settings: Optional[FixSettings], diagnostics: Optional[Diagnostics]) -> PassContext:
    return PassContext(
        settings=settings if settings is not None else FixSettings(),
        diagnostics=diagnostics if diagnostics is not None else Diagnostics(),
    )

def _parse(text: str, diagnostics: Diagnostics) -> Document:
    try:
        return parse_document(text)
    except TimestampFormatError as e:
        diagnostics.error(str(e))
        raise

def fix_captions(
    content: str,
    settings: Optional[FixSettings] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Tuple[str, Diagnostics]:
    """Run the fixing passes over cue text

    Args:
        content: Input cue text
        settings: Pass thresholds; defaults apply when omitted
        diagnostics: Collector to append to; a new one is created when omitted

    Returns:
        Fixed text and the diagnostics of this run

    Raises:
        TimestampFormatError: On a malformed timestamp; no output is produced
    """
    ctx = _context(settings, diagnostics)
    ctx.diagnostics.info("Starting caption fixing")

    document = _parse(content, ctx.diagnostics)
    document = run_passes(document, FIX_PASSES, ctx)
    result = format_output(document, ctx)

    ctx.diagnostics.info("Caption fixing completed")
    return result, ctx.diagnostics

def add_speaker_dashes(
    content: str,
    settings: Optional[FixSettings] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Tuple[str, Diagnostics]:
    """Mark speaker turns in cue text with a leading dash

    Blank lines after timing lines are kept, so fixed output stays fixed.
    """
    ctx = _context(settings, diagnostics)
    document = _parse(content, ctx.diagnostics)
    document = add_speaker_dashes_pass(document, ctx)
    return render_document(document, blank_after_timing=False), ctx.diagnostics

def process_all(
    content: str,
    settings: Optional[FixSettings] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Tuple[str, Diagnostics]:
    """Fix, cover screen, add speaker dashes and sync, in that order"""
    ctx = _context(settings, diagnostics)

    result, _ = fix_captions(content, ctx.settings, ctx.diagnostics)
    result = _cover_screen(result, ctx.diagnostics)
    result, _ = add_speaker_dashes(result, ctx.settings, ctx.diagnostics)
    result = _sync_subtitles(result, ctx.diagnostics)
    return result, ctx.diagnostics

def caption_stats(document: Document) -> Dict[str, Any]:
    """Get statistics about the cues of a document

    Args:
        document: Parsed document

    Returns:
        Dictionary with statistics; durations in milliseconds
    """
    cues = cues_of(document)
    if not cues:
        return {
            "cue_count": 0,
            "total_duration": 0,
            "avg_duration": 0,
            "min_duration": 0,
            "avg_line_chars": 0,
            "max_line_chars": 0,
            "max_lines": 0,
        }

    durations = [cue.duration for cue in cues]
    line_lengths = [len(line) for cue in cues for line in cue.lines if line.strip()]

    return {
        "cue_count": len(cues),
        "total_duration": sum(durations),
        "avg_duration": sum(durations) / len(cues),
        "min_duration": min(durations),
        "avg_line_chars": sum(line_lengths) / len(line_lengths) if line_lengths else 0,
        "max_line_chars": max(line_lengths, default=0),
        "max_lines": max(sum(1 for line in cue.lines if line.strip()) for cue in cues),
    }

class CaptionQualityFixer:
    """Applies captioning quality rules to WebVTT cue text"""

    def __init__(self, settings: Optional[FixSettings] = None, console: Optional[Console] = None):
        """Initialize the fixer

        Args:
            settings: Pass thresholds and switches
            console: If given, diagnostics are echoed to it as they happen
        """
        self.settings = settings or FixSettings()
        self.console = console
        self.last_diagnostics = Diagnostics()

    def _new_diagnostics(self) -> Diagnostics:
        # Each call gets its own collector so runs never mix
        self.last_diagnostics = Diagnostics(console=self.console)
        return self.last_diagnostics

    def fix(self, content: str) -> str:
        result, _ = fix_captions(content, self.settings, self._new_diagnostics())
        return result

    def add_speaker_dashes(self, content: str) -> str:
        result, _ = add_speaker_dashes(content, self.settings, self._new_diagnostics())
        return result

    def cover_screen(self, content: str) -> str:
        return _cover_screen(content, self._new_diagnostics())

    def sync_subtitles(self, content: str) -> str:
        return _sync_subtitles(content, self._new_diagnostics())

    def process_all(self, content: str) -> str:
        result, _ = process_all(content, self.settings, self._new_diagnostics())
        return result

    def get_stats(self, content: str) -> Dict[str, Any]:
        return caption_stats(parse_document(content))
