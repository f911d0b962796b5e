"""
Media analysis collaborators for the caption fixer package.

Placing captions clear of on-screen text and resyncing them against the
audio track both need the video itself. The library only sees cue text, so
both steps pass the text through unchanged and say so in the diagnostics.
"""
from .diagnostics import Diagnostics

def cover_screen(content: str, diagnostics: Diagnostics) -> str:
    """Move captions that would cover on-screen text (identity for now)

    Args:
        content: Rendered cue text
        diagnostics: Collector for the current run

    Returns:
        The content, unchanged
    """
    diagnostics.warning("Screen covering not implemented: it requires video analysis")
    return content

def sync_subtitles(content: str, diagnostics: Diagnostics) -> str:
    """Resync cue timings against the audio track (identity for now)

    Args:
        content: Rendered cue text
        diagnostics: Collector for the current run

    Returns:
        The content, unchanged
    """
    diagnostics.warning("Subtitle synchronization not implemented: it requires audio analysis")
    return content
