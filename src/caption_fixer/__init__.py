"""
Caption Fixer - WebVTT caption normalization with captioning quality rules

A package that rewrites WebVTT-style cue files so they satisfy common
captioning rules:
- At most 32 characters per line and 3 lines per cue
- Cue durations between 1 and 7 seconds
- A minimum gap of 40 ms between cues
- Dash markup for speaker turns

Every operation reports what it changed through a per-call diagnostics
collector.
"""

__version__ = "0.1.0"

# Import core classes and functions
from .diagnostics import Diagnostics, LogEntry, LogLevel
from .exceptions import CaptionFixerError, TimestampFormatError, ProfileError
from .models import Cue, Document
from .profiles import FixSettings, get_profile, list_profiles, save_user_profile, delete_user_profile, settings_from_profile
from .quality import CaptionQualityFixer, fix_captions, add_speaker_dashes, process_all, caption_stats
from .media import cover_screen, sync_subtitles
from .vtt_io import parse_document, render_document, parse_timestamp, format_timestamp, read_vtt, write_vtt

__all__ = [
    # Classes
    "CaptionQualityFixer",
    "Cue",
    "Document",
    "Diagnostics",
    "LogEntry",
    "LogLevel",
    "FixSettings",

    # Errors
    "CaptionFixerError",
    "TimestampFormatError",
    "ProfileError",

    # Operations
    "fix_captions",
    "add_speaker_dashes",
    "process_all",
    "cover_screen",
    "sync_subtitles",
    "caption_stats",

    # VTT handling
    "parse_document",
    "render_document",
    "parse_timestamp",
    "format_timestamp",
    "read_vtt",
    "write_vtt",

    # Profiles
    "get_profile",
    "list_profiles",
    "save_user_profile",
    "delete_user_profile",
    "settings_from_profile",
]
