"""
Speaker dash markup for caption payloads.

Runs on its own, outside the fixing passes.
"""
from typing import List, Optional

from .models import Cue, Document
from .passes import PassContext, map_cues
from .profiles import FixSettings

SPEAKER_DASH = "- "

def _starts_new_turn(previous: str, settings: FixSettings) -> bool:
    # The current line is always compared trimmed, the previous one only
    # when trim_previous_line is set.
    if settings.trim_previous_line:
        previous = previous.strip()
    ends_sentence = previous.endswith(".")
    if settings.speaker_turn_rule == "continuation":
        return not ends_sentence
    return ends_sentence

def speaker_dash_lines(lines: List[str], settings: Optional[FixSettings] = None) -> List[str]:
    """Prefix speaker turns in one cue's payload with a dash

    The first non-blank line always gets a dash. Each later line gets one
    when the previous non-blank line satisfies the configured turn rule.
    Blank lines are kept as they are and lines already carrying a dash are
    not prefixed twice.

    Args:
        lines: Payload lines of a single cue
        settings: Rule and trimming switches; defaults apply when omitted

    Returns:
        New list of payload lines
    """
    settings = settings or FixSettings()
    result: List[str] = []
    previous: Optional[str] = None

    for raw in lines:
        line = raw.strip()
        if not line:
            result.append(raw)
            continue
        if not line.startswith(SPEAKER_DASH) and (
            previous is None or _starts_new_turn(previous, settings)
        ):
            line = SPEAKER_DASH + line
        result.append(line)
        previous = raw

    return result

def add_speaker_dashes_pass(document: Document, ctx: PassContext) -> Document:
    """Apply speaker dash markup to every cue of a document"""
    ctx.diagnostics.info("Starting speaker dash addition")

    def dash_cue(cue: Cue) -> List[Cue]:
        return [Cue(cue.start_ms, cue.end_ms, speaker_dash_lines(cue.lines, ctx.settings))]

    result = map_cues(document, dash_cue)
    ctx.diagnostics.info("Speaker dash addition completed")
    return result
