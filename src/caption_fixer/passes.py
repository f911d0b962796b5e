"""
Caption fixing passes.

Each pass takes a document and a ``PassContext`` and returns a new document.
Inputs are never mutated: cues that change are copied, untouched cues and
literal lines are carried over as they are. ``run_passes`` folds a document
through a sequence of passes in order.
"""
from typing import Callable, Iterable, List, Sequence, Tuple
from dataclasses import dataclass, field, replace
from functools import reduce
import re

from .diagnostics import Diagnostics
from .models import Cue, Document, cues_of
from .profiles import FixSettings
from .vtt_io import count_cues, format_timestamp, format_timing_line, render_document

# Leading speaker marker: "-", "--", en-dash(es) or ">>"
LEADING_MARKER = re.compile(r"^(?:[-–]{1,2}|>>)\s*")
MULTI_SPACE = re.compile(r"\s{2,}")
ENTITY_MARKER = "&gt;&gt;"

@dataclass
class PassContext:
    """Settings and diagnostics shared by the passes of one run"""
    settings: FixSettings = field(default_factory=FixSettings)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

Pass = Callable[[Document, PassContext], Document]

def _timing(cue: Cue) -> str:
    return format_timing_line(cue.start_ms, cue.end_ms)

def map_cues(document: Document, fn: Callable[[Cue], Iterable[Cue]]) -> Document:
    """Replace every cue by the cues ``fn`` returns for it"""
    result: Document = []
    for element in document:
        if isinstance(element, Cue):
            result.extend(fn(element))
        else:
            result.append(element)
    return result

def replace_entities(document: Document, ctx: PassContext) -> Document:
    """Turn escaped ``>>`` speaker markers into a dash"""
    ctx.diagnostics.info("Replacing HTML entity references")
    result: Document = []
    for element in document:
        if isinstance(element, Cue):
            lines = [line.replace(ENTITY_MARKER, "-") for line in element.lines]
            result.append(replace(element, lines=lines))
        else:
            result.append(element.replace(ENTITY_MARKER, "-"))
    return result

def wrap_line(line: str, max_chars: int) -> List[str]:
    """Normalize the speaker marker and greedily wrap one payload line

    Args:
        line: Payload line
        max_chars: Maximum characters per wrapped line

    Returns:
        Wrapped lines; empty for a blank line. A single word longer than
        max_chars is kept on its own line.
    """
    line = LEADING_MARKER.sub("- ", line.strip(), count=1)
    wrapped: List[str] = []
    current = ""

    for word in line.split():
        if len(current + " " + word) <= max_chars:
            current = f"{current} {word}" if current else word
        else:
            if current:
                wrapped.append(current)
            current = word

    if current:
        wrapped.append(current)
    return wrapped

def wrap_lines(document: Document, ctx: PassContext) -> Document:
    """Re-wrap payload lines and keep at most ``max_lines`` per cue"""
    settings = ctx.settings
    ctx.diagnostics.info("Starting line wrapping")

    def wrap_cue(cue: Cue) -> List[Cue]:
        wrapped = [w for line in cue.lines for w in wrap_line(line, settings.max_line_chars)]
        if len(wrapped) > settings.max_lines:
            ctx.diagnostics.info(
                f"Caption split into {len(wrapped)} lines, keeping the first "
                f"{settings.max_lines}: {_timing(cue)}"
            )
        return [replace(cue, lines=wrapped[:settings.max_lines])]

    return map_cues(document, wrap_cue)

def normalize_spaces(document: Document, ctx: PassContext) -> Document:
    """Trim payload lines and collapse runs of whitespace"""
    ctx.diagnostics.info("Starting extra space handling")
    return map_cues(
        document,
        lambda cue: [replace(cue, lines=[MULTI_SPACE.sub(" ", line.strip()) for line in cue.lines])],
    )

def _halve_lines(lines: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Divide payload between two cues, the first half taking the extra line"""
    if len(lines) == 1:
        words = lines[0].split()
        k = (len(words) + 1) // 2
        tail = " ".join(words[k:])
        return [" ".join(words[:k])], [tail] if tail else []
    k = (len(lines) + 1) // 2
    return list(lines[:k]), list(lines[k:])

def split_long_durations(document: Document, ctx: PassContext) -> Document:
    """Split cues longer than ``max_duration_ms`` at their midpoint

    By default the inserted timing follows the original one directly: the
    first interval is left empty and the payload moves under the second.
    With ``redistribute_text`` the payload is divided between both halves.
    """
    settings = ctx.settings
    ctx.diagnostics.info("Starting duration handling")

    def split_cue(cue: Cue) -> List[Cue]:
        if cue.duration <= settings.max_duration_ms:
            return [cue]

        ctx.diagnostics.warning(
            f"Caption longer than {settings.max_duration_ms / 1000:g} seconds found: {_timing(cue)}"
        )
        mid_ms = cue.start_ms + cue.duration // 2
        if settings.redistribute_text:
            first_lines, second_lines = _halve_lines(cue.lines)
        else:
            first_lines, second_lines = [], list(cue.lines)

        first = Cue(cue.start_ms, mid_ms, first_lines)
        second = Cue(mid_ms, cue.end_ms, second_lines)
        ctx.diagnostics.info(f"Caption split into two parts: {_timing(first)} and {_timing(second)}")
        return [first, second]

    return map_cues(document, split_cue)

def split_long_line_counts(document: Document, ctx: PassContext) -> Document:
    """Split cues with more than ``max_lines`` payload lines in two

    The first block takes ``n // 2`` lines. By default both blocks repeat the
    original timing; with ``redistribute_text`` the split time is placed in
    proportion to the line counts.
    """
    settings = ctx.settings
    ctx.diagnostics.info("Starting line count handling")

    def split_cue(cue: Cue) -> List[Cue]:
        n = len(cue.lines)
        if n <= settings.max_lines:
            return [cue]

        ctx.diagnostics.warning(
            f"Caption has more than {settings.max_lines} lines, splitting: {_timing(cue)}"
        )
        k = n // 2
        if settings.redistribute_text:
            mid_ms = cue.start_ms + cue.duration * k // n
            return [
                Cue(cue.start_ms, mid_ms, list(cue.lines[:k])),
                Cue(mid_ms, cue.end_ms, list(cue.lines[k:])),
            ]
        return [
            Cue(cue.start_ms, cue.end_ms, list(cue.lines[:k])),
            Cue(cue.start_ms, cue.end_ms, list(cue.lines[k:])),
        ]

    return map_cues(document, split_cue)

def _merge_run(cues: List[Cue], ctx: PassContext) -> List[Cue]:
    settings = ctx.settings
    merged: List[Cue] = []
    i = 0

    while i < len(cues) - 1:
        current, following = cues[i], cues[i + 1]
        if current.duration < settings.short_caption_ms and following.duration < settings.short_caption_ms:
            candidate = Cue(current.start_ms, following.end_ms, current.lines + following.lines)
            if candidate.duration <= settings.max_duration_ms and len(candidate.lines) <= settings.max_lines:
                merged.append(candidate)
                ctx.diagnostics.merge(f"Merged short caption with the next one: {_timing(candidate)}")
                i += 2
                continue
            ctx.diagnostics.error(f"Unable to merge short caption: {_timing(current)}")
        merged.append(current)
        i += 1

    merged.extend(cues[i:])
    return merged

def merge_short_captions(document: Document, ctx: PassContext) -> Document:
    """Merge adjacent pairs of short cues, walking forward without backtracking"""
    ctx.diagnostics.info("Starting merging of short captions")
    result: Document = []
    run: List[Cue] = []

    for element in document:
        if isinstance(element, Cue):
            run.append(element)
            continue
        result.extend(_merge_run(run, ctx))
        run = []
        result.append(element)

    result.extend(_merge_run(run, ctx))
    return result

def check_min_gap(document: Document, ctx: PassContext) -> Document:
    """Warn about consecutive cues closer than ``min_gap_ms``; changes nothing"""
    min_gap = ctx.settings.min_gap_ms
    ctx.diagnostics.info("Starting minimum gap check")
    cues = cues_of(document)

    for current, following in zip(cues, cues[1:]):
        if following.start_ms - current.end_ms < min_gap:
            ctx.diagnostics.warning(
                f"Gap between captions is less than {min_gap}ms: "
                f"{format_timestamp(current.end_ms)} -> {format_timestamp(following.start_ms)}"
            )
    return document

def adjust_timing(document: Document, ctx: PassContext) -> Document:
    """Extend cues shorter than ``min_duration_ms``

    The new end never runs past the next cue's start minus ``min_gap_ms``,
    even when that leaves the cue short.
    """
    settings = ctx.settings
    ctx.diagnostics.info("Starting timing adjustment")
    cues = cues_of(document)
    next_starts = [cue.start_ms for cue in cues[1:]] + [None]
    adjusted = {}

    for index, (cue, next_start) in enumerate(zip(cues, next_starts)):
        if cue.duration >= settings.min_duration_ms:
            continue
        new_end = cue.start_ms + settings.min_duration_ms
        if next_start is not None and new_end > next_start:
            new_end = max(next_start - settings.min_gap_ms, 0)
        adjusted[index] = replace(cue, end_ms=new_end)
        ctx.diagnostics.info(f"Adjusted timing for short caption: {_timing(adjusted[index])}")

    result: Document = []
    index = 0
    for element in document:
        if isinstance(element, Cue):
            result.append(adjusted.get(index, element))
            index += 1
        else:
            result.append(element)
    return result

def final_validation(document: Document, ctx: PassContext) -> Document:
    """Report cues whose start is not before their end"""
    ctx.diagnostics.info("Starting final validation")
    for number, cue in enumerate(cues_of(document), start=1):
        if cue.start_ms >= cue.end_ms:
            ctx.diagnostics.error(
                f"Invalid timestamp: start time is not before end time in caption {number}: {_timing(cue)}"
            )
    ctx.diagnostics.info("Final validation completed")
    return document

def format_output(document: Document, ctx: PassContext) -> str:
    """Render the fixed document and check that captions survived"""
    ctx.diagnostics.info("Adding newlines to timestamps")
    text = render_document(document, blank_after_timing=True)

    ctx.diagnostics.info("Performing final content validation")
    caption_count = count_cues(text)
    ctx.diagnostics.info(f"Total number of captions: {caption_count}")
    if caption_count == 0:
        ctx.diagnostics.error("No captions found in the processed content")
    else:
        ctx.diagnostics.info("Final validation passed")
    return text

# Order matters: wrapping runs before the split and merge passes see line counts
FIX_PASSES: Tuple[Pass, ...] = (
    replace_entities,
    wrap_lines,
    normalize_spaces,
    split_long_durations,
    split_long_line_counts,
    merge_short_captions,
    check_min_gap,
    adjust_timing,
    final_validation,
)

def run_passes(document: Document, passes: Sequence[Pass], ctx: PassContext) -> Document:
    """Fold a document through the passes in order"""
    return reduce(lambda doc, fix_pass: fix_pass(doc, ctx), passes, document)
