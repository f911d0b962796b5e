"""
WebVTT cue input/output module for the caption fixer package.

Holds the timestamp codec, the cue segmenter and the formatter that turns a
document back into text.
"""
from typing import Iterable, Iterator, Optional, Tuple, Union
from pathlib import Path
import re

from .exceptions import TimestampFormatError
from .models import Cue, Document, Element

# Marks a timing line wherever it appears in a line
TIMING_SEPARATOR = "-->"

# HH:MM:SS.mmm, optionally followed by whitespace and cue settings
TIMESTAMP_PATTERN = re.compile(r"^(\d{2,}):(\d{2}):(\d{2})\.(\d{3})(?:\s.*)?$")

def parse_timestamp(timestamp: str) -> int:
    """Convert a WebVTT timestamp to milliseconds

    Args:
        timestamp: Timestamp (HH:MM:SS.mmm), trailing cue settings are ignored

    Returns:
        Time in milliseconds

    Raises:
        TimestampFormatError: If the text is not a valid timestamp
    """
    match = TIMESTAMP_PATTERN.match(timestamp)
    if not match:
        raise TimestampFormatError(f"Invalid timestamp format: {timestamp!r}")

    hours, minutes, seconds, milliseconds = map(int, match.groups())
    return (hours * 3600 + minutes * 60 + seconds) * 1000 + milliseconds

def format_timestamp(ms: int) -> str:
    """Convert milliseconds to a WebVTT timestamp

    Hours of 100 or more widen the field instead of being truncated.

    Args:
        ms: Time in milliseconds

    Returns:
        WebVTT formatted timestamp (HH:MM:SS.mmm)
    """
    if ms < 0:
        raise ValueError(f"Cannot format negative time: {ms} ms")
    hours, rest = divmod(int(ms), 3600000)
    minutes, rest = divmod(rest, 60000)
    seconds, milliseconds = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{milliseconds:03d}"

def parse_timing_line(line: str) -> Tuple[int, int]:
    """Parse a ``start --> end`` line into a pair of milliseconds"""
    parts = line.split(TIMING_SEPARATOR)
    if len(parts) != 2:
        raise TimestampFormatError(f"Invalid timing line: {line!r}")
    return parse_timestamp(parts[0].strip()), parse_timestamp(parts[1].strip())

def format_timing_line(start_ms: int, end_ms: int) -> str:
    return f"{format_timestamp(start_ms)} {TIMING_SEPARATOR} {format_timestamp(end_ms)}"

def is_timing_line(line: str) -> bool:
    return TIMING_SEPARATOR in line

def iter_elements(lines: Iterable[str]) -> Iterator[Element]:
    """Segment lines into literal lines and cues

    Two states: outside any cue, literal lines are yielded verbatim; once a
    timing line is seen, every following line up to the next timing line
    belongs to that cue's payload. No blank separator is required.

    Args:
        lines: Input lines without line terminators

    Yields:
        Literal lines (str) and Cue objects, in input order
    """
    current: Optional[Cue] = None

    for line in lines:
        if is_timing_line(line):
            if current is not None:
                yield current
            start_ms, end_ms = parse_timing_line(line)
            current = Cue(start_ms=start_ms, end_ms=end_ms)
        elif current is None:
            yield line
        else:
            current.lines.append(line)

    if current is not None:
        yield current

def parse_document(text: str) -> Document:
    """Parse raw cue text into a document"""
    return list(iter_elements(text.strip().splitlines()))

def render_document(document: Document, blank_after_timing: bool = True) -> str:
    """Render a document back to text

    Args:
        document: Literal lines and cues
        blank_after_timing: Insert an empty line after every timing line

    Returns:
        Newline-joined text
    """
    out = []
    for element in document:
        if isinstance(element, Cue):
            timing = format_timing_line(element.start_ms, element.end_ms)
            out.append(timing + "\n" if blank_after_timing else timing)
            out.extend(element.lines)
        else:
            out.append(element)
    return "\n".join(out)

def count_cues(text: str) -> int:
    """Count timing lines in rendered text"""
    return sum(1 for line in text.split("\n") if is_timing_line(line))

def read_vtt(file_path: Union[str, Path]) -> str:
    """Read a cue file as text

    Args:
        file_path: Path to the input file

    Returns:
        The decoded file contents
    """
    return Path(file_path).read_text(encoding="utf-8-sig")

def write_vtt(text: str, file_path: Union[str, Path]) -> None:
    """Write cue text to a file

    Args:
        text: Rendered cue text
        file_path: Path to the output file
    """
    file_path = Path(file_path)
    with open(file_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
        if not text.endswith("\n"):
            f.write("\n")
