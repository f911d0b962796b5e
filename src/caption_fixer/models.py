"""
Data model shared by the segmenter, the passes and the formatter.
"""
from typing import List, Union
from dataclasses import dataclass, field

@dataclass
class Cue:
    """One caption unit: a timing interval and its payload lines"""
    start_ms: int
    end_ms: int
    lines: List[str] = field(default_factory=list)

    @property
    def duration(self) -> int:
        return self.end_ms - self.start_ms

# A document keeps literal lines (headers, notes, blank separators) as plain
# strings in their original position around the cues.
Element = Union[str, Cue]
Document = List[Element]

def cues_of(document: Document) -> List[Cue]:
    """Return the cues of a document, in order"""
    return [element for element in document if isinstance(element, Cue)]
