"""
Diagnostics collector for the caption fixing passes.

Every pass reports what it found or changed through a ``Diagnostics``
instance. A fresh collector is created for each top-level call so entries
from different runs never mix.
"""
from typing import Dict, Iterator, List, Optional
from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.markup import escape

class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    MERGE = "merge"

# Console markup per level
LEVEL_STYLES = {
    LogLevel.INFO: "dim",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.MERGE: "cyan",
}

@dataclass(frozen=True)
class LogEntry:
    """A single diagnostic message"""
    message: str
    level: LogLevel = LogLevel.INFO

class Diagnostics:
    """Append-only sequence of log entries produced during one run"""

    def __init__(self, console: Optional[Console] = None):
        """Initialize an empty collector

        Args:
            console: If given, every entry is also printed to this console
        """
        self.console = console
        self._entries: List[LogEntry] = []

    def add(self, message: str, level: LogLevel = LogLevel.INFO) -> LogEntry:
        entry = LogEntry(message=message, level=LogLevel(level))
        self._entries.append(entry)
        if self.console is not None:
            self._echo(entry)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add(message, LogLevel.INFO)

    def warning(self, message: str) -> LogEntry:
        return self.add(message, LogLevel.WARNING)

    def error(self, message: str) -> LogEntry:
        return self.add(message, LogLevel.ERROR)

    def merge(self, message: str) -> LogEntry:
        return self.add(message, LogLevel.MERGE)

    def extend(self, other: "Diagnostics") -> None:
        """Append the entries of another collector, in order, without echoing"""
        self._entries.extend(other.entries)

    def by_level(self, level: LogLevel) -> List[LogEntry]:
        return [entry for entry in self._entries if entry.level == level]

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        return [e.message for e in self._entries if level is None or e.level == level]

    def counts(self) -> Dict[LogLevel, int]:
        """Number of entries per level, including levels with no entries"""
        counts = {level: 0 for level in LogLevel}
        for entry in self._entries:
            counts[entry.level] += 1
        return counts

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    @property
    def has_errors(self) -> bool:
        return any(entry.level == LogLevel.ERROR for entry in self._entries)

    def _echo(self, entry: LogEntry) -> None:
        style = LEVEL_STYLES[entry.level]
        label = entry.level.value.upper()
        self.console.print(f"[{style}]\\[{label}] {escape(entry.message)}[/{style}]")

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Diagnostics({len(self._entries)} entries)"
