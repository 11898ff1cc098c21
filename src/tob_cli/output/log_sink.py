"""Log sinks receiving pipeline messages and the external tool's output."""

import threading
import click
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Tuple

from ..utils.console import STATUS_SYMBOLS, _rich_echo, _rich_error


class Importance(Enum):
    """Message importance, mirroring build-log verbosity levels."""
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class LogSink(ABC):
    """Destination for build log messages."""

    @abstractmethod
    def message(self, text: str, importance: Importance = Importance.NORMAL):
        """Record an informational message."""

    @abstractmethod
    def error(self, text: str):
        """Record a terminal error report."""


class ConsoleLogSink(LogSink):
    """Writes messages to the console; low-importance lines only when verbose."""

    def __init__(self, verbose: bool = False, use_color: bool = True):
        self.verbose = verbose
        self.use_color = use_color
        # Tool output arrives from two reader threads
        self._lock = threading.Lock()

    def message(self, text: str, importance: Importance = Importance.NORMAL):
        if importance is Importance.LOW and not self.verbose:
            return
        with self._lock:
            if not self.use_color:
                click.echo(text)
            elif importance is Importance.HIGH:
                _rich_echo(text, color="white", bold=True)
            elif importance is Importance.LOW:
                _rich_echo(text, color="dim")
            else:
                _rich_echo(text)

    def error(self, text: str):
        with self._lock:
            if self.use_color:
                _rich_error(text, symbol="error")
            else:
                click.echo(f"{STATUS_SYMBOLS['error']} {text}")


class MemoryLogSink(LogSink):
    """Collects messages in memory, e.g. for previews or embedding hosts."""

    def __init__(self):
        self.messages: List[Tuple[str, Importance]] = []
        self.errors: List[str] = []
        self._lock = threading.Lock()

    def message(self, text: str, importance: Importance = Importance.NORMAL):
        with self._lock:
            self.messages.append((text, importance))

    def error(self, text: str):
        with self._lock:
            self.errors.append(text)

    def lines(self, importance: Importance = None) -> List[str]:
        """Return recorded message texts, optionally filtered by importance."""
        return [t for t, i in self.messages if importance is None or i is importance]
