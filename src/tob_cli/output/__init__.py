"""Output formatting and log sinks for the transform-on-build CLI."""

from .log_sink import ConsoleLogSink, Importance, LogSink, MemoryLogSink
from .transform_formatters import TransformRunFormatter

__all__ = [
    'ConsoleLogSink',
    'Importance',
    'LogSink',
    'MemoryLogSink',
    'TransformRunFormatter'
]
