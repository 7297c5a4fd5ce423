"""Console and step-output abstractions."""

from .console import (
    ActionsConsole,
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .sink import FileOutputSink, MockOutputSink, OutputSink, StdoutOutputSink

__all__ = [
    "ActionsConsole",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "FileOutputSink",
    "MockOutputSink",
    "OutputSink",
    "StdoutOutputSink",
]
