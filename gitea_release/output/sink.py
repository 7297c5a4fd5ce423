"""Step outputs.

Actions runners collect step outputs from the file named by ``GITHUB_OUTPUT``
(Gitea sets the same variable, and ``GITEA_OUTPUT`` on newer runners). Values
containing newlines use the heredoc form::

    body<<ghadelimiter_<uuid>
    ## Changes
    ...
    ghadelimiter_<uuid>
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import typer

from gitea_release.core.result import Err, Ok, Result

__all__ = [
    "OutputError",
    "OutputSink",
    "FileOutputSink",
    "StdoutOutputSink",
    "MockOutputSink",
    "format_output",
    "sink_from_env",
]


@dataclass(frozen=True, slots=True)
class OutputError:
    message: str
    path: Path | None = None


class OutputSink(Protocol):
    def set_outputs(self, values: Mapping[str, str]) -> Result[None, OutputError]:
        """Publish ``values`` as step outputs, in mapping order."""
        ...


def format_output(name: str, value: str) -> str:
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    # The runner drops the newline before the closing delimiter.
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


@dataclass(frozen=True, slots=True)
class FileOutputSink:
    path: Path

    def set_outputs(self, values: Mapping[str, str]) -> Result[None, OutputError]:
        text = "".join(format_output(k, v) for k, v in values.items())
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            return Err(OutputError(f"failed to write outputs: {e}", path=self.path))
        return Ok(None)


class StdoutOutputSink:
    """Fallback when no output file is configured (local runs)."""

    def set_outputs(self, values: Mapping[str, str]) -> Result[None, OutputError]:
        for k, v in values.items():
            typer.echo(format_output(k, v), nl=False)
        return Ok(None)


def _empty_values() -> dict[str, str]:
    return {}


@dataclass
class MockOutputSink:
    """Collects outputs in memory for tests."""

    values: dict[str, str] = field(default_factory=_empty_values)
    calls: int = 0

    def set_outputs(self, values: Mapping[str, str]) -> Result[None, OutputError]:
        self.calls += 1
        self.values.update(values)
        return Ok(None)


def sink_from_env(environ: Mapping[str, str], *, override: Path | None = None) -> OutputSink:
    if override is not None:
        return FileOutputSink(override)
    for key in ("GITEA_OUTPUT", "GITHUB_OUTPUT"):
        value = environ.get(key)
        if value:
            return FileOutputSink(Path(value))
    return StdoutOutputSink()
