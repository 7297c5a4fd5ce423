"""Error types for the release flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ReleaseErrorKind = Literal[
    "latest_release_failed",
    "branch_lookup_failed",
    "commit_listing_failed",
    "release_failed",
    "ref_failed",
    "manifest_failed",
    "pull_request_failed",
    "labeling_failed",
    "outputs_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Fatal failure of one orchestration step.

    The CLI renders it with ``pretty()`` and fails the invocation.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
