from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


ROOT_PATH = "."
RELEASE_BRANCH_PREFIX = "release-please"
PENDING_LABEL = "autorelease: pending"


class VersioningStrategy(StrEnum):
    ALWAYS_BUMP_MAJOR = "always-bump-major"
    ALWAYS_BUMP_MINOR = "always-bump-minor"
    ALWAYS_BUMP_PATCH = "always-bump-patch"

    @classmethod
    def from_input(cls, value: str | None) -> VersioningStrategy:
        """Map an input string to a strategy; anything unrecognised bumps patch."""
        if value is None:
            return cls.ALWAYS_BUMP_PATCH
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.ALWAYS_BUMP_PATCH


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class CommitSummary:
    sha: str
    message: str

    @property
    def subject(self) -> str:
        lines = self.message.splitlines()
        return lines[0].strip() if lines else ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True, slots=True)
class LatestRelease:
    """The most recent published release as reported by the server."""

    tag_name: str
    target_commitish: str | None


@dataclass(frozen=True, slots=True)
class Release:
    """A release proposed by the orchestrator, then enriched by the server.

    ``id``, ``url``, ``upload_url`` and ``sha`` stay None until the create
    call returns.
    """

    tag_name: str
    name: str
    body: str
    version: str
    path: str = ROOT_PATH
    draft: bool = False
    prerelease: bool = False
    id: int | None = None
    url: str | None = None
    upload_url: str | None = None
    sha: str | None = None


@dataclass(frozen=True, slots=True)
class PullRequest:
    title: str
    body: str
    head_branch_name: str
    base_branch_name: str
    labels: tuple[str, ...] = ()
    number: int | None = None
    url: str | None = None


def is_root_path(path: str | None) -> bool:
    return path is None or path.strip() in ("", ROOT_PATH)


def tag_name(version: str, *, path: str | None, include_component_in_tag: bool) -> str:
    if include_component_in_tag and not is_root_path(path):
        return f"{path}-v{version}"
    return f"v{version}"


def release_branch_name(target_branch: str, version: str) -> str:
    return f"{RELEASE_BRANCH_PREFIX}--{target_branch}--{version}"
