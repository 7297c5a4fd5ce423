from __future__ import annotations

from collections.abc import Callable, Iterable

from gitea_release.release.model import CommitSummary


CHANGELOG_HEADER = "## Changes"

CommitUrl = Callable[[str], str]


def commit_url_builder(host: str, repo_slug: str) -> CommitUrl:
    """Return a function mapping a sha to its commit page on ``host``."""
    base = f"{host.rstrip('/')}/{repo_slug}/commit"

    def build(sha: str) -> str:
        return f"{base}/{sha}"

    return build


def _render_sha(commit: CommitSummary, commit_url: CommitUrl | None) -> str:
    if commit_url is None:
        return commit.short_sha
    return f"[{commit.short_sha}]({commit_url(commit.sha)})"


def generate_changelog(
    commits: Iterable[CommitSummary],
    stop_at_sha: str | None,
    *,
    commit_url: CommitUrl | None = None,
) -> str:
    """Render the changelog for commits newer than ``stop_at_sha``.

    ``commits`` is newest first. Rendering stops before the first commit whose
    sha equals ``stop_at_sha``; with no stop sha every commit is listed. The
    list is whatever page(s) the caller fetched, so a history longer than the
    fetch yields a changelog missing the oldest commits.
    """
    lines = [CHANGELOG_HEADER, ""]
    for commit in commits:
        if stop_at_sha is not None and commit.sha == stop_at_sha:
            break
        lines.append(f"* {commit.subject} ({_render_sha(commit, commit_url)})")
    return "\n".join(lines) + "\n"
