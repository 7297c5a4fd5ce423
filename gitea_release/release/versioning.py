"""Next-version computation.

Parsing is deliberately lenient: a malformed latest tag never blocks a
release, its unreadable components simply count as zero.
"""

from __future__ import annotations

from gitea_release.release.model import SemVer, VersioningStrategy


FIRST_VERSION = SemVer(1, 0, 0)


def _component(parts: list[str], index: int) -> int:
    if index >= len(parts):
        return 0
    text = parts[index].strip()
    if not text.isdecimal():
        return 0
    return int(text)


def parse_lenient(text: str) -> SemVer:
    """Read ``[component-][v]major.minor.patch``; missing or non-numeric parts become 0.

    >>> parse_lenient("v2.x")
    SemVer(major=2, minor=0, patch=0)
    >>> parse_lenient("pkgA-v1.4.0")
    SemVer(major=1, minor=4, patch=0)
    """
    text = text.strip()
    _, sep, tail = text.rpartition("-v")
    if sep and tail[:1].isdigit():
        # Component-prefixed tag, see model.tag_name.
        text = tail
    parts = text.removeprefix("v").split(".")
    return SemVer(_component(parts, 0), _component(parts, 1), _component(parts, 2))


def bump(version: SemVer, strategy: VersioningStrategy) -> SemVer:
    match strategy:
        case VersioningStrategy.ALWAYS_BUMP_MAJOR:
            return SemVer(version.major + 1, 0, 0)
        case VersioningStrategy.ALWAYS_BUMP_MINOR:
            return SemVer(version.major, version.minor + 1, 0)
        case _:
            return SemVer(version.major, version.minor, version.patch + 1)


def resolve_next_version(
    latest_tag: str | None,
    strategy: VersioningStrategy | str = VersioningStrategy.ALWAYS_BUMP_PATCH,
) -> SemVer:
    """Compute the version that follows ``latest_tag``.

    Args:
        latest_tag: Tag of the latest published release, None if there is none
        strategy: Bump policy; plain strings go through ``VersioningStrategy.from_input``

    Returns:
        ``1.0.0`` when there is no prior release, otherwise the bumped version
    """
    if latest_tag is None:
        return FIRST_VERSION
    if not isinstance(strategy, VersioningStrategy):
        strategy = VersioningStrategy.from_input(strategy)
    return bump(parse_lenient(latest_tag), strategy)
