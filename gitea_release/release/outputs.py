"""Flatten release and pull request records into step outputs.

Keys for a release at the repository root are unprefixed (``tag_name``);
releases of a component path are prefixed ``<path>--`` (``pkgA--tag_name``).
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from gitea_release.release.model import PullRequest, Release, is_root_path
from gitea_release.release.versioning import parse_lenient


# Internal field name -> output name, where they differ.
_RELEASE_KEYS = {"url": "html_url"}


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _release_fields(release: Release) -> dict[str, str | int | bool | None]:
    semver = parse_lenient(release.version)
    return {
        "id": release.id,
        "name": release.name,
        "tag_name": release.tag_name,
        "sha": release.sha,
        "body": release.body,
        "url": release.url,
        "upload_url": release.upload_url,
        "draft": release.draft,
        "prerelease": release.prerelease,
        "version": release.version,
        "major": semver.major,
        "minor": semver.minor,
        "patch": semver.patch,
        "path": release.path,
    }


def _render(value: str | int | bool) -> str:
    if isinstance(value, bool):
        return _flag(value)
    return str(value)


def release_outputs(releases: Sequence[Release]) -> dict[str, str]:
    out: dict[str, str] = {"releases_created": _flag(bool(releases))}
    for release in releases:
        prefix = "" if is_root_path(release.path) else f"{release.path}--"
        out[f"{prefix}release_created"] = "true"
        for key, value in _release_fields(release).items():
            if value is None:
                continue
            out[f"{prefix}{_RELEASE_KEYS.get(key, key)}"] = _render(value)
    out["paths_released"] = json.dumps([r.path for r in releases])
    return out


def pull_request_payload(pr: PullRequest) -> dict[str, object]:
    payload: dict[str, object] = {
        "number": pr.number,
        "title": pr.title,
        "body": pr.body,
        "head_branch_name": pr.head_branch_name,
        "base_branch_name": pr.base_branch_name,
        "labels": list(pr.labels),
        "html_url": pr.url,
    }
    return {k: v for k, v in payload.items() if v is not None}


def pull_request_outputs(prs: Sequence[PullRequest]) -> dict[str, str]:
    out: dict[str, str] = {"prs_created": _flag(bool(prs))}
    payloads = [pull_request_payload(pr) for pr in prs]
    if payloads:
        out["pr"] = json.dumps(payloads[0])
    out["prs"] = json.dumps(payloads)
    return out
