"""Typed adapter over the Gitea REST API (GitHub-compatible subset).

Every method returns a Result. Expected absences (no release yet, unknown
tag, missing file) are ``Ok(None)``; everything else that goes wrong is an
``ApiError`` whose ``kind`` lets callers tell a conflict from a real failure
without inspecting messages.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, replace
from typing import Literal
from urllib.parse import quote, urlencode

from gitea_release.api.http import HttpClient, HttpError
from gitea_release.core.result import Err, Ok, Result
from gitea_release.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_int,
    get_str,
    get_table,
)
from gitea_release.release.model import CommitSummary, LatestRelease, PullRequest, Release

__all__ = ["ApiError", "ApiErrorKind", "GiteaClient", "COMMITS_PAGE_SIZE"]

COMMITS_PAGE_SIZE = 100

ApiErrorKind = Literal[
    "not_found",
    "conflict",
    "unauthorized",
    "http",
    "network",
    "invalid_payload",
]


@dataclass(frozen=True, slots=True)
class ApiError:
    kind: ApiErrorKind
    message: str
    status: int = 0
    url: str | None = None

    @classmethod
    def from_http(cls, error: HttpError) -> ApiError:
        kind: ApiErrorKind
        match error.status:
            case 0:
                kind = "network"
            case 404:
                kind = "not_found"
            case 409 | 422:
                kind = "conflict"
            case 401 | 403:
                kind = "unauthorized"
            case _:
                kind = "http"
        return cls(kind=kind, message=str(error), status=error.status, url=error.url)

    def __str__(self) -> str:
        return self.message


def _seg(value: str) -> str:
    return quote(value, safe="/")


class GiteaClient:
    """Hosting client bound to one repository.

    Args:
        http: Transport (``RealHttpClient`` in production)
        api_url: API root, e.g. ``https://git.example.com/api/v1``
        owner: Repository owner
        repo: Repository name
    """

    def __init__(self, http: HttpClient, *, api_url: str, owner: str, repo: str) -> None:
        self._http = http
        self._base = f"{api_url.rstrip('/')}/repos/{_seg(owner)}/{_seg(repo)}"

    def url(self, path: str, **query: str | int) -> str:
        out = f"{self._base}/{path.lstrip('/')}"
        if query:
            out += "?" + urlencode(query)
        return out

    def _call(
        self, method: str, url: str, body: object | None = None
    ) -> Result[object | None, ApiError]:
        result = self._http.request(method, url, body)
        if isinstance(result, Err):
            return Err(ApiError.from_http(result.error))
        return result

    def _call_dict(
        self, method: str, url: str, body: object | None = None
    ) -> Result[StrDict, ApiError]:
        result = self._call(method, url, body)
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value)
        if data is None:
            return Err(ApiError(kind="invalid_payload", message=f"expected JSON object: {url}", url=url))
        return Ok(data)

    # -- reads ---------------------------------------------------------------

    def get_latest_release(self) -> Result[LatestRelease | None, ApiError]:
        result = self._call_dict("GET", self.url("releases/latest"))
        if isinstance(result, Err):
            if result.error.kind == "not_found":
                return Ok(None)
            return result

        tag = get_str(result.value, "tag_name")
        if tag is None:
            return Err(ApiError(kind="invalid_payload", message="latest release has no tag_name"))
        return Ok(
            LatestRelease(tag_name=tag, target_commitish=get_str(result.value, "target_commitish"))
        )

    def get_tag_commit_sha(self, tag: str) -> Result[str | None, ApiError]:
        result = self._call_dict("GET", self.url(f"tags/{_seg(tag)}"))
        if isinstance(result, Err):
            if result.error.kind == "not_found":
                return Ok(None)
            return result

        commit = get_table(result.value, "commit")
        return Ok(get_str(commit, "sha") if commit is not None else None)

    def get_branch_head(self, branch: str) -> Result[str, ApiError]:
        url = self.url(f"branches/{_seg(branch)}")
        result = self._call_dict("GET", url)
        if isinstance(result, Err):
            return result

        commit = get_table(result.value, "commit")
        # Gitea reports the head as commit.id, GitHub as commit.sha.
        sha = None if commit is None else get_str(commit, "id") or get_str(commit, "sha")
        if sha is None:
            return Err(
                ApiError(kind="invalid_payload", message=f"branch has no head commit: {branch}", url=url)
            )
        return Ok(sha)

    def list_commits(
        self,
        sha: str,
        *,
        page_size: int = COMMITS_PAGE_SIZE,
        max_pages: int = 1,
        stop_at_sha: str | None = None,
    ) -> Result[list[CommitSummary], ApiError]:
        """List commits reachable from ``sha``, newest first.

        Fetches at most ``max_pages`` pages and stops early once ``stop_at_sha``
        has been seen or a short page shows the history is exhausted.
        """
        out: list[CommitSummary] = []
        for page in range(1, max(1, max_pages) + 1):
            # Gitea reads `limit`, GitHub reads `per_page`.
            url = self.url("commits", sha=sha, page=page, limit=page_size, per_page=page_size)
            result = self._call("GET", url)
            if isinstance(result, Err):
                return result

            raw = as_obj_list(result.value)
            if raw is None:
                return Err(ApiError(kind="invalid_payload", message="unexpected commits payload", url=url))

            for item in raw:
                d = as_str_dict(item)
                if d is None:
                    continue
                commit_sha = get_str(d, "sha")
                commit_tbl = get_table(d, "commit")
                if commit_sha is None or commit_tbl is None:
                    continue
                message = commit_tbl.get("message")
                out.append(
                    CommitSummary(sha=commit_sha, message=message if isinstance(message, str) else "")
                )

            if len(raw) < page_size:
                break
            if stop_at_sha is not None and any(c.sha == stop_at_sha for c in out):
                break

        return Ok(out)

    def branch_exists(self, branch: str) -> Result[bool, ApiError]:
        ref = f"refs/heads/{branch}"
        result = self._call("GET", self.url(f"git/{_seg(ref)}"))
        if isinstance(result, Err):
            if result.error.kind == "not_found":
                return Ok(False)
            return result

        # Gitea answers with a list of refs matching the prefix, GitHub with one ref.
        items = as_obj_list(result.value)
        candidates = items if items is not None else [result.value]
        for item in candidates:
            d = as_str_dict(item)
            if d is not None and get_str(d, "ref") == ref:
                return Ok(True)
        return Ok(False)

    def get_file_sha(self, path: str, *, ref: str) -> Result[str | None, ApiError]:
        result = self._call_dict("GET", self.url(f"contents/{_seg(path)}", ref=ref))
        if isinstance(result, Err):
            if result.error.kind == "not_found":
                return Ok(None)
            return result
        return Ok(get_str(result.value, "sha"))

    # -- mutations -----------------------------------------------------------

    def create_release(self, release: Release, *, target_commitish: str) -> Result[Release, ApiError]:
        result = self._call_dict(
            "POST",
            self.url("releases"),
            {
                "tag_name": release.tag_name,
                "target_commitish": target_commitish,
                "name": release.name,
                "body": release.body,
                "draft": release.draft,
                "prerelease": release.prerelease,
            },
        )
        if isinstance(result, Err):
            return result

        data = result.value
        return Ok(
            replace(
                release,
                id=get_int(data, "id"),
                url=get_str(data, "html_url"),
                upload_url=get_str(data, "upload_url"),
                sha=target_commitish,
            )
        )

    def create_branch_ref(self, branch: str, sha: str) -> Result[None, ApiError]:
        result = self._call("POST", self.url("git/refs"), {"ref": f"refs/heads/{branch}", "sha": sha})
        if isinstance(result, Ok):
            return Ok(None)
        if result.error.status not in (404, 405):
            return result

        # Instances without the git refs write endpoint: use the branches API.
        fallback = self._call(
            "POST",
            self.url("branches"),
            {"new_branch_name": branch, "old_ref_name": sha},
        )
        if isinstance(fallback, Err):
            return fallback
        return Ok(None)

    def create_or_update_file(
        self,
        path: str,
        content: str,
        *,
        branch: str,
        message: str,
    ) -> Result[None, ApiError]:
        existing = self.get_file_sha(path, ref=branch)
        if isinstance(existing, Err):
            return existing

        body: dict[str, object] = {
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "message": message,
            "branch": branch,
        }
        method = "POST"
        if existing.value is not None:
            body["sha"] = existing.value
            method = "PUT"

        result = self._call(method, self.url(f"contents/{_seg(path)}"), body)
        if isinstance(result, Err):
            return result
        return Ok(None)

    def create_pull_request(self, pr: PullRequest) -> Result[PullRequest, ApiError]:
        result = self._call_dict(
            "POST",
            self.url("pulls"),
            {
                "title": pr.title,
                "body": pr.body,
                "head": pr.head_branch_name,
                "base": pr.base_branch_name,
            },
        )
        if isinstance(result, Err):
            return result

        number = get_int(result.value, "number")
        if number is None:
            return Err(ApiError(kind="invalid_payload", message="created pull request has no number"))
        return Ok(replace(pr, number=number, url=get_str(result.value, "html_url")))

    def add_labels(self, number: int, labels: tuple[str, ...]) -> Result[None, ApiError]:
        result = self._call("POST", self.url(f"issues/{number}/labels"), {"labels": list(labels)})
        if isinstance(result, Err):
            return result
        return Ok(None)
