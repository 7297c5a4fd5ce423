"""JSON-over-HTTP client abstraction for the hosting API.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from gitea_release import __version__
from gitea_release.core.result import Err, Ok, Result
from gitea_release.core.structured import as_str_dict, get_str

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "RecordedCall",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network and decode errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON requests against the hosting API."""

    def request(
        self,
        method: str,
        url: str,
        body: object | None = None,
    ) -> Result[object | None, HttpError]:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method ("GET", "POST", "PUT")
            url: Absolute URL including any query string
            body: JSON-serialisable request body, or None

        Returns:
            Ok with the decoded payload (None for an empty body), or Err with HttpError
        """
        ...


def _proxy_url(proxy_server: str) -> str:
    if "://" in proxy_server:
        return proxy_server
    return f"http://{proxy_server}"


def _error_message(raw: bytes, fallback: str) -> str:
    try:
        data = as_str_dict(json.loads(raw.decode("utf-8")))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return fallback
    if data is None:
        return fallback
    return get_str(data, "message") or fallback


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - token authentication
    - optional explicit proxy (otherwise the environment's proxy settings apply)
    - JSON encoding/decoding
    - timeouts
    """

    def __init__(
        self,
        token: str,
        *,
        proxy_server: str | None = None,
        timeout: float = 30.0,
        user_agent: str = f"gitea-release/{__version__}",
    ) -> None:
        self.timeout = timeout
        self._headers = {
            "Authorization": f"token {token}",
            "Accept": "application/json",
            "User-Agent": user_agent,
        }
        handlers: list[urllib.request.BaseHandler] = [
            urllib.request.HTTPSHandler(context=ssl.create_default_context())
        ]
        if proxy_server:
            proxy = _proxy_url(proxy_server)
            handlers.append(urllib.request.ProxyHandler({"http": proxy, "https": proxy}))
        self._opener = urllib.request.build_opener(*handlers)

    def request(
        self,
        method: str,
        url: str,
        body: object | None = None,
    ) -> Result[object | None, HttpError]:
        headers = dict(self._headers)
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        try:
            req = urllib.request.Request(url, data=data, headers=headers, method=method)
            with self._opener.open(req, timeout=self.timeout) as response:
                raw: bytes = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_error_message(e.read(), e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw.strip():
            return Ok(None)
        try:
            payload: object = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        return Ok(payload)


@dataclass(frozen=True, slots=True)
class RecordedCall:
    method: str
    url: str
    body: object | None


def _empty_responses() -> dict[tuple[str, str], list[object | HttpError]]:
    return {}


def _empty_calls() -> list[RecordedCall]:
    return []


@dataclass
class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are queued per (method, url); the last queued response repeats.
    Unknown requests answer 404.

    Usage:
        client = MockHttpClient()
        client.set("GET", "https://git.example.com/api/v1/repos/o/r/branches/main",
                   {"commit": {"id": "abc"}})
    """

    responses: dict[tuple[str, str], list[object | HttpError]] = field(
        default_factory=_empty_responses
    )
    calls: list[RecordedCall] = field(default_factory=_empty_calls)

    def set(self, method: str, url: str, *responses: object | HttpError) -> None:
        self.responses[(method, url)] = list(responses)

    def fail(self, method: str, url: str, status: int, message: str = "mock error") -> None:
        self.set(method, url, HttpError(url=url, status=status, message=message))

    def request(
        self,
        method: str,
        url: str,
        body: object | None = None,
    ) -> Result[object | None, HttpError]:
        self.calls.append(RecordedCall(method=method, url=url, body=body))

        queued = self.responses.get((method, url))
        if not queued:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def calls_for(self, method: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == method]

    def bodies(self, method: str, url: str) -> list[Mapping[str, object] | None]:
        out: list[Mapping[str, object] | None] = []
        for c in self.calls:
            if c.method == method and c.url == url:
                out.append(as_str_dict(c.body))
        return out
