"""Hosting API access."""

from .gitea import ApiError, GiteaClient
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    "ApiError",
    "GiteaClient",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]
