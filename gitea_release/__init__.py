"""Release bookkeeping for Gitea: next version, changelog, release, release PR."""

__version__ = "0.1.0"
