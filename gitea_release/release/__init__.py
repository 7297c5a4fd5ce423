"""Release domain: versioning, changelog, orchestration, outputs."""
