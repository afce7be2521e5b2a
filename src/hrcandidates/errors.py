"""Error taxonomy for the candidate store."""

from __future__ import annotations


class CandidateStoreError(Exception):
    """Base class for candidate store failures."""


class InvalidArgument(CandidateStoreError, ValueError):
    """Raised for bad caller input such as a blank email."""


class ConfigurationError(InvalidArgument):
    """Raised when required settings (e.g. the connection string) are missing."""


class Conflict(CandidateStoreError):
    """Raised when a conditional write references a stale version."""

    def __init__(self, email: str, expected_version: str | None):
        super().__init__(f"Candidate {email!r} was modified concurrently")
        self.email = email
        self.expected_version = expected_version


class StoreUnavailable(CandidateStoreError):
    """Raised when the backing table cannot be reached or rejects a request."""


__all__ = [
    "CandidateStoreError",
    "InvalidArgument",
    "ConfigurationError",
    "Conflict",
    "StoreUnavailable",
]
