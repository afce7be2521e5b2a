"""Pydantic schema definitions for candidates, records and settings."""

from __future__ import annotations

from .candidate import Candidate
from .config import AppConfig, LoggingConfig, SeedingConfig, StorageConfig, load_config
from .record import CANDIDATE_PARTITION, CandidateRecord

__all__ = [
    "Candidate",
    "CandidateRecord",
    "CANDIDATE_PARTITION",
    "AppConfig",
    "StorageConfig",
    "SeedingConfig",
    "LoggingConfig",
    "load_config",
]
