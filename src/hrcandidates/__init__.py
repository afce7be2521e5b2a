"""Candidate storage service backed by a partitioned table store."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
