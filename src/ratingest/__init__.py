"""Bulk import of record comments and ratings from delimited export files."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("ratingest")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"
