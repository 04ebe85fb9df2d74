"""Exceptions raised by place_search."""

from __future__ import annotations


class PlaceSearchError(Exception):
    """Base class for place_search errors."""


class DatasetUnavailableError(PlaceSearchError):
    """The dataset source could not supply its records."""
