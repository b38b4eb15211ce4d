"""Canonical enumerations for the selection session."""

from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    NO_LOCATION = "no_location"
    LOADING_CATALOG = "loading_catalog"
    READY = "ready"
    LOAD_FAILED = "load_failed"


class HeaderState(str, Enum):
    """Three-state "select all" affordance."""

    NONE = "none"
    SOME = "some"
    ALL = "all"
