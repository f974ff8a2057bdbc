"""
Enumeration types for the add-on registration system.

These enums provide type-safe constants for workflow steps, step outcomes,
certificate pinning and logging throughout the system.
"""

from enum import Enum


class Outcome(Enum):
    """Result returned by a workflow step to select the next transition."""

    NEXT = "next"
    BACK = "back"
    ABORT = "abort"


class Step(Enum):
    """Steps of the online package search workflow."""

    FIND_ADDONS = "find_addons"
    SEARCH_PACKAGES = "search_packages"
    DISPLAY_EULA = "display_eula"
    REGISTER_ADDONS = "register_addons"
    SELECT_PACKAGES = "select_packages"


class FingerprintType(Enum):
    """Supported registration server certificate fingerprint algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
