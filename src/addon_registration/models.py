"""
Data models for the add-on registration system.

This module defines the add-on catalog entries, package search results and
the open field map used for add-ons in the unattended profile.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Unattended profile add-on record: an open map of string keys to
# string/bool values. "release_type" may be None (no release type).
AddonSpec = dict[str, Any]

# Stands in for a missing release type in the persisted profile,
# the XML profile format has no way to express an absent value.
RELEASE_TYPE_NIL = "nil"


@dataclass
class Addon:
    """An add-on product offered by the registration service."""

    identifier: str  # Product identifier, e.g. 'sle-module-basesystem'
    version: str
    arch: str
    name: str = ""  # Friendly name shown to the user
    release_type: Optional[str] = None
    depends_on: list[str] = field(default_factory=list)  # Identifiers
    eula_url: Optional[str] = None
    free: bool = True
    registered: bool = False
    selected: bool = False

    def to_spec(self) -> AddonSpec:
        """Convert to an unattended profile add-on record."""
        return {
            "name": self.identifier,
            "version": self.version,
            "arch": self.arch,
            "release_type": self.release_type,
        }


@dataclass
class Package:
    """A package picked by the user in the package search dialog."""

    name: str
    version: str = ""
    addon: Optional[str] = None  # Identifier of the providing add-on
