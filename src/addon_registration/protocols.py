"""
Interfaces of the external collaborators used by the registration workflows.

Dialog rendering, the registration service client and the package manager
live outside this package; the workflows only depend on these protocols.
"""

import sys
from abc import abstractmethod
from typing import Optional, Protocol, Sequence, TextIO, runtime_checkable

from .enums import Outcome
from .models import Addon, Package


@runtime_checkable
class RegistrationClient(Protocol):
    """Client of the registration service."""

    @abstractmethod
    def get_addon_list(self) -> list[Addon]:
        """Return the add-ons available for the registered base product."""
        ...


@runtime_checkable
class PackageSearchDialog(Protocol):
    """Interactive package search; the user may pick packages from add-ons."""

    @abstractmethod
    def run(self) -> Outcome:
        ...

    @abstractmethod
    def selected_packages(self) -> list[Package]:
        """Packages chosen by the user in the last run, in selection order."""
        ...


@runtime_checkable
class EulaDialog(Protocol):
    """Displays the license agreements of add-ons and asks for acceptance."""

    @abstractmethod
    def run(self, addons: Sequence[Addon]) -> Outcome:
        ...


@runtime_checkable
class RegistrationUI(Protocol):
    """Registers add-ons, interacting with the user as needed."""

    @abstractmethod
    def register_addons(self, addons: Sequence[Addon], known_reg_codes: dict[str, str]) -> Outcome:
        ...


@runtime_checkable
class PackageManager(Protocol):
    """Package manager operations needed after registration."""

    @abstractmethod
    def select_addon_products(self) -> None:
        """Mark the products of the registered add-ons for installation."""
        ...

    @abstractmethod
    def select_for_install(self, name: str) -> bool:
        """Mark a package for installation, False if it cannot be selected."""
        ...


@runtime_checkable
class ErrorReporter(Protocol):
    """Shows non-fatal errors to the user."""

    @abstractmethod
    def show_error(self, message: str, headline: str = "") -> None:
        ...


class StderrReporter:
    """Reports errors as lines on a text stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream or sys.stderr

    def show_error(self, message: str, headline: str = "") -> None:
        prefix = f"{headline}: " if headline else ""
        print(f"{prefix}{message}", file=self._stream)
