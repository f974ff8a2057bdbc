"""
Catalog of the add-ons offered by the registration service.

Tracks which add-ons the user selected, which ones are selected
automatically as dependencies, and the order they must be registered in.
"""

from typing import Iterable, Optional

from .audit_logger import AuditLogger
from .models import Addon
from .protocols import RegistrationClient


class AddonCatalog:
    """Add-ons available for the base product, loaded once per run."""

    def __init__(self, logger: Optional[AuditLogger] = None) -> None:
        self._addons: Optional[list[Addon]] = None
        self._logger = logger

    def find_all(self, registration: RegistrationClient) -> list[Addon]:
        """
        Load the available add-ons from the registration service.

        The list is fetched only on the first call.
        """
        if self._addons is None:
            self._addons = list(registration.get_addon_list())
            if self._logger:
                self._logger.info(
                    "AddonCatalog",
                    f"Found {len(self._addons)} available add-on(s)",
                    {"addons": [addon.identifier for addon in self._addons]},
                )
        return self._addons

    @property
    def addons(self) -> list[Addon]:
        return list(self._addons or [])

    def get(self, identifier: str) -> Optional[Addon]:
        for addon in self._addons or []:
            if addon.identifier == identifier:
                return addon
        return None

    def selected(self) -> list[Addon]:
        """Add-ons selected by the user."""
        return [addon for addon in self._addons or [] if addon.selected]

    def auto_selected(self) -> list[Addon]:
        """Unregistered dependencies of the selected add-ons not selected themselves."""
        result: list[Addon] = []
        seen: set[str] = set()
        pending = list(self.selected())

        while pending:
            addon = pending.pop(0)
            for identifier in addon.depends_on:
                if identifier in seen:
                    continue
                seen.add(identifier)
                dependency = self.get(identifier)
                if dependency is None:
                    continue
                pending.append(dependency)
                if not dependency.selected and not dependency.registered:
                    result.append(dependency)

        return result

    def registration_order(self, addons: Iterable[Addon]) -> list[Addon]:
        """
        Order add-ons for registration.

        Duplicates are dropped and every add-on comes after the ones it
        depends on; otherwise the input order is kept.
        """
        unique: dict[str, Addon] = {}
        for addon in addons:
            unique.setdefault(addon.identifier, addon)

        ordered: list[Addon] = []
        placed: set[str] = set()
        visiting: set[str] = set()

        def place(addon: Addon) -> None:
            if addon.identifier in placed or addon.identifier in visiting:
                return
            visiting.add(addon.identifier)
            for identifier in addon.depends_on:
                if identifier in unique:
                    place(unique[identifier])
            visiting.discard(addon.identifier)
            placed.add(addon.identifier)
            ordered.append(addon)

        for addon in unique.values():
            place(addon)

        return ordered
