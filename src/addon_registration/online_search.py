"""
Online package search workflow.

Lets the user search for packages even when they are provided by add-ons
that are not registered yet. The add-ons needed for the chosen packages are
registered (after accepting their licenses) and the packages are selected
for installation; the installation itself is left to the package manager.

Steps:
    find_addons -> search_packages -> display_eula -> register_addons
    -> select_packages
"""

from typing import Callable, Optional

from .addons import AddonCatalog
from .audit_logger import AuditLogger
from .enums import LogLevel, Outcome, Step
from .i18n import get_message
from .models import Addon
from .protocols import (
    EulaDialog,
    ErrorReporter,
    PackageManager,
    PackageSearchDialog,
    RegistrationClient,
    RegistrationUI,
    StderrReporter,
)
from .sequencer import StepAction, WorkflowDefinition, WorkflowSequencer
from .storage import RegistrationContext


ONLINE_SEARCH_SEQUENCE = WorkflowDefinition(
    entry=Step.FIND_ADDONS,
    transitions={
        Step.FIND_ADDONS: {
            Outcome.ABORT: Outcome.ABORT,
            Outcome.NEXT: Step.SEARCH_PACKAGES,
        },
        Step.SEARCH_PACKAGES: {
            Outcome.ABORT: Outcome.ABORT,
            Outcome.NEXT: Step.DISPLAY_EULA,
        },
        Step.DISPLAY_EULA: {
            Outcome.ABORT: Outcome.ABORT,
            Outcome.NEXT: Step.REGISTER_ADDONS,
        },
        Step.REGISTER_ADDONS: {
            Outcome.NEXT: Step.SELECT_PACKAGES,
            Outcome.ABORT: Outcome.ABORT,
        },
        Step.SELECT_PACKAGES: {
            Outcome.NEXT: Outcome.NEXT,
            Outcome.ABORT: Outcome.ABORT,
        },
    },
)


class OnlineSearchWorkflow:
    """
    Online search client.

    Runs ONLINE_SEARCH_SEQUENCE with the step actions of this class. The
    registration client is created on first use for the registration URL
    resolved by the context.
    """

    def __init__(
        self,
        context: RegistrationContext,
        registration_factory: Callable[[str], RegistrationClient],
        search_dialog: PackageSearchDialog,
        eula_dialog: EulaDialog,
        registration_ui: RegistrationUI,
        package_manager: PackageManager,
        reporter: Optional[ErrorReporter] = None,
        catalog: Optional[AddonCatalog] = None,
        logger: Optional[AuditLogger] = None,
        language: Optional[str] = None,
    ) -> None:
        """
        Initialize the workflow.

        Args:
            context: Process-scoped registration stores
            registration_factory: Builds the registration client for a URL
            search_dialog: Package search dialog
            eula_dialog: License agreement dialog
            registration_ui: Registers the selected add-ons
            package_manager: Selects products and packages for installation
            reporter: Shows per-package errors (defaults to stderr)
            catalog: Add-on catalog (a new one by default)
            logger: Optional audit logger
            language: Language of user-facing messages
        """
        self._context = context
        self._registration_factory = registration_factory
        self._search_dialog = search_dialog
        self._eula_dialog = eula_dialog
        self._registration_ui = registration_ui
        self._package_manager = package_manager
        self._reporter = reporter or StderrReporter()
        self._catalog = catalog or AddonCatalog(logger=logger)
        self._logger = logger
        self._language = language
        self._sequencer = WorkflowSequencer(logger=logger)
        self._registration: Optional[RegistrationClient] = None
        self._selected_addons: Optional[list[Addon]] = None

    def workflow_actions(self) -> dict[Step, StepAction]:
        """Step => action run by the sequencer."""
        return {
            Step.FIND_ADDONS: self.find_addons,
            Step.SEARCH_PACKAGES: self.search_packages,
            Step.DISPLAY_EULA: self.display_eula,
            Step.REGISTER_ADDONS: self.register_addons,
            Step.SELECT_PACKAGES: self.select_packages,
        }

    def run(self) -> Outcome:
        """
        Run the workflow.

        Returns:
            Outcome.NEXT when finished, Outcome.ABORT when aborted
        """
        self._log(LogLevel.INFO, "Starting online_search sequence")
        result = self._sequencer.run(self.workflow_actions(), ONLINE_SEARCH_SEQUENCE)
        self._log(LogLevel.INFO, f"Online search finished: {result.value}")
        return result

    def find_addons(self) -> Outcome:
        """Load all available add-ons."""
        self._catalog.find_all(self.registration)
        return Outcome.NEXT

    def search_packages(self) -> Outcome:
        """Open the package search dialog."""
        self.reset_selected_addons_cache()
        return self._search_dialog.run()

    def display_eula(self) -> Outcome:
        """
        Display the license agreements of the selected add-ons.

        Returns:
            The dialog result, or NEXT when no add-on is selected
        """
        addons = self.selected_addons()
        if not addons:
            return Outcome.NEXT
        return self._eula_dialog.run(addons)

    def register_addons(self) -> Outcome:
        """
        Register the selected add-ons.

        No reg-codes are known in advance here, the registration UI asks
        the user for them.
        """
        addons = self.selected_addons()
        if not addons:
            return Outcome.NEXT
        return self._registration_ui.register_addons(addons, {})

    def select_packages(self) -> Outcome:
        """
        Select the add-on products and the chosen packages for installation.

        A package that cannot be selected is reported to the user, the
        remaining packages are still processed.
        """
        self._package_manager.select_addon_products()
        for package in self._search_dialog.selected_packages():
            if not self._package_manager.select_for_install(package.name):
                self._report_package_error(package.name)
        return Outcome.NEXT

    def selected_addons(self) -> list[Addon]:
        """
        Add-ons selected by the user plus their automatic dependencies.

        Computed once per search and kept in the run selections.
        """
        if self._selected_addons is None:
            addons = self._catalog.selected() + self._catalog.auto_selected()
            self._selected_addons = self._catalog.registration_order(addons)
            self._context.selections.selected_addons = list(self._selected_addons)
        return self._selected_addons

    def reset_selected_addons_cache(self) -> None:
        self._selected_addons = None
        self._context.selections.selected_addons = []

    @property
    def registration(self) -> RegistrationClient:
        if self._registration is None:
            self._registration = self._registration_factory(self._context.registration_url())
        return self._registration

    @property
    def catalog(self) -> AddonCatalog:
        return self._catalog

    def _report_package_error(self, name: str) -> None:
        message = get_message("online_search.package_not_selected", self._language, name=name)
        if self._logger:
            self._logger.log(LogLevel.ERROR, "OnlineSearch", message, {"package": name})
        self._reporter.show_error(
            message,
            headline=get_message("online_search.error_headline", self._language),
        )

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger:
            self._logger.log(level, "OnlineSearch", message)
