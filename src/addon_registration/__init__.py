"""
Add-on Registration - state and persistence of the add-on registration workflow.

This package drives the online package search workflow (find add-ons, search
packages, accept licenses, register, select packages) and holds the
configuration consumed by the unattended variant of the same process,
including its import/export to the persisted XML profile.
"""

__version__ = "0.1.0"
__author__ = "Add-on Registration Team"

from addon_registration.exceptions import (
    RegistrationError,
    WorkflowDefinitionError,
    MissingActionError,
    MissingTransitionError,
    ProfileError,
    FetchError,
)
from addon_registration.enums import (
    Outcome,
    Step,
    FingerprintType,
    LogLevel,
)
from addon_registration.models import (
    Addon,
    AddonSpec,
    Package,
    RELEASE_TYPE_NIL,
)
from addon_registration.config import (
    MediaConfig,
    LoggingConfig,
    AppConfig,
)
from addon_registration.audit_logger import (
    AuditLogger,
    LogEntry,
)
from addon_registration.i18n import (
    get_message,
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from addon_registration.storage import (
    ConfigProfile,
    RunSelections,
    SessionCache,
    SslFailureRecord,
    RegistrationContext,
)
from addon_registration.profile_xml import (
    parse_xml_file,
    read_profile,
    write_profile,
    profile_to_xml,
)
from addon_registration.media import (
    Fetcher,
    MediaFetcher,
)
from addon_registration.regcodes import (
    RegCodeDiscovery,
    parse_txt_reg_codes,
    parse_xml_reg_codes,
)
from addon_registration.sequencer import (
    WorkflowDefinition,
    WorkflowSequencer,
)
from addon_registration.addons import (
    AddonCatalog,
)
from addon_registration.protocols import (
    RegistrationClient,
    PackageSearchDialog,
    EulaDialog,
    RegistrationUI,
    PackageManager,
    ErrorReporter,
    StderrReporter,
)
from addon_registration.online_search import (
    OnlineSearchWorkflow,
    ONLINE_SEARCH_SEQUENCE,
)
from addon_registration.cli import (
    main as cli_main,
    create_parser,
)

__all__ = [
    # Exceptions
    "RegistrationError",
    "WorkflowDefinitionError",
    "MissingActionError",
    "MissingTransitionError",
    "ProfileError",
    "FetchError",
    # Enums
    "Outcome",
    "Step",
    "FingerprintType",
    "LogLevel",
    # Models
    "Addon",
    "AddonSpec",
    "Package",
    "RELEASE_TYPE_NIL",
    # Configuration
    "MediaConfig",
    "LoggingConfig",
    "AppConfig",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # I18n
    "get_message",
    "TRANSLATIONS",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # Storage
    "ConfigProfile",
    "RunSelections",
    "SessionCache",
    "SslFailureRecord",
    "RegistrationContext",
    # Profile XML
    "parse_xml_file",
    "read_profile",
    "write_profile",
    "profile_to_xml",
    # Media
    "Fetcher",
    "MediaFetcher",
    # Reg-code discovery
    "RegCodeDiscovery",
    "parse_txt_reg_codes",
    "parse_xml_reg_codes",
    # Sequencer
    "WorkflowDefinition",
    "WorkflowSequencer",
    # Add-ons
    "AddonCatalog",
    # Collaborators
    "RegistrationClient",
    "PackageSearchDialog",
    "EulaDialog",
    "RegistrationUI",
    "PackageManager",
    "ErrorReporter",
    "StderrReporter",
    # Online search
    "OnlineSearchWorkflow",
    "ONLINE_SEARCH_SEQUENCE",
    # CLI
    "cli_main",
    "create_parser",
]
