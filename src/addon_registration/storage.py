"""
Storage module holding the data needed during a registration run.

Every store lives for one process invocation. Instead of global singletons
the stores are fields of a RegistrationContext that is created once at
start-up and passed to the components that need it:

- ConfigProfile: the unattended (scripted) registration configuration,
  exported to and imported from the persisted profile
- RunSelections: values entered by the user during the current run
- SessionCache: bookkeeping shared between workflow steps
- SslFailureRecord: details of the last SSL verification failure
- reg_codes: registration codes discovered on removable media
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional

from .models import RELEASE_TYPE_NIL, AddonSpec

if TYPE_CHECKING:
    from .audit_logger import AuditLogger
    from .regcodes import RegCodeDiscovery


class ConfigProfile:
    """
    Unattended registration configuration.

    export() produces the raw settings written to the persisted profile and
    import_settings() restores them. The profile format cannot store a null
    value, so an add-on without a release type is written with the literal
    string "nil" and read back as None.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Return all fields to their defaults."""
        self.modified = False
        self.do_registration = False
        self.reg_server = ""
        self.reg_server_cert = ""
        self.email = ""
        self.reg_code = ""
        self.install_updates = False
        self.addons: list[AddonSpec] = []
        self.slp_discovery = False
        self.reg_server_cert_fingerprint_type = ""
        self.reg_server_cert_fingerprint = ""

    def export(self) -> dict[str, Any]:
        """
        Export the configuration as raw profile settings.

        Returns:
            Only {"do_registration": False} when registration is disabled,
            the other values are meaningless in that case.
        """
        ret: dict[str, Any] = {"do_registration": self.do_registration}
        if not self.do_registration:
            return ret

        ret.update({
            "reg_server": self.reg_server,
            "slp_discovery": self.slp_discovery,
            "email": self.email,
            "reg_code": self.reg_code,
            "install_updates": self.install_updates,
        })
        ret["addons"] = self._export_addons()
        ret.update(self._export_ssl_config())

        return ret

    def import_settings(self, settings: Mapping[str, Any]) -> None:
        """
        Load the configuration from raw profile settings.

        Missing values fall back to defaults, nothing is validated here.
        The modified flag is left unset.

        Args:
            settings: Raw settings as produced by export()
        """
        self.reset()

        self.do_registration = bool(settings.get("do_registration", False))
        self.reg_server = settings.get("reg_server") or ""
        self.slp_discovery = bool(settings.get("slp_discovery", False))
        self.reg_server_cert = settings.get("reg_server_cert") or ""
        self.email = settings.get("email") or ""
        self.reg_code = settings.get("reg_code") or ""
        self.install_updates = bool(settings.get("install_updates", False))
        self.addons = self._import_addons(settings)
        self.reg_server_cert_fingerprint_type = (
            settings.get("reg_server_cert_fingerprint_type") or ""
        )
        self.reg_server_cert_fingerprint = settings.get("reg_server_cert_fingerprint") or ""

    def _import_addons(self, settings: Mapping[str, Any]) -> list[AddonSpec]:
        addons = []
        for addon in settings.get("addons") or []:
            # e.g. an empty <addon/> element
            if not isinstance(addon, Mapping):
                continue
            imported = dict(addon)
            if addon.get("release_type") == RELEASE_TYPE_NIL:
                imported["release_type"] = None
            addons.append(imported)
        return addons

    def _export_addons(self) -> list[AddonSpec]:
        addons = []
        for addon in self.addons:
            exported = dict(addon)
            if exported.get("release_type") is None:
                exported["release_type"] = RELEASE_TYPE_NIL
            addons.append(exported)
        return addons

    def _export_ssl_config(self) -> dict[str, str]:
        ret = {"reg_server_cert": self.reg_server_cert}

        # a profile without explicit pinning must not mention the fingerprint
        if self.reg_server_cert_fingerprint_type:
            ret["reg_server_cert_fingerprint_type"] = self.reg_server_cert_fingerprint_type
            ret["reg_server_cert_fingerprint"] = self.reg_server_cert_fingerprint

        return ret

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigProfile):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self) -> str:
        return (
            f"ConfigProfile(do_registration={self.do_registration!r}, "
            f"reg_server={self.reg_server!r}, addons={len(self.addons)})"
        )


@dataclass
class RunSelections:
    """Values entered by the user during the current run."""

    email: str = ""
    reg_code: str = ""
    selected_addons: list = field(default_factory=list)
    base_registered: bool = False
    install_updates: Optional[bool] = None
    custom_url: Optional[str] = None
    imported_cert_fingerprint: Optional[str] = None  # SHA256


@dataclass
class SessionCache:
    """Bookkeeping shared between the steps of a run."""

    first_run: bool = True
    addon_services: list[str] = field(default_factory=list)
    reg_url: str = ""
    cached_reg_url: str = ""
    upgrade_failed: bool = False


@dataclass
class SslFailureRecord:
    """Details about the last SSL verification failure."""

    error_code: Optional[int] = None
    error_message: Optional[str] = None
    failed_certificate: Optional[str] = None  # PEM

    def record(self, error_code: int, error_message: str, failed_certificate: str) -> None:
        """Store the details of a verification failure."""
        self.error_code = error_code
        self.error_message = error_message
        self.failed_certificate = failed_certificate

    def reset(self) -> None:
        self.error_code = None
        self.error_message = None
        self.failed_certificate = None

    @property
    def is_set(self) -> bool:
        return self.error_code is not None


class RegistrationContext:
    """
    Process-scoped holder of all registration stores.

    Create one per process and pass it to the components needing it. The
    reg-codes from removable media are discovered on first access and
    cached for the rest of the process.
    """

    def __init__(
        self,
        discovery: Optional["RegCodeDiscovery"] = None,
        default_registration_url: str = "",
        logger: Optional["AuditLogger"] = None,
    ) -> None:
        """
        Initialize the context.

        Args:
            discovery: Reg-code discovery run on first access to reg_codes
            default_registration_url: Server used when nothing else is set
            logger: Optional audit logger
        """
        self.profile = ConfigProfile()
        self.selections = RunSelections()
        self.cache = SessionCache()
        self.ssl_errors = SslFailureRecord()
        self._discovery = discovery
        self._default_registration_url = default_registration_url
        self._logger = logger
        self._reg_codes: Optional[dict[str, str]] = None

    @property
    def reg_codes(self) -> dict[str, str]:
        """Registration codes found on removable media, add-on name => code."""
        if self._reg_codes is None:
            self._reg_codes = self._discovery.discover() if self._discovery else {}
        return self._reg_codes

    def registration_url(self) -> str:
        """
        Resolve the registration server URL.

        A URL entered by the user wins, then the server from the enabled
        unattended profile, then the configured default. The first resolved
        value is cached for the rest of the process.
        """
        if self.cache.cached_reg_url:
            return self.cache.cached_reg_url

        if self.selections.custom_url:
            url = self.selections.custom_url
        elif self.profile.do_registration and self.profile.reg_server:
            url = self.profile.reg_server
        else:
            url = self._default_registration_url

        self.cache.reg_url = url
        self.cache.cached_reg_url = url

        if self._logger:
            self._logger.debug("RegistrationContext", "Using registration URL", {"url": url})

        return url
