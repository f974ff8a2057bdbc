"""
Discovery of registration codes on removable media.

Operators can put the reg-codes for the add-ons on a USB stick in one of
two formats, tried in this order:

- regcodes.xml: AutoYaST-style XML with a suse_register/addons list whose
  records carry "name" and "reg_code"
- regcodes.txt: one "<name> <reg_code>" pair per line, separated by white space

The first file that yields at least one code wins. Missing, unreadable or
malformed files are skipped, discovery never fails.
"""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Optional

from .audit_logger import AuditLogger
from .exceptions import ProfileError
from .media import Fetcher
from .profile_xml import REGISTRATION_SECTION, parse_xml_file


def parse_xml_reg_codes(data: Mapping[str, Any]) -> dict[str, str]:
    """
    Build name => reg-code pairs from a parsed reg-code XML document.

    Args:
        data: Mapping of the document root's children
    """
    section = data.get(REGISTRATION_SECTION) or {}
    if not isinstance(section, Mapping):
        return {}
    addons = section.get("addons") or []
    if not isinstance(addons, list):
        return {}

    codes = {}
    for addon in addons:
        if not isinstance(addon, Mapping):
            continue
        name = addon.get("name", "")
        reg_code = addon.get("reg_code", "")
        # nested elements or lists carry no usable code
        if not isinstance(name, (str, int)) or not isinstance(reg_code, (str, int)):
            continue
        codes[str(name)] = str(reg_code)
    return codes


def parse_txt_reg_codes(text: str) -> dict[str, str]:
    """
    Build name => reg-code pairs from the plain text format.

    Lines which do not split into a name and a value are dropped silently.
    """
    codes = {}
    for line in text.splitlines():
        pair = line.strip().split(None, 1)
        if len(pair) == 2:
            codes[pair[0]] = pair[1]
    return codes


def reg_codes_from_xml(path: Path) -> Optional[dict[str, str]]:
    if not os.access(path, os.R_OK):
        return None
    return parse_xml_reg_codes(parse_xml_file(path))


def reg_codes_from_txt(path: Path) -> Optional[dict[str, str]]:
    if not os.access(path, os.R_OK):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return parse_txt_reg_codes(f.read())


# File name => parser, in the order they are tried
REGCODES_NAME_HANDLERS: dict[str, Callable[[Path], Optional[dict[str, str]]]] = {
    "regcodes.xml": reg_codes_from_xml,
    "regcodes.txt": reg_codes_from_txt,
}


@contextmanager
def temporary_file(suffix: str) -> Iterator[Path]:
    """Yield the path of a fresh temporary file, removed on exit."""
    fd, name = tempfile.mkstemp(suffix=f"-{suffix}")
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


class RegCodeDiscovery:
    """Looks up reg-code files on removable media."""

    def __init__(
        self,
        fetcher: Fetcher,
        base_url: str = "usb:///",
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the discovery.

        Args:
            fetcher: Fetch capability used to copy the candidate files
            base_url: Media location the file names are appended to
            logger: Optional audit logger
        """
        self._fetcher = fetcher
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._logger = logger

    def discover(self) -> dict[str, str]:
        """
        Return the codes of the first candidate file that provides any.

        Returns:
            Add-on name => reg-code, empty if nothing was found
        """
        for name, handler in REGCODES_NAME_HANDLERS.items():
            url = f"{self._base_url}{name}"
            with temporary_file(name) as path:
                if not self._fetcher.fetch(url, path):
                    self._log_debug(f"Reg-code file not available: {url}")
                    continue

                codes = self._parse(handler, path, url)
                if codes:
                    self._log_info(f"Loaded reg-codes from {url}", {"addons": sorted(codes)})
                    return codes

        self._log_debug("No reg-codes found on removable media")
        return {}

    def _parse(
        self,
        handler: Callable[[Path], Optional[dict[str, str]]],
        path: Path,
        url: str,
    ) -> Optional[dict[str, str]]:
        try:
            return handler(path)
        except (ProfileError, OSError, UnicodeDecodeError) as e:
            if self._logger:
                self._logger.warn(
                    "RegCodeDiscovery",
                    f"Ignoring unparsable reg-code file {url}",
                    {"error_message": str(e)},
                )
            return None

    def _log_debug(self, message: str) -> None:
        if self._logger:
            self._logger.debug("RegCodeDiscovery", message)

    def _log_info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.info("RegCodeDiscovery", message, data)
