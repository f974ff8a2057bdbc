"""
Fetching of files from removable media and network locations.

Supported URL schemes:
- usb:///path   -> file below the configured USB mount directory
- file:///path  -> local file
- http(s)://... -> downloaded with httpx
"""

import shutil
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable
from urllib.parse import unquote, urlparse

import httpx

from .audit_logger import AuditLogger
from .exceptions import FetchError


@runtime_checkable
class Fetcher(Protocol):
    """Interface of the removable-media fetch capability."""

    def fetch(self, url: str, destination: Union[str, Path]) -> bool:
        """Copy the resource at url to destination, True on success."""
        ...


class MediaFetcher:
    """Fetches usb://, file:// and http(s):// URLs into a local file."""

    def __init__(
        self,
        usb_mount_dir: Union[str, Path] = "/media/usb",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            usb_mount_dir: Directory where the USB media is mounted
            timeout: HTTP timeout in seconds
            client: Optional preconfigured httpx client (e.g. for tests)
            logger: Optional audit logger
        """
        self._usb_mount_dir = Path(usb_mount_dir)
        self._timeout = timeout
        self._client = client
        self._logger = logger

    def fetch(self, url: str, destination: Union[str, Path]) -> bool:
        """
        Fetch url into destination.

        Returns:
            True if the file was copied, False if it is unavailable
        """
        try:
            self._fetch(url, Path(destination))
        except FetchError as e:
            if self._logger:
                self._logger.debug("MediaFetcher", e.message, e.details)
            return False
        return True

    def _fetch(self, url: str, destination: Path) -> None:
        parsed = urlparse(url)
        scheme = parsed.scheme.lower()

        if scheme == "usb":
            relative = unquote(parsed.netloc + parsed.path).lstrip("/")
            self._copy_local(self._usb_mount_dir / relative, destination, url)
        elif scheme in ("file", ""):
            self._copy_local(Path(unquote(parsed.path)), destination, url)
        elif scheme in ("http", "https"):
            self._download(url, destination)
        else:
            raise FetchError(
                code="unsupported_scheme",
                message=f"Unsupported URL scheme: {scheme}",
                details={"url": url},
            )

    def _copy_local(self, source: Path, destination: Path, url: str) -> None:
        if not source.is_file():
            raise FetchError(
                code="not_found",
                message=f"File not found: {source}",
                details={"url": url},
            )
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise FetchError(
                code="io_error",
                message=f"Failed to copy {source}: {e}",
                details={"url": url},
            ) from e

    def _download(self, url: str, destination: Path) -> None:
        client = self._client or httpx.Client(timeout=self._timeout, follow_redirects=True)
        try:
            with client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise FetchError(
                        code="http_error",
                        message=f"HTTP {response.status_code} for {url}",
                        details={"url": url, "http_status_code": response.status_code},
                    )
                with open(destination, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
        except httpx.HTTPError as e:
            raise FetchError(
                code="network_error",
                message=f"Download failed: {e}",
                details={"url": url},
            ) from e
        except OSError as e:
            raise FetchError(
                code="io_error",
                message=f"Failed to write {destination}: {e}",
                details={"url": url},
            ) from e
        finally:
            if self._client is None:
                client.close()
