"""
Tests for fetching reg-code files from removable media and the network.

HTTP downloads go through an httpx.MockTransport, no real requests are made.
"""

import tempfile
from pathlib import Path

import httpx
from hypothesis import given, settings
from hypothesis import strategies as st

from addon_registration.media import Fetcher, MediaFetcher


def mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestLocalSchemes:
    """usb:// and file:// URLs."""

    def test_usb_url_maps_to_mount_dir(self) -> None:
        with tempfile.TemporaryDirectory() as mount, tempfile.TemporaryDirectory() as out:
            (Path(mount) / "regcodes.txt").write_text("sdk ABC123\n", encoding="utf-8")
            destination = Path(out) / "copy"

            fetched = MediaFetcher(usb_mount_dir=mount).fetch("usb:///regcodes.txt", destination)

            assert fetched is True
            assert destination.read_text(encoding="utf-8") == "sdk ABC123\n"

    def test_file_url(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            source = Path(tmp_dir) / "regcodes.xml"
            source.write_text("<profile/>", encoding="utf-8")
            destination = Path(tmp_dir) / "copy"

            assert MediaFetcher().fetch(source.as_uri(), destination) is True
            assert destination.read_text(encoding="utf-8") == "<profile/>"

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as mount:
            fetcher = MediaFetcher(usb_mount_dir=mount)

            assert fetcher.fetch("usb:///regcodes.xml", Path(mount) / "copy") is False

    def test_unsupported_scheme(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            assert MediaFetcher().fetch("ftp://example.com/regcodes.txt", Path(tmp_dir) / "copy") is False

    def test_implements_fetcher_protocol(self) -> None:
        assert isinstance(MediaFetcher(), Fetcher)


class TestHttpScheme:
    """http(s):// URLs downloaded with httpx."""

    def test_download(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/media/regcodes.txt"
            return httpx.Response(200, text="sdk ABC123\n")

        with tempfile.TemporaryDirectory() as tmp_dir:
            destination = Path(tmp_dir) / "copy"
            fetcher = MediaFetcher(client=mock_client(handler))

            assert fetcher.fetch("https://example.com/media/regcodes.txt", destination) is True
            assert destination.read_text(encoding="utf-8") == "sdk ABC123\n"

    @given(status=st.sampled_from([301, 403, 404, 500, 503]))
    @settings(max_examples=10)
    def test_non_ok_status_is_not_fetched(self, status: int) -> None:
        fetcher = MediaFetcher(client=mock_client(lambda request: httpx.Response(status)))

        with tempfile.TemporaryDirectory() as tmp_dir:
            assert fetcher.fetch("https://example.com/regcodes.txt", Path(tmp_dir) / "copy") is False

    def test_network_error_is_not_fetched(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = MediaFetcher(client=mock_client(handler))

        with tempfile.TemporaryDirectory() as tmp_dir:
            assert fetcher.fetch("http://example.com/regcodes.txt", Path(tmp_dir) / "copy") is False
