"""Helpers shared by the test modules."""

import base64
import hashlib
from pathlib import Path

from oceandata_sync.application.domain import Downloader
from oceandata_sync.application.exceptions import DownloadError

SEARCH_URL = "https://oceandata.sci.gsfc.nasa.gov/search/file_search.cgi"
GETFILE_URL = "https://oceandata.sci.gsfc.nasa.gov/cgi/getfile"


def sha1(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def basic_auth(user: str, password: str) -> str:
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return f"Basic {token}"


def listing(*lines: str, count=None) -> str:
    """Builds a file search response body in the server's format."""
    if count is None:
        count = len(lines)
    header = f"Your query generated {count} results\n\n"
    return header + "".join(f"{line}\n" for line in lines)


def tree(root: Path) -> dict:
    """Snapshot of every file under root with its content."""
    if not root.exists():
        return {}
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*")) if p.is_file()
    }


class FakeDownloader(Downloader):
    """Writes canned payloads instead of transferring anything."""

    def __init__(self, payloads=None, failing=()):
        self.payloads = payloads or {}
        self.failing = set(failing)
        self.calls = []

    async def download(self, url, destination, source):
        self.calls.append(url)
        name = url.rsplit("/", 1)[-1]
        if name in self.failing:
            raise DownloadError(f"Error downloading {url}: 500 Server Error")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.payloads.get(name, b"payload"))
        return destination

    @property
    def fetched(self):
        return {url.rsplit("/", 1)[-1] for url in self.calls}


class StubServer:
    """An httpx.MockTransport handler that records every request."""

    def __init__(self, responder):
        self.responder = responder
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responder(request)
