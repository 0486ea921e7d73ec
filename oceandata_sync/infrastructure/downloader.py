"""HTTP implementation of the Downloader port."""

import asyncio
import contextlib
import os
from pathlib import Path
from typing import AsyncGenerator, Generator, Optional, Tuple

import httpx
from tqdm import tqdm

from ..application.domain import Downloader, SourceDescriptor
from ..application.exceptions import DownloadError

from .base_client import BaseClient


class HttpDownloader(BaseClient, Downloader):
    """A downloader that fetches files via HTTP atomically."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float,
        chunk_size: int,
        show_progress: bool = True,
    ):
        """Initializes the downloader adapter."""
        super().__init__(client, timeout)
        self.chunk_size = chunk_size
        self.show_progress = show_progress

    @contextlib.contextmanager
    def _atomic_target(self, destination: Path) -> Generator[Path, None, None]:
        """Provides a temporary '.part' path and ensures cleanup."""
        part_path = destination.with_suffix(destination.suffix + ".part")
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            yield part_path
        finally:
            part_path.unlink(missing_ok=True)

    async def _stream_chunks(
        self, response: httpx.Response, target_file: Path,
    ):
        """Produce byte chunks from a response and write them to a file."""
        with open(target_file, "wb") as f:
            async for chunk in response.aiter_bytes(self.chunk_size):
                await asyncio.to_thread(f.write, chunk)
                yield len(chunk)

    async def _consume_stream_with_progress(
        self,
        stream: AsyncGenerator[int, None],
        total_size: int,
        desc: str,
    ):
        """Consume the byte stream to update a TQDM progress bar."""

        with tqdm(
            total=total_size or None,
            unit="B",
            unit_scale=True,
            desc=desc,
            disable=not self.show_progress,
        ) as progress_bar:
            received = 0
            async for progress in stream:
                received += progress
                progress_bar.update(progress)

        if total_size != 0 and received != total_size:
            raise DownloadError(f"Size mismatch: {received} != {total_size}")

    async def _stream_from_network(
        self,
        url: str,
        target_file: Path,
        auth: Optional[Tuple[str, str]],
        desc: str,
    ):
        """Manage the network request and the streaming process."""
        async with self.client.stream(
            "GET", url, timeout=self.timeout, auth=auth
        ) as response:
            response.raise_for_status()
            total_size = int(response.headers.get("Content-Length", 0))
            if "Content-Encoding" in response.headers:
                # Content-Length counts encoded bytes, chunks are decoded.
                total_size = 0
            stream = self._stream_chunks(response, target_file)
            await self._consume_stream_with_progress(stream, total_size, desc)

    async def download(
        self, url: str, destination: Path, source: SourceDescriptor
    ) -> Path:
        """
        Transfer one remote file to its local path, replacing any copy.

        This is the public method that fulfills the Downloader port contract.
        The file is written to a '.part' sibling first and only renamed over
        the destination once complete. Transfers are never retried here.

        Args:
            url: The remote file URL.
            destination: The final desired path for the file.
            source: The source whose credentials authorize the transfer.

        Returns:
            The destination path.

        Raises:
            DownloadError: If the transfer fails.
            OSError: If the local file cannot be written.
        """

        auth = self._auth(source.credentials)
        self.logger.info(f"Downloading {url}...")
        with self._atomic_target(destination) as part_path:
            try:
                await self._stream_from_network(
                    url, part_path, auth, destination.name
                )
            except httpx.HTTPError as e:
                raise DownloadError(f"Error downloading {url}: {e}") from e
            os.replace(part_path, destination)
        self.logger.info(f"Finished downloading {destination.name}")

        return destination
