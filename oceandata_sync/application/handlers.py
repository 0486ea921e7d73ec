"""
Synchronization handler for NASA's Oceandata service.

Oceandata uses standardized file naming conventions, so a search pattern
such as ``S*L3m_MO_CHL_chlor_a_9km.nc`` (monthly level-3 mapped SeaWiFS
chlorophyll at 9km, netCDF) is enough to describe a collection. The handler
asks the file search for the matching files and their checksums, maps each
one into the local mirror and fetches what the clobber policy requires.
"""

import logging
import os
from pathlib import Path
from typing import List

from .domain import (
    FileLister,
    Handler,
    RemoteFileRecord,
    SourceDescriptor,
    SyncReport,
)
from .exceptions import QueryError
from .layout import OCEANDATA_HOST, map_locator, search_directory
from .service import SyncService


class OceandataHandler(Handler):
    """Lists, maps and syncs Oceandata files."""

    def __init__(
        self,
        lister: FileLister,
        sync_service: SyncService,
        host: str = OCEANDATA_HOST,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.lister = lister
        self.sync_service = sync_service
        self.host = host

    async def list_files(
        self, source: SourceDescriptor
    ) -> List[RemoteFileRecord]:
        return await self.lister.list_files(source)

    def map_path(
        self, locator: str, path_only: bool = False, sep: str = os.sep
    ) -> str:
        return map_locator(
            locator, path_only=path_only, sep=sep, host=self.host
        )

    def local_directory(self, source: SourceDescriptor) -> Path:
        return source.local_root / search_directory(
            source.search_pattern, host=self.host
        )

    async def sync(self, source: SourceDescriptor) -> SyncReport:
        """
        Runs one full synchronization for the source.

        The listing completes before any file is processed. A failed
        listing aborts the run before the filesystem is touched.

        Raises:
            QueryError: If the file search fails.
            DownloadError: If a transfer fails and ``stop_on_download_error``
                           is set.
            StorageError: If the local mirror cannot be written.
        """

        self.logger.info(f"Starting sync for search {source.search_pattern!r}")

        try:
            records = await self.list_files(source)
        except QueryError as e:
            e.report = SyncReport(ok=False, outcomes=(), message=str(e))
            raise

        return await self.sync_service.run(source, records, self.map_path)
