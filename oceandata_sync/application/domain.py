"""
This module defines the core domain models for the application.

These classes represent the pure, technology-agnostic entities and data
structures that the synchronization logic operates on, plus the ports
(interfaces) that infrastructure adapters implement.
"""

import dataclasses
import enum
import os
from pathlib import Path

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .exceptions import ConfigurationError


# --- Domain Models ---

class ClobberLevel(enum.IntEnum):
    """Policy for overwriting existing local files, ordered by strength."""

    NEVER = 0
    IF_CHANGED = 1
    ALWAYS = 2

    @classmethod
    def parse(cls, value) -> "ClobberLevel":
        """Accepts a member, its name (any case, '-' or '_') or 0/1/2."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) or str(value).isdigit():
            try:
                return cls(int(value))
            except ValueError:
                pass
        else:
            key = str(value).strip().upper().replace("-", "_")
            if key in cls.__members__:
                return cls[key]
        raise ConfigurationError(f"Unknown clobber level: {value!r}")


class ProcessingType(enum.Enum):
    """Provider processing level, valued by its filename type code."""

    MAPPED = "L3m"
    BINNED = "L3b"
    LEVEL2 = "L2"


class SyncDecision(enum.Enum):
    SKIP = "skip"
    FETCH = "fetch"
    WOULD_FETCH = "would_fetch"


class ErrorKind(enum.Enum):
    MAPPING = "mapping"
    DOWNLOAD = "download"
    IO = "io"


@dataclasses.dataclass(frozen=True)
class Credentials:
    """Opaque username/password pair forwarded to the transport layer."""

    user: str
    password: str = dataclasses.field(repr=False)


@dataclasses.dataclass(frozen=True)
class SourceDescriptor:
    """Immutable description of one sync run against one data source."""

    search_pattern: str
    local_root: Path
    data_type_filter: Optional[str] = None
    credentials: Optional[Credentials] = None
    clobber_level: ClobberLevel = ClobberLevel.IF_CHANGED
    dry_run: bool = False
    stop_on_download_error: bool = False

    def __post_init__(self):
        if not isinstance(self.search_pattern, str) or not self.search_pattern:
            raise ConfigurationError("search pattern must be a non-empty string")
        if self.data_type_filter is not None and (
            not isinstance(self.data_type_filter, str)
            or not self.data_type_filter
        ):
            raise ConfigurationError(
                "data type filter must be a non-empty string when given"
            )
        object.__setattr__(self, "local_root", Path(self.local_root))
        object.__setattr__(
            self, "clobber_level", ClobberLevel.parse(self.clobber_level)
        )


@dataclasses.dataclass(frozen=True)
class RemoteFileRecord:
    """A transient data object for one entry of a remote file listing."""

    filename: str
    remote_checksum: str


@dataclasses.dataclass(frozen=True)
class ParsedFilename:
    """Structured fields decoded from a remote file locator."""

    locator: str
    platform_code: str
    acquisition_date: str
    processing_type: ProcessingType
    period_or_coverage_code: str
    parameter_token: str
    extension: str
    spatial_code: Optional[str] = None
    spatial_unit: Optional[str] = None

    @property
    def year(self) -> str:
        return self.acquisition_date[:4]

    @property
    def day_of_year(self) -> str:
        return self.acquisition_date[4:7]

    @property
    def basename(self) -> str:
        return self.locator.rstrip("/").rsplit("/", 1)[-1]


@dataclasses.dataclass(frozen=True)
class DownloadOutcome:
    """The result of processing a single remote file."""

    source_url: str
    local_path: Optional[Path] = None
    was_downloaded: bool = False
    decision: Optional[SyncDecision] = None
    error: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclasses.dataclass(frozen=True)
class SyncReport:
    """Aggregate result of one sync run."""

    ok: bool
    outcomes: Tuple[DownloadOutcome, ...]
    message: str = ""

    @property
    def downloaded(self) -> List[DownloadOutcome]:
        return [o for o in self.outcomes if o.was_downloaded]

    @property
    def failures(self) -> List[DownloadOutcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def candidates(self) -> List[DownloadOutcome]:
        """Outcomes the run fetched, tried to fetch, or would fetch."""
        return [
            o for o in self.outcomes
            if o.decision in (SyncDecision.FETCH, SyncDecision.WOULD_FETCH)
        ]


# --- Ports (Interfaces) ---

class FileLister(ABC):
    """A port for any remote file search service."""

    @abstractmethod
    async def list_files(
        self, source: SourceDescriptor
    ) -> List[RemoteFileRecord]:
        """Lists remote files matching the source's search pattern."""
        pass


class Downloader(ABC):
    """A port for any file downloader."""

    @abstractmethod
    async def download(
        self, url: str, destination: Path, source: SourceDescriptor
    ) -> Path:
        """Downloads a single file to a destination path, overwriting it."""
        pass


class Hasher(ABC):
    """A port for hashing file contents."""

    @abstractmethod
    async def matches(self, path: Path, checksum: str) -> bool:
        """Returns True if the file's content hash equals the checksum."""
        pass


class Handler(ABC):
    """A port for a provider-specific synchronization handler."""

    @abstractmethod
    async def list_files(
        self, source: SourceDescriptor
    ) -> List[RemoteFileRecord]:
        """Lists the remote files the source selects."""
        pass

    @abstractmethod
    def map_path(
        self, locator: str, path_only: bool = False, sep: str = os.sep
    ) -> str:
        """Maps a remote locator to its relative local path."""
        pass

    @abstractmethod
    async def sync(self, source: SourceDescriptor) -> SyncReport:
        """Brings the local mirror up to date with the remote listing."""
        pass

    @abstractmethod
    def local_directory(self, source: SourceDescriptor) -> Path:
        """Returns the top-level local directory the source writes into."""
        pass
