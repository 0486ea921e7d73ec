"""
The core application service and pipeline, containing pure business logic.

This module defines the per-file decision procedure (SyncDecisionEngine),
the pipeline that carries one listed file through mapping, decision and
transfer (FileSyncPipeline), the accumulator of per-file outcomes
(ResultAggregator) and the orchestrator of a whole run (SyncService).
"""

import errno
import logging
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from .domain import *
from .exceptions import DownloadError, MappingError, StorageError

logger = logging.getLogger(__name__)

PathMapper = Callable[[str], str]

# Write failures with these codes mean the mirror itself is unusable.
_FATAL_ERRNOS = frozenset({errno.ENOSPC, errno.EROFS, errno.EDQUOT})


class SyncDecisionEngine:
    """Decides whether a listed file must be fetched."""

    def __init__(self, hasher: Hasher):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.hasher = hasher

    async def decide(
        self,
        record: RemoteFileRecord,
        local_path: Path,
        source: SourceDescriptor,
    ) -> SyncDecision:
        """
        Applies the source's clobber policy to one file.

        A dry run never touches the filesystem and reports every file as a
        candidate, which is the set ALWAYS would fetch.
        """
        if source.dry_run:
            return SyncDecision.WOULD_FETCH

        if source.clobber_level >= ClobberLevel.ALWAYS:
            return SyncDecision.FETCH

        if not local_path.exists():
            return SyncDecision.FETCH

        if source.clobber_level is ClobberLevel.NEVER:
            self.logger.debug(f"Not clobbering existing {local_path.name}")
            return SyncDecision.SKIP

        if await self.hasher.matches(local_path, record.remote_checksum):
            self.logger.info(
                f"Not downloading {record.filename}, local copy exists "
                f"with identical checksum"
            )
            return SyncDecision.SKIP

        return SyncDecision.FETCH


class ResultAggregator:
    """Accumulates per-file outcomes into a single sync report."""

    def __init__(self):
        self._entries: List[Tuple[str, DownloadOutcome]] = []

    def add(self, filename: str, outcome: DownloadOutcome):
        self._entries.append((filename, outcome))

    def __len__(self):
        return len(self._entries)

    def _summary(self, outcomes: Sequence[DownloadOutcome]) -> str:
        counts = {decision: 0 for decision in SyncDecision}
        for outcome in outcomes:
            if outcome.decision is not None:
                counts[outcome.decision] += 1
        downloaded = sum(o.was_downloaded for o in outcomes)
        failures = [o for o in outcomes if o.failed]

        parts = [
            f"{len(outcomes)} files: {downloaded} downloaded, "
            f"{counts[SyncDecision.SKIP]} skipped, "
            f"{counts[SyncDecision.WOULD_FETCH]} would download, "
            f"{len(failures)} failed"
        ]
        for outcome in failures:
            parts.append(
                f"{outcome.error.value} error for {outcome.source_url}: "
                f"{outcome.error_message}"
            )
        return "\n".join(parts)

    def finalize(self, ok: bool = True, reason: str = "") -> SyncReport:
        """Builds the report, outcomes ordered by remote filename."""
        outcomes = tuple(
            outcome
            for _, outcome in sorted(self._entries, key=lambda e: e[0])
        )
        message = self._summary(outcomes)
        if reason:
            message = f"Sync aborted: {reason}\n{message}"
        return SyncReport(ok=ok, outcomes=outcomes, message=message)


class FileSyncPipeline:
    """Encapsulates the processing of a single listed file."""

    def __init__(
        self,
        downloader: Downloader,
        decision_engine: SyncDecisionEngine,
        getfile_url: str,
    ):
        """Initializes the pipeline with necessary dependencies (ports)."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.downloader = downloader
        self.decision_engine = decision_engine
        self.getfile_url = getfile_url.rstrip("/")

    def url_for(self, record: RemoteFileRecord) -> str:
        return f"{self.getfile_url}/{record.filename}"

    async def run(
        self,
        record: RemoteFileRecord,
        source: SourceDescriptor,
        path_mapper: PathMapper,
    ) -> DownloadOutcome:
        """Maps, decides and transfers one file.

        Isolated failures are returned as failed outcomes.

        Raises:
            DownloadError: If the transfer fails and the source asks to
                stop on download errors.
            StorageError: If the local filesystem refuses writes altogether.
        """

        url = self.url_for(record)

        # Step 1: Map (locator -> relative local path)
        try:
            local_path = source.local_root / path_mapper(url)
        except MappingError as e:
            self.logger.warning(
                f"Skipping {url}: cannot determine the local path ({e})"
            )
            return DownloadOutcome(
                source_url=url,
                error=ErrorKind.MAPPING,
                error_message=str(e),
            )

        decision = None
        try:
            # Step 2: Decide (record + local state -> decision)
            decision = await self.decision_engine.decide(
                record, local_path, source
            )
            if decision is not SyncDecision.FETCH:
                return DownloadOutcome(
                    source_url=url, local_path=local_path, decision=decision
                )

            # Step 3: Transfer
            await self.downloader.download(url, local_path, source)

        except DownloadError as e:
            if source.stop_on_download_error:
                raise
            self.logger.warning(str(e))
            return DownloadOutcome(
                source_url=url,
                local_path=local_path,
                decision=decision,
                error=ErrorKind.DOWNLOAD,
                error_message=str(e),
            )
        except OSError as e:
            if e.errno in _FATAL_ERRNOS:
                raise StorageError(
                    f"Local storage unusable while writing {local_path}: {e}"
                ) from e
            self.logger.warning(f"Could not store {url} at {local_path}: {e}")
            return DownloadOutcome(
                source_url=url,
                local_path=local_path,
                decision=decision,
                error=ErrorKind.IO,
                error_message=str(e),
            )

        return DownloadOutcome(
            source_url=url,
            local_path=local_path,
            was_downloaded=True,
            decision=decision,
        )


class SyncService:
    """Orchestrates one sync run over an already listed set of files."""

    def __init__(
        self,
        downloader: Downloader,
        hasher: Hasher,
        getfile_url: str,
        show_progress: bool = True,
    ):
        """Initializes the service and the reusable per-file pipeline."""
        self.show_progress = show_progress
        self.pipeline = FileSyncPipeline(
            downloader,
            SyncDecisionEngine(hasher),
            getfile_url,
        )

    def _prepare_local_root(self, source: SourceDescriptor):
        if source.dry_run:
            return
        try:
            source.local_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Cannot create local root {source.local_root}: {e}"
            ) from e

    async def run(
        self,
        source: SourceDescriptor,
        records: Sequence[RemoteFileRecord],
        path_mapper: PathMapper,
    ) -> SyncReport:
        """
        Processes every record in filename order, one at a time.

        Raises:
            SyncError: A fatal error, with the partial report attached as
                       its ``report`` attribute.
        """

        records = sorted(records, key=lambda r: r.filename)
        aggregator = ResultAggregator()

        logger.info(
            f"{len(records)} file{'s' if len(records) != 1 else ''} "
            f"to process (clobber: {source.clobber_level.name.lower()}, "
            f"dry run: {source.dry_run})"
        )

        try:
            self._prepare_local_root(source)
            with logging_redirect_tqdm():
                for record in tqdm(
                    records,
                    desc="Overall Progress",
                    unit="file",
                    disable=not self.show_progress,
                ):
                    try:
                        outcome = await self.pipeline.run(
                            record, source, path_mapper
                        )
                    except DownloadError as e:
                        aggregator.add(record.filename, DownloadOutcome(
                            source_url=self.pipeline.url_for(record),
                            decision=SyncDecision.FETCH,
                            error=ErrorKind.DOWNLOAD,
                            error_message=str(e),
                        ))
                        raise
                    aggregator.add(record.filename, outcome)
        except (DownloadError, StorageError) as e:
            e.report = aggregator.finalize(ok=False, reason=str(e))
            logger.error(f"Sync aborted after {len(aggregator)} files: {e}")
            raise

        report = aggregator.finalize(ok=True)

        if source.dry_run:
            urls = "\n ".join(o.source_url for o in report.candidates)
            logger.info(
                f"Dry run, not downloading the following files:\n {urls}"
            )

        logger.info(report.message)
        return report
