"""HTTP implementation of the FileLister port for the Oceandata file search."""

import re
from typing import Dict, List, Optional, Tuple

import httpx
import pydantic
from tenacity import RetryError

from ..application.domain import FileLister, RemoteFileRecord, SourceDescriptor
from ..application.exceptions import QueryError

from .base_client import BaseClient
from .decorators import retry_on_network_error
from .search_models import SearchResponse, SearchResult

_NO_MATCH = re.compile(r"no files matched your query", re.IGNORECASE)
_RESULT_COUNT = re.compile(r"generated\s+(\d+)\s+results?", re.IGNORECASE)
_HEADER_LINES = 2


class HttpFileLister(BaseClient, FileLister):
    """Lists remote files and their checksums via the file search CGI."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        search_url: str,
        timeout: float,
    ):
        """Initializes the lister adapter."""
        super().__init__(client, timeout)
        self.search_url = search_url

    def _map_to_domain(self, dto: SearchResult) -> RemoteFileRecord:
        """Maps a single search result DTO to a domain model."""
        return RemoteFileRecord(
            filename=dto.filename,
            remote_checksum=dto.checksum,
        )

    @retry_on_network_error
    async def _execute_query(
        self, form: Dict[str, str], auth: Optional[Tuple[str, str]]
    ) -> str:
        """Executes the raw HTTP POST request."""
        response = await self.client.post(
            self.search_url,
            data=form,
            auth=auth,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.text

    def _validate_and_extract(self, text: str, query: str) -> SearchResponse:
        """Validates the plain-text response and extracts its result lines."""

        lines = text.splitlines()

        if any(_NO_MATCH.search(line) for line in lines):
            raise QueryError(
                f"No files matched the file search query ({query})"
            )

        counts = [m for m in map(_RESULT_COUNT.search, lines) if m]
        if not counts:
            raise QueryError(
                f"Malformed file search response, no result count "
                f"(query: {query})"
            )

        results = []
        for line in lines[_HEADER_LINES:]:
            if not line.strip() or _RESULT_COUNT.search(line):
                continue
            fields = line.split()
            if len(fields) != 2:
                raise QueryError(
                    f"Malformed file search result line {line!r} "
                    f"(query: {query})"
                )
            results.append({"checksum": fields[0], "filename": fields[1]})

        try:
            response = SearchResponse.model_validate(
                {"result_count": int(counts[0].group(1)), "results": results}
            )
        except pydantic.ValidationError as e:
            raise QueryError(
                f"Invalid file search response (query: {query}): {e}"
            ) from e

        if not response.results and response.result_count != 0:
            raise QueryError(
                f"File search announced {response.result_count} results "
                f"but returned none (query: {query})"
            )

        return response

    async def list_files(
        self, source: SourceDescriptor
    ) -> List[RemoteFileRecord]:
        """
        Orchestrates querying, validating, and mapping the file listing.

        This method serves as the public contract fulfillment for the
        FileLister port.

        Args:
            source: The source whose search pattern and data type filter
                    select the files.

        Returns:
            Records deduplicated by filename and sorted by filename.

        Raises:
            QueryError: If the search fails, matches nothing, or returns a
                        malformed response.
        """

        query = source.search_pattern
        form = {"cksum": "1", "search": query}
        if source.data_type_filter:
            form["dtype"] = source.data_type_filter
        self.logger.info(f"Fetching file list for {form}...")

        auth = self._auth(source.credentials)
        try:
            text = await self._execute_query(form, auth)
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise QueryError(
                f"Could not retrieve file list (query: {query}): {cause}"
            ) from cause
        except httpx.HTTPError as e:
            raise QueryError(
                f"Could not retrieve file list (query: {query}): {e}"
            ) from e

        response = self._validate_and_extract(text, query)

        unique = {}
        for dto in response.results:
            unique.setdefault(dto.filename, dto)
        records = [self._map_to_domain(unique[name]) for name in sorted(unique)]

        self.logger.info(f"File search returned {len(records)} files.")

        return records
