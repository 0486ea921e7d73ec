"""
Pydantic models for validating responses from the Oceandata file search.

The search endpoint answers in plain text rather than JSON, so the client
first splits the body into lines and fields; these models then act as the
strict contract for the extracted values before they reach the application
core.
"""

from typing import List

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A single ``<checksum> <filename>`` line of a search response."""

    checksum: str = Field(min_length=1, pattern=r"^[0-9A-Fa-f]+$")
    filename: str = Field(min_length=1)


class SearchResponse(BaseModel):
    """
    Represents a complete, successful search response.

    ``result_count`` is the number the server announced in its
    "Your query generated N results" line; ``results`` holds every
    result line that followed the header.
    """

    result_count: int = Field(ge=0)
    results: List[SearchResult]
