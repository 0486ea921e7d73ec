"""
Infrastructure adapter for comparing local files against remote checksums.
"""

import asyncio
import hashlib
import logging
from pathlib import Path

from ..application.domain import Hasher
from ..application.exceptions import ConfigurationError


class FileHasher(Hasher):
    """An adapter that implements the Hasher port using hashlib."""

    def __init__(self, algorithm: str = "sha1", chunk_size: int = 65536):
        """Initializes the hasher."""
        self.logger = logging.getLogger(self.__class__.__name__)
        if algorithm not in hashlib.algorithms_available:
            raise ConfigurationError(f"Unknown hash algorithm: {algorithm}")
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    async def digest(self, file_path: Path) -> str:
        """Perform the blocking I/O work of hashing a file in a thread."""

        self.logger.debug(f"Computing {self.algorithm} for {file_path.name}...")

        hasher = hashlib.new(self.algorithm)

        def _read_and_hash():
            with open(file_path, "rb") as f:
                while chunk := f.read(self.chunk_size):
                    hasher.update(chunk)
            return hasher.hexdigest()

        return await asyncio.to_thread(_read_and_hash)

    async def matches(self, path: Path, checksum: str) -> bool:
        """
        Compare a local file's digest with a provider-supplied checksum.

        This public method fulfills the Hasher port contract. Hex digests
        are compared case-insensitively.
        """

        calculated = await self.digest(path)
        same = calculated.lower() == checksum.strip().lower()
        if not same:
            self.logger.info(
                f"Checksum mismatch for {path.name}: "
                f"local {calculated}, remote {checksum}"
            )
        return same
