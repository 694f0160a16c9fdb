from __future__ import annotations

"""
ZIP Bundle Reader.

Exposes the members of a ZIP archive as bundle entries. Member content is
read on demand by reopening the archive, so entries remain readable after
the reader itself has been closed.
"""

import logging
import os
import zipfile
import zlib
from typing import Iterator, List, Optional, Sequence

from bundletree.domain.constants import DEFAULT_DECODABLE_EXTENSIONS
from bundletree.domain.errors import ArchiveOpenError, DecodeError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def is_bundle(path: str) -> bool:
    """Return True if the file at path is a ZIP bundle."""
    try:
        return zipfile.is_zipfile(path)
    except OSError:
        return False


class ZipArchiveEntry:
    """A single member of a ZIP bundle."""

    def __init__(self, archive_path: str, name: str, size: int, is_decodable: bool) -> None:
        self.archive_path = archive_path
        self.name = name
        self.size = size
        self.is_decodable = is_decodable

    def read_bytes(self) -> bytes:
        """
        Read the member's uncompressed content.

        Raises:
            DecodeError: If the archive or the member cannot be read.
        """
        try:
            with zipfile.ZipFile(self.archive_path, "r") as zf:
                return zf.read(self.name)
        except (OSError, KeyError, zipfile.BadZipFile, zlib.error) as e:
            raise DecodeError(f"Failed to read bundle entry: {e}", source=self.name) from e

    def __repr__(self) -> str:
        return f"ZipArchiveEntry({self.name!r}, size={self.size})"


class ZipBundleReader:
    """
    Iterates the entries of a ZIP bundle in archive order.

    Usable as a context manager; directory members are skipped.
    """

    def __init__(self, path: str, decodable_extensions: Optional[Sequence[str]] = None) -> None:
        self.path = os.path.abspath(path)
        self.decodable_extensions = [
            e.lower() for e in (decodable_extensions or DEFAULT_DECODABLE_EXTENSIONS)
        ]
        self._zf: Optional[zipfile.ZipFile] = None

    def __enter__(self) -> "ZipBundleReader":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def open(self) -> None:
        try:
            self._zf = zipfile.ZipFile(self.path, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveOpenError(f"Cannot open bundle '{self.path}': {e}") from e
        logger.debug(f"Opened bundle {self.path}")

    def close(self) -> None:
        if self._zf is not None:
            self._zf.close()
            self._zf = None

    def entries(self) -> List[ZipArchiveEntry]:
        if self._zf is None:
            raise ArchiveOpenError(f"Bundle '{self.path}' is not open")

        out: List[ZipArchiveEntry] = []
        for info in self._zf.infolist():
            if info.is_dir():
                continue
            out.append(ZipArchiveEntry(
                self.path,
                info.filename,
                info.file_size,
                self._is_decodable(info.filename),
            ))
        return out

    def __iter__(self) -> Iterator[ZipArchiveEntry]:
        return iter(self.entries())

    def _is_decodable(self, name: str) -> bool:
        lowered = name.lower()
        return any(lowered.endswith(ext) for ext in self.decodable_extensions)
