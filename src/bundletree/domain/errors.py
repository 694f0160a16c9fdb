from __future__ import annotations

"""
Domain Error Taxonomy.

Failures raised by archive readers and record decoders. Decode failures are
recoverable and localized to a single entry or record; the tree model turns
them into diagnostic leaves instead of aborting construction.
"""


class BundleTreeError(Exception):
    """Base class for all errors raised by bundletree."""


class DecodeError(BundleTreeError):
    """
    An archive entry or record could not be parsed into structured data.

    Attributes:
        source: Optional identifier of the failing entry or object.
    """

    def __init__(self, message: str, source: str = "") -> None:
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        msg = super().__str__()
        if self.source:
            return f"{self.source}: {msg}"
        return msg


class ArchiveOpenError(BundleTreeError):
    """The top-level input file could not be opened at all."""
