from __future__ import annotations

"""
Asset Domain Data Models.

Value types exchanged with the archive reader and the record decoder:
archive entries, decoded records, decoding attempts and the recursive
field graph that describes a record's typed structure.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence

from bundletree.domain.errors import DecodeError

# -----------------------------------------------------------------------------
# FIELD GRAPH
# -----------------------------------------------------------------------------

class ValueKind(Enum):
    """Shape of the value held by a field-graph node."""
    NONE = "none"
    SCALAR = "scalar"
    REFERENCE = "reference"
    SEQUENCE = "sequence"


@dataclass(eq=False)
class FieldGraphNode:
    """
    One node of a record's typed structure.

    A node may hold a value and, independently of the value kind, an
    ordered list of declared child nodes.

    Attributes:
        name: Field name as declared by the record type.
        type_name: Declared type of the field.
        value: Scalar, Reference, list of scalars/FieldGraphNodes, or None.
        children: Declared child fields, in declaration order.
    """
    name: str
    type_name: str = ""
    value: Any = None
    children: List["FieldGraphNode"] = field(default_factory=list)

    def __iter__(self):
        return iter(self.children)

    @property
    def value_kind(self) -> ValueKind:
        return classify_value(self.value)


@dataclass(frozen=True, eq=False)
class Reference:
    """A field value pointing at another field-graph node."""
    target: FieldGraphNode


def classify_value(value: Any) -> ValueKind:
    """Map a raw field value onto its ValueKind."""
    if value is None:
        return ValueKind.NONE
    if isinstance(value, Reference):
        return ValueKind.REFERENCE
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR

# -----------------------------------------------------------------------------
# RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class DecodedRecord:
    """
    A structured object decoded from an asset document.

    Attributes:
        path_id: Identifier of the object inside its document.
        type_name: Declared type name, used as grouping discriminant.
        root: Root of the object's field graph.
    """
    path_id: int
    type_name: str
    root: FieldGraphNode

    @property
    def label(self) -> str:
        return f"Object #{self.path_id}"


@dataclass(frozen=True)
class DecodingAttempt:
    """
    Outcome of decoding one record slot: either a record or an error.
    """
    record: Optional[DecodedRecord] = None
    error: Optional[DecodeError] = None

    def discriminant(self) -> str:
        """
        Return the record's type name.

        Raises:
            DecodeError: If the record could not be decoded.
        """
        if self.record is None:
            raise self.error or DecodeError("Record slot holds neither record nor error")
        return self.record.type_name

    @classmethod
    def success(cls, record: DecodedRecord) -> "DecodingAttempt":
        return cls(record=record)

    @classmethod
    def failure(cls, error: DecodeError) -> "DecodingAttempt":
        return cls(error=error)

# -----------------------------------------------------------------------------
# COLLABORATOR INTERFACES
# -----------------------------------------------------------------------------

class ArchiveEntry(Protocol):
    """One named item of an archive."""

    name: str
    is_decodable: bool

    def read_bytes(self) -> bytes:
        ...


class AssetDocument(Protocol):
    """An opened asset document exposing its records."""

    def list_records(self) -> Sequence[DecodingAttempt]:
        ...


class RecordDecoder(Protocol):
    """Turns the raw bytes of a decodable entry into an AssetDocument."""

    def decode(self, data: bytes, source: str = "") -> AssetDocument:
        ...
