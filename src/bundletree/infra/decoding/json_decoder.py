from __future__ import annotations

"""
JSON Asset Document Decoder.

Decodes asset documents stored as UTF-8 JSON into typed field graphs:

    {"objects": [{"path_id": 1, "type": "Texture2D", "fields": {...}}]}

Inside "fields", JSON objects become nodes with one child per key, arrays
become sequence values and scalars become scalar values. Three keys are
reserved: "$type" overrides the declared type, "$value" attaches a value
to a node that also has children and "$ref" points at another object of
the same document by path_id.

Failures of a single object (missing type, bad reference, reference
cycle) are reported per object; only an unreadable document as a whole
raises DecodeError.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from bundletree.domain.asset_models import (
    DecodedRecord,
    DecodingAttempt,
    FieldGraphNode,
    Reference,
)
from bundletree.domain.constants import ROOT_FIELD_NAME
from bundletree.domain.errors import ArchiveOpenError, DecodeError

logger = logging.getLogger(__name__)

PendingRefs = List[Tuple[FieldGraphNode, int]]

# -----------------------------------------------------------------------------
# DOCUMENT MODEL
# -----------------------------------------------------------------------------

class JsonAssetDocument:
    """Decoded asset document holding one decoding attempt per object."""

    def __init__(self, attempts: List[DecodingAttempt], source: str = "") -> None:
        self._attempts = attempts
        self.source = source

    def list_records(self) -> List[DecodingAttempt]:
        return list(self._attempts)

    def __len__(self) -> int:
        return len(self._attempts)

# -----------------------------------------------------------------------------
# DECODER
# -----------------------------------------------------------------------------

class JsonAssetDecoder:
    """Record decoder for JSON asset documents."""

    def decode(self, data: bytes, source: str = "") -> JsonAssetDocument:
        """
        Decode raw document bytes.

        Args:
            data: UTF-8 encoded JSON document.
            source: Name of the entry or file, used in error messages.

        Returns:
            JsonAssetDocument: Document exposing its decoding attempts.

        Raises:
            DecodeError: If the document is not valid JSON of the expected shape.
        """
        try:
            doc = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise DecodeError(f"Invalid asset document: {e}", source=source) from e

        if not isinstance(doc, dict) or not isinstance(doc.get("objects"), list):
            raise DecodeError("Asset document must contain an 'objects' list", source=source)

        # 1. Build field graphs, deferring reference resolution
        slots: List[Tuple[Optional[int], Optional[DecodedRecord], Optional[DecodeError], PendingRefs]] = []
        roots: Dict[int, FieldGraphNode] = {}
        for index, raw in enumerate(doc["objects"]):
            pending: PendingRefs = []
            try:
                record = self._decode_object(raw, index, pending)
            except DecodeError as e:
                slots.append((None, None, e, pending))
                continue

            if record.path_id in roots:
                err = DecodeError(f"Duplicate path_id {record.path_id}", source=f"object #{record.path_id}")
                slots.append((None, None, err, pending))
                continue

            roots[record.path_id] = record.root
            slots.append((record.path_id, record, None, pending))

        # 2. Verify the object reference graph is complete and acyclic
        refs = {pid: [target for _, target in pending] for pid, rec, _, pending in slots if rec is not None}
        verdicts = _verify_references(refs)

        # 3. Resolve references of valid objects
        attempts: List[DecodingAttempt] = []
        for pid, record, error, pending in slots:
            if record is None:
                attempts.append(DecodingAttempt.failure(error))
                continue

            problem = verdicts.get(pid)
            if problem:
                attempts.append(DecodingAttempt.failure(DecodeError(problem, source=f"object #{pid}")))
                continue

            for node, target in pending:
                node.value = Reference(roots[target])
            attempts.append(DecodingAttempt.success(record))

        logger.debug(f"Decoded {len(attempts)} object slots from '{source or '<memory>'}'")
        return JsonAssetDocument(attempts, source=source)

    # -------------------------------------------------------------------------
    # Object and field conversion
    # -------------------------------------------------------------------------

    def _decode_object(self, raw: Any, index: int, pending: PendingRefs) -> DecodedRecord:
        if not isinstance(raw, dict):
            raise DecodeError("Object entry is not a JSON object", source=f"object [{index}]")

        path_id = raw.get("path_id")
        if not isinstance(path_id, int) or isinstance(path_id, bool):
            raise DecodeError("Missing or invalid 'path_id'", source=f"object [{index}]")

        source = f"object #{path_id}"
        type_name = raw.get("type")
        if not isinstance(type_name, str) or not type_name:
            raise DecodeError("Missing or invalid 'type'", source=source)

        fields = raw.get("fields", {})
        if not isinstance(fields, dict):
            raise DecodeError("'fields' must be a JSON object", source=source)

        try:
            root = FieldGraphNode(ROOT_FIELD_NAME, type_name)
            root.children = [self._build_node(k, v, pending) for k, v in fields.items()]
        except DecodeError as e:
            e.source = source
            raise
        except RecursionError:
            raise DecodeError("Field graph is nested too deeply", source=source) from None

        return DecodedRecord(path_id=path_id, type_name=type_name, root=root)

    def _build_node(self, name: str, raw: Any, pending: PendingRefs) -> FieldGraphNode:
        if isinstance(raw, dict):
            return self._build_composite(name, raw, pending)
        if isinstance(raw, list):
            return FieldGraphNode(name, "array", value=self._convert_sequence(raw, pending))
        return FieldGraphNode(name, _scalar_type(raw), value=raw)

    def _build_composite(self, name: str, raw: Dict[str, Any], pending: PendingRefs) -> FieldGraphNode:
        declared = raw.get("$type")
        if declared is not None and not isinstance(declared, str):
            raise DecodeError(f"Field '{name}': '$type' must be a string")

        node = FieldGraphNode(name, declared or ("reference" if "$ref" in raw else "object"))

        if "$ref" in raw:
            target = raw["$ref"]
            if not isinstance(target, int) or isinstance(target, bool):
                raise DecodeError(f"Field '{name}': '$ref' must be an integer path_id")
            pending.append((node, target))
        elif "$value" in raw:
            value = raw["$value"]
            if isinstance(value, dict):
                raise DecodeError(f"Field '{name}': '$value' must be a scalar or an array")
            node.value = self._convert_sequence(value, pending) if isinstance(value, list) else value

        node.children = [
            self._build_node(k, v, pending)
            for k, v in raw.items()
            if k not in ("$type", "$ref", "$value")
        ]
        return node

    def _convert_sequence(self, items: List[Any], pending: PendingRefs) -> List[Any]:
        return [
            self._build_node(f"[{i}]", item, pending) if isinstance(item, (dict, list)) else item
            for i, item in enumerate(items)
        ]

# -----------------------------------------------------------------------------
# FILE LOADING
# -----------------------------------------------------------------------------

def load_asset_file(path: str, decoder: Optional[JsonAssetDecoder] = None) -> JsonAssetDocument:
    """
    Read and decode a standalone asset document.

    Raises:
        ArchiveOpenError: If the file cannot be read.
        DecodeError: If its content is not a valid asset document.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ArchiveOpenError(f"Cannot read asset file '{path}': {e}") from e

    return (decoder or JsonAssetDecoder()).decode(data, source=path)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _scalar_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    return "string"


def _verify_references(refs: Dict[int, List[int]]) -> Dict[int, Optional[str]]:
    """
    Check that every reference reachable from each object resolves to a
    valid object without looping back.

    Iterative depth-first search with an explicit stack, so arbitrarily
    long reference chains do not exhaust the interpreter stack.

    Args:
        refs: Outgoing reference targets per valid object.

    Returns:
        Dict[int, Optional[str]]: Problem description per object, None if valid.
    """
    verdicts: Dict[int, Optional[str]] = {}

    for start in refs:
        if start in verdicts:
            continue

        stack: List[Tuple[int, Iterator[int]]] = [(start, iter(refs[start]))]
        visiting: Set[int] = {start}

        while stack:
            pid, targets = stack[-1]
            problem: Optional[str] = None
            descended = False

            for target in targets:
                if target not in refs:
                    problem = f"Unresolved reference to object #{target}"
                    break
                if target in verdicts:
                    problem = verdicts[target]
                    if problem:
                        break
                    continue
                if target in visiting:
                    problem = f"Cyclic reference through object #{target}"
                    break
                visiting.add(target)
                stack.append((target, iter(refs[target])))
                descended = True
                break

            if descended:
                continue

            stack.pop()
            visiting.discard(pid)
            verdicts[pid] = problem

            # A broken object breaks everything that reaches it
            if problem:
                while stack:
                    ancestor, _ = stack.pop()
                    visiting.discard(ancestor)
                    verdicts[ancestor] = problem

    return verdicts
