from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. In-memory stand-ins for archive entries and record decoders.
3. Shared sample asset documents and bundles.
"""

import json
import os
import sys
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from bundletree.domain.asset_models import DecodedRecord, DecodingAttempt, FieldGraphNode  # noqa: E402
from bundletree.domain.errors import DecodeError  # noqa: E402


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class FakeEntry:
    """In-memory archive entry."""

    def __init__(self, name: str, data: bytes = b"", is_decodable: bool = False) -> None:
        self.name = name
        self.data = data
        self.is_decodable = is_decodable
        self.reads = 0

    def read_bytes(self) -> bytes:
        self.reads += 1
        return self.data


class FakeDocument:
    def __init__(self, attempts: List[DecodingAttempt]) -> None:
        self.attempts = attempts

    def list_records(self) -> List[DecodingAttempt]:
        return list(self.attempts)


class FakeDecoder:
    """Decoder mapping exact byte strings to prepared documents."""

    def __init__(self, documents: Optional[Dict[bytes, List[DecodingAttempt]]] = None) -> None:
        self.documents = documents or {}
        self.calls: List[bytes] = []

    def decode(self, data: bytes, source: str = "") -> FakeDocument:
        self.calls.append(data)
        if data not in self.documents:
            raise DecodeError("unknown document", source=source)
        return FakeDocument(self.documents[data])


def make_record(path_id: int, type_name: str, *children: FieldGraphNode) -> DecodedRecord:
    root = FieldGraphNode("Base", type_name, children=list(children))
    return DecodedRecord(path_id=path_id, type_name=type_name, root=root)


def ok(path_id: int, type_name: str, *children: FieldGraphNode) -> DecodingAttempt:
    return DecodingAttempt.success(make_record(path_id, type_name, *children))


def failed(message: str) -> DecodingAttempt:
    return DecodingAttempt.failure(DecodeError(message))


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_document() -> Dict[str, Any]:
    """
    A small asset document with two types, a reference and one broken object.
    """
    return {
        "objects": [
            {
                "path_id": 1,
                "type": "Texture2D",
                "fields": {"m_Name": "grass", "m_Width": 256, "m_Height": 256},
            },
            {
                "path_id": 2,
                "type": "Material",
                "fields": {
                    "m_Name": "ground",
                    "m_Texture": {"$ref": 1},
                    "m_Colors": [1.0, 0.5, {"r": 1, "g": 0}],
                },
            },
            {"path_id": 3, "fields": {}},
            {
                "path_id": 4,
                "type": "Texture2D",
                "fields": {"m_Name": "rock"},
            },
        ]
    }


@pytest.fixture
def sample_bundle(tmp_path: Path, sample_document: Dict[str, Any]) -> Path:
    """
    A ZIP bundle laid out as:

    assets/level0.assets   (decodable, sample_document)
    assets/broken.assets   (decodable, invalid JSON)
    assets/readme.txt
    manifest.txt
    """
    path = tmp_path / "level.bundle"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("assets/level0.assets", json.dumps(sample_document))
        zf.writestr("assets/broken.assets", "{not json")
        zf.writestr("assets/readme.txt", "hello")
        zf.writestr("manifest.txt", "v1")
    return path
