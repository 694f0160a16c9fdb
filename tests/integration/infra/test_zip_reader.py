from __future__ import annotations

"""
Integration tests for the ZIP Bundle Reader.

Uses real archives written to tmp_path.
"""

import zipfile

import pytest

from bundletree.domain.errors import ArchiveOpenError, DecodeError
from bundletree.infra.archive.zip_reader import ZipBundleReader, is_bundle


def test_is_bundle_detection(sample_bundle, tmp_path):
    plain = tmp_path / "plain.json"
    plain.write_text("{}", encoding="utf-8")

    assert is_bundle(str(sample_bundle)) is True
    assert is_bundle(str(plain)) is False
    assert is_bundle(str(tmp_path / "missing.zip")) is False


def test_entries_in_archive_order_with_decodable_flag(sample_bundle):
    with ZipBundleReader(str(sample_bundle)) as reader:
        entries = list(reader)

    assert [e.name for e in entries] == [
        "assets/level0.assets",
        "assets/broken.assets",
        "assets/readme.txt",
        "manifest.txt",
    ]
    assert [e.is_decodable for e in entries] == [True, True, False, False]


def test_custom_extensions(sample_bundle):
    with ZipBundleReader(str(sample_bundle), [".TXT"]) as reader:
        flags = {e.name: e.is_decodable for e in reader}

    assert flags["assets/readme.txt"] is True
    assert flags["assets/level0.assets"] is False


def test_directory_members_are_skipped(tmp_path):
    path = tmp_path / "dirs.zip"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("folder/", "")
        zf.writestr("folder/file.bin", b"\x00")

    with ZipBundleReader(str(path)) as reader:
        assert [e.name for e in reader] == ["folder/file.bin"]


def test_entries_readable_after_close(sample_bundle):
    with ZipBundleReader(str(sample_bundle)) as reader:
        entries = reader.entries()

    manifest = entries[-1]
    assert manifest.read_bytes() == b"v1"


def test_read_failure_becomes_decode_error(sample_bundle):
    with ZipBundleReader(str(sample_bundle)) as reader:
        entry = reader.entries()[0]

    sample_bundle.unlink()
    with pytest.raises(DecodeError):
        entry.read_bytes()


def test_open_failure(tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"not a zip")

    with pytest.raises(ArchiveOpenError):
        ZipBundleReader(str(bogus)).open()


def test_entries_require_open_reader(sample_bundle):
    with pytest.raises(ArchiveOpenError):
        ZipBundleReader(str(sample_bundle)).entries()
