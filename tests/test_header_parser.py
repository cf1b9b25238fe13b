import struct

import pytest

from mwscript.errors import ArchiveHeaderError
from mwscript.parser.header_parser import read_archive_header

from plugin_builder import hedr, record, tes3_header


def test_read_header_fields():
    data = tes3_header(
        author="Ashlander",
        description="Crafting for the Urshilaku",
        masters=(("Morrowind.esm", 79837557), ("Tribunal.esm", 4565686)),
        record_count=12,
    )
    header = read_archive_header(data)

    assert abs(header.version - 1.3) < 1e-6
    assert header.file_type == 0
    assert header.author == "Ashlander"
    assert header.description == "Crafting for the Urshilaku"
    assert header.record_count == 12
    assert [(m.name, m.size) for m in header.masters] == [
        ("Morrowind.esm", 79837557),
        ("Tribunal.esm", 4565686),
    ]


def test_header_without_masters():
    header = read_archive_header(tes3_header())
    assert header.masters == []


def test_header_ignores_records_after_it():
    data = tes3_header(author="x") + b"garbage that is never read"
    assert read_archive_header(data).author == "x"


def test_missing_hedr():
    with pytest.raises(ArchiveHeaderError, match="no HEDR"):
        read_archive_header(record("TES3", []))


def test_short_hedr():
    with pytest.raises(ArchiveHeaderError, match="expected 300"):
        read_archive_header(record("TES3", [("HEDR", hedr()[:100])]))


def test_master_without_size():
    data = record("TES3", [("HEDR", hedr()), ("MAST", b"Morrowind.esm\x00")])
    with pytest.raises(ArchiveHeaderError, match="no DATA"):
        read_archive_header(data)


def test_data_without_master():
    data = record("TES3", [("HEDR", hedr()), ("DATA", struct.pack("<Q", 1))])
    with pytest.raises(ArchiveHeaderError, match="without a preceding MAST"):
        read_archive_header(data)


def test_corrupt_field_list_is_a_header_error():
    data = record("TES3", struct.pack("<4sI", b"HEDR", 5000))
    with pytest.raises(ArchiveHeaderError, match="Malformed"):
        read_archive_header(data)


def test_not_a_plugin():
    with pytest.raises(ArchiveHeaderError):
        read_archive_header(b"PK\x03\x04" + b"\x00" * 40)
