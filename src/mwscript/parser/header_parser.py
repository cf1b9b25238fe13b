"""Parse the TES3 header record into an ArchiveHeader.

The header record carries:
  - HEDR: version f32, file type u32, author char[32], description char[256],
          record count u32 (300 bytes total)
  - MAST/DATA pairs: master file name (null-terminated) and its size (u64)

Nothing here is needed to walk the records, but a header that doesn't
parse means the file isn't a plugin, so every defect is fatal.
"""

from mwscript.errors import ArchiveHeaderError, PluginError
from mwscript.models.records import ArchiveHeader, MasterFile, Record
from mwscript.parser.binary_reader import BinaryReader, decode_text
from mwscript.parser.record_reader import iter_fields, read_header_record


HEDR_SIZE = 300


def parse_archive_header(record: Record) -> ArchiveHeader:
    if record.header.type != "TES3":
        raise ArchiveHeaderError(f"Expected TES3 header, got {record.header.type!r}")

    header: ArchiveHeader | None = None
    pending_master: str | None = None
    try:
        for sub in iter_fields(record.payload):
            if sub.type == "HEDR":
                if header is not None:
                    raise ArchiveHeaderError("HEDR appears more than once")
                if len(sub.data) != HEDR_SIZE:
                    raise ArchiveHeaderError(
                        f"HEDR is {len(sub.data)} bytes, expected {HEDR_SIZE}"
                    )
                reader = BinaryReader(sub.data)
                header = ArchiveHeader(
                    version=reader.float32(),
                    file_type=reader.uint32(),
                    author=reader.fixed_string(32),
                    description=reader.fixed_string(256),
                    record_count=reader.uint32(),
                )
            elif sub.type == "MAST":
                if pending_master is not None:
                    raise ArchiveHeaderError(f"Master {pending_master!r} has no DATA size")
                pending_master = decode_text(sub.data.split(b"\x00", 1)[0])
            elif sub.type == "DATA":
                if pending_master is None or header is None:
                    raise ArchiveHeaderError("DATA field without a preceding MAST")
                header.masters.append(
                    MasterFile(name=pending_master, size=BinaryReader(sub.data).uint64())
                )
                pending_master = None
    except ArchiveHeaderError:
        raise
    except PluginError as exc:
        raise ArchiveHeaderError(f"Malformed TES3 header: {exc}") from exc

    if header is None:
        raise ArchiveHeaderError("TES3 header has no HEDR field")
    if pending_master is not None:
        raise ArchiveHeaderError(f"Master {pending_master!r} has no DATA size")
    return header


def read_archive_header(data: bytes) -> ArchiveHeader:
    """Parse the header of a whole plugin file."""
    return parse_archive_header(read_header_record(data))
