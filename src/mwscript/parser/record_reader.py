"""Generic TES3 record reader using generators.

Navigates the plugin file structure:
  TES3 header record → Records → Fields

TES3 has no GRUP nesting: after the header the file is one flat run of
records. Every record's payload is consumed in full whether or not anyone
understands its tag, which is what keeps the walk in sync.
"""

from collections.abc import Iterator

from mwscript.errors import (
    ArchiveHeaderError,
    StreamError,
    TrailingBytesError,
    TruncatedFieldError,
    TruncatedRecordError,
    UnexpectedEofError,
)
from mwscript.models.records import Field, Record, RecordHeader
from mwscript.parser.binary_reader import BinaryReader


# Sizes in bytes
RECORD_HEADER_SIZE = 16
FIELD_HEADER_SIZE = 8

ARCHIVE_HEADER_TAG = "TES3"


def iter_fields(payload: bytes) -> Iterator[Field]:
    """Yield the fields of one record payload in stored order."""
    reader = BinaryReader(payload)
    while reader.remaining > 0:
        offset = reader.position
        if reader.remaining < FIELD_HEADER_SIZE:
            raise TruncatedFieldError(
                f"{reader.remaining} stray bytes at payload offset {offset}"
            )
        sig = reader.signature()
        size = reader.uint32()
        if size > reader.remaining:
            raise TruncatedFieldError(
                f"Field {sig!r} at payload offset {offset} declares {size} bytes "
                f"but only {reader.remaining} remain"
            )
        data_reader = reader.slice(size)
        yield Field(type=sig, data=data_reader.bytes(data_reader.remaining))


def read_fields(record: Record) -> list[Field]:
    return list(iter_fields(record.payload))


def _read_record(reader: BinaryReader) -> Record:
    """Read one record (header + payload) at the current position."""
    offset = reader.position
    if reader.remaining < RECORD_HEADER_SIZE:
        raise TrailingBytesError(offset, reader.remaining)
    header = RecordHeader(
        type=reader.signature(),
        data_size=reader.uint32(),
        reserved=reader.uint32(),
        flags=reader.uint32(),
    )
    if header.data_size > reader.remaining:
        raise TruncatedRecordError(header.type, offset, header.data_size, reader.remaining)
    data_reader = reader.slice(header.data_size)
    return Record(header=header, payload=data_reader.bytes(data_reader.remaining), offset=offset)


def _read_header_record(reader: BinaryReader) -> Record:
    if reader.remaining == 0:
        raise ArchiveHeaderError("Plugin is empty")
    try:
        record = _read_record(reader)
    except (StreamError, UnexpectedEofError) as exc:
        raise ArchiveHeaderError(f"Unreadable {ARCHIVE_HEADER_TAG} header: {exc}") from exc
    if record.header.type != ARCHIVE_HEADER_TAG:
        raise ArchiveHeaderError(
            f"Expected {ARCHIVE_HEADER_TAG} header, got {record.header.type!r}"
        )
    return record


def read_header_record(data: bytes) -> Record:
    """Return the leading TES3 record without decoding it."""
    return _read_header_record(BinaryReader(data))


def iter_records(data: bytes, *, include_header: bool = False) -> Iterator[Record]:
    """Yield every record of the plugin in file order.

    The TES3 header record is validated and skipped unless *include_header*.
    Stops exactly at the end of the buffer; leftovers that can't hold a
    record header raise TrailingBytesError.
    """
    reader = BinaryReader(data)
    header = _read_header_record(reader)
    if include_header:
        yield header
    while reader.remaining > 0:
        yield _read_record(reader)


def iter_records_of_type(data: bytes, record_type: str) -> Iterator[Record]:
    """Yield all records of *record_type*; everything else is passed over."""
    if len(record_type) != 4:
        raise ValueError("record_type signatures must be 4 characters")
    for record in iter_records(data):
        if record.header.type == record_type:
            yield record


def read_records(data: bytes, record_type: str) -> list[Record]:
    return list(iter_records_of_type(data, record_type))
