"""Generic TES3 record data classes."""

from dataclasses import dataclass, field


@dataclass(slots=True)
class Field:
    """A single field within a record (e.g. SCHD, SCVR, SCDT)."""
    type: str        # 4-char ASCII tag
    data: bytes      # raw payload (size is len(data))


@dataclass(slots=True)
class RecordHeader:
    """16-byte record header preceding the record payload."""
    type: str        # 4-char tag (e.g. "SCPT", "NPC_")
    data_size: int   # size of the payload (after header)
    reserved: int    # unused word between size and flags
    flags: int

    @property
    def is_deleted(self) -> bool:
        return bool(self.flags & 0x0000_0020)


@dataclass(slots=True)
class Record:
    """A record as it sits in the stream: header + undecoded payload."""
    header: RecordHeader
    payload: bytes
    offset: int = 0  # file offset of the record header


@dataclass(slots=True)
class MasterFile:
    name: str
    size: int


@dataclass(slots=True)
class ArchiveHeader:
    """Contents of the leading TES3 record."""
    version: float
    file_type: int   # 0 = plugin, 1 = master, 32 = savegame
    author: str
    description: str
    record_count: int
    masters: list[MasterFile] = field(default_factory=list)
