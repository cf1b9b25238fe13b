"""Low-level binary reader with typed read methods and a moving cursor."""

import struct

from mwscript.errors import InvalidEncodingError, UnexpectedEofError


# Morrowind plugins store text in the Windows western code page.
TEXT_ENCODING = "cp1252"


def decode_text(raw: bytes) -> str:
    return raw.decode(TEXT_ENCODING, errors="replace")


class BinaryReader:
    """Wraps a bytes buffer with typed reads and a moving cursor.

    slice(size) returns a new BinaryReader bounded to the next `size` bytes,
    so record and field parsers can never overrun into their neighbours.
    """

    __slots__ = ("_data", "_start", "_pos", "_end")

    def __init__(self, data: bytes, offset: int = 0, end: int | None = None) -> None:
        self._data = data
        self._start = offset
        self._pos = offset
        self._end = end if end is not None else len(data)

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return self._end - self._pos

    def _check(self, what: str, size: int) -> None:
        if size < 0 or self._pos + size > self._end:
            raise UnexpectedEofError(
                f"{what} of {size} bytes at offset {self._pos} "
                f"would exceed boundary at {self._end}"
            )

    def _read(self, size: int) -> bytes:
        self._check("Read", size)
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def _unpack(self, fmt: str, size: int):
        self._check("Read", size)
        value = struct.unpack_from(fmt, self._data, self._pos)[0]
        self._pos += size
        return value

    def uint8(self) -> int:
        return self._unpack("<B", 1)

    def uint16(self) -> int:
        return self._unpack("<H", 2)

    def int16(self) -> int:
        return self._unpack("<h", 2)

    def uint32(self) -> int:
        return self._unpack("<I", 4)

    def int32(self) -> int:
        return self._unpack("<i", 4)

    def uint64(self) -> int:
        return self._unpack("<Q", 8)

    def float32(self) -> float:
        return self._unpack("<f", 4)

    def signature(self) -> str:
        """Read a 4-byte record/field tag (e.g. 'SCPT', 'SCHD')."""
        return self._read(4).decode("ascii", errors="replace")

    def peek_signature(self) -> str:
        """Return the next 4-byte tag without advancing."""
        self._check("Peek", 4)
        return self._data[self._pos : self._pos + 4].decode("ascii", errors="replace")

    def bytes(self, size: int) -> bytes:
        return self._read(size)

    def cstring(self, max_len: int | None = None) -> str:
        """Read a null-terminated string of at most max_len bytes (terminator included)."""
        start = self._pos
        limit = self._end if max_len is None else min(self._end, start + max_len)
        null = self._data.find(b"\x00", start, limit)
        if null < 0:
            raise InvalidEncodingError(
                f"No null terminator found starting at offset {start}"
            )
        result = decode_text(self._data[start:null])
        self._pos = null + 1  # skip past the null byte
        return result

    def fixed_string(self, size: int) -> str:
        """Read a zero-padded string field of exactly `size` bytes."""
        raw = self._read(size)
        return decode_text(raw.split(b"\x00", 1)[0])

    def skip(self, size: int) -> None:
        self._check("Skip", size)
        self._pos += size

    def slice(self, size: int) -> "BinaryReader":
        """Return a new BinaryReader bounded to the next `size` bytes.

        Advances this reader's cursor past the sliced region.
        """
        self._check("Slice", size)
        sub = BinaryReader(self._data, self._pos, self._pos + size)
        self._pos += size
        return sub

    def seek(self, offset: int) -> None:
        """Seek to an absolute position within the bounded region."""
        if offset < self._start or offset > self._end:
            raise UnexpectedEofError(
                f"Seek to {offset} is outside bounds [{self._start}, {self._end}]"
            )
        self._pos = offset
