"""Parse SCPT records into ScriptRecord objects.

SCPT fields:
  - SCHD: name char[32], shorts u32, longs u32, floats u32,
          compiled size u32, variable table size u32 (52 bytes)
  - SCVR: null-terminated local names: shorts, then longs, then floats
  - SCDT: compiled bytecode
  - SCTX: original source text (optional)

Only declared sizes are checked against actual sizes here; the bytecode
itself is left to the decompiler.
"""

from mwscript.errors import (
    CompiledSizeMismatchError,
    DuplicateFieldError,
    DuplicateHeaderFieldError,
    MalformedFieldError,
    MissingHeaderFieldError,
    VariableCountMismatchError,
    WrongRecordKindError,
)
from mwscript.models.records import Record
from mwscript.models.script import ScriptRecord, VariableCounts
from mwscript.parser.binary_reader import BinaryReader, decode_text
from mwscript.parser.record_reader import read_fields, read_records


SCRIPT_TAG = "SCPT"
SCHD_SIZE = 52


def _split_names(table: bytes) -> list[str]:
    names = table.split(b"\x00")
    # Each name is terminated, so the final split piece is the empty tail.
    if names and names[-1] == b"":
        names.pop()
    return [decode_text(n) for n in names]


def parse_script(record: Record) -> ScriptRecord:
    if record.header.type != SCRIPT_TAG:
        raise WrongRecordKindError(SCRIPT_TAG, record.header.type)

    schd: bytes | None = None
    seen: dict[str, bytes] = {}
    for sub in read_fields(record):
        if sub.type == "SCHD":
            if schd is not None:
                raise DuplicateHeaderFieldError("SCHD")
            schd = sub.data
        elif sub.type in ("SCVR", "SCDT", "SCTX"):
            if sub.type in seen:
                raise DuplicateFieldError(sub.type)
            seen[sub.type] = sub.data

    if schd is None:
        raise MissingHeaderFieldError(f"SCPT record at offset {record.offset} has no SCHD")
    if len(schd) != SCHD_SIZE:
        raise MalformedFieldError(f"SCHD is {len(schd)} bytes, expected {SCHD_SIZE}")

    reader = BinaryReader(schd)
    name = reader.fixed_string(32)
    shorts = reader.uint32()
    longs = reader.uint32()
    floats = reader.uint32()
    compiled_size = reader.uint32()
    counts = VariableCounts(
        shorts=shorts,
        longs=longs,
        floats=floats,
        string_table_size=reader.uint32(),
    )

    table = seen.get("SCVR", b"")
    if len(table) != counts.string_table_size:
        raise VariableCountMismatchError(
            counts.total,
            len(_split_names(table)),
            f"SCVR is {len(table)} bytes, header says {counts.string_table_size}",
        )
    names = _split_names(table)
    if len(names) != counts.total:
        raise VariableCountMismatchError(counts.total, len(names))

    bytecode = seen.get("SCDT", b"")
    if len(bytecode) != compiled_size:
        raise CompiledSizeMismatchError(compiled_size, len(bytecode))

    source_text = None
    text_size = 0
    if "SCTX" in seen:
        raw_text = seen["SCTX"]
        text_size = len(raw_text)
        source_text = decode_text(raw_text.rstrip(b"\x00"))

    return ScriptRecord(
        name=name,
        var_counts=counts,
        compiled_size=compiled_size,
        variable_names=names,
        bytecode=bytecode,
        source_text=source_text,
        text_size=text_size,
    )


def parse_all_scripts(data: bytes) -> list[ScriptRecord]:
    """Parse every SCPT record in a plugin. Any record error propagates."""
    return [parse_script(r) for r in read_records(data, SCRIPT_TAG)]
