"""Operand values and the decoders shared by statements and expressions."""

from dataclasses import dataclass, field

from mwscript.errors import MalformedInstructionError, UnknownOpcodeError
from mwscript.models.opcodes import (
    FUNCTIONS,
    GLOBAL_VAR,
    LOCAL_FLOAT,
    LOCAL_LONG,
    LOCAL_SHORT,
)
from mwscript.parser.binary_reader import BinaryReader, decode_text


@dataclass(frozen=True, slots=True)
class LocalRef:
    kind: str    # 's', 'l' or 'f'
    index: int   # 1-based within its kind


@dataclass(frozen=True, slots=True)
class GlobalRef:
    name: str


@dataclass(frozen=True, slots=True)
class Identifier:
    value: str


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(slots=True)
class FunctionCall:
    code: int
    name: str
    args: list = field(default_factory=list)
    reference: str | None = None   # "id" in id->Function


VariableRef = LocalRef | GlobalRef


def read_lstring(reader: BinaryReader) -> str:
    """Read a u8-length-prefixed string."""
    size = reader.uint8()
    return decode_text(reader.bytes(size)).rstrip("\x00")


def read_varref(reader: BinaryReader, base_offset: int = 0) -> VariableRef:
    start = reader.position
    kind = reader.uint8()
    if kind in (LOCAL_SHORT, LOCAL_LONG, LOCAL_FLOAT):
        return LocalRef(chr(kind), reader.uint16())
    if kind == GLOBAL_VAR:
        return GlobalRef(read_lstring(reader))
    raise MalformedInstructionError(
        f"Bad variable reference kind 0x{kind:02X}", offset=base_offset + start
    )


def read_arguments(reader: BinaryReader, layout: str, base_offset: int = 0) -> list:
    """Decode a function's arguments according to its layout string."""
    args: list = []
    for code in layout:
        if code == "o":
            args.append(Identifier(read_lstring(reader)))
        elif code == "t":
            args.append(Text(read_lstring(reader)))
        elif code == "b":
            args.append(reader.uint8())
        elif code == "h":
            args.append(reader.int16())
        elif code == "l":
            args.append(reader.int32())
        elif code == "F":
            args.append(reader.float32())
        elif code == "v":
            args.append(read_varref(reader, base_offset))
        elif code == "V":
            args.extend(read_varref(reader, base_offset) for _ in range(reader.uint8()))
        elif code == "T":
            args.extend(Text(read_lstring(reader)) for _ in range(reader.uint8()))
        else:
            raise ValueError(f"Unknown argument layout code {code!r}")
    return args


def read_function(
    reader: BinaryReader,
    code: int,
    *,
    reference: str | None = None,
    base_offset: int = 0,
) -> FunctionCall:
    """Decode the arguments of function *code*; the code itself is already read."""
    spec = FUNCTIONS.get(code)
    if spec is None:
        raise UnknownOpcodeError(code, offset=base_offset + reader.position - 2)
    return FunctionCall(
        code=code,
        name=spec.name,
        args=read_arguments(reader, spec.layout, base_offset),
        reference=reference,
    )
