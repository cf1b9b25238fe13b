"""Decode a compiled script into a flat sequence of instructions.

Every statement starts with a u16 opcode. Statement opcodes and their
operands:

  SET       varref, expr
  IF        jump u16, expr
  ELSEIF    jump u16, expr
  ELSE      jump u16
  WHILE     jump u16, expr
  REFERENCE id        (prefixes the function call that follows)
  ENDIF / ENDWHILE / RETURN / END: no operands

where expr is a u8 length followed by that many expression bytes. Anything
from FUNCTION_BASE up is a function call with its FUNCTIONS layout.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from mwscript.errors import (
    MalformedInstructionError,
    UnexpectedEofError,
    UnknownOpcodeError,
)
from mwscript.models.opcodes import FUNCTION_BASE, Opcode
from mwscript.decompiler.expression import parse_expression
from mwscript.decompiler.operands import read_function, read_lstring, read_varref
from mwscript.parser.binary_reader import BinaryReader


_STATEMENT_OPCODES = frozenset(int(op) for op in Opcode)


@dataclass(slots=True)
class Instruction:
    opcode: int          # an Opcode member, or a function code for calls
    offset: int          # where the instruction starts in the bytecode
    end: int             # offset just past its last operand
    operands: list = field(default_factory=list)


def _read_expression(reader: BinaryReader, start: int):
    size = reader.uint8()
    if size == 0:
        raise MalformedInstructionError("Empty expression operand", offset=start)
    base = reader.position
    return parse_expression(reader.bytes(size), base)


def _decode_one(reader: BinaryReader, reference: str | None = None) -> Instruction:
    start = reader.position
    code = reader.uint16()

    if code >= FUNCTION_BASE:
        call = read_function(reader, code, reference=reference)
        return Instruction(code, start, reader.position, [call])

    if code not in _STATEMENT_OPCODES:
        raise UnknownOpcodeError(code, offset=start)
    if reference is not None:
        raise MalformedInstructionError(
            f"Reference {reference!r} is not followed by a function", offset=start
        )

    op = Opcode(code)
    if op == Opcode.SET:
        operands = [read_varref(reader)]
        operands.append(_read_expression(reader, start))
    elif op in (Opcode.IF, Opcode.ELSEIF, Opcode.WHILE):
        operands = [reader.uint16()]
        operands.append(_read_expression(reader, start))
    elif op == Opcode.ELSE:
        operands = [reader.uint16()]
    elif op == Opcode.REFERENCE:
        target = read_lstring(reader)
        if reader.remaining == 0:
            raise MalformedInstructionError(
                f"Reference {target!r} is not followed by a function", offset=start
            )
        nested = _decode_one(reader, reference=target)
        nested.offset = start
        return nested
    else:
        operands = []
    return Instruction(op, start, reader.position, operands)


def iter_instructions(bytecode: bytes) -> Iterator[Instruction]:
    """Yield decoded instructions in stream order.

    Stops after END; any bytes left behind it are an error. A stream without
    END simply ends when the bytes run out.
    """
    reader = BinaryReader(bytecode)
    while reader.remaining > 0:
        start = reader.position
        try:
            instr = _decode_one(reader)
        except UnexpectedEofError as exc:
            raise MalformedInstructionError(f"Truncated instruction: {exc}", offset=start) from exc
        if instr.opcode == Opcode.END:
            # Callers stop pulling at END, so check first.
            if reader.remaining > 0:
                raise MalformedInstructionError(
                    f"{reader.remaining} bytes after End", offset=reader.position
                )
            yield instr
            return
        yield instr
