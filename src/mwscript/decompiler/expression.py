"""Tokenise compiled expressions.

A compiled expression is mostly plain text: numbers, operators and parens
separated by spaces. Variables and function calls are spliced in as
binary tokens:

  s/l/f + u16       local short/long/float (1-based)
  G + u8 len + name global variable
  X + u16 code ...  function call with its operands
  R + u8 len + id   reference prefix for the X token that follows
"""

from dataclasses import dataclass, field

from mwscript.errors import MalformedInstructionError
from mwscript.models.opcodes import (
    EXPR_FUNCTION,
    EXPR_REFERENCE,
    GLOBAL_VAR,
    LOCAL_FLOAT,
    LOCAL_LONG,
    LOCAL_SHORT,
)
from mwscript.decompiler.operands import (
    GlobalRef,
    LocalRef,
    read_function,
    read_lstring,
)
from mwscript.parser.binary_reader import BinaryReader


OPERATORS = frozenset({"+", "-", "*", "/", "(", ")", "==", "!=", "<", "<=", ">", ">="})
_WHITESPACE = frozenset(b" \t")
_NUMBER_CHARS = frozenset(b"0123456789.")


@dataclass(slots=True)
class Expression:
    # str for operators and literals, LocalRef/GlobalRef/FunctionCall otherwise
    tokens: list = field(default_factory=list)


def _expects_operand(tokens: list) -> bool:
    """True where a '-' would be a sign rather than subtraction."""
    if not tokens:
        return True
    last = tokens[-1]
    return isinstance(last, str) and last in OPERATORS and last != ")"


def _read_number(raw: bytes, reader: BinaryReader) -> str:
    start = reader.position
    end = start
    while end < len(raw) and raw[end] in _NUMBER_CHARS:
        end += 1
    text = raw[start:end].decode("ascii")
    reader.skip(end - start)
    if text.count(".") > 1 or text == ".":
        raise ValueError(text)
    return text


def parse_expression(raw: bytes, base_offset: int = 0) -> Expression:
    """Split expression bytes into tokens. base_offset locates errors in the script."""
    reader = BinaryReader(raw)
    expr = Expression()
    tokens = expr.tokens
    reference: str | None = None

    while reader.remaining > 0:
        start = reader.position
        byte = reader.uint8()

        if reference is not None and byte != EXPR_FUNCTION:
            raise MalformedInstructionError(
                f"Reference {reference!r} is not followed by a function",
                offset=base_offset + start,
            )

        if byte in _WHITESPACE:
            continue
        if byte in (LOCAL_SHORT, LOCAL_LONG, LOCAL_FLOAT):
            tokens.append(LocalRef(chr(byte), reader.uint16()))
        elif byte == GLOBAL_VAR:
            tokens.append(GlobalRef(read_lstring(reader)))
        elif byte == EXPR_REFERENCE:
            reference = read_lstring(reader)
        elif byte == EXPR_FUNCTION:
            code = reader.uint16()
            tokens.append(
                read_function(reader, code, reference=reference, base_offset=base_offset)
            )
            reference = None
        elif byte in _NUMBER_CHARS or (
            byte == ord("-")
            and reader.remaining > 0
            and raw[reader.position] in _NUMBER_CHARS
            and _expects_operand(tokens)
        ):
            sign = "-" if byte == ord("-") else ""
            if not sign:
                reader.seek(start)
            try:
                tokens.append(sign + _read_number(raw, reader))
            except ValueError:
                raise MalformedInstructionError(
                    "Bad numeric literal in expression", offset=base_offset + start
                ) from None
        else:
            char = chr(byte)
            if char in "=!<>" and reader.remaining > 0 and raw[reader.position] == ord("="):
                reader.skip(1)
                char += "="
            if char not in OPERATORS:
                raise MalformedInstructionError(
                    f"Unexpected byte 0x{byte:02X} in expression",
                    offset=base_offset + start,
                )
            tokens.append(char)

    if reference is not None:
        raise MalformedInstructionError(
            f"Reference {reference!r} is not followed by a function",
            offset=base_offset + len(raw),
        )
    return expr
