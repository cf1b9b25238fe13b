"""Turn decoded operands back into script source text."""

import math
import re
import struct
from decimal import Decimal

from mwscript.errors import UnknownVariableError
from mwscript.models.script import ScriptRecord
from mwscript.decompiler.expression import Expression
from mwscript.decompiler.operands import (
    FunctionCall,
    GlobalRef,
    Identifier,
    LocalRef,
    Text,
)


_BARE_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def format_float(value: float) -> str:
    """Shortest positional text that reads back as the same 32-bit float.

    0.1 is stored as 0.100000001490116..., which should print as "0.1".
    """
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    packed = struct.pack("<f", value)
    text = repr(value)
    for digits in range(1, 10):
        candidate = f"{value:.{digits}g}"
        try:
            if struct.pack("<f", float(candidate)) == packed:
                text = candidate
                break
        except OverflowError:
            continue
    return format(Decimal(text), "f")


def format_identifier(name: str) -> str:
    if _BARE_IDENTIFIER.fullmatch(name):
        return name
    return f'"{name}"'


def format_text(value: str) -> str:
    return f'"{value}"'


class Renderer:
    """Renders operands against one script's local variable table."""

    def __init__(self, script: ScriptRecord) -> None:
        self._locals = {
            "s": script.shorts,
            "l": script.longs,
            "f": script.floats,
        }

    def variable(self, ref: LocalRef | GlobalRef, offset: int | None = None) -> str:
        if isinstance(ref, GlobalRef):
            return ref.name
        names = self._locals[ref.kind]
        if not 1 <= ref.index <= len(names):
            kind = {"s": "short", "l": "long", "f": "float"}[ref.kind]
            raise UnknownVariableError(
                f"Local {kind} #{ref.index} is out of range (script has {len(names)})",
                offset=offset,
            )
        return names[ref.index - 1]

    def operand(self, value, offset: int | None = None) -> str:
        if isinstance(value, (LocalRef, GlobalRef)):
            return self.variable(value, offset)
        if isinstance(value, Identifier):
            return format_identifier(value.value)
        if isinstance(value, Text):
            return format_text(value.value)
        if isinstance(value, FunctionCall):
            return self.call(value, offset)
        if isinstance(value, Expression):
            return self.expression(value, offset)
        if isinstance(value, float):
            return format_float(value)
        return str(value)

    def call(self, call: FunctionCall, offset: int | None = None) -> str:
        parts = [call.name]
        parts.extend(self.operand(arg, offset) for arg in call.args)
        text = " ".join(parts)
        if call.reference is not None:
            text = f"{format_identifier(call.reference)}->{text}"
        return text

    def expression(self, expr: Expression, offset: int | None = None) -> str:
        return " ".join(self.operand(token, offset) for token in expr.tokens)
