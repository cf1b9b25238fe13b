"""Rebuild script source from compiled bytecode.

The bytecode is a flat run of statements. if/while blocks are bracketed
by explicit opening and closing opcodes, and each opening (or else/elseif)
carries a forward jump to the instruction that ends its branch. A stack
of pending blocks is enough to recover the nesting and to check those
jumps; no control-flow graph is built.
"""

import logging
from dataclasses import dataclass

from mwscript.errors import DecompileError, UnbalancedControlFlowError
from mwscript.models.opcodes import BLOCK_KEYWORDS, Opcode
from mwscript.models.script import DecompiledScript, ScriptRecord
from mwscript.decompiler.instructions import Instruction, iter_instructions
from mwscript.decompiler.render import Renderer

log = logging.getLogger(__name__)

INDENT = "    "


@dataclass(slots=True)
class _Block:
    opcode: Opcode      # IF or WHILE
    start: int          # offset of the opening instruction
    target: int         # where the current branch must close
    has_else: bool = False


def declarations(script: ScriptRecord) -> list[str]:
    lines = [f"short {name}" for name in script.shorts]
    lines.extend(f"long {name}" for name in script.longs)
    lines.extend(f"float {name}" for name in script.floats)
    return lines


def _close_branch(stack: list[_Block], instr: Instruction, expected: Opcode) -> _Block:
    """Check that *instr* legally ends the innermost block's current branch."""
    keyword = BLOCK_KEYWORDS[instr.opcode]
    if not stack:
        raise UnbalancedControlFlowError(f"{keyword} without an open block", offset=instr.offset)
    block = stack[-1]
    if block.opcode != expected:
        raise UnbalancedControlFlowError(
            f"{keyword} closes a {BLOCK_KEYWORDS[block.opcode]} block "
            f"opened at offset {block.start}",
            offset=instr.offset,
        )
    if block.has_else and instr.opcode in (Opcode.ELSE, Opcode.ELSEIF):
        raise UnbalancedControlFlowError(f"{keyword} after else", offset=instr.offset)
    if block.target != instr.offset:
        raise UnbalancedControlFlowError(
            f"Branch opened at offset {block.start} jumps to {block.target}, "
            f"but {keyword} is at {instr.offset}",
            offset=instr.offset,
        )
    return block


def _render(script: ScriptRecord, lines: list[str]) -> None:
    renderer = Renderer(script)
    stack: list[_Block] = []

    for instr in iter_instructions(script.bytecode):
        op = instr.opcode
        depth = len(stack)
        log.debug("%s: offset %d opcode 0x%04X", script.name, instr.offset, op)

        if op == Opcode.END:
            break
        if op in (Opcode.IF, Opcode.WHILE):
            jump, expr = instr.operands
            cond = renderer.expression(expr, instr.offset)
            lines.append(f"{INDENT * depth}{BLOCK_KEYWORDS[op]} ( {cond} )")
            stack.append(_Block(Opcode(op), instr.offset, instr.end + jump))
        elif op in (Opcode.ELSEIF, Opcode.ELSE):
            block = _close_branch(stack, instr, Opcode.IF)
            jump = instr.operands[0]
            if op == Opcode.ELSE:
                lines.append(f"{INDENT * (depth - 1)}else")
                block.has_else = True
            else:
                cond = renderer.expression(instr.operands[1], instr.offset)
                lines.append(f"{INDENT * (depth - 1)}elseif ( {cond} )")
            block.target = instr.end + jump
        elif op in (Opcode.ENDIF, Opcode.ENDWHILE):
            expected = Opcode.IF if op == Opcode.ENDIF else Opcode.WHILE
            _close_branch(stack, instr, expected)
            stack.pop()
            lines.append(f"{INDENT * (depth - 1)}{BLOCK_KEYWORDS[op]}")
        elif op == Opcode.SET:
            var, expr = instr.operands
            lines.append(
                f"{INDENT * depth}set {renderer.variable(var, instr.offset)} "
                f"to {renderer.expression(expr, instr.offset)}"
            )
        elif op == Opcode.RETURN:
            lines.append(f"{INDENT * depth}return")
        else:
            # Anything else iter_instructions yields is a function call.
            lines.append(f"{INDENT * depth}{renderer.call(instr.operands[0], instr.offset)}")

    if stack:
        block = stack[-1]
        raise UnbalancedControlFlowError(
            f"{len(stack)} block(s) still open at end of script; innermost "
            f"{BLOCK_KEYWORDS[block.opcode]} opened at offset {block.start}",
            offset=len(script.bytecode),
        )


def decompile(script: ScriptRecord) -> DecompiledScript:
    """Decompile one script. Raises a DecompileError carrying partial_lines."""
    lines: list[str] = []
    try:
        _render(script, lines)
    except DecompileError as exc:
        exc.partial_lines = list(lines)
        raise
    return DecompiledScript(
        name=script.name,
        source_lines=lines,
        declarations=declarations(script),
        original_text=script.source_text,
    )
