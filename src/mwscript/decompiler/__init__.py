"""Compiled script decoding and source reconstruction."""

from mwscript.decompiler.decompiler import declarations, decompile
from mwscript.decompiler.instructions import Instruction, iter_instructions

__all__ = [
    "Instruction",
    "declarations",
    "decompile",
    "iter_instructions",
]
