"""Script record model and decompiled output."""

from dataclasses import dataclass, field


@dataclass(slots=True)
class VariableCounts:
    shorts: int
    longs: int
    floats: int
    string_table_size: int   # byte length of the SCVR name table

    @property
    def total(self) -> int:
        return self.shorts + self.longs + self.floats


@dataclass(slots=True)
class ScriptRecord:
    """An SCPT record with its fields decoded and cross-checked."""
    name: str
    var_counts: VariableCounts
    compiled_size: int
    variable_names: list[str] = field(default_factory=list)
    bytecode: bytes = b""
    source_text: str | None = None
    text_size: int = 0       # byte length of SCTX, 0 when absent

    @property
    def shorts(self) -> list[str]:
        return self.variable_names[: self.var_counts.shorts]

    @property
    def longs(self) -> list[str]:
        start = self.var_counts.shorts
        return self.variable_names[start : start + self.var_counts.longs]

    @property
    def floats(self) -> list[str]:
        start = self.var_counts.shorts + self.var_counts.longs
        return self.variable_names[start : start + self.var_counts.floats]


@dataclass(slots=True)
class DecompiledScript:
    name: str
    source_lines: list[str] = field(default_factory=list)
    declarations: list[str] = field(default_factory=list)
    original_text: str | None = None

    def text(self, *, framed: bool = True) -> str:
        """Render the script as source text.

        With *framed*, wraps the body in Begin/End and puts the local
        declarations first, the way scripts are written in the editor.
        """
        if not framed:
            return "\n".join(self.source_lines) + "\n" if self.source_lines else ""
        lines = [f"Begin {self.name}", ""]
        if self.declarations:
            lines.extend(self.declarations)
            lines.append("")
        lines.extend(self.source_lines)
        if self.source_lines:
            lines.append("")
        lines.append("End")
        return "\n".join(lines) + "\n"
