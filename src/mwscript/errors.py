"""Error hierarchy for plugin parsing and script decompilation.

Everything derives from PluginError, which is a ValueError, so callers that
catch ValueError around the readers keep working.

Three tiers matter to callers:
  StreamError    : the archive can't be walked any further; stop.
  RecordError    : one record is unusable; the stream position is still good.
  DecompileError : one script's bytecode is unusable; carries partial output.
"""


class PluginError(ValueError):
    """Base class for every error raised while reading a plugin."""


# --- Byte cursor ---

class UnexpectedEofError(PluginError):
    """A read would run past the end of the bounded buffer."""


class InvalidEncodingError(PluginError):
    """A string read found no terminator within its allowed length."""


# --- Stream-fatal ---

class StreamError(PluginError):
    """The record stream itself is broken; later records can't be located."""


class ArchiveHeaderError(StreamError):
    pass


class TruncatedRecordError(StreamError):
    def __init__(self, tag: str, offset: int, declared: int, available: int) -> None:
        super().__init__(
            f"Record {tag!r} at offset {offset} declares {declared} bytes "
            f"but only {available} remain"
        )
        self.tag = tag
        self.offset = offset
        self.declared = declared
        self.available = available


class TrailingBytesError(StreamError):
    def __init__(self, offset: int, count: int) -> None:
        super().__init__(
            f"{count} trailing bytes at offset {offset} do not form a record header"
        )
        self.offset = offset
        self.count = count


# --- Record-local ---

class RecordError(PluginError):
    """One record is structurally inconsistent. Other records are unaffected."""


class TruncatedFieldError(RecordError):
    pass


class WrongRecordKindError(RecordError):
    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Expected a {expected} record, got {actual!r}")
        self.expected = expected
        self.actual = actual


class MissingHeaderFieldError(RecordError):
    pass


class DuplicateFieldError(RecordError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"Field {tag!r} appears more than once")
        self.tag = tag


class DuplicateHeaderFieldError(DuplicateFieldError):
    pass


class MalformedFieldError(RecordError):
    pass


class VariableCountMismatchError(RecordError):
    def __init__(self, declared: int, found: int, detail: str = "") -> None:
        msg = f"Script declares {declared} variables but the table holds {found}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.declared = declared
        self.found = found


class CompiledSizeMismatchError(RecordError):
    def __init__(self, declared: int, found: int) -> None:
        super().__init__(
            f"Script declares {declared} bytes of compiled data but SCDT holds {found}"
        )
        self.declared = declared
        self.found = found


# --- Decompile-local ---

class DecompileError(PluginError):
    """Bytecode could not be turned into source.

    partial_lines holds whatever was rendered before the failure, so a
    caller can still emit an annotated partial script.
    """

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at bytecode offset {offset})"
        super().__init__(message)
        self.offset = offset
        self.partial_lines: list[str] = []


class UnknownOpcodeError(DecompileError):
    def __init__(self, code: int, *, offset: int | None = None) -> None:
        super().__init__(f"Unknown opcode 0x{code:04X}", offset=offset)
        self.code = code


class UnbalancedControlFlowError(DecompileError):
    pass


class UnknownVariableError(DecompileError):
    pass


class MalformedInstructionError(DecompileError):
    pass
