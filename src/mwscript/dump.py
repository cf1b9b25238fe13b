"""Dump every script in a plugin as source text.

decompile_archive() walks one plugin and hands each script to a sink;
dump_scripts() is the filesystem front end that writes one file per script.

Stream errors (a broken record header, trailing junk) propagate: nothing
after them can be trusted. Record and decompile errors only cost the one
script and are counted in the returned DumpReport.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from mwscript.errors import DecompileError, RecordError
from mwscript.models.records import ArchiveHeader
from mwscript.models.script import DecompiledScript
from mwscript.decompiler.decompiler import declarations, decompile
from mwscript.parser.binary_reader import TEXT_ENCODING
from mwscript.parser.header_parser import read_archive_header
from mwscript.parser.record_reader import iter_records_of_type
from mwscript.parser.script_parser import SCRIPT_TAG, parse_script

log = logging.getLogger(__name__)

ScriptSink = Callable[[str, list[str]], None]

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass(slots=True)
class DumpConfig:
    """Output options for a dump run."""

    extension: str = ".txt"
    annotate_failures: bool = True   # emit partial output + error comment on decompile errors
    framed: bool = True              # Begin/End and local declarations around the body
    original_text: bool = False      # also write the SCTX source next to each script


@dataclass(slots=True)
class ScriptFailure:
    name: str            # script name, or "<record at N>" when SCHD was unreadable
    offset: int          # file offset of the SCPT record
    error: Exception


@dataclass(slots=True)
class DumpReport:
    header: ArchiveHeader
    scripts: list[DecompiledScript] = field(default_factory=list)
    failures: list[ScriptFailure] = field(default_factory=list)
    records_seen: int = 0


def _lines_for(script: DecompiledScript, config: DumpConfig) -> list[str]:
    return script.text(framed=config.framed).splitlines()


def _annotated_lines(name: str, decls: list[str], exc: DecompileError,
                     config: DumpConfig) -> list[str]:
    partial = DecompiledScript(name=name, source_lines=list(exc.partial_lines),
                               declarations=decls)
    lines = _lines_for(partial, config)
    note = f"; decompile error: {exc}"
    if config.framed:
        # Keep the note inside the Begin/End frame, just above End.
        lines.insert(len(lines) - 1, note)
    else:
        lines.append(note)
    return lines


def decompile_archive(
    data: bytes,
    sink: ScriptSink,
    config: DumpConfig | None = None,
) -> DumpReport:
    """Decompile every SCPT record of *data*, sending (name, lines) to *sink*."""
    config = config or DumpConfig()
    report = DumpReport(header=read_archive_header(data))

    for record in iter_records_of_type(data, SCRIPT_TAG):
        report.records_seen += 1
        if record.header.is_deleted:
            log.debug("Skipping deleted SCPT record at offset %d", record.offset)
            continue
        try:
            script = parse_script(record)
        except RecordError as exc:
            log.warning("Skipping SCPT record at offset %d: %s", record.offset, exc)
            report.failures.append(
                ScriptFailure(f"<record at {record.offset}>", record.offset, exc)
            )
            continue

        try:
            result = decompile(script)
        except DecompileError as exc:
            log.warning("Failed to decompile script '%s': %s", script.name, exc)
            report.failures.append(ScriptFailure(script.name, record.offset, exc))
            if config.annotate_failures:
                sink(script.name, _annotated_lines(script.name, declarations(script), exc, config))
            continue

        report.scripts.append(result)
        sink(result.name, _lines_for(result, config))
        if config.original_text and result.original_text is not None:
            sink(f"{result.name}.orig", result.original_text.splitlines())

    log.debug(
        "%d SCPT records, %d decompiled, %d failed",
        report.records_seen, len(report.scripts), len(report.failures),
    )
    return report


def safe_filename(name: str) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name).strip(" .")
    return cleaned or "unnamed"


class DirectorySink:
    """Writes each script to <directory>/<name><extension>.

    Names are unique per plugin only by convention, so a repeat (compared
    case-insensitively, as on Windows) gets a numeric suffix.
    """

    def __init__(self, directory: Path, extension: str = ".txt") -> None:
        self.directory = directory
        self.extension = extension
        self.written: list[Path] = []
        self._taken: set[str] = set()

    def path_for(self, name: str) -> Path:
        stem = safe_filename(name)
        candidate = stem
        n = 2
        while candidate.lower() in self._taken:
            candidate = f"{stem}_{n}"
            n += 1
        self._taken.add(candidate.lower())
        return self.directory / f"{candidate}{self.extension}"

    def write(self, path: Path, lines: list[str]) -> None:
        text = "\n".join(lines) + "\n" if lines else ""
        path.write_text(text, encoding=TEXT_ENCODING, errors="replace")
        self.written.append(path)

    def __call__(self, name: str, lines: list[str]) -> None:
        self.write(self.path_for(name), lines)


def dump_scripts(
    input_path: Path,
    output_dir: Path | None = None,
    config: DumpConfig | None = None,
) -> DumpReport:
    """Decompile *input_path* into a directory of text files.

    The directory defaults to the plugin's stem next to the plugin, or
    <name>_scripts when the plugin has no suffix.
    """
    config = config or DumpConfig()
    if output_dir is None:
        output_dir = input_path.with_suffix("")
        if output_dir == input_path:
            output_dir = input_path.parent / f"{input_path.name}_scripts"
    output_dir.mkdir(parents=True, exist_ok=True)

    sink = DirectorySink(output_dir, config.extension)
    report = decompile_archive(input_path.read_bytes(), sink, config)

    log.info("Wrote %d files to %s", len(sink.written), output_dir)
    return report
