"""Decompile every script in a Morrowind plugin.

Usage:
    python -m scripts.dump_scripts PLUGIN [--out DIR] [--stdout] [--skip-failures]
                                          [--body-only] [--original-text] [--verbose]
"""

import argparse
import logging
from pathlib import Path

from mwscript.dump import DumpConfig, decompile_archive, dump_scripts
from mwscript.errors import StreamError


def _print_sink(name: str, lines: list[str]) -> None:
    print(f"; ---- {name} ----")
    for line in lines:
        print(line)
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dump decompiled scripts from a TES3 plugin")
    parser.add_argument("plugin", type=Path, help="Path to the .esp/.esm file")
    parser.add_argument("--out", type=Path, default=None,
                        help="Output directory (default: plugin name next to the plugin)")
    parser.add_argument("--stdout", action="store_true",
                        help="Print scripts instead of writing files")
    parser.add_argument("--skip-failures", action="store_true",
                        help="Don't emit partial output for scripts that fail to decompile")
    parser.add_argument("--body-only", action="store_true",
                        help="Omit Begin/End and variable declarations")
    parser.add_argument("--original-text", action="store_true",
                        help="Also emit the source text stored in the plugin, if any")
    parser.add_argument("--ext", default=".txt", help="Output file extension")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-script detail")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.plugin.exists():
        print(f"Error: {args.plugin} not found")
        return 1

    config = DumpConfig(
        extension=args.ext,
        annotate_failures=not args.skip_failures,
        framed=not args.body_only,
        original_text=args.original_text,
    )
    try:
        if args.stdout:
            report = decompile_archive(args.plugin.read_bytes(), _print_sink, config)
        else:
            report = dump_scripts(args.plugin, args.out, config)
    except StreamError as exc:
        print(f"Error: {args.plugin.name} is not a readable plugin: {exc}")
        return 1

    if report.header.masters:
        print("Masters: " + ", ".join(m.name for m in report.header.masters))
    print(f"Scripts: {len(report.scripts)} decompiled, {len(report.failures)} failed")
    for failure in report.failures:
        print(f"  - {failure.name}: {failure.error}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
