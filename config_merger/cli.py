from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Sequence

from .document import ConfigMerger, IngestRecord
from .files import (
    ArgumentError,
    ConfigMergerError,
    resolve_path,
    target_exists,
    write_document,
)
from .reporting import summarize_cli, write_markdown_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="config-merger",
        description=(
            "Merge KEY=VALUE config files and explicit variables into a target file. "
            "An existing target file is read first and becomes the base layer."
        ),
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "target_file",
        type=Path,
        help="Output file path (relative paths resolve against the working directory).",
    )
    parser.add_argument(
        "--file",
        dest="files",
        action="append",
        default=[],
        type=Path,
        help="Source config file (repeatable, applied in order).",
    )
    parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        help="Config variable name (repeatable, paired with --val).",
    )
    parser.add_argument(
        "--val",
        dest="values",
        action="append",
        default=[],
        help="Config variable value (repeatable, paired with --var).",
    )
    parser.add_argument(
        "--first-file-variables-only",
        action="store_true",
        help=(
            "Drop keys that do not appear in the first source. Note that an existing "
            "target file counts as the first source."
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the merged document instead of writing the target file.",
    )
    parser.add_argument(
        "--report",
        type=Path,
        help="Write a markdown merge report to this path.",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def validate_arguments(args: argparse.Namespace) -> None:
    if not args.files and not args.variables:
        raise ArgumentError("At least one config file or config variable should be specified")
    if len(args.variables) != len(args.values):
        raise ArgumentError(
            f"Got {len(args.variables)} --var option(s) but {len(args.values)} --val option(s)"
        )


def run(args: argparse.Namespace) -> int:
    configure_logging(args.verbose)
    logging.debug("Arguments: %s", args)

    validate_arguments(args)

    target = resolve_path(args.target_file)
    logging.info("Target file: %s", target)

    merger = ConfigMerger(first_file_variables_only=args.first_file_variables_only)
    records: List[IngestRecord] = []

    if target_exists(target):
        records.append(merger.ingest_file(target))
    for path in args.files:
        records.append(merger.ingest_file(path))
    if args.variables:
        records.append(merger.apply_variables(args.variables, args.values))

    logging.info("\n%s", summarize_cli(records, merger.document))
    text = merger.render()

    if args.dry_run:
        logging.info("Dry run: %s not written.", target)
        print(text)
    else:
        write_document(target, text)
        print(f"Config file {target} generated ({len(merger.document.entries())} entries).")

    if args.report:
        write_markdown_report(resolve_path(args.report), records, merger.document, target=target)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except ConfigMergerError as exc:
        logging.error("%s", exc)
        return 2
    except KeyboardInterrupt:
        logging.error("Interrupted")
        return 130


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
