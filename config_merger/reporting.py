from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .document import ConfigDocument, IngestRecord
from .files import FileAccessError


def summarize_cli(records: Sequence[IngestRecord], document: ConfigDocument) -> str:
    lines = []
    lines.append("Config Merge Summary")
    lines.append("====================")
    for record in records:
        detail = (
            f"- {record.source}: added {len(record.added)}, "
            f"updated {len(record.updated)}, dropped {len(record.dropped)}"
        )
        if record.first_source:
            detail += f" [first source, {record.passthrough_kept} passthrough line(s)]"
        lines.append(detail)
    lines.append("")
    lines.append(f"Entries: {len(document.entries())} | Lines: {len(document)}")
    return "\n".join(lines)


def write_markdown_report(
    output_path: Path,
    records: Sequence[IngestRecord],
    document: ConfigDocument,
    target: Path | None = None,
) -> None:
    lines = ["# Config Merge Report", ""]
    if target is not None:
        lines.append(f"Target: `{target}`")
        lines.append("")

    lines.append("## Sources")
    lines.append("")
    for record in records:
        label = " (first source)" if record.first_source else ""
        lines.append(f"- **{record.source}**{label}")
        if record.added:
            lines.append(f"  - Added: {', '.join(f'`{k}`' for k in record.added)}")
        if record.updated:
            lines.append(f"  - Updated: {', '.join(f'`{k}`' for k in record.updated)}")
        if record.dropped:
            lines.append(f"  - Dropped: {', '.join(f'`{k}`' for k in record.dropped)}")
        if record.passthrough_kept or record.passthrough_discarded:
            lines.append(
                f"  - Passthrough lines: kept {record.passthrough_kept}, "
                f"discarded {record.passthrough_discarded}"
            )
        lines.append("")

    lines.append("## Keys")
    lines.append("")
    for entry in document.entries():
        quoted = " (quoted)" if entry.needs_quotes else ""
        lines.append(f"- `{entry.key}`{quoted}")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text("\n".join(lines).rstrip() + "\n", encoding="utf-8")
    except OSError as exc:
        raise FileAccessError(f"Failed to write report {output_path}: {exc}") from exc
    logging.info("Wrote report to %s", output_path)
