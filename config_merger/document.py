"""
In-memory model of a merged ``KEY=VALUE`` configuration file.

A document is an ordered list of lines. Each line is either a verbatim
``Passthrough`` (comments, blanks, rows without ``=``) or an ``Entry``. Entry
positions are fixed by the first time a key is seen; later writers only
replace the value.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Literal, Sequence, Union, cast

from .files import read_lines, resolve_path

QUOTE_CHARS = "\"'"
QUOTE_TRIGGERS = (" ", "${")

SetOutcome = Literal["added", "updated", "dropped"]


@dataclass
class Passthrough:
    text: str

    def render(self) -> str:
        return self.text


@dataclass
class Entry:
    key: str
    value: str

    @classmethod
    def parse(cls, raw_key: str, raw_value: str) -> Entry:
        return cls(key=normalize_key(raw_key), value=normalize_value(raw_value))

    @property
    def needs_quotes(self) -> bool:
        if "password" in self.key:
            return True
        return any(trigger in self.value for trigger in QUOTE_TRIGGERS)

    def render(self) -> str:
        if self.needs_quotes:
            return f'{self.key}="{self.value}"'
        return f"{self.key}={self.value}"


Line = Union[Passthrough, Entry]


def normalize_key(raw_key: str) -> str:
    return raw_key.strip()


def normalize_value(raw_value: str) -> str:
    # Quote characters are stripped independently, so 'abc" becomes abc.
    return raw_value.strip().strip(QUOTE_CHARS)


@dataclass
class IngestRecord:
    """What a single source contributed to the document."""

    source: str
    first_source: bool
    added: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    passthrough_kept: int = 0
    passthrough_discarded: int = 0

    def record(self, key: str, outcome: SetOutcome) -> None:
        getattr(self, outcome).append(key)


class ConfigDocument:
    def __init__(self) -> None:
        self.lines: List[Line] = []
        self.initialized = False
        self._positions: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self.lines)

    def initialize(self) -> None:
        self.initialized = True

    def append(self, line: Line) -> None:
        if isinstance(line, Entry):
            if line.key in self._positions:
                raise ValueError(f"Duplicate key appended to document: {line.key}")
            self._positions[line.key] = len(self.lines)
        self.lines.append(line)

    def lookup(self, key: str) -> Entry | None:
        position = self._positions.get(key)
        if position is None:
            return None
        return cast(Entry, self.lines[position])

    def entries(self) -> List[Entry]:
        return [line for line in self.lines if isinstance(line, Entry)]

    def render(self) -> str:
        return os.linesep.join(line.render() for line in self.lines)


class ConfigMerger:
    """Accumulates layered configuration sources into one document.

    The first ingestion of a run (file or variable) initializes the document.
    Only the first ingested file contributes passthrough lines. With
    ``first_file_variables_only`` enabled, keys that are new after the first
    source are dropped instead of appended.
    """

    def __init__(self, *, first_file_variables_only: bool = False) -> None:
        self.first_file_variables_only = first_file_variables_only
        self.document = ConfigDocument()

    def ingest_file(self, path: Path | str) -> IngestRecord:
        path = resolve_path(path)
        rows = read_lines(path)

        is_first_source = not self.document.initialized
        self.document.initialize()
        record = IngestRecord(source=str(path), first_source=is_first_source)
        logging.info(
            "Ingesting %s%s", path, " (first source)" if is_first_source else ""
        )

        for row in rows:
            if "=" not in row:
                if is_first_source:
                    self.document.append(Passthrough(row))
                    record.passthrough_kept += 1
                else:
                    record.passthrough_discarded += 1
                continue
            raw_key, raw_value = row.split("=", 1)
            outcome = self.set_variable(raw_key, raw_value, is_first_source=is_first_source)
            record.record(normalize_key(raw_key), outcome)
        return record

    def set_variable(
        self,
        raw_key: str,
        raw_value: str,
        is_first_source: bool = False,
    ) -> SetOutcome:
        entry = Entry.parse(raw_key, raw_value)

        if not self.document.initialized:
            self.document.initialize()
            self.document.append(entry)
            logging.debug("Seeded document with %s", entry.key)
            return "added"

        existing = self.document.lookup(entry.key)
        if existing is not None:
            existing.value = entry.value
            logging.debug("Updated %s", entry.key)
            return "updated"

        if self.first_file_variables_only and not is_first_source:
            logging.debug("Dropped new key %s (first-file-variables-only)", entry.key)
            return "dropped"

        self.document.append(entry)
        logging.debug("Added %s", entry.key)
        return "added"

    def apply_variables(
        self, names: Sequence[str], values: Sequence[str]
    ) -> IngestRecord:
        record = IngestRecord(source="--var", first_source=False)
        for name, value in zip(names, values):
            outcome = self.set_variable(name, value)
            record.record(normalize_key(name), outcome)
        return record

    def render(self) -> str:
        return self.document.render()
