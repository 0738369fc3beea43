from __future__ import annotations

import logging
import os
from pathlib import Path


class ConfigMergerError(Exception):
    """Base exception for configuration merge errors."""


class ArgumentError(ConfigMergerError):
    """Insufficient or mismatched command-line inputs."""


class NotFoundError(ConfigMergerError):
    """A source file does not exist at ingestion time."""


class FileAccessError(ConfigMergerError):
    """Reading a source or writing the target failed."""


def resolve_path(path: Path | str) -> Path:
    path = Path(path).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def target_exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError as exc:
        raise FileAccessError(f"Failed to check {path}: {exc}") from exc


def read_lines(path: Path) -> list[str]:
    try:
        if not path.exists():
            raise NotFoundError(f'File "{path}" does not exist')
        with path.open("r", encoding="utf-8", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise FileAccessError(f"Failed to read {path}: {exc}") from exc
    return text.split(os.linesep)


def write_document(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
    except OSError as exc:
        raise FileAccessError(f"Failed to write {path}: {exc}") from exc
    logging.info("Wrote %s", path)
