"""JSON document helpers: validated reads, atomic replacement, rotating backups."""

from __future__ import annotations

import json
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import PresetStoreError

REPLACE_ATTEMPTS = 5
"""How often a locked destination is retried before the write gives up."""

DEFAULT_BACKUP_COUNT = 5


def read_json(path: Path) -> dict[str, Any]:
    """Return the JSON object stored at *path*.

    Missing files, malformed JSON and documents whose top level is not an
    object all raise :class:`PresetStoreError`.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise PresetStoreError(f"JSON file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise PresetStoreError(f"Could not read {path}: {exc}") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PresetStoreError(f"Invalid JSON data in {path}: {exc.msg}") from exc
    if not isinstance(document, dict):
        raise PresetStoreError(f"Expected a JSON object in {path}, got {type(document).__name__}")
    return document


def _replace_with_retry(source: Path, destination: Path) -> None:
    # Windows refuses the rename while a scanner or indexer has the target open.
    for attempt in range(1, REPLACE_ATTEMPTS + 1):
        try:
            os.replace(source, destination)
            return
        except PermissionError:
            if attempt == REPLACE_ATTEMPTS:
                source.unlink(missing_ok=True)
                raise
            time.sleep(0.05 * attempt)


def atomic_write_text(path: Path, data: str) -> None:
    """Write *data* to a sibling temporary file and swap it into *path*."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    _replace_with_retry(tmp_path, path)


def _write_backup(path: Path, backup_dir: Path, keep: int) -> None:
    """Copy the current *path* into *backup_dir*, keeping the newest *keep* copies."""

    if not path.exists():
        return
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    (backup_dir / f"{path.stem}-{stamp}{path.suffix}").write_bytes(path.read_bytes())

    backups = sorted(backup_dir.glob(f"{path.stem}-*{path.suffix}"))
    for stale in backups[: max(0, len(backups) - keep)]:
        stale.unlink(missing_ok=True)


def write_json(
    path: Path,
    data: dict[str, Any],
    *,
    backup_dir: Path | None = None,
    keep_backups: int = DEFAULT_BACKUP_COUNT,
) -> None:
    """Serialise *data* into *path* atomically.

    When *backup_dir* is given the previous document is copied there first and
    only the newest ``keep_backups`` copies are retained.
    """

    if backup_dir is not None:
        _write_backup(path, backup_dir, keep_backups)
    payload = json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n"
    atomic_write_text(path, payload)
