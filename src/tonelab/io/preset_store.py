"""JSON persistence port for user presets."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..config import default_preset_path
from ..core.presets import Preset, load_presets, preset_to_dict
from ..errors import PresetStoreError
from ..utils.jsonio import read_json, write_json
from ..utils.logging import get_logger

_LOGGER = get_logger(__name__)

SCHEMA_VERSION = 1


class PresetStore:
    """Read and write custom presets as ``{"version": 1, "presets": [...]}``.

    The store is invoked by the application after a preset is saved or
    deleted; the edit reducer never touches it.
    """

    def __init__(self, path: Path | None = None, *, backup_dir: Path | None = None) -> None:
        self._path = Path(path) if path is not None else default_preset_path()
        self._backup_dir = Path(backup_dir) if backup_dir is not None else None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Preset]:
        """Return the stored presets; corrupt records are skipped."""

        if not self._path.exists():
            return []
        document = read_json(self._path)
        records = document.get("presets", [])
        if not isinstance(records, list):
            raise PresetStoreError(f"'presets' in {self._path} must be a list")
        presets = load_presets(records)
        _LOGGER.info("Loaded %d of %d presets from %s", len(presets), len(records), self._path)
        return presets

    def save(self, presets: Iterable[Preset]) -> None:
        payload = {
            "version": SCHEMA_VERSION,
            "presets": [preset_to_dict(preset) for preset in presets],
        }
        try:
            write_json(self._path, payload, backup_dir=self._backup_dir)
        except OSError as exc:
            raise PresetStoreError(f"Could not write presets to {self._path}") from exc


__all__ = ["PresetStore", "SCHEMA_VERSION"]
