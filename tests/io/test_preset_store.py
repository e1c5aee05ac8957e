import json
from dataclasses import replace

import pytest

from tonelab.core.adjustments import IDENTITY_ADJUSTMENTS
from tonelab.core.presets import Preset, preset_to_dict
from tonelab.errors import PresetStoreError
from tonelab.io.preset_store import SCHEMA_VERSION, PresetStore


def _preset(preset_id: str) -> Preset:
    return Preset(preset_id, preset_id.title(), replace(IDENTITY_ADJUSTMENTS, shadows=15.0))


def test_save_then_load(tmp_path) -> None:
    store = PresetStore(tmp_path / "nested" / "presets.json")
    presets = [_preset("dusk"), _preset("dawn")]

    store.save(presets)

    document = json.loads(store.path.read_text(encoding="utf-8"))
    assert document["version"] == SCHEMA_VERSION
    assert store.load() == presets
    assert not store.path.with_suffix(".json.tmp").exists()


def test_missing_file_loads_nothing(tmp_path) -> None:
    assert PresetStore(tmp_path / "absent.json").load() == []


def test_corrupt_record_is_skipped(tmp_path) -> None:
    path = tmp_path / "presets.json"
    path.write_text(
        json.dumps(
            {
                "version": 1,
                "presets": [
                    {"id": "bad", "name": "Bad", "adjustments": {"exposure": "x"}},
                    preset_to_dict(_preset("good")),
                ],
            }
        ),
        encoding="utf-8",
    )

    assert [preset.id for preset in PresetStore(path).load()] == ["good"]


@pytest.mark.parametrize(
    "content",
    [b"{not json", b"[]", b'{"presets": {}}', b'{"presets": [\xff\xfe]}'],
)
def test_unreadable_document_raises(tmp_path, content: bytes) -> None:
    path = tmp_path / "presets.json"
    path.write_bytes(content)

    with pytest.raises(PresetStoreError):
        PresetStore(path).load()


def test_default_path_honours_environment(tmp_path, monkeypatch) -> None:
    target = tmp_path / "elsewhere.json"
    monkeypatch.setenv("TONELAB_PRESETS", str(target))

    assert PresetStore().path == target


def test_save_keeps_backup_of_previous_file(tmp_path) -> None:
    store = PresetStore(tmp_path / "presets.json", backup_dir=tmp_path / "backups")
    store.save([_preset("first")])

    store.save([_preset("second")])

    (backup,) = (tmp_path / "backups").iterdir()
    assert "first" in backup.read_text(encoding="utf-8")
    assert [preset.id for preset in store.load()] == ["second"]


def test_directory_in_place_of_file_raises(tmp_path) -> None:
    path = tmp_path / "presets.json"
    path.mkdir()

    with pytest.raises(PresetStoreError):
        PresetStore(path).load()


def test_number_too_large_for_float_skips_only_that_record(tmp_path) -> None:
    path = tmp_path / "presets.json"
    huge = "1" + "0" * 400
    good = json.dumps(preset_to_dict(_preset("good")))
    path.write_text(
        '{"version": 1, "presets": ['
        f'{{"id": "huge", "name": "Huge", "adjustments": {{"exposure": {huge}}}}}, {good}'
        "]}",
        encoding="utf-8",
    )

    assert [preset.id for preset in PresetStore(path).load()] == ["good"]
