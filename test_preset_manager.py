# test_preset_manager.py
import json

import pytest

from data_models import BezierCurve
from preset_manager import PresetManager, PresetError, DEFAULT_PRESETS, PRESETS_KEY


class FakeStore:
    """Słownik udający SettingsStore."""
    def __init__(self, values=None):
        self.values = dict(values or {})

    def has_key(self, key): return key in self.values
    def get(self, key, default=None): return self.values.get(key, default)
    def set(self, key, value): self.values[key] = value


@pytest.fixture
def manager():
    """Zwraca menedżera z domyślnymi presetami i pustym magazynem ustawień."""
    return PresetManager(FakeStore())


class TestPresetManager:
    def test_defaults(self, manager):
        assert len(manager.presets) == len(DEFAULT_PRESETS) == 10
        assert manager.get("cubic-out") == BezierCurve(0.215, 0.61, 0.355, 1)
        assert manager.get("missing") is None

    def test_defaults_are_not_shared(self, manager):
        manager.presets["cubic-in"]["x1"] = 0.0
        assert DEFAULT_PRESETS["cubic-in"]["x1"] == 0.55

    def test_sorted_names_ignore_case(self, manager):
        manager.save_preset("Bounce", BezierCurve(0.1, 0.2, 0.3, 0.4))
        names = manager.sorted_names()
        assert names.index("Bounce") < names.index("cubic-in")

    def test_save_preset_validates_name(self, manager):
        with pytest.raises(PresetError, match="empty"):
            manager.save_preset("   ", BezierCurve(0, 0, 1, 1))
        with pytest.raises(PresetError, match="too long"):
            manager.save_preset("x" * 31, BezierCurve(0, 0, 1, 1))
        assert manager.save_preset("x" * 30, BezierCurve(0, 0, 1, 1)) == "x" * 30

    def test_save_overwrites(self, manager):
        manager.save_preset("cubic-in", BezierCurve(0.1, 0.1, 0.9, 0.9))
        assert manager.get("cubic-in") == BezierCurve(0.1, 0.1, 0.9, 0.9)

    def test_rename(self, manager):
        assert manager.rename_preset("cubic-in", "soft") == "soft"
        assert "cubic-in" not in manager.presets
        assert manager.get("soft") == BezierCurve(0.55, 0.055, 0.675, 0.19)
        with pytest.raises(PresetError, match="already exists"):
            manager.rename_preset("soft", "cubic-out")
        with pytest.raises(PresetError):
            manager.rename_preset("missing", "other")

    def test_rename_to_same_name_is_noop(self, manager):
        before = dict(manager.presets)
        assert manager.rename_preset("cubic-in", "cubic-in") is None
        assert manager.presets == before

    def test_delete(self, manager):
        assert manager.delete_preset("expo-in") == "expo-in"
        with pytest.raises(PresetError):
            manager.delete_preset("expo-in")

    def test_delete_all(self, manager):
        assert manager.delete_all() == 10
        with pytest.raises(PresetError, match="No presets"):
            manager.delete_all()

    def test_export_import(self, manager):
        exported = manager.export_json()
        other = PresetManager(FakeStore())
        other.delete_all()
        assert other.import_json(exported) == 10
        assert other.presets == json.loads(exported)

    def test_import_is_all_or_nothing(self, manager):
        text = json.dumps({"good": {"x1": 0.1, "y1": 0, "x2": 0.9, "y2": 1}, "bad": {"x1": "no"}})
        with pytest.raises(PresetError, match="'bad'"):
            manager.import_json(text)
        assert "good" not in manager.presets

    @pytest.mark.parametrize("text", ["", "not json", "[1, 2]", '{"a": 5}'])
    def test_import_rejects(self, manager, text):
        with pytest.raises(PresetError):
            manager.import_json(text)

    def test_save_and_load(self):
        store = FakeStore()
        manager = PresetManager(store)
        manager.delete_all()
        manager.save_preset("mine", BezierCurve(0.2, 0.0, 0.8, 1.0))
        manager.save()
        assert store.values[PRESETS_KEY] == {"mine": {"x1": 0.2, "y1": 0.0, "x2": 0.8, "y2": 1.0}}

        reloaded = PresetManager(store)
        assert reloaded.load()
        assert reloaded.sorted_names() == ["mine"]

    def test_load_without_stored_presets(self, manager):
        assert manager.load() is False
        assert len(manager.presets) == 10

    def test_load_rejects_non_mapping(self):
        manager = PresetManager(FakeStore({PRESETS_KEY: [1, 2, 3]}))
        with pytest.raises(PresetError):
            manager.load()
