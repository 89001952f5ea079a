# preset_manager.py
import copy
import json

from PyQt6.QtCore import QSettings

from data_models import BezierCurve

MAX_PRESET_NAME_LENGTH = 30

PRESETS_KEY = "presets"
APPLY_ON_DRAG_KEY = "apply_on_drag"
LAST_SELECTED_TAB_KEY = "last_selected_tab"

DEFAULT_EASING = BezierCurve(0.5, 0.0, 0.0, 1.0)

DEFAULT_PRESETS = {
    "cubic-in": {"x1": 0.55, "y1": 0.055, "x2": 0.675, "y2": 0.19},
    "cubic-out": {"x1": 0.215, "y1": 0.61, "x2": 0.355, "y2": 1},
    "cubic-in-out": {"x1": 0.645, "y1": 0.045, "x2": 0.355, "y2": 1},
    "quart-in": {"x1": 0.895, "y1": 0.03, "x2": 0.685, "y2": 0.22},
    "quart-out": {"x1": 0.165, "y1": 0.84, "x2": 0.44, "y2": 1},
    "quart-in-out": {"x1": 0.77, "y1": 0, "x2": 0.175, "y2": 1},
    "quint-in": {"x1": 0.755, "y1": 0.05, "x2": 0.855, "y2": 0.06},
    "quint-out": {"x1": 0.23, "y1": 1, "x2": 0.32, "y2": 1},
    "quint-in-out": {"x1": 0.86, "y1": 0, "x2": 0.07, "y2": 1},
    "expo-in": {"x1": 0.95, "y1": 0.05, "x2": 0.795, "y2": 0.035},
}


class PresetError(Exception):
    """Raised when a preset operation is rejected."""
    pass


class SettingsStore:
    """Named JSON values kept in QSettings."""
    def __init__(self, settings=None):
        self.settings = settings if settings is not None else QSettings("EaselineTools", "EaselineEditor")

    def has_key(self, key):
        return self.settings.contains(key)

    def get(self, key, default=None):
        raw = self.settings.value(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key, value):
        self.settings.setValue(key, json.dumps(value))


class PresetManager:
    """Flat name -> curve mapping of saved presets."""
    def __init__(self, store):
        self.store = store
        self.presets = copy.deepcopy(DEFAULT_PRESETS)

    def load(self):
        """Replaces the current presets with the stored ones, if any were stored."""
        if not self.store.has_key(PRESETS_KEY):
            return False
        saved = self.store.get(PRESETS_KEY)
        if saved is None:
            return False
        if not isinstance(saved, dict):
            raise PresetError("Stored presets are not a name -> curve mapping")
        self.presets.clear()
        self.presets.update(saved)
        return True

    def save(self):
        self.store.set(PRESETS_KEY, self.presets)

    def get(self, name):
        data = self.presets.get(name)
        return BezierCurve.from_dict(data) if data is not None else None

    def sorted_names(self):
        return sorted(self.presets, key=str.lower)

    @staticmethod
    def _check_name(name):
        if not name or not name.strip():
            raise PresetError("Preset name cannot be empty.")
        if len(name) > MAX_PRESET_NAME_LENGTH:
            raise PresetError(f"Preset name too long. Please use {MAX_PRESET_NAME_LENGTH} characters or less.")

    def save_preset(self, name, curve):
        self._check_name(name)
        self.presets[name] = curve.to_dict()
        return name

    def rename_preset(self, old_name, new_name):
        if old_name not in self.presets:
            raise PresetError("Please select a preset to rename")
        self._check_name(new_name)
        if new_name == old_name:
            return None
        if new_name in self.presets:
            raise PresetError("A preset with that name already exists")
        self.presets[new_name] = self.presets.pop(old_name)
        return new_name

    def delete_preset(self, name):
        if name not in self.presets:
            raise PresetError("Please select a preset to delete")
        del self.presets[name]
        return name

    def delete_all(self):
        count = len(self.presets)
        if count == 0:
            raise PresetError("No presets to delete")
        self.presets.clear()
        return count

    def export_json(self):
        return json.dumps(self.presets, indent=2)

    def import_json(self, text):
        """Merges presets from JSON text, overwriting same-named ones. Nothing is merged if any entry is invalid."""
        if not text or not text.strip():
            raise PresetError("No content in clipboard")
        try:
            imported = json.loads(text)
        except json.JSONDecodeError:
            raise PresetError("Clipboard content is not valid JSON")
        if not isinstance(imported, dict):
            raise PresetError("Clipboard content is not a valid presets object")

        validated = {}
        for name, data in imported.items():
            if not isinstance(data, dict):
                raise PresetError(f"Preset '{name}' is not a curve")
            try:
                validated[name] = BezierCurve.from_dict(data).to_dict()
            except ValueError as e:
                raise PresetError(f"Preset '{name}' is invalid: {e}")
        self.presets.update(validated)
        return len(validated)
