# app_logic.py
import os

from PyQt6.QtCore import QObject, pyqtSignal

from animation_document import InMemoryDocument
from curve_logic import parse_bezier_text, format_css_cubic_bezier
from data_models import CurveState, GRAPH_CONFIG
from interaction import ValueGraphInteraction, SpeedGraphInteraction
from keyframe_logic import KeyframeFitter
from preset_manager import (
    PresetManager, PresetError, DEFAULT_EASING,
    APPLY_ON_DRAG_KEY, LAST_SELECTED_TAB_KEY
)


class EditorLogic(QObject):
    document_changed = pyqtSignal(str)
    curve_changed = pyqtSignal()
    presets_updated = pyqtSignal()
    active_preset_changed = pyqtSignal(str)
    clipboard_requested = pyqtSignal(str)
    log_requested = pyqtSignal(str)
    error_occurred = pyqtSignal(str, str)

    def __init__(self, store, modifiers=None):
        super().__init__()
        self.store = store
        self.state = CurveState(DEFAULT_EASING)
        self.presets = PresetManager(store)
        self.document = None
        self.current_file_path = None
        self.fitter = KeyframeFitter()
        self.fitter.log_requested.connect(self.log_requested.emit)
        self.apply_on_drag = False
        self.active_preset = None
        self.current_tab = 0
        self.is_initializing_tab = False
        self.value_config = GRAPH_CONFIG
        self.speed_config = GRAPH_CONFIG

        self.value_interaction = ValueGraphInteraction(
            self.state, lambda: self.value_config, modifiers,
            on_update=self.curve_changed.emit, on_drag_end=self.finish_drag)
        self.speed_interaction = SpeedGraphInteraction(
            self.state, lambda: self.speed_config, modifiers,
            on_update=self.curve_changed.emit, on_drag_end=self.finish_drag)

    # --- settings ---

    def load_settings(self):
        """Loads presets and flags from the store. Returns the last selected tab, or None."""
        try:
            self.presets.load()
        except Exception as e:
            self.log_requested.emit(f"Could not load presets from preferences: {e}")
        self.presets_updated.emit()

        self.apply_on_drag = bool(self._read(APPLY_ON_DRAG_KEY, False))
        tab = self._read(LAST_SELECTED_TAB_KEY, None)
        return tab if isinstance(tab, int) else None

    def _read(self, key, default):
        try:
            if self.store.has_key(key):
                value = self.store.get(key)
                return default if value is None else value
        except Exception as e:
            self.log_requested.emit(f"Could not load setting '{key}': {e}")
        return default

    def _persist(self, key, value):
        try:
            self.store.set(key, value)
        except Exception as e:
            self.log_requested.emit(f"Could not save setting '{key}': {e}")

    def _persist_presets(self):
        try:
            self.presets.save()
        except Exception as e:
            self.log_requested.emit(f"Could not save presets to preferences: {e}")

    def set_current_tab(self, index):
        self.current_tab = index
        self.save_tab_preference()

    def save_tab_preference(self):
        if not self.is_initializing_tab:
            self._persist(LAST_SELECTED_TAB_KEY, self.current_tab)

    def toggle_apply_on_drag(self):
        self.apply_on_drag = not self.apply_on_drag
        self._persist(APPLY_ON_DRAG_KEY, self.apply_on_drag)
        self.log_requested.emit(f"Apply when dragging handles {'enabled' if self.apply_on_drag else 'disabled'}.")

    # --- curve ---

    def set_curve(self, curve):
        self.state.set_bezier(curve)
        self.curve_changed.emit()

    def set_curve_from_text(self, text):
        try:
            curve = parse_bezier_text(text)
        except ValueError:
            self.log_requested.emit("Error: Invalid cubic bezier values")
            return False
        self.set_curve(curve)
        self._set_active_preset(None)
        return True

    def _set_active_preset(self, name):
        self.active_preset = name
        self.active_preset_changed.emit(name or "")

    def select_preset(self, name):
        curve = None
        try:
            curve = self.presets.get(name)
        except (ValueError, AttributeError) as e:
            self.log_requested.emit(f"Preset '{name}' is invalid: {e}")
        if curve is None:
            return False
        self.set_curve(curve)
        self._set_active_preset(name)
        self.save_tab_preference()
        return True

    def finish_drag(self):
        self._set_active_preset(None)
        if self.apply_on_drag:
            self.apply_easing()
        self.save_tab_preference()

    # --- keyframes ---

    def apply_easing(self):
        self.fitter.document = self.document
        result = self.fitter.apply_easing(self.state.bezier)
        if result and self.document is not None:
            self.mark_as_dirty()
        return result

    def get_easing(self):
        self.fitter.document = self.document
        result = self.fitter.extract_easing(self.state.bezier)
        if result:
            self.set_curve(result.curve)
        self.save_tab_preference()
        return result

    def set_selection(self, keyframe_ids):
        if self.document is not None:
            self.document.select(keyframe_ids)

    def _copy_keyframe_text(self, builder, label):
        self.fitter.document = self.document
        info = self.fitter.get_keyframe_info()
        if info is None:
            return None
        text = builder(info)
        self.clipboard_requested.emit(text)
        self.log_requested.emit(f"Copied {label}: {text}")
        return text

    def copy_keyframe_duration(self):
        return self._copy_keyframe_text(lambda info: info.duration_text(), "duration")

    def copy_keyframe_values(self):
        return self._copy_keyframe_text(lambda info: info.values_text(), "values")

    def copy_all_keyframe_info(self):
        return self._copy_keyframe_text(lambda info: info.all_info_text(), "all keyframe info")

    def copy_curve_to_clipboard(self):
        text = format_css_cubic_bezier(self.state.bezier)
        self.clipboard_requested.emit(text)
        self.log_requested.emit(f"Copied {text} to clipboard")
        return text

    # --- presets ---

    def _preset_action(self, action, *args):
        try:
            result = action(*args)
        except PresetError as e:
            self.log_requested.emit(str(e))
            return None
        self._persist_presets()
        self.presets_updated.emit()
        return result

    def save_preset(self, name):
        if self._preset_action(self.presets.save_preset, name, self.state.bezier) is None:
            return False
        self.log_requested.emit(f"Saved preset '{name}'.")
        return True

    def rename_preset(self, old_name, new_name):
        if new_name == old_name:
            return None
        renamed = self._preset_action(self.presets.rename_preset, old_name, new_name)
        if renamed is None:
            return None
        self._set_active_preset(renamed)
        self.log_requested.emit(f"Renamed preset '{old_name}' to '{renamed}'.")
        return renamed

    def delete_preset(self, name):
        if self._preset_action(self.presets.delete_preset, name) is None:
            return False
        if self.active_preset == name:
            self._set_active_preset(None)
        self.log_requested.emit(f"Deleted preset '{name}'.")
        return True

    def delete_all_presets(self):
        count = self._preset_action(self.presets.delete_all)
        if count is None:
            return 0
        self._set_active_preset(None)
        self.log_requested.emit(f"Deleted all {count} presets")
        return count

    def import_presets(self, text):
        count = self._preset_action(self.presets.import_json, text)
        if count is None:
            return 0
        self.log_requested.emit(f"Imported {count} preset(s).")
        return count

    def export_presets(self):
        text = self.presets.export_json()
        self.clipboard_requested.emit(text)
        self.log_requested.emit(f"Copied {len(self.presets.presets)} preset(s) to clipboard.")
        return text

    # --- document files ---

    def load_file(self, file_name):
        try:
            document = InMemoryDocument.load(file_name)
        except Exception as e:
            self.error_occurred.emit("Error Loading File", f"Failed to load '{file_name}':\n{e}")
            return False
        self.document = document
        self.current_file_path = file_name
        self.log_requested.emit(f"Loaded: {file_name}")
        self.document_changed.emit(file_name)
        return True

    def mark_as_dirty(self):
        if self.current_file_path and not self.current_file_path.endswith(" *"):
            self.current_file_path += " *"
        elif not self.current_file_path:
            self.current_file_path = "Unsaved File *"
        self.document_changed.emit(os.path.basename(self.current_file_path))

    def save_file(self, file_name):
        if self.document is None:
            self.log_requested.emit("Save cancelled: No data loaded.")
            return False
        clean_path = file_name.replace(" *", "")
        try:
            self.document.save(clean_path)
        except Exception as e:
            self.error_occurred.emit("Save Error", f"Save failed: {e}")
            return False
        self.current_file_path = clean_path
        self.log_requested.emit(f"File saved: {clean_path}")
        self.document_changed.emit(clean_path)
        return True
