# keyframe_logic.py
import re

from PyQt6.QtCore import QObject, pyqtSignal

from animation_document import INTERPOLATION_BEZIER
from curve_logic import bezier_to_host_handles, host_handles_to_bezier, frames_to_milliseconds
from data_models import AttributePath, BezierCurve, FitResult, GroupResult, KeyframeGroup

# A lone keyframe has no neighbour to take a span from.
SINGLE_KEYFRAME_FRAME_SPAN = 30
SINGLE_KEYFRAME_VALUE_SPAN = 100
VALUE_MATCH_TOLERANCE = 0.1


class KeyframeInfo:
    """Summary of exactly two selected keyframes, used for the clipboard actions."""
    def __init__(self, easing, duration_ms, frame_duration, property_name, start_value, end_value, frame_rate):
        self.easing = easing
        self.duration_ms = duration_ms
        self.frame_duration = frame_duration
        self.property_name = property_name
        self.start_value = start_value
        self.end_value = end_value
        self.frame_rate = frame_rate

    def duration_text(self):
        return f"{self.property_name}: {self.duration_ms}ms ({_format_number(self.frame_duration)} frames @ {_format_number(self.frame_rate)}fps)"

    def values_text(self):
        return f"{self.property_name} {self.start_value} > {self.end_value}"

    def all_info_text(self):
        return (f"{self.property_name}\n{self.start_value} > {self.end_value}\n"
                f"cubic-bezier({self.easing})\nDuration: {self.duration_ms}ms\n")


def _format_number(value):
    value = round(value, 2)
    return str(int(value)) if value == int(value) else str(value)


def _pretty_property_name(attr_id):
    name = attr_id[:1].upper() + attr_id[1:]
    return re.sub(r"([A-Z])", r" \1", name).strip()


class KeyframeFitter(QObject):
    """Reads an easing out of selected keyframes and writes one back into them."""
    log_requested = pyqtSignal(str)

    def __init__(self, document=None):
        super().__init__()
        self.document = document

    # --- helpers ---

    def _sample(self, path, frame):
        self.document.set_current_frame(frame)
        return self.document.get_value_at(path.layer_id, path.attr_id, frame)

    def _collect_groups(self, selected_keyframes, keyframe_ids):
        groups = []
        for full_path, frames in selected_keyframes.items():
            if len(frames) < 2: continue
            try:
                path = AttributePath.parse(full_path)
                group_ids = [k for k in keyframe_ids if self.document.get_attribute_from_keyframe_id(k) == full_path]
                group_ids.sort(key=self.document.get_keyframe_frame)
            except Exception as e:
                self.log_requested.emit(f"Skipping attribute '{full_path}': {e}")
                continue
            if len(group_ids) >= 2:
                groups.append(KeyframeGroup(path, group_ids, frames))
        return groups

    def _oriented_tangents(self, first_id, second_id, first_value):
        first_data = self.document.get_keyframe_tangent_data(first_id)
        second_data = self.document.get_keyframe_tangent_data(second_id)
        if first_data.value is None or abs(first_data.value - first_value) < VALUE_MATCH_TOLERANCE:
            return first_data, second_data
        return second_data, first_data

    def _read_selection(self):
        if self.document is None:
            raise ValueError("No animation document is open")
        return self.document.get_selected_keyframe_ids(), self.document.get_selected_keyframes()

    # --- extraction ---

    def extract_easing(self, current_curve):
        """Returns a FitResult carrying the averaged curve of the selected keyframe pairs."""
        try:
            keyframe_ids, selected = self._read_selection()
            if len(keyframe_ids) < 1:
                return self._fail("Please select at least 1 keyframe")
            if len(keyframe_ids) == 1:
                return self._extract_single(keyframe_ids[0], current_curve)

            groups = self._collect_groups(selected, keyframe_ids)
            if not groups:
                return self._fail("No valid attribute groups found with 2+ keyframes")
            return self._extract_groups(groups)
        except Exception as e:
            return self._fail(f"Error: {e}")

    def _extract_single(self, keyframe_id, current_curve):
        path = AttributePath.parse(self.document.get_attribute_from_keyframe_id(keyframe_id))
        data = self.document.get_keyframe_tangent_data(keyframe_id)
        if data.right_handle is None:
            self.log_requested.emit("Single keyframe has no bezier handles - keeping current curve")
            return FitResult(True, current_curve.copy())

        out_x, out_y = data.right_handle
        curve = host_handles_to_bezier(out_x, out_y, -out_x, -out_y, SINGLE_KEYFRAME_FRAME_SPAN, SINGLE_KEYFRAME_VALUE_SPAN)
        self.log_requested.emit("Extracted easing from single keyframe's handles")
        return FitResult(True, curve, [GroupResult(path.full_path, pairs_processed=1)])

    def _extract_groups(self, groups):
        totals, pair_count, results = [0.0, 0.0, 0.0, 0.0], 0, []
        original_frame = self.document.get_current_frame()
        try:
            for group in groups:
                result = GroupResult(group.path.full_path)
                for first_id, second_id, first_frame, second_frame in group.pairs():
                    frame_diff = second_frame - first_frame
                    if frame_diff <= 0: continue
                    try:
                        curve = self._extract_pair(group.path, first_id, second_id, first_frame, second_frame)
                    except Exception as e:
                        result.pairs_failed += 1
                        self.log_requested.emit(f"Error reading keyframes of '{group.path.full_path}' at {first_frame}-{second_frame}: {e}")
                        continue
                    totals = [t + v for t, v in zip(totals, curve.as_tuple())]
                    pair_count += 1
                    result.pairs_processed += 1
                results.append(result)
        finally:
            self.document.set_current_frame(original_frame)

        if pair_count == 0:
            return self._fail("Could not extract easing data from any keyframe pairs", results)
        if pair_count > 1:
            self.log_requested.emit(f"Averaged easing from {pair_count} keyframe pairs")
        return FitResult(True, BezierCurve(*[t / pair_count for t in totals]), results)

    def _extract_pair(self, path, first_id, second_id, first_frame, second_frame):
        first_value = self._sample(path, first_frame)
        second_value = self._sample(path, second_frame)
        out_data, in_data = self._oriented_tangents(first_id, second_id, first_value)
        if out_data.right_handle is None or in_data.left_handle is None:
            # Counts toward the average as a plain linear pair.
            return BezierCurve(0, 0, 1, 1)
        return host_handles_to_bezier(*out_data.right_handle, *in_data.left_handle,
                                      second_frame - first_frame, second_value - first_value)

    # --- application ---

    def apply_easing(self, curve):
        """Writes curve into every selected keyframe pair. Best effort across attribute groups."""
        try:
            keyframe_ids, selected = self._read_selection()
            if len(keyframe_ids) < 1:
                return self._fail("Please select at least 1 keyframe")
            if len(keyframe_ids) == 1:
                return self._apply_single(keyframe_ids[0], selected, curve)

            groups = self._collect_groups(selected, keyframe_ids)
            if not groups:
                return self._fail("No valid attribute groups found with 2+ keyframes")
            return self._apply_groups(groups, curve)
        except Exception as e:
            return self._fail(f"Error applying easing to keyframes: {e}")

    def _prepare_keyframe(self, path, keyframe_id, frame):
        try:
            data = self.document.get_keyframe_tangent_data(keyframe_id)
            if data.interpolation != INTERPOLATION_BEZIER:
                self.document.set_keyframe_interpolation_mode(keyframe_id, INTERPOLATION_BEZIER)
        except Exception as e:
            self.log_requested.emit(f"Could not set interpolation to bezier for '{keyframe_id}': {e}")
        try:
            self.document.unlock_tangent(path.layer_id, path.attr_id, frame)
        except Exception as e:
            self.log_requested.emit(f"Failed to unlock tangents of '{keyframe_id}': {e}")

    def _apply_single(self, keyframe_id, selected, curve):
        attr_path = self.document.get_attribute_from_keyframe_id(keyframe_id)
        path = AttributePath.parse(attr_path)
        frames = selected.get(attr_path, [])
        if len(frames) != 1:
            return self._fail("Could not determine keyframe frame number")
        frame = frames[0]

        self._prepare_keyframe(path, keyframe_id, frame)
        handles = bezier_to_host_handles(*curve.as_tuple(), SINGLE_KEYFRAME_FRAME_SPAN, SINGLE_KEYFRAME_VALUE_SPAN)
        self.document.set_keyframe_tangent(path.layer_id, path.attr_id, frame, "out", (handles.out_x, handles.out_y))
        self.document.set_keyframe_tangent(path.layer_id, path.attr_id, frame, "in", (handles.in_x, handles.in_y))
        self.log_requested.emit("Applied easing to single keyframe's incoming and outgoing handles")
        return FitResult(True, curve.copy(), [GroupResult(path.full_path, pairs_processed=1)])

    def _apply_groups(self, groups, curve):
        results = []
        original_frame = self.document.get_current_frame()
        try:
            for group in groups:
                result = GroupResult(group.path.full_path)
                try:
                    for keyframe_id, frame in zip(group.keyframe_ids, group.frames):
                        self._prepare_keyframe(group.path, keyframe_id, frame)
                    for _, _, current_frame, next_frame in group.pairs():
                        try:
                            self._apply_pair(group.path, current_frame, next_frame, curve)
                            result.pairs_processed += 1
                        except Exception as e:
                            result.pairs_failed += 1
                            self.log_requested.emit(f"Error applying easing to '{group.path.full_path}' at {current_frame}-{next_frame}: {e}")
                except Exception as e:
                    result.error = str(e)
                    self.log_requested.emit(f"Error processing attribute {group.path.full_path}: {e}")
                results.append(result)
        finally:
            self.document.set_current_frame(original_frame)

        total = sum(r.pairs_processed for r in results)
        if not any(r.succeeded for r in results):
            return self._fail("Easing could not be applied to any keyframe pair", results)
        self.log_requested.emit(f"Applied easing to {total} keyframe pair(s) in {sum(r.succeeded for r in results)} attribute(s).")
        return FitResult(True, curve.copy(), results)

    def _apply_pair(self, path, current_frame, next_frame, curve):
        current_value = self._sample(path, current_frame)
        next_value = self._sample(path, next_frame)
        handles = bezier_to_host_handles(*curve.as_tuple(), next_frame - current_frame, next_value - current_value)
        self.document.set_keyframe_tangent(path.layer_id, path.attr_id, current_frame, "out", (handles.out_x, handles.out_y))
        self.document.set_keyframe_tangent(path.layer_id, path.attr_id, next_frame, "in", (handles.in_x, handles.in_y))

    # --- keyframe info ---

    def get_keyframe_info(self):
        """KeyframeInfo for exactly two selected keyframes on one attribute, or None."""
        try:
            keyframe_ids, selected = self._read_selection()
            if len(keyframe_ids) != 2:
                self.log_requested.emit("Error: Please select exactly 2 keyframes")
                return None
            attr_path = self.document.get_attribute_from_keyframe_id(keyframe_ids[0])
            if attr_path != self.document.get_attribute_from_keyframe_id(keyframe_ids[1]):
                self.log_requested.emit("Error: Both keyframes must be on the same attribute")
                return None
            frames = sorted(selected.get(attr_path, []))
            if len(frames) != 2:
                self.log_requested.emit("Error: Could not find attribute with 2 selected keyframes")
                return None
            path = AttributePath.parse(attr_path)
            first_frame, second_frame = frames

            original_frame = self.document.get_current_frame()
            try:
                first_value = self._sample(path, first_frame)
                second_value = self._sample(path, second_frame)
            finally:
                self.document.set_current_frame(original_frame)

            frame_diff = second_frame - first_frame
            out_data, in_data = self._oriented_tangents(keyframe_ids[0], keyframe_ids[1], first_value)
            if frame_diff <= 0 or out_data.right_handle is None or in_data.left_handle is None:
                self.log_requested.emit("Could not extract bezier data from keyframes")
                return None

            curve = host_handles_to_bezier(*out_data.right_handle, *in_data.left_handle, frame_diff, second_value - first_value)
            x1, x2 = min(1.0, max(0.0, curve.x1)), min(1.0, max(0.0, curve.x2))
            easing = "%.3f,%.3f,%.3f,%.3f" % (x1, curve.y1, x2, curve.y2)
            frame_rate = self.document.get_frame_rate()
            return KeyframeInfo(easing, frames_to_milliseconds(frame_diff, frame_rate), frame_diff,
                                _pretty_property_name(path.attr_id), _format_number(first_value),
                                _format_number(second_value), frame_rate)
        except Exception as e:
            self.log_requested.emit(f"Error reading keyframe info: {e}")
            return None

    def _fail(self, message, groups=None):
        self.log_requested.emit(message)
        return FitResult.failure(message, groups)
