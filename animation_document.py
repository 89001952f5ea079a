# animation_document.py
import json

from data_models import TangentData

INTERPOLATION_BEZIER = 0
INTERPOLATION_LINEAR = 1
INTERPOLATION_STEP = 2


class DocumentError(Exception):
    """Raised by a document when a keyframe or attribute cannot be found."""
    pass


class AnimationDocument:
    """
    The keyframe capabilities the easing tools rely on.
    Attribute paths are flat "layer#1.attr" strings; every call may fail on its own.
    """
    def get_selected_keyframe_ids(self): raise NotImplementedError
    def get_attribute_from_keyframe_id(self, keyframe_id): raise NotImplementedError
    def get_keyframe_frame(self, keyframe_id): raise NotImplementedError
    def get_selected_keyframes(self): raise NotImplementedError
    def get_value_at(self, layer_id, attr_id, frame): raise NotImplementedError
    def get_current_frame(self): raise NotImplementedError
    def set_current_frame(self, frame): raise NotImplementedError
    def get_frame_rate(self): raise NotImplementedError
    def get_keyframe_tangent_data(self, keyframe_id): raise NotImplementedError
    def set_keyframe_interpolation_mode(self, keyframe_id, mode): raise NotImplementedError
    def set_keyframe_tangent(self, layer_id, attr_id, frame, side, offset): raise NotImplementedError
    def unlock_tangent(self, layer_id, attr_id, frame): raise NotImplementedError


class Keyframe:
    def __init__(self, frame, value, left_handle=None, right_handle=None, interpolation=INTERPOLATION_BEZIER, locked=False):
        self.frame, self.value = frame, value
        self.left_handle, self.right_handle = left_handle, right_handle
        self.interpolation, self.locked = interpolation, locked

    @classmethod
    def from_dict(cls, data):
        def handle(key):
            h = data.get(key)
            return (float(h[0]), float(h[1])) if h is not None else None
        return cls(data["frame"], float(data.get("value", 0.0)), handle("leftHandle"), handle("rightHandle"),
                   data.get("interpolation", INTERPOLATION_BEZIER), data.get("locked", False))

    def to_dict(self):
        data = {"frame": self.frame, "value": self.value, "interpolation": self.interpolation, "locked": self.locked}
        if self.left_handle is not None: data["leftHandle"] = list(self.left_handle)
        if self.right_handle is not None: data["rightHandle"] = list(self.right_handle)
        return data


class InMemoryDocument(AnimationDocument):
    """A small keyframe document kept in memory and stored as JSON."""
    def __init__(self, frame_rate=30.0):
        self.frame_rate = frame_rate
        self.current_frame = 0
        self.attributes = {}
        self.selected_ids = []

    @staticmethod
    def make_keyframe_id(path, frame):
        return f"{path}@{frame}"

    def add_keyframe(self, path, keyframe):
        keys = self.attributes.setdefault(path, [])
        keys.append(keyframe)
        keys.sort(key=lambda k: k.frame)
        return self.make_keyframe_id(path, keyframe.frame)

    def select(self, keyframe_ids):
        for keyframe_id in keyframe_ids:
            self._find(keyframe_id)
        self.selected_ids = list(keyframe_ids)

    def all_keyframe_ids(self):
        return [self.make_keyframe_id(path, k.frame) for path, keys in sorted(self.attributes.items()) for k in keys]

    def _find(self, keyframe_id):
        path, sep, frame = keyframe_id.rpartition("@")
        if not sep or path not in self.attributes:
            raise DocumentError(f"Unknown keyframe '{keyframe_id}'")
        for key in self.attributes[path]:
            if str(key.frame) == frame:
                return path, key
        raise DocumentError(f"Unknown keyframe '{keyframe_id}'")

    def _find_at(self, layer_id, attr_id, frame):
        path = f"{layer_id}.{attr_id}"
        for key in self.attributes.get(path, []):
            if key.frame == frame:
                return key
        raise DocumentError(f"No keyframe on '{path}' at frame {frame}")

    # --- AnimationDocument ---

    def get_selected_keyframe_ids(self):
        return list(self.selected_ids)

    def get_attribute_from_keyframe_id(self, keyframe_id):
        return self._find(keyframe_id)[0]

    def get_keyframe_frame(self, keyframe_id):
        return self._find(keyframe_id)[1].frame

    def get_selected_keyframes(self):
        selected = {}
        for keyframe_id in self.selected_ids:
            path, key = self._find(keyframe_id)
            selected.setdefault(path, []).append(key.frame)
        return selected

    def get_value_at(self, layer_id, attr_id, frame):
        path = f"{layer_id}.{attr_id}"
        keys = self.attributes.get(path)
        if not keys:
            raise DocumentError(f"Unknown attribute '{path}'")
        if frame <= keys[0].frame: return keys[0].value
        if frame >= keys[-1].frame: return keys[-1].value
        for a, b in zip(keys, keys[1:]):
            if a.frame <= frame <= b.frame:
                if a.interpolation == INTERPOLATION_STEP or b.frame == a.frame:
                    return a.value
                return a.value + (b.value - a.value) * (frame - a.frame) / (b.frame - a.frame)
        return keys[-1].value

    def get_current_frame(self):
        return self.current_frame

    def set_current_frame(self, frame):
        self.current_frame = frame

    def get_frame_rate(self):
        return self.frame_rate

    def get_keyframe_tangent_data(self, keyframe_id):
        _, key = self._find(keyframe_id)
        return TangentData(key.left_handle, key.right_handle, key.interpolation, key.value)

    def set_keyframe_interpolation_mode(self, keyframe_id, mode):
        self._find(keyframe_id)[1].interpolation = mode

    def set_keyframe_tangent(self, layer_id, attr_id, frame, side, offset):
        key = self._find_at(layer_id, attr_id, frame)
        if key.locked:
            raise DocumentError(f"Tangent of '{layer_id}.{attr_id}' at frame {frame} is locked")
        if side == "out": key.right_handle = (float(offset[0]), float(offset[1]))
        elif side == "in": key.left_handle = (float(offset[0]), float(offset[1]))
        else: raise ValueError(f"Unknown tangent side '{side}'")

    def unlock_tangent(self, layer_id, attr_id, frame):
        self._find_at(layer_id, attr_id, frame).locked = False

    # --- persistence ---

    @classmethod
    def from_dict(cls, data):
        doc = cls(frame_rate=float(data.get("FrameRate", 30.0)))
        doc.current_frame = data.get("CurrentFrame", 0)
        for path, keys in data.get("Attributes", {}).items():
            for key_data in keys:
                doc.add_keyframe(path, Keyframe.from_dict(key_data))
        return doc

    def to_dict(self):
        return {
            "FrameRate": self.frame_rate,
            "CurrentFrame": self.current_frame,
            "Attributes": {path: [k.to_dict() for k in keys] for path, keys in sorted(self.attributes.items())}
        }

    @classmethod
    def load(cls, file_name):
        with open(file_name, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))

    def save(self, file_name):
        with open(file_name, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=3, ensure_ascii=False)
