# data_models.py
import math


class BezierCurve:
    """Cubic bezier easing from the fixed anchor (0,0) to (1,1)."""
    def __init__(self, x1, y1, x2, y2):
        self.x1, self.y1, self.x2, self.y2 = float(x1), float(y1), float(x2), float(y2)

    @classmethod
    def from_dict(cls, data):
        values = [data.get(k) for k in ("x1", "y1", "x2", "y2")]
        if any(not isinstance(v, (int, float)) or isinstance(v, bool) or math.isnan(v) for v in values):
            raise ValueError(f"Invalid curve data: {data!r}")
        return cls(*values)

    def to_dict(self):
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2}

    def as_tuple(self):
        return (self.x1, self.y1, self.x2, self.y2)

    def copy(self):
        return BezierCurve(*self.as_tuple())

    def __eq__(self, other):
        return isinstance(other, BezierCurve) and self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return "BezierCurve(%g, %g, %g, %g)" % self.as_tuple()


class SpeedCurve:
    """Influence (percent) and speed intensity of the outgoing and incoming handles."""
    def __init__(self, out_influence, in_influence, out_speed_y, in_speed_y):
        self.out_influence, self.in_influence = float(out_influence), float(in_influence)
        self.out_speed_y, self.in_speed_y = float(out_speed_y), float(in_speed_y)

    def as_tuple(self):
        return (self.out_influence, self.in_influence, self.out_speed_y, self.in_speed_y)

    def __eq__(self, other):
        return isinstance(other, SpeedCurve) and self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return "SpeedCurve(%g, %g, %g, %g)" % self.as_tuple()


class HostHandles:
    """Absolute tangent offsets as stored on a pair of keyframes."""
    def __init__(self, out_x, out_y, in_x, in_y):
        self.out_x, self.out_y, self.in_x, self.in_y = out_x, out_y, in_x, in_y

    def as_tuple(self):
        return (self.out_x, self.out_y, self.in_x, self.in_y)


class TangentData:
    """What the document knows about one keyframe's tangents."""
    def __init__(self, left_handle=None, right_handle=None, interpolation=0, value=None):
        self.left_handle = left_handle
        self.right_handle = right_handle
        self.interpolation = interpolation
        self.value = value


class AttributePath:
    """Typed form of a flat "layer#1.position.x" attribute path."""
    def __init__(self, layer_id, attr_id):
        self.layer_id, self.attr_id = layer_id, attr_id

    @classmethod
    def parse(cls, path):
        hash_index = path.find("#")
        if hash_index == -1:
            raise ValueError(f"Invalid layer id format: '{path}'")
        dot_index = path.find(".", hash_index)
        if dot_index == -1:
            raise ValueError(f"Could not parse attribute from: '{path}'")
        return cls(path[:dot_index], path[dot_index + 1:])

    @property
    def full_path(self):
        return f"{self.layer_id}.{self.attr_id}"

    def __eq__(self, other):
        return isinstance(other, AttributePath) and (self.layer_id, self.attr_id) == (other.layer_id, other.attr_id)

    def __hash__(self):
        return hash((self.layer_id, self.attr_id))

    def __repr__(self):
        return f"AttributePath({self.layer_id!r}, {self.attr_id!r})"


class KeyframeGroup:
    """Keyframes of one attribute taking part in a single fit/apply call."""
    def __init__(self, path, keyframe_ids, frames):
        self.path = path
        self.keyframe_ids = list(keyframe_ids)
        self.frames = sorted(frames)

    def pairs(self):
        for i in range(len(self.keyframe_ids) - 1):
            yield (self.keyframe_ids[i], self.keyframe_ids[i + 1], self.frames[i], self.frames[i + 1])


class GroupResult:
    def __init__(self, path, pairs_processed=0, pairs_failed=0, error=None):
        self.path = path
        self.pairs_processed = pairs_processed
        self.pairs_failed = pairs_failed
        self.error = error

    @property
    def succeeded(self):
        return self.error is None and self.pairs_processed > 0


class FitResult:
    """Outcome of extracting or applying an easing across attribute groups."""
    def __init__(self, success, curve=None, groups=None, message=""):
        self.success = success
        self.curve = curve
        self.groups = groups or []
        self.message = message

    @classmethod
    def failure(cls, message, groups=None):
        return cls(False, None, groups, message)

    def __bool__(self):
        return self.success


class Modifiers:
    def __init__(self, shift=False, control=False):
        self.shift, self.control = shift, control


class DragSession:
    """Transient state of one press-move-release sequence."""
    def __init__(self, handle, start_position, start_curve):
        self.handle = handle
        self.start_position = start_position
        self.start_curve = start_curve
        self.axis_constraint = None


class GraphConfig:
    """Pixel layout of a graph canvas. y grows downward, curve value 0 sits on the bottom edge."""
    def __init__(self, width=230, height=230, padding=40, handle_radius=6):
        self.width, self.height = width, height
        self.padding, self.handle_radius = padding, handle_radius

    @property
    def left(self): return self.padding
    @property
    def right(self): return self.width - self.padding
    @property
    def top(self): return self.padding
    @property
    def bottom(self): return self.height - self.padding
    @property
    def mid_x(self): return self.left + (self.right - self.left) / 2
    @property
    def plot_width(self): return self.right - self.left
    @property
    def plot_height(self): return self.bottom - self.top

    def to_pixel(self, x, y):
        return (self.left + x * self.plot_width, self.bottom - y * self.plot_height)

    def from_pixel(self, px, py):
        return ((px - self.left) / self.plot_width, (self.bottom - py) / self.plot_height)

    def resized(self, width, height):
        return GraphConfig(width, height, self.padding, self.handle_radius)


GRAPH_CONFIG = GraphConfig(width=230, height=230, padding=40, handle_radius=6)


class CurveState:
    """The one canonical curve shared by both graphs. Speed values are always derived."""
    def __init__(self, bezier=None):
        self.bezier = bezier.copy() if bezier else BezierCurve(0.5, 0.0, 0.0, 1.0)

    @property
    def speed(self):
        from curve_logic import bezier_to_speed
        return bezier_to_speed(*self.bezier.as_tuple())

    def set_bezier(self, curve):
        self.bezier = curve.copy()

    def set_speed(self, speed):
        from curve_logic import speed_to_bezier
        self.bezier = speed_to_bezier(*speed.as_tuple())
