# interaction.py
import math

from data_models import DragSession, Modifiers

# Handles may sit this many pixels outside the plot so they stay reachable.
HANDLE_CLAMP_MARGIN = 20


def _clamp(value, low, high):
    return max(low, min(high, value))


def value_handle_positions(curve, config):
    """Clamped pixel positions of cp1 and cp2, shared by hit-testing and drawing."""
    positions = {}
    for name, (x, y) in (("cp1", (curve.x1, curve.y1)), ("cp2", (curve.x2, curve.y2))):
        px, py = config.to_pixel(x, y)
        positions[name] = (
            _clamp(px, config.left - HANDLE_CLAMP_MARGIN, config.right + HANDLE_CLAMP_MARGIN),
            _clamp(py, config.top - HANDLE_CLAMP_MARGIN, config.bottom + HANDLE_CLAMP_MARGIN),
        )
    return positions


def speed_handle_positions(speed, config):
    """Pixel positions of the out/in handles; each handle stays within its half of the plot."""
    out_x = config.left + (speed.out_influence / 100) * (config.mid_x - config.left)
    in_x = config.right - (speed.in_influence / 100) * (config.right - config.mid_x)
    return {
        "out": (_clamp(out_x, config.left, config.mid_x), config.bottom - speed.out_speed_y * config.plot_height),
        "in": (_clamp(in_x, config.mid_x, config.right), config.bottom - speed.in_speed_y * config.plot_height),
    }


def _hit(positions, x, y, radius):
    for name, (hx, hy) in positions.items():
        if math.hypot(x - hx, y - hy) < radius * 2:
            return name
    return None


class _GraphInteraction:
    def __init__(self, state, get_config, modifiers=None, on_update=None, on_drag_end=None):
        self.state = state
        self.get_config = get_config
        self.modifiers = modifiers or Modifiers
        self.on_update = on_update
        self.on_drag_end = on_drag_end
        self.session = None

    @property
    def is_dragging(self):
        return self.session is not None

    def on_release(self, x=None, y=None):
        if self.session is None:
            return False
        self.session = None
        if self.on_drag_end: self.on_drag_end()
        return True

    def _updated(self):
        if self.on_update: self.on_update()


class ValueGraphInteraction(_GraphInteraction):
    """Dragging the two bezier control points. Shift locks the drag to one axis."""
    ANCHORS = {"cp1": (0.0, 0.0), "cp2": (1.0, 1.0)}

    def on_press(self, x, y):
        config = self.get_config()
        handle = _hit(value_handle_positions(self.state.bezier, config), x, y, config.handle_radius)
        if handle is None:
            return False
        self.session = DragSession(handle, (x, y), self.state.bezier.copy())
        return True

    def on_move(self, x, y):
        session = self.session
        if session is None:
            return False

        curve = self.state.bezier.copy()
        attr_x, attr_y = ("x1", "y1") if session.handle == "cp1" else ("x2", "y2")

        if self.modifiers().shift:
            if session.axis_constraint is None:
                session.axis_constraint = self._pick_axis(curve, session.handle, attr_x, attr_y)
            if session.axis_constraint == "x":
                y = session.start_position[1]
            else:
                x = session.start_position[0]
        else:
            session.axis_constraint = None

        new_x, new_y = self.get_config().from_pixel(x, y)
        if session.axis_constraint != "y":
            setattr(curve, attr_x, new_x)
        if session.axis_constraint != "x":
            setattr(curve, attr_y, new_y)

        self.state.set_bezier(curve)
        self._updated()
        return True

    def _pick_axis(self, curve, handle, attr_x, attr_y):
        """Chooses the locked axis from the handle's direction and snaps the other coordinate to 0 or 1."""
        current_x, current_y = getattr(curve, attr_x), getattr(curve, attr_y)
        origin_x, origin_y = self.ANCHORS[handle]
        angle = math.atan2(abs(current_y - origin_y), abs(current_x - origin_x))
        if angle < math.pi / 4:
            setattr(curve, attr_y, 0.0 if abs(current_y) < abs(current_y - 1.0) else 1.0)
            return "x"
        setattr(curve, attr_x, 0.0 if abs(current_x) < abs(current_x - 1.0) else 1.0)
        return "y"


class SpeedGraphInteraction(_GraphInteraction):
    """Dragging the influence/speed handles. Shift freezes the vertical, Control mirrors onto the other handle."""

    def on_press(self, x, y):
        config = self.get_config()
        handle = _hit(speed_handle_positions(self.state.speed, config), x, y, config.handle_radius)
        if handle is None:
            return False
        self.session = DragSession(handle, (x, y), self.state.bezier.copy())
        return True

    def on_move(self, x, y):
        session = self.session
        if session is None:
            return False

        config = self.get_config()
        modifiers = self.modifiers()
        speed = self.state.speed
        speed_y = (config.bottom - _clamp(y, config.top, config.bottom)) / config.plot_height

        if session.handle == "out":
            clamped_x = _clamp(x, config.left, config.mid_x)
            speed.out_influence = (clamped_x - config.left) / (config.mid_x - config.left) * 100
            if not modifiers.shift:
                speed.out_speed_y = speed_y
            if modifiers.control:
                speed.in_influence, speed.in_speed_y = speed.out_influence, speed.out_speed_y
        else:
            clamped_x = _clamp(x, config.mid_x, config.right)
            speed.in_influence = (config.right - clamped_x) / (config.right - config.mid_x) * 100
            if not modifiers.shift:
                speed.in_speed_y = speed_y
            if modifiers.control:
                speed.out_influence, speed.out_speed_y = speed.in_influence, speed.in_speed_y

        self.state.set_speed(speed)
        self._updated()
        return True
