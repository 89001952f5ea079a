# graph_renderer.py
from curve_logic import bezier_to_speed, sample_velocity_curve
from interaction import value_handle_positions, speed_handle_positions

GRID_DIVISIONS = 10
SPEED_SAMPLE_COUNT = 50
GRID_COLOR = "#3a3a3a"
CURVE_COLOR = "#ffffff"


class PathGeometry:
    """Drawing commands in widget pixels: ("move"|"line", x, y), ("cubic", c1x, c1y, c2x, c2y, x, y), ("ellipse", cx, cy, rx, ry)."""
    def __init__(self):
        self.commands = []

    def move_to(self, x, y):
        self.commands.append(("move", x, y)); return self

    def line_to(self, x, y):
        self.commands.append(("line", x, y)); return self

    def cubic_to(self, c1x, c1y, c2x, c2y, x, y):
        self.commands.append(("cubic", c1x, c1y, c2x, c2y, x, y)); return self

    def add_ellipse(self, cx, cy, rx, ry):
        self.commands.append(("ellipse", cx, cy, rx, ry)); return self


class Paint:
    def __init__(self, color, stroke=True, stroke_width=1):
        self.color, self.stroke, self.stroke_width = color, stroke, stroke_width

    def __repr__(self):
        return f"Paint({self.color!r}, stroke={self.stroke}, stroke_width={self.stroke_width})"


def _grid_path(config):
    path = PathGeometry()
    for i in range(GRID_DIVISIONS + 1):
        x = config.padding + i * (config.width - 2 * config.padding) / GRID_DIVISIONS
        path.move_to(x, 0).line_to(x, config.height)
    for i in range(GRID_DIVISIONS + 1):
        y = config.padding + i * (config.height - 2 * config.padding) / GRID_DIVISIONS
        path.move_to(0, y).line_to(config.width, y)
    return path


def _begin(canvas, config):
    canvas.clear()
    canvas.add_path(_grid_path(config), Paint(GRID_COLOR, stroke=True, stroke_width=1))


def _handles(canvas, positions, radius):
    paint = Paint(canvas.theme_color("Accent1"), stroke=False)
    for hx, hy in positions:
        canvas.add_path(PathGeometry().add_ellipse(hx, hy, radius, radius), paint)


def draw_value_curve(canvas, curve, config):
    """Grid, bezier curve, clamped control handles and anchor guide lines."""
    _begin(canvas, config)

    start = config.to_pixel(0, 0)
    end = config.to_pixel(1, 1)
    cp1 = config.to_pixel(curve.x1, curve.y1)
    cp2 = config.to_pixel(curve.x2, curve.y2)
    curve_path = PathGeometry().move_to(*start).cubic_to(*cp1, *cp2, *end)
    canvas.add_path(curve_path, Paint(CURVE_COLOR, stroke=True, stroke_width=2))

    positions = value_handle_positions(curve, config)
    visible_cp1, visible_cp2 = positions["cp1"], positions["cp2"]
    _handles(canvas, (visible_cp1, visible_cp2), config.handle_radius)

    guides = PathGeometry().move_to(*start).line_to(*visible_cp1).move_to(*end).line_to(*visible_cp2)
    canvas.add_path(guides, Paint(canvas.theme_color("Accent1"), stroke=True, stroke_width=1))
    canvas.redraw()


def speed_curve_points(curve, speed, config, sample_count=SPEED_SAMPLE_COUNT):
    """
    Velocity polyline in pixels. The normalized samples are shifted by a correction that is
    interpolated linearly from start to end so the line meets both handle heights exactly.
    """
    x1 = min(0.999, max(0.001, curve.x1))
    x2 = min(0.999, max(0.001, curve.x2))
    samples = sample_velocity_curve(x1, curve.y1, x2, curve.y2, sample_count)

    delta_start = speed.out_speed_y - samples[0]
    delta_end = speed.in_speed_y - samples[sample_count]
    points = [(config.left, config.bottom - speed.out_speed_y * config.plot_height)]
    for i in range(1, sample_count + 1):
        t = i / sample_count
        shifted = samples[i] + delta_start + t * (delta_end - delta_start)
        points.append((config.left + t * config.plot_width, config.bottom - shifted * config.plot_height))
    return points


def draw_speed_curve(canvas, curve, config, sample_count=SPEED_SAMPLE_COUNT):
    """Draws the speed view derived fresh from the bezier and returns the SpeedCurve it used."""
    speed = bezier_to_speed(*curve.as_tuple())
    _begin(canvas, config)

    points = speed_curve_points(curve, speed, config, sample_count)
    curve_path = PathGeometry().move_to(*points[0])
    for point in points[1:]:
        curve_path.line_to(*point)
    canvas.add_path(curve_path, Paint(CURVE_COLOR, stroke=True, stroke_width=2))

    positions = speed_handle_positions(speed, config)
    out_handle, in_handle = positions["out"], positions["in"]
    _handles(canvas, (out_handle, in_handle), config.handle_radius)

    guides = PathGeometry().move_to(config.left, out_handle[1]).line_to(*out_handle)
    guides.move_to(config.right, in_handle[1]).line_to(*in_handle)
    canvas.add_path(guides, Paint(canvas.theme_color("Accent1"), stroke=True, stroke_width=2))
    canvas.redraw()
    return speed
