# test_graph_renderer.py
import pytest

from data_models import BezierCurve, SpeedCurve, GRAPH_CONFIG
from graph_renderer import draw_value_curve, draw_speed_curve, speed_curve_points, GRID_DIVISIONS, CURVE_COLOR, GRID_COLOR


class FakeCanvas:
    """Zbiera ścieżki zamiast rysować je na ekranie."""
    def __init__(self):
        self.paths = []
        self.redraws = 0
        self.cleared = 0

    def clear(self): self.paths = []; self.cleared += 1
    def add_path(self, geometry, paint): self.paths.append((geometry, paint))
    def redraw(self): self.redraws += 1
    def theme_color(self, name): return {"Accent1": "#4aa3ff"}[name]


@pytest.fixture
def canvas():
    return FakeCanvas()


class TestValueCurve:
    def test_draws_grid_curve_handles_and_guides(self, canvas):
        draw_value_curve(canvas, BezierCurve(0.5, 0.0, 0.0, 1.0), GRAPH_CONFIG)
        assert canvas.cleared == 1 and canvas.redraws == 1
        assert len(canvas.paths) == 5

        grid, grid_paint = canvas.paths[0]
        assert grid_paint.color == GRID_COLOR
        assert len(grid.commands) == 4 * (GRID_DIVISIONS + 1)

        curve, curve_paint = canvas.paths[1]
        assert curve_paint.color == CURVE_COLOR and curve_paint.stroke_width == 2
        assert curve.commands == [("move", 40, 190), ("cubic", 115, 190, 40, 40, 190, 40)]

    def test_handles_use_accent_color(self, canvas):
        draw_value_curve(canvas, BezierCurve(0.5, 0.0, 0.0, 1.0), GRAPH_CONFIG)
        handle_paints = [paint for _, paint in canvas.paths[2:4]]
        assert all(p.color == "#4aa3ff" and not p.stroke for p in handle_paints)

    def test_out_of_range_handle_is_drawn_clamped(self, canvas):
        draw_value_curve(canvas, BezierCurve(0.5, 2.0, 0.5, 1.0), GRAPH_CONFIG)
        handle = canvas.paths[2][0]
        assert handle.commands[0] == ("ellipse", 115, 20, 6, 6)


class TestSpeedCurve:
    def test_returns_derived_speed(self, canvas):
        speed = draw_speed_curve(canvas, BezierCurve(0.5, 0.0, 0.0, 1.0), GRAPH_CONFIG)
        assert speed.as_tuple() == pytest.approx((50.0, 100.0, 0.0, 0.0))
        assert canvas.redraws == 1
        assert len(canvas.paths) == 5

    def test_polyline_meets_handle_heights(self):
        curve = BezierCurve(0.3, 0.2, 0.6, 0.9)
        speed = SpeedCurve(30.0, 40.0, 0.2, 0.1)
        points = speed_curve_points(curve, speed, GRAPH_CONFIG, 50)
        assert len(points) == 51
        assert points[0] == pytest.approx((40, 190 - 0.2 * 150))
        assert points[-1] == pytest.approx((190, 190 - 0.1 * 150))

    def test_polyline_spans_plot_width(self):
        curve = BezierCurve(0.5, 0.0, 0.0, 1.0)
        points = speed_curve_points(curve, SpeedCurve(50, 100, 0, 0), GRAPH_CONFIG, 10)
        xs = [p[0] for p in points]
        assert xs == pytest.approx([40 + i * 15 for i in range(11)])
