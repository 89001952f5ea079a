# test_interaction.py
import pytest

from data_models import BezierCurve, CurveState, Modifiers, GRAPH_CONFIG
from interaction import ValueGraphInteraction, SpeedGraphInteraction, value_handle_positions, speed_handle_positions

# GRAPH_CONFIG: plot spans 40..190 on both axes, mid_x = 115, handle hit radius 12


@pytest.fixture
def keys():
    """Stan klawiszy modyfikujących, zmieniany w trakcie testu."""
    return Modifiers()


@pytest.fixture
def events():
    return {"updates": 0, "drag_ends": 0}


def make_interaction(cls, state, keys, events):
    def on_update(): events["updates"] += 1
    def on_drag_end(): events["drag_ends"] += 1
    return cls(state, lambda: GRAPH_CONFIG, lambda: keys, on_update=on_update, on_drag_end=on_drag_end)


class TestValueGraph:
    def test_press_outside_handles_starts_nothing(self, keys, events):
        interaction = make_interaction(ValueGraphInteraction, CurveState(), keys, events)
        assert interaction.on_press(0, 0) is False
        assert not interaction.is_dragging
        assert interaction.on_move(50, 50) is False
        assert interaction.on_release() is False
        assert events == {"updates": 0, "drag_ends": 0}

    def test_free_drag_moves_control_point(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.0, 0.0, 1.0))
        interaction = make_interaction(ValueGraphInteraction, state, keys, events)
        assert interaction.on_press(115, 190)
        assert interaction.session.handle == "cp1"
        interaction.on_move(130, 175)
        assert state.bezier.as_tuple() == pytest.approx((0.6, 0.1, 0.0, 1.0))
        assert events["updates"] == 1

    def test_second_handle_is_hit(self, keys, events):
        interaction = make_interaction(ValueGraphInteraction, CurveState(BezierCurve(0.5, 0.0, 0.0, 1.0)), keys, events)
        assert interaction.on_press(42, 45)
        assert interaction.session.handle == "cp2"

    def test_shift_locks_axis_and_snaps(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.1, 0.0, 1.0))
        interaction = make_interaction(ValueGraphInteraction, state, keys, events)
        interaction.on_press(115, 175)

        keys.shift = True
        interaction.on_move(145, 160)
        assert interaction.session.axis_constraint == "x"
        assert state.bezier.x1 == pytest.approx(0.7)
        assert state.bezier.y1 == 0.0

        interaction.on_move(160, 100)
        assert state.bezier.x1 == pytest.approx(0.8)
        assert state.bezier.y1 == 0.0

        keys.shift = False
        interaction.on_move(160, 100)
        assert interaction.session.axis_constraint is None
        assert state.bezier.as_tuple()[:2] == pytest.approx((0.8, 0.6))

    def test_steep_handle_locks_vertical_axis(self, keys, events):
        state = CurveState(BezierCurve(0.1, 0.6, 0.9, 1.0))
        interaction = make_interaction(ValueGraphInteraction, state, keys, events)
        interaction.on_press(55, 100)
        keys.shift = True
        interaction.on_move(80, 70)
        assert interaction.session.axis_constraint == "y"
        assert state.bezier.x1 == 0.0
        assert state.bezier.y1 == pytest.approx(0.8)

    def test_release_ends_session(self, keys, events):
        interaction = make_interaction(ValueGraphInteraction, CurveState(), keys, events)
        interaction.on_press(115, 190)
        assert interaction.on_release(120, 180) is True
        assert interaction.session is None
        assert events["drag_ends"] == 1

    def test_speed_view_follows_value_drag(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.0, 0.0, 1.0))
        interaction = make_interaction(ValueGraphInteraction, state, keys, events)
        interaction.on_press(115, 190)
        interaction.on_move(70, 190)
        assert state.speed.out_influence == pytest.approx(20.0)

    def test_handle_positions_are_clamped(self):
        positions = value_handle_positions(BezierCurve(0.5, 2.0, 1.5, -1.0), GRAPH_CONFIG)
        assert positions["cp1"] == pytest.approx((115, 20))
        assert positions["cp2"] == pytest.approx((210, 210))


class TestSpeedGraph:
    def test_handle_positions(self):
        positions = speed_handle_positions(CurveState().speed, GRAPH_CONFIG)
        assert positions["out"] == pytest.approx((77.5, 190))
        assert positions["in"] == pytest.approx((115, 190))

    def test_drag_out_handle(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.0, 0.0, 1.0))
        interaction = make_interaction(SpeedGraphInteraction, state, keys, events)
        assert interaction.on_press(77.5, 190)
        assert interaction.session.handle == "out"
        interaction.on_move(300, 115)
        assert state.speed.out_influence == pytest.approx(100.0)
        assert state.speed.out_speed_y == pytest.approx(0.5)
        assert state.bezier.as_tuple() == pytest.approx((1.0, 0.5, 0.0, 1.0))

    def test_session_keeps_curve_from_before_drag(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.0, 0.0, 1.0))
        interaction = make_interaction(SpeedGraphInteraction, state, keys, events)
        interaction.on_press(77.5, 190)
        interaction.on_move(100, 100)
        assert interaction.session.start_curve == BezierCurve(0.5, 0.0, 0.0, 1.0)
        assert state.bezier != interaction.session.start_curve
        assert state.bezier.as_tuple() == pytest.approx((0.8, 0.6, 0.0, 1.0))

    def test_in_handle_stays_in_right_half(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.0, 0.5, 1.0))
        interaction = make_interaction(SpeedGraphInteraction, state, keys, events)
        assert interaction.on_press(152.5, 190)
        assert interaction.session.handle == "in"
        interaction.on_move(50, 190)
        assert state.speed.in_influence == pytest.approx(100.0)

    def test_shift_keeps_speed(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.0, 0.0, 1.0))
        interaction = make_interaction(SpeedGraphInteraction, state, keys, events)
        interaction.on_press(77.5, 190)
        keys.shift = True
        interaction.on_move(100, 40)
        assert state.speed.out_speed_y == pytest.approx(0.0)
        assert state.speed.out_influence == pytest.approx(80.0)

    def test_control_mirrors_handle(self, keys, events):
        state = CurveState(BezierCurve(0.5, 0.0, 0.0, 1.0))
        interaction = make_interaction(SpeedGraphInteraction, state, keys, events)
        interaction.on_press(77.5, 190)
        keys.control = True
        interaction.on_move(77.5, 115)
        assert state.speed.as_tuple() == pytest.approx((50.0, 50.0, 0.5, 0.5))
        assert state.bezier.as_tuple() == pytest.approx((0.5, 0.5, 0.5, 0.5))

    def test_release_ends_session(self, keys, events):
        interaction = make_interaction(SpeedGraphInteraction, CurveState(), keys, events)
        interaction.on_press(77.5, 190)
        interaction.on_release()
        assert not interaction.is_dragging
        assert events["drag_ends"] == 1
