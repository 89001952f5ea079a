# test_curve_logic.py
import pytest

from curve_logic import (
    bezier_to_host_handles, host_handles_to_bezier, speed_to_bezier, bezier_to_speed,
    velocity_at, sample_velocity_curve, parse_bezier_text, format_bezier_text,
    format_css_cubic_bezier, frames_to_milliseconds
)
from data_models import BezierCurve, AttributePath, CurveState, SpeedCurve, GraphConfig


class TestHostHandles:
    def test_handles_scale_with_frame_and_value_span(self):
        handles = bezier_to_host_handles(0.25, 0.1, 0.75, 0.9, 30, 100)
        assert handles.as_tuple() == pytest.approx((7.5, 10.0, -7.5, -10.0))

    def test_handles_back_to_bezier(self):
        curve = host_handles_to_bezier(7.5, 10.0, -22.5, 0.0, 30, 100)
        assert curve.as_tuple() == pytest.approx((0.25, 0.1, 0.25, 1.0))

    def test_negative_value_span(self):
        handles = bezier_to_host_handles(0.4, 0.2, 0.6, 0.8, 10, -50)
        curve = host_handles_to_bezier(*handles.as_tuple(), 10, -50)
        assert curve.as_tuple() == pytest.approx((0.4, 0.2, 0.6, 0.8))

    def test_zero_value_span_uses_linear_heights(self):
        curve = host_handles_to_bezier(6.0, 2.0, -3.0, -1.0, 30, 0.0)
        assert curve.as_tuple() == pytest.approx((0.2, 0.0, 0.9, 1.0))

    def test_flat_segment_uses_linear_heights(self):
        curve = host_handles_to_bezier(5.0, 3.0, -5.0, 3.0, 20, 0.0005)
        assert curve.y1 == 0.0 and curve.y2 == 1.0
        assert curve.x1 == pytest.approx(0.25)
        assert curve.x2 == pytest.approx(0.75)


class TestSpeedConversion:
    def test_default_curve_speed_values(self):
        assert bezier_to_speed(0.5, 0.0, 0.0, 1.0).as_tuple() == pytest.approx((50.0, 100.0, 0.0, 0.0))

    def test_speed_to_bezier(self):
        assert speed_to_bezier(50, 100, 0, 0).as_tuple() == pytest.approx((0.5, 0.0, 0.0, 1.0))

    def test_conversion_is_reversible(self):
        speed = bezier_to_speed(0.33, 0.12, 0.7, 0.95)
        assert speed_to_bezier(*speed.as_tuple()).as_tuple() == pytest.approx((0.33, 0.12, 0.7, 0.95))

    def test_curve_state_derives_speed(self):
        state = CurveState(BezierCurve(0.2, 0.3, 0.6, 0.9))
        assert state.speed.as_tuple() == pytest.approx((20.0, 40.0, 0.3, 0.1))
        state.set_speed(SpeedCurve(50, 100, 0, 0))
        assert state.bezier.as_tuple() == pytest.approx((0.5, 0.0, 0.0, 1.0))


class TestVelocity:
    def test_zero_horizontal_derivative_gives_zero(self):
        assert velocity_at(0.0, 0.0, 0.5, 1.0, 1.0) == 0.0

    def test_straight_line_has_constant_speed(self):
        samples = sample_velocity_curve(0.25, 0.25, 0.75, 0.75, 20)
        assert len(samples) == 21
        assert samples == pytest.approx([1.0] * 21)

    def test_samples_are_normalized(self):
        samples = sample_velocity_curve(0.42, 0.0, 0.58, 1.0, 50)
        assert len(samples) == 51
        assert max(samples) == pytest.approx(1.0)
        assert all(0.0 <= s <= 1.0 for s in samples)

    def test_all_zero_velocity_is_not_normalized(self):
        assert sample_velocity_curve(0.0, 0.0, 1.0, 1.0, 1) == [0.0, 0.0]

    def test_invalid_sample_count(self):
        with pytest.raises(ValueError):
            sample_velocity_curve(0.5, 0.0, 0.5, 1.0, 0)


class TestTextFormats:
    def test_parse_bezier_text(self):
        assert parse_bezier_text(" 0.25, 0.1 ,0.25, 1").as_tuple() == (0.25, 0.1, 0.25, 1.0)

    @pytest.mark.parametrize("text", ["1, 2, 3", "a, b, c, d", "nan, 0, 0, 1", "0, 0, inf, 1", ""])
    def test_parse_rejects_invalid_text(self, text):
        with pytest.raises(ValueError):
            parse_bezier_text(text)

    def test_format_bezier_text(self):
        assert format_bezier_text(BezierCurve(0.5, 0, 0, 1)) == "0.500, 0.000, 0.000, 1.000"

    def test_format_css(self):
        assert format_css_cubic_bezier(BezierCurve(0.25, 0.1, 0.25, 1)) == "cubic-bezier(0.25, 0.10, 0.25, 1.00)"

    def test_frames_to_milliseconds(self):
        assert frames_to_milliseconds(15, 30) == 500
        assert frames_to_milliseconds(1, 24) == 42


class TestDataModels:
    def test_attribute_path_parse(self):
        path = AttributePath.parse("layer#1.transform.position")
        assert path.layer_id == "layer#1"
        assert path.attr_id == "transform.position"
        assert path.full_path == "layer#1.transform.position"

    @pytest.mark.parametrize("text", ["layer1.position", "layer#1"])
    def test_attribute_path_rejects_invalid(self, text):
        with pytest.raises(ValueError):
            AttributePath.parse(text)

    def test_bezier_from_dict_validates(self):
        assert BezierCurve.from_dict({"x1": 0.1, "y1": 0, "x2": 0.9, "y2": 1}) == BezierCurve(0.1, 0, 0.9, 1)
        with pytest.raises(ValueError):
            BezierCurve.from_dict({"x1": 0.1, "y1": "0", "x2": 0.9, "y2": 1})
        with pytest.raises(ValueError):
            BezierCurve.from_dict({"x1": 0.1, "y1": 0, "x2": 0.9})

    def test_graph_config_pixel_mapping(self):
        config = GraphConfig(230, 230, 40, 6)
        assert config.to_pixel(0, 0) == (40, 190)
        assert config.to_pixel(1, 1) == (190, 40)
        assert config.from_pixel(115, 115) == pytest.approx((0.5, 0.5))
