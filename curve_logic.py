# curve_logic.py
import math

from data_models import BezierCurve, SpeedCurve, HostHandles

FLAT_VALUE_EPSILON = 0.001
VELOCITY_EPSILON = 0.0001


def bezier_to_host_handles(x1: float, y1: float, x2: float, y2: float, frame_diff: float, value_diff: float) -> HostHandles:
    """Scales a normalized bezier into tangent offsets for a keyframe pair spanning frame_diff/value_diff."""
    return HostHandles(
        out_x=x1 * frame_diff,
        out_y=y1 * value_diff,
        in_x=(x2 - 1) * frame_diff,
        in_y=(y2 - 1) * value_diff,
    )


def host_handles_to_bezier(out_x: float, out_y: float, in_x: float, in_y: float, frame_diff: float, value_diff: float) -> BezierCurve:
    """
    Inverse of bezier_to_host_handles.
    A flat segment (|value_diff| <= 0.001) has no meaningful vertical scale, so y1/y2 fall back to 0/1.
    """
    flat = abs(value_diff) <= FLAT_VALUE_EPSILON
    x1 = out_x / frame_diff
    y1 = 0.0 if flat else out_y / value_diff
    x2 = (frame_diff + in_x) / frame_diff
    y2 = 1.0 if flat else 1 + in_y / value_diff
    return BezierCurve(x1, y1, x2, y2)


def speed_to_bezier(out_influence: float, in_influence: float, out_speed_y: float, in_speed_y: float) -> BezierCurve:
    # The incoming handle is measured from the top, hence the inverted y2.
    return BezierCurve(out_influence / 100, out_speed_y, 1 - in_influence / 100, 1 - in_speed_y)


def bezier_to_speed(x1: float, y1: float, x2: float, y2: float) -> SpeedCurve:
    return SpeedCurve(x1 * 100, (1 - x2) * 100, y1, 1 - y2)


def velocity_at(t: float, x1: float, y1: float, x2: float, y2: float) -> float:
    """
    |dy/dx| of the easing at curve parameter t.
    Returns 0 where dx/dt is (nearly) zero; this is an approximation, not the true limit.
    """
    u = 1 - t
    dy = 3 * u * u * y1 + 6 * u * t * (y2 - y1) + 3 * t * t * (1 - y2)
    dx = 3 * u * u * x1 + 6 * u * t * (x2 - x1) + 3 * t * t * (1 - x2)
    if abs(dx) <= VELOCITY_EPSILON:
        return 0.0
    return abs(dy / dx)


def sample_velocity_curve(x1: float, y1: float, x2: float, y2: float, sample_count: int) -> list[float]:
    """Velocity at sample_count+1 evenly spaced t in [0, 1], normalized by the largest sample."""
    if sample_count < 1:
        raise ValueError("sample_count must be at least 1")
    samples = [velocity_at(i / sample_count, x1, y1, x2, y2) for i in range(sample_count + 1)]
    max_speed = max(samples)
    if max_speed < VELOCITY_EPSILON:
        max_speed = 1.0
    return [s / max_speed for s in samples]


def parse_bezier_text(text: str) -> BezierCurve:
    """Parses "x1, y1, x2, y2" as typed into the curve field."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 4:
        raise ValueError(f"Expected 4 comma-separated values, got {len(parts)}")
    values = [float(p) for p in parts]
    if any(math.isnan(v) or math.isinf(v) for v in values):
        raise ValueError("Curve values must be finite numbers")
    return BezierCurve(*values)


def format_bezier_text(curve: BezierCurve) -> str:
    return "%.3f, %.3f, %.3f, %.3f" % curve.as_tuple()


def format_css_cubic_bezier(curve: BezierCurve) -> str:
    return "cubic-bezier(%.2f, %.2f, %.2f, %.2f)" % curve.as_tuple()


def frames_to_milliseconds(frames: float, frame_rate: float) -> int:
    return round(frames / frame_rate * 1000)
