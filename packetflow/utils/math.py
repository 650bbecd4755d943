from math import pi


def clip(value: float, min_value: float, max_value: float) -> float:
    return min(max(value, min_value), max_value)


def step_towards(value: float, target: float, step: float) -> float:
    """
    Moves value towards target by a fixed step. Once the remaining distance
    is within one step, the target itself is returned so that callers can
    compare positions with `==`.
    """

    if abs(target - value) <= step:
        return target

    if value < target:
        return value + step

    return value - step


def normalise(value: float, min_value: float, max_value: float) -> float:
    """Maps value from [min_value, max_value] onto [0, 1], clipping outside."""
    return clip((value - min_value) / (max_value - min_value), 0.0, 1.0)


def deg_to_rad(deg: float) -> float:
    return deg * pi / 180
