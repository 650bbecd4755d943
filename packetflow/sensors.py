"""
Random sensor readings standing in for the Geova hardware. Each generator
accepts an optional numpy Generator so that tests can seed it.
"""

from time import time

import numpy as np

from .config import DISTANCE_RANGE_M, SHARPNESS_RANGE, TILT_LIMIT
from .types import DistanceReading, OrientationReading, SharpnessReading
from .utils.math import clip, deg_to_rad

ROLL_NOISE_DEG = 0.3


def _rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def generate_tfluna(rng: np.random.Generator | None = None) -> DistanceReading:
    rng = _rng(rng)

    return DistanceReading(
        distance_m=round(float(rng.uniform(*DISTANCE_RANGE_M)), 2),
        signal_strength=int(rng.integers(100, 65535)),
        temperature_c=round(float(rng.normal(35.0, 2.0)), 1),
        timestamp=time(),
    )


def generate_mpu(tilt: float, rng: np.random.Generator | None = None) -> OrientationReading:
    """The roll follows the tripod tilt set by the user, with a little noise."""
    rng = _rng(rng)

    roll = clip(tilt + float(rng.normal(0.0, ROLL_NOISE_DEG)), -TILT_LIMIT, TILT_LIMIT)
    pitch = float(rng.normal(0.0, 0.5))

    # gravity vector as seen by a sensor rolled about its x axis
    accel = np.array([0.0, np.sin(deg_to_rad(roll)), np.cos(deg_to_rad(roll))])
    accel += rng.normal(0.0, 0.01, size=3)

    return OrientationReading(
        roll=round(roll, 2),
        pitch=round(pitch, 2),
        yaw=round(float(rng.uniform(0.0, 360.0)), 2),
        accel_x=round(float(accel[0]), 3),
        accel_y=round(float(accel[1]), 3),
        accel_z=round(float(accel[2]), 3),
        timestamp=time(),
    )


def generate_imx(rng: np.random.Generator | None = None) -> SharpnessReading:
    rng = _rng(rng)

    return SharpnessReading(
        sharpness=round(float(rng.uniform(*SHARPNESS_RANGE)), 3),
        brightness=round(float(rng.uniform(80.0, 180.0)), 1),
        timestamp=time(),
    )
