"""
Scalar angle helpers for the closed-form solver
"""
import math
from typing import Optional

# Cosine arguments beyond these thresholds are snapped to exactly +1 / -1
ALMOST_PLUS_ONE = 0.9999999
ALMOST_MINUS_ONE = -0.9999999


def wrap_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi]."""
    return math.atan2(math.sin(angle), math.cos(angle))


def guarded_acos(cosine: float) -> Optional[float]:
    """
    Arc-cosine that tolerates floating-point overshoot of +-1

    Values past ALMOST_PLUS_ONE / ALMOST_MINUS_ONE return 0 / pi as long as they
    overshoot 1 by no more than the same margin. Anything further out has no
    real solution and yields None.

    :param cosine: cosine value, usually from the law of cosines
    :return: angle in [0, pi], or None when out of domain
    """
    margin = 1.0 - ALMOST_PLUS_ONE
    if cosine > 1.0 + margin or cosine < -1.0 - margin:
        return None
    if cosine > ALMOST_PLUS_ONE:
        return 0.0
    if cosine < ALMOST_MINUS_ONE:
        return math.pi
    return math.atan2(math.sqrt(1.0 - cosine * cosine), cosine)
