"""
Static description of the 5-DOF arm: link dimensions and joint limits
"""
import math
import numpy as np
from dataclasses import dataclass, fields
from typing import Dict, Sequence

NUM_JOINTS = 5
TWO_PI = 2.0 * math.pi

DEFAULT_JOINT_NAMES = tuple(f"arm_joint_{i + 1}" for i in range(NUM_JOINTS))


def as_joint_vector(values: Sequence[float], name: str = "joint vector") -> np.ndarray:
    """
    Convert a sequence into a (5,) float64 joint vector

    :raises ValueError: if the sequence does not hold exactly 5 values
    """
    vector = np.array(values, dtype=np.float64).reshape(-1)
    if vector.shape != (NUM_JOINTS,):
        raise ValueError(f"{name} must have {NUM_JOINTS} entries, got {vector.shape[0]}")
    return vector


@dataclass(frozen=True)
class ArmGeometry:
    """
    Link dimensions of the arm in meters (youBot values by default)

    - l0x, l0z: base origin to the joint 1 frame
    - l1x, l1z: joint 1 frame to the joint 2 axis
    - l2: joint 2 to joint 3 (upper arm)
    - l3: joint 3 to joint 4 (forearm)
    - d: joint 4 to the tool point, along the approach axis
    """
    l0x: float = 0.024
    l0z: float = 0.096
    l1x: float = 0.033
    l1z: float = 0.019
    l2: float = 0.155
    l3: float = 0.135
    d: float = 0.13

    def __post_init__(self):
        if self.l2 <= 0.0 or self.l3 <= 0.0:
            raise ValueError(f"Link lengths l2 and l3 must be positive, got {self.l2}, {self.l3}")

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'ArmGeometry':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown geometry keys: {sorted(unknown)}")
        return cls(**{key: float(value) for key, value in data.items()})

    @property
    def max_reach(self) -> float:
        """Reach of the planar sub-chain (joint 2 to joint 4)."""
        return self.l2 + self.l3


class JointLimits:
    """
    Per-joint [min, max] bounds in radians, fixed after construction
    """

    def __init__(self, min_angles: Sequence[float], max_angles: Sequence[float]):
        """
        :param min_angles: 5 minimum joint angles
        :param max_angles: 5 maximum joint angles
        :raises ValueError: on wrong sizes or min > max
        """
        min_angles = as_joint_vector(min_angles, "min_angles")
        max_angles = as_joint_vector(max_angles, "max_angles")
        bad = np.nonzero(min_angles > max_angles)[0]
        if bad.size:
            raise ValueError(f"min_angles exceed max_angles for joints {[int(i) + 1 for i in bad]}")
        min_angles.setflags(write=False)
        max_angles.setflags(write=False)
        self._min_angles = min_angles
        self._max_angles = max_angles

    @classmethod
    def symmetric(cls, bound: float = math.pi) -> 'JointLimits':
        return cls([-bound] * NUM_JOINTS, [bound] * NUM_JOINTS)

    @property
    def min_angles(self) -> np.ndarray:
        return self._min_angles

    @property
    def max_angles(self) -> np.ndarray:
        return self._max_angles

    def is_valid(self, solution: Sequence[float]) -> bool:
        """True if every joint lies inside its [min, max] interval."""
        solution = np.asarray(solution, dtype=np.float64)
        if solution.shape != (NUM_JOINTS,):
            return False
        return bool(np.all(solution >= self._min_angles) and np.all(solution <= self._max_angles))

    def shift_into_range(self, solution: Sequence[float]) -> np.ndarray:
        """
        Move each out-of-range angle by the multiple of 2*pi that lands it
        inside [min, max], if there is one; other angles are left unchanged.
        """
        shifted = np.array(solution, dtype=np.float64)
        for i, (lo, hi) in enumerate(zip(self._min_angles, self._max_angles)):
            value = shifted[i]
            if lo <= value <= hi:
                continue
            # smallest equivalent angle not below the minimum
            candidate = value + TWO_PI * math.ceil((lo - value) / TWO_PI)
            if candidate <= hi:
                shifted[i] = candidate
        return shifted

    def clip(self, solution: np.ndarray) -> np.ndarray:
        return np.clip(solution, self._min_angles, self._max_angles)

    def __repr__(self):
        return f"<JointLimits: min={self._min_angles.tolist()} max={self._max_angles.tolist()}>"
