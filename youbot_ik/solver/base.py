"""
Common contract of the IK solver variants
"""
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..model import Pose, JointLimits, DEFAULT_JOINT_NAMES, NUM_JOINTS


@dataclass(frozen=True)
class SolverInfo:
    """
    Introspection data: joint names come from the caller, limits from the solver.
    """
    joint_names: Tuple[str, ...]
    min_angles: Tuple[float, ...]
    max_angles: Tuple[float, ...]


class InverseKinematicsSolver(ABC):
    """
    Abstract IK solver: Cartesian pose in, list of joint vectors out.
    """

    def __init__(self, limits: JointLimits, joint_names: Sequence[str] = DEFAULT_JOINT_NAMES):
        if len(joint_names) != NUM_JOINTS:
            raise ValueError(f"Expected {NUM_JOINTS} joint names, got {len(joint_names)}")
        self._limits = limits
        self._joint_names = tuple(joint_names)

    @property
    def limits(self) -> JointLimits:
        return self._limits

    @abstractmethod
    def cart_to_jnt(self, q_init: Sequence[float], goal: Pose) -> List[np.ndarray]:
        """
        Solve for the joint vectors that reach ``goal``

        :param q_init: initial joint vector (5 values)
        :param goal: requested end-effector pose
        :return: joint vectors inside the limits, empty if the pose is unreachable
        """
        pass

    def is_solution_valid(self, solution: Sequence[float]) -> bool:
        return self._limits.is_valid(solution)

    def get_solver_info(self) -> SolverInfo:
        return SolverInfo(
            joint_names=self._joint_names,
            min_angles=tuple(float(v) for v in self._limits.min_angles),
            max_angles=tuple(float(v) for v in self._limits.max_angles),
        )

    def __repr__(self):
        return f"<{self.__class__.__name__}: {self._limits!r}>"


def closest_solution(solutions: Sequence[np.ndarray], q_init: Sequence[float]) -> Optional[np.ndarray]:
    """
    Candidate with the smallest Euclidean joint-space distance to ``q_init``;
    the first one wins on ties. None for an empty list.
    """
    if len(solutions) == 0:
        return None
    q_init = np.asarray(q_init, dtype=np.float64)
    distances = [np.linalg.norm(np.asarray(q) - q_init) for q in solutions]
    return solutions[int(np.argmin(distances))]
