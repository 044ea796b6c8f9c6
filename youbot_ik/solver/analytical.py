"""
Closed-form IK solver for the 5-DOF arm

Geometric decomposition:
- Joint 1 sets the pointing direction of the arm. It only depends on the
  x-y projection of the target, which leaves the remaining joints working in
  a vertical plane (the arm plane).
- Joints 2 and 3 place the wrist (joint 4) at the right height and distance in
  that plane: a 2-link planar problem with an elbow-up / elbow-down pair.
  The wrist point depends on the requested pitch.
- Joint 4 supplies the rest of the pitch, q2 + q3 + q4 = pitch.
- Joint 5 is the roll about the approach axis. Roll and roll + pi both work.
"""
import logging
import math
import numpy as np
from typing import List, Optional, Sequence

from ..model import ArmGeometry, JointLimits, Pose, DEFAULT_JOINT_NAMES, as_joint_vector
from ..utils import guarded_acos, wrap_angle
from .base import InverseKinematicsSolver
from .branch import RedundancyBranch
from .projection import base_angle, project_goal_into_arm_subspace

logger = logging.getLogger(__name__)

# Rotation entries smaller than this are zeroed before extracting angles
ZERO_THRESHOLD = 1e-10


def _rot_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


class AnalyticalSolver(InverseKinematicsSolver):
    """
    Analytical IK for the youBot-style arm. Solves position plus roll and
    pitch; yaw is dropped by projecting the goal first.
    """

    def __init__(self, min_angles: Sequence[float], max_angles: Sequence[float],
                 geometry: Optional[ArmGeometry] = None,
                 joint_names: Sequence[str] = DEFAULT_JOINT_NAMES):
        """
        :param min_angles: minimum joint limits [rad], 5 values
        :param max_angles: maximum joint limits [rad], 5 values
        :param geometry: link dimensions, youBot defaults if None
        :param joint_names: names reported by get_solver_info
        :raises ValueError: if the limits are malformed
        """
        super().__init__(JointLimits(min_angles, max_angles), joint_names)
        self.geometry = geometry or ArmGeometry()

    def project_goal(self, goal: Pose) -> Pose:
        return project_goal_into_arm_subspace(goal, self.geometry)

    def cart_to_jnt(self, q_init: Sequence[float], goal: Pose) -> List[np.ndarray]:
        """
        All branch solutions of ``goal`` that respect the joint limits, in
        RedundancyBranch order. Angles are moved by 2*pi where that brings
        them inside the limits. ``q_init`` is only checked for its size.
        """
        as_joint_vector(q_init, "q_init")
        projected = self.project_goal(goal)

        solutions: List[np.ndarray] = []
        for branch in RedundancyBranch:
            solution = self.solve_branch(projected, branch)
            if solution is None:
                continue
            solution = self._limits.shift_into_range(solution)
            if not self.is_solution_valid(solution):
                logger.debug("branch %s outside joint limits: %s", branch.name, solution)
                continue
            solutions.append(solution)

        logger.debug("%d solution(s) for %r", len(solutions), goal)
        return solutions

    def solve_branch(self, pose: Pose, branch: RedundancyBranch) -> Optional[np.ndarray]:
        """
        Closed-form solution of one redundancy branch

        ``pose`` must already be projected into the arm subspace.

        :param pose: tool pose in the base frame
        :param branch: which of the redundant alternatives to compute
        :return: (5,) joint vector, or None if the branch cannot reach the pose
        """
        g = self.geometry

        # frame 1: joint 1 axis
        p1 = pose.position - np.array([g.l0x, 0.0, g.l0z])

        j1 = base_angle(pose.position, g)
        if branch.offset_joint_1:
            j1 += math.pi

        # frame 2: joint 2 axis, rotated into the arm plane
        rz_inv = _rot_z(j1).T
        p2 = rz_inv @ p1 - np.array([g.l1x, 0.0, g.l1z])
        rot2 = rz_inv @ pose.rotation
        rot2[np.abs(rot2) < ZERO_THRESHOLD] = 0.0

        # q2 + q3 + q4 is the overall pitch of the tool
        j234 = math.atan2(rot2[0, 2], rot2[2, 2])

        # wrist point, one tool length back along the approach axis
        x4 = p2[0] - g.d * math.sin(j234)
        z4 = p2[2] - g.d * math.cos(j234)

        j3_cos = (x4 * x4 + z4 * z4 - g.l2 * g.l2 - g.l3 * g.l3) / (2.0 * g.l2 * g.l3)
        j3 = guarded_acos(j3_cos)
        if j3 is None:
            logger.debug("branch %s unreachable: cos(q3) = %.6f", branch.name, j3_cos)
            return None
        if branch.offset_joint_3:
            j3 = -j3

        j2 = math.atan2(x4, z4) - math.atan2(g.l3 * math.sin(j3), g.l2 + g.l3 * math.cos(j3))

        j4 = j234 - j2 - j3

        j5 = math.atan2(rot2[1, 0], rot2[1, 1])
        if branch.offset_joint_5:
            j5 += math.pi

        return np.array([wrap_angle(j) for j in (j1, j2, j3, j4, j5)], dtype=np.float64)
