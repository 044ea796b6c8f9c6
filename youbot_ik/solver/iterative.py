"""
Iterative IK solver variant
Damped Least Squares (DLS) with backtracking line search on the arm chain
"""
import logging
import numpy as np
from scipy.spatial.transform import Rotation as R
from typing import List, Optional, Sequence

from ..model import (ArmChain, ArmGeometry, JointLimits, JointNode, Pose, DEFAULT_JOINT_NAMES,
                     as_joint_vector, build_arm_chain, collect_ik_chain)
from .base import InverseKinematicsSolver
from .projection import project_goal_into_arm_subspace

logger = logging.getLogger(__name__)


def compute_jacobian(ik_chain: List[JointNode], end_effector_pos: np.ndarray) -> np.ndarray:
    """
    6xN Jacobian of the chain at its current configuration
    """
    jacobian = np.zeros((6, len(ik_chain)), dtype=np.float64)
    for col_idx, node in enumerate(ik_chain):
        if node.get_dof() != 1:
            raise ValueError(f"Unexpected DoF: {node.get_dof()} for node {node.name}")
        jacobian[:, col_idx] = node.compute_jacobian_column(end_effector_pos)
    return jacobian


def compute_error_vector(current_transform: np.ndarray, target_transform: np.ndarray) -> np.ndarray:
    """
    6x1 error [delta_p, delta_r] between two 4x4 transforms; the rotational part
    is the rotation vector of R_target * R_current^T
    """
    delta_p = target_transform[:3, 3] - current_transform[:3, 3]
    R_error_mat = target_transform[:3, :3] @ current_transform[:3, :3].T
    delta_r = R.from_matrix(R_error_mat).as_rotvec()
    return np.concatenate([delta_p, delta_r])


class IterativeSolver(InverseKinematicsSolver):
    """
    Numerical solver sharing the analytical solver's contract. It returns at
    most one solution: the configuration DLS converges to from ``q_init``.
    """

    def __init__(self, min_angles: Sequence[float], max_angles: Sequence[float],
                 geometry: Optional[ArmGeometry] = None,
                 joint_names: Sequence[str] = DEFAULT_JOINT_NAMES,
                 max_iterations: int = 100,
                 position_tolerance: float = 1e-3,
                 orientation_tolerance: float = 1e-2,
                 damping: float = 1e-4,
                 enable_line_search: bool = True,
                 line_search_alpha: float = 1.0,
                 line_search_alpha_min: float = 1e-2):
        """
        :param max_iterations: iteration cap
        :param position_tolerance: convergence tolerance on position (m)
        :param orientation_tolerance: convergence tolerance on orientation (rad)
        :param damping: DLS damping lambda
        :param enable_line_search: halve the step until the error decreases
        :param line_search_alpha: initial step scale
        :param line_search_alpha_min: give up once the step gets smaller than this
        """
        super().__init__(JointLimits(min_angles, max_angles), joint_names)
        self.geometry = geometry or ArmGeometry()
        self.max_iterations = max(int(max_iterations), 1)
        self.position_tolerance = position_tolerance
        self.orientation_tolerance = orientation_tolerance
        self.damping = damping
        self.enable_line_search = enable_line_search
        self.line_search_alpha = line_search_alpha
        self.line_search_alpha_min = line_search_alpha_min

    def cart_to_jnt(self, q_init: Sequence[float], goal: Pose) -> List[np.ndarray]:
        """
        Runs DLS from the clipped ``q_init`` on a chain built for this call,
        so one solver can serve concurrent callers.
        """
        q_init = self._limits.clip(as_joint_vector(q_init, "q_init"))
        target = project_goal_into_arm_subspace(goal, self.geometry).as_matrix()

        chain = build_arm_chain(self.geometry, self._limits, self._joint_names)
        chain.set_joint_positions(q_init)
        if not self._solve(chain, target):
            logger.debug("DLS did not converge for %r", goal)
            return []

        solution = chain.joint_positions()
        if not self.is_solution_valid(solution):
            return []
        return [solution]

    def _converged(self, delta_x: np.ndarray) -> bool:
        return bool(np.linalg.norm(delta_x[:3]) < self.position_tolerance
                    and np.linalg.norm(delta_x[3:]) < self.orientation_tolerance)

    @staticmethod
    def _restore(root: JointNode, ik_chain: List[JointNode], states: np.ndarray):
        for node, q in zip(ik_chain, states):
            node.q = float(q)
        root.update_global_transform()

    def _solve(self, chain: ArmChain, target_transform: np.ndarray) -> bool:
        """
        :return: True once both tolerances are met, False otherwise (chain left at the best state)
        """
        root = chain.root
        effector = chain.effector
        ik_chain = collect_ik_chain(root, effector)
        identity_6x6 = np.identity(6, dtype=np.float64)

        root.update_global_transform()

        for iteration in range(self.max_iterations):
            best_states = np.array([node.q for node in ik_chain])

            delta_x = compute_error_vector(effector.global_transform, target_transform)
            current_error_norm = np.linalg.norm(delta_x)

            if self._converged(delta_x):
                logger.debug("DLS converged after %d iteration(s)", iteration)
                return True

            J = compute_jacobian(ik_chain, effector.global_transform[:3, 3])

            # A = J * J^T + lambda * I, solve A * beta = dx
            A = J @ J.T + self.damping * identity_6x6
            try:
                beta = np.linalg.solve(A, delta_x)
            except np.linalg.LinAlgError:
                beta = np.linalg.lstsq(A, delta_x, rcond=None)[0]

            delta_q = J.T @ beta

            if self.enable_line_search:
                alpha = self.line_search_alpha
                while True:
                    self._restore(root, ik_chain, best_states)
                    for i, node in enumerate(ik_chain):
                        node.apply_delta(alpha * delta_q[i])
                    root.update_global_transform()

                    new_delta_x = compute_error_vector(effector.global_transform, target_transform)
                    if np.linalg.norm(new_delta_x) < current_error_norm:
                        break

                    alpha = alpha / 2.0
                    if alpha < self.line_search_alpha_min:
                        self._restore(root, ik_chain, best_states)
                        return False
            else:
                # cap the step near singularities
                delta_q_norm = np.linalg.norm(delta_q)
                if delta_q_norm > 1.0:
                    delta_q = delta_q / delta_q_norm

                for i, node in enumerate(ik_chain):
                    node.apply_delta(delta_q[i])
                root.update_global_transform()

        return self._converged(compute_error_vector(effector.global_transform, target_transform))
