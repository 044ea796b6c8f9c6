"""
Joint node hierarchy for the arm's forward-kinematics chain
"""
import numpy as np
from abc import ABC, abstractmethod
from typing import Optional, Tuple, List

from ..utils import axis_angle_to_quaternion, quaternion_to_rotation_matrix


class JointNode(ABC):
    """
    Abstract base of all chain nodes.
    """

    def __init__(self, name: str, offset: np.ndarray):
        """
        :param name: joint name
        :param offset: static translation relative to the parent (Vec3)
        """
        self.name = name
        self.parent: Optional['JointNode'] = None
        self.children: List['JointNode'] = []
        self.local_offset: np.ndarray = np.asarray(offset, dtype=np.float64)
        self.global_transform: np.ndarray = np.identity(4, dtype=np.float64)

    def add_child(self, child: 'JointNode') -> 'JointNode':
        """Attach ``child`` below this node and return it, so chains can be built fluently."""
        child.parent = self
        self.children.append(child)
        return child

    @abstractmethod
    def get_local_matrix(self) -> np.ndarray:
        """
        Local transform from the current joint variable.

        :return: 4x4 local transform
        """
        pass

    @abstractmethod
    def compute_jacobian_column(self, end_effector_pos: np.ndarray) -> np.ndarray:
        """
        6x1 Jacobian column of this joint (linear part first, then angular).

        :param end_effector_pos: end-effector position in the world frame
        """
        pass

    @abstractmethod
    def apply_delta(self, delta_q: float):
        """
        Add a solver increment to the joint variable and enforce limits.
        """
        pass

    @abstractmethod
    def get_dof(self) -> int:
        pass

    @abstractmethod
    def append_to_ik_chain(self, ik_chain: List['JointNode']):
        """
        Append the node's controllable joints to ``ik_chain`` (modified in place).
        """
        pass

    def update_global_transform(self):
        """
        Recursively refresh global_transform of this node and its subtree.
        """
        local_transform = self.get_local_matrix()

        if self.parent is None:
            self.global_transform = local_transform
        else:
            self.global_transform = self.parent.global_transform @ local_transform

        for child in self.children:
            child.update_global_transform()

    def __repr__(self):
        return f"<{self.__class__.__name__}: {self.name}>"


class RevoluteJoint(JointNode):
    """
    Hinge rotating about a fixed local axis
    """

    def __init__(self, name: str, offset: np.ndarray, axis: np.ndarray,
                 limits: Optional[Tuple[float, float]] = None):
        """
        :param name: joint name
        :param offset: static translation relative to the parent (Vec3)
        :param axis: rotation axis in the local frame, normalized here
        :param limits: (min, max) in radians, None for unbounded
        """
        super().__init__(name, offset)
        self.axis = np.asarray(axis, dtype=np.float64)
        axis_norm = np.linalg.norm(self.axis)
        if axis_norm > 1e-6:
            self.axis = self.axis / axis_norm
        else:
            raise ValueError(f"Axis vector is too small to be normalized: {self.axis}")
        self.q: float = 0.0
        self.limits: Optional[Tuple[float, float]] = limits

    def get_local_matrix(self) -> np.ndarray:
        """Translate by the offset, then rotate by q about the axis."""
        local_transform = np.identity(4, dtype=np.float64)
        local_transform[:3, :3] = quaternion_to_rotation_matrix(
            axis_angle_to_quaternion(self.axis, self.q))
        local_transform[:3, 3] = self.local_offset
        return local_transform

    def compute_jacobian_column(self, end_effector_pos: np.ndarray) -> np.ndarray:
        """
        J_i = [z_i x (p_end - p_i), z_i], everything in the world frame
        """
        R_world = self.global_transform[:3, :3]
        z_i = R_world @ self.axis
        z_i = z_i / np.linalg.norm(z_i)

        p_i = self.global_transform[:3, 3]
        J_v = np.cross(z_i, end_effector_pos - p_i)
        return np.concatenate([J_v, z_i])

    def apply_delta(self, delta_q: float):
        self.q += delta_q
        if self.limits is not None:
            min_val, max_val = self.limits
            self.q = float(np.clip(self.q, min_val, max_val))

    def get_dof(self) -> int:
        return 1

    def append_to_ik_chain(self, ik_chain: List['JointNode']):
        ik_chain.append(self)


class FixedJoint(JointNode):
    """
    Rigid connection without a variable (base frame, tool point)
    """

    def get_local_matrix(self) -> np.ndarray:
        local_transform = np.identity(4, dtype=np.float64)
        local_transform[:3, 3] = self.local_offset
        return local_transform

    def compute_jacobian_column(self, end_effector_pos: np.ndarray) -> np.ndarray:
        raise NotImplementedError("FixedJoint has no Jacobian column; check how the IK chain was built")

    def apply_delta(self, delta_q: float):
        pass

    def get_dof(self) -> int:
        return 0

    def append_to_ik_chain(self, ik_chain: List['JointNode']):
        """Fixed joints are skipped."""
        pass
