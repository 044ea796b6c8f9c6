"""
Kinematic chain of the 5-DOF arm and its forward kinematics

Chain (translate, then rotate at each joint):
    base -> Rz(q1) -> Ry(q2) -> Ry(q3) -> Ry(q4) -> Rz(q5) -> tool
"""
import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .arm import ArmGeometry, JointLimits, DEFAULT_JOINT_NAMES, as_joint_vector
from .joint import JointNode, FixedJoint, RevoluteJoint
from .pose import Pose

Z_AXIS = np.array([0.0, 0.0, 1.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])


@dataclass
class ArmChain:
    root: JointNode
    effector: JointNode
    joints: List[RevoluteJoint]

    def set_joint_positions(self, q: Sequence[float]):
        q = as_joint_vector(q)
        for joint, value in zip(self.joints, q):
            joint.q = float(value)
        self.root.update_global_transform()

    def joint_positions(self) -> np.ndarray:
        return np.array([joint.q for joint in self.joints], dtype=np.float64)

    def effector_pose(self) -> Pose:
        return Pose.from_matrix(self.effector.global_transform)


def build_arm_chain(geometry: Optional[ArmGeometry] = None,
                    limits: Optional[JointLimits] = None,
                    joint_names: Sequence[str] = DEFAULT_JOINT_NAMES) -> ArmChain:
    """
    Build the node chain for the given link geometry

    :param geometry: link dimensions, youBot defaults if None
    :param limits: optional joint limits copied onto the revolute joints
    :param joint_names: names of the 5 revolute joints
    """
    geometry = geometry or ArmGeometry()
    if len(joint_names) != len(DEFAULT_JOINT_NAMES):
        raise ValueError(f"Expected {len(DEFAULT_JOINT_NAMES)} joint names, got {len(joint_names)}")

    links = [
        ([geometry.l0x, 0.0, geometry.l0z], Z_AXIS),
        ([geometry.l1x, 0.0, geometry.l1z], Y_AXIS),
        ([0.0, 0.0, geometry.l2], Y_AXIS),
        ([0.0, 0.0, geometry.l3], Y_AXIS),
        ([0.0, 0.0, geometry.d], Z_AXIS),
    ]

    root = FixedJoint("arm_base", np.zeros(3))
    node: JointNode = root
    joints: List[RevoluteJoint] = []
    for i, (name, (offset, axis)) in enumerate(zip(joint_names, links)):
        joint_limits = None
        if limits is not None:
            joint_limits = (float(limits.min_angles[i]), float(limits.max_angles[i]))
        node = node.add_child(RevoluteJoint(name, np.array(offset), axis, joint_limits))
        joints.append(node)
    effector = node.add_child(FixedJoint("arm_tool", np.zeros(3)))

    root.update_global_transform()
    return ArmChain(root=root, effector=effector, joints=joints)


def collect_ik_chain(root: JointNode, effector: JointNode) -> List[JointNode]:
    """
    Controllable joints on the path from ``root`` to ``effector``, root first.
    """
    path: List[JointNode] = []
    current = effector
    while current is not None:
        path.append(current)
        if current is root:
            break
        current = current.parent

    if path[-1] is not root:
        raise ValueError(f"Cannot find path from {root.name} to {effector.name}")
    path.reverse()

    ik_chain: List[JointNode] = []
    for node in path:
        node.append_to_ik_chain(ik_chain)
    return ik_chain


def forward_kinematics(q: Sequence[float], geometry: Optional[ArmGeometry] = None) -> Pose:
    """Tool pose for joint vector ``q``."""
    chain = build_arm_chain(geometry)
    chain.set_joint_positions(q)
    return chain.effector_pose()
