"""
Model layer: poses, arm description and the forward-kinematics chain
"""

from .arm import NUM_JOINTS, DEFAULT_JOINT_NAMES, ArmGeometry, JointLimits, as_joint_vector
from .chain import ArmChain, build_arm_chain, collect_ik_chain, forward_kinematics
from .joint import JointNode, FixedJoint, RevoluteJoint
from .pose import Pose

__all__ = [
    'NUM_JOINTS',
    'DEFAULT_JOINT_NAMES',
    'ArmGeometry',
    'JointLimits',
    'as_joint_vector',
    'ArmChain',
    'build_arm_chain',
    'collect_ik_chain',
    'forward_kinematics',
    'JointNode',
    'FixedJoint',
    'RevoluteJoint',
    'Pose'
]
