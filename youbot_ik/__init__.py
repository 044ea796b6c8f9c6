"""
Closed-form inverse kinematics for a 5-DOF youBot-style arm
"""

from .model import ArmGeometry, JointLimits, Pose, forward_kinematics
from .solver import (AnalyticalSolver, IterativeSolver, InverseKinematicsSolver,
                     RedundancyBranch, SolverInfo, closest_solution, create_solver,
                     project_goal_into_arm_subspace)

__version__ = "0.1.0"

__all__ = [
    'ArmGeometry',
    'JointLimits',
    'Pose',
    'forward_kinematics',
    'AnalyticalSolver',
    'IterativeSolver',
    'InverseKinematicsSolver',
    'RedundancyBranch',
    'SolverInfo',
    'closest_solution',
    'create_solver',
    'project_goal_into_arm_subspace'
]
