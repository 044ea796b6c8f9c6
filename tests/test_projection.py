import math

import numpy as np

from youbot_ik import ArmGeometry, Pose, forward_kinematics, project_goal_into_arm_subspace
from youbot_ik.solver.projection import arm_plane_normal, base_angle


def assert_rotation(matrix):
    np.testing.assert_allclose(matrix.T @ matrix, np.identity(3), atol=1e-12)
    assert abs(np.linalg.det(matrix) - 1.0) < 1e-12


def test_reachable_orientation_is_unchanged(q_generic):
    pose = forward_kinematics(q_generic)
    projected = project_goal_into_arm_subspace(pose)

    np.testing.assert_allclose(projected.rotation, pose.rotation, atol=1e-12)
    np.testing.assert_array_equal(projected.position, pose.position)


def test_approach_axis_lands_in_arm_plane():
    geometry = ArmGeometry()
    goal = Pose.from_xyz_rpy(0.2, 0.1, 0.3, 0.1, 0.4, 0.7)
    projected = project_goal_into_arm_subspace(goal, geometry)

    m_hat = arm_plane_normal(goal.position, geometry)
    assert abs(np.dot(projected.approach, m_hat)) < 1e-12
    assert_rotation(projected.rotation)
    np.testing.assert_array_equal(projected.position, goal.position)


def test_projection_is_idempotent():
    goal = Pose.from_xyz_rpy(-0.1, 0.2, 0.25, 0.5, -0.3, 1.2)
    once = project_goal_into_arm_subspace(goal)
    twice = project_goal_into_arm_subspace(once)
    np.testing.assert_allclose(twice.rotation, once.rotation, atol=1e-12)


def test_approach_normal_to_plane():
    # x = 0.3 keeps the arm plane at y = 0, roll -pi/2 points the tool along +y
    goal = Pose.from_xyz_rpy(0.3, 0.0, 0.2, -math.pi / 2, 0.0, 0.0)
    np.testing.assert_allclose(goal.approach, [0.0, 1.0, 0.0], atol=1e-12)

    projected = project_goal_into_arm_subspace(goal)
    assert abs(projected.approach[1]) < 1e-12
    assert_rotation(projected.rotation)


def test_base_angle_on_axis_is_zero():
    geometry = ArmGeometry()
    assert base_angle(np.array([geometry.l0x, 0.0, 0.5]), geometry) == 0.0
