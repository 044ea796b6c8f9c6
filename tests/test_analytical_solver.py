import math

import numpy as np
import pytest

from youbot_ik import AnalyticalSolver, Pose, RedundancyBranch, forward_kinematics
from youbot_ik.utils import wrap_angle

FULL_RANGE_MIN = [-math.pi] * 5
FULL_RANGE_MAX = [math.pi] * 5


def contains(solutions, expected, atol=1e-8):
    return any(np.allclose(q, expected, atol=atol) for q in solutions)


def assert_reaches(q, pose, atol=1e-6):
    fk = forward_kinematics(q)
    np.testing.assert_allclose(fk.position, pose.position, atol=atol)
    # approach axis must match; the y axis matches up to the roll flip
    np.testing.assert_allclose(fk.approach, pose.approach, atol=atol)
    assert abs(abs(np.dot(fk.rotation[:, 1], pose.rotation[:, 1])) - 1.0) < atol


def test_reachable_example_pose(solver, q_zero):
    pose = Pose.from_xyz_rpy(0.3, 0.0, 0.2)
    solutions = solver.cart_to_jnt(q_zero, pose)

    # base turned away cannot reach, leaving two elbows times two rolls
    assert len(solutions) == 4
    for q in solutions:
        assert q.shape == (5,)
        assert_reaches(q, pose)


def test_unreachable_pose_gives_empty_result(solver, q_zero):
    pose = Pose.from_xyz_rpy(1.5, 0.0, 0.2)
    assert solver.cart_to_jnt(q_zero, pose) == []
    for branch in RedundancyBranch:
        assert solver.solve_branch(pose, branch) is None


def wrist_in_front_pose(geometry, wrist_distance):
    # pitch 0: the wrist sits one tool length below the target, level with joint 2
    return Pose.from_xyz_rpy(geometry.l0x + geometry.l1x + wrist_distance, 0.0,
                             geometry.l0z + geometry.l1z + geometry.d)


def test_reach_limit_of_the_planar_sub_chain(solver, q_zero):
    reach = solver.geometry.max_reach

    inside = wrist_in_front_pose(solver.geometry, reach - 0.01)
    solutions = solver.cart_to_jnt(q_zero, inside)
    assert solutions
    for q in solutions:
        assert_reaches(q, inside)

    beyond = wrist_in_front_pose(solver.geometry, reach + 0.01)
    assert solver.cart_to_jnt(q_zero, beyond) == []


def test_solutions_are_shifted_into_limits_beyond_pi():
    two_pi = 2.0 * math.pi
    solver = AnalyticalSolver([0.0] + FULL_RANGE_MIN[1:], [two_pi] + FULL_RANGE_MAX[1:])
    q_expected = [-0.7, 0.4, 0.6, 0.5, 0.3]
    goal = forward_kinematics(q_expected)

    solutions = solver.cart_to_jnt(np.zeros(5), goal)

    assert contains(solutions, [-0.7 + two_pi, 0.4, 0.6, 0.5, 0.3])
    for q in solutions:
        assert 0.0 <= q[0] <= two_pi
        assert_reaches(q, goal)


def test_results_are_deterministic(solver, q_zero):
    pose = Pose.from_xyz_rpy(0.1, 0.25, 0.15, 0.0, 1.0, 0.0)
    first = solver.cart_to_jnt(q_zero, pose)
    second = solver.cart_to_jnt(q_zero, pose)
    assert len(first) == len(second) > 0
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)


def test_initial_guess_does_not_bias_result(solver, q_zero):
    pose = Pose.from_xyz_rpy(0.3, 0.0, 0.2)
    reference = solver.cart_to_jnt(q_zero, pose)
    other = solver.cart_to_jnt([1.0, -0.5, 2.0, 0.1, -3.0], pose)
    assert len(reference) == len(other)
    for a, b in zip(reference, other):
        np.testing.assert_array_equal(a, b)


def test_generic_configuration_is_recovered(solver, q_zero, q_generic):
    pose = forward_kinematics(q_generic)
    solutions = solver.cart_to_jnt(q_zero, pose)

    assert contains(solutions, q_generic)
    for q in solutions:
        assert_reaches(q, pose)


def test_roll_ambiguity(solver, q_zero, q_generic):
    solutions = solver.cart_to_jnt(q_zero, forward_kinematics(q_generic))

    flipped = q_generic.copy()
    flipped[4] = wrap_angle(q_generic[4] + math.pi)
    assert contains(solutions, q_generic)
    assert contains(solutions, flipped)


def test_elbow_redundancy(solver, q_zero):
    pose = Pose.from_xyz_rpy(0.3, 0.0, 0.2)
    solutions = solver.cart_to_jnt(q_zero, pose)

    elbows = {bool(q[2] > 0) for q in solutions}
    assert elbows == {True, False}


def test_base_pointing_redundancy(solver, q_zero):
    # close to the base axis both pointing directions reach the target
    pose = Pose.from_xyz_rpy(0.074, 0.0, 0.4)
    solutions = solver.cart_to_jnt(q_zero, pose)

    assert any(abs(q[0]) < 1e-9 for q in solutions)
    assert any(abs(abs(q[0]) - math.pi) < 1e-9 for q in solutions)
    for q in solutions:
        assert_reaches(q, pose)


def test_solutions_follow_branch_order(solver, q_zero):
    pose = Pose.from_xyz_rpy(0.074, 0.0, 0.4)
    projected = solver.project_goal(pose)
    expected = [q for q in (solver.solve_branch(projected, b) for b in RedundancyBranch) if q is not None]

    solutions = solver.cart_to_jnt(q_zero, pose)
    assert len(solutions) == len(expected) == 8
    for a, b in zip(solutions, expected):
        np.testing.assert_array_equal(a, b)


def test_joint_limits_filter_candidates(q_zero):
    min_angles = list(FULL_RANGE_MIN)
    min_angles[2] = 0.0
    narrow = AnalyticalSolver(min_angles, FULL_RANGE_MAX)

    solutions = narrow.cart_to_jnt(q_zero, Pose.from_xyz_rpy(0.3, 0.0, 0.2))
    assert len(solutions) == 2
    for q in solutions:
        assert q[2] >= 0.0
        assert narrow.is_solution_valid(q)


def test_no_solution_when_limits_exclude_every_branch(q_zero):
    tight = AnalyticalSolver([-0.01] * 5, [0.01] * 5)
    assert tight.cart_to_jnt(q_zero, Pose.from_xyz_rpy(0.3, 0.0, 0.2)) == []


def test_fully_extended_arm(solver, q_zero):
    pose = forward_kinematics(q_zero)
    solutions = solver.cart_to_jnt(q_zero, pose)

    assert solutions
    assert all(np.all(np.isfinite(q)) for q in solutions)
    assert contains(solutions, q_zero, atol=1e-7)
    for q in solutions:
        assert q[2] == 0.0
        assert_reaches(q, pose)


def test_fully_folded_arm(solver, q_zero):
    folded = np.array([0.0, 0.3, math.pi, 0.0, 0.0])
    pose = forward_kinematics(folded)
    solutions = solver.cart_to_jnt(q_zero, pose)

    assert solutions
    assert any(abs(abs(q[2]) - math.pi) < 1e-12 for q in solutions)
    for q in solutions:
        np.testing.assert_allclose(forward_kinematics(q).position, pose.position, atol=1e-6)


def test_yaw_is_discarded(solver, q_zero, q_generic):
    from scipy.spatial.transform import Rotation as R
    from youbot_ik.solver.projection import arm_plane_normal

    pose = forward_kinematics(q_generic)
    m_hat = arm_plane_normal(pose.position, solver.geometry)
    k_hat = np.cross(m_hat, pose.approach)
    k_hat = k_hat / np.linalg.norm(k_hat)
    tilted = Pose(pose.position, R.from_rotvec(0.3 * k_hat).as_matrix() @ pose.rotation)

    solutions = solver.cart_to_jnt(q_zero, tilted)
    assert contains(solutions, q_generic)


def test_invalid_construction():
    with pytest.raises(ValueError):
        AnalyticalSolver([-1.0] * 4, [1.0] * 5)
    with pytest.raises(ValueError):
        AnalyticalSolver([-1.0] * 5, [1.0] * 6)
    with pytest.raises(ValueError):
        AnalyticalSolver([1.0] * 5, [-1.0] * 5)


def test_initial_guess_must_have_five_joints(solver):
    with pytest.raises(ValueError):
        solver.cart_to_jnt([0.0, 0.0, 0.0], Pose.from_xyz_rpy(0.3, 0.0, 0.2))


def test_solver_info_reports_limits(solver):
    info = solver.get_solver_info()
    assert info.joint_names == ("arm_joint_1", "arm_joint_2", "arm_joint_3", "arm_joint_4", "arm_joint_5")
    assert info.min_angles == tuple(FULL_RANGE_MIN)
    assert info.max_angles == tuple(FULL_RANGE_MAX)
