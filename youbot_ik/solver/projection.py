"""
Projection of an arbitrary goal pose onto the orientations the arm can reach

The arm can only point its tool inside the vertical plane through the base
axis and the target (the arm plane), and roll about that direction. Any
out-of-plane component of the approach axis ("yaw") is removed by the
smallest rotation that brings the approach axis back into the plane.
"""
import math
import numpy as np

from ..model import Pose, ArmGeometry

# Below this the approach axis is treated as normal to the arm plane
DEGENERATE_NORM = 1e-9


def base_angle(position: np.ndarray, geometry: ArmGeometry) -> float:
    """
    Direction of the target seen from the joint 1 axis, atan2(y1, x1).
    Returns 0 for targets on the axis itself.
    """
    x1 = position[0] - geometry.l0x
    y1 = position[1]
    return math.atan2(y1, x1)


def arm_plane_normal(position: np.ndarray, geometry: ArmGeometry) -> np.ndarray:
    theta = base_angle(position, geometry)
    return np.array([-math.sin(theta), math.cos(theta), 0.0])


def project_goal_into_arm_subspace(goal: Pose, geometry: ArmGeometry = ArmGeometry()) -> Pose:
    """
    Closest pose to ``goal`` whose approach axis lies in the arm plane

    :param goal: requested tool pose
    :param geometry: arm dimensions (only the base offset matters here)
    :return: pose with the same position and roll, zero yaw
    """
    y_t_hat = goal.rotation[:, 1]
    z_t_hat = goal.rotation[:, 2]

    m_hat = arm_plane_normal(goal.position, geometry)

    # rotation axis, lies in the arm plane and is orthogonal to the approach axis
    k_hat = np.cross(m_hat, z_t_hat)
    k_norm = np.linalg.norm(k_hat)
    if k_norm < DEGENERATE_NORM:
        # approach axis is the plane normal, y is already in-plane
        k_hat = y_t_hat / np.linalg.norm(y_t_hat)
    else:
        k_hat = k_hat / k_norm

    z_t_hat_tick = np.cross(k_hat, m_hat)
    z_t_hat_tick = z_t_hat_tick / np.linalg.norm(z_t_hat_tick)

    cos_theta = float(np.dot(z_t_hat, z_t_hat_tick))
    sin_theta = float(np.dot(np.cross(z_t_hat, z_t_hat_tick), k_hat))

    # Rodrigues' rotation of the y axis about k_hat
    y_t_hat_tick = (cos_theta * y_t_hat
                    + sin_theta * np.cross(k_hat, y_t_hat)
                    + (1.0 - cos_theta) * np.dot(k_hat, y_t_hat) * k_hat)
    y_t_hat_tick = y_t_hat_tick / np.linalg.norm(y_t_hat_tick)
    x_t_hat_tick = np.cross(y_t_hat_tick, z_t_hat_tick)

    rotation = np.column_stack([x_t_hat_tick, y_t_hat_tick, z_t_hat_tick])
    return Pose(goal.position, rotation)
