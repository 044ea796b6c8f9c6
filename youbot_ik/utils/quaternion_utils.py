"""
Quaternion helpers used by the joint chain
"""
import numpy as np
from typing import Union


def axis_angle_to_quaternion(axis: Union[np.ndarray, list, tuple], angle: float) -> np.ndarray:
    """
    Build the unit quaternion of a rotation by ``angle`` about ``axis``

    :param axis: rotation axis (normalized here)
    :param angle: rotation angle in radians
    :return: quaternion [w, x, y, z]
    """
    axis = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if norm < 1e-10:
        raise ValueError(f"Rotation axis too small to normalize: {axis}")
    axis = axis / norm

    half_angle = angle / 2.0
    xyz = axis * np.sin(half_angle)
    return np.array([np.cos(half_angle), xyz[0], xyz[1], xyz[2]], dtype=np.float64)


def quaternion_to_rotation_matrix(quaternion: Union[np.ndarray, list, tuple]) -> np.ndarray:
    """
    Convert a quaternion into a rotation matrix

    :param quaternion: quaternion as [w, x, y, z]
    :return: 3x3 rotation matrix
    """
    quaternion = np.asarray(quaternion, dtype=np.float64)

    if quaternion.shape != (4,):
        raise ValueError(f"Quaternion must be a 4-element array, got shape {quaternion.shape}")

    norm = np.linalg.norm(quaternion)
    if norm < 1e-10:
        raise ValueError(f"Quaternion norm too small: {norm}, cannot normalize")
    w, x, y, z = quaternion / norm

    return np.array([
        [1 - 2 * (y * y + z * z),     2 * (x * y - w * z),     2 * (x * z + w * y)],
        [    2 * (x * y + w * z), 1 - 2 * (x * x + z * z),     2 * (y * z - w * x)],
        [    2 * (x * z - w * y),     2 * (y * z + w * x), 1 - 2 * (x * x + y * y)]
    ], dtype=np.float64)
