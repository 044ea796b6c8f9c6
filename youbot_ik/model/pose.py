"""
End-effector pose value type
"""
import numpy as np
from dataclasses import dataclass
from scipy.spatial.transform import Rotation as R
from typing import Sequence, Tuple


@dataclass(frozen=True, eq=False)
class Pose:
    """
    Rigid-body pose: position (meters) plus a 3x3 rotation matrix

    Both arrays are copied and made read-only on construction.
    """
    position: np.ndarray
    rotation: np.ndarray

    def __post_init__(self):
        position = np.array(self.position, dtype=np.float64).reshape(3)
        rotation = np.array(self.rotation, dtype=np.float64).reshape(3, 3)
        position.setflags(write=False)
        rotation.setflags(write=False)
        object.__setattr__(self, 'position', position)
        object.__setattr__(self, 'rotation', rotation)

    @classmethod
    def from_matrix(cls, transform: np.ndarray) -> 'Pose':
        """
        :param transform: 4x4 homogeneous transform
        """
        transform = np.asarray(transform, dtype=np.float64)
        if transform.shape != (4, 4):
            raise ValueError(f"Transform must be 4x4, got shape {transform.shape}")
        return cls(transform[:3, 3], transform[:3, :3])

    @classmethod
    def from_xyz_rpy(cls, x: float, y: float, z: float,
                     roll: float = 0.0, pitch: float = 0.0, yaw: float = 0.0) -> 'Pose':
        """
        Build a pose from a position and fixed-axis XYZ angles (radians),
        i.e. R = Rz(yaw) @ Ry(pitch) @ Rx(roll)
        """
        rot = R.from_euler('xyz', [roll, pitch, yaw], degrees=False)
        return cls(np.array([x, y, z], dtype=np.float64), rot.as_matrix())

    @classmethod
    def from_position_euler_deg(cls, pos: Sequence[float], euler_deg: Sequence[float]) -> 'Pose':
        """Same as from_xyz_rpy, with the angles given in degrees."""
        roll, pitch, yaw = np.deg2rad(np.asarray(euler_deg, dtype=np.float64))
        return cls.from_xyz_rpy(pos[0], pos[1], pos[2], roll, pitch, yaw)

    def as_matrix(self) -> np.ndarray:
        transform = np.identity(4, dtype=np.float64)
        transform[:3, :3] = self.rotation
        transform[:3, 3] = self.position
        return transform

    def rpy(self) -> Tuple[float, float, float]:
        roll, pitch, yaw = R.from_matrix(self.rotation).as_euler('xyz', degrees=False)
        return float(roll), float(pitch), float(yaw)

    @property
    def approach(self) -> np.ndarray:
        """Tool approach axis (z column of the rotation)."""
        return self.rotation[:, 2]

    def __repr__(self):
        x, y, z = self.position
        return f"<Pose: pos=({x:.4f}, {y:.4f}, {z:.4f}) rpy={tuple(round(a, 4) for a in self.rpy())}>"
