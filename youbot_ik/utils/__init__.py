"""
Math helpers shared by the model and solver layers
"""

from .angles import ALMOST_MINUS_ONE, ALMOST_PLUS_ONE, guarded_acos, wrap_angle
from .quaternion_utils import axis_angle_to_quaternion, quaternion_to_rotation_matrix

__all__ = [
    'ALMOST_PLUS_ONE',
    'ALMOST_MINUS_ONE',
    'guarded_acos',
    'wrap_angle',
    'axis_angle_to_quaternion',
    'quaternion_to_rotation_matrix'
]
