"""
Redundancy branches of the closed-form solution
"""
from enum import IntEnum


class RedundancyBranch(IntEnum):
    """
    One of the 8 geometric alternatives for a single pose.

    Bit 2 turns the base away from the target (joint 1 + pi), bit 1 picks the
    other elbow (joint 3 negated) and bit 0 flips the roll (joint 5 + pi).
    Iterating the enum gives the fixed evaluation order, joint 1 varying slowest.
    """
    TOWARD_ELBOW_A = 0
    TOWARD_ELBOW_A_FLIPPED = 1
    TOWARD_ELBOW_B = 2
    TOWARD_ELBOW_B_FLIPPED = 3
    AWAY_ELBOW_A = 4
    AWAY_ELBOW_A_FLIPPED = 5
    AWAY_ELBOW_B = 6
    AWAY_ELBOW_B_FLIPPED = 7

    @property
    def offset_joint_1(self) -> bool:
        return bool(self.value & 0b100)

    @property
    def offset_joint_3(self) -> bool:
        return bool(self.value & 0b010)

    @property
    def offset_joint_5(self) -> bool:
        return bool(self.value & 0b001)

    @classmethod
    def from_flags(cls, offset_joint_1: bool = False, offset_joint_3: bool = False,
                   offset_joint_5: bool = False) -> 'RedundancyBranch':
        return cls((int(offset_joint_1) << 2) | (int(offset_joint_3) << 1) | int(offset_joint_5))
