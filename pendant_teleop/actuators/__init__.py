"""Joint actuation backends."""

from pendant_teleop.actuators.articulation_backend import ArticulationBackend
from pendant_teleop.actuators.bone_backend import BoneRotationBackend

__all__ = [
    "ArticulationBackend",
    "BoneRotationBackend",
]
