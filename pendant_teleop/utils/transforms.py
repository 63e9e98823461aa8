"""Quaternion and kinematic-chain utilities.

All rotation math used by the actuation backends and simulators is
centralized here.

Conventions:
    - Public quaternions are (x, y, z, w), matching controller input.
    - transforms3d works in (w, x, y, z); conversions happen at this boundary.
    - Angles crossing the operator-facing boundary are degrees; internal math
      is radians.
"""

import numpy as np
from scipy.spatial.transform import Rotation
from transforms3d import quaternions


IDENTITY_XYZW = np.array([0.0, 0.0, 0.0, 1.0])


# --- Quaternion Convention Conversions ---

def quat_wxyz_to_xyzw(q_wxyz: np.ndarray) -> np.ndarray:
    """Convert quaternion from (w, x, y, z) to (x, y, z, w)."""
    return np.array([q_wxyz[1], q_wxyz[2], q_wxyz[3], q_wxyz[0]])


def quat_xyzw_to_wxyz(q_xyzw: np.ndarray) -> np.ndarray:
    """Convert quaternion from (x, y, z, w) to (w, x, y, z)."""
    return np.array([q_xyzw[3], q_xyzw[0], q_xyzw[1], q_xyzw[2]])


# --- Rotation Composition ---

def axis_angle_to_quat(axis: np.ndarray, angle_deg: float) -> np.ndarray:
    """Quaternion (xyzw) for a rotation of angle_deg about axis.

    Args:
        axis: (3,) rotation axis; normalized internally.
        angle_deg: Rotation angle in degrees.

    Returns:
        (4,) unit quaternion in xyzw.
    """
    q_wxyz = quaternions.axangle2quat(np.asarray(axis, dtype=float), np.deg2rad(angle_deg))
    return quat_wxyz_to_xyzw(q_wxyz)


def rotate_local(q_xyzw: np.ndarray, axis: np.ndarray, angle_deg: float) -> np.ndarray:
    """Rotate an orientation about an axis expressed in its own (local) frame.

    Equivalent to post-multiplying by the axis-angle rotation, then
    renormalizing to keep the quaternion unit length over many steps.
    """
    delta = quat_xyzw_to_wxyz(axis_angle_to_quat(axis, angle_deg))
    result = quaternions.qmult(quat_xyzw_to_wxyz(q_xyzw), delta)
    result = result / np.linalg.norm(result)
    return quat_wxyz_to_xyzw(result)


def rotate_vector(q_xyzw: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate a 3-vector by an xyzw quaternion."""
    return quaternions.rotate_vector(np.asarray(v, dtype=float), quat_xyzw_to_wxyz(q_xyzw))


# --- Kinematic Chain ---

def chain_positions(
    offsets: np.ndarray,
    local_rotations: list[np.ndarray],
    base_position: np.ndarray | None = None,
) -> np.ndarray:
    """Compute world positions of every joint in a serial chain.

    Joint i sits at offsets[i] in its parent's frame; its own local rotation
    only affects the joints after it.

    Args:
        offsets: (N, 3) position of each joint relative to its parent.
        local_rotations: N xyzw quaternions, one per joint.
        base_position: Optional (3,) world position of the chain root.

    Returns:
        (N, 3) world positions.
    """
    offsets = np.asarray(offsets, dtype=float)
    positions = np.zeros_like(offsets)
    parent_pos = np.zeros(3) if base_position is None else np.asarray(base_position, dtype=float)
    parent_rot = quat_xyzw_to_wxyz(IDENTITY_XYZW)

    for i, local in enumerate(local_rotations):
        positions[i] = parent_pos + quaternions.rotate_vector(offsets[i], parent_rot)
        parent_pos = positions[i]
        parent_rot = quaternions.qmult(parent_rot, quat_xyzw_to_wxyz(local))

    return positions


# --- Controller Tilt ---

def tilt_angle_deg(
    reference_xyzw: np.ndarray,
    current_xyzw: np.ndarray,
    tilt_axis: np.ndarray = np.array([0.0, 0.0, 1.0]),
) -> float:
    """Signed rotation (degrees) of current relative to reference about tilt_axis.

    The relative rotation is expressed in the reference frame and projected
    onto tilt_axis, so twisting the controller about its forward axis gives
    a signed angle while unrelated motion contributes little.

    Args:
        reference_xyzw: (4,) orientation captured when the joystick was pressed.
        current_xyzw: (4,) current controller orientation.
        tilt_axis: (3,) axis in the controller frame (default: forward, +Z).

    Returns:
        Signed angle in degrees, in (-180, 180].
    """
    relative = Rotation.from_quat(reference_xyzw).inv() * Rotation.from_quat(current_xyzw)
    axis = np.asarray(tilt_axis, dtype=float)
    axis = axis / np.linalg.norm(axis)
    return float(np.rad2deg(np.dot(relative.as_rotvec(), axis)))
