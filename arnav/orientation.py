"""Conversions from device orientation to an absolute compass heading.

Two representations are supported:

* W3C DeviceOrientation style Euler angles (alpha/yaw, beta/pitch,
  gamma/roll, in degrees). The heading is the projection of the device's
  north reference axis onto the horizontal plane via the rotation matrix,
  which stays correct however the phone is held.
* A fused orientation quaternion ``(x, y, z, w)`` as produced by an
  absolute orientation sensor. The camera ("forward") axis ``R * (0, 0, -1)``
  is projected onto the horizontal plane. Quaternions do not suffer from the
  Euler gimbal singularity near beta = 90.
"""

from __future__ import annotations

from math import atan2, cos, degrees, radians, sin
from typing import Sequence, Tuple

from .angles import normalize


def heading_from_euler(alpha: float, beta: float, gamma: float) -> float:
    alpha_rad = radians(alpha)
    beta_rad = radians(beta)
    gamma_rad = radians(gamma)

    c_a = cos(alpha_rad)
    s_a = sin(alpha_rad)
    s_b = sin(beta_rad)
    c_g = cos(gamma_rad)
    s_g = sin(gamma_rad)

    r_a = -c_a * s_g - s_a * s_b * c_g
    r_b = -s_a * s_g + c_a * s_b * c_g

    return normalize(degrees(atan2(r_a, r_b)))


def heading_and_tilt_from_quaternion(
    quaternion: Sequence[float],
) -> Tuple[float, float]:
    """Return ``(heading, tilt)`` in degrees for an ``(x, y, z, w)`` quaternion.

    Earth frame is X=east, Y=north, Z=up. The tilt is the beta-equivalent
    inclination derived from the same rotation matrix.
    """

    if len(quaternion) != 4:
        raise ValueError("quaternion must have exactly four components")
    qx, qy, qz, qw = (float(component) for component in quaternion)

    r02 = 2.0 * (qx * qz + qw * qy)
    r12 = 2.0 * (qy * qz - qw * qx)
    heading = normalize(degrees(atan2(-r02, -r12)))

    r22 = 1.0 - 2.0 * (qx * qx + qy * qy)
    r21 = 2.0 * (qy * qz + qw * qx)
    tilt = degrees(atan2(r21, r22))

    return heading, tilt


__all__ = ["heading_and_tilt_from_quaternion", "heading_from_euler"]
