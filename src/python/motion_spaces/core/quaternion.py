"""
===============================================================================
MOTION SPACES - Unit Quaternion Arithmetic
===============================================================================

Minimal unit quaternion type backing the SO(3) state space. A planner only
needs three things from a rotation representation: a way to build one, a
bi-invariant distance between two of them, and a geodesic interpolant. This
module provides exactly that plus the handful of algebraic helpers those
operations are built from.

Convention
----------
Scalar-first, Hamilton product:

    q = [q_w, q_x, q_y, q_z] = q_w + q_x*i + q_y*j + q_z*k

q and -q encode the same rotation. Constructed quaternions are normalized
and flipped onto the w >= 0 hemisphere so that a configuration has a single
stored representative.

Metric
------
The distance between two attitudes is the angle of the relative rotation,

    d(q1, q2) = 2 * atan2(|vec(q1^-1 q2)|, |w(q1^-1 q2)|)     in [0, pi]

which is the geodesic distance on SO(3). The atan2 form is exact for
coincident inputs, unlike 2*arccos(|q1 . q2|), which loses roughly eight
digits near zero.

References
----------
    [1] Kuffner, "Effective Sampling and Distance Metrics for 3D Rigid Body
        Path Planning", ICRA 2004.
    [2] Shoemake, "Animating Rotation with Quaternion Curves", SIGGRAPH 1985.

===============================================================================
"""

import numpy as np

from motion_spaces.core.constants import (
    QUATERNION_COMPARISON_TOLERANCE,
    QUATERNION_NORM_TOLERANCE,
    SLERP_NLERP_THRESHOLD,
)


class Quaternion:
    """
    Unit quaternion representing an orientation in SO(3).

    Attributes
    ----------
    w, x, y, z : float
        Scalar part followed by the vector part.

    Examples
    --------
    >>> q = Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), np.pi / 2)
    >>> Quaternion.identity().angle_to(q)
    1.5707963267948966
    """

    def __init__(self, w: float, x: float, y: float, z: float,
                 normalize: bool = True) -> None:
        """
        Parameters
        ----------
        w, x, y, z : float
            Components in scalar-first order.
        normalize : bool, optional
            Normalize to unit length and flip to w >= 0 (default). Internal
            callers that already hold a canonical unit quaternion pass False.
        """
        self._q = np.array([w, x, y, z], dtype=np.float64)

        if normalize:
            self._normalize_in_place()

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def w(self) -> float:
        return float(self._q[0])

    @property
    def x(self) -> float:
        return float(self._q[1])

    @property
    def y(self) -> float:
        return float(self._q[2])

    @property
    def z(self) -> float:
        return float(self._q[3])

    @property
    def components(self) -> np.ndarray:
        """All four components [w, x, y, z] as a fresh array."""
        return self._q.copy()

    @property
    def norm(self) -> float:
        return float(np.linalg.norm(self._q))

    @property
    def rotation_angle(self) -> float:
        """Angle of the encoded rotation in [0, pi]."""
        return 2.0 * float(np.arctan2(np.linalg.norm(self._q[1:4]), abs(self._q[0])))

    def _normalize_in_place(self) -> None:
        """
        Scale to unit norm and move onto the w >= 0 hemisphere.

        Raises
        ------
        ValueError
            If the quaternion is numerically zero and has no direction.
        """
        n = np.linalg.norm(self._q)

        if n < QUATERNION_NORM_TOLERANCE:
            raise ValueError(
                f"Cannot normalize near-zero quaternion (norm = {n:.2e}); "
                "it does not describe an orientation."
            )

        self._q /= n

        if self._q[0] < 0.0:
            self._q = -self._q

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """The zero rotation [1, 0, 0, 0]."""
        return Quaternion(1.0, 0.0, 0.0, 0.0, normalize=False)

    @staticmethod
    def from_array(values) -> 'Quaternion':
        """
        Build from any 4-element sequence in [w, x, y, z] order.

        Raises
        ------
        ValueError
            If ``values`` does not hold exactly four numbers.
        """
        arr = np.asarray(values, dtype=np.float64).reshape(-1)
        if arr.shape != (4,):
            raise ValueError(f"Quaternion needs 4 components, got {arr.size}")
        return Quaternion(arr[0], arr[1], arr[2], arr[3])

    @staticmethod
    def from_axis_angle(axis: np.ndarray, angle: float) -> 'Quaternion':
        """
        Rotation of ``angle`` radians about ``axis`` (right-hand rule).

        The axis is normalized internally.

        Raises
        ------
        ValueError
            If the axis has zero length.
        """
        axis = np.asarray(axis, dtype=np.float64)
        axis_norm = np.linalg.norm(axis)
        if axis_norm < QUATERNION_NORM_TOLERANCE:
            raise ValueError(
                f"Rotation axis has near-zero length ({axis_norm:.2e})."
            )
        axis = axis / axis_norm
        half = 0.5 * angle
        s = np.sin(half)
        return Quaternion(np.cos(half), s * axis[0], s * axis[1], s * axis[2])

    # =========================================================================
    # ALGEBRA
    # =========================================================================

    def conjugate(self) -> 'Quaternion':
        """Inverse rotation; equals the inverse for unit quaternions."""
        return Quaternion(self.w, -self.x, -self.y, -self.z, normalize=False)

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product ``self * other`` (apply ``other`` first).

        The result is renormalized, which also absorbs round-off drift.
        """
        w1, x1, y1, z1 = self._q
        w2, x2, y2, z2 = other._q
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def angle_to(self, other: 'Quaternion') -> float:
        """
        Geodesic distance to ``other`` on SO(3), in radians within [0, pi].

        Symmetric, zero exactly when both describe the same orientation, and
        satisfies the triangle inequality.
        """
        relative = self.conjugate().multiply(other)
        return relative.rotation_angle

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    @staticmethod
    def slerp(q1: 'Quaternion', q2: 'Quaternion', t: float) -> 'Quaternion':
        """
        Spherical linear interpolation along the short arc.

        Parameters
        ----------
        q1 : Quaternion
            Orientation at t = 0.
        q2 : Quaternion
            Orientation at t = 1.
        t : float
            Fraction of the way from q1 to q2; clamped to [0, 1].

        Returns
        -------
        Quaternion
            Orientation at fraction t, moving at constant angular rate.

        Notes
        -----
        When the two inputs are almost parallel, sin(Omega) is close to zero
        and the closed form is unstable; normalized linear interpolation is
        used there instead.
        """
        t = float(np.clip(t, 0.0, 1.0))

        dot = np.dot(q1._q, q2._q)

        # q and -q are the same rotation: flip to stay on the short arc
        q2_q = q2._q.copy()
        if dot < 0.0:
            q2_q = -q2_q
            dot = -dot

        dot = min(dot, 1.0)

        if dot > SLERP_NLERP_THRESHOLD:
            result = q1._q + t * (q2_q - q1._q)
            return Quaternion(result[0], result[1], result[2], result[3])

        omega = np.arccos(dot)
        sin_omega = np.sin(omega)

        scale1 = np.sin((1.0 - t) * omega) / sin_omega
        scale2 = np.sin(t * omega) / sin_omega

        result = scale1 * q1._q + scale2 * q2_q
        return Quaternion(result[0], result[1], result[2], result[3])

    # =========================================================================
    # COMPARISON AND COPYING
    # =========================================================================

    def is_close(self, other: 'Quaternion',
                 tolerance: float = QUATERNION_COMPARISON_TOLERANCE) -> bool:
        """True if both describe the same rotation to within ``tolerance``."""
        diff_pos = np.linalg.norm(self._q - other._q)
        diff_neg = np.linalg.norm(self._q + other._q)
        return min(diff_pos, diff_neg) < tolerance

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.is_close(other)

    # tolerant equality has no consistent hash
    __hash__ = None

    def __repr__(self) -> str:
        return (f"Quaternion(w={self.w:+.8f}, x={self.x:+.8f}, "
                f"y={self.y:+.8f}, z={self.z:+.8f})")

    def copy(self) -> 'Quaternion':
        return Quaternion(self.w, self.x, self.y, self.z, normalize=False)
