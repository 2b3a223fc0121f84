# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

All vectors are 3D numpy arrays of shape (3,); quaternions are stored as
(x, y, z, w) arrays of shape (4,), the ordering renderers such as three.js
expect.
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Lets callers pass tuples or lists for positions and velocities.
    """
    return np.array(x, dtype=np.float64)


def vec3(x) -> np.ndarray:
    """Convert to a float64 array and check it is a 3-vector."""
    v = f64(x)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {v.shape}")
    return v


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 3D vector."""
    return float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 3D vector."""
    return float(np.sqrt(norm2(v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit vector in the same direction as v.

    Returns the zero vector if |v| < eps.
    """
    n = norm(v)
    if n < eps:
        return np.zeros(3, dtype=np.float64)
    return v / n


def unit_rows(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """Row-wise version of unit() for an (N, 3) array."""
    n = np.linalg.norm(v, axis=1, keepdims=True)
    out = np.zeros_like(v)
    np.divide(v, n, out=out, where=n >= eps)
    return out


def quat_identity() -> np.ndarray:
    return np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)


def quat_from_unit_vectors(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Quaternion (x, y, z, w) rotating unit vector a onto unit vector b.

    Half-angle construction: q = normalize([a × b, 1 + a·b]). When a and b
    are opposite the cross product vanishes, so any axis orthogonal to a is
    used for the 180° turn.
    """
    return quat_rows_from_unit_vectors(a, np.atleast_2d(b))[0]


def quat_rows_from_unit_vectors(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Vectorised quat_from_unit_vectors for a fixed a and an (N, 3) array b.

    Rows of b that are zero map to the identity rotation.
    """
    a = f64(a)
    b = np.atleast_2d(f64(b))
    q = np.zeros((b.shape[0], 4), dtype=np.float64)

    w = 1.0 + b @ a
    q[:, :3] = np.cross(a, b)
    q[:, 3] = w

    # Opposite vectors: rotate 180° about an axis orthogonal to a
    opposite = w < 1e-9
    if np.any(opposite):
        if abs(a[0]) > abs(a[2]):
            axis = np.array([-a[1], a[0], 0.0])
        else:
            axis = np.array([0.0, -a[2], a[1]])
        q[opposite, :3] = unit(axis)
        q[opposite, 3] = 0.0

    zero = np.linalg.norm(b, axis=1) < 1e-12
    q[zero] = quat_identity()

    return q / np.linalg.norm(q, axis=1, keepdims=True)


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by unit quaternion q (x, y, z, w)."""
    u = q[:3]
    w = q[3]
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)
