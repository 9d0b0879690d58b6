"""
Vector Math.

Small helpers over 3-component numpy vectors used by the lattice and
Miller-plane code.
"""

import numpy as np


def as_vector(v) -> np.ndarray:
    """Coerce a length-3 sequence to a float64 array."""
    return np.asarray(v, dtype=np.float64).reshape(3)


def cross(a, b) -> np.ndarray:
    return np.cross(as_vector(a), as_vector(b))


def dot(a, b) -> float:
    return float(np.dot(as_vector(a), as_vector(b)))


def scale(v, s: float) -> np.ndarray:
    return as_vector(v) * s


def add(a, b) -> np.ndarray:
    return as_vector(a) + as_vector(b)


def magnitude(v) -> float:
    return float(np.linalg.norm(as_vector(v)))


def normalize(v) -> np.ndarray:
    """Return the unit vector along v.

    Args:
        v: Vector to normalize

    Returns:
        Unit vector, or the zero vector when v has zero length
    """
    v = as_vector(v)
    m = np.linalg.norm(v)
    if m > 0:
        return v / m
    return np.zeros(3)
