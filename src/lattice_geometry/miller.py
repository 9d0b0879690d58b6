"""
Miller Plane Mathematics.

Computes crystallographic planes from (hkl) indices, including d-spacing,
plane normals and atom-plane distances for arbitrary lattice vectors, and
clips planes to an axis-aligned box for display.
"""

import logging
import math

import numpy as np

from .lattice import lattice_matrix
from .models import Atom, ClippedPolygon, Plane
from .vectors import as_vector, cross, normalize

logger = logging.getLogger(__name__)

# |G| below this is treated as "no plane"
ZERO_TOLERANCE = 1e-12

# Slack on the inside test so vertices exactly on a box face survive
CLIP_EPSILON = 1e-3

# Switch tangent seed axis from X to Y above this |n . X|
TANGENT_SWITCH = 0.9

# Half-size of the initial quad in units of the box half-extent
QUAD_SCALE = 3.0

BOX_FACE_NORMALS = np.array([
    [1.0, 0.0, 0.0],
    [-1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [0.0, -1.0, 0.0],
    [0.0, 0.0, 1.0],
    [0.0, 0.0, -1.0],
])


def reciprocal_vectors(vectors, a: float = 1.0) -> np.ndarray:
    """Reciprocal lattice vectors b1, b2, b3 (rows), without the 2*pi factor.

    Args:
        vectors: Three lattice vectors (rows) in units of a
        a: Lattice constant

    Returns:
        3x3 array with b_i . a_j = delta_ij
    """
    a1, a2, a3 = lattice_matrix(vectors, a)
    volume = np.dot(a1, np.cross(a2, a3))
    return np.array([
        np.cross(a2, a3),
        np.cross(a3, a1),
        np.cross(a1, a2),
    ]) / volume


def compute_plane(h: int, k: int, l: int, vectors, a: float) -> Plane:
    """Compute plane normal and d-spacing for Miller indices.

    Works for any lattice vector system (cubic, hexagonal, etc.) since it
    goes through the general reciprocal lattice.

    Args:
        h, k, l: Miller indices
        vectors: Three lattice vectors (rows) in units of a
        a: Lattice constant in Angstroms

    Returns:
        Plane; d_spacing is inf and the normal zero when G vanishes
    """
    for index in (h, k, l):
        if isinstance(index, bool) or not math.isfinite(index) or int(index) != index:
            raise ValueError(f"Miller indices must be integers, got {(h, k, l)!r}")

    b = reciprocal_vectors(vectors, a)
    g = h * b[0] + k * b[1] + l * b[2]
    g_mag = float(np.linalg.norm(g))

    if g_mag < ZERO_TOLERANCE:
        return Plane(normal=np.zeros(3), d_spacing=float('inf'), reciprocal_vector=g)

    return Plane(normal=g / g_mag, d_spacing=1.0 / g_mag, reciprocal_vector=g)


def distance_to_plane(point, normal, offset: float = 0.0) -> float:
    """Signed distance from a point to the plane n . x = offset."""
    return float(np.dot(as_vector(point), as_vector(normal))) - offset


def atoms_on_plane(
    atoms: list[Atom],
    normal,
    offset: float,
    tolerance: float = 0.15
) -> set[int]:
    """Indices of atoms within tolerance of the plane.

    Args:
        atoms: Atoms to classify
        normal: Unit plane normal
        offset: Plane distance from the origin in Angstroms
        tolerance: Maximum absolute distance in Angstroms

    Returns:
        Set of atom indices on the plane
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")

    normal = as_vector(normal)
    if not atoms or not np.any(normal):
        return set()

    positions = np.array([atom.position for atom in atoms])
    distances = np.abs(positions @ normal - offset)
    return {int(i) for i in np.nonzero(distances <= tolerance)[0]}


def plane_tangents(normal) -> tuple[np.ndarray, np.ndarray]:
    """Two orthonormal vectors spanning the plane with the given normal."""
    normal = as_vector(normal)
    if abs(normal[0]) < TANGENT_SWITCH:
        tangent1 = normalize(cross(normal, [1.0, 0.0, 0.0]))
    else:
        tangent1 = normalize(cross(normal, [0.0, 1.0, 0.0]))
    tangent2 = normalize(cross(normal, tangent1))
    return tangent1, tangent2


def intersect_edge_plane(a: np.ndarray, b: np.ndarray, normal: np.ndarray, d: float) -> np.ndarray:
    """Point where segment ab crosses the plane n . x = d."""
    da = np.dot(a, normal) - d
    db = np.dot(b, normal) - d
    denom = da - db
    if abs(denom) < ZERO_TOLERANCE:
        return a.copy()
    t = da / denom
    return a + t * (b - a)


def clip_polygon_by_plane(
    vertices: list[np.ndarray],
    normal: np.ndarray,
    d: float,
    epsilon: float = CLIP_EPSILON
) -> list[np.ndarray]:
    """Sutherland-Hodgman clip of a polygon to the half-space n . x <= d.

    Args:
        vertices: Polygon vertices in order
        normal: Outward normal of the clip plane
        d: Clip plane distance from the origin
        epsilon: Slack on the inside test

    Returns:
        Clipped polygon vertices in order
    """
    output = []
    n = len(vertices)
    for i in range(n):
        current = vertices[i]
        following = vertices[(i + 1) % n]
        current_inside = np.dot(current, normal) <= d + epsilon
        following_inside = np.dot(following, normal) <= d + epsilon

        if current_inside:
            output.append(current)
            if not following_inside:
                output.append(intersect_edge_plane(current, following, normal, d))
        elif following_inside:
            output.append(intersect_edge_plane(current, following, normal, d))

    return output


def clip_plane_to_box(normal, offset: float, half_extent: float) -> ClippedPolygon:
    """Clip the plane n . x = offset to the cube [-half_extent, half_extent]^3.

    Args:
        normal: Unit plane normal
        offset: Plane distance from the origin in Angstroms
        half_extent: Half the box edge length

    Returns:
        ClippedPolygon, empty when the plane misses the box
    """
    if half_extent <= 0:
        raise ValueError(f"half_extent must be positive, got {half_extent}")

    normal = as_vector(normal)
    if not np.any(normal):
        return ClippedPolygon()

    tangent1, tangent2 = plane_tangents(normal)

    # Large initial quad, well beyond the box
    size = half_extent * QUAD_SCALE
    center = normal * offset
    polygon = [
        center - size * tangent1 - size * tangent2,
        center + size * tangent1 - size * tangent2,
        center + size * tangent1 + size * tangent2,
        center - size * tangent1 + size * tangent2,
    ]

    for face_normal in BOX_FACE_NORMALS:
        polygon = clip_polygon_by_plane(polygon, face_normal, half_extent)
        if len(polygon) < 3:
            logger.debug("Plane at offset %.3f misses box of half-extent %.3f", offset, half_extent)
            return ClippedPolygon()

    return ClippedPolygon(vertices=np.array(polygon))
