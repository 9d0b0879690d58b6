"""
Data models for lattice geometry.

Value types returned by the lattice, bond, unit-cell and Miller-plane
functions, plus the error classes raised for malformed lattice input.
"""

from dataclasses import dataclass, field

import numpy as np


class LatticeError(ValueError):
    """Base class for malformed lattice input."""


class DegenerateLatticeError(LatticeError):
    """Lattice vectors are coplanar or parallel (zero cell volume)."""


class InvalidLatticeError(LatticeError):
    """Lattice definition contains non-finite or mis-shaped values."""


@dataclass(frozen=True)
class Structure:
    """Crystal structure definition.

    Attributes:
        id: Catalog key, also selects the bond cutoff
        name: Display name
        basis: Fractional coordinates of the atoms in one unit cell
        vectors: Lattice vectors (rows) in units of the lattice constant
        default_a: Default lattice constant in Angstroms
    """
    id: str
    name: str
    basis: tuple[tuple[float, float, float], ...]
    vectors: tuple[tuple[float, float, float], ...]
    default_a: float
    abbrev: str = ''
    description: str = ''
    coordination_number: int | None = None
    packing_fraction: float | None = None
    color: str = '#ffffff'
    glow_color: str = '#ffffff'
    examples: tuple[str, ...] = ()

    def basis_array(self) -> np.ndarray:
        """Basis as an Nx3 array."""
        return np.asarray(self.basis, dtype=np.float64).reshape(-1, 3)

    def lattice_matrix(self, a: float | None = None) -> np.ndarray:
        """Lattice vectors scaled by a (default_a when not given), one per row."""
        if a is None:
            a = self.default_a
        return np.asarray(self.vectors, dtype=np.float64).reshape(3, 3) * a

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'abbrev': self.abbrev,
            'description': self.description,
            'basis': [list(b) for b in self.basis],
            'vectors': [list(v) for v in self.vectors],
            'default_a': self.default_a,
            'coordination_number': self.coordination_number,
            'packing_fraction': self.packing_fraction,
            'color': self.color,
            'glow_color': self.glow_color,
            'examples': list(self.examples),
        }


@dataclass
class Atom:
    """A lattice atom at an absolute Cartesian position (Angstroms)."""
    position: np.ndarray
    is_edge: bool = False

    def to_dict(self) -> dict:
        return {'position': self.position.tolist(), 'is_edge': self.is_edge}


@dataclass
class Bond:
    """Bond between two atom positions."""
    start: np.ndarray
    end: np.ndarray

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    def to_dict(self) -> dict:
        return {'start': self.start.tolist(), 'end': self.end.tolist()}


@dataclass
class UnitCell:
    """Parallelepiped wireframe spanned by the three lattice vectors.

    Attributes:
        corners: 8x3 array of corner positions
        edges: 12 pairs of corner indices
    """
    corners: np.ndarray
    edges: list[tuple[int, int]]

    def segments(self) -> list[tuple[np.ndarray, np.ndarray]]:
        """Edge endpoints as (start, end) position pairs."""
        return [(self.corners[i], self.corners[j]) for i, j in self.edges]

    def translate(self, offset: np.ndarray) -> 'UnitCell':
        return UnitCell(
            corners=self.corners + np.asarray(offset, dtype=np.float64),
            edges=list(self.edges),
        )

    def volume(self) -> float:
        a1, a2, a3 = (self.corners[i] - self.corners[0] for i in (1, 2, 3))
        return float(abs(np.dot(a1, np.cross(a2, a3))))

    def to_dict(self) -> dict:
        return {
            'corners': self.corners.tolist(),
            'edges': [list(e) for e in self.edges],
        }


@dataclass(frozen=True)
class MillerIndices:
    """Miller indices of the displayed plane plus display settings.

    offset is the plane displacement from the origin in multiples of the
    d-spacing; show and opacity are passed through to the renderer.
    """
    h: int = 1
    k: int = 0
    l: int = 0
    offset: float = 0.0
    show: bool = True
    opacity: float = 0.5

    @property
    def hkl(self) -> tuple[int, int, int]:
        return (self.h, self.k, self.l)

    @property
    def is_zero(self) -> bool:
        return self.h == 0 and self.k == 0 and self.l == 0

    @property
    def is_active(self) -> bool:
        return self.show and not self.is_zero

    @property
    def label(self) -> str:
        return '(' + ''.join(str(i) for i in self.hkl) + ')'


@dataclass
class Plane:
    """Lattice plane for a set of Miller indices.

    Attributes:
        normal: Unit normal, or the zero vector when there is no plane
        d_spacing: Interplanar spacing in Angstroms (inf when there is no plane)
        reciprocal_vector: G = h*b1 + k*b2 + l*b3
    """
    normal: np.ndarray
    d_spacing: float
    reciprocal_vector: np.ndarray

    @property
    def is_valid(self) -> bool:
        return bool(np.isfinite(self.d_spacing))

    def offset_distance(self, offset: float) -> float:
        """Convert an offset in d-spacings to a distance from the origin."""
        if not self.is_valid:
            return 0.0
        return offset * self.d_spacing

    def to_dict(self) -> dict:
        return {
            'normal': self.normal.tolist(),
            'd_spacing': self.d_spacing,
            'reciprocal_vector': self.reciprocal_vector.tolist(),
        }


@dataclass
class ClippedPolygon:
    """Convex planar polygon of a plane clipped to a box.

    vertices is empty when the plane misses the box.
    """
    vertices: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) < 3

    @property
    def edge_loop(self) -> np.ndarray:
        """Vertices with the first one repeated at the end."""
        if self.is_empty:
            return np.zeros((0, 3))
        return np.vstack([self.vertices, self.vertices[:1]])

    def centroid(self) -> np.ndarray:
        if self.is_empty:
            return np.zeros(3)
        return np.mean(self.vertices, axis=0)

    def triangles(self) -> list[tuple[int, int, int]]:
        """Triangle fan from vertex 0 covering the polygon."""
        return [(0, i, i + 1) for i in range(1, len(self.vertices) - 1)]

    def to_dict(self) -> dict:
        return {
            'vertices': self.vertices.tolist(),
            'edge_loop': self.edge_loop.tolist(),
            'triangles': [list(t) for t in self.triangles()],
        }
