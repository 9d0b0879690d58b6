"""
Lattice Geometry - Crystal Lattice Geometry Kernel.

Computes atom positions, bonds, unit-cell wireframes and Miller-index
lattice planes for periodic crystal lattices. Planes are computed through
the reciprocal lattice and clipped to a bounding box for display.

Example:
    >>> from lattice_geometry import get_structure, generate_lattice, compute_plane
    >>>
    >>> fcc = get_structure("fcc")
    >>> atoms = generate_lattice(fcc, repeat=2)
    >>> print(len(atoms))
    32

    >>> plane = compute_plane(1, 1, 1, fcc.vectors, fcc.default_a)
    >>> round(plane.d_spacing, 4)
    2.0842

    >>> # Everything a renderer needs in one call
    >>> from lattice_geometry import build_lattice_view, MillerIndices
    >>> view = build_lattice_view(fcc, miller=MillerIndices(1, 1, 1))
"""

import logging

__version__ = "1.0.0"

# Lattice, bond and unit-cell generation
from .lattice import (
    bond_cutoff,
    centering_offset,
    generate_bonds,
    generate_lattice,
    generate_unit_cell,
    lattice_bounds,
    lattice_matrix,
)

# Miller planes
from .miller import (
    atoms_on_plane,
    clip_plane_to_box,
    clip_polygon_by_plane,
    compute_plane,
    distance_to_plane,
    reciprocal_vectors,
)

# Data classes and errors
from .models import (
    Atom,
    Bond,
    ClippedPolygon,
    DegenerateLatticeError,
    InvalidLatticeError,
    LatticeError,
    MillerIndices,
    Plane,
    Structure,
    UnitCell,
)

# Structure catalog
from .structures import (
    BOND_CUTOFF_FACTORS,
    COMMON_PLANES,
    STRUCTURE_ORDER,
    STRUCTURES,
    get_structure,
    list_structures,
)

# Vector helpers
from .vectors import add, cross, dot, magnitude, normalize, scale

# Composition
from .view import LatticeView, build_lattice_view, plane_normal_arrow

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Lattice
    "generate_lattice",
    "generate_bonds",
    "generate_unit_cell",
    "bond_cutoff",
    "centering_offset",
    "lattice_bounds",
    "lattice_matrix",
    # Miller planes
    "compute_plane",
    "reciprocal_vectors",
    "distance_to_plane",
    "atoms_on_plane",
    "clip_plane_to_box",
    "clip_polygon_by_plane",
    # View
    "build_lattice_view",
    "plane_normal_arrow",
    "LatticeView",
    # Data classes
    "Structure",
    "Atom",
    "Bond",
    "UnitCell",
    "MillerIndices",
    "Plane",
    "ClippedPolygon",
    # Errors
    "LatticeError",
    "DegenerateLatticeError",
    "InvalidLatticeError",
    # Catalog
    "STRUCTURES",
    "STRUCTURE_ORDER",
    "BOND_CUTOFF_FACTORS",
    "COMMON_PLANES",
    "get_structure",
    "list_structures",
    # Vectors
    "cross",
    "dot",
    "scale",
    "add",
    "magnitude",
    "normalize",
]
