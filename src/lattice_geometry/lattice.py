"""
Lattice Builder.

Expands a structure's basis and lattice vectors into atom positions,
derives nearest-neighbour bonds and builds the unit-cell wireframe.
"""

import logging
import math

import numpy as np
from scipy.spatial import cKDTree

from .models import (
    Atom,
    Bond,
    DegenerateLatticeError,
    InvalidLatticeError,
    Structure,
    UnitCell,
)
from .structures import BOND_CUTOFF_FACTORS

logger = logging.getLogger(__name__)

# Positions closer than this (Angstroms) are treated as the same atom
DEDUP_TOLERANCE = 0.01

# Pairs closer than this are coincident atoms, not bonds
MIN_BOND_LENGTH = 0.01

# Slack on the first-neighbour distance
BOND_TOLERANCE = 1.05

VOLUME_EPS = 1e-10

# Corner i of the cell is the sum of the lattice vectors selected here
CORNER_COMBINATIONS = [
    (0, 0, 0),
    (1, 0, 0),
    (0, 1, 0),
    (0, 0, 1),
    (1, 1, 0),
    (1, 0, 1),
    (0, 1, 1),
    (1, 1, 1),
]

UNIT_CELL_EDGES = [
    (0, 1), (0, 2), (0, 3),
    (1, 4), (1, 5),
    (2, 4), (2, 6),
    (3, 5), (3, 6),
    (4, 7), (5, 7), (6, 7),
]


def resolve_lattice_constant(structure: Structure, lattice_constant: float | None) -> float:
    a = structure.default_a if lattice_constant is None else lattice_constant
    if not math.isfinite(a):
        raise InvalidLatticeError(f"Invalid lattice definition: lattice constant {a!r}")
    if a <= 0:
        raise ValueError(f"Lattice constant must be positive, got {a}")
    return float(a)


def lattice_matrix(vectors, a: float) -> np.ndarray:
    """Scale and validate lattice vectors.

    Args:
        vectors: Three lattice vectors (rows) in units of a
        a: Lattice constant

    Returns:
        3x3 array of scaled lattice vectors

    Raises:
        InvalidLatticeError: If the vectors are mis-shaped or not finite
        DegenerateLatticeError: If the vectors span zero volume
    """
    try:
        matrix = np.asarray(vectors, dtype=np.float64).reshape(3, 3) * float(a)
    except (TypeError, ValueError) as exc:
        raise InvalidLatticeError(f"Invalid lattice definition: {exc}") from exc

    if not np.all(np.isfinite(matrix)):
        raise InvalidLatticeError("Invalid lattice definition: non-finite lattice vectors")

    a1, a2, a3 = matrix
    volume = np.dot(a1, np.cross(a2, a3))
    scale = np.linalg.norm(a1) * np.linalg.norm(a2) * np.linalg.norm(a3)
    if abs(volume) <= VOLUME_EPS * max(scale, VOLUME_EPS):
        raise DegenerateLatticeError(
            f"Degenerate lattice: vectors span zero volume ({volume:.3g})"
        )
    return matrix


def centering_offset(structure: Structure, repeat: int, lattice_constant: float | None = None) -> np.ndarray:
    """Shift that centers a repeat^3 block of lattice points on the origin."""
    a = resolve_lattice_constant(structure, lattice_constant)
    matrix = lattice_matrix(structure.vectors, a)
    return (repeat - 1) / 2 * matrix.sum(axis=0)


def generate_lattice(
    structure: Structure,
    repeat: int = 2,
    lattice_constant: float | None = None,
    tolerance: float = DEDUP_TOLERANCE
) -> list[Atom]:
    """Generate atom positions for a block of repeat^3 unit cells.

    Atoms shared between neighbouring cells are emitted once; the first
    cell to produce a position keeps it.

    Args:
        structure: Structure definition
        repeat: Number of unit cells along each lattice vector
        lattice_constant: Lattice constant in Angstroms (default_a if None)
        tolerance: Quantization step of the deduplication key

    Returns:
        List of atoms centered on the origin
    """
    if isinstance(repeat, bool) or int(repeat) != repeat or repeat < 1:
        raise ValueError(f"repeat must be a positive integer, got {repeat!r}")
    repeat = int(repeat)
    if not tolerance > 0:
        raise ValueError(f"tolerance must be positive, got {tolerance!r}")

    a = resolve_lattice_constant(structure, lattice_constant)
    matrix = lattice_matrix(structure.vectors, a)
    basis = structure.basis_array()
    if not np.all(np.isfinite(basis)):
        raise InvalidLatticeError("Invalid lattice definition: non-finite basis coordinates")

    offset = (repeat - 1) / 2 * matrix.sum(axis=0)
    last = repeat - 1

    atoms = []
    seen = set()
    for i in range(repeat):
        for j in range(repeat):
            for k in range(repeat):
                is_edge = (
                    i == 0 or j == 0 or k == 0
                    or i == last or j == last or k == last
                )
                cell = np.array([i, j, k], dtype=np.float64)
                for b in basis:
                    position = (b + cell) @ matrix - offset
                    position.setflags(write=False)
                    key = tuple(math.floor(c / tolerance + 0.5) for c in position)
                    if key in seen:
                        continue
                    seen.add(key)
                    atoms.append(Atom(position=position, is_edge=is_edge))

    logger.debug(
        "Generated %d atoms for %s (repeat=%d, a=%.3f)",
        len(atoms), structure.id, repeat, a
    )
    return atoms


def bond_cutoff(structure: Structure, lattice_constant: float | None = None) -> float:
    """Maximum bond length for a structure.

    Unknown structure ids fall back to the lattice constant as the
    first-neighbour distance.
    """
    a = resolve_lattice_constant(structure, lattice_constant)
    factor = BOND_CUTOFF_FACTORS.get(structure.id)
    if factor is None:
        logger.warning(
            "Unknown structure %r: using generic cutoff (lattice constant)",
            structure.id
        )
        factor = 1.0
    return a * factor * BOND_TOLERANCE


def generate_bonds(
    atoms: list[Atom],
    structure: Structure,
    lattice_constant: float | None = None
) -> list[Bond]:
    """Connect atom pairs closer than the structure's bond cutoff.

    Args:
        atoms: Atoms from generate_lattice
        structure: Structure the atoms were generated from
        lattice_constant: Lattice constant in Angstroms (default_a if None)

    Returns:
        List of bonds ordered by atom index pair
    """
    cutoff = bond_cutoff(structure, lattice_constant)
    if len(atoms) < 2:
        return []

    positions = np.array([atom.position for atom in atoms])
    tree = cKDTree(positions)
    pairs = tree.query_pairs(cutoff, output_type='ndarray')
    if len(pairs) == 0:
        return []

    pairs = pairs[np.lexsort((pairs[:, 1], pairs[:, 0]))]
    lengths = np.linalg.norm(positions[pairs[:, 0]] - positions[pairs[:, 1]], axis=1)
    pairs = pairs[lengths > MIN_BOND_LENGTH]

    bonds = [Bond(start=atoms[i].position, end=atoms[j].position) for i, j in pairs]
    logger.debug("Generated %d bonds (cutoff=%.3f)", len(bonds), cutoff)
    return bonds


def generate_unit_cell(structure: Structure, lattice_constant: float | None = None) -> UnitCell:
    """Corners and edges of the parallelepiped spanned by the lattice vectors.

    The cell starts at the origin; corner order follows CORNER_COMBINATIONS.
    """
    a = resolve_lattice_constant(structure, lattice_constant)
    matrix = lattice_matrix(structure.vectors, a)
    corners = np.array(CORNER_COMBINATIONS, dtype=np.float64) @ matrix
    return UnitCell(corners=corners, edges=list(UNIT_CELL_EDGES))


def lattice_bounds(atoms: list[Atom], lattice_constant: float) -> float:
    """Half-extent of a cube around the origin enclosing all atoms.

    Pads the largest absolute coordinate by 0.3 lattice constants.
    """
    if not atoms:
        return 5.0
    positions = np.array([atom.position for atom in atoms])
    return float(np.max(np.abs(positions))) + lattice_constant * 0.3
