"""
Lattice View.

Combines lattice, bonds, unit cell and Miller plane into the set of
geometry a renderer needs for one frame.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from .lattice import (
    centering_offset,
    generate_bonds,
    generate_lattice,
    generate_unit_cell,
    lattice_bounds,
    resolve_lattice_constant,
)
from .miller import atoms_on_plane, clip_plane_to_box, compute_plane
from .models import Atom, Bond, ClippedPolygon, MillerIndices, Plane, Structure, UnitCell

logger = logging.getLogger(__name__)


@dataclass
class LatticeView:
    """Geometry for a rendered lattice.

    Attributes:
        structure: Structure the view was built from
        lattice_constant: Lattice constant used, in Angstroms
        atoms: Atom positions centered on the origin
        bonds: First-neighbour bonds (empty when bonds are hidden)
        unit_cell: Unit cell aligned with the first cell of the block
        bounds: Half-extent of the box the plane is clipped to
        miller: Plane settings, or None for no plane
        plane: Plane for the Miller indices, or None when inactive
        polygon: Plane clipped to the bounds
        highlighted: Indices of atoms lying on the plane
    """
    structure: Structure
    lattice_constant: float
    atoms: list[Atom]
    bonds: list[Bond]
    unit_cell: UnitCell
    bounds: float
    miller: MillerIndices | None = None
    plane: Plane | None = None
    polygon: ClippedPolygon = field(default_factory=ClippedPolygon)
    highlighted: set[int] = field(default_factory=set)

    def plane_stats(self) -> dict:
        return {'atom_count': len(self.highlighted), 'total_atoms': len(self.atoms)}

    def to_dict(self) -> dict:
        return {
            'structure': self.structure.id,
            'lattice_constant': self.lattice_constant,
            'atoms': [atom.to_dict() for atom in self.atoms],
            'bonds': [bond.to_dict() for bond in self.bonds],
            'unit_cell': self.unit_cell.to_dict(),
            'bounds': self.bounds,
            'plane': self.plane.to_dict() if self.plane is not None else None,
            'polygon': self.polygon.to_dict(),
            'highlighted': sorted(self.highlighted),
            'plane_stats': self.plane_stats(),
        }


def build_lattice_view(
    structure: Structure,
    repeat: int = 2,
    lattice_constant: float | None = None,
    miller: MillerIndices | None = None,
    show_bonds: bool = True,
    atom_radius: float = 0.3
) -> LatticeView:
    """Build all geometry for one lattice display.

    Atoms within one atom radius of the Miller plane are highlighted.

    Args:
        structure: Structure definition
        repeat: Number of unit cells along each lattice vector
        lattice_constant: Lattice constant in Angstroms (default_a if None)
        miller: Plane to show, or None
        show_bonds: Whether to compute bonds
        atom_radius: Display radius of the atoms in Angstroms

    Returns:
        LatticeView
    """
    a = resolve_lattice_constant(structure, lattice_constant)

    atoms = generate_lattice(structure, repeat, a)
    bonds = generate_bonds(atoms, structure, a) if show_bonds else []
    unit_cell = generate_unit_cell(structure, a).translate(
        -centering_offset(structure, repeat, a)
    )
    bounds = lattice_bounds(atoms, a)

    view = LatticeView(
        structure=structure,
        lattice_constant=a,
        atoms=atoms,
        bonds=bonds,
        unit_cell=unit_cell,
        bounds=bounds,
        miller=miller,
    )

    if miller is None or not miller.is_active:
        return view

    plane = compute_plane(miller.h, miller.k, miller.l, structure.vectors, a)
    view.plane = plane
    if not plane.is_valid:
        logger.debug("No plane for %s on %s", miller.label, structure.id)
        return view

    offset = plane.offset_distance(miller.offset)
    view.polygon = clip_plane_to_box(plane.normal, offset, bounds)
    view.highlighted = atoms_on_plane(atoms, plane.normal, offset, atom_radius)

    logger.debug(
        "Plane %s: d=%.3f, %d/%d atoms on plane",
        miller.label, plane.d_spacing, len(view.highlighted), len(atoms)
    )
    return view


def plane_normal_arrow(view: LatticeView, length_factor: float = 0.6) -> tuple[np.ndarray, np.ndarray] | None:
    """Start and end of the normal arrow drawn from the polygon centroid.

    Returns None when there is no visible plane.
    """
    if view.plane is None or view.polygon.is_empty:
        return None
    start = view.polygon.centroid()
    end = start + view.plane.normal * view.lattice_constant * length_factor
    return start, end
