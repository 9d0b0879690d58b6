"""
Crystal structure catalog.

Read-only definitions of the supported lattices, the first-neighbour bond
cutoffs used for each of them and a list of commonly displayed planes.
"""

import math

from .models import Structure

# Each structure defines the basis as fractional coordinates of the atoms in
# the conventional cell and the lattice vectors in units of a.
STRUCTURES: dict[str, Structure] = {
    'sc': Structure(
        id='sc',
        name='Simple Cubic',
        abbrev='SC',
        description=(
            'The simplest crystal structure with atoms at each corner of a cube. '
            'Rare in nature due to inefficient packing (52% density).'
        ),
        basis=(
            (0.0, 0.0, 0.0),
        ),
        vectors=(
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
        ),
        default_a=3.34,
        coordination_number=6,
        packing_fraction=0.524,
        color='#60a5fa',
        glow_color='#3b82f6',
        examples=('Polonium (alpha-Po)',),
    ),
    'bcc': Structure(
        id='bcc',
        name='Body-Centered Cubic',
        abbrev='BCC',
        description=(
            'Atoms at cube corners plus one atom at the center. Common in metals, '
            'offering a good balance of strength and ductility (68% density).'
        ),
        basis=(
            (0.0, 0.0, 0.0),
            (0.5, 0.5, 0.5),
        ),
        vectors=(
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
        ),
        default_a=2.87,
        coordination_number=8,
        packing_fraction=0.680,
        color='#f472b6',
        glow_color='#ec4899',
        examples=('Iron (alpha-Fe)', 'Tungsten (W)', 'Chromium (Cr)', 'Sodium (Na)'),
    ),
    'fcc': Structure(
        id='fcc',
        name='Face-Centered Cubic',
        abbrev='FCC',
        description=(
            'Atoms at cube corners and face centers. The most efficient cubic '
            'packing (74% density). Dominant structure in noble and transition metals.'
        ),
        basis=(
            (0.0, 0.0, 0.0),
            (0.5, 0.5, 0.0),
            (0.5, 0.0, 0.5),
            (0.0, 0.5, 0.5),
        ),
        vectors=(
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
        ),
        default_a=3.61,
        coordination_number=12,
        packing_fraction=0.740,
        color='#a78bfa',
        glow_color='#8b5cf6',
        examples=('Copper (Cu)', 'Aluminum (Al)', 'Gold (Au)', 'Silver (Ag)'),
    ),
    'diamond': Structure(
        id='diamond',
        name='Diamond Cubic',
        abbrev='DC',
        description=(
            'Two interpenetrating FCC lattices offset by a quarter of the body '
            'diagonal. Each atom bonds tetrahedrally to four neighbors.'
        ),
        basis=(
            (0.0, 0.0, 0.0),
            (0.5, 0.5, 0.0),
            (0.5, 0.0, 0.5),
            (0.0, 0.5, 0.5),
            (0.25, 0.25, 0.25),
            (0.75, 0.75, 0.25),
            (0.75, 0.25, 0.75),
            (0.25, 0.75, 0.75),
        ),
        vectors=(
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
        ),
        default_a=5.43,
        coordination_number=4,
        packing_fraction=0.340,
        color='#34d399',
        glow_color='#10b981',
        examples=('Silicon (Si)', 'Germanium (Ge)', 'Diamond (C)', 'Tin (alpha-Sn)'),
    ),
    'hcp': Structure(
        id='hcp',
        name='Hexagonal Close-Packed',
        abbrev='HCP',
        description=(
            'Close-packed layers stacked in ABAB sequence. Achieves maximum packing '
            'efficiency (74%) alongside FCC. Common in lightweight structural metals.'
        ),
        basis=(
            (0.0, 0.0, 0.0),
            (1 / 3, 2 / 3, 0.5),
        ),
        vectors=(
            (1.0, 0.0, 0.0),
            (0.5, math.sqrt(3) / 2, 0.0),
            (0.0, 0.0, math.sqrt(8 / 3)),
        ),
        default_a=3.21,
        coordination_number=12,
        packing_fraction=0.740,
        color='#fbbf24',
        glow_color='#f59e0b',
        examples=('Titanium (Ti)', 'Magnesium (Mg)', 'Zinc (Zn)', 'Cobalt (Co)'),
    ),
}

STRUCTURE_ORDER = ['sc', 'bcc', 'fcc', 'diamond', 'hcp']

# First-neighbour distance as a multiple of the lattice constant
BOND_CUTOFF_FACTORS: dict[str, float] = {
    'sc': 1.0,
    'bcc': math.sqrt(3) / 2,
    'fcc': math.sqrt(2) / 2,
    'diamond': math.sqrt(3) / 4,
    'hcp': 1.0,
}

COMMON_PLANES = [
    {'h': 1, 'k': 0, 'l': 0, 'label': '(100)', 'desc': 'Face plane'},
    {'h': 1, 'k': 1, 'l': 0, 'label': '(110)', 'desc': 'Edge diagonal'},
    {'h': 1, 'k': 1, 'l': 1, 'label': '(111)', 'desc': 'Body diagonal'},
    {'h': 2, 'k': 0, 'l': 0, 'label': '(200)', 'desc': 'Half-spacing'},
    {'h': 2, 'k': 1, 'l': 0, 'label': '(210)', 'desc': 'Stepped face'},
    {'h': 2, 'k': 1, 'l': 1, 'label': '(211)', 'desc': 'Stepped diagonal'},
]


def get_structure(structure_id: str) -> Structure:
    """Look up a structure by id (case-insensitive).

    Args:
        structure_id: Catalog key such as 'fcc'

    Returns:
        Structure definition

    Raises:
        ValueError: If the id is not in the catalog
    """
    key = structure_id.lower()
    if key not in STRUCTURES:
        raise ValueError(
            f"Unknown structure: {structure_id!r}. "
            f"Available: {', '.join(STRUCTURE_ORDER)}"
        )
    return STRUCTURES[key]


def list_structures() -> list[str]:
    """Structure ids in display order."""
    return list(STRUCTURE_ORDER)
