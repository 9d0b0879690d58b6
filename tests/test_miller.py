"""
Test suite for Miller planes: reciprocal lattice, clipping and membership.
"""

import math

import numpy as np
import pytest

from lattice_geometry import (
    ClippedPolygon,
    DegenerateLatticeError,
    InvalidLatticeError,
    atoms_on_plane,
    clip_plane_to_box,
    clip_polygon_by_plane,
    compute_plane,
    distance_to_plane,
    generate_lattice,
    get_structure,
    reciprocal_vectors,
)
from lattice_geometry.miller import intersect_edge_plane, plane_tangents


CUBIC = [[1, 0, 0], [0, 1, 0], [0, 0, 1]]


def polygon_area(vertices):
    """Area of a convex polygon via a triangle fan."""
    area = 0.0
    for i in range(1, len(vertices) - 1):
        area += 0.5 * np.linalg.norm(
            np.cross(vertices[i] - vertices[0], vertices[i + 1] - vertices[0])
        )
    return area


# =============================================================================
# Reciprocal Lattice Tests
# =============================================================================

class TestReciprocalVectors:
    """Test reciprocal lattice construction."""

    @pytest.mark.parametrize('structure_id', ['sc', 'hcp'])
    def test_duality(self, structure_id):
        """b_i . a_j = delta_ij."""
        structure = get_structure(structure_id)
        a = structure.default_a
        b = reciprocal_vectors(structure.vectors, a)
        real = structure.lattice_matrix(a)
        assert np.allclose(b @ real.T, np.eye(3), atol=1e-12)

    def test_degenerate(self):
        with pytest.raises(DegenerateLatticeError):
            reciprocal_vectors([[1, 0, 0], [0, 1, 0], [2, 2, 0]], 1.0)

    def test_non_finite(self):
        with pytest.raises(InvalidLatticeError):
            reciprocal_vectors([[float('inf'), 0, 0], [0, 1, 0], [0, 0, 1]], 1.0)

    def test_wrong_shape(self):
        with pytest.raises(InvalidLatticeError):
            reciprocal_vectors([[1, 0, 0], [0, 1, 0]], 1.0)


# =============================================================================
# Plane Computation Tests
# =============================================================================

class TestComputePlane:
    """Test plane normal and d-spacing."""

    def test_cubic_100(self):
        """(100) of a cubic lattice: normal x, d = a."""
        plane = compute_plane(1, 0, 0, CUBIC, 3.0)
        assert np.allclose(plane.normal, [1, 0, 0])
        assert plane.d_spacing == pytest.approx(3.0)
        assert plane.is_valid

    def test_zero_indices(self):
        """(000) has no plane."""
        plane = compute_plane(0, 0, 0, CUBIC, 3.0)
        assert plane.d_spacing == math.inf
        assert np.allclose(plane.normal, [0, 0, 0])
        assert not plane.is_valid

    def test_cubic_110(self):
        plane = compute_plane(1, 1, 0, CUBIC, 2.0)
        assert plane.d_spacing == pytest.approx(2.0 / math.sqrt(2))
        assert np.allclose(plane.normal, np.array([1, 1, 0]) / math.sqrt(2))

    def test_cubic_111(self):
        fcc = get_structure('fcc')
        plane = compute_plane(1, 1, 1, fcc.vectors, fcc.default_a)
        assert plane.d_spacing == pytest.approx(fcc.default_a / math.sqrt(3))

    def test_cubic_200(self):
        """Doubling the indices halves the spacing."""
        plane = compute_plane(2, 0, 0, CUBIC, 4.0)
        assert plane.d_spacing == pytest.approx(2.0)

    def test_negative_indices(self):
        plane = compute_plane(-1, 0, 0, CUBIC, 1.0)
        assert np.allclose(plane.normal, [-1, 0, 0])

    def test_hexagonal_basal(self):
        """HCP (001) spacing is the c axis."""
        hcp = get_structure('hcp')
        a = hcp.default_a
        plane = compute_plane(0, 0, 1, hcp.vectors, a)
        assert np.allclose(plane.normal, [0, 0, 1])
        assert plane.d_spacing == pytest.approx(a * math.sqrt(8 / 3))

    def test_hexagonal_prism(self):
        """HCP (100) spacing is sqrt(3)/2 a, not a."""
        hcp = get_structure('hcp')
        plane = compute_plane(1, 0, 0, hcp.vectors, 2.0)
        assert plane.d_spacing == pytest.approx(math.sqrt(3))
        assert abs(plane.normal[2]) < 1e-12

    @pytest.mark.parametrize('hkl', [
        (float('nan'), 0, 0), (0, float('inf'), 0), (1.5, 0, 0), (0, 0, True),
    ])
    def test_invalid_indices(self, hkl):
        """Non-integral or non-finite indices are rejected."""
        with pytest.raises(ValueError, match="Miller indices must be integers"):
            compute_plane(*hkl, CUBIC, 3.0)

    def test_integral_float_indices(self):
        plane = compute_plane(1.0, 0.0, 0.0, CUBIC, 3.0)
        assert plane.d_spacing == pytest.approx(3.0)

    def test_reciprocal_vector(self):
        plane = compute_plane(1, 2, 0, CUBIC, 1.0)
        assert np.allclose(plane.reciprocal_vector, [1, 2, 0])

    def test_offset_distance(self):
        plane = compute_plane(1, 0, 0, CUBIC, 3.0)
        assert plane.offset_distance(0.5) == pytest.approx(1.5)
        assert compute_plane(0, 0, 0, CUBIC, 3.0).offset_distance(0.5) == 0.0


class TestDistanceToPlane:
    """Test signed point-plane distance."""

    def test_signed(self):
        normal = [1, 0, 0]
        assert distance_to_plane([2, 5, 5], normal, 1.0) == pytest.approx(1.0)
        assert distance_to_plane([0, 5, 5], normal, 1.0) == pytest.approx(-1.0)

    def test_default_offset(self):
        assert distance_to_plane([0, 0, 3], [0, 0, 1]) == pytest.approx(3.0)


# =============================================================================
# Plane Membership Tests
# =============================================================================

class TestAtomsOnPlane:
    """Test atom classification against a plane."""

    def test_simple_cubic_face(self):
        """A 3x3x3 simple cubic block has 9 atoms on x=0."""
        sc = get_structure('sc')
        atoms = generate_lattice(sc, repeat=3)
        plane = compute_plane(1, 0, 0, sc.vectors, sc.default_a)

        on_plane = atoms_on_plane(atoms, plane.normal, 0.0, tolerance=0.15)
        assert len(on_plane) == 9
        for i in on_plane:
            assert abs(atoms[i].position[0]) < 1e-9

    def test_offset_one_spacing(self):
        sc = get_structure('sc')
        atoms = generate_lattice(sc, repeat=3)
        plane = compute_plane(1, 0, 0, sc.vectors, sc.default_a)
        on_plane = atoms_on_plane(atoms, plane.normal, plane.offset_distance(1.0))
        assert len(on_plane) == 9
        assert all(atoms[i].position[0] == pytest.approx(sc.default_a) for i in on_plane)

    def test_atoms_on_plane_are_found(self):
        """Every atom lying on the plane is reported."""
        fcc = get_structure('fcc')
        atoms = generate_lattice(fcc, repeat=3)
        plane = compute_plane(1, 1, 1, fcc.vectors, fcc.default_a)
        offset = plane.offset_distance(1.0)

        on_plane = atoms_on_plane(atoms, plane.normal, offset, tolerance=1e-6)
        expected = {
            i for i, atom in enumerate(atoms)
            if abs(distance_to_plane(atom.position, plane.normal, offset)) < 1e-6
        }
        assert expected
        assert on_plane == expected

    def test_zero_normal(self):
        atoms = generate_lattice(get_structure('sc'), repeat=2)
        assert atoms_on_plane(atoms, [0, 0, 0], 0.0) == set()

    def test_negative_tolerance(self):
        atoms = generate_lattice(get_structure('sc'), repeat=2)
        with pytest.raises(ValueError, match="tolerance"):
            atoms_on_plane(atoms, [1, 0, 0], 0.0, tolerance=-0.1)

    def test_no_atoms(self):
        assert atoms_on_plane([], [1, 0, 0], 0.0) == set()


# =============================================================================
# Clipping Tests
# =============================================================================

class TestClipPolygonByPlane:
    """Test a single Sutherland-Hodgman stage."""

    def test_triangle(self):
        triangle = [np.array(v, dtype=float) for v in ([0, 0, 0], [2, 0, 0], [0, 2, 0])]
        clipped = clip_polygon_by_plane(triangle, np.array([1.0, 0, 0]), 1.0)
        assert np.allclose(clipped, [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 2, 0]])

    def test_fully_inside(self):
        square = [np.array(v, dtype=float) for v in ([0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0])]
        clipped = clip_polygon_by_plane(square, np.array([0, 0, 1.0]), 1.0)
        assert np.allclose(clipped, square)

    def test_fully_outside(self):
        square = [np.array(v, dtype=float) for v in ([0, 0, 2], [1, 0, 2], [1, 1, 2])]
        assert clip_polygon_by_plane(square, np.array([0, 0, 1.0]), 1.0) == []

    def test_boundary_vertex_kept(self):
        """Vertices within epsilon of the boundary stay."""
        square = [np.array(v, dtype=float) for v in ([0, 0, 0], [1.0005, 0, 0], [0, 1, 0])]
        clipped = clip_polygon_by_plane(square, np.array([1.0, 0, 0]), 1.0)
        assert len(clipped) == 3

    def test_intersection_guard(self):
        """Parallel edge returns the first point instead of dividing by zero."""
        a = np.array([0.0, 0.0, 1.0])
        b = np.array([1.0, 0.0, 1.0])
        assert np.allclose(intersect_edge_plane(a, b, np.array([0, 0, 1.0]), 0.5), a)


class TestClipPlaneToBox:
    """Test plane clipping against the bounding box."""

    def test_axis_aligned(self):
        """z=0 in a box of half-extent 5 is the 10x10 square."""
        polygon = clip_plane_to_box([0, 0, 1], 0.0, 5.0)
        verts = polygon.vertices

        assert not polygon.is_empty
        assert np.all(np.abs(verts[:, 0]) <= 5.0 + 1e-9)
        assert np.all(np.abs(verts[:, 1]) <= 5.0 + 1e-9)
        assert np.allclose(verts[:, 2], 0.0)
        assert len({tuple(np.round(v, 6)) for v in verts}) >= 3
        assert polygon_area(verts) == pytest.approx(100.0)

    def test_edge_loop_closed(self):
        polygon = clip_plane_to_box([0, 0, 1], 0.0, 5.0)
        loop = polygon.edge_loop
        assert len(loop) == len(polygon.vertices) + 1
        assert np.allclose(loop[0], loop[-1])

    def test_plane_outside_box(self):
        """Offset beyond three half-extents misses the box."""
        polygon = clip_plane_to_box([0, 0, 1], 16.0, 5.0)
        assert polygon.is_empty
        assert len(polygon.vertices) == 0
        assert len(polygon.edge_loop) == 0
        assert polygon.triangles() == []

    def test_plane_just_outside_box(self):
        assert clip_plane_to_box([0, 0, 1], 6.0, 5.0).is_empty

    def test_diagonal_hexagon(self):
        """(111) through the center of a cube is a regular hexagon."""
        normal = np.array([1.0, 1.0, 1.0]) / math.sqrt(3)
        polygon = clip_plane_to_box(normal, 0.0, 1.0)
        verts = polygon.vertices

        assert np.allclose(verts @ normal, 0.0, atol=1e-9)
        assert np.all(np.abs(verts) <= 1.0 + 1e-9)
        assert polygon_area(verts) == pytest.approx(3 * math.sqrt(3))

    def test_x_aligned_normal(self):
        """A normal along x uses the Y axis to build tangents."""
        polygon = clip_plane_to_box([1, 0, 0], 2.0, 5.0)
        assert np.allclose(polygon.vertices[:, 0], 2.0)
        assert polygon_area(polygon.vertices) == pytest.approx(100.0)

    def test_offset_plane(self):
        normal = np.array([1.0, 1.0, 0.0]) / math.sqrt(2)
        polygon = clip_plane_to_box(normal, 1.0, 2.0)
        assert np.allclose(polygon.vertices @ normal, 1.0, atol=1e-9)

    def test_zero_normal(self):
        assert clip_plane_to_box([0, 0, 0], 0.0, 5.0).is_empty

    def test_invalid_half_extent(self):
        with pytest.raises(ValueError, match="half_extent"):
            clip_plane_to_box([0, 0, 1], 0.0, 0.0)

    def test_triangle_fan(self):
        polygon = clip_plane_to_box([0, 0, 1], 0.0, 5.0)
        n = len(polygon.vertices)
        triangles = polygon.triangles()
        assert len(triangles) == n - 2
        assert all(t[0] == 0 for t in triangles)

    def test_centroid(self):
        polygon = clip_plane_to_box([0, 0, 1], 1.0, 5.0)
        assert np.allclose(polygon.centroid(), [0, 0, 1])
        assert np.allclose(ClippedPolygon().centroid(), [0, 0, 0])

    @pytest.mark.parametrize('normal', [
        [1, 0, 0], [0, 1, 0], [0, 0, 1], [1, 1, 1], [0.95, 0.1, 0.3], [-1, 2, 0.5],
    ])
    def test_tangents_orthonormal(self, normal):
        n = np.array(normal, dtype=float)
        n = n / np.linalg.norm(n)
        t1, t2 = plane_tangents(n)
        assert np.linalg.norm(t1) == pytest.approx(1.0)
        assert np.linalg.norm(t2) == pytest.approx(1.0)
        assert abs(np.dot(t1, t2)) < 1e-12
        assert abs(np.dot(t1, n)) < 1e-12
        assert abs(np.dot(t2, n)) < 1e-12
