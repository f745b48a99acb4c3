"""
Goldberg polyhedron topology generator.

Builds the dual of a subdivided icosahedron: every vertex of the geodesic
triangle mesh becomes one cell whose corners are the centroids of the
triangles around it. The result is 12 pentagons and 10 * (4**S - 1)
hexagons tiling a sphere of the requested radius.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .errors import TopologyError


# ============================================================================
# Constants
# ============================================================================

# Above this |normal.y| the +Y reference axis is too close to the normal
# for a stable cross product, so +X is used instead.
POLE_THRESHOLD = 0.9

NUM_PENTAGONS = 12

_PHI = (1.0 + math.sqrt(5.0)) / 2.0

ICOSAHEDRON_VERTICES = np.array([
    [-1.0, _PHI, 0.0], [1.0, _PHI, 0.0], [-1.0, -_PHI, 0.0], [1.0, -_PHI, 0.0],
    [0.0, -1.0, _PHI], [0.0, 1.0, _PHI], [0.0, -1.0, -_PHI], [0.0, 1.0, -_PHI],
    [_PHI, 0.0, -1.0], [_PHI, 0.0, 1.0], [-_PHI, 0.0, -1.0], [-_PHI, 0.0, 1.0],
], dtype=np.float64)

ICOSAHEDRON_FACES: Tuple[Tuple[int, int, int], ...] = (
    (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
    (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
    (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
    (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
)

Face = Tuple[int, int, int]


# ============================================================================
# Polyhedron Result
# ============================================================================

@dataclass(frozen=True, eq=False)
class Polyhedron:
    """
    Generated cell layout of a Goldberg polyhedron.

    Attributes:
        radius: Sphere radius every point lies on.
        subdivisions: Number of icosahedron subdivision rounds.
        polygons: Per-cell (k, 3) corner arrays, counter-clockwise seen
            from outside.
        adjacency: Per-cell sorted tuple of neighbor ids.
        centers: (N, 3) array of cell centers on the sphere.
    """

    radius: float
    subdivisions: int
    polygons: List[np.ndarray]
    adjacency: List[Tuple[int, ...]]
    centers: np.ndarray

    @property
    def num_cells(self) -> int:
        """Number of cells on the polyhedron."""
        return len(self.polygons)

    @property
    def pentagon_ids(self) -> List[int]:
        """Ids of the five-sided cells."""
        return [i for i, nbs in enumerate(self.adjacency) if len(nbs) == 5]


def expected_cell_count(subdivisions: int) -> int:
    """Closed-form vertex count of an icosahedron after S subdivisions."""
    return 10 * 4 ** subdivisions + 2


# ============================================================================
# Generator
# ============================================================================

def generate_goldberg_polyhedron(
    radius: float = 2.0,
    subdivisions: int = 2,
    validate: bool = True,
) -> Polyhedron:
    """
    Generate the cells of a Goldberg polyhedron.

    Args:
        radius: Radius of the sphere the cells lie on.
        subdivisions: Non-negative number of subdivision rounds.
        validate: Check topology invariants before returning.

    Returns:
        Polyhedron with parallel polygon and adjacency lists.

    Raises:
        ValueError: If radius or subdivisions are out of range.
        TopologyError: If the generated mesh is inconsistent.
    """
    if radius <= 0:
        raise ValueError("Radius must be positive")
    if (
        isinstance(subdivisions, bool)
        or not isinstance(subdivisions, int)
        or subdivisions < 0
    ):
        raise ValueError("Subdivision depth must be a non-negative integer")

    vertices = list(_normalize(ICOSAHEDRON_VERTICES))
    faces: List[Face] = list(ICOSAHEDRON_FACES)
    for _ in range(subdivisions):
        faces = _subdivide(vertices, faces)

    points = np.array(vertices)
    face_array = np.array(faces, dtype=np.int64)
    centroids = _normalize(points[face_array].mean(axis=1)) * radius
    incident = _incident_faces(faces, len(points))

    polygons = []
    adjacency = []
    for vertex_id, face_ids in enumerate(incident):
        polygons.append(
            _sort_boundary(points[vertex_id], centroids[face_ids], radius)
        )
        adjacency.append(_neighbors_of(vertex_id, face_ids, faces))

    polyhedron = Polyhedron(
        radius=float(radius),
        subdivisions=subdivisions,
        polygons=polygons,
        adjacency=adjacency,
        centers=points * radius,
    )
    if validate:
        validate_topology(polyhedron)
    return polyhedron


def _normalize(vectors: np.ndarray) -> np.ndarray:
    """Scale each row to unit length."""
    return vectors / np.linalg.norm(vectors, axis=-1, keepdims=True)


def _subdivide(vertices: List[np.ndarray], faces: Sequence[Face]) -> List[Face]:
    """Split every triangle into four, appending new midpoints to vertices."""
    cache: Dict[Tuple[int, int], int] = {}
    next_faces: List[Face] = []
    for v1, v2, v3 in faces:
        a = _midpoint(v1, v2, vertices, cache)
        b = _midpoint(v2, v3, vertices, cache)
        c = _midpoint(v3, v1, vertices, cache)
        next_faces.extend([(v1, a, c), (v2, b, a), (v3, c, b), (a, b, c)])
    return next_faces


def _midpoint(
    p1: int,
    p2: int,
    vertices: List[np.ndarray],
    cache: Dict[Tuple[int, int], int],
) -> int:
    """Index of the unit-sphere midpoint of an edge, shared across faces."""
    key = (p1, p2) if p1 < p2 else (p2, p1)
    index = cache.get(key)
    if index is None:
        midpoint = vertices[p1] + vertices[p2]
        vertices.append(midpoint / np.linalg.norm(midpoint))
        index = len(vertices) - 1
        cache[key] = index
    return index


def _incident_faces(faces: Sequence[Face], num_vertices: int) -> List[List[int]]:
    """For every vertex, the indices of the triangles touching it."""
    incident: List[List[int]] = [[] for _ in range(num_vertices)]
    for face_id, face in enumerate(faces):
        for vertex_id in face:
            incident[vertex_id].append(face_id)
    return incident


def _tangent_basis(normal: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Two unit vectors spanning the tangent plane, right-handed with normal."""
    if abs(normal[1]) > POLE_THRESHOLD:
        reference = np.array([1.0, 0.0, 0.0])
    else:
        reference = np.array([0.0, 1.0, 0.0])
    tangent = np.cross(reference, normal)
    tangent /= np.linalg.norm(tangent)
    bitangent = np.cross(normal, tangent)
    return tangent, bitangent


def _sort_boundary(
    normal: np.ndarray, corners: np.ndarray, radius: float
) -> np.ndarray:
    """Order corners counter-clockwise around the cell center."""
    tangent, bitangent = _tangent_basis(normal)
    offsets = corners - normal * radius
    angles = np.arctan2(offsets @ bitangent, offsets @ tangent)
    order = np.argsort(angles, kind="stable")
    return corners[order]


def _neighbors_of(
    vertex_id: int, face_ids: Sequence[int], faces: Sequence[Face]
) -> Tuple[int, ...]:
    """Every other vertex sharing a triangle with vertex_id."""
    neighbors = set()
    for face_id in face_ids:
        neighbors.update(faces[face_id])
    neighbors.discard(vertex_id)
    return tuple(sorted(neighbors))


# ============================================================================
# Validation
# ============================================================================

def validate_topology(polyhedron: Polyhedron) -> None:
    """
    Check the structural invariants every game algorithm relies on.

    Args:
        polyhedron: Generated polyhedron to check.

    Raises:
        TopologyError: On wrong cell count, bad degree, asymmetric
            adjacency, or a degenerate / inward-wound polygon.
    """
    num_cells = polyhedron.num_cells
    expected = expected_cell_count(polyhedron.subdivisions)
    if num_cells != expected:
        raise TopologyError(f"Expected {expected} cells, generated {num_cells}")
    if len(polyhedron.adjacency) != num_cells:
        raise TopologyError("Polygon and adjacency lists differ in length")

    neighbor_sets = [set(nbs) for nbs in polyhedron.adjacency]
    pentagons = 0
    for cell_id, neighbors in enumerate(polyhedron.adjacency):
        degree = len(neighbors)
        if degree not in (5, 6):
            raise TopologyError(f"Cell {cell_id} has {degree} neighbors")
        if len(neighbor_sets[cell_id]) != degree or cell_id in neighbor_sets[cell_id]:
            raise TopologyError(f"Cell {cell_id} has duplicate or self neighbors")
        for other in neighbors:
            if not 0 <= other < num_cells or cell_id not in neighbor_sets[other]:
                raise TopologyError(
                    f"Adjacency between {cell_id} and {other} is not symmetric"
                )
        if degree == 5:
            pentagons += 1
        _check_polygon(
            cell_id, polyhedron.polygons[cell_id], polyhedron.centers[cell_id], degree
        )

    if pentagons != NUM_PENTAGONS:
        raise TopologyError(f"Expected {NUM_PENTAGONS} pentagons, found {pentagons}")


def _check_polygon(
    cell_id: int, polygon: np.ndarray, center: np.ndarray, degree: int
) -> None:
    """Every fan triangle around the center must turn counter-clockwise."""
    if polygon.shape != (degree, 3):
        raise TopologyError(
            f"Cell {cell_id} boundary has shape {polygon.shape}, expected ({degree}, 3)"
        )
    normal = center / np.linalg.norm(center)
    offsets = polygon - center
    turns = np.cross(offsets, np.roll(offsets, -1, axis=0)) @ normal
    if np.any(turns <= 0):
        raise TopologyError(f"Cell {cell_id} boundary is degenerate or wound inward")
