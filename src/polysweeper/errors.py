"""
Exception types raised by the polysweeper core.
"""


class PolysweeperError(Exception):
    """Base class for all polysweeper errors."""


class TopologyError(PolysweeperError):
    """Generated polyhedron violates a structural invariant."""


class MinePlacementError(PolysweeperError):
    """Mine placement was requested on a board that already has mines."""
