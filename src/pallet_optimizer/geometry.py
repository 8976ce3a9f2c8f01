"""Geometry utilities: cell rounding and voxel occupancy."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from pallet_optimizer.models import Rotation

if TYPE_CHECKING:
    from pallet_optimizer.models import Position

EPS = 1e-6


def cells(value: float) -> int:
    """Number of whole centimetre cells covered by a length in cm."""
    return int(math.ceil(round(float(value), 6)))


class OccupancySpace:
    """
    Discretised 3D volume, one boolean cell per cubic centimetre.

    Lives for a single pallet loading pass; placements are order dependent
    so it is never shared between threads.
    """

    def __init__(self, length: float, width: float, height: float):
        self.length = float(length)
        self.width = float(width)
        self.height = float(height)
        self.shape = (cells(length), cells(width), cells(height))
        self.grid = np.zeros(self.shape, dtype=bool)

    def __repr__(self) -> str:
        return f"OccupancySpace({self.length} x {self.width} x {self.height}, occupied={self.occupied_cells()})"

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def fits_bounds(self, dims: tuple[float, float, float]) -> bool:
        """True when an item of effective size `dims` fits the empty space at all."""
        L, W, H = dims
        return (
            L <= self.length + EPS
            and W <= self.width + EPS
            and H <= self.height + EPS
        )

    def _extent(self, dims, x: int, y: int, z: int, rotation: Rotation):
        L, W, H = rotation.apply(dims)

        # Real extent first, then the cell grid
        if x + L > self.length + EPS or y + W > self.width + EPS or z + H > self.height + EPS:
            return None
        x2, y2, z2 = x + cells(L), y + cells(W), z + cells(H)
        if x2 > self.shape[0] or y2 > self.shape[1] or z2 > self.shape[2]:
            return None
        return x, y, z, x2, y2, z2

    def can_place(self, dims: tuple[float, float, float], position: "Position", rotation: Rotation) -> bool:
        """
        Check if an item of size `dims` (L, W, H, cm) fits at `position`
        under `rotation`:
        - inside the space bounds (checked before any cell is read)
        - no covered cell already occupied
        """
        return self.fits_at(dims, position.x, position.y, position.z, rotation)

    def fits_at(self, dims: tuple[float, float, float], x: int, y: int, z: int, rotation: Rotation) -> bool:
        extent = self._extent(dims, x, y, z, rotation)
        if extent is None:
            return False
        x1, y1, z1, x2, y2, z2 = extent
        return not self.grid[x1:x2, y1:y2, z1:z2].any()

    def place(self, dims: tuple[float, float, float], position: "Position", rotation: Rotation) -> None:
        """Mark the cells covered by the item. The caller has checked `can_place`."""
        L, W, H = rotation.apply(dims)
        x, y, z = position.x, position.y, position.z
        self.grid[x:x + cells(L), y:y + cells(W), z:z + cells(H)] = True

    def is_free(self, x: int, y: int, z: int) -> bool:
        return not self.grid[x, y, z]

    def occupied_cells(self) -> int:
        return int(np.count_nonzero(self.grid))
