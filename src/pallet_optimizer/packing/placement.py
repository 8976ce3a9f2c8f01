# src/pallet_optimizer/packing/placement.py

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pallet_optimizer.geometry import OccupancySpace, cells
from pallet_optimizer.models import Position, Rotation, UPRIGHT_ROTATIONS

logger = logging.getLogger(__name__)

DEFAULT_SCAN_DIVISOR = 20


def candidate_rotations(
    dims: tuple[float, float, float],
    rotations: Iterable[Rotation] = UPRIGHT_ROTATIONS,
) -> list[Rotation]:
    """
    Rotations worth trying for `dims`, in the given order.
    Rotations producing the same oriented size as an earlier one are dropped
    (for cubes most of them are identical).
    """
    seen = set()
    out: list[Rotation] = []
    for rotation in rotations:
        key = tuple(cells(v) for v in rotation.apply(dims))
        if key not in seen:
            seen.add(key)
            out.append(rotation)
    return out


def scan_step(space: OccupancySpace, scan_divisor: int = DEFAULT_SCAN_DIVISOR) -> int:
    length, width, _ = space.shape
    return max(1, min(length, width) // scan_divisor)


def corner_positions(dims: tuple[float, float, float], space: OccupancySpace, rotation: Rotation) -> list[Position]:
    """
    Floor corners for one orientation:
      origin, far edge along width, far edge along length.
    """
    L, W, _ = rotation.apply(dims)
    length, width, _ = space.shape
    return [
        Position(x=0, y=0, z=0),
        Position(x=0, y=max(0, width - cells(W)), z=0),
        Position(x=max(0, length - cells(L)), y=0, z=0),
    ]


def _refine(
    dims: tuple[float, float, float],
    space: OccupancySpace,
    rotation: Rotation,
    x: int,
    y: int,
    z: int,
    step: int,
) -> Position:
    """Scan back up to one step in x and y for a tighter fit; the stepped match is the fallback."""
    for fx in range(max(0, x - step), x + 1):
        for fy in range(max(0, y - step), y + 1):
            if space.fits_at(dims, fx, fy, z, rotation):
                return Position(x=fx, y=fy, z=z)
    return Position(x=x, y=y, z=z)


def find_position(
    dims: tuple[float, float, float],
    space: OccupancySpace,
    rotations: Iterable[Rotation] = UPRIGHT_ROTATIONS,
    scan_divisor: int = DEFAULT_SCAN_DIVISOR,
) -> Optional[tuple[Position, Rotation]]:
    """
    Find a usable (position, rotation) for an item of size `dims` (cm).

    - Tries the floor corners first, then a stepped scan bottom-up
    - Refines a stepped match backwards within one step
    - Returns None when nothing fits in the remaining free space

    Heuristic: every returned pair passes `space.can_place`, but a fit is not
    guaranteed to be found when one exists.
    """
    rotations = [r for r in candidate_rotations(dims, rotations) if space.fits_bounds(r.apply(dims))]
    if not rotations:
        return None

    for corner in range(3):
        for rotation in rotations:
            position = corner_positions(dims, space, rotation)[corner]
            if space.can_place(dims, position, rotation):
                return position, rotation

    step = scan_step(space, scan_divisor)
    length, width, height = space.shape

    for z in range(0, height, step):
        for x in range(0, length, step):
            for y in range(0, width, step):
                # Occupied anchor cell rules out every rotation
                if not space.is_free(x, y, z):
                    continue
                for rotation in rotations:
                    if not space.fits_at(dims, x, y, z, rotation):
                        continue
                    if step > 1:
                        return _refine(dims, space, rotation, x, y, z, step), rotation
                    return Position(x=x, y=y, z=z), rotation

    logger.debug("No position for %s in %r", dims, space)
    return None
