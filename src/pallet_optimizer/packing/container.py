# src/pallet_optimizer/packing/container.py

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from pallet_optimizer.metrics import container_utilization
from pallet_optimizer.models import (
    Container,
    Demand,
    Dimensions,
    OptimizationResult,
    Pallet,
    PalletArrangement,
    PalletLoad,
    Rotation,
)
from pallet_optimizer.packing.pallet import load_pallet, sort_demands
from pallet_optimizer.packing.placement import DEFAULT_SCAN_DIVISOR
from pallet_optimizer.units import normalize, normalize_dimensions

logger = logging.getLogger(__name__)

PalletLoader = Callable[..., PalletLoad]


def _fit_count(space: float, size: float) -> int:
    if size <= 0:
        return 0
    return int(math.floor(round(space / size, 6)))


@dataclass(frozen=True)
class PalletGrid:
    """Slots for loaded pallets inside a container, filled layer by layer, row by row."""

    rotation: Rotation
    row_length: int
    per_layer: int
    layers: int
    slot_length: float
    slot_width: float
    unit_height: float

    @property
    def capacity(self) -> int:
        return self.per_layer * self.layers

    def origin(self, index: int) -> tuple[float, float, float]:
        layer, slot = divmod(index, self.per_layer)
        row, col = divmod(slot, self.row_length)
        return (col * self.slot_length, row * self.slot_width, layer * self.unit_height)


def plan_pallet_grid(container: Dimensions, pallet: Dimensions, unit_height: float) -> PalletGrid:
    """
    Compare both pallet orientations on the container floor and keep the one
    with more pallets per layer (ties keep the pallet unrotated).
    Dimensions must already be in cm; `unit_height` is deck plus load.
    """
    along_length = _fit_count(container.length, pallet.length)
    along_width = _fit_count(container.width, pallet.width)
    turned_length = _fit_count(container.length, pallet.width)
    turned_width = _fit_count(container.width, pallet.length)

    layers = _fit_count(container.height, unit_height)

    if along_length * along_width >= turned_length * turned_width:
        return PalletGrid(
            rotation=Rotation.LENGTH_WIDTH,
            row_length=along_length,
            per_layer=along_length * along_width,
            layers=layers,
            slot_length=pallet.length,
            slot_width=pallet.width,
            unit_height=unit_height,
        )
    return PalletGrid(
        rotation=Rotation.WIDTH_LENGTH,
        row_length=turned_length,
        per_layer=turned_length * turned_width,
        layers=layers,
        slot_length=pallet.width,
        slot_width=pallet.length,
        unit_height=unit_height,
    )


def resolve_load_height(pallet: Pallet, container: Dimensions, deck: Dimensions) -> float:
    """Stacking height above the deck in cm; the container's free height when the pallet leaves it open."""
    if pallet.load_height is not None:
        return normalize(pallet.load_height, pallet.unit)
    return container.height - deck.height


def load_container(
    demands: Iterable[Demand],
    container: Container,
    pallet: Pallet,
    *,
    pallet_loader: Optional[PalletLoader] = None,
    scan_divisor: int = DEFAULT_SCAN_DIVISOR,
) -> OptimizationResult:
    """
    Fill the container pallet by pallet until demand, pallet slots or the
    container's weight ceiling run out. Unplaced units come back in
    `remaining_demands`; that is a normal outcome, not a failure.
    """
    pallet_loader = pallet_loader or load_pallet

    container_dims = normalize_dimensions(container.dimensions)
    deck = normalize_dimensions(pallet.dimensions)
    load_height = resolve_load_height(pallet, container_dims, deck)
    grid = plan_pallet_grid(container_dims, deck, deck.height + load_height)

    if load_height <= 0:
        grid = replace(grid, layers=0)

    logger.debug(
        "Pallet grid: %d per layer x %d layers (%s), load height %.1f cm",
        grid.per_layer, grid.layers, grid.rotation.value, load_height,
    )

    remaining = sort_demands(d for d in demands if d.quantity > 0)
    arrangements: list[PalletArrangement] = []
    total_weight = 0.0

    for index in range(grid.capacity):
        if not remaining:
            break

        if total_weight + pallet.weight > container.max_weight:
            logger.debug("Container weight ceiling reached after %d pallets", len(arrangements))
            break

        load = pallet_loader(
            remaining,
            pallet,
            max_weight=container.max_weight - total_weight,
            load_height=load_height,
            scan_divisor=scan_divisor,
        )

        # Progress guard: nothing placed means no further pallet can help
        if not load.placements:
            break

        arrangements.append(
            PalletArrangement(
                index=index,
                pallet=pallet,
                origin=grid.origin(index),
                rotation=grid.rotation,
                placements=load.placements,
                weight=load.weight,
                utilization=load.utilization,
            )
        )
        total_weight += load.weight
        remaining = load.remaining

    unplaced = sum(d.quantity for d in remaining)
    if grid.capacity == 0:
        message = "Pallet does not fit in the container"
    elif unplaced:
        message = f"Optimization completed with {unplaced} unplaced units"
    else:
        message = "Optimization completed successfully"

    return OptimizationResult(
        success=True,
        message=message,
        utilization=container_utilization(container, arrangements),
        pallet_arrangements=arrangements,
        remaining_demands=remaining,
        total_weight=total_weight,
    )
