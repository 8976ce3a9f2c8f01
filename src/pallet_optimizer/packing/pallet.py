# src/pallet_optimizer/packing/pallet.py

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pallet_optimizer.cache import canonical
from pallet_optimizer.geometry import OccupancySpace
from pallet_optimizer.metrics import placement_volume, utilization_percent
from pallet_optimizer.models import (
    ALL_ROTATIONS,
    UPRIGHT_ROTATIONS,
    Demand,
    Pallet,
    PalletLoad,
    Product,
    ProductPlacement,
    Rotation,
)
from pallet_optimizer.packing.placement import DEFAULT_SCAN_DIVISOR, find_position
from pallet_optimizer.units import normalize, normalize_dimensions

logger = logging.getLogger(__name__)


def allowed_rotations(product: Product) -> tuple[Rotation, ...]:
    return UPRIGHT_ROTATIONS if product.keep_upright else ALL_ROTATIONS


def product_dims(product: Product) -> tuple[float, float, float]:
    """Unit dimensions of `product` in cm."""
    return normalize_dimensions(product.dimensions).as_tuple()


def packing_priority(demand: Demand) -> tuple:
    """
    Sort key: volume descending, weight descending, height ascending.
    Ties fall back to the serialised demand so input order never matters.
    """
    length, width, height = product_dims(demand.product)
    return (-(length * width * height), -demand.product.weight, height, canonical(demand))


def sort_demands(demands: Iterable[Demand]) -> list[Demand]:
    return sorted(demands, key=packing_priority)


def load_pallet(
    demands: Iterable[Demand],
    pallet: Pallet,
    *,
    max_weight: Optional[float] = None,
    load_height: Optional[float] = None,
    scan_divisor: int = DEFAULT_SCAN_DIVISOR,
) -> PalletLoad:
    """
    Load one pallet greedily.

    - Demand is processed in packing priority order, one unit at a time
    - A product stops at the first unit that would break the weight
      ceiling or that finds no position; its remainder is carried over
    - `max_weight` lowers the pallet's own ceiling (e.g. to what the
      container can still take)
    - `load_height` (cm) overrides `pallet.load_height`

    Nothing placed at all means the pallet cannot take any of the demand.
    """
    if load_height is None:
        if pallet.load_height is None:
            raise ValueError("Pallet has no load_height; pass load_height explicitly")
        load_height = normalize(pallet.load_height, pallet.unit)

    footprint = normalize_dimensions(pallet.dimensions)
    space = OccupancySpace(footprint.length, footprint.width, load_height)

    ceiling = pallet.max_weight if max_weight is None else min(pallet.max_weight, max_weight)
    current_weight = pallet.weight

    placements: list[ProductPlacement] = []
    remaining: list[Demand] = []

    for demand in sort_demands(d for d in demands if d.quantity > 0):
        product = demand.product
        dims = product_dims(product)
        rotations = allowed_rotations(product)

        placed = 0
        for _ in range(demand.quantity):
            if current_weight + product.weight > ceiling:
                logger.debug("Weight ceiling %.1f reached for %s", ceiling, product.id)
                break

            found = find_position(dims, space, rotations, scan_divisor)
            if found is None:
                break

            position, rotation = found
            space.place(dims, position, rotation)
            placements.append(
                ProductPlacement(
                    product_id=product.id,
                    position=position,
                    rotation=rotation,
                    size=rotation.apply(dims),
                )
            )
            current_weight += product.weight
            placed += 1

        if placed < demand.quantity:
            remaining.append(demand.model_copy(update={"quantity": demand.quantity - placed}))

    used_volume = sum(placement_volume(p) for p in placements)

    return PalletLoad(
        placements=placements,
        remaining=remaining,
        weight=current_weight,
        utilization=utilization_percent(used_volume, space.volume),
    )
