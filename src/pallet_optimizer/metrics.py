from __future__ import annotations

from typing import Iterable, Optional

from pallet_optimizer.models import (
    Container,
    OptimizationResult,
    OptimizationSummary,
    PalletArrangement,
    ProductPlacement,
)
from pallet_optimizer.units import normalize_dimensions


def placement_volume(p: ProductPlacement) -> float:
    L, W, H = p.size  # size is the oriented (L,W,H) in cm
    return float(L) * float(W) * float(H) * p.quantity


def utilization_percent(used_volume: float, total_volume: float) -> float:
    return 0.0 if total_volume <= 0 else used_volume / total_volume * 100.0


def used_volume(arrangements: Iterable[PalletArrangement]) -> float:
    return sum(placement_volume(p) for a in arrangements for p in a.placements)


def container_utilization(container: Container, arrangements: Iterable[PalletArrangement]) -> float:
    """Placed item volume over container volume, percent."""
    return utilization_percent(used_volume(arrangements), normalize_dimensions(container.dimensions).volume)


def summarize(result: OptimizationResult, container: Optional[Container] = None) -> OptimizationSummary:
    placed = sum(p.quantity for a in result.pallet_arrangements for p in a.placements)
    remaining = sum(d.quantity for d in result.remaining_demands)

    weight_utilization = None
    if container is not None:
        weight_utilization = result.total_weight / container.max_weight * 100.0

    return OptimizationSummary(
        success=result.success,
        message=result.message,
        utilization=result.utilization,
        total_pallets=len(result.pallet_arrangements),
        total_products=placed,
        remaining_products=remaining,
        weight_utilization=weight_utilization,
    )
