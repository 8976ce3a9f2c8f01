"""Optimizer entry point: validation, feasibility checks and cached loading."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pallet_optimizer.cache import ResultCache, demands_key, make_key
from pallet_optimizer.config import Settings
from pallet_optimizer.containers import get_pallet
from pallet_optimizer.models import (
    Container,
    Demand,
    OptimizationResult,
    Pallet,
    PalletLoad,
)
from pallet_optimizer.packing.container import load_container
from pallet_optimizer.packing.pallet import load_pallet
from pallet_optimizer.validation import oversized_products, validate

logger = logging.getLogger(__name__)


def failure(message: str, remaining: Iterable[Demand] = ()) -> OptimizationResult:
    return OptimizationResult(
        success=False,
        message=message,
        utilization=0.0,
        pallet_arrangements=[],
        remaining_demands=list(remaining),
    )


def _too_large_message(names: list[str]) -> str:
    if len(names) == 1:
        return f"Product {names[0]} is too large for the container"
    return f"Products {', '.join(names)} are too large for the container"


class Optimizer:
    """
    Packs demand onto pallets and pallets into a container.

    `cache` holds finished container results, `pallet_cache` the single
    pallet passes behind them. Pass either in to share it between
    optimizers or to control its size.
    """

    def __init__(
        self,
        cache: Optional[ResultCache] = None,
        settings: Optional[Settings] = None,
        pallet_cache: Optional[ResultCache] = None,
    ):
        self.settings = settings or Settings()
        self.cache = cache if cache is not None else ResultCache(self.settings.cache_size)
        self.pallet_cache = pallet_cache if pallet_cache is not None else ResultCache(self.settings.cache_size)
        self.default_pallet = get_pallet(self.settings.default_pallet)

    def load_pallet(
        self,
        demands: Iterable[Demand],
        pallet: Pallet,
        *,
        max_weight: Optional[float] = None,
        load_height: Optional[float] = None,
        scan_divisor: Optional[int] = None,
    ) -> PalletLoad:
        demands = list(demands)
        scan_divisor = scan_divisor or self.settings.scan_divisor
        key = make_key("pallet", demands_key(demands), pallet, max_weight, load_height, scan_divisor)
        return self.pallet_cache.get_or_compute(
            key,
            lambda: load_pallet(
                demands,
                pallet,
                max_weight=max_weight,
                load_height=load_height,
                scan_divisor=scan_divisor,
            ),
        )

    def load_container(self, demands: Iterable[Demand], container: Container, pallet: Pallet) -> OptimizationResult:
        demands = list(demands)
        scan_divisor = self.settings.scan_divisor
        key = make_key("container", demands_key(demands), container, pallet, scan_divisor)
        return self.cache.get_or_compute(
            key,
            lambda: load_container(
                demands,
                container,
                pallet,
                pallet_loader=self.load_pallet,
                scan_divisor=scan_divisor,
            ),
        )

    def optimize(
        self,
        demands: Optional[Iterable[Demand]],
        container: Container,
        pallet: Optional[Pallet] = None,
    ) -> OptimizationResult:
        """
        Plan the load for `demands`.

        Expected problems come back as data: a failure result for empty,
        invalid or oversized demand, and `remaining_demands` for units that
        found no room.
        """
        demands = list(demands or [])
        pallet = pallet or self.default_pallet

        if not demands:
            return failure("No products to optimize")

        report = validate(demands)
        if not report.valid:
            logger.info("Rejected invalid products: %s", report.invalid_names)
            return failure(f"Invalid products: {', '.join(report.invalid_names)}", demands)

        too_large = oversized_products(demands, container)
        if too_large:
            logger.info("Rejected oversized products: %s", too_large)
            return failure(_too_large_message(too_large), demands)

        result = self.load_container(demands, container, pallet)
        logger.info(
            "pallets=%d, utilization=%.2f%%, unplaced_units=%d",
            len(result.pallet_arrangements),
            result.utilization,
            sum(d.quantity for d in result.remaining_demands),
        )
        return result


def optimize(
    demands: Optional[Iterable[Demand]],
    container: Container,
    pallet: Optional[Pallet] = None,
    optimizer: Optional[Optimizer] = None,
) -> OptimizationResult:
    """One-shot helper; pass an Optimizer to keep its cache across calls."""
    return (optimizer or Optimizer()).optimize(demands, container, pallet)
