"""Input checks run before any geometry."""

from __future__ import annotations

import math
from typing import Any, Iterable, NamedTuple

from pallet_optimizer.models import Container, Demand
from pallet_optimizer.units import normalize, normalize_dimensions

DIMENSION_FIELDS = ("length", "width", "height")


class ValidationReport(NamedTuple):
    valid: bool
    invalid_names: list[str]


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def has_valid_dimensions(demand: Demand) -> bool:
    dims = getattr(demand.product, "dimensions", None)
    if dims is None:
        return False
    if getattr(dims, "unit", None) is None:
        return False
    return all(_is_positive_number(getattr(dims, name, None)) for name in DIMENSION_FIELDS)


def validate(demands: Iterable[Demand]) -> ValidationReport:
    """
    Flag every demand whose product dimensions are missing, non-numeric or
    not strictly positive. All offenders are reported, not just the first.
    """
    invalid = [d.product.label for d in demands if not has_valid_dimensions(d)]
    return ValidationReport(valid=not invalid, invalid_names=invalid)


def oversized_products(demands: Iterable[Demand], container: Container) -> list[str]:
    """Names of products larger than the container on any axis, compared in cm, unrotated."""
    bounds = normalize_dimensions(container.dimensions).as_tuple()
    names: list[str] = []
    for demand in demands:
        dims = demand.product.dimensions
        size = tuple(normalize(getattr(dims, name), dims.unit) for name in DIMENSION_FIELDS)
        if any(s > b for s, b in zip(size, bounds)) and demand.product.label not in names:
            names.append(demand.product.label)
    return names
