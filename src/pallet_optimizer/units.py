"""Length unit conversion. Everything geometric runs in centimetres."""

from __future__ import annotations

from pallet_optimizer.models import Dimensions, Unit

CANONICAL_UNIT = Unit.CM
CM_PER_INCH = 2.54


def normalize(value: float, unit: Unit | str) -> float:
    """Convert `value` expressed in `unit` to centimetres."""
    unit = Unit(unit)
    if unit is Unit.IN:
        return float(value) * CM_PER_INCH
    if unit is Unit.MM:
        return float(value) / 10.0
    return float(value)


def normalize_dimensions(dims: Dimensions) -> Dimensions:
    return Dimensions(
        length=normalize(dims.length, dims.unit),
        width=normalize(dims.width, dims.unit),
        height=normalize(dims.height, dims.unit),
        unit=CANONICAL_UNIT,
    )
