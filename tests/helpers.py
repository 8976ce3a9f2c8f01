from __future__ import annotations

from pallet_optimizer.geometry import cells
from pallet_optimizer.models import Demand, Dimensions, Pallet, Product


def boxes_overlap(a, b) -> bool:
    """
    AABB overlap for bounds (x1, y1, z1, x2, y2, z2).
    Touching faces or edges do not count.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1) and (az1 < bz2 and az2 > bz1)


def placement_bounds(p):
    """Cell bounds covered by a placement."""
    L, W, H = p.size
    x, y, z = p.position.x, p.position.y, p.position.z
    return (x, y, z, x + cells(L), y + cells(W), z + cells(H))


def make_product(pid, length, width, height, weight=0.0, unit="cm", **kwargs):
    return Product(
        id=pid,
        weight=weight,
        dimensions=Dimensions(length=length, width=width, height=height, unit=unit),
        **kwargs,
    )


def make_demand(pid, length, width, height, quantity, weight=0.0, unit="cm", **kwargs):
    return Demand(product=make_product(pid, length, width, height, weight, unit, **kwargs), quantity=quantity)


def make_pallet(length=120, width=100, height=15, weight=20, max_weight=1000, **kwargs):
    return Pallet(length=length, width=width, height=height, weight=weight, max_weight=max_weight, **kwargs)


def assert_within_space(placements, length, width, height):
    for p in placements:
        x1, y1, z1, x2, y2, z2 = placement_bounds(p)
        assert x1 >= 0 and y1 >= 0 and z1 >= 0
        assert x2 <= length
        assert y2 <= width
        assert z2 <= height


def assert_no_overlaps(placements):
    bounds = [placement_bounds(p) for p in placements]
    for i in range(len(bounds)):
        for j in range(i + 1, len(bounds)):
            assert not boxes_overlap(bounds[i], bounds[j])


def placed_units(result) -> dict[str, int]:
    counts: dict[str, int] = {}
    for arrangement in result.pallet_arrangements:
        for pid, qty in arrangement.quantities().items():
            counts[pid] = counts.get(pid, 0) + qty
    return counts
