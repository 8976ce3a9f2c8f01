from __future__ import annotations

import pytest

from pallet_optimizer.cache import ResultCache
from pallet_optimizer.engine import Optimizer, optimize
from pallet_optimizer.models import Container

from helpers import assert_no_overlaps, make_demand, make_pallet, placed_units


@pytest.fixture
def container():
    return Container(length=1200, width=240, height=240, max_weight=1000)


@pytest.fixture
def optimizer():
    return Optimizer(cache=ResultCache(capacity=16))


def test_single_product_fits_one_pallet(optimizer, container):
    result = optimizer.optimize([make_demand("BOX", 50, 40, 30, 4, weight=5)], container)

    assert result.success is True
    assert len(result.pallet_arrangements) == 1
    assert result.pallet_arrangements[0].quantities() == {"BOX": 4}
    assert result.remaining_demands == []
    assert result.utilization > 0
    assert_no_overlaps(result.pallet_arrangements[0].placements)


def test_heavy_product_stops_at_weight_ceiling(optimizer, container):
    result = optimizer.optimize([make_demand("HEAVY", 50, 40, 30, 4, weight=300)], container)

    assert result.success is True
    assert placed_units(result) == {"HEAVY": 3}
    assert [(d.product.id, d.quantity) for d in result.remaining_demands] == [("HEAVY", 1)]
    assert result.pallet_arrangements[0].weight == pytest.approx(920.0)


def test_oversized_product_fails_fast(optimizer, container):
    demands = [make_demand("GIANT", 2000, 2000, 2000, 1), make_demand("BOX", 50, 40, 30, 4)]

    result = optimizer.optimize(demands, container)

    assert result.success is False
    assert result.message == "Product GIANT is too large for the container"
    assert result.pallet_arrangements == []
    assert result.remaining_demands == demands
    assert len(optimizer.cache) == 0


def test_oversized_regardless_of_quantity(optimizer, container):
    for quantity in (0, 1, 50):
        result = optimizer.optimize([make_demand("GIANT", 10, 10, 300, quantity)], container)
        assert result.success is False
        assert "too large" in result.message


def test_empty_demand(optimizer, container):
    for demands in ([], None):
        result = optimizer.optimize(demands, container)

        assert result.success is False
        assert result.message == "No products to optimize"
        assert result.utilization == 0.0
        assert result.pallet_arrangements == []
        assert result.remaining_demands == []


def test_invalid_products_fail_before_cache(optimizer, container):
    from pallet_optimizer.models import Demand, Dimensions, Product

    bad = Demand(product=Product(id="p1", name="Broken", dimensions=Dimensions(length=-10, width=10, height=10)), quantity=3)
    missing = Demand(product=Product(id="p2"), quantity=1)

    result = optimizer.optimize([bad, missing, make_demand("ok", 1, 1, 1, 1)], container)

    assert result.success is False
    assert result.message == "Invalid products: Broken, p2"
    assert len(result.remaining_demands) == 3
    assert len(optimizer.cache) == 0


def test_identical_inputs_hit_the_cache(optimizer, container):
    a = make_demand("A", 50, 40, 30, 6, weight=5)
    b = make_demand("B", 30, 30, 30, 4, weight=2)

    first = optimizer.optimize([a, b], container)
    entries = len(optimizer.cache)
    second = optimizer.optimize([b, a], container)

    assert second is first
    assert len(optimizer.cache) == entries


def test_results_are_deterministic_without_cache(container):
    demands = [make_demand("A", 50, 40, 30, 6, weight=5), make_demand("B", 30, 30, 30, 4, weight=2)]

    first = Optimizer().optimize(demands, container)
    second = Optimizer().optimize(list(reversed(demands)), container)

    assert first == second


def test_units_do_not_change_decisions(container):
    in_cm = Optimizer().optimize([make_demand("P", 50, 40, 30, 8)], container)
    in_mm = Optimizer().optimize([make_demand("P", 500, 400, 300, 8, unit="mm")], container)

    def layout(result):
        return [
            [(p.position, p.rotation) for p in a.placements]
            for a in result.pallet_arrangements
        ]

    assert layout(in_cm) == layout(in_mm)
    assert in_cm.utilization == pytest.approx(in_mm.utilization)


def test_conservation_and_ceilings():
    container = Container(length=240, width=100, height=100, max_weight=400)
    pallet = make_pallet(length=120, width=100, height=10, weight=20, max_weight=300)
    demands = [
        make_demand("A", 60, 50, 90, 6, weight=40),
        make_demand("B", 30, 25, 40, 10, weight=8),
        make_demand("C", 20, 20, 20, 5, weight=3),
    ]

    result = Optimizer().optimize(demands, container, pallet)

    assert result.success is True
    placed = placed_units(result)
    remaining = {d.product.id: d.quantity for d in result.remaining_demands}
    for demand in demands:
        pid = demand.product.id
        assert placed.get(pid, 0) + remaining.get(pid, 0) == demand.quantity

    weights = {d.product.id: d.product.weight for d in demands}
    for arrangement in result.pallet_arrangements:
        expected = pallet.weight + sum(weights[p.product_id] for p in arrangement.placements)
        assert arrangement.weight == pytest.approx(expected)
        assert arrangement.weight <= pallet.max_weight
        assert_no_overlaps(arrangement.placements)
    assert sum(a.weight for a in result.pallet_arrangements) <= container.max_weight


def test_default_pallet_is_standard(optimizer):
    assert optimizer.default_pallet.length == 120
    assert optimizer.default_pallet.width == 100
    assert optimizer.default_pallet.weight == 20
    assert optimizer.default_pallet.max_weight == 1000


def test_module_level_helper(container):
    shared = Optimizer()
    result = optimize([make_demand("BOX", 50, 40, 30, 2)], container, optimizer=shared)

    assert result.success is True
    assert optimize([make_demand("BOX", 50, 40, 30, 2)], container, optimizer=shared) is result


def test_pallet_passes_do_not_evict_finished_plans(container):
    optimizer = Optimizer(cache=ResultCache(capacity=2), pallet_cache=ResultCache(capacity=2))
    six_cubes = [make_demand("A", 100, 100, 100, 6)]
    four_cubes = [make_demand("B", 100, 100, 100, 4)]

    first = optimizer.optimize(six_cubes, container)
    optimizer.optimize(four_cubes, container)

    # Two stacked cubes per pallet: five pallet passes in total
    assert len(first.pallet_arrangements) == 3
    assert len(optimizer.pallet_cache) == 2
    assert len(optimizer.cache) == 2
    assert optimizer.optimize(six_cubes, container) is first


def test_container_and_pallet_units_do_not_change_decisions():
    demands = [make_demand("CUBE", 100, 100, 100, 6), make_demand("BOX", 50, 40, 30, 5, weight=2)]

    in_cm = Optimizer().optimize(
        demands,
        Container(length=1200, width=240, height=240, max_weight=1000),
        make_pallet(load_height=225),
    )
    in_mm = Optimizer().optimize(
        demands,
        Container(length=12000, width=2400, height=2400, max_weight=1000, unit="mm"),
        make_pallet(length=1200, width=1000, height=150, unit="mm", load_height=2250),
    )

    def layout(result):
        return [
            (a.origin, a.rotation, [(p.product_id, p.position, p.rotation) for p in a.placements])
            for a in result.pallet_arrangements
        ]

    assert len(in_cm.pallet_arrangements) > 1
    assert layout(in_cm) == layout(in_mm)
    assert in_cm.utilization == pytest.approx(in_mm.utilization)
    assert in_cm.total_weight == pytest.approx(in_mm.total_weight)
