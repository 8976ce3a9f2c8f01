"""Tests for the HTTP surface: output shape and input validation."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pallet_optimizer.api import create_app
from pallet_optimizer.cache import ResultCache
from pallet_optimizer.engine import Optimizer


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(Optimizer(cache=ResultCache(capacity=8))))


def box_request(**overrides):
    request = {
        "container_type": "40HC",
        "demands": [
            {
                "product": {
                    "id": "A",
                    "name": "Carton A",
                    "weight": 18,
                    "dimensions": {"length": 50, "width": 40, "height": 30, "unit": "cm"},
                },
                "quantity": 10,
            }
        ],
    }
    request.update(overrides)
    return request


def test_success_response_has_guaranteed_fields(client) -> None:
    response = client.post("/optimize", json=box_request())

    assert response.status_code == 200
    data = response.json()

    assert data["success"] is True
    assert data["remaining_demands"] == []
    assert len(data["pallet_arrangements"]) == 1

    placement = data["pallet_arrangements"][0]["placements"][0]
    assert set(placement.keys()) == {"product_id", "position", "rotation", "quantity", "size"}
    assert placement["rotation"] in ("length-width", "width-length")

    summary = data["summary"]
    assert summary["total_pallets"] == 1
    assert summary["total_products"] == 10
    assert summary["remaining_products"] == 0
    assert summary["weight_utilization"] > 0


def test_inline_container_and_pallet_preset(client) -> None:
    request = box_request(pallet_type="EUR")
    del request["container_type"]
    request["container"] = {"length": 590, "width": 235, "height": 239, "max_weight": 28000}

    response = client.post("/optimize", json=request)

    assert response.status_code == 200
    assert response.json()["pallet_arrangements"][0]["pallet"]["width"] == 80


def test_missing_container_returns_friendly_422(client) -> None:
    request = box_request()
    del request["container_type"]

    response = client.post("/optimize", json=request)

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "INVALID_INPUT"
    assert "summary" in data
    assert any("container" in d for d in data["details"])


def test_unknown_preset_returns_422(client) -> None:
    response = client.post("/optimize", json=box_request(container_type="99XL"))

    assert response.status_code == 422
    assert "Unknown container preset" in response.json()["details"][0]


def test_negative_quantity_returns_422(client) -> None:
    request = box_request()
    request["demands"][0]["quantity"] = -1

    response = client.post("/optimize", json=request)

    assert response.status_code == 422


def test_invalid_dimensions_are_a_failure_result(client) -> None:
    request = box_request()
    request["demands"][0]["product"]["dimensions"]["height"] = 0

    response = client.post("/optimize", json=request)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Invalid products: Carton A"


def test_health_reports_cache_entries(client) -> None:
    assert client.get("/health").json() == {"ok": True, "cache_entries": 0}

    client.post("/optimize", json=box_request())

    assert client.get("/health").json()["cache_entries"] > 0
