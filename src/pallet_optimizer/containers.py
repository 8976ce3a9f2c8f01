# src/pallet_optimizer/containers.py
from __future__ import annotations

from pallet_optimizer.models import Container, Pallet

# Internal usable dims (cm) and payload ceilings (kg).
CONTAINER_PRESETS_CM: dict[str, dict[str, float]] = {
    "20":   {"length": 590.0,  "width": 235.2, "height": 239.5, "max_weight": 28200.0},
    "20HC": {"length": 589.1,  "width": 233.0, "height": 270.0, "max_weight": 28200.0},
    "40":   {"length": 1203.2, "width": 235.2, "height": 239.5, "max_weight": 26700.0},
    "40HC": {"length": 1203.2, "width": 235.0, "height": 270.0, "max_weight": 26500.0},
    "45HC": {"length": 1355.6, "width": 235.2, "height": 269.8, "max_weight": 27700.0},
}

PALLET_PRESETS: dict[str, dict] = {
    "STANDARD": {"length": 120, "width": 100, "height": 15, "weight": 20, "max_weight": 1000, "unit": "cm"},
    "EUR":      {"length": 120, "width": 80, "height": 14.4, "weight": 25, "max_weight": 1500, "unit": "cm"},
    "US":       {"length": 48, "width": 40, "height": 6, "weight": 22, "max_weight": 1000, "unit": "in"},
}


def _lookup(presets: dict[str, dict], preset: str, kind: str) -> dict:
    key = preset.strip().upper()
    if key not in presets:
        raise ValueError(f"Unknown {kind} preset '{preset}'. Valid: {sorted(presets.keys())}")
    return presets[key]


def get_container(preset: str) -> Container:
    return Container(**_lookup(CONTAINER_PRESETS_CM, preset, "container"))


def get_pallet(preset: str) -> Pallet:
    return Pallet(**_lookup(PALLET_PRESETS, preset, "pallet"))


DEFAULT_PALLET = get_pallet("STANDARD")
