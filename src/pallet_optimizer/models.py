from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Unit(str, Enum):
    """Supported length units."""

    CM = "cm"
    MM = "mm"
    IN = "in"


class Rotation(str, Enum):
    """
    Axis-aligned orientation of an item.

    The value names the source dimensions lying along x and y; the third
    one becomes the height.
      length-width : (L, W, H)  identity
      width-length : (W, L, H)  turned 90 degrees about the vertical axis
      length-height: (L, H, W)
      height-length: (H, L, W)
      width-height : (W, H, L)
      height-width : (H, W, L)
    """

    LENGTH_WIDTH = "length-width"
    WIDTH_LENGTH = "width-length"
    LENGTH_HEIGHT = "length-height"
    HEIGHT_LENGTH = "height-length"
    WIDTH_HEIGHT = "width-height"
    HEIGHT_WIDTH = "height-width"

    def apply(self, dims: Tuple[float, float, float]) -> Tuple[float, float, float]:
        """Return (L, W, H) permuted by this rotation."""
        a, b, c = _PERMUTATIONS[self]
        return dims[a], dims[b], dims[c]


_PERMUTATIONS = {
    Rotation.LENGTH_WIDTH: (0, 1, 2),
    Rotation.WIDTH_LENGTH: (1, 0, 2),
    Rotation.LENGTH_HEIGHT: (0, 2, 1),
    Rotation.HEIGHT_LENGTH: (2, 0, 1),
    Rotation.WIDTH_HEIGHT: (1, 2, 0),
    Rotation.HEIGHT_WIDTH: (2, 1, 0),
}

UPRIGHT_ROTATIONS: Tuple[Rotation, ...] = (Rotation.LENGTH_WIDTH, Rotation.WIDTH_LENGTH)
ALL_ROTATIONS: Tuple[Rotation, ...] = tuple(Rotation)


class Dimensions(BaseModel):
    """
    Length, width and height in a given unit.

    Values are optional so that incomplete product records can still be
    built and reported by the validator; pallets and containers carry their
    own strictly positive fields.
    """

    model_config = ConfigDict(frozen=True)

    length: Optional[float] = Field(default=None, description="Length along x")
    width: Optional[float] = Field(default=None, description="Width along y")
    height: Optional[float] = Field(default=None, description="Height along z")
    unit: Unit = Field(default=Unit.CM, description="Unit of the three values")

    def as_tuple(self) -> Tuple[float, float, float]:
        return float(self.length), float(self.width), float(self.height)

    @property
    def volume(self) -> float:
        length, width, height = self.as_tuple()
        return length * width * height


class Product(BaseModel):
    """Catalogue product. Weight is per unit, in kg."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier of the product")
    name: Optional[str] = Field(default=None, description="Display name")
    weight: float = Field(default=0.0, ge=0, description="Unit weight in kg")
    dimensions: Optional[Dimensions] = Field(default=None, description="Unit dimensions")
    keep_upright: bool = Field(
        default=True,
        description="Only allow turning about the vertical axis",
    )

    @property
    def label(self) -> str:
        return self.name or self.id or "Unknown product"


class Demand(BaseModel):
    """A requested quantity of one product."""

    model_config = ConfigDict(frozen=True)

    product: Product
    quantity: int = Field(ge=0, description="Requested units")


class Pallet(BaseModel):
    """Pallet template. `height` is the deck; `load_height` the stacking room above it."""

    model_config = ConfigDict(frozen=True)

    length: float = Field(gt=0, description="Deck length")
    width: float = Field(gt=0, description="Deck width")
    height: float = Field(gt=0, description="Deck height")
    weight: float = Field(default=0.0, ge=0, description="Tare weight in kg")
    max_weight: float = Field(gt=0, description="Ceiling in kg, tare included")
    unit: Unit = Unit.CM
    load_height: Optional[float] = Field(
        default=None,
        gt=0,
        description="Stacking height above the deck; defaults to the container's free height",
    )

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(length=self.length, width=self.width, height=self.height, unit=self.unit)


class Container(BaseModel):
    """Shipping container template."""

    model_config = ConfigDict(frozen=True)

    length: float = Field(gt=0, description="Inner length")
    width: float = Field(gt=0, description="Inner width")
    height: float = Field(gt=0, description="Inner height")
    max_weight: float = Field(gt=0, description="Payload ceiling in kg")
    unit: Unit = Unit.CM

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(length=self.length, width=self.width, height=self.height, unit=self.unit)


class Position(BaseModel):
    """Whole-centimetre offset inside a space."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    z: int = Field(ge=0)


class ProductPlacement(BaseModel):
    """One product unit placed on a pallet."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    position: Position
    rotation: Rotation
    quantity: int = Field(default=1, ge=1)

    # Oriented (L, W, H) in cm after the rotation
    size: Tuple[float, float, float]


class PalletArrangement(BaseModel):
    """A loaded pallet and where it stands in the container."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    pallet: Pallet
    origin: Tuple[float, float, float] = Field(description="Pallet corner inside the container, cm")
    rotation: Rotation = Rotation.LENGTH_WIDTH
    placements: list[ProductPlacement] = Field(default_factory=list)
    weight: float = Field(ge=0, description="Tare plus placed items, kg")
    utilization: float = Field(ge=0, description="Placed volume / load volume, percent")

    def quantities(self) -> dict[str, int]:
        """Units placed per product id, in placement order."""
        counts: dict[str, int] = {}
        for p in self.placements:
            counts[p.product_id] = counts.get(p.product_id, 0) + p.quantity
        return counts


class PalletLoad(BaseModel):
    """What a single pallet loading pass produced."""

    model_config = ConfigDict(frozen=True)

    placements: list[ProductPlacement] = Field(default_factory=list)
    remaining: list[Demand] = Field(default_factory=list)
    weight: float = 0.0
    utilization: float = 0.0


class OptimizationResult(BaseModel):
    """Standard result returned by the optimizer."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: Optional[str] = None
    utilization: float = 0.0
    pallet_arrangements: list[PalletArrangement] = Field(default_factory=list)
    remaining_demands: list[Demand] = Field(default_factory=list)
    total_weight: float = 0.0


class OptimizationSummary(BaseModel):
    """Condensed figures for display."""

    success: bool
    message: Optional[str] = None
    utilization: float
    total_pallets: int
    total_products: int
    remaining_products: int
    weight_utilization: Optional[float] = None
