"""Request document shared by the HTTP and command line surfaces."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from pallet_optimizer.containers import get_container, get_pallet
from pallet_optimizer.models import Container, Demand, Pallet


class OptimizeRequest(BaseModel):
    """
    Schema for an optimization request.

    The container is given either inline or as a preset name; the pallet
    likewise, or omitted to use the optimizer's default pallet.
    """

    demands: list[Demand] = Field(default_factory=list, description="Products and quantities to load")
    container: Optional[Container] = None
    container_type: Optional[str] = Field(None, description="Container preset, e.g. 40HC")
    pallet: Optional[Pallet] = None
    pallet_type: Optional[str] = Field(None, description="Pallet preset, e.g. EUR")

    @model_validator(mode="after")
    def _one_container(self) -> "OptimizeRequest":
        if self.container is None and not self.container_type:
            raise ValueError("Either 'container' or 'container_type' is required")
        return self

    def resolve_container(self) -> Container:
        if self.container is not None:
            return self.container
        return get_container(self.container_type)

    def resolve_pallet(self) -> Optional[Pallet]:
        if self.pallet is not None:
            return self.pallet
        if self.pallet_type:
            return get_pallet(self.pallet_type)
        return None
