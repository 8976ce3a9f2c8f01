"""FastAPI endpoint for the pallet optimizer."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from pallet_optimizer.config import Settings, configure_logging
from pallet_optimizer.engine import Optimizer
from pallet_optimizer.io.schemas import OptimizeRequest
from pallet_optimizer.metrics import summarize

logger = logging.getLogger(__name__)


def _error_details(exc: Exception) -> list[str]:
    if isinstance(exc, ValidationError):
        details = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ()))
            details.append(f"{loc}: {err['msg']}" if loc else err["msg"])
        return details
    return [str(exc)]


def invalid_input_response(exc: Exception) -> JSONResponse:
    """Friendly 422 body listing what was wrong with the request."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "INVALID_INPUT",
            "summary": "Invalid request. Please correct the listed fields and run the optimization again.",
            "details": _error_details(exc),
        },
    )


def format_output(result, container=None) -> dict[str, Any]:
    """Result as JSON-ready dict plus a display summary."""
    response = result.model_dump(mode="json")
    response["summary"] = summarize(result, container).model_dump(mode="json")
    return response


def create_app(optimizer: Optional[Optimizer] = None) -> FastAPI:
    if optimizer is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        optimizer = Optimizer(settings=settings)

    app = FastAPI(
        title="Pallet Optimizer API",
        description="Pallet and container load planning",
    )
    app.state.optimizer = optimizer

    @app.post("/optimize")
    async def optimize(request: dict[str, Any]) -> Any:
        """
        Plan a load.

        Input (request body):
            {
                "container_type": "40HC",
                "pallet_type": "STANDARD",
                "demands": [
                    {"product": {"id": "A", "weight": 5,
                                 "dimensions": {"length": 50, "width": 40, "height": 30, "unit": "cm"}},
                     "quantity": 4}
                ]
            }
        """
        try:
            parsed = OptimizeRequest.model_validate(request)
            container = parsed.resolve_container()
            pallet = parsed.resolve_pallet()
        except (ValidationError, ValueError) as e:
            logger.info(f"Rejected /optimize request: {e}")
            return invalid_input_response(e)

        try:
            result = optimizer.optimize(parsed.demands, container, pallet)
            return format_output(result, container)
        except Exception as e:
            logger.error(f"ERROR in /optimize endpoint: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {"ok": True, "cache_entries": len(optimizer.cache)}

    return app


app = create_app()
