from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from pallet_optimizer.config import Settings, configure_logging
from pallet_optimizer.engine import Optimizer
from pallet_optimizer.io.schemas import OptimizeRequest
from pallet_optimizer.metrics import summarize
from pallet_optimizer.models import Container, OptimizationResult

logger = logging.getLogger(__name__)


def load_input(path: Path, container_type: Optional[str] = None, pallet_type: Optional[str] = None) -> OptimizeRequest:
    """
    Read a request document. Command line presets override the file's.
    Raises OSError, ValueError (bad JSON) or pydantic.ValidationError.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    if container_type:
        data.pop("container", None)
        data["container_type"] = container_type
    if pallet_type:
        data.pop("pallet", None)
        data["pallet_type"] = pallet_type
    return OptimizeRequest.model_validate(data)


def write_plan(result: OptimizationResult, path: str = "plan.json") -> Path:
    """
    Write the full result to a JSON file.

    Creates parent folders if needed, writes JSON with indent=2 and
    sort_keys=True, and overwrites the file on every run.
    """
    output_path = Path(path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(result.model_dump(mode="json"), f, indent=2, sort_keys=True)
    return output_path


def render_summary(result: OptimizationResult, container: Container) -> str:
    summary = summarize(result, container)
    status = "✅ Optimization Complete" if summary.success else "❌ Optimization Failed"
    lines = [
        status,
        f"  Message          : {summary.message or '-'}",
        f"  Pallets          : {summary.total_pallets}",
        f"  Units placed     : {summary.total_products}",
        f"  Units remaining  : {summary.remaining_products}",
        f"  Volume fill      : {summary.utilization:.2f}%",
    ]
    if summary.weight_utilization is not None:
        lines.append(f"  Weight fill      : {summary.weight_utilization:.2f}%")

    for arrangement in result.pallet_arrangements:
        counts = ", ".join(f"{pid} x{qty}" for pid, qty in arrangement.quantities().items())
        lines.append(
            f"  📦 Pallet {arrangement.index:>3} at {arrangement.origin}: "
            f"{arrangement.weight:.1f} kg, {arrangement.utilization:.1f}% ({counts})"
        )
    for demand in result.remaining_demands:
        lines.append(f"  ⚠️  Unplaced: {demand.product.label} x{demand.quantity}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pallet-optimizer",
        description="Plan how products go onto pallets and pallets into a container.",
    )
    parser.add_argument("input", type=Path, help="Request JSON (demands, container or container_type, pallet)")
    parser.add_argument("-o", "--output", help="Write the full result as JSON to this path")
    parser.add_argument("--container-type", help="Container preset, overrides the input file")
    parser.add_argument("--pallet-type", help="Pallet preset, overrides the input file")
    parser.add_argument("--log-level", help="Logging level (default from PALLET_OPTIMIZER_LOG_LEVEL)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)

    try:
        request = load_input(args.input, args.container_type, args.pallet_type)
        container = request.resolve_container()
        pallet = request.resolve_pallet()
    except ValidationError as e:
        print(f"Invalid input in {args.input}:\n{e}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        print(f"Cannot read {args.input}: {e}", file=sys.stderr)
        return 2

    result = Optimizer(settings=settings).optimize(request.demands, container, pallet)
    print(render_summary(result, container))

    if args.output:
        path = write_plan(result, args.output)
        logger.info("Plan written to %s", path)

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
