import argparse
import json
import logging
import sys
from typing import Dict, List, Optional, Sequence

from beeswarm import (
    InvalidInput,
    Margins,
    coerce_observations,
    compute_layout,
    get_default_options,
    scatter_positions,
    score_layout,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load_series(path: str) -> List[object]:
    with open(path, encoding="utf-8") as fin:
        payload = json.load(fin)
    if isinstance(payload, dict):
        payload = payload.get("observations", payload.get("data"))
    if not isinstance(payload, list):
        raise InvalidInput("expected a JSON array of observations")
    return payload


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Compute beeswarm positions for a series")
    parser.add_argument("path", help="Path to a JSON array of {category|date, value} objects")
    parser.add_argument("--width", type=float, default=400.0, help="Canvas width (default: 400)")
    parser.add_argument("--height", type=float, default=250.0, help="Canvas height (default: 250)")
    parser.add_argument("--radius", type=float, default=6.0, help="Marker radius (default: 6)")
    parser.add_argument(
        "--margins",
        help="Margins as top,right,bottom,left (default: 20,20,40,40)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        help="Number of simulation ticks (default: 120)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for separating coincident points (default: 0)",
    )
    parser.add_argument(
        "--scatter",
        action="store_true",
        help="Skip the simulation and print plain scatter positions",
    )
    parser.add_argument("--json", action="store_true", help="Print positions as JSON")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    options = get_default_options()
    if args.iterations is not None:
        options.iterations = args.iterations
    if args.seed is not None:
        options.seed = args.seed

    try:
        margins = Margins()
        if args.margins:
            parts = [float(part) for part in args.margins.split(",")]
            if len(parts) != 4:
                raise InvalidInput("--margins needs four comma-separated numbers")
            margins = Margins(*parts)

        logger.info("Reading series from %s", args.path)
        observations = coerce_observations(_load_series(args.path))

        if args.scatter:
            positions = scatter_positions(observations, args.width, args.height, margins, options)
            report = None
        else:
            result = compute_layout(observations, args.width, args.height, margins, args.radius, options)
            positions = result.positions
            report = score_layout(result, args.radius)
    except (OSError, ValueError) as exc:  # unreadable file, malformed JSON or InvalidInput
        logger.error("Cannot lay out %s: %s", args.path, exc)
        raise SystemExit(1) from exc

    if args.json:
        rows: List[Dict[str, object]] = [
            {"category": obs.category, "value": obs.value, "x": pos.x, "y": pos.y}
            for obs, pos in zip(observations, positions)
        ]
        print(json.dumps(rows, indent=2))
        return

    print("Positions:")
    for obs, pos in zip(observations, positions):
        print(f"  {obs.category} {obs.value:g} -> ({pos.x:.3f}, {pos.y:.3f})")
    if report is not None:
        print("Report:")
        print(f"  {report.summary()}")


if __name__ == "__main__":
    main(sys.argv[1:])
