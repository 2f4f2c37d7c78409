"""Entry point for the ``l3out-plan`` command."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from aci_l3out.exceptions import L3OutError
from aci_l3out.planner import L3OutPlanner
from aci_l3out.render import FORMATS, PlanRenderer, dump_plan

from .config import load_config

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Derive an ACI L3Out addressing plan")
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the L3Out YAML definition",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write the plan into this directory instead of stdout",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="yaml",
        help="Output format",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Evaluate independent plan branches on a thread pool",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        LOG.error("configuration file %s not found", args.config)
        return 1
    except L3OutError as exc:
        LOG.error("invalid configuration %s: %s", args.config, exc)
        return 2

    try:
        plan = L3OutPlanner(config).plan(parallel=args.parallel)
    except L3OutError as exc:
        LOG.error("cannot plan L3Out '%s': %s", config.name, exc)
        return 2

    if args.output_dir is None:
        sys.stdout.write(dump_plan(plan, args.format))
    else:
        result = PlanRenderer(args.output_dir, args.format).render(plan)
        LOG.info("Plan written to %s", result.output_path)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
