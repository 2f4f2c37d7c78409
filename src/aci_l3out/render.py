"""Write L3Out plans to disk."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import yaml

from .planner import L3OutPlan

FORMATS = ("yaml", "json")


@dataclass
class RenderResult:
    """Result of a plan rendering operation."""

    text: str
    output_path: Path


def dump_plan(plan: L3OutPlan, fmt: str = "yaml") -> str:
    data = plan.as_dict()
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    raise ValueError(f"Unsupported output format '{fmt}'")


class PlanRenderer:
    """Render plans as ``<name>.l3out.<fmt>`` files in ``output_dir``."""

    def __init__(self, output_dir: Path, fmt: str = "yaml") -> None:
        if fmt not in FORMATS:
            raise ValueError(f"Unsupported output format '{fmt}'")
        self._output_dir = Path(output_dir)
        self._fmt = fmt

    def render(self, plan: L3OutPlan) -> RenderResult:
        text = dump_plan(plan, self._fmt)

        self._output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self._output_dir / f"{plan.name}.l3out.{self._fmt}"
        output_path.write_text(text)

        return RenderResult(text=text, output_path=output_path)
