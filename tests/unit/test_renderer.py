import json
from pathlib import Path

import pytest
import yaml

from aci_l3out.config import L3OutConfig, PathSpec
from aci_l3out.planner import build_plan
from aci_l3out.render import PlanRenderer, dump_plan


def build_config() -> L3OutConfig:
    return L3OutConfig(
        name="wan",
        tenant_name="prod",
        vrf="prod-vrf",
        l3_domain="wan-dom",
        interconnect_subnet="10.0.0.0/29",
        paths={"border": PathSpec(name="vpc-border", nodes=(101, 102), is_vpc=True)},
        static_routes=("192.168.0.0/16",),
    )


def test_renderer_writes_yaml(tmp_path: Path):
    plan = build_plan(build_config())
    renderer = PlanRenderer(tmp_path / "plans")

    result = renderer.render(plan)

    assert result.output_path == tmp_path / "plans" / "wan.l3out.yaml"
    assert result.output_path.exists()
    assert yaml.safe_load(result.output_path.read_text()) == plan.as_dict()


def test_renderer_writes_json(tmp_path: Path):
    plan = build_plan(build_config())

    result = PlanRenderer(tmp_path, fmt="json").render(plan)

    assert result.output_path.name == "wan.l3out.json"
    content = json.loads(result.output_path.read_text())
    assert content["addresses"]["pod/1/node-102"]["side"] == "B"
    assert content["static_routes"]["pod/1/node-101/192.168.0.0/16"]["next_hop"] == "10.0.0.1"


def test_yaml_keeps_plan_order():
    text = dump_plan(build_plan(build_config()))

    assert text.index("name: wan") < text.index("nodes:") < text.index("static_routes:")


def test_unknown_format_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        PlanRenderer(tmp_path, fmt="toml")
