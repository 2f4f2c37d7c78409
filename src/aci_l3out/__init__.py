"""ACI L3Out addressing and routing planner.

Given a small declarative description of an L3Out (the fabric paths it lives
on, one interconnect subnet, external EPGs and optional OSPF/BGP settings)
this package derives the full plan a provisioning tool needs:

* a deduplicated node list with router IDs;
* per-node point-to-point addresses, the static gateway and the floating
  address shared by VPC pairs;
* static routes and normalised external EPG subnets keyed for idempotent
  upserts; and
* OSPF/BGP fragments whose key presence doubles as the enable toggle.

The package is pure Python and performs no I/O apart from
:mod:`aci_l3out.render`, so it can be exercised in CI without a controller.
"""

from .config import L3OutConfig  # noqa: F401
from .exceptions import (  # noqa: F401
    ConfigError,
    L3OutError,
    SubnetExhaustedError,
    ValidationError,
)
from .planner import L3OutPlan, L3OutPlanner, build_plan  # noqa: F401

__all__ = [
    "ConfigError",
    "L3OutConfig",
    "L3OutError",
    "L3OutPlan",
    "L3OutPlanner",
    "SubnetExhaustedError",
    "ValidationError",
    "build_plan",
]
