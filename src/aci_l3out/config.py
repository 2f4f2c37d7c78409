"""Input data structures for the L3Out planner.

These dataclasses describe the declarative topology a caller hands to the
planner: the paths (physical or VPC attachments) the L3Out lives on, the
interconnect subnet addresses are carved out of, the external EPGs and the
optional routing protocol settings.  They are intentionally free of any
loader logic so the core can be driven from YAML (see
:mod:`l3out_planner.config`), from tests or from another tool's own model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence, Union


@dataclass(frozen=True)
class PathSpec:
    """A fabric attachment point.

    Attributes
    ----------
    name:
        Interface or policy-group name the path refers to, e.g. ``eth1/10``
        or the VPC interface policy group name.
    nodes:
        Ordered node ids the path lands on.  A VPC path normally lists the
        two peers; a plain path may list one or more leaves.
    pod_id:
        Pod the nodes live in.
    is_vpc:
        Whether the nodes form a VPC pair sharing a floating address.
    vlan_id:
        Encapsulation VLAN used on the path.
    mtu:
        Interface MTU, or ``"inherit"`` to use the fabric default.
    """

    name: str
    nodes: Sequence[int]
    pod_id: int = 1
    is_vpc: bool = False
    vlan_id: int = 1
    mtu: Union[int, str] = "inherit"


@dataclass(frozen=True)
class ExternalEpgSpec:
    """External EPG: the prefixes it classifies and their scope flags."""

    subnets: Sequence[str]
    scope: Sequence[str] = ("import-security",)


@dataclass(frozen=True)
class OspfArea:
    id: int = 0
    type: str = "regular"
    cost: int = 1


@dataclass(frozen=True)
class OspfTimers:
    hello: int = 10
    dead: int = 40
    retransmit: int = 5
    transmit_delay: int = 1
    priority: int = 1


@dataclass(frozen=True)
class OspfAuth:
    key: str = ""
    key_id: int = 1
    type: str = "none"


@dataclass(frozen=True)
class BgpPeer:
    """BGP peer reached over the L3Out."""

    address: str
    remote_as: int
    local_as: int | None = None
    password: str = ""


DEFAULT_EXTERNAL_EPGS: Mapping[str, ExternalEpgSpec] = {
    "default": ExternalEpgSpec(subnets=("0.0.0.0/0",), scope=("import-security",)),
}


@dataclass(frozen=True)
class L3OutConfig:
    """Everything the planner needs to derive an L3Out plan."""

    name: str
    tenant_name: str
    vrf: str
    l3_domain: str
    interconnect_subnet: str
    paths: Mapping[str, PathSpec]
    vrf_id: int = 1
    router_id_as_loopback: bool = False
    # Carried through to the provisioning side untouched.
    static_subnets: Sequence[str] = ()
    external_epgs: Mapping[str, ExternalEpgSpec] = field(
        default_factory=lambda: dict(DEFAULT_EXTERNAL_EPGS)
    )
    static_routes: Sequence[str] = ()
    ospf_enable: bool = False
    ospf_area: OspfArea = field(default_factory=OspfArea)
    ospf_timers: OspfTimers = field(default_factory=OspfTimers)
    ospf_auth: OspfAuth = field(default_factory=OspfAuth)
    bgp_peers: Mapping[str, BgpPeer] = field(default_factory=dict)

    def ordered_paths(self) -> list[tuple[str, PathSpec]]:
        """Return ``paths`` in the order the planner walks them (sorted by key)."""

        return sorted(self.paths.items(), key=lambda item: item[0])

    def ordered_external_epgs(self) -> list[tuple[str, ExternalEpgSpec]]:
        epgs = self.external_epgs or DEFAULT_EXTERNAL_EPGS
        return sorted(epgs.items(), key=lambda item: item[0])
