"""L3Out plan aggregation.

This module wires the individual derivation steps together in an explicit
order and assembles their results into :class:`L3OutPlan`, the structure
handed to whatever provisions the L3Out on the controller:

* nodes are enumerated from the paths first, since everything positional
  depends on their order;
* addresses, static routes and per-path attachments are derived from that
  node sequence;
* external EPG subnets and the OSPF/BGP fragments depend only on the raw
  input and can be evaluated independently, optionally on a thread pool.

No step keeps state between invocations, so planning the same configuration
twice yields the same plan.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .allocator import AddressAssignment, AddressPlan, Interface, allocate_addresses
from .config import L3OutConfig, PathSpec
from .features import merge_fragments, resolve_bgp, resolve_ospf
from .nodes import Node, enumerate_nodes, node_lookup
from .routes import (
    ExternalSubnet,
    StaticRoute,
    generate_static_routes,
    normalize_external_subnets,
)
from .validation import validate_config

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathAttachment:
    """Per-path view of the plan: encapsulation plus the member addresses."""

    key: str
    name: str
    pod_id: int
    encap: str
    mtu: Any
    is_vpc: bool
    members: Tuple[AddressAssignment, ...]
    floating: Optional[Interface] = None

    def as_dict(self) -> dict:
        data = {
            "name": self.name,
            "pod_id": self.pod_id,
            "encap": self.encap,
            "mtu": self.mtu,
            "is_vpc": self.is_vpc,
            "members": {m.node: m.as_dict() for m in self.members},
        }
        if self.floating is not None:
            data["floating_address"] = str(self.floating)
        return data


def build_path_attachments(
    paths: Sequence[Tuple[str, PathSpec]], addresses: AddressPlan
) -> Tuple[PathAttachment, ...]:
    attachments = []
    for key, path in paths:
        members = tuple(a for a in addresses.assignments if a.path_key == key)
        attachments.append(
            PathAttachment(
                key=key,
                name=path.name,
                pod_id=path.pod_id,
                encap=f"vlan-{path.vlan_id}",
                mtu=path.mtu,
                is_vpc=path.is_vpc,
                members=members,
                floating=addresses.floating if path.is_vpc else None,
            )
        )
    return tuple(attachments)


@dataclass(frozen=True)
class L3OutPlan:
    """Everything derived for one L3Out."""

    name: str
    tenant_name: str
    vrf: str
    vrf_id: int
    l3_domain: str
    router_id_as_loopback: bool
    static_subnets: Tuple[str, ...]
    nodes: Tuple[Node, ...]
    node_lookup: Mapping[str, Node]
    addresses: AddressPlan
    static_routes: Tuple[StaticRoute, ...]
    external_subnets: Tuple[ExternalSubnet, ...]
    paths: Tuple[PathAttachment, ...]
    protocols: Mapping[str, Any]

    @property
    def gateway(self) -> Interface:
        return self.addresses.gateway

    @property
    def floating(self) -> Interface:
        return self.addresses.floating

    def as_dict(self) -> Dict[str, Any]:
        """Serialisable form consumed by the provisioning side."""

        data: Dict[str, Any] = {
            "name": self.name,
            "tenant": self.tenant_name,
            "vrf": self.vrf,
            "vrf_id": self.vrf_id,
            "l3_domain": self.l3_domain,
            "router_id_as_loopback": self.router_id_as_loopback,
            "static_subnets": list(self.static_subnets),
            "interconnect_subnet": str(self.addresses.subnet),
            "gateway": str(self.gateway),
            "floating_address": str(self.floating),
            "nodes": [node.as_dict() for node in self.nodes],
            "addresses": {a.node: a.as_dict() for a in self.addresses.assignments},
            "paths": {p.key: p.as_dict() for p in self.paths},
            "static_routes": {r.key: r.as_dict() for r in self.static_routes},
            "external_subnets": {s.key: s.as_dict() for s in self.external_subnets},
        }
        data.update(self.protocols)
        return data


class L3OutPlanner:
    """Validate an :class:`L3OutConfig` and derive its :class:`L3OutPlan`."""

    def __init__(self, config: L3OutConfig) -> None:
        self._config = config

    @property
    def config(self) -> L3OutConfig:
        return self._config

    # ------------------------------------------------------------------
    # Independent branches
    # ------------------------------------------------------------------
    def _external_subnets(self) -> Tuple[ExternalSubnet, ...]:
        subnets = normalize_external_subnets(self._config.ordered_external_epgs())
        LOG.debug("L3Out %s: %d external subnets", self._config.name, len(subnets))
        return subnets

    def _protocols(self) -> Dict[str, Any]:
        config = self._config
        fragments = merge_fragments(
            resolve_ospf(
                config.ospf_enable, config.ospf_area, config.ospf_timers, config.ospf_auth
            ),
            resolve_bgp(config.bgp_peers),
        )
        LOG.debug(
            "L3Out %s: ospf=%s bgp peers=%d",
            config.name,
            config.ospf_enable,
            len(config.bgp_peers),
        )
        return fragments

    # ------------------------------------------------------------------
    # Node-derived branch
    # ------------------------------------------------------------------
    def _node_branch(
        self,
    ) -> Tuple[Tuple[Node, ...], AddressPlan, Tuple[StaticRoute, ...], Tuple[PathAttachment, ...]]:
        config = self._config
        paths = config.ordered_paths()
        nodes = enumerate_nodes(paths, config.vrf_id)
        addresses = allocate_addresses(nodes, config.interconnect_subnet)
        routes = generate_static_routes(nodes, config.static_routes, addresses.gateway)
        attachments = build_path_attachments(paths, addresses)
        return nodes, addresses, routes, attachments

    def plan(self, parallel: bool = False) -> L3OutPlan:
        validate_config(self._config)

        if parallel:
            with ThreadPoolExecutor(max_workers=3) as pool:
                node_future = pool.submit(self._node_branch)
                subnets_future = pool.submit(self._external_subnets)
                protocols_future = pool.submit(self._protocols)
                nodes, addresses, routes, attachments = node_future.result()
                subnets = subnets_future.result()
                protocols = protocols_future.result()
        else:
            nodes, addresses, routes, attachments = self._node_branch()
            subnets = self._external_subnets()
            protocols = self._protocols()

        config = self._config
        plan = L3OutPlan(
            name=config.name,
            tenant_name=config.tenant_name,
            vrf=config.vrf,
            vrf_id=config.vrf_id,
            l3_domain=config.l3_domain,
            router_id_as_loopback=config.router_id_as_loopback,
            static_subnets=tuple(config.static_subnets),
            nodes=nodes,
            node_lookup=node_lookup(nodes),
            addresses=addresses,
            static_routes=routes,
            external_subnets=subnets,
            paths=attachments,
            protocols=protocols,
        )
        LOG.info(
            "Planned L3Out '%s': %d nodes, gateway=%s floating=%s",
            config.name,
            len(nodes),
            addresses.gateway,
            addresses.floating,
        )
        return plan


def build_plan(config: L3OutConfig, *, parallel: bool = False) -> L3OutPlan:
    return L3OutPlanner(config).plan(parallel=parallel)
