"""Input validation for :class:`~aci_l3out.config.L3OutConfig`.

Everything is checked up front so the derivation functions can assume their
inputs are sound and never fail half way through building a plan.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Iterable

from .allocator import ensure_capacity
from .config import L3OutConfig
from .exceptions import ValidationError
from .nodes import node_identity, router_id

LOG = logging.getLogger(__name__)

OSPF_AUTH_TYPES = ("md5", "simple", "none")
OSPF_AREA_TYPES = ("regular", "stub", "nssa")
MAX_ASN = 4294967295
MIN_MTU = 576
MAX_MTU = 9216


def _check_cidr(field: str, value: str):
    try:
        return ipaddress.ip_network(str(value), strict=True)
    except ValueError as exc:
        raise ValidationError(field, f"invalid CIDR '{value}' ({exc})") from exc


def _check_cidrs(field: str, values: Iterable[str], unique: bool = False) -> None:
    """Check every prefix; with ``unique`` a repeated network is rejected.

    Prefixes become part of upsert keys, so a repeat would collide.
    """

    seen = {}
    for index, value in enumerate(values):
        network = _check_cidr(f"{field}[{index}]", value)
        if unique and network in seen:
            raise ValidationError(
                f"{field}[{index}]",
                f"duplicate prefix '{value}' (already at index {seen[network]})",
            )
        seen.setdefault(network, index)


def _check_int(field: str, value, low: int, high: int | None = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"expected an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        bound = f"{low}..{high}" if high is not None else f">= {low}"
        raise ValidationError(field, f"{value} outside {bound}")


def _check_choice(field: str, value, choices: Iterable[str]) -> None:
    choices = tuple(choices)
    if value not in choices:
        raise ValidationError(field, f"'{value}' not one of {', '.join(choices)}")


def _warn_router_id(path_key: str, pod_id: int, node_id: int, vrf_id: int) -> None:
    value = router_id(pod_id, node_id, vrf_id)
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        LOG.warning(
            "path '%s': router ID %s for node %d is not a dotted-quad address",
            path_key,
            value,
            node_id,
        )


def _validate_paths(config: L3OutConfig) -> None:
    for key, path in config.ordered_paths():
        prefix = f"paths.{key}"
        _check_int(f"{prefix}.pod_id", path.pod_id, 1)
        for index, node_id in enumerate(path.nodes):
            _check_int(f"{prefix}.nodes[{index}]", node_id, 1)
            _warn_router_id(key, path.pod_id, node_id, config.vrf_id)
        _check_int(f"{prefix}.vlan_id", path.vlan_id, 1, 4094)
        if path.mtu != "inherit":
            _check_int(f"{prefix}.mtu", path.mtu, MIN_MTU, MAX_MTU)
        if path.is_vpc and len(path.nodes) != 2:
            LOG.warning(
                "VPC path '%s' lists %d nodes, expected a pair", key, len(path.nodes)
            )


def _validate_ospf(config: L3OutConfig) -> None:
    area, timers, auth = config.ospf_area, config.ospf_timers, config.ospf_auth
    _check_int("ospf_area.id", area.id, 0, MAX_ASN)
    _check_choice("ospf_area.type", area.type, OSPF_AREA_TYPES)
    _check_int("ospf_area.cost", area.cost, 1, 16777215)
    for name in ("hello", "dead", "retransmit", "transmit_delay"):
        _check_int(f"ospf_timers.{name}", getattr(timers, name), 1, 65535)
    _check_int("ospf_timers.priority", timers.priority, 0, 255)
    _check_int("ospf_auth.key_id", auth.key_id, 1, 255)
    _check_choice("ospf_auth.type", auth.type, OSPF_AUTH_TYPES)


def _validate_bgp(config: L3OutConfig) -> None:
    for key, peer in config.bgp_peers.items():
        prefix = f"bgp_peers.{key}"
        try:
            ipaddress.ip_address(str(peer.address))
        except ValueError as exc:
            raise ValidationError(
                f"{prefix}.address", f"invalid IP address '{peer.address}'"
            ) from exc
        _check_int(f"{prefix}.remote_as", peer.remote_as, 1, MAX_ASN)
        if peer.local_as is not None:
            _check_int(f"{prefix}.local_as", peer.local_as, 1, MAX_ASN)


def count_unique_nodes(config: L3OutConfig) -> int:
    return len(
        {
            node_identity(path.pod_id, node_id)
            for path in config.paths.values()
            for node_id in path.nodes
        }
    )


def validate_config(config: L3OutConfig) -> None:
    """Raise :class:`ValidationError` naming the first offending field."""

    _check_cidr("interconnect_subnet", config.interconnect_subnet)
    _check_cidrs("static_subnets", config.static_subnets)
    _check_cidrs("static_routes", config.static_routes, unique=True)
    for key, epg in config.ordered_external_epgs():
        _check_cidrs(f"external_epgs.{key}.subnets", epg.subnets, unique=True)
    _check_int("vrf_id", config.vrf_id, 1)
    _validate_paths(config)
    _validate_ospf(config)
    _validate_bgp(config)

    ensure_capacity(
        ipaddress.ip_network(config.interconnect_subnet, strict=True),
        count_unique_nodes(config),
    )
