"""Point-to-point address allocation out of the interconnect subnet."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from .exceptions import SubnetExhaustedError
from .nodes import Node

Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]
Interface = Union[ipaddress.IPv4Interface, ipaddress.IPv6Interface]

GATEWAY_HOST = 1
FIRST_NODE_HOST = 2


@dataclass(frozen=True)
class AddressAssignment:
    """Address given to one node.  ``side`` is only set for VPC members."""

    node: str
    path_key: str
    address: Interface
    side: Optional[str] = None

    def as_dict(self) -> dict:
        data = {"path": self.path_key, "address": str(self.address)}
        if self.side is not None:
            data["side"] = self.side
        return data


@dataclass(frozen=True)
class AddressPlan:
    """Gateway, floating address and per-node assignments for one subnet."""

    subnet: Network
    gateway: Interface
    floating: Interface
    assignments: Tuple[AddressAssignment, ...]

    def for_node(self, identity: str) -> Optional[AddressAssignment]:
        return next((a for a in self.assignments if a.node == identity), None)


def parse_subnet(cidr: str) -> Network:
    return ipaddress.ip_network(cidr, strict=True)


def max_host_index(network: Network) -> int:
    """Highest usable ``host_address`` index in ``network``.

    IPv4 reserves the broadcast address; IPv6 has none.
    """

    if network.version == 4:
        return max(network.num_addresses - 2, 0)
    return network.num_addresses - 1


def required_hosts(node_count: int) -> int:
    """Host indices needed: gateway, every node and the floating address."""

    return node_count + 2


def ensure_capacity(network: Network, node_count: int) -> None:
    required = required_hosts(node_count)
    available = max_host_index(network)
    if required > available:
        raise SubnetExhaustedError(str(network), required, available)


def host_address(network: Network, index: int) -> Interface:
    """Return host ``index`` of ``network`` with its prefix length re-attached."""

    address = network.network_address + index
    return ipaddress.ip_interface(f"{address}/{network.prefixlen}")


def vpc_side(node_id: int) -> str:
    return "B" if node_id % 2 == 0 else "A"


def allocate_addresses(nodes: Sequence[Node], subnet: Union[str, Network]) -> AddressPlan:
    """Assign addresses by position in the ordered node sequence.

    Host 1 is the static gateway, hosts 2..N+1 go to the nodes in order and
    host N+2 is the floating address shared by VPC pairs.
    """

    network = parse_subnet(subnet) if isinstance(subnet, str) else subnet
    ensure_capacity(network, len(nodes))

    assignments = []
    for position, node in enumerate(nodes):
        assignments.append(
            AddressAssignment(
                node=node.identity,
                path_key=node.path_key,
                address=host_address(network, position + FIRST_NODE_HOST),
                side=vpc_side(node.node_id) if node.is_vpc else None,
            )
        )

    return AddressPlan(
        subnet=network,
        gateway=host_address(network, GATEWAY_HOST),
        floating=host_address(network, len(nodes) + FIRST_NODE_HOST),
        assignments=tuple(assignments),
    )
