"""Flatten L3Out paths into a deduplicated, ordered node list."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .config import PathSpec

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """A fabric node taking part in the L3Out."""

    identity: str
    router_id: str
    path_key: str
    node_id: int
    pod_id: int
    is_vpc: bool

    def as_dict(self) -> dict:
        return {
            "node": self.identity,
            "router_id": self.router_id,
            "path": self.path_key,
            "node_id": self.node_id,
            "pod_id": self.pod_id,
            "is_vpc": self.is_vpc,
        }


def node_identity(pod_id: int, node_id: int) -> str:
    return f"pod/{pod_id}/node-{node_id}"


def router_id(pod_id: int, node_id: int, vrf_id: int) -> str:
    """Router ID in ``1.<pod>.<node>.<vrf>`` form.

    The VRF id is the last octet so two L3Outs in the same tenant but in
    different VRFs never hand the same node the same router ID.
    """

    return f"1.{pod_id}.{node_id}.{vrf_id}"


def enumerate_nodes(
    paths: Iterable[Tuple[str, PathSpec]], vrf_id: int
) -> Tuple[Node, ...]:
    """Return unique nodes in path-then-node order.

    ``paths`` must already be in the order the caller wants positions bound
    to (see :meth:`aci_l3out.config.L3OutConfig.ordered_paths`).  When a node
    shows up in more than one path the first occurrence wins, path
    attribution included.
    """

    candidates: List[Node] = []
    for path_key, path in paths:
        for node_id in path.nodes:
            candidates.append(
                Node(
                    identity=node_identity(path.pod_id, node_id),
                    router_id=router_id(path.pod_id, node_id, vrf_id),
                    path_key=path_key,
                    node_id=node_id,
                    pod_id=path.pod_id,
                    is_vpc=path.is_vpc,
                )
            )

    ordered: List[Node] = []
    seen: Dict[str, Node] = {}
    for candidate in candidates:
        kept = seen.get(candidate.identity)
        if kept is None:
            seen[candidate.identity] = candidate
            ordered.append(candidate)
        elif kept.path_key != candidate.path_key:
            LOG.warning(
                "%s already attributed to path '%s', ignoring path '%s'",
                candidate.identity,
                kept.path_key,
                candidate.path_key,
            )
    return tuple(ordered)


def node_lookup(nodes: Sequence[Node]) -> Dict[str, Node]:
    """Identity-keyed lookup; not to be used for positional computation."""

    return {node.identity: node for node in nodes}
