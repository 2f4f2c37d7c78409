"""Static routes and external EPG subnets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .allocator import Interface
from .config import ExternalEpgSpec
from .nodes import Node


@dataclass(frozen=True)
class StaticRoute:
    key: str
    prefix: str
    next_hop: str
    node: str

    def as_dict(self) -> dict:
        return {"node": self.node, "prefix": self.prefix, "next_hop": self.next_hop}


@dataclass(frozen=True)
class ExternalSubnet:
    key: str
    epg: str
    prefix: str
    scope: Tuple[str, ...]

    def as_dict(self) -> dict:
        return {"epg": self.epg, "prefix": self.prefix, "scope": list(self.scope)}


def generate_static_routes(
    nodes: Sequence[Node], prefixes: Sequence[str], gateway: Interface
) -> Tuple[StaticRoute, ...]:
    """Route every prefix on every node via the static gateway."""

    next_hop = str(gateway.ip)
    routes: List[StaticRoute] = []
    for node in nodes:
        for prefix in prefixes:
            routes.append(
                StaticRoute(
                    key=f"{node.identity}/{prefix}",
                    prefix=prefix,
                    next_hop=next_hop,
                    node=node.identity,
                )
            )
    return tuple(routes)


def normalize_external_subnets(
    epgs: Iterable[Tuple[str, ExternalEpgSpec]],
) -> Tuple[ExternalSubnet, ...]:
    """One record per (EPG, prefix), keyed ``<epg>/<prefix>``.

    The EPG key prefix keeps keys unique when two EPGs classify the same
    prefix.
    """

    subnets: List[ExternalSubnet] = []
    for epg_key, epg in epgs:
        scope = tuple(epg.scope)
        for prefix in epg.subnets:
            subnets.append(
                ExternalSubnet(
                    key=f"{epg_key}/{prefix}",
                    epg=epg_key,
                    prefix=prefix,
                    scope=scope,
                )
            )
    return tuple(subnets)
