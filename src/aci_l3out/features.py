"""OSPF and BGP configuration fragments.

Downstream consumers merge these fragments into a single L3Out object.  The
presence of a key is the toggle: a disabled protocol contributes no keys at
all rather than keys holding default values.
"""

from __future__ import annotations

from dataclasses import asdict, fields, replace
from typing import Any, Dict, Mapping, Optional, TypeVar

from .config import BgpPeer, OspfArea, OspfAuth, OspfTimers
from .exceptions import ValidationError

BGP_ENABLED = "yes"

T = TypeVar("T")


def apply_overrides(section: str, defaults: T, overrides: Optional[Mapping[str, Any]]) -> T:
    """Merge a (possibly partial) override mapping over a defaults dataclass.

    Hyphenated keys (``transmit-delay``) are accepted for their underscored
    field names.
    """

    if not overrides:
        return defaults
    normalised = {str(key).replace("-", "_"): value for key, value in overrides.items()}
    known = {f.name for f in fields(defaults)}
    unknown = sorted(set(normalised) - known)
    if unknown:
        raise ValidationError(section, f"unknown keys {unknown}")
    return replace(defaults, **normalised)


def _timers_fragment(timers: OspfTimers) -> Dict[str, Any]:
    data = asdict(timers)
    # Consumers spell this timer with a hyphen.
    data["transmit-delay"] = data.pop("transmit_delay")
    return data


def resolve_ospf(
    enable: bool,
    area: OspfArea,
    timers: OspfTimers,
    auth: OspfAuth,
) -> Dict[str, Any]:
    if not enable:
        return {}
    return {
        "ospf_area": asdict(area),
        "ospf_timers": _timers_fragment(timers),
        "ospf_auth": asdict(auth),
    }


def resolve_bgp(peers: Mapping[str, BgpPeer]) -> Dict[str, Any]:
    fragment: Dict[str, Any] = {
        "bgp_peers": {key: asdict(peer) for key, peer in peers.items()},
    }
    if peers:
        fragment["bgp_enable"] = BGP_ENABLED
    return fragment


def merge_fragments(*fragments: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for fragment in fragments:
        merged.update(fragment)
    return merged
