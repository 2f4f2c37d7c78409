"""YAML configuration loader for the L3Out planner."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

import yaml

from aci_l3out.config import (
    DEFAULT_EXTERNAL_EPGS,
    BgpPeer,
    ExternalEpgSpec,
    L3OutConfig,
    OspfArea,
    OspfAuth,
    OspfTimers,
    PathSpec,
)
from aci_l3out.exceptions import ConfigError
from aci_l3out.features import apply_overrides

L3OUT_KEYS = {
    "name",
    "tenant_name",
    "vrf",
    "vrf_id",
    "l3_domain",
    "router_id_as_loopback",
    "static_subnets",
    "interconnect_subnet",
    "paths",
    "external_epgs",
    "static_routes",
    "ospf_enable",
    "ospf_area",
    "ospf_timers",
    "ospf_auth",
    "bgp_peers",
}
PATH_KEYS = {"name", "pod_id", "nodes", "is_vpc", "vlan_id", "mtu"}
EPG_KEYS = {"subnets", "scope"}
PEER_KEYS = {"address", "local_as", "remote_as", "password"}
REQUIRED_KEYS = ("name", "tenant_name", "vrf", "l3_domain", "interconnect_subnet", "paths")


def _require_mapping(section: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"'{section}' must be a mapping")
    return value


def _reject_unknown(section: str, entry: Mapping[str, Any], allowed: Iterable[str]) -> None:
    unknown = sorted(set(entry) - set(allowed))
    if unknown:
        raise ConfigError(f"'{section}' has unknown keys: {', '.join(unknown)}")


def _as_int(section: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{section}' must be an integer, got {value!r}") from exc


def _as_bool(section: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{section}' must be true or false, got {value!r}")
    return value


def _as_list(section: str, value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, list):
        raise ConfigError(f"'{section}' must be a list")
    return list(value)


def _parse_path(key: str, entry: Any) -> PathSpec:
    section = f"paths.{key}"
    entry = _require_mapping(section, entry)
    _reject_unknown(section, entry, PATH_KEYS)
    if "nodes" not in entry:
        raise ConfigError(f"'{section}' missing 'nodes'")

    mtu = entry.get("mtu", "inherit")
    return PathSpec(
        name=str(entry.get("name", key)),
        nodes=tuple(
            _as_int(f"{section}.nodes", node)
            for node in _as_list(f"{section}.nodes", entry["nodes"])
        ),
        pod_id=_as_int(f"{section}.pod_id", entry.get("pod_id", 1)),
        is_vpc=_as_bool(f"{section}.is_vpc", entry.get("is_vpc", False)),
        vlan_id=_as_int(f"{section}.vlan_id", entry.get("vlan_id", 1)),
        mtu=mtu if mtu == "inherit" else _as_int(f"{section}.mtu", mtu),
    )


def _parse_epg(key: str, entry: Any) -> ExternalEpgSpec:
    section = f"external_epgs.{key}"
    entry = _require_mapping(section, entry)
    _reject_unknown(section, entry, EPG_KEYS)
    scope = entry.get("scope")
    return ExternalEpgSpec(
        subnets=tuple(str(s) for s in _as_list(f"{section}.subnets", entry.get("subnets"))),
        scope=(
            tuple(str(s) for s in _as_list(f"{section}.scope", scope))
            if scope is not None
            else ("import-security",)
        ),
    )


def _parse_peer(key: str, entry: Any) -> BgpPeer:
    section = f"bgp_peers.{key}"
    entry = _require_mapping(section, entry)
    _reject_unknown(section, entry, PEER_KEYS)
    for required in ("address", "remote_as"):
        if required not in entry:
            raise ConfigError(f"'{section}' missing '{required}'")
    local_as = entry.get("local_as")
    return BgpPeer(
        address=str(entry["address"]),
        remote_as=_as_int(f"{section}.remote_as", entry["remote_as"]),
        local_as=None if local_as is None else _as_int(f"{section}.local_as", local_as),
        password=str(entry.get("password", "")),
    )


def _parse_mapping(section: str, value: Any, parse) -> Dict[str, Any]:
    if value is None:
        return {}
    return {str(k): parse(str(k), v) for k, v in _require_mapping(section, value).items()}


def parse_config(data: Any) -> L3OutConfig:
    """Build an :class:`L3OutConfig` from an already-decoded document."""

    data = _require_mapping("configuration", data)
    section = _require_mapping("l3out", data.get("l3out"))
    _reject_unknown("l3out", section, L3OUT_KEYS)
    missing = [key for key in REQUIRED_KEYS if key not in section]
    if missing:
        raise ConfigError(f"'l3out' missing required keys: {', '.join(missing)}")

    external_epgs = _parse_mapping("external_epgs", section.get("external_epgs"), _parse_epg)

    return L3OutConfig(
        name=str(section["name"]),
        tenant_name=str(section["tenant_name"]),
        vrf=str(section["vrf"]),
        vrf_id=_as_int("vrf_id", section.get("vrf_id", 1)),
        l3_domain=str(section["l3_domain"]),
        router_id_as_loopback=_as_bool(
            "router_id_as_loopback", section.get("router_id_as_loopback", False)
        ),
        static_subnets=tuple(
            str(s) for s in _as_list("static_subnets", section.get("static_subnets"))
        ),
        interconnect_subnet=str(section["interconnect_subnet"]),
        paths=_parse_mapping("paths", section["paths"], _parse_path),
        external_epgs=external_epgs or dict(DEFAULT_EXTERNAL_EPGS),
        static_routes=tuple(
            str(s) for s in _as_list("static_routes", section.get("static_routes"))
        ),
        ospf_enable=_as_bool("ospf_enable", section.get("ospf_enable", False)),
        ospf_area=apply_overrides(
            "ospf_area", OspfArea(), _require_mapping("ospf_area", section.get("ospf_area") or {})
        ),
        ospf_timers=apply_overrides(
            "ospf_timers",
            OspfTimers(),
            _require_mapping("ospf_timers", section.get("ospf_timers") or {}),
        ),
        ospf_auth=apply_overrides(
            "ospf_auth", OspfAuth(), _require_mapping("ospf_auth", section.get("ospf_auth") or {})
        ),
        bgp_peers=_parse_mapping("bgp_peers", section.get("bgp_peers"), _parse_peer),
    )


def load_config(path: Path) -> L3OutConfig:
    try:
        data = yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse {path}: {exc}") from exc
    return parse_config(data)
