import logging

import pytest

from aci_l3out.config import BgpPeer, ExternalEpgSpec, L3OutConfig, OspfAuth, PathSpec
from aci_l3out.exceptions import SubnetExhaustedError, ValidationError
from aci_l3out.validation import count_unique_nodes, validate_config


def build_config(**overrides) -> L3OutConfig:
    values = dict(
        name="wan",
        tenant_name="prod",
        vrf="prod-vrf",
        l3_domain="wan-dom",
        interconnect_subnet="10.0.0.0/28",
        paths={"border": PathSpec(name="eth1/1", nodes=(101, 102), vlan_id=100)},
    )
    values.update(overrides)
    return L3OutConfig(**values)


def test_valid_config_passes():
    validate_config(build_config())


def test_empty_paths_are_valid():
    validate_config(build_config(paths={}, interconnect_subnet="10.0.0.0/30"))


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"interconnect_subnet": "10.0.0.0/33"}, "interconnect_subnet"),
        ({"interconnect_subnet": "10.0.0.1/28"}, "interconnect_subnet"),
        ({"static_routes": ("192.168.0.0/16", "bogus")}, "static_routes[1]"),
        ({"static_subnets": ("300.0.0.0/8",)}, "static_subnets[0]"),
        (
            {"external_epgs": {"inet": ExternalEpgSpec(subnets=("0.0.0.0/0", "nope"))}},
            "external_epgs.inet.subnets[1]",
        ),
        ({"ospf_auth": OspfAuth(key_id=0)}, "ospf_auth.key_id"),
        ({"ospf_auth": OspfAuth(key_id=256)}, "ospf_auth.key_id"),
        ({"ospf_auth": OspfAuth(type="sha256")}, "ospf_auth.type"),
        ({"vrf_id": 0}, "vrf_id"),
        (
            {"paths": {"border": PathSpec(name="eth1/1", nodes=(101,), vlan_id=4095)}},
            "paths.border.vlan_id",
        ),
        (
            {"paths": {"border": PathSpec(name="eth1/1", nodes=(101,), mtu=100)}},
            "paths.border.mtu",
        ),
        (
            {"bgp_peers": {"isp": BgpPeer(address="not-an-ip", remote_as=65100)}},
            "bgp_peers.isp.address",
        ),
        (
            {"bgp_peers": {"isp": BgpPeer(address="192.0.2.1", remote_as=0)}},
            "bgp_peers.isp.remote_as",
        ),
    ],
)
def test_invalid_fields_are_reported(overrides, field):
    with pytest.raises(ValidationError) as excinfo:
        validate_config(build_config(**overrides))

    assert excinfo.value.field == field
    assert str(excinfo.value).startswith(f"{field}: ")


def test_slash_30_cannot_hold_two_nodes():
    config = build_config(
        interconnect_subnet="10.0.0.0/30",
        paths={"border": PathSpec(name="eth1/1", nodes=(101, 102))},
        vrf_id=5,
    )

    with pytest.raises(SubnetExhaustedError) as excinfo:
        validate_config(config)

    assert excinfo.value.required == 4
    assert excinfo.value.available == 2


def test_capacity_counts_distinct_nodes():
    config = build_config(
        paths={
            "a": PathSpec(name="vpc-a", nodes=(101, 102), is_vpc=True),
            "b": PathSpec(name="eth1/2", nodes=(102,)),
        },
    )

    assert count_unique_nodes(config) == 2
    validate_config(build_config(interconnect_subnet="10.0.0.0/29", paths=config.paths))


def test_duplicate_static_route_rejected():
    config = build_config(static_routes=("10.1.0.0/16", "192.168.0.0/16", "10.1.0.0/16"))

    with pytest.raises(ValidationError) as excinfo:
        validate_config(config)

    assert excinfo.value.field == "static_routes[2]"
    assert "duplicate prefix" in excinfo.value.constraint


def test_duplicate_epg_subnet_rejected():
    config = build_config(
        external_epgs={"inet": ExternalEpgSpec(subnets=("0.0.0.0/0", "0.0.0.0/0"))}
    )

    with pytest.raises(ValidationError) as excinfo:
        validate_config(config)

    assert excinfo.value.field == "external_epgs.inet.subnets[1]"


def test_same_prefix_in_two_epgs_is_allowed():
    validate_config(
        build_config(
            external_epgs={
                "a": ExternalEpgSpec(subnets=("10.0.0.0/8",)),
                "b": ExternalEpgSpec(subnets=("10.0.0.0/8",)),
            }
        )
    )


def test_repeated_static_subnets_pass_through():
    validate_config(build_config(static_subnets=("198.51.100.0/24", "198.51.100.0/24")))


def test_non_dotted_quad_router_id_warns(caplog):
    config = build_config(
        vrf_id=300,
        paths={"border": PathSpec(name="eth1/1", nodes=(1001,))},
    )

    with caplog.at_level(logging.WARNING, logger="aci_l3out.validation"):
        validate_config(config)

    assert "1.1.1001.300" in caplog.text


def test_dotted_quad_router_id_does_not_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="aci_l3out.validation"):
        validate_config(build_config())

    assert "router ID" not in caplog.text
