from aci_l3out.config import PathSpec
from aci_l3out.nodes import enumerate_nodes, node_identity, node_lookup, router_id


def test_router_id_includes_vrf():
    assert router_id(1, 101, 5) == "1.1.101.5"
    assert node_identity(2, 201) == "pod/2/node-201"


def test_enumerate_preserves_path_then_node_order():
    paths = [
        ("a", PathSpec(name="eth1/1", nodes=(102, 101))),
        ("b", PathSpec(name="eth1/2", nodes=(103,))),
    ]

    nodes = enumerate_nodes(paths, vrf_id=1)

    assert [n.node_id for n in nodes] == [102, 101, 103]
    assert nodes[0].router_id == "1.1.102.1"


def test_duplicate_node_keeps_first_path():
    paths = [
        ("a", PathSpec(name="vpc-a", nodes=(101, 102), is_vpc=True)),
        ("b", PathSpec(name="eth1/5", nodes=(102, 103))),
    ]

    nodes = enumerate_nodes(paths, vrf_id=1)

    identities = [n.identity for n in nodes]
    assert len(identities) == len(set(identities)) == 3
    lookup = node_lookup(nodes)
    assert lookup["pod/1/node-102"].path_key == "a"
    assert lookup["pod/1/node-102"].is_vpc is True
    assert lookup["pod/1/node-103"].path_key == "b"


def test_same_node_id_in_different_pods_is_distinct():
    paths = [
        ("a", PathSpec(name="eth1/1", nodes=(101,), pod_id=1)),
        ("b", PathSpec(name="eth1/1", nodes=(101,), pod_id=2)),
    ]

    nodes = enumerate_nodes(paths, vrf_id=3)

    assert [n.identity for n in nodes] == ["pod/1/node-101", "pod/2/node-101"]
    assert [n.router_id for n in nodes] == ["1.1.101.3", "1.2.101.3"]


def test_no_paths_yields_no_nodes():
    assert enumerate_nodes([], vrf_id=1) == ()
