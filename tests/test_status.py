"""Unit tests for the load balancer status codec."""

import json

import pytest

from mci_lb.status import LoadBalancerStatus
from mci_lb.utils.errors import DecodingError


class TestLoadBalancerStatus:
    """Tests for LoadBalancerStatus encoding."""

    def test_round_trip(self):
        status = LoadBalancerStatus(
            description="Http forwarding rule for kubernetes multicluster loadbalancer lb1",
            load_balancer_name="lb1",
            clusters=["clusterA", "clusterB"],
            ip_address="10.0.0.5",
        )
        decoded = LoadBalancerStatus.from_string(status.to_string())
        assert decoded == status

    def test_round_trip_empty_clusters(self):
        status = LoadBalancerStatus(load_balancer_name="lb1", ip_address="10.0.0.5")
        decoded = LoadBalancerStatus.from_string(status.to_string())
        assert decoded.clusters == []
        assert decoded.load_balancer_name == "lb1"

    def test_wire_keys(self):
        status = LoadBalancerStatus(
            description="d", load_balancer_name="lb1", clusters=["a"], ip_address="1.2.3.4"
        )
        data = json.loads(status.to_string())
        assert data == {
            "Description": "d",
            "LoadBalancerName": "lb1",
            "Clusters": ["a"],
            "IPAddress": "1.2.3.4",
        }

    def test_decodes_null_clusters(self):
        value = '{"Description":"d","LoadBalancerName":"lb1","Clusters":null,"IPAddress":"10.0.0.5"}'
        status = LoadBalancerStatus.from_string(value)
        assert status.clusters == []
        assert status.load_balancer_name == "lb1"

    def test_decodes_externally_written_description(self):
        value = (
            '{"Description":"Http forwarding rule for kubernetes multicluster loadbalancer lb1",'
            '"LoadBalancerName":"lb1","Clusters":["c1","c2"],"IPAddress":"10.0.0.5"}'
        )
        status = LoadBalancerStatus.from_string(value)
        assert status.clusters == ["c1", "c2"]
        assert status.ip_address == "10.0.0.5"

    def test_encoding_is_deterministic(self):
        first = LoadBalancerStatus(load_balancer_name="lb1", clusters=["a", "b"], ip_address="1.2.3.4")
        second = LoadBalancerStatus(load_balancer_name="lb1", clusters=["a", "b"], ip_address="1.2.3.4")
        assert first.to_string() == second.to_string()

    @pytest.mark.parametrize("value", ["", "not json", "[]", '{"Clusters": "c1"}'])
    def test_invalid_descriptions_raise(self, value):
        with pytest.raises(DecodingError):
            LoadBalancerStatus.from_string(value)
