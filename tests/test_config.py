"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from mci_lb.config import (
    ConfigValidationError,
    ForwardingRulePolicy,
    LoadBalancerConfig,
    SyncSettings,
    load_config,
    parse_config,
)

VALID_YAML = """
project:
  id: my-project
load_balancer:
  name: lb1
  ip_address: 10.0.0.5
  target_proxy: https://www.googleapis.com/compute/v1/projects/my-project/global/targetHttpProxies/p
  clusters:
    - clusterB
    - clusterA
"""


class TestForwardingRulePolicy:
    """Tests for ForwardingRulePolicy."""

    def test_default_values(self):
        policy = ForwardingRulePolicy()
        assert policy.http_port_range == "80-80"
        assert policy.https_port_range == "443-443"
        assert policy.protocol == "TCP"
        assert policy.load_balancing_scheme == "EXTERNAL"

    @pytest.mark.parametrize("value", ["80", "90-80", "0-0", "80-70000"])
    def test_invalid_port_range(self, value):
        with pytest.raises(ValidationError):
            ForwardingRulePolicy(http_port_range=value)

    def test_invalid_scheme(self):
        with pytest.raises(ValidationError):
            ForwardingRulePolicy(load_balancing_scheme="INTERNAL")


class TestSyncSettings:
    """Tests for SyncSettings."""

    def test_defaults(self):
        settings = SyncSettings()
        assert settings.fetch_error_policy == "create"
        assert settings.operation_timeout == 300

    def test_invalid_policy(self):
        with pytest.raises(ValidationError):
            SyncSettings(fetch_error_policy="ignore")


class TestLoadBalancerConfig:
    """Tests for LoadBalancerConfig."""

    def test_duplicate_clusters_rejected(self):
        with pytest.raises(ValidationError):
            LoadBalancerConfig(name="lb1", ip_address="1.2.3.4", target_proxy="p", clusters=["a", "a"])

    @pytest.mark.parametrize("name", ["my_lb", "My-LB", "a" * 60])
    def test_names_without_own_resource_names_rejected(self, name):
        with pytest.raises(ValidationError):
            LoadBalancerConfig(name=name, ip_address="1.2.3.4", target_proxy="p")

    def test_empty_clusters_allowed(self):
        lb = LoadBalancerConfig(name="lb1", ip_address="1.2.3.4", target_proxy="p")
        assert lb.clusters == []


class TestLoadConfig:
    """Tests for load_config()."""

    def test_valid_file(self, tmp_path):
        path = tmp_path / "mci.yaml"
        path.write_text(VALID_YAML)

        config = load_config(path)

        assert config.project.id == "my-project"
        assert config.load_balancer.name == "lb1"
        assert config.load_balancer.clusters == ["clusterB", "clusterA"]
        assert config.forwarding_rule.http_port_range == "80-80"
        assert config.sync.fetch_error_policy == "create"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "mci.yaml"
        path.write_text("project: [unclosed")

        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_errors_listed_by_location(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config({"project": {"id": "my-project"}, "load_balancer": {"name": "lb1"}})

        message = str(exc_info.value)
        assert "load_balancer -> ip_address" in message
        assert "load_balancer -> target_proxy" in message
