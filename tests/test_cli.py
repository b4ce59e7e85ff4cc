"""Tests for the mci-lb command line interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mci_lb.cli.main import cli
from mci_lb.forwarding_rule import ForwardingRule

CONFIG_YAML = """
project:
  id: my-project
load_balancer:
  name: lb1
  ip_address: 10.0.0.5
  target_proxy: proxy-A
  clusters: [clusterB, clusterA]
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "mci.yaml"
    path.write_text(CONFIG_YAML)
    return str(path)


@pytest.fixture
def run(config_path, syncer):
    runner = CliRunner()

    def invoke(*args, **kwargs):
        with patch("mci_lb.cli.main.create_syncer", return_value=syncer):
            return runner.invoke(
                cli,
                ["--config", config_path, "--log-level", "error", "--log-dir", "", *args],
                obj={},
                **kwargs
            )

    return invoke


class TestCli:

    def test_ensure_creates(self, run, provider):
        result = run("ensure")

        assert result.exit_code == 0, result.output
        assert "synced (create)" in result.output
        assert [call[0] for call in provider.mutating_calls] == ["create"]

    def test_ensure_up_to_date(self, run, provider):
        run("ensure")
        provider.calls.clear()

        result = run("ensure")

        assert result.exit_code == 0
        assert "up to date" in result.output
        assert provider.mutating_calls == []

    def test_ensure_rejected_without_force(self, run, provider):
        run("ensure")

        result = run("ensure", "--target-proxy", "proxy-B")

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_ensure_force_retargets(self, run, provider):
        run("ensure")
        provider.calls.clear()

        result = run("ensure", "--target-proxy", "proxy-B", "--force")

        assert result.exit_code == 0
        assert provider.mutating_calls == [("set_target", "mci1-fw-lb1", "proxy-B")]

    def test_plan_json(self, run, provider):
        result = run("plan", "--json-output")

        assert result.exit_code == 0
        assert '"action": "create"' in result.output
        assert provider.mutating_calls == []

    def test_plan_shows_changes(self, run):
        run("ensure")

        result = run("plan", "--cluster", "clusterC")

        assert result.exit_code == 0
        assert "description" in result.output

    def test_status(self, run):
        run("ensure")

        result = run("status")

        assert result.exit_code == 0
        assert "clusterA, clusterB" in result.output

    def test_status_not_found(self, run):
        result = run("status")

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_status_unavailable(self, run, provider):
        provider.store(ForwardingRule(name="mci1-fw-lb1", description="garbage"))

        result = run("status")

        assert result.exit_code == 1
        assert "parsing" in result.output

    def test_delete(self, run, provider):
        run("ensure")

        result = run("delete", "--yes")

        assert result.exit_code == 0
        assert provider.stored("mci1-fw-lb1") is None

    def test_delete_missing(self, run):
        result = run("delete", "--yes")

        assert result.exit_code == 1

    def test_missing_config(self, tmp_path):
        result = CliRunner().invoke(
            cli, ["--config", str(tmp_path / "none.yaml"), "--log-dir", "", "status"], obj={}
        )

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output
