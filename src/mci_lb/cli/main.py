"""Main CLI entry point."""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mci_lb.config import ConfigValidationError, MCIConfig, load_config
from mci_lb.forwarding_rule import (
    ChangeType,
    ForwardingRuleSyncer,
    GCEForwardingRuleProvider,
    SyncPlan,
)
from mci_lb.namer import Namer
from mci_lb.utils.errors import SyncError, error_handler
from mci_lb.utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

CHANGE_STYLES = {
    ChangeType.CREATE: ("to create", "green"),
    ChangeType.RETARGET: ("to retarget", "yellow"),
    ChangeType.RECREATE: ("to delete and recreate", "red"),
    ChangeType.REJECTED: ("differs, --force required", "red"),
    ChangeType.NO_CHANGE: ("up to date", "dim"),
}


@click.group()
@click.option('--config', 'config_path', default='mci.yaml', help='Path to configuration file')
@click.option('--log-level', default='info', type=click.Choice(['debug', 'info', 'warning', 'error']))
@click.option('--log-dir', default='.mci/logs', help='Directory for JSON log files')
@click.pass_context
def cli(ctx, config_path, log_level, log_dir):
    """Multicluster ingress forwarding rule management."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path

    setup_logging(log_level, log_dir)


def load_cli_config(config_path: str) -> MCIConfig:
    """Load and validate configuration file."""
    try:
        return load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/red] Configuration file not found: {config_path}")
        sys.exit(1)
    except ConfigValidationError as e:
        console.print("[red]Configuration validation failed:[/red]\n")
        console.print(str(e))
        sys.exit(1)


def create_syncer(config: MCIConfig) -> ForwardingRuleSyncer:
    """Create forwarding rule syncer with all dependencies."""
    try:
        provider = GCEForwardingRuleProvider(
            project=config.project.id,
            operation_timeout=config.sync.operation_timeout
        )
    except Exception as e:
        _fail(error_handler.handle_exception(e))

    return ForwardingRuleSyncer(
        namer=Namer(config.load_balancer.name),
        provider=provider,
        policy=config.forwarding_rule,
        settings=config.sync
    )


def _fail(error: SyncError):
    console.print(error.to_user_message())
    logger.debug(f"Error details: {error.to_dict()}")
    sys.exit(1)


def _cluster_list(config: MCIConfig, clusters: tuple) -> list:
    return list(clusters) if clusters else list(config.load_balancer.clusters)


@cli.command()
@click.option('--cluster', 'clusters', multiple=True, help='Member cluster (repeatable, overrides config)')
@click.option('--target-proxy', help='Target proxy link (overrides config)')
@click.option('--force', is_flag=True, help='Overwrite a differing existing forwarding rule')
@click.pass_context
def ensure(ctx, clusters: tuple, target_proxy: Optional[str], force: bool):
    """Create or update the HTTP forwarding rule."""
    config = load_cli_config(ctx.obj['config_path'])
    lb = config.load_balancer
    syncer = create_syncer(config)

    try:
        plan = syncer.ensure_http_forwarding_rule(
            lb.name,
            lb.ip_address,
            target_proxy or lb.target_proxy,
            _cluster_list(config, clusters),
            force_update=force
        )
    except SyncError as e:
        _fail(e)

    label, style = CHANGE_STYLES[plan.change_type]
    if plan.change_type == ChangeType.NO_CHANGE:
        console.print(f"[{style}]✓ Forwarding rule {plan.desired.name} is {label}[/{style}]")
    else:
        console.print(f"[green]✓ Forwarding rule {plan.desired.name} synced ({plan.change_type.value})[/green]")


@cli.command()
@click.option('--cluster', 'clusters', multiple=True, help='Member cluster (repeatable, overrides config)')
@click.option('--target-proxy', help='Target proxy link (overrides config)')
@click.option('--force', is_flag=True, help='Plan as if --force were passed to ensure')
@click.option('--json-output', is_flag=True, help='Output in JSON format')
@click.pass_context
def plan(ctx, clusters: tuple, target_proxy: Optional[str], force: bool, json_output: bool):
    """Show what ensure would change without executing it."""
    config = load_cli_config(ctx.obj['config_path'])
    lb = config.load_balancer
    syncer = create_syncer(config)

    try:
        sync_plan = syncer.plan_http_forwarding_rule(
            lb.name,
            lb.ip_address,
            target_proxy or lb.target_proxy,
            _cluster_list(config, clusters),
            force_update=force
        )
    except SyncError as e:
        _fail(e)

    if json_output:
        _output_plan_json(sync_plan)
    else:
        _output_plan_rich(sync_plan, lb.name)


def _output_plan_json(sync_plan: SyncPlan):
    output = {
        'name': sync_plan.desired.name,
        'action': sync_plan.change_type.value,
        'desired': sync_plan.desired.to_dict(include_provider_fields=False),
        'changes': sync_plan.diff,
    }
    console.print_json(data=output)


def _output_plan_rich(sync_plan: SyncPlan, lb_name: str):
    console.print(Panel(f"Forwarding Rule Plan for Load Balancer: {lb_name}", style="bold blue"))

    label, style = CHANGE_STYLES[sync_plan.change_type]
    summary = Text()
    summary.append("Plan: ", style="bold")
    summary.append(f"{sync_plan.desired.name} {label}", style=style)
    console.print(summary)

    if not sync_plan.diff:
        return

    table = Table(title="Changes")
    table.add_column("Field", style="cyan")
    table.add_column("Live", style="red")
    table.add_column("Desired", style="green")
    for field_name, change in sorted(sync_plan.diff.items()):
        table.add_row(field_name, str(change['live']), str(change['desired']))
    console.print(table)


@cli.command()
@click.pass_context
def status(ctx):
    """Show the clusters fronted by the load balancer."""
    config = load_cli_config(ctx.obj['config_path'])
    syncer = create_syncer(config)

    try:
        lb_status = syncer.get_load_balancer_status(config.load_balancer.name)
    except SyncError as e:
        _fail(e)

    table = Table(title=f"Load Balancer: {lb_status.load_balancer_name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("IP Address", lb_status.ip_address)
    table.add_row("Clusters", ", ".join(lb_status.clusters) or "-")
    table.add_row("Description", lb_status.description)
    console.print(table)


@cli.command()
@click.confirmation_option(prompt='Delete the forwarding rule of this load balancer?')
@click.pass_context
def delete(ctx):
    """Delete the forwarding rules of the load balancer."""
    config = load_cli_config(ctx.obj['config_path'])
    syncer = create_syncer(config)

    try:
        syncer.delete_forwarding_rules()
    except SyncError as e:
        _fail(e)

    console.print(f"[green]✓ Deleted forwarding rules of {config.load_balancer.name}[/green]")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
