# deployhub/cli.py
import json

import click
from flask.cli import AppGroup

from deployhub.services.schema_service import create_schema, delete_all_collections
from deployhub.services.sync_service import import_hardhat_deployments_for_organization

deploy_cli = AppGroup("deploy", help="Hardhat deployment import commands.")


def _echo(result):
    click.echo(json.dumps(result, indent=2, default=str))


@deploy_cli.command("import")
@click.argument("organization_id", type=int)
@click.option("--folder", default=None, help="Deployments folder (default: DEPLOYMENTS_DIR)")
@click.option("--rpc-url", "rpc_url", default=None, help="Fallback RPC URL for networks without a provider URL")
@click.option("--project", "project_name", default=None, help="Project name (default: DEFAULT_PROJECT_NAME)")
def import_command(organization_id, folder, rpc_url, project_name):
    """Import every network under the deployments folder for ORGANIZATION_ID."""
    result = import_hardhat_deployments_for_organization(
        organization_id, folder, rpc_url, project_name=project_name,
    )
    _echo(result)
    if not result["ok"]:
        raise SystemExit(1)


@deploy_cli.command("create-schema")
def create_schema_command():
    """Create missing collections and event log tables."""
    result = create_schema()
    _echo(result)
    if result["failed"]:
        raise SystemExit(1)


@deploy_cli.command("delete-all")
@click.option("--yes", is_flag=True, help="Confirm the deletion")
def delete_all_command(yes):
    """Delete every imported record. Organizations are kept."""
    if not yes:
        click.echo("Refusing to delete without --yes", err=True)
        raise SystemExit(2)
    _echo(delete_all_collections())
