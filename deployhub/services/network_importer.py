# deployhub/services/network_importer.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from flask import current_app

from deployhub.models import db, Blockchain, Project, Deployment
from deployhub.services.artifact_importer import import_deployment_artifact
from deployhub.services.record_service import get_or_create_record, get_record_by_id, save_record

logger = logging.getLogger(__name__)

EXPLORER_URL_PLACEHOLDER = ""


def _abandon(network_name: str, network_id, message: str) -> Dict[str, Any]:
    logger.error(message, extra={"network": network_name})
    return {
        "ok": False,
        "network": network_name,
        "network_id": network_id,
        "imported": 0,
        "failed": 0,
        "artifacts": [],
        "error": message,
    }


def _load_parents(ids: Dict[str, int]):
    """Blockchain, Project and Deployment re-loaded by id in the current session."""
    return (
        db.session.get(Blockchain, ids["blockchain"]),
        db.session.get(Project, ids["project"]),
        db.session.get(Deployment, ids["deployment"]),
    )


def _import_one(record: Dict[str, Any], ids: Dict[str, int], rpc_url: str, chain_reader) -> Dict[str, Any]:
    """One artifact, isolated: a failure is rolled back and reported, never raised."""
    artifact = record.get("artifact") or {}
    outcome = {
        "name": artifact.get("contractName") or record.get("name"),
        "address": record.get("address"),
        "ok": True,
        "error": None,
    }
    network_name = record.get("network_name")
    try:
        # each worker owns its own session
        blockchain, project, deployment = _load_parents(ids)
        import_deployment_artifact(record, blockchain, project, deployment, rpc_url, chain_reader=chain_reader)
    except Exception as e:
        db.session.rollback()
        logger.exception(
            "Failed to import artifact %s on %s", outcome["name"], network_name,
            extra={"network": network_name, "artifact": outcome["name"]},
        )
        outcome.update(ok=False, error=str(e))
    return outcome


def _import_one_in_context(app, record, ids, rpc_url, chain_reader):
    with app.app_context():
        return _import_one(record, ids, rpc_url, chain_reader)


def parallel_imports_supported() -> bool:
    # SQLite allows one writer; concurrent sessions fail on commit
    return db.engine.dialect.name != "sqlite"


def fan_out(artifacts: List[Dict[str, Any]], ids: Dict[str, int], rpc_url: str, chain_reader=None) -> List[Dict[str, Any]]:
    """
    Import every artifact and collect one outcome per artifact, in input
    order. With more than one worker configured the imports run on a thread
    pool, each in its own app context. SQLite databases always run inline.
    """
    max_workers = int(current_app.config.get("IMPORT_MAX_WORKERS", 1) or 1)
    if max_workers > 1 and not parallel_imports_supported():
        logger.debug("Database does not take concurrent writers, importing %d artifacts inline", len(artifacts))
        max_workers = 1
    if max_workers <= 1 or len(artifacts) <= 1:
        return [_import_one(record, ids, rpc_url, chain_reader) for record in artifacts]

    app = current_app._get_current_object()
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="artifact-import") as pool:
        futures = [
            pool.submit(_import_one_in_context, app, record, ids, rpc_url, chain_reader)
            for record in artifacts
        ]
        return [f.result() for f in futures]


def import_network_deployments(
    network_name: str,
    network_id: int,
    artifacts: List[Dict[str, Any]],
    organization_id,
    project_name: str,
    rpc_url: str,
    deployment_name: Optional[str] = None,
    chain_reader=None,
) -> Dict[str, Any]:
    """
    Organization -> Project -> Deployment -> Blockchain, then every artifact.

    A missing organization abandons the network before anything is written.
    """
    organization = get_record_by_id("Organization", organization_id)
    if organization is None:
        return _abandon(network_name, network_id, f"Organization {organization_id} not found; skipping network {network_name}")

    project = get_or_create_record(
        "Project",
        ["name", "organization"],
        [project_name, organization],
        {"name": project_name, "organization": organization},
    )
    if project is None:
        return _abandon(network_name, network_id, f"Could not create project {project_name!r} for network {network_name}")

    deployment_name = deployment_name or network_name
    deployment = get_or_create_record(
        "Deployment",
        ["name", "project"],
        [deployment_name, project],
        {"name": deployment_name, "project": project},
    )
    if deployment is None:
        return _abandon(network_name, network_id, f"Could not create deployment {deployment_name!r} for network {network_name}")

    blockchain_attrs = {
        "network_id": network_id,
        "name": network_name,
        "rpc_url": rpc_url,
        "explorer_url": EXPLORER_URL_PLACEHOLDER,
        "active": True,
    }
    blockchain = get_or_create_record("Blockchain", ["network_id"], [network_id], blockchain_attrs)
    if blockchain is None:
        return _abandon(network_name, network_id, f"Could not create blockchain record for network {network_name}")
    save_record(blockchain, {"name": network_name, "rpc_url": rpc_url})

    ids = {"blockchain": blockchain.id, "project": project.id, "deployment": deployment.id}
    outcomes = fan_out(artifacts, ids, rpc_url, chain_reader=chain_reader)

    imported = sum(1 for o in outcomes if o["ok"])
    failed = len(outcomes) - imported
    logger.info(
        "Network %s: %d artifacts imported, %d failed", network_name, imported, failed,
        extra={"network": network_name},
    )
    return {
        "ok": True,
        "network": network_name,
        "network_id": network_id,
        "rpc_url": rpc_url,
        "imported": imported,
        "failed": failed,
        "artifacts": outcomes,
    }
