# deployhub/services/sync_service.py
import logging
import threading
from collections import defaultdict
from typing import Any, Dict, Optional

from flask import current_app

from deployhub.services.artifact_reader import read_deployments
from deployhub.services.network_importer import import_network_deployments
from deployhub.services.rpc_service import resolve_rpc_url

logger = logging.getLogger(__name__)

# One import per organization at a time within this process. Across processes
# the unique indexes behind get_or_create_record keep rows from duplicating.
_org_locks = defaultdict(threading.Lock)
_org_locks_guard = threading.Lock()


class ImportAlreadyRunning(RuntimeError):
    pass


def _lock_for(organization_id) -> threading.Lock:
    with _org_locks_guard:
        return _org_locks[str(organization_id)]


def import_hardhat_deployments_for_organization(
    organization_id,
    deployments_folder_path: Optional[str] = None,
    fallback_rpc_url: Optional[str] = None,
    project_name: Optional[str] = None,
    chain_reader=None,
    blocking: bool = True,
) -> Dict[str, Any]:
    """
    Read the hardhat-deploy folder and import each network, one network
    after the other.
    """
    cfg = current_app.config
    folder = deployments_folder_path or cfg.get("DEPLOYMENTS_DIR")
    project_name = project_name or cfg.get("DEFAULT_PROJECT_NAME", "Default Project")
    log_extra = {"organization_id": organization_id}

    lock = _lock_for(organization_id)
    if not lock.acquire(blocking=blocking):
        raise ImportAlreadyRunning(f"An import for organization {organization_id} is already running")

    try:
        networks = read_deployments(folder)
        if not networks:
            logger.warning("No artifacts found in %s", folder, extra=log_extra)
            return {
                "ok": False,
                "organization_id": organization_id,
                "networks": [],
                "error": f"no artifacts found in {folder}",
            }

        summaries = []
        for network_name, artifacts in networks.items():
            network_id = artifacts[0]["network_id"] if artifacts else None
            if network_id is None:
                logger.warning("Network %s has no artifacts, skipping", network_name, extra=log_extra)
                continue
            rpc_url = resolve_rpc_url(network_name, artifacts, fallback_rpc_url)
            summaries.append(import_network_deployments(
                network_name,
                network_id,
                artifacts,
                organization_id,
                project_name,
                rpc_url,
                chain_reader=chain_reader,
            ))

        logger.info(
            "Import for organization %s finished: %d networks", organization_id, len(summaries),
            extra=log_extra,
        )
        return {
            "ok": all(s["ok"] for s in summaries),
            "organization_id": organization_id,
            "networks": summaries,
        }
    finally:
        lock.release()
