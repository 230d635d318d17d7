# deployhub/services/artifact_reader.py
"""
Reads hardhat-deploy output:

    deployments/<network>/.chainId          plain-text chain id
    deployments/<network>/<Contract>.json   one artifact per deployed contract

Bad input never raises: a network without a usable `.chainId` is skipped,
an unreadable artifact file or one with an invalid address is skipped, and a
missing root gives no networks. Artifact addresses come out checksummed.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from deployhub.services.chain_reader import normalize_address

logger = logging.getLogger(__name__)

CHAIN_ID_FILE = ".chainId"


class ArtifactReadError(Exception):
    """An artifact or chain id file could not be used."""


def read_chain_id(network_dir: Path) -> int:
    p = network_dir / CHAIN_ID_FILE
    if not p.is_file():
        raise ArtifactReadError(f"{CHAIN_ID_FILE} missing in {network_dir}")
    raw = p.read_text(encoding="utf-8").strip()
    try:
        return int(raw, 0)  # "11155111" or "0xaa36a7"
    except ValueError:
        raise ArtifactReadError(f"Invalid chain id {raw!r} in {p}") from None


def load_artifact(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ArtifactReadError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ArtifactReadError(f"Expected artifact JSON object in {path}, got {type(data).__name__}")
    if not data.get("address"):
        raise ArtifactReadError(f"Artifact {path} has no address")
    if not isinstance(data.get("abi", []), list):
        raise ArtifactReadError(f"Artifact {path} has an invalid abi")
    try:
        data["address"] = normalize_address(data["address"])
    except ValueError as e:
        raise ArtifactReadError(f"Artifact {path}: {e}") from e

    # hardhat-deploy names the file after the deployment, not always in the JSON
    data.setdefault("contractName", path.stem)
    data.setdefault("abi", [])
    return data


def read_network_artifacts(network_dir: Path) -> Optional[List[Dict[str, Any]]]:
    """Artifacts of one network directory, or None when the network is unusable."""
    network_name = network_dir.name
    try:
        network_id = read_chain_id(network_dir)
    except (ArtifactReadError, OSError) as e:
        logger.warning("Skipping network %s: %s", network_name, e, extra={"network": network_name})
        return None

    records = []
    for path in sorted(network_dir.glob("*.json")):
        try:
            artifact = load_artifact(path)
        except ArtifactReadError as e:
            logger.warning("Skipping artifact: %s", e, extra={"network": network_name, "artifact": path.name})
            continue

        records.append({
            "name": path.stem,
            "network_name": network_name,
            "network_id": network_id,
            "address": artifact["address"],
            "abi": artifact["abi"],
            "artifact": artifact,
        })
    return records


def read_deployments(root: Union[str, Path]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Parse every network under `root`.
    Returns {network_name: [artifact records]}, empty when nothing is found.
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning("No artifacts found: %s does not exist", root)
        return {}

    networks: Dict[str, List[Dict[str, Any]]] = {}
    for network_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        records = read_network_artifacts(network_dir)
        if records is None:
            continue
        networks[network_dir.name] = records
        logger.info(
            "Read %d artifacts for network %s", len(records), network_dir.name,
            extra={"network": network_dir.name},
        )

    if not networks:
        logger.warning("No artifacts found under %s", root)
    return networks
