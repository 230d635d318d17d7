# deployhub/services/rpc_service.py
import logging
from typing import Any, Dict, List, Optional

from flask import current_app

logger = logging.getLogger(__name__)

ALCHEMY_URL_TEMPLATE = "https://{subdomain}.g.alchemy.com/v2/{api_key}"

# hardhat network name -> Alchemy subdomain
ALCHEMY_NETWORKS = {
    "mainnet": "eth-mainnet",
    "sepolia": "eth-sepolia",
    "ethereum-sepolia": "eth-sepolia",
    "polygon": "polygon-mainnet",
    "mumbai": "polygon-mumbai",
    "amoy": "polygon-amoy",
    "arbitrum": "arb-mainnet",
    "arbitrum-sepolia": "arb-sepolia",
    "optimism": "opt-mainnet",
    "optimism-sepolia": "opt-sepolia",
    "base": "base-mainnet",
    "basesep": "base-sepolia",
    "base-sepolia": "base-sepolia",
}

DEFAULT_RPC_URL = "http://localhost:8545"


def provider_rpc_url(network_name: str, api_key: Optional[str]) -> Optional[str]:
    subdomain = ALCHEMY_NETWORKS.get((network_name or "").strip().lower())
    if not subdomain or not api_key:
        return None
    return ALCHEMY_URL_TEMPLATE.format(subdomain=subdomain, api_key=api_key)


def artifact_rpc_url(artifacts: List[Dict[str, Any]]) -> Optional[str]:
    for record in artifacts or []:
        url = (record.get("artifact") or {}).get("rpcUrl")
        if url:
            return url
    return None


def resolve_rpc_url(
    network_name: str,
    artifacts: List[Dict[str, Any]],
    fallback_rpc_url: Optional[str] = None,
) -> str:
    """
    Pick the RPC endpoint for one network, in order: managed provider URL,
    installer fallback, an `rpcUrl` embedded in the artifacts, local node.
    """
    cfg = current_app.config
    fallback_rpc_url = fallback_rpc_url or cfg.get("FALLBACK_RPC_URL")

    url = provider_rpc_url(network_name, cfg.get("ALCHEMY_API_KEY"))
    source = "provider"
    if not url and fallback_rpc_url:
        url, source = fallback_rpc_url, "fallback"
    if not url:
        url, source = artifact_rpc_url(artifacts), "artifact"
    if not url:
        url, source = cfg.get("DEFAULT_RPC_URL") or DEFAULT_RPC_URL, "default"

    logger.info("Using %s RPC URL for %s", source, network_name, extra={"network": network_name})
    return url
