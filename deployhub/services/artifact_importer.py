# deployhub/services/artifact_importer.py
"""
Turns one parsed deployment artifact into records:

    DeploymentArtifact -> Abi (+ Methods/EventDefinitions) -> SmartContract
    -> Devdoc / Userdoc / Bytecode / SourceCode
    -> DiamondFactory (+ Diamonds read from chain) or DiamondFacet
    -> EventListeners for the contract's events

Every write is keyed by a natural key, so importing the same artifact again
updates the rows in place.
"""
import logging
from typing import Any, Dict, Optional

from deployhub.services.abi_parser import parse_abi
from deployhub.services.chain_reader import default_chain_reader, normalize_address
from deployhub.services.record_service import get_or_create_record, get_records, save_record, upsert_record

logger = logging.getLogger(__name__)

DIAMOND_FACTORY_NAME = "DiamondFactory"
FACET_SUFFIX = "Facet"


def contract_type_for(contract_name: str) -> str:
    if contract_name == DIAMOND_FACTORY_NAME:
        return "DiamondFactory"
    if contract_name.endswith(FACET_SUFFIX):
        return "DiamondFacet"
    return "Standard"


def _upsert(collection, key_fields, key_values, attrs):
    record = upsert_record(collection, key_fields, key_values, attrs)
    if record is None:
        raise RuntimeError(f"Could not write {collection} record for {dict(zip(key_fields, key_values))}")
    return record


# ---------------------------
# Single steps
# ---------------------------

def import_artifact_record(artifact: Dict[str, Any], blockchain, deployment):
    attrs = {
        "blockchain": blockchain,
        "deployment": deployment,
        "artifact": artifact,
        "name": artifact["contractName"],
        "address": artifact["address"],
        "transaction_hash": artifact.get("transactionHash") or "",
        "abi": artifact.get("abi"),
        "args": artifact.get("args"),
        "receipt": artifact.get("receipt"),
        "solc_input_hash": artifact.get("solcInputHash"),
        "deployed_bytecode": artifact.get("deployedBytecode"),
        "libraries": artifact.get("libraries"),
        "storage_layout": artifact.get("storageLayout"),
        "contract_metadata": artifact.get("metadata"),
        "devdoc": artifact.get("devdoc"),
        "userdoc": artifact.get("userdoc"),
    }
    return _upsert(
        "DeploymentArtifact",
        ["address", "transaction_hash", "blockchain"],
        [attrs["address"], attrs["transaction_hash"], blockchain],
        attrs,
    )


def import_abi(blockchain, artifact_record):
    abi_name = artifact_record.name
    abi_json = artifact_record.abi or []
    abi = _upsert(
        "Abi",
        ["name", "network"],
        [abi_name, blockchain],
        {"name": abi_name, "data": abi_json, "network": blockchain},
    )
    parse_abi(abi, abi_json)
    return abi


def import_smart_contract(blockchain, artifact_record, abi):
    artifact = artifact_record.artifact
    name = artifact["contractName"]
    return _upsert(
        "SmartContract",
        ["address", "network"],
        [artifact["address"], blockchain],
        {
            "name": name,
            "code": name.upper(),
            "address": artifact["address"],
            "network": blockchain,
            "abi": abi,
            "contract_type": contract_type_for(name),
            "deployment_transaction": artifact.get("transactionHash"),
        },
    )


def import_doc(collection: str, blockchain, deployment, artifact_record, data):
    """Devdoc / Userdoc, one per artifact."""
    return _upsert(
        collection,
        ["artifact"],
        [artifact_record],
        {
            "artifact": artifact_record,
            "blockchain": blockchain,
            "deployment": deployment,
            "data": data,
        },
    )


def import_bytecode(blockchain, deployment, artifact_record, abi):
    artifact = artifact_record.artifact
    return _upsert(
        "Bytecode",
        ["address", "network"],
        [artifact["address"], blockchain],
        {
            "address": artifact["address"],
            "network": blockchain,
            "deployment": deployment,
            "abi": abi,
            "bytecode": artifact["deployedBytecode"],
            "contract_name": artifact["contractName"],
            "name": artifact.get("name") or artifact["contractName"],
        },
    )


def import_source_code(blockchain, artifact_record):
    artifact = artifact_record.artifact
    source = artifact.get("sourceCode") or {}
    return _upsert(
        "SourceCode",
        ["address", "network"],
        [artifact["address"], blockchain],
        {
            "address": artifact["address"],
            "name": artifact["contractName"],
            "network": blockchain,
            "file": source.get("file"),
            "content": source.get("content"),
            "keccak256": source.get("keccak256"),
            "license": source.get("license"),
        },
    )


def import_diamond_facet(blockchain, abi, smart_contract):
    name = smart_contract.name
    return _upsert(
        "DiamondFacet",
        ["address", "network"],
        [smart_contract.address, blockchain],
        {
            "name": name,
            "code": name.upper(),
            "address": smart_contract.address,
            "network": blockchain,
            "abi": abi,
            "smart_contract": smart_contract,
        },
    )


def import_diamond_factory(blockchain, deployment, abi, smart_contract, rpc_url, chain_reader=None):
    """
    Store the factory, then ask it for its diamonds. A failed symbol listing
    skips discovery for the factory; a failed lookup skips only that symbol.
    """
    reader = chain_reader or default_chain_reader
    address = smart_contract.address
    name = smart_contract.name

    factory = _upsert(
        "DiamondFactory",
        ["address", "network"],
        [address, blockchain],
        {
            "name": name,
            "code": name.upper(),
            "address": address,
            "network_id": blockchain.network_id,
            "network": blockchain,
            "abi": abi,
            "smart_contract": smart_contract,
            "deployment": deployment,
        },
    )

    log_extra = {"network": blockchain.name, "artifact": name}
    try:
        symbols = reader.get_contract_symbols(address=address, abi=abi.data, rpc_url=rpc_url).get("symbols") or []
    except Exception as e:
        logger.warning(
            "Could not get symbols from DiamondFactory at %s, skipping diamond discovery: %s",
            address, e, extra=log_extra,
        )
        return factory

    for symbol in symbols:
        try:
            result = reader.get_diamond_address(address=address, abi=abi.data, rpc_url=rpc_url, symbol=symbol)
        except Exception as e:
            logger.warning(
                "Could not get diamond address for symbol %s from DiamondFactory at %s: %s",
                symbol, address, e, extra=log_extra,
            )
            continue

        try:
            diamond_address = normalize_address((result or {}).get("diamond_address"))
        except ValueError as e:
            logger.warning(
                "No usable diamond address for symbol %s from DiamondFactory at %s: %s", symbol, address, e,
                extra=log_extra,
            )
            continue

        _upsert(
            "Diamond",
            ["address", "network"],
            [diamond_address, blockchain],
            {
                "address": diamond_address,
                "symbol": symbol,
                "network": blockchain,
                "diamond_factory": factory,
            },
        )

    return factory


def import_event_listener(blockchain, project, event_definition, contract_address: str):
    # `enabled` is only set on creation so a listener switched off stays off
    listener = get_or_create_record(
        "EventListener",
        ["name", "network_id", "project"],
        [event_definition.name, blockchain.network_id, project],
        {
            "name": event_definition.name,
            "network": blockchain,
            "network_id": blockchain.network_id,
            "definition": event_definition,
            "address": contract_address,
            "enabled": True,
            "project": project,
        },
    )
    if listener is None:
        raise RuntimeError(f"Could not write EventListener {event_definition.name}")
    return save_record(listener, {"address": contract_address, "definition": event_definition})


# ---------------------------
# Whole artifact
# ---------------------------

def import_deployment_artifact(
    record: Dict[str, Any],
    blockchain,
    project,
    deployment,
    rpc_url: str,
    chain_reader=None,
) -> Optional[Any]:
    """
    Import one artifact record as produced by `artifact_reader`.
    Raises on storage errors; the caller isolates failures per artifact.
    """
    artifact = record["artifact"]
    name = artifact["contractName"]
    log_extra = {"network": blockchain.name, "artifact": name}
    artifact["address"] = normalize_address(artifact["address"])

    artifact_record = import_artifact_record(artifact, blockchain, deployment)
    abi = import_abi(blockchain, artifact_record)
    smart_contract = import_smart_contract(blockchain, artifact_record, abi)

    if artifact.get("devdoc"):
        import_doc("Devdoc", blockchain, deployment, artifact_record, artifact["devdoc"])
    if artifact.get("userdoc"):
        import_doc("Userdoc", blockchain, deployment, artifact_record, artifact["userdoc"])
    if artifact.get("deployedBytecode"):
        import_bytecode(blockchain, deployment, artifact_record, abi)
    if artifact.get("sourceCode"):
        import_source_code(blockchain, artifact_record)

    kind = contract_type_for(name)
    if kind == "DiamondFactory":
        import_diamond_factory(blockchain, deployment, abi, smart_contract, rpc_url, chain_reader=chain_reader)
    elif kind == "DiamondFacet":
        import_diamond_facet(blockchain, abi, smart_contract)

    event_definitions = get_records("EventDefinition", ["abi"], [abi])
    for event_definition in event_definitions:
        import_event_listener(blockchain, project, event_definition, artifact["address"])

    logger.info(
        "Imported %s at %s (%d event listeners)", name, artifact["address"], len(event_definitions),
        extra=log_extra,
    )
    return artifact_record
