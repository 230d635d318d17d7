# deployhub/services/abi_parser.py
import logging
from typing import Any, Dict, List

from deployhub.services.record_service import upsert_record

logger = logging.getLogger(__name__)


def is_facet_event(abi_name: str, item: Dict[str, Any]) -> bool:
    # Facet events are not told apart from regular events yet; every event
    # goes through the EventDefinition path.
    return False


def _import_method(abi_record, item: Dict[str, Any]):
    abi_name = abi_record.name
    code = f"{abi_name}.{item.get('name')}"
    return upsert_record(
        "Method",
        ["abi", "name"],
        [abi_record, code],
        {
            "name": code,
            "code": code,
            "contract_name": abi_name,
            "type": item.get("type", "function"),
            "abi": abi_record,
            "inputs": item.get("inputs") or [],
            "outputs": item.get("outputs") or [],
            "state_mutability": item.get("stateMutability"),
        },
    )


def _import_event_definition(abi_record, item: Dict[str, Any]):
    abi_name = abi_record.name
    code = f"{abi_name}.{item.get('name')}"
    return upsert_record(
        "EventDefinition",
        ["abi", "name"],
        [abi_record, code],
        {
            "name": code,
            "code": code,
            "contract_name": abi_name,
            "type": item.get("type", "event"),
            "abi": abi_record,
            "inputs": item.get("inputs") or [],
            "outputs": item.get("outputs") or [],
            "data": item,
        },
    )


def parse_abi(abi_record, abi_json: List[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """
    Split an ABI array into Method and EventDefinition records owned by
    `abi_record`. Existing records are refreshed from the ABI entry.
    Constructors, errors, fallback and receive entries are ignored.

    Returns {"methods": [...], "event_definitions": [...], "facet_events": [...]};
    facet events are collected but not stored.
    """
    parsed = {"methods": [], "event_definitions": [], "facet_events": []}
    if abi_record is None or not isinstance(abi_json, list):
        logger.warning("parse_abi: invalid ABI record or ABI data")
        return parsed

    seen = set()
    for item in abi_json:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        kind = item.get("type")
        # overloads share a record name; the first entry wins
        if (kind, item["name"]) in seen:
            continue
        seen.add((kind, item["name"]))
        if kind == "function":
            method = _import_method(abi_record, item)
            if method is not None:
                parsed["methods"].append(method)
        elif kind == "event":
            if is_facet_event(abi_record.name, item):
                parsed["facet_events"].append(item)
                continue
            event_def = _import_event_definition(abi_record, item)
            if event_def is not None:
                parsed["event_definitions"].append(event_def)

    logger.debug(
        "Parsed ABI %s: %d methods, %d events",
        abi_record.name, len(parsed["methods"]), len(parsed["event_definitions"]),
    )
    return parsed
