# deployhub/services/schema_service.py
import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy import Column, DateTime, BigInteger, Integer, MetaData, String, Table, UniqueConstraint

from deployhub.models import db, ImportJob
from deployhub.models.types import JSONBCompat
from deployhub.services.record_service import (
    COLLECTIONS,
    create_schemas,
    delete_all_records,
    get_all_schemas,
    get_records,
)

logger = logging.getLogger(__name__)

# Parents before children so foreign keys resolve on creation.
MANAGED_COLLECTIONS: List[str] = list(COLLECTIONS)

# Owned by the platform; the importer only reads them.
EXTERNAL_COLLECTIONS = ("Organization",)

EVENT_COLLECTION_SUFFIX = "__e"

# Event log tables live outside the declarative models: their names come from data.
event_metadata = MetaData()
_event_tables: Dict[str, Table] = {}


def event_collection_name(listener_name: str) -> str:
    return f"{listener_name}{EVENT_COLLECTION_SUFFIX}"


def get_event_table(listener_name: str) -> Table:
    """Table handle for one listener's event log, built on first use."""
    name = event_collection_name(listener_name)
    table = _event_tables.get(name)
    if table is None:
        table = Table(
            name,
            event_metadata,
            Column("id", Integer, primary_key=True),
            Column("address", String(42), nullable=False),
            Column("block_number", BigInteger, nullable=True),
            Column("transaction_hash", String(66), nullable=False),
            Column("log_index", Integer, nullable=False),
            Column("args", JSONBCompat(), nullable=True),
            Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
            UniqueConstraint("transaction_hash", "log_index", name=f"uq_{name}_tx_log"),
        )
        _event_tables[name] = table
    return table


def ensure_event_collections() -> Dict[str, List[str]]:
    """One `<ListenerName>__e` table per registered EventListener."""
    result = {"created": [], "existing": [], "failed": []}
    existing = set(get_all_schemas())

    names = sorted({listener.name for listener in get_records("EventListener")})
    for listener_name in names:
        table_name = event_collection_name(listener_name)
        if table_name in existing:
            result["existing"].append(table_name)
            continue
        try:
            get_event_table(listener_name).create(bind=db.engine, checkfirst=True)
            result["created"].append(table_name)
            logger.info("Created event collection %s", table_name)
        except Exception as e:
            logger.error("Error creating event collection %s: %s", table_name, e)
            result["failed"].append(table_name)
    return result


def create_schema() -> Dict[str, List[str]]:
    """
    Make sure every managed collection exists, then the per-listener event
    collections. Safe to run repeatedly.
    """
    result = create_schemas(MANAGED_COLLECTIONS)

    try:
        ImportJob.__table__.create(bind=db.engine, checkfirst=True)
    except Exception as e:
        logger.error("Error creating import job table: %s", e)
        result["failed"].append("ImportJob")

    events = ensure_event_collections()
    for key in ("created", "existing", "failed"):
        result[key].extend(events[key])

    logger.info(
        "Schema check done: %d created, %d existing, %d failed",
        len(result["created"]), len(result["existing"]), len(result["failed"]),
    )
    return result


def delete_all_collections() -> Dict[str, Dict[str, int]]:
    """
    Destructive: remove every record this importer writes. Organizations
    belong to the platform and are only read here, so they are kept.
    """
    deleted = {}
    existing = set(get_all_schemas())
    # children first
    for name in reversed(MANAGED_COLLECTIONS):
        if name in EXTERNAL_COLLECTIONS:
            continue
        if COLLECTIONS[name].__tablename__ not in existing:
            continue
        deleted[name] = delete_all_records(name)
    logger.warning("Deleted all managed collections: %s", deleted)
    return {"deleted": deleted}
