# deployhub/services/record_service.py
"""
Record store facade used by the import pipeline.

Collections are addressed by name ("Abi", "SmartContract", ...) and queried by
natural key: parallel lists of field names and values. Pointer-valued key
fields (``network``, ``project``, ``artifact``...) take model instances.

Natural keys are backed by unique indexes, so ``get_or_create_record`` is safe
against a concurrent writer: losing the insert race rolls back and re-reads
the row the other writer committed.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError

from deployhub.models import (
    db,
    Organization, Project, Deployment, Blockchain,
    Abi, Method, EventDefinition,
    DeploymentArtifact, Devdoc, Userdoc, SourceCode, Bytecode,
    SmartContract, DiamondFactory, Diamond, DiamondFacet,
    EventListener,
)

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "Organization": Organization,
    "Project": Project,
    "Deployment": Deployment,
    "Blockchain": Blockchain,
    "DeploymentArtifact": DeploymentArtifact,
    "Abi": Abi,
    "Method": Method,
    "EventDefinition": EventDefinition,
    "SmartContract": SmartContract,
    "DiamondFactory": DiamondFactory,
    "Diamond": Diamond,
    "DiamondFacet": DiamondFacet,
    "SourceCode": SourceCode,
    "Bytecode": Bytecode,
    "Devdoc": Devdoc,
    "Userdoc": Userdoc,
    "EventListener": EventListener,
}


def _model_for(collection: str):
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection '{collection}'") from None


def _query_by_key(model, key_fields: Sequence[str], key_values: Sequence[Any]):
    if len(key_fields) != len(key_values):
        raise ValueError("key_fields and key_values must have the same length")
    query = model.query
    for field, value in zip(key_fields, key_values):
        query = query.filter(getattr(model, field) == value)
    return query


def get_or_create_record(
    collection: str,
    key_fields: Sequence[str],
    key_values: Sequence[Any],
    attrs: Dict[str, Any],
):
    """
    Return the record of `collection` matching the natural key, creating it
    from `attrs` when missing. An existing record is returned untouched;
    use `save_record` to refresh it.

    Returns None when the record can neither be found nor written.
    """
    model = _model_for(collection)

    existing = _query_by_key(model, key_fields, key_values).first()
    if existing is not None:
        return existing

    record = model(**attrs)
    db.session.add(record)
    try:
        db.session.commit()
        logger.debug("Created %s record id=%s", collection, record.id)
        return record
    except IntegrityError:
        # another writer inserted the same natural key first
        db.session.rollback()
        winner = _query_by_key(model, key_fields, key_values).first()
        if winner is None:
            logger.error("Could not create %s record for key %s", collection, dict(zip(key_fields, key_values)))
        return winner


def save_record(record, attrs: Optional[Dict[str, Any]] = None):
    """Apply `attrs` to an existing record and persist it."""
    if attrs:
        record.update(**attrs)
    return record.save()


def upsert_record(
    collection: str,
    key_fields: Sequence[str],
    key_values: Sequence[Any],
    attrs: Dict[str, Any],
):
    """get_or_create_record, then write `attrs` onto the row. None when it cannot be written."""
    record = get_or_create_record(collection, key_fields, key_values, attrs)
    if record is None:
        return None
    return save_record(record, attrs)


def get_records(
    collection: str,
    key_fields: Optional[Sequence[str]] = None,
    key_values: Optional[Sequence[Any]] = None,
) -> List[Any]:
    model = _model_for(collection)
    if key_fields and key_values is not None:
        return _query_by_key(model, key_fields, key_values).all()
    return model.query.all()


def get_all_records(collection: str) -> List[Any]:
    return get_records(collection)


def get_record_by_id(collection: str, record_id):
    model = _model_for(collection)
    try:
        return db.session.get(model, int(record_id))
    except (TypeError, ValueError):
        logger.warning("Invalid %s id: %r", collection, record_id)
        return None


def delete_all_records(collection: str) -> int:
    """Delete every row of `collection`; returns the number removed."""
    model = _model_for(collection)
    count = model.query.delete()
    db.session.commit()
    logger.info("Deleted all %s records (%d)", collection, count)
    return count


# ---------------------------
# Schemas (tables)
# ---------------------------

def get_all_schemas() -> List[str]:
    """Names of the tables that currently exist in the database."""
    return sa_inspect(db.engine).get_table_names()


def create_schemas(schema_names: Sequence[str]) -> Dict[str, List[str]]:
    """
    Create the table behind each collection name, skipping existing ones.
    One failing table does not stop the others.
    """
    result = {"created": [], "existing": [], "failed": []}
    existing = set(get_all_schemas())

    for name in schema_names:
        try:
            table = _model_for(name).__table__
            if table.name in existing:
                result["existing"].append(name)
                continue
            table.create(bind=db.engine, checkfirst=True)
            existing.add(table.name)
            result["created"].append(name)
            logger.info("Created schema %s (%s)", name, table.name)
        except Exception as e:
            logger.error("Error creating schema %s: %s", name, e)
            result["failed"].append(name)

    return result
