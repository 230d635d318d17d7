# deployhub/models/types.py
from sqlalchemy import JSON
from sqlalchemy.types import TypeDecorator


class JSONBCompat(TypeDecorator):
    """
    JSONB on PostgreSQL, plain JSON everywhere else.

    Artifact blobs (ABI arrays, receipts, storage layouts, natspec docs) are
    stored through this type so the same models run against ``sqlite://``
    in tests and Postgres in production.
    """
    impl = JSON
    cache_ok = True

    def __init__(self, **jsonb_kwargs):
        super().__init__()
        self._jsonb_kwargs = jsonb_kwargs

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import JSONB
            return dialect.type_descriptor(JSONB(**self._jsonb_kwargs))
        return dialect.type_descriptor(JSON())
