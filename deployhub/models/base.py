# deployhub/models/base.py
from datetime import datetime

from sqlalchemy import inspect as sa_inspect

from deployhub.models import db


class RecordMixin:
    """
    Record-style accessors shared by every collection model.

    The import pipeline talks to rows through ``get``/``set``/``save`` rather
    than through attribute access so the record store stays swappable.
    """

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def get(self, field, default=None):
        return getattr(self, field, default)

    def set(self, field, value):
        if not hasattr(type(self), field):
            raise AttributeError(f"{type(self).__name__} has no field '{field}'")
        setattr(self, field, value)
        return self

    def update(self, **attrs):
        for field, value in attrs.items():
            self.set(field, value)
        return self

    def save(self):
        db.session.add(self)
        db.session.commit()
        return self

    def destroy(self):
        db.session.delete(self)
        db.session.commit()

    def to_dict(self):
        data = {}
        for attr in sa_inspect(type(self)).column_attrs:
            value = getattr(self, attr.key)
            if isinstance(value, datetime):
                value = value.replace(microsecond=0).isoformat() + "Z"
            data[attr.key] = value
        return data
