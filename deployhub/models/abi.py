# deployhub/models/abi.py
from deployhub.models import db
from deployhub.models.base import RecordMixin
from deployhub.models.types import JSONBCompat


class Abi(RecordMixin, db.Model):
    __tablename__ = "abis"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)                 # contract name
    data = db.Column(JSONBCompat(), nullable=False)                  # ABI array as imported
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)

    network = db.relationship("Blockchain")
    methods = db.relationship("Method", back_populates="abi")
    event_definitions = db.relationship("EventDefinition", back_populates="abi")

    __table_args__ = (
        db.UniqueConstraint("name", "blockchain_id", name="uq_abis_name_network"),
    )


class Method(RecordMixin, db.Model):
    __tablename__ = "methods"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)                 # "<Abi>.<function>"
    code = db.Column(db.String(255), nullable=False)
    contract_name = db.Column(db.String(255), nullable=True)
    type = db.Column(db.String(32), nullable=False, default="function")
    inputs = db.Column(JSONBCompat(), nullable=True)
    outputs = db.Column(JSONBCompat(), nullable=True)
    state_mutability = db.Column(db.String(32), nullable=True)
    abi_id = db.Column(db.Integer, db.ForeignKey("abis.id"), nullable=False)

    abi = db.relationship("Abi", back_populates="methods")

    __table_args__ = (
        db.UniqueConstraint("abi_id", "name", name="uq_methods_abi_name"),
    )


class EventDefinition(RecordMixin, db.Model):
    __tablename__ = "event_definitions"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)                 # "<Abi>.<event>"
    code = db.Column(db.String(255), nullable=False)
    contract_name = db.Column(db.String(255), nullable=True)
    type = db.Column(db.String(32), nullable=False, default="event")
    inputs = db.Column(JSONBCompat(), nullable=True)
    outputs = db.Column(JSONBCompat(), nullable=True)
    data = db.Column(JSONBCompat(), nullable=True)                   # raw ABI fragment
    abi_id = db.Column(db.Integer, db.ForeignKey("abis.id"), nullable=False)

    abi = db.relationship("Abi", back_populates="event_definitions")

    __table_args__ = (
        db.UniqueConstraint("abi_id", "name", name="uq_event_definitions_abi_name"),
    )
