# deployhub/models/artifact.py
from sqlalchemy.orm import declared_attr

from deployhub.models import db
from deployhub.models.base import RecordMixin
from deployhub.models.types import JSONBCompat


class DeploymentArtifact(RecordMixin, db.Model):
    """Raw hardhat-deploy artifact as read from disk, plus its top-level fields."""
    __tablename__ = "deployment_artifacts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(42), nullable=False)
    transaction_hash = db.Column(db.String(66), nullable=False, default="")
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    deployment_id = db.Column(db.Integer, db.ForeignKey("deployments.id"), nullable=True)

    artifact = db.Column(JSONBCompat(), nullable=False)   # the whole JSON file
    abi = db.Column(JSONBCompat(), nullable=True)
    args = db.Column(JSONBCompat(), nullable=True)
    receipt = db.Column(JSONBCompat(), nullable=True)
    solc_input_hash = db.Column(db.String(66), nullable=True)
    deployed_bytecode = db.Column(db.Text, nullable=True)
    libraries = db.Column(JSONBCompat(), nullable=True)
    storage_layout = db.Column(JSONBCompat(), nullable=True)
    # `metadata` is reserved by the declarative base
    contract_metadata = db.Column("metadata", JSONBCompat(), nullable=True)
    devdoc = db.Column(JSONBCompat(), nullable=True)
    userdoc = db.Column(JSONBCompat(), nullable=True)

    blockchain = db.relationship("Blockchain")
    deployment = db.relationship("Deployment")

    __table_args__ = (
        db.UniqueConstraint(
            "address", "transaction_hash", "blockchain_id",
            name="uq_deployment_artifacts_address_tx_blockchain",
        ),
    )


class _ArtifactDocMixin:
    id = db.Column(db.Integer, primary_key=True)
    data = db.Column(JSONBCompat(), nullable=True)

    @declared_attr
    def artifact_id(cls):
        return db.Column(db.Integer, db.ForeignKey("deployment_artifacts.id"), nullable=False, unique=True)

    @declared_attr
    def blockchain_id(cls):
        return db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)

    @declared_attr
    def deployment_id(cls):
        return db.Column(db.Integer, db.ForeignKey("deployments.id"), nullable=True)

    @declared_attr
    def artifact(cls):
        return db.relationship("DeploymentArtifact")

    @declared_attr
    def blockchain(cls):
        return db.relationship("Blockchain")

    @declared_attr
    def deployment(cls):
        return db.relationship("Deployment")


class Devdoc(_ArtifactDocMixin, RecordMixin, db.Model):
    __tablename__ = "devdocs"


class Userdoc(_ArtifactDocMixin, RecordMixin, db.Model):
    __tablename__ = "userdocs"


class SourceCode(RecordMixin, db.Model):
    __tablename__ = "source_codes"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=True)
    address = db.Column(db.String(42), nullable=False)
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    file = db.Column(db.String(512), nullable=True)
    content = db.Column(db.Text, nullable=True)
    keccak256 = db.Column(db.String(66), nullable=True)
    license = db.Column(db.String(64), nullable=True)

    network = db.relationship("Blockchain")

    __table_args__ = (
        db.UniqueConstraint("address", "blockchain_id", name="uq_source_codes_address_network"),
    )


class Bytecode(RecordMixin, db.Model):
    __tablename__ = "bytecodes"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=True)
    contract_name = db.Column(db.String(255), nullable=True)
    address = db.Column(db.String(42), nullable=False)
    bytecode = db.Column(db.Text, nullable=False)
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    deployment_id = db.Column(db.Integer, db.ForeignKey("deployments.id"), nullable=True)
    abi_id = db.Column(db.Integer, db.ForeignKey("abis.id"), nullable=True)

    network = db.relationship("Blockchain")
    deployment = db.relationship("Deployment")
    abi = db.relationship("Abi")

    __table_args__ = (
        db.UniqueConstraint("address", "blockchain_id", name="uq_bytecodes_address_network"),
    )
