# deployhub/models/contract.py
from deployhub.models import db
from deployhub.models.base import RecordMixin


class SmartContract(RecordMixin, db.Model):
    __tablename__ = "smart_contracts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    code = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(42), nullable=False)
    contract_type = db.Column(db.String(32), nullable=False, default="Standard")  # Standard|DiamondFactory|DiamondFacet
    deployment_transaction = db.Column(db.String(66), nullable=True)
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    abi_id = db.Column(db.Integer, db.ForeignKey("abis.id"), nullable=True)

    network = db.relationship("Blockchain")
    abi = db.relationship("Abi")

    __table_args__ = (
        db.UniqueConstraint("address", "blockchain_id", name="uq_smart_contracts_address_network"),
    )


class DiamondFactory(RecordMixin, db.Model):
    __tablename__ = "diamond_factories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    code = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(42), nullable=False)
    network_id = db.Column(db.BigInteger, nullable=False)            # chain id, denormalized
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    abi_id = db.Column(db.Integer, db.ForeignKey("abis.id"), nullable=True)
    smart_contract_id = db.Column(db.Integer, db.ForeignKey("smart_contracts.id"), nullable=True)
    deployment_id = db.Column(db.Integer, db.ForeignKey("deployments.id"), nullable=True)

    network = db.relationship("Blockchain")
    abi = db.relationship("Abi")
    smart_contract = db.relationship("SmartContract")
    deployment = db.relationship("Deployment")
    diamonds = db.relationship("Diamond", back_populates="diamond_factory")

    __table_args__ = (
        db.UniqueConstraint("address", "blockchain_id", name="uq_diamond_factories_address_network"),
    )


class Diamond(RecordMixin, db.Model):
    __tablename__ = "diamonds"

    id = db.Column(db.Integer, primary_key=True)
    address = db.Column(db.String(42), nullable=False)
    symbol = db.Column(db.String(255), nullable=False)
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    diamond_factory_id = db.Column(db.Integer, db.ForeignKey("diamond_factories.id"), nullable=False)

    network = db.relationship("Blockchain")
    diamond_factory = db.relationship("DiamondFactory", back_populates="diamonds")

    __table_args__ = (
        db.UniqueConstraint("address", "blockchain_id", name="uq_diamonds_address_network"),
    )


class DiamondFacet(RecordMixin, db.Model):
    __tablename__ = "diamond_facets"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    code = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(42), nullable=False)
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    abi_id = db.Column(db.Integer, db.ForeignKey("abis.id"), nullable=True)
    smart_contract_id = db.Column(db.Integer, db.ForeignKey("smart_contracts.id"), nullable=True)

    network = db.relationship("Blockchain")
    abi = db.relationship("Abi")
    smart_contract = db.relationship("SmartContract")

    __table_args__ = (
        db.UniqueConstraint("address", "blockchain_id", name="uq_diamond_facets_address_network"),
    )
