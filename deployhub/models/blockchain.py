# deployhub/models/blockchain.py
from deployhub.models import db
from deployhub.models.base import RecordMixin


class Blockchain(RecordMixin, db.Model):
    __tablename__ = "blockchains"

    id = db.Column(db.Integer, primary_key=True)
    network_id = db.Column(db.BigInteger, nullable=False, unique=True)  # chain id
    name = db.Column(db.String(64), nullable=False)
    rpc_url = db.Column(db.String(512), nullable=True)
    explorer_url = db.Column(db.String(512), nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
