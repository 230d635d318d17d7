# deployhub/models/event_listener.py
from deployhub.models import db
from deployhub.models.base import RecordMixin


class EventListener(RecordMixin, db.Model):
    __tablename__ = "event_listeners"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)                 # same as the EventDefinition name
    network_id = db.Column(db.BigInteger, nullable=False)            # chain id
    address = db.Column(db.String(42), nullable=False)
    enabled = db.Column(db.Boolean, nullable=False, default=True)
    blockchain_id = db.Column(db.Integer, db.ForeignKey("blockchains.id"), nullable=False)
    definition_id = db.Column(db.Integer, db.ForeignKey("event_definitions.id"), nullable=False)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"), nullable=False)

    network = db.relationship("Blockchain")
    definition = db.relationship("EventDefinition")
    project = db.relationship("Project")

    __table_args__ = (
        db.UniqueConstraint("name", "network_id", "project_id", name="uq_event_listeners_name_network_project"),
    )
