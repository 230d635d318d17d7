# deployhub/models/__init__.py
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

def init_app(app):
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    db.init_app(app)
    migrate.init_app(app, db)

# Register the models on the metadata
from .organization import Organization, Project, Deployment  # noqa
from .blockchain import Blockchain  # noqa
from .abi import Abi, Method, EventDefinition  # noqa
from .artifact import DeploymentArtifact, Devdoc, Userdoc, SourceCode, Bytecode  # noqa
from .contract import SmartContract, DiamondFactory, Diamond, DiamondFacet  # noqa
from .event_listener import EventListener  # noqa
from .job import ImportJob  # noqa

__all__ = [
    "db", "migrate",
    "Organization", "Project", "Deployment", "Blockchain",
    "Abi", "Method", "EventDefinition",
    "DeploymentArtifact", "Devdoc", "Userdoc", "SourceCode", "Bytecode",
    "SmartContract", "DiamondFactory", "Diamond", "DiamondFacet",
    "EventListener", "ImportJob",
]
