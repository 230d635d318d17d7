# deployhub/models/organization.py
from deployhub.models import db
from deployhub.models.base import RecordMixin


class Organization(RecordMixin, db.Model):
    # Tenants are managed by the admin platform; the importer only reads them.
    __tablename__ = "organizations"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    projects = db.relationship("Project", back_populates="organization")


class Project(RecordMixin, db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    organization_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False)

    organization = db.relationship("Organization", back_populates="projects")
    deployments = db.relationship("Deployment", back_populates="project")

    __table_args__ = (
        db.UniqueConstraint("name", "organization_id", name="uq_projects_name_organization"),
    )


class Deployment(RecordMixin, db.Model):
    __tablename__ = "deployments"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"), nullable=False)

    project = db.relationship("Project", back_populates="deployments")

    __table_args__ = (
        db.UniqueConstraint("name", "project_id", name="uq_deployments_name_project"),
    )
