from datetime import datetime
from deployhub.models import db

class ImportJob(db.Model):
    __tablename__ = "import_jobs"

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.String(50), index=True, unique=True, nullable=True)
    kind = db.Column(db.String(32), nullable=False, default="import")   # import|schema
    status = db.Column(db.String(20), default="queued", index=True)     # queued|running|done|error
    params = db.Column(db.JSON, nullable=True)
    result = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
