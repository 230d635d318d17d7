from flask import Blueprint, jsonify
from sqlalchemy import text

from deployhub.models import db

bp = Blueprint("health", __name__)

@bp.get("/healthz")
def healthz():
    """
    Healthcheck (process + database)
    ---
    tags:
      - Health
    responses:
      200:
        description: OK
      503:
        description: Database unreachable
    """
    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        return jsonify({"ok": False, "database": "down", "error": str(e)}), 503
    return jsonify({"ok": True, "database": "up"}), 200
