import logging

from flask import Blueprint, current_app, abort

from models import storage
from utils.metrics import hits

logger = logging.getLogger(__name__)

bp = Blueprint("admin", __name__)

METRICS_TEMPLATE = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {count} times!</p>
  </body>
</html>"""


@bp.get("/metrics")
def metrics():
    """
    File server hit count
    ---
    tags:
      - Admin
    produces:
      - text/html
    responses:
      200:
        description: HTML page with the visit count
    """
    body = METRICS_TEMPLATE.format(count=hits.value)
    return body, 200, {"Content-Type": "text/html; charset=utf-8"}


@bp.post("/reset")
def reset():
    """
    Delete every user and zero the hit counter. Dev platform only.
    ---
    tags:
      - Admin
    responses:
      200: { description: Reset }
      403: { description: Not a dev platform }
    """
    if current_app.config.get("PLATFORM") != "dev":
        abort(403, description="Reset is only allowed in dev")

    deleted = storage.delete_all_users()
    hits.reset()
    logger.warning("Admin reset: deleted %d users", deleted)
    return "", 200
