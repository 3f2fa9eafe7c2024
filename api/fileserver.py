"""Static front page under /app/. Every request here counts as a visit."""
from flask import Blueprint, current_app, send_from_directory

from utils.metrics import hits

bp = Blueprint("fileserver", __name__)


@bp.before_request
def count_hit():
    hits.increment()


@bp.get("/", defaults={"path": "index.html"})
@bp.get("/<path:path>")
def serve(path: str):
    return send_from_directory(current_app.config["STATIC_ROOT"], path)
