from __future__ import annotations

import logging
import uuid
from typing import Optional

from flask import Blueprint, request, jsonify, abort, g

from models import storage
from models.chirp import Chirp
from models.user import User
from models.schemas.chirp import ChirpCreateSchema, ChirpOutSchema
from utils.decorators import jwt_required
from utils.moderation import clean

logger = logging.getLogger(__name__)

bp = Blueprint("chirps", __name__)

# Schemas
chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()
chirps_out_schema = ChirpOutSchema(many=True)

SORT_DIRECTIONS = ("asc", "desc")


def parse_sort() -> str:
    sort = (request.args.get("sort") or "").lower()
    return sort if sort in SORT_DIRECTIONS else "asc"


def parse_author_id() -> Optional[str]:
    """author_id filter; a value that is not a UUID is ignored."""
    raw = request.args.get("author_id")
    if not raw:
        return None
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        logger.debug("Ignoring malformed author_id filter %r", raw)
        return None


@bp.get("/chirps")
def list_chirps():
    """
    List chirps ordered by creation time
    ---
    tags:
      - Chirps
    parameters:
      - in: query
        name: author_id
        type: string
        description: "Only chirps by this user"
      - in: query
        name: sort
        type: string
        enum: [asc, desc]
        default: asc
    responses:
      200:
        description: Array of chirps
    """
    query = storage.get_session().query(Chirp)
    author_id = parse_author_id()
    if author_id:
        query = query.filter(Chirp.user_id == author_id)

    if parse_sort() == "desc":
        query = query.order_by(Chirp.created_at.desc(), Chirp.id.desc())
    else:
        query = query.order_by(Chirp.created_at.asc(), Chirp.id.asc())

    return jsonify(chirps_out_schema.dump(query.all())), 200


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Create a chirp for the authenticated user
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            body: { type: string, maxLength: 140 }
    responses:
      201:
        description: Created
      400:
        description: Body empty or too long
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = chirp_create_schema.load(payload)

    if not storage.get(User, g.current_user_id):
        abort(401, description="Unauthorized")

    chirp = Chirp(body=clean(data["body"]), user_id=g.current_user_id)
    storage.new(chirp)
    storage.save()

    return jsonify(chirp_out_schema.dump(chirp)), 201


@bp.get("/chirps/<uuid:chirp_id>")
def get_chirp(chirp_id: uuid.UUID):
    """
    Get a single chirp by id
    ---
    tags:
      - Chirps
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      200:
        description: Chirp found
      404:
        description: Not found
    """
    chirp = storage.get(Chirp, chirp_id)
    if not chirp:
        abort(404, description="Chirp not found")
    return jsonify(chirp_out_schema.dump(chirp)), 200


@bp.delete("/chirps/<uuid:chirp_id>")
@jwt_required()
def delete_chirp(chirp_id: uuid.UUID):
    """
    Delete one of your own chirps
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      204:
        description: Deleted
      401:
        description: Unauthorized
      404:
        description: Not found, or owned by someone else
    """
    chirp = storage.get(Chirp, chirp_id)
    # someone else's chirp looks exactly like a missing one
    if not chirp or chirp.user_id != g.current_user_id:
        abort(404, description="Chirp not found")

    chirp.delete()
    storage.save()
    return ("", 204)
