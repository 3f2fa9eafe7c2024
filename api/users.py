"""
Accounts blueprint:
- POST /users  register
- PUT  /users  change own email and password (access token)
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, abort

from models import storage
from models.user import User
from models.schemas.user import UserCredentialsSchema, UserOutSchema
from utils.decorators import jwt_required
from utils.security import hash_password

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

credentials_schema = UserCredentialsSchema()
user_out_schema = UserOutSchema()


def _email_taken(email: str, exclude_id: str | None = None) -> bool:
    query = storage.get_session().query(User).filter(User.email == email)
    if exclude_id:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


@bp.post("/users")
def register():
    """
    Register a new account.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = credentials_schema.load(payload)

    if _email_taken(data["email"]):
        abort(409, description="Email already registered")

    user = User(
        email=data["email"],
        hashed_password=hash_password(data["password"]),
        is_chirpy_red=False,
    )
    storage.new(user)
    storage.save()
    logger.info("Registered user %s", user.id)

    return jsonify(user_out_schema.dump(user)), 201


@bp.put("/users")
@jwt_required()
def update_user():
    """
    Update the caller's email and password.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      409: { description: Email already registered }
    """
    payload = request.get_json(silent=True) or {}
    data = credentials_schema.load(payload)

    user = storage.get(User, g.current_user_id)
    if not user:
        abort(401, description="Unauthorized")
    if _email_taken(data["email"], exclude_id=user.id):
        abort(409, description="Email already registered")

    user.email = data["email"]
    user.hashed_password = hash_password(data["password"])
    user.save()

    return jsonify(user_out_schema.dump(user)), 200
