"""
Authentication blueprint:
- POST /login    email + password -> access token and refresh token
- POST /refresh  refresh token (Bearer) -> new access token
- POST /revoke   refresh token (Bearer) -> revoked

Access tokens are HS256 JWTs that live for an hour. Refresh tokens are
opaque 64-char hex strings stored in the refresh_tokens table; they live
60 days and are never rotated, only revoked.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from models.schemas.user import UserCredentialsSchema, LoginOutSchema
from utils import sessions
from utils.decorators import extract_bearer
from utils.exceptions import MissingCredential, SessionInvalid

bp = Blueprint("auth", __name__)

credentials_schema = UserCredentialsSchema()
login_out_schema = LoginOutSchema()


def _refresh_token_from_header() -> str:
    try:
        return extract_bearer(request.headers)
    except MissingCredential as exc:
        raise SessionInvalid("Missing refresh token") from exc


@bp.post("/login")
def login():
    """
    Login: returns the account plus access and refresh tokens
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = credentials_schema.load(payload)

    cfg = current_app.config
    user, access_token, refresh_token = sessions.login(
        data["email"],
        data["password"],
        cfg["JWT_SECRET"],
        access_ttl=cfg["ACCESS_TOKEN_EXPIRES"],
        refresh_ttl=cfg["REFRESH_TOKEN_EXPIRES"],
        issuer=cfg["JWT_ISSUER"],
        algorithm=cfg["JWT_ALGORITHM"],
    )

    body = login_out_schema.dump(
        {
            "id": user.id,
            "email": user.email,
            "is_chirpy_red": user.is_chirpy_red,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
            "token": access_token,
            "refresh_token": refresh_token,
        }
    )
    return jsonify(body), 200


@bp.post("/refresh")
def refresh():
    """
    Mint a new access token from a refresh token. The refresh token itself is unchanged.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Missing, expired or revoked refresh token
    """
    cfg = current_app.config
    token = sessions.refresh_access_token(
        _refresh_token_from_header(),
        cfg["JWT_SECRET"],
        access_ttl=cfg["ACCESS_TOKEN_EXPIRES"],
        issuer=cfg["JWT_ISSUER"],
        algorithm=cfg["JWT_ALGORITHM"],
    )
    return jsonify({"token": token}), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Unknown refresh token
    """
    sessions.revoke_refresh_token(_refresh_token_from_header())
    return ("", 204)
