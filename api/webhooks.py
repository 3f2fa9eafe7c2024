"""
Polka payment webhooks. Polka authenticates with ``Authorization: ApiKey <key>``.
"""
from __future__ import annotations

import logging
import uuid

from flask import Blueprint, request, abort

from models import storage
from models.user import User
from models.schemas.webhook import PolkaWebhookSchema, USER_UPGRADED
from utils.decorators import api_key_required

logger = logging.getLogger(__name__)

bp = Blueprint("webhooks", __name__)

webhook_schema = PolkaWebhookSchema()


@bp.post("/polka/webhooks")
@api_key_required()
def polka_webhook():
    """
    Payment provider webhook; upgrades an account to Chirpy Red
    ---
    tags:
      - Webhooks
    security:
      - ApiKey: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            event: { type: string, example: user.upgraded }
            data:
              type: object
              properties:
                user_id: { type: string }
    responses:
      204: { description: Accepted }
      400: { description: Malformed payload }
      401: { description: Bad API key }
      404: { description: Unknown user }
    """
    payload = request.get_json(silent=True) or {}
    data = webhook_schema.load(payload)

    if data["event"] != USER_UPGRADED:
        return ("", 204)

    try:
        user_id = uuid.UUID(data["data"]["user_id"])
    except ValueError:
        abort(400, description="Invalid user_id")

    user = storage.get(User, user_id)
    if not user:
        abort(404, description="User not found")

    if not user.is_chirpy_red:
        user.is_chirpy_red = True
        user.save()
    logger.info("User %s upgraded to Chirpy Red", user.id)
    return ("", 204)
