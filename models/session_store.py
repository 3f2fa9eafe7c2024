"""
Refresh token persistence.

The store is a thin layer over DBStorage; it does no locking of its own.
Concurrent lookups and revocations of the same token are serialized by the
database transaction.
"""
from __future__ import annotations

from datetime import datetime

import models
from models.base_model import utcnow
from models.refresh_token import RefreshToken
from models.user import User


class SessionStore:
    def __init__(self, storage=None):
        self._storage = storage

    @property
    def storage(self):
        # resolved lazily so tests can swap models.storage
        return self._storage or models.storage

    def save_refresh_token(self, token: str, account_id, expires_at: datetime) -> RefreshToken:
        rt = RefreshToken(token=token, user_id=str(account_id), expires_at=expires_at)
        self.storage.new(rt)
        self.storage.save()
        return rt

    def find_refresh_token(self, token: str) -> RefreshToken | None:
        if not token:
            return None
        return self.storage.get_session().get(RefreshToken, token)

    def revoke_refresh_token(self, token: str) -> bool:
        """Mark ``token`` revoked. Returns False if it does not exist.

        An already revoked token keeps its original revoked_at.
        """
        rt = self.find_refresh_token(token)
        if rt is None:
            return False
        if rt.revoked_at is None:
            now = utcnow()
            rt.revoked_at = now
            rt.updated_at = now
            self.storage.new(rt)
            self.storage.save()
        return True

    def find_account_by_refresh_owner(self, account_id) -> User | None:
        return self.storage.get(User, account_id)
