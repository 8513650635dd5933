"""
Refresh token lifecycle and access token signing.

Refresh tokens are opaque random strings. Only their SHA-256 hash is stored,
so a leaked table cannot be replayed. A token row moves through:

    issued --(logout)--> revoked     (row kept, revoked_at set)
    issued --(refresh)--> consumed   (row deleted, a new row issued)
    issued --(time)-----> expired    (row kept until purge-tokens runs)

Validation checks, in order: not_found, revoked, expired.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import or_

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from models.user import User
from utils.security import (
    create_access_token,
    generate_refresh_token,
    hash_token,
)

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(seconds=300)
REFRESH_TOKEN_TTL = timedelta(days=7)

NOT_FOUND = "not_found"
REVOKED = "revoked"
EXPIRED = "expired"


class TokenValidation:
    """
    Outcome of validating (or rotating) a refresh token.

    valid results carry `record`; failures carry `reason`. Rotation results
    also carry `new_token` and `new_expires_at`.
    """

    def __init__(self, valid: bool, record: Optional[Dict[str, Any]] = None,
                 reason: Optional[str] = None):
        self.valid = valid
        self.record = record
        self.reason = reason
        self.new_token: Optional[str] = None
        self.new_expires_at: Optional[datetime] = None

    @classmethod
    def failure(cls, reason: str) -> "TokenValidation":
        return cls(False, reason=reason)

    def __repr__(self):
        if self.valid:
            return f"<TokenValidation valid user_id={self.record['user_id']}>"
        return f"<TokenValidation invalid reason={self.reason}>"


class TokenService:
    """
    Issues, validates, rotates and revokes refresh tokens and signs access
    tokens. `storage` must provide get_session() and transaction() (see
    models.db_storage.DBStorage).
    """

    def __init__(self, storage, jwt_secret: str, jwt_algorithm: str = "HS256",
                 access_ttl: timedelta = ACCESS_TOKEN_TTL,
                 refresh_ttl: timedelta = REFRESH_TOKEN_TTL):
        self.storage = storage
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_config(cls, storage, config) -> "TokenService":
        return cls(
            storage,
            jwt_secret=config["JWT_SECRET"],
            jwt_algorithm=config.get("JWT_ALGORITHM", "HS256"),
            access_ttl=config.get("ACCESS_TOKEN_EXPIRES", ACCESS_TOKEN_TTL),
            refresh_ttl=config.get("REFRESH_TOKEN_EXPIRES", REFRESH_TOKEN_TTL),
        )

    @property
    def access_token_expires_in(self) -> int:
        return int(self.access_ttl.total_seconds())

    def sign_access_token(self, user_id: int, email: str, role: str) -> str:
        return create_access_token(
            subject=user_id,
            email=email,
            role=role,
            secret=self.jwt_secret,
            algorithm=self.jwt_algorithm,
            expires=self.access_ttl,
        )

    def _add_refresh_token(self, session, user_id: int):
        token = generate_refresh_token()
        now = utcnow()
        expires_at = now + self.refresh_ttl
        session.add(RefreshToken(
            user_id=user_id,
            token_hash=hash_token(token),
            expires_at=expires_at,
            created_at=now,
            revoked_at=None,
        ))
        return token, expires_at

    def issue_refresh_token(self, user_id: int):
        """Persist a new refresh token for user_id; return (raw token, expires_at)."""
        with self.storage.transaction() as session:
            token, expires_at = self._add_refresh_token(session, user_id)
        logger.info("Issued refresh token for user %s", user_id)
        return token, expires_at

    def validate_refresh_token(self, token: str) -> TokenValidation:
        session = self.storage.get_session()
        row = (
            session.query(RefreshToken, User.email, User.role)
            .join(User, User.id == RefreshToken.user_id)
            .filter(RefreshToken.token_hash == hash_token(token))
            .populate_existing()
            .first()
        )
        if row is None:
            return TokenValidation.failure(NOT_FOUND)

        rt, email, role = row
        if rt.revoked_at is not None:
            return TokenValidation.failure(REVOKED)
        if rt.expires_at < utcnow():
            return TokenValidation.failure(EXPIRED)

        record = {
            "id": rt.id,
            "user_id": rt.user_id,
            "expires_at": rt.expires_at,
            "created_at": rt.created_at,
            "revoked_at": rt.revoked_at,
            "email": email,
            "role": role.value if hasattr(role, "value") else role,
        }
        return TokenValidation(True, record=record)

    def rotate_refresh_token(self, token: str) -> TokenValidation:
        """
        Consume `token` and issue its replacement in one transaction.

        The delete is the consume-once gate: if another request already
        consumed (or revoked) the row, zero rows are deleted, nothing is
        inserted and the result is not_found.
        """
        validation = self.validate_refresh_token(token)
        if not validation.valid:
            return validation

        user_id = validation.record["user_id"]
        with self.storage.transaction() as session:
            deleted = (
                session.query(RefreshToken)
                .filter(
                    RefreshToken.token_hash == hash_token(token),
                    RefreshToken.revoked_at.is_(None),
                )
                .delete(synchronize_session=False)
            )
            if deleted != 1:
                logger.info("Refresh token for user %s was consumed concurrently", user_id)
                return TokenValidation.failure(NOT_FOUND)
            new_token, expires_at = self._add_refresh_token(session, user_id)

        logger.info("Rotated refresh token for user %s", user_id)
        validation.new_token = new_token
        validation.new_expires_at = expires_at
        return validation

    def revoke_refresh_token(self, token: str) -> None:
        """Mark the token revoked. Unknown or already revoked tokens are a no-op."""
        with self.storage.transaction() as session:
            updated = (
                session.query(RefreshToken)
                .filter(
                    RefreshToken.token_hash == hash_token(token),
                    RefreshToken.revoked_at.is_(None),
                )
                .update({RefreshToken.revoked_at: utcnow()}, synchronize_session=False)
            )
        if updated:
            logger.info("Revoked a refresh token")

    def purge_expired_tokens(self, now: Optional[datetime] = None) -> int:
        """Delete expired and revoked rows; return how many were removed."""
        now = now or utcnow()
        with self.storage.transaction() as session:
            removed = (
                session.query(RefreshToken)
                .filter(or_(RefreshToken.expires_at < now, RefreshToken.revoked_at.isnot(None)))
                .delete(synchronize_session=False)
            )
        logger.info("Purged %d refresh tokens", removed)
        return removed
