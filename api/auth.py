"""
Authentication blueprint:
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The implementation:
- Uses argon2 for password verification (via utils.security)
- Issues short-lived JWT access tokens (HS256) and opaque refresh tokens
- Stores only SHA-256 hashes of refresh tokens so they can be rotated and revoked
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, current_app

from models import storage
from models.base_model import isoformat
from models.schemas.user import UserLoginSchema, RefreshTokenSchema, UserSummarySchema
from models.user import User
from services.tokens import TokenService
from utils.exceptions import AuthError, ValidationError
from utils.security import verify_password

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
refresh_token_schema = RefreshTokenSchema()
user_summary_schema = UserSummarySchema()


def token_service() -> TokenService:
    return TokenService.from_config(storage, current_app.config)


def _token_bundle(service: TokenService, user: dict, refresh_token: str, refresh_expires_at):
    access_token = service.sign_access_token(user["id"], user["email"], user["role"])
    return {
        "accessToken": access_token,
        "accessTokenExpiresIn": service.access_token_expires_in,
        "refreshToken": refresh_token,
        "refreshTokenExpiresAt": isoformat(refresh_expires_at),
        "user": user,
    }


def _require_refresh_token() -> str:
    payload = refresh_token_schema.load(request.get_json(silent=True) or {})
    token = payload.get("refreshToken")
    if not token:
        raise ValidationError("refreshToken is required")
    return token


@bp.post("/login")
def login():
    """
    Login: return an access token and a refresh token
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
      400:
        description: Email and password are required
      401:
        description: Invalid credentials
    """
    payload = user_login_schema.load(request.get_json(silent=True) or {})
    email = payload.get("email")
    password = payload.get("password")
    if not email or not password:
        raise ValidationError("Email and password are required")

    session = storage.get_session()
    user: User = session.query(User).filter(User.email == email).first()
    # Same response for unknown email and wrong password
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise AuthError("Invalid credentials")

    service = token_service()
    refresh_token, expires_at = service.issue_refresh_token(user.id)
    logger.info("User %s logged in", user.id)

    return jsonify(_token_bundle(service, user_summary_schema.dump(user), refresh_token, expires_at)), 200


@bp.post("/refresh")
def refresh():
    """
    Rotate a refresh token: the presented token is consumed and a new
    access/refresh pair is returned
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
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: refreshToken is required
      401:
        description: "Refresh token not_found | revoked | expired"
    """
    token = _require_refresh_token()

    service = token_service()
    result = service.rotate_refresh_token(token)
    if not result.valid:
        raise AuthError(f"Refresh token {result.reason}")

    user = {
        "id": result.record["user_id"],
        "email": result.record["email"],
        "role": result.record["role"],
    }
    return jsonify(_token_bundle(service, user, result.new_token, result.new_expires_at)), 200


@bp.post("/logout")
def logout():
    """
    Logout: revoke a refresh token (idempotent)
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
             refreshToken: { type: string }
    responses:
      200:
        description: "Always { success: true }"
      400:
        description: refreshToken is required
    """
    token = _require_refresh_token()
    token_service().revoke_refresh_token(token)
    return jsonify({"success": True}), 200
