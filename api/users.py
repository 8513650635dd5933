from __future__ import annotations

from flask import Blueprint, jsonify, g

from models import storage
from models.schemas.user import UserOutSchema
from models.user import User
from utils.decorators import jwt_required
from utils.exceptions import NotFoundError

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: User not found
    """
    user = storage.get(User, g.current_user["id"])
    if not user:
        raise NotFoundError("User not found")
    return jsonify(user_out_schema.dump(user)), 200
