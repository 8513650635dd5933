from flask import Blueprint

from models.base_model import isoformat, utcnow

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            time:
              type: string
              example: "2024-01-01T00:00:00.000Z"
    """
    return {"status": "ok", "time": isoformat(utcnow())}, 200
