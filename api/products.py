from __future__ import annotations

from flask import Blueprint, request, jsonify

from models import storage
from services.products import list_products, parse_includes
from utils.decorators import jwt_required

bp = Blueprint("products", __name__)


@bp.get("/products")
@jwt_required()
def list_products_route():
    """
    List products with pagination, projection, sorting and filtering
    ---
    tags:
      - Products
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
        description: "Clamped to 100"
      - in: query
        name: sort
        type: string
        default: "-createdAt"
        description: "Prefix with '-' for desc. Allowed: name, price, createdAt"
      - in: query
        name: fields
        type: string
        description: "Comma-separated. Allowed: id, name, price, stock, createdAt, categoryId"
      - in: query
        name: include
        type: string
        description: "Comma-separated. Supported: category"
      - in: query
        name: category
        type: number
      - in: query
        name: minPrice
        type: number
      - in: query
        name: maxPrice
        type: number
    responses:
      200:
        description: "{ data: [...], pagination: { page, limit, totalItems, totalPages } }"
      400:
        description: Disallowed field, sort or malformed filter
      401:
        description: Unauthorized
    """
    result = list_products(
        storage.get_session(),
        page=request.args.get("page"),
        limit=request.args.get("limit"),
        sort=request.args.get("sort"),
        fields=request.args.get("fields"),
        include_category="category" in parse_includes(request.args.get("include")),
        filters={
            "category": request.args.get("category"),
            "minPrice": request.args.get("minPrice"),
            "maxPrice": request.args.get("maxPrice"),
        },
    )
    return jsonify(result), 200
