"""
Product listing query builder.

Untrusted query-string values are resolved against fixed allow-lists of
SQLAlchemy column objects before any statement is built, so user input only
ever reaches the database as bound parameters.
"""
from __future__ import annotations

import math
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy import func, select

from models.category import Category
from models.product import Product
from models.schemas.product import ProductOutSchema
from utils.exceptions import ValidationError

# Projection allowlist: API field -> SQLAlchemy column
ALLOWED_FIELDS = {
    "id": Product.id,
    "name": Product.name,
    "price": Product.price,
    "stock": Product.stock,
    "createdAt": Product.created_at,
    "categoryId": Product.category_id,
}

# Sorting allowlist (narrower than the projection one)
SORT_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "createdAt": Product.created_at,
}

# Numeric filters: query parameter -> (column, comparison)
NUMERIC_FILTERS = (
    ("category", Product.category_id, "eq"),
    ("minPrice", Product.price, "ge"),
    ("maxPrice", Product.price, "le"),
)

INCLUDABLE = {"category"}

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Internal labels; dropped from the response unless mapped explicitly
_ROW_ID = "_id"
_CATEGORY_LABELS = ("_category_id", "_category_name", "_category_description")


def _split_csv(value: Optional[str]) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def parse_fields(fields_param: Optional[str]) -> List[str]:
    """Requested projection; defaults to every allowed field."""
    requested = _split_csv(fields_param)
    if not requested:
        return list(ALLOWED_FIELDS)

    fields = []
    for name in requested:
        if name not in ALLOWED_FIELDS:
            raise ValidationError(f'Projection field "{name}" is not allowed')
        if name not in fields:
            fields.append(name)
    return fields


def parse_sort(sort_param: Optional[str]):
    """Return (column, descending). `-name` sorts descending."""
    if not sort_param:
        return SORT_COLUMNS["createdAt"], True

    desc = sort_param.startswith("-")
    key = sort_param[1:] if desc else sort_param
    col = SORT_COLUMNS.get(key)
    if col is None:
        raise ValidationError(f'Sort field "{key}" is not allowed')
    return col, desc


def parse_includes(include_param: Optional[str]) -> Set[str]:
    """Known related resources to embed; unknown names are ignored."""
    return {name for name in _split_csv(include_param) if name in INCLUDABLE}


def _parse_number(name: str, raw) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} filter must be a number")
    if not math.isfinite(value):
        raise ValidationError(f"{name} filter must be a number")
    return value


def build_filters(filters: Optional[Dict[str, Optional[str]]]) -> list:
    """
    Translate category/minPrice/maxPrice into SQL conditions (AND-combined by
    the caller). Empty or missing values are skipped.
    """
    filters = filters or {}
    conditions = []
    for name, column, op in NUMERIC_FILTERS:
        raw = filters.get(name)
        if raw is None or (isinstance(raw, str) and raw.strip() == ""):
            continue
        value = _parse_number(name, raw)
        if op == "eq":
            if value.is_integer():
                value = int(value)
            conditions.append(column == value)
        elif op == "ge":
            conditions.append(column >= value)
        else:
            conditions.append(column <= value)
    return conditions


def _parse_int(value, default: int) -> int:
    """Numeric strings such as "2.0" or "1e2" are accepted and truncated."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def parse_pagination(page, limit) -> Tuple[int, int]:
    """
    limit: missing, non-numeric or 0 -> DEFAULT_LIMIT, then clamped to
    [1, MAX_LIMIT]. page: missing or non-numeric -> 1, clamped to >= 1.
    """
    limit = _parse_int(limit, DEFAULT_LIMIT) or DEFAULT_LIMIT
    limit = max(1, min(limit, MAX_LIMIT))
    page = max(_parse_int(page, 1), 1)
    return page, limit


def _row_to_item(row, fields: List[str], include_category: bool) -> dict:
    item = {name: row[name] for name in fields}
    if include_category:
        cid, cname, cdesc = (row[label] for label in _CATEGORY_LABELS)
        item["category"] = {"id": cid, "name": cname, "description": cdesc}
    return item


def list_products(
    session,
    page=None,
    limit=None,
    sort: Optional[str] = None,
    fields: Optional[str] = None,
    include_category: bool = False,
    filters: Optional[Dict[str, Optional[str]]] = None,
) -> dict:
    """
    Run a paginated product listing and return {"data", "pagination"}.
    Raises ValidationError on any disallowed field, sort or filter value.
    """
    parsed_fields = parse_fields(fields)
    sort_col, desc = parse_sort(sort)
    conditions = build_filters(filters)
    page, limit = parse_pagination(page, limit)
    offset = (page - 1) * limit

    columns = [ALLOWED_FIELDS[name].label(name) for name in parsed_fields]
    # Row identity is always fetched; it only reaches the output as "id"
    if "id" not in parsed_fields:
        columns.append(Product.id.label(_ROW_ID))
    if include_category:
        columns += [
            Category.id.label(_CATEGORY_LABELS[0]),
            Category.name.label(_CATEGORY_LABELS[1]),
            Category.description.label(_CATEGORY_LABELS[2]),
        ]

    stmt = select(*columns).select_from(Product)
    if include_category:
        stmt = stmt.outerjoin(Category, Category.id == Product.category_id)
    if conditions:
        stmt = stmt.where(*conditions)
    stmt = (
        stmt.order_by(sort_col.desc() if desc else sort_col.asc(), Product.id.asc())
        .limit(limit)
        .offset(offset)
    )

    count_stmt = select(func.count()).select_from(Product)
    if conditions:
        count_stmt = count_stmt.where(*conditions)

    rows = session.execute(stmt).mappings().all()
    total = session.execute(count_stmt).scalar_one()

    only = tuple(parsed_fields) + (("category",) if include_category else ())
    schema = ProductOutSchema(many=True, only=only)
    items = [_row_to_item(row, parsed_fields, include_category) for row in rows]

    return {
        "data": schema.dump(items),
        "pagination": {
            "page": page,
            "limit": limit,
            "totalItems": total,
            "totalPages": math.ceil(total / limit),
        },
    }
