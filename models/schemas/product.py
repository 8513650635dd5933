from marshmallow import Schema, fields

from models.schemas.common import UTCDateTime


class CategoryOutSchema(Schema):
    # Every field may be null when a product points at a missing category
    id = fields.Integer(allow_none=True)
    name = fields.String(allow_none=True)
    description = fields.String(allow_none=True)


class ProductOutSchema(Schema):
    """
    Listing row. Field names are the public (camelCase) API names; the
    listing restricts the dump with `only=` to the requested projection.
    """
    id = fields.Integer()
    name = fields.String()
    price = fields.Float()
    stock = fields.Integer()
    createdAt = UTCDateTime()
    categoryId = fields.Integer()
    category = fields.Nested(CategoryOutSchema)
