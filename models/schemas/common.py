from marshmallow import fields

from models.base_model import isoformat


class UTCDateTime(fields.DateTime):
    """Serialize stored naive-UTC datetimes as ISO 8601 with a Z suffix."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return isoformat(value)
