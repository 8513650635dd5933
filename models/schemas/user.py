from marshmallow import Schema, fields, EXCLUDE

from models.schemas.common import UTCDateTime


class UserLoginSchema(Schema):
    # Emails are matched exactly as stored, so no normalization here
    email = fields.String()
    password = fields.String()

    class Meta:
        unknown = EXCLUDE


class RefreshTokenSchema(Schema):
    refreshToken = fields.String()

    class Meta:
        unknown = EXCLUDE


class UserSummarySchema(Schema):
    id = fields.Integer()
    email = fields.String()
    role = fields.Method("get_role")

    def get_role(self, obj):
        role = obj["role"] if isinstance(obj, dict) else obj.role
        return getattr(role, "value", role)


class UserOutSchema(UserSummarySchema):
    createdAt = UTCDateTime(attribute="created_at")
