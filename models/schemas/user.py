from marshmallow import EXCLUDE, Schema, fields, validate


class UserCredentialsSchema(Schema):
    """email + password, used by register, login and account update."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True, validate=validate.Length(min=1, max=255))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    is_chirpy_red = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class LoginOutSchema(UserOutSchema):
    token = fields.String()
    refresh_token = fields.String()
