from marshmallow import Schema, fields, validate, pre_load, EXCLUDE


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class UserRegisterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=6))

    @pre_load
    def normalize(self, data, **kwargs):
        # Whitespace only; email matching stays case-sensitive
        if isinstance(data, dict):
            data = dict(data)
            for key in ("name", "email"):
                if key in data:
                    data[key] = _strip(data[key])
        return data


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _strip(data["email"])
        return data


class RefreshTokenSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    email = fields.String()
    created_at = fields.DateTime()
