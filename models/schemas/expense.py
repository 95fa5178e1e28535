from decimal import Decimal

from marshmallow import Schema, fields, validate, EXCLUDE

from models.schemas.category import CategoryOutSchema


class ExpenseCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    amount = fields.Decimal(required=True, places=2, validate=validate.Range(min=Decimal("0.01")))
    category_id = fields.String(required=True, validate=validate.Length(min=1))


class ExpenseOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    amount = fields.Decimal(places=2, as_string=True)
    category = fields.Nested(CategoryOutSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
