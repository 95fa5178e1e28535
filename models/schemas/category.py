from marshmallow import Schema, fields, validate, EXCLUDE

from models.category import CategoryType

CATEGORY_TYPES = [t.value for t in CategoryType]


class CategoryCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    type = fields.String(required=True, validate=validate.OneOf(CATEGORY_TYPES))


class CategoryBulkCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    categories = fields.List(
        fields.Nested(CategoryCreateSchema),
        required=True,
        validate=validate.Length(min=1, max=50),
    )


class CategoryOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    type = fields.Function(lambda obj: obj.type.value if isinstance(obj.type, CategoryType) else obj.type)
    is_default = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
