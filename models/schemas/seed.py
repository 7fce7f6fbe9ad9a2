from marshmallow import EXCLUDE, Schema, fields, validate


class SeedRunSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    clear_data = fields.Boolean(load_default=False)
    user_count = fields.Integer(load_default=10, validate=validate.Range(min=0, max=1000))
    form_count = fields.Integer(load_default=25, validate=validate.Range(min=0, max=10000))
