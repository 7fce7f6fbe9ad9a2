import re

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate, validates

from models.schemas.common import UTCDateTime

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _required_text(label: str) -> fields.String:
    return fields.String(
        required=True,
        validate=validate.Length(min=1, error=f"{label} is required."),
        error_messages={"required": f"{label} is required.", "null": f"{label} is required."},
    )


class ContactFormSchema(Schema):
    """Contact form submission; every field is trimmed and must not be blank."""

    class Meta:
        unknown = EXCLUDE

    full_name = _required_text("Full name")
    email = _required_text("Email")
    phone = _required_text("Phone")
    message = _required_text("Message")

    @pre_load
    def trim(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}

    @validates("email")
    def validate_email(self, value, **kwargs):
        if not EMAIL_RE.match(value):
            raise ValidationError("Email format is not valid.")


class ContactFormOutSchema(Schema):
    id = fields.Integer()
    full_name = fields.String()
    email = fields.String()
    phone = fields.String()
    message = fields.String()
    submitted_at = UTCDateTime()
