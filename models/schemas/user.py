from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates_schema,
)

from models.schemas.common import UTCDateTime
from models.user import Role

PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)"


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _strip(v):
    return v.strip() if isinstance(v, str) else v


def _password_field(label: str) -> fields.String:
    return fields.String(
        required=True,
        load_only=True,
        validate=[
            validate.Length(min=6, max=128, error=f"{label} must be between 6 and 128 characters."),
            validate.Regexp(
                PASSWORD_PATTERN,
                error=f"{label} must contain at least one lowercase letter, one uppercase letter and one number.",
            ),
        ],
        error_messages={"required": f"{label} is required."},
    )


class _NormalizingSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "email" in data:
            data["email"] = _norm_email(data["email"])
        if "name" in data:
            data["name"] = _strip(data["name"])
        return data


class RegisterSchema(_NormalizingSchema):
    name = fields.String(
        required=True,
        validate=validate.Length(min=2, max=255, error="Name must be between 2 and 255 characters."),
        error_messages={"required": "Name is required."},
    )
    email = fields.Email(
        required=True,
        validate=validate.Length(max=255),
        error_messages={"required": "Email is required.", "invalid": "Must be a valid email."},
    )
    password = _password_field("Password")
    confirm_password = fields.String(
        required=True, load_only=True, error_messages={"required": "Password confirmation is required."}
    )

    @validates_schema
    def passwords_match(self, data, **kwargs):
        if data.get("password") != data.get("confirm_password"):
            raise ValidationError("Passwords do not match.", field_name="confirm_password")


class LoginSchema(_NormalizingSchema):
    email = fields.Email(
        required=True,
        error_messages={"required": "Email is required.", "invalid": "Must be a valid email."},
    )
    password = fields.String(required=True, load_only=True, error_messages={"required": "Password is required."})


class RefreshTokenSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(
        required=True,
        validate=validate.Length(min=1, error="Refresh token is required."),
        error_messages={"required": "Refresh token is required."},
    )


class UpdateProfileSchema(_NormalizingSchema):
    name = fields.String(
        validate=validate.Length(min=2, max=255, error="Name must be between 2 and 255 characters.")
    )
    email = fields.Email(validate=validate.Length(max=255), error_messages={"invalid": "Must be a valid email."})


class ChangePasswordSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    current_password = fields.String(
        required=True, load_only=True, error_messages={"required": "Current password is required."}
    )
    new_password = _password_field("New password")
    confirm_new_password = fields.String(
        required=True, load_only=True, error_messages={"required": "New password confirmation is required."}
    )

    @validates_schema
    def passwords_match(self, data, **kwargs):
        if data.get("new_password") != data.get("confirm_new_password"):
            raise ValidationError("New passwords do not match.", field_name="confirm_new_password")


class UserOutSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    email = fields.String()
    role = fields.Enum(Role, by_value=True)
    is_active = fields.Boolean()
    created_at = UTCDateTime()
    updated_at = UTCDateTime()
