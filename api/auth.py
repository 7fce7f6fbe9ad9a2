"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- POST /auth/logout-all
- GET  /auth/profile
- PUT  /auth/profile
- PUT  /auth/change-password

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs signed with HS256)
- Stores refresh tokens in DB (RefreshToken model) so they can be revoked one by one
  or all at once; refresh tokens are not rotated on /refresh
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, g, abort, current_app
from sqlalchemy.exc import IntegrityError

from api.extensions import get_storage, limiter
from api.responses import success_response
from models.user import Role, User
from models.schemas.user import (
    ChangePasswordSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    UpdateProfileSchema,
    UserOutSchema,
)
from utils.decorators import jwt_required
from utils.exceptions import DuplicateEmail, IncorrectPassword, InvalidCredentials
from utils.security import (
    create_access_token,
    decode_refresh_token,
    hash_password,
    token_payload,
    verify_password,
)
from utils.tokens import (
    is_refresh_token_valid,
    issue_token_pair,
    revoke_all_user_refresh_tokens,
    revoke_refresh_token,
)

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
update_profile_schema = UpdateProfileSchema()
change_password_schema = ChangePasswordSchema()
user_out_schema = UserOutSchema()


def _limit(key: str):
    """Route limit read from config at request time."""
    return lambda: current_app.config[key]


def _email_taken(session, email: str, exclude_id: int | None = None) -> bool:
    query = session.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


@bp.post("/register")
@limiter.limit(_limit("REGISTER_RATE_LIMIT"), error_message="Too many registration attempts. Try again in 1 hour.")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [name, email, password, confirm_password]
          properties:
            name: { type: string }
            email: { type: string }
            password: { type: string }
            confirm_password: { type: string }
    responses:
      201:
        description: Created (returns user, access_token and refresh_token)
      400:
        description: Validation error or email already registered
    """
    data = register_schema.load(request.get_json(silent=True) or {})

    storage = get_storage()
    if _email_taken(storage.get_session(), data["email"]):
        raise DuplicateEmail()

    user = User(
        name=data["name"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        role=Role.USER,
        is_active=True,
    )
    storage.new(user)
    try:
        storage.save()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same email
        raise DuplicateEmail()

    tokens = issue_token_pair(storage, user)
    logger.info("Registered user %s", user.id)

    return success_response(
        "User registered successfully",
        data={"user": user_out_schema.dump(user), **tokens},
        status=201,
    )


@bp.post("/login")
@limiter.limit(
    _limit("LOGIN_RATE_LIMIT"),
    error_message="Too many login attempts. Try again in 15 minutes.",
    deduct_when=lambda response: response.status_code != 200,
)
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns user and a fresh token pair)
      401:
        description: Invalid credentials
    """
    data = login_schema.load(request.get_json(silent=True) or {})

    storage = get_storage()
    user: User | None = storage.get_session().query(User).filter(User.email == data["email"]).first()
    # Unknown email, inactive account and wrong password are indistinguishable to the caller
    if not user or not user.is_active or not verify_password(data["password"], user.password_hash):
        logger.warning("Failed login for %s", data["email"])
        raise InvalidCredentials()

    tokens = issue_token_pair(storage, user)

    return success_response(
        "Login successful",
        data={"user": user_out_schema.dump(user), **tokens},
    )


@bp.post("/refresh")
@limiter.limit(_limit("REFRESH_RATE_LIMIT"), error_message="Too many token refresh attempts. Try again in 15 minutes.")
def refresh():
    """
    Use a refresh token to obtain a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns access_token and user)
      401:
        description: Invalid, expired or revoked refresh token
    """
    data = refresh_token_schema.load(request.get_json(silent=True) or {})
    token = data["refresh_token"]

    decoded = decode_refresh_token(token)

    storage = get_storage()
    if not is_refresh_token_valid(storage, token):
        abort(401, description="Invalid or expired refresh token")

    user = storage.get(User, decoded["user_id"])
    if not user or not user.is_active:
        abort(401, description="User not found or inactive")

    return success_response(
        "Token refreshed successfully",
        data={
            "access_token": create_access_token(token_payload(user)),
            "user": user_out_schema.dump(user),
        },
    )


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the given refresh token if it belongs to the caller
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    data = refresh_token_schema.load(request.get_json(silent=True) or {})
    revoke_refresh_token(get_storage(), data["refresh_token"], user_id=g.current_user.id)
    return success_response("Logged out successfully")


@bp.post("/logout-all")
@jwt_required()
def logout_all():
    """
    Logout everywhere: revokes every refresh token of the caller
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: All sessions closed
      401:
        description: Unauthorized
    """
    revoked = revoke_all_user_refresh_tokens(get_storage(), g.current_user.id)
    logger.info("User %s logged out of all sessions", g.current_user.id)
    return success_response("All sessions closed successfully", data={"revoked": revoked})


@bp.get("/profile")
@jwt_required()
def get_profile():
    """
    Get the current user's profile
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: User not found
    """
    user = get_storage().get(User, g.current_user.id)
    if not user:
        abort(404, description="User not found")
    return success_response("Profile retrieved", data={"user": user_out_schema.dump(user)})


@bp.put("/profile")
@jwt_required()
def update_profile():
    """
    Update name and/or email of the current user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             name: { type: string }
             email: { type: string }
    responses:
      200:
        description: Updated user
      400:
        description: Validation error, nothing to update or email already in use
    """
    data = update_profile_schema.load(request.get_json(silent=True) or {})
    if not data:
        abort(400, description="No data to update")

    storage = get_storage()
    user = storage.get(User, g.current_user.id)
    if not user:
        abort(404, description="User not found")

    if "email" in data and _email_taken(storage.get_session(), data["email"], exclude_id=user.id):
        raise DuplicateEmail("Email already in use")

    for key, value in data.items():
        setattr(user, key, value)
    storage.new(user)
    try:
        storage.save()
    except IntegrityError:
        raise DuplicateEmail("Email already in use")

    return success_response("Profile updated successfully", data={"user": user_out_schema.dump(user)})


@bp.put("/change-password")
@limiter.limit(_limit("PASSWORD_RATE_LIMIT"), error_message="Too many password change attempts. Try again in 1 hour.")
@jwt_required()
def change_password():
    """
    Change the current user's password and close every session
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             current_password: { type: string }
             new_password: { type: string }
             confirm_new_password: { type: string }
    responses:
      200:
        description: Password changed; all refresh tokens revoked
      400:
        description: Validation error or wrong current password
    """
    data = change_password_schema.load(request.get_json(silent=True) or {})

    storage = get_storage()
    user = storage.get(User, g.current_user.id)
    if not user:
        abort(404, description="User not found")

    if not verify_password(data["current_password"], user.password_hash):
        raise IncorrectPassword()

    user.password_hash = hash_password(data["new_password"])
    storage.new(user)
    storage.save()

    # Every existing session must log in again with the new password
    revoke_all_user_refresh_tokens(storage, user.id)
    logger.info("User %s changed password", user.id)

    return success_response("Password changed successfully. Please log in again.")
