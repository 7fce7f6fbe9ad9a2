from __future__ import annotations

import logging

from flask import Blueprint, g, abort

from api.extensions import get_storage
from api.responses import success_response
from models.user import Role, User
from models.schemas.user import UserOutSchema
from utils.decorators import jwt_required, roles_required
from utils.tokens import cleanup_expired_tokens, revoke_all_user_refresh_tokens

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


@bp.get("/users")
@jwt_required()
@roles_required(Role.ADMIN)
def list_users():
    """
    List all users, newest first - admin
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      403: { description: Forbidden }
    """
    session = get_storage().get_session()
    rows = session.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return success_response("Users retrieved", data={"users": user_list_out_schema.dump(rows)})


@bp.put("/users/<int:user_id>/toggle-status")
@jwt_required()
@roles_required(Role.ADMIN)
def toggle_status(user_id: int):
    """
    Activate or deactivate a user - admin
    Deactivation revokes every refresh token of the user immediately.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      -  in: path
         name: user_id
         type: integer
         required: true
    responses:
      200: { description: OK }
      400: { description: Attempt to toggle your own account }
      403: { description: Forbidden }
      404: { description: User not found }
    """
    if user_id == g.current_user.id:
        abort(400, description="You cannot change the status of your own account")

    storage = get_storage()
    user = storage.get(User, user_id)
    if not user:
        abort(404, description="User not found")

    user.is_active = not user.is_active
    storage.new(user)
    storage.save()

    if not user.is_active:
        revoke_all_user_refresh_tokens(storage, user.id)

    state = "activated" if user.is_active else "deactivated"
    logger.info("Admin %s %s user %s", g.current_user.id, state, user.id)
    return success_response(f"User {state} successfully", data={"user": user_out_schema.dump(user)})


@bp.post("/cleanup-tokens")
@jwt_required()
@roles_required(Role.ADMIN)
def cleanup_tokens():
    """
    Delete expired and revoked refresh tokens - admin
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      403: { description: Forbidden }
    """
    deleted = cleanup_expired_tokens(get_storage())
    return success_response("Expired tokens cleaned up successfully", data={"deleted": deleted})
