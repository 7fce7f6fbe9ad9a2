"""
Seed blueprint (admin only):
- POST   /seed/run            generate sample users, forms and refresh tokens
- DELETE /seed/clear          delete every user, form and refresh token
- GET    /seed/status         row counts and user breakdowns
- POST   /seed/create-tables  create missing tables
"""
from __future__ import annotations

from flask import Blueprint, request, current_app

from api.extensions import get_storage
from api.responses import success_response
from models.user import Role
from models.schemas.seed import SeedRunSchema
from utils.decorators import jwt_required, roles_required
from utils.seed import clear_existing_data, create_tables, run_seed, seed_status

bp = Blueprint("seed", __name__)

seed_run_schema = SeedRunSchema()


@bp.post("/run")
@jwt_required()
@roles_required(Role.ADMIN)
def run():
    """
    Generate sample data - admin
    ---
    tags:
      - Seed
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            clear_data: { type: boolean, default: false }
            user_count: { type: integer, default: 10 }
            form_count: { type: integer, default: 25 }
    responses:
      200: { description: Counts of generated rows }
      403: { description: Forbidden }
    """
    data = seed_run_schema.load(request.get_json(silent=True) or {})
    results = run_seed(
        get_storage(),
        user_count=data["user_count"],
        form_count=data["form_count"],
        clear_data=data["clear_data"],
        password=current_app.config["SEED_DEFAULT_PASSWORD"],
    )
    return success_response("Sample data generated successfully", data=results)


@bp.delete("/clear")
@jwt_required()
@roles_required(Role.ADMIN)
def clear():
    """
    Delete all users, forms and refresh tokens - admin
    ---
    tags:
      - Seed
    security:
      - Bearer: []
    responses:
      200: { description: Counts of deleted rows }
      403: { description: Forbidden }
    """
    storage = get_storage()
    create_tables(storage)
    return success_response("Data cleared successfully", data=clear_existing_data(storage))


@bp.get("/status")
@jwt_required()
@roles_required(Role.ADMIN)
def status():
    """
    Row counts per table - admin
    ---
    tags:
      - Seed
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      403: { description: Forbidden }
    """
    return success_response("Seed status", data=seed_status(get_storage()))


@bp.post("/create-tables")
@jwt_required()
@roles_required(Role.ADMIN)
def create_tables_view():
    """
    Create missing tables - admin
    ---
    tags:
      - Seed
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      403: { description: Forbidden }
    """
    tables = create_tables(get_storage())
    return success_response(
        "Tables verified/created successfully",
        data={"tables": tables, "note": "Tables are only created when missing"},
    )
