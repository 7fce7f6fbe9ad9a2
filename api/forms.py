from __future__ import annotations

import logging

from flask import Blueprint, request

from api.extensions import get_storage
from api.responses import success_response
from models.base_model import utcnow
from models.contact_form import ContactForm
from models.schemas.common import utc_isoformat
from models.schemas.contact_form import ContactFormSchema, ContactFormOutSchema

logger = logging.getLogger(__name__)

bp = Blueprint("forms", __name__)

form_schema = ContactFormSchema()
form_out_schema = ContactFormOutSchema()
forms_out_schema = ContactFormOutSchema(many=True)


@bp.get("/forms")
def list_forms():
    """
    List contact form submissions, newest first
    ---
    tags:
      - Forms
    responses:
      200: { description: OK }
    """
    session = get_storage().get_session()
    rows = session.query(ContactForm).order_by(ContactForm.submitted_at.desc(), ContactForm.id.desc()).all()
    return success_response("Forms retrieved successfully", data=forms_out_schema.dump(rows), total=len(rows))


@bp.post("/forms")
def submit_form():
    """
    Submit a contact form
    ---
    tags:
      - Forms
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [full_name, email, phone, message]
          properties:
            full_name: { type: string }
            email: { type: string }
            phone: { type: string }
            message: { type: string }
    responses:
      200:
        description: Stored submission
      400:
        description: Missing or invalid fields
    """
    data = form_schema.load(request.get_json(silent=True) or {})

    storage = get_storage()
    form = ContactForm(**data)
    storage.new(form)
    storage.save()
    logger.info("Stored contact form %s", form.id)

    return success_response(
        "Form data received and stored",
        data=form_out_schema.dump(form),
        timestamp=utc_isoformat(utcnow()),
    )
