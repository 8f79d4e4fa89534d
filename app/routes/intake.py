"""
Intake routes — lead form submission and the business type catalog.
"""
import logging
from flask import Blueprint, request, jsonify

from app.business_types import BUSINESS_TYPES
from app.pipeline.manager import launch_lead_jobs
from app.services.db import create_lead
from app.services.rate_limiter import rate_limited
from app.services.validation import ValidationError, validate_lead_form, generate_short_hash

logger = logging.getLogger('routes.intake')

bp = Blueprint('intake', __name__)


@bp.route('/api/generate', methods=['POST'])
@rate_limited('generate')
def submit_lead():
    """
    Validate the form, save the lead, enqueue generation + CRM sync.

    Responds as soon as the lead row exists; script generation happens in
    the background and is followed via /api/results/<shortHash>.
    """
    try:
        form = validate_lead_form(request.get_json(silent=True))
    except ValidationError as e:
        logger.info("Rejected lead submission: %s (%s)", e.message, e.field)
        return jsonify({'error': e.message}), 400

    try:
        lead = create_lead(form, generate_short_hash())
        if lead is None:
            return jsonify({'error': 'Failed to create lead'}), 500

        launch_lead_jobs(lead, form)
        logger.info("Lead %s created for %s", lead['id'], form['company_name'], extra={'lead_id': lead['id']})
        return jsonify({'id': lead['id'], 'shortHash': lead['short_hash']}), 200
    except Exception as e:
        logger.error("Error in generate API: %s", e, exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500


@bp.route('/api/business-types')
def business_types():
    """Business type catalog grouped by category, for the intake form."""
    return jsonify(BUSINESS_TYPES)
