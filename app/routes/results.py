"""
Results routes — script snapshot for a lead, and a live SSE stream.
"""
import json
import logging
from flask import Blueprint, Response, jsonify, stream_with_context

from app.config import SCRIPT_COUNT
from app.services.db import get_public_lead, list_scripts
from app.services.rate_limiter import rate_limited
from app.services.results_feed import stream_scripts
from app.services.validation import validate_input

logger = logging.getLogger('routes.results')

bp = Blueprint('results', __name__)


def _resolve(identifier):
    """Sanitize a lead id / short hash path param. Returns (lead, error_response)."""
    sanitized = validate_input(identifier, 36)
    if not sanitized:
        return None, (jsonify({'error': 'Valid id parameter is required'}), 400)
    lead = get_public_lead(sanitized)
    if lead is None:
        return None, (jsonify({'error': 'Results not found'}), 404)
    return lead, None


@bp.route('/api/results/<identifier>')
@rate_limited('results')
def get_results(identifier):
    """Lead summary + every script saved so far, ordered by position."""
    try:
        lead, error = _resolve(identifier)
        if error:
            return error
        return jsonify({
            'lead': lead,
            'scripts': list_scripts(lead['id']),
            'expected': SCRIPT_COUNT,
        })
    except Exception as e:
        logger.error("Error in results API: %s", e, exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500


def _sse(event, data):
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


@bp.route('/api/results/<identifier>/stream')
@rate_limited('results')
def stream_results(identifier):
    """
    Server-Sent Events: one `script` event per script (existing first, then
    live ones, never the same id twice), `status` events, and a final `done`.
    """
    try:
        lead, error = _resolve(identifier)
    except Exception as e:
        logger.error("Error opening results stream: %s", e, exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500
    if error:
        return error

    lead_id = lead['id']

    def events():
        try:
            for event, data in stream_scripts(lead_id):
                yield _sse(event, data)
        except Exception as e:
            logger.error("Results stream for lead %s failed: %s", lead_id, e, exc_info=True)
            yield _sse('error', {'error': 'stream interrupted'})
        yield _sse('done', {'lead_id': lead_id})

    return Response(
        stream_with_context(events()),
        mimetype='text/event-stream',
        headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'},
    )
