"""
Admin routes — lead + user listings, lead status edits, admin flag toggle.

All paths live under /admin and sit behind the password session gate in create_app().
"""
import logging
from flask import Blueprint, request, jsonify

from app.config import LEAD_STATUSES
from app.services.db import (
    get_lead, list_leads, list_scripts, update_lead_status,
    list_user_profiles, get_user_profile, toggle_admin, get_stats,
)

logger = logging.getLogger('routes.admin')

bp = Blueprint('admin', __name__, url_prefix='/admin')


def _int_arg(name, default, maximum=None):
    try:
        value = int(request.args.get(name, default))
    except (TypeError, ValueError):
        value = default
    value = max(0, value)
    return min(value, maximum) if maximum else value


@bp.route('/api/stats')
def stats():
    """Dashboard counters."""
    try:
        return jsonify(get_stats())
    except Exception as e:
        logger.error("Error generating admin stats: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


# ── Leads ────────────────────────────────────────────────────────────────────

@bp.route('/api/leads')
def leads():
    """All leads, newest first, with script counts."""
    limit = _int_arg('limit', 100, maximum=500)
    offset = _int_arg('offset', 0)
    return jsonify({'leads': list_leads(limit=limit, offset=offset), 'limit': limit, 'offset': offset})


@bp.route('/api/leads/<lead_id>')
def lead_detail(lead_id):
    """One lead with its scripts in the order they were generated."""
    lead = get_lead(lead_id)
    if lead is None:
        return jsonify({'error': 'Lead not found'}), 404
    return jsonify({'lead': lead, 'scripts': list_scripts(lead['id'], order_by='created_at')})


@bp.route('/api/leads/<lead_id>', methods=['PATCH'])
def edit_lead(lead_id):
    """Change a lead's admin status (new / contacted / qualified / closed)."""
    data = request.get_json(silent=True) or {}
    status = data.get('status')
    if status not in LEAD_STATUSES:
        return jsonify({'error': f'status must be one of {LEAD_STATUSES}'}), 400

    existing = get_lead(lead_id)
    if existing is None:
        return jsonify({'error': 'Lead not found'}), 404

    lead = update_lead_status(existing['id'], status)
    if lead is None:
        return jsonify({'error': 'Failed to update lead status'}), 500
    logger.info("Lead %s status set to %s", lead_id, status)
    return jsonify({'lead': lead})


# ── Users ────────────────────────────────────────────────────────────────────

@bp.route('/api/users')
def users():
    profiles = list_user_profiles()
    admins = sum(1 for p in profiles if p['is_admin'])
    return jsonify({
        'users': profiles,
        'total': len(profiles),
        'admins': admins,
        'pending': len(profiles) - admins,
    })


@bp.route('/api/users/<user_id>')
def user_detail(user_id):
    """Profile + the leads this user submitted + those leads' scripts."""
    profile = get_user_profile(user_id)
    if profile is None:
        return jsonify({'error': 'User not found'}), 404

    user_leads = list_leads(user_id=user_id)
    scripts = []
    for lead in user_leads:
        scripts.extend(list_scripts(lead['id'], order_by='created_at'))
    return jsonify({'user': profile, 'leads': user_leads, 'scripts': scripts})


@bp.route('/api/users/<user_id>/toggle-admin', methods=['POST'])
def toggle_user_admin(user_id):
    """Promote or demote a user."""
    if get_user_profile(user_id) is None:
        return jsonify({'error': 'User not found'}), 404

    profile = toggle_admin(user_id)
    if profile is None:
        return jsonify({'error': 'Failed to update admin status'}), 500
    return jsonify({'ok': True, 'user': profile})
