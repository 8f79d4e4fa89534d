"""
Persistence helpers — called from routes and background jobs.

Writes are wrapped in try/except so a DB error is logged and reported as
None/False to the caller instead of crashing a request or a job.
All helpers return plain dicts; ORM objects never leave this module.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from app.config import GENERATION_STATUSES, LEAD_STATUSES
from app.database import get_session
from app.models.generated_script import GeneratedScript
from app.models.lead import Lead
from app.models.user_profile import UserProfile

logger = logging.getLogger('services.db')


# ── Leads ────────────────────────────────────────────────────────────────────

def create_lead(form: Dict, short_hash: str, user_id: str = None) -> Optional[Dict]:
    """INSERT a lead from a sanitized form. Returns the lead dict or None on failure."""
    session = get_session()
    try:
        lead = Lead(
            short_hash=short_hash,
            first_name=form.get('first_name', ''),
            last_name=form.get('last_name', ''),
            company_name=form.get('company_name', ''),
            website_url=form.get('website_url'),
            email=form['email'],
            business_type=form.get('business_type', ''),
            business_description=form.get('business_description', ''),
            marketing_location=form.get('marketing_location', ''),
            city=form.get('city', ''),
            country=form.get('country', ''),
            user_id=user_id,
        )
        session.add(lead)
        session.commit()
        session.refresh(lead)
        return lead.to_dict()
    except Exception:
        session.rollback()
        logger.error("Failed to create lead for %s", form.get('email'), exc_info=True)
        return None
    finally:
        session.close()


def _find_lead(session, identifier: str) -> Optional[Lead]:
    return session.query(Lead).filter(
        or_(Lead.id == identifier, Lead.short_hash == identifier)
    ).first()


def get_lead(identifier: str) -> Optional[Dict]:
    """Look a lead up by id or by public short hash."""
    session = get_session()
    try:
        lead = _find_lead(session, identifier)
        return lead.to_dict() if lead else None
    finally:
        session.close()


def get_public_lead(identifier: str) -> Optional[Dict]:
    session = get_session()
    try:
        lead = _find_lead(session, identifier)
        return lead.to_public_dict() if lead else None
    finally:
        session.close()


def list_leads(limit: int = 100, offset: int = 0, user_id: str = None) -> List[Dict]:
    """Leads newest first, each with its script count."""
    session = get_session()
    try:
        counts = (
            session.query(GeneratedScript.lead_id, func.count(GeneratedScript.id).label('n'))
            .group_by(GeneratedScript.lead_id)
            .subquery()
        )
        query = (
            session.query(Lead, counts.c.n)
            .outerjoin(counts, counts.c.lead_id == Lead.id)
            .order_by(Lead.created_at.desc(), Lead.id)
        )
        if user_id:
            query = query.filter(Lead.user_id == user_id)
        rows = query.offset(offset).limit(limit).all()
        return [{**lead.to_dict(), 'script_count': n or 0} for lead, n in rows]
    finally:
        session.close()


def attach_crm_contact(lead_id: str, contact_id: str) -> bool:
    """Store the external CRM contact id on a lead."""
    return _update_lead(lead_id, ghl_contact_id=contact_id)


def set_generation_status(lead_id: str, status: str) -> bool:
    if status not in GENERATION_STATUSES:
        raise ValueError(f"Unknown generation status: {status}")
    return _update_lead(lead_id, generation_status=status)


def update_lead_status(lead_id: str, status: str) -> Optional[Dict]:
    """Admin status edit. Returns the updated lead, or None if it does not exist."""
    if status not in LEAD_STATUSES:
        raise ValueError(f"Unknown lead status: {status}. Allowed: {LEAD_STATUSES}")
    if not _update_lead(lead_id, status=status):
        return None
    return get_lead(lead_id)


def _update_lead(lead_id: str, **fields) -> bool:
    session = get_session()
    try:
        lead = session.get(Lead, lead_id)
        if lead is None:
            logger.warning("Lead %s not found for update %s", lead_id, sorted(fields))
            return False
        for name, value in fields.items():
            setattr(lead, name, value)
        session.commit()
        return True
    except Exception:
        session.rollback()
        logger.error("Failed to update lead %s", lead_id, exc_info=True)
        return False
    finally:
        session.close()


# ── Generated scripts ────────────────────────────────────────────────────────

def insert_script(lead_id: str, title: str, script_body: str, order_index: int) -> Optional[Dict]:
    """
    INSERT one generated script row.

    Returns the row dict, or None when the insert fails (including a
    duplicate (lead_id, order_index)).
    """
    session = get_session()
    try:
        script = GeneratedScript(
            lead_id=lead_id,
            title=title,
            script_body=script_body,
            order_index=order_index,
        )
        session.add(script)
        session.commit()
        session.refresh(script)
        return script.to_dict()
    except IntegrityError:
        session.rollback()
        logger.warning("Script %d already exists for lead %s", order_index, lead_id)
        return None
    except Exception:
        session.rollback()
        logger.error("Failed to save script %d for lead %s", order_index, lead_id, exc_info=True)
        return None
    finally:
        session.close()


def list_scripts(lead_id: str, order_by: str = 'order_index') -> List[Dict]:
    """Scripts for a lead, by position (default) or by creation time."""
    session = get_session()
    try:
        query = session.query(GeneratedScript).filter_by(lead_id=lead_id)
        if order_by == 'created_at':
            query = query.order_by(GeneratedScript.created_at, GeneratedScript.order_index)
        else:
            query = query.order_by(GeneratedScript.order_index)
        return [s.to_dict() for s in query.all()]
    finally:
        session.close()


def existing_order_indexes(lead_id: str) -> set:
    session = get_session()
    try:
        rows = session.query(GeneratedScript.order_index).filter_by(lead_id=lead_id).all()
        return {row[0] for row in rows}
    finally:
        session.close()


# ── User profiles ────────────────────────────────────────────────────────────

def list_user_profiles() -> List[Dict]:
    session = get_session()
    try:
        profiles = session.query(UserProfile).order_by(UserProfile.created_at.desc(), UserProfile.id).all()
        return [p.to_dict() for p in profiles]
    finally:
        session.close()


def get_user_profile(user_id: str) -> Optional[Dict]:
    session = get_session()
    try:
        profile = session.get(UserProfile, user_id)
        return profile.to_dict() if profile else None
    finally:
        session.close()


def toggle_admin(user_id: str) -> Optional[Dict]:
    """Flip a user's admin flag. Returns the updated profile, or None if missing/failed."""
    session = get_session()
    try:
        profile = session.get(UserProfile, user_id)
        if profile is None:
            return None
        profile.is_admin = not profile.is_admin
        session.commit()
        session.refresh(profile)
        logger.info("User %s admin flag set to %s", user_id, profile.is_admin)
        return profile.to_dict()
    except Exception:
        session.rollback()
        logger.error("Failed to toggle admin flag for user %s", user_id, exc_info=True)
        return None
    finally:
        session.close()


# ── Stats ────────────────────────────────────────────────────────────────────

def get_stats() -> Dict:
    """Counts for the admin dashboard."""
    session = get_session()
    try:
        by_status = dict(
            session.query(Lead.generation_status, func.count(Lead.id))
            .group_by(Lead.generation_status).all()
        )
        admins = session.query(func.count(UserProfile.id)).filter(UserProfile.is_admin.is_(True)).scalar()
        users = session.query(func.count(UserProfile.id)).scalar()
        return {
            'total_leads': session.query(func.count(Lead.id)).scalar() or 0,
            'total_scripts': session.query(func.count(GeneratedScript.id)).scalar() or 0,
            'generation_status': {s: by_status.get(s, 0) for s in GENERATION_STATUSES},
            'admin_users': admins or 0,
            'pending_users': (users or 0) - (admins or 0),
        }
    finally:
        session.close()
