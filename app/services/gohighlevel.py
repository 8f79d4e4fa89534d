"""
GoHighLevel (LeadConnector) contacts + workflow enrollment.
"""
import logging
from typing import Dict

import requests

from app.config import (
    GOHIGHLEVEL_API_KEY, GOHIGHLEVEL_LOCATION_ID, GOHIGHLEVEL_API_URL,
    GOHIGHLEVEL_API_VERSION, CRM_SOURCE,
)

logger = logging.getLogger('services.gohighlevel')


class CRMError(Exception):
    """Raised when the CRM rejects a request."""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


def is_configured() -> bool:
    return bool(GOHIGHLEVEL_API_KEY and GOHIGHLEVEL_LOCATION_ID)


def _headers() -> Dict[str, str]:
    return {
        'Authorization': f'Bearer {GOHIGHLEVEL_API_KEY}',
        'Content-Type': 'application/json',
        'Version': GOHIGHLEVEL_API_VERSION,
    }


def build_contact_payload(lead: Dict, form: Dict) -> Dict:
    return {
        'firstName': lead.get('first_name', ''),
        'lastName': lead.get('last_name') or '',
        'email': lead.get('email', ''),
        'companyName': lead.get('company_name', ''),
        'city': lead.get('city', ''),
        'country': lead.get('country') or None,
        'website': lead.get('website_url') or None,
        'source': CRM_SOURCE,
        'locationId': GOHIGHLEVEL_LOCATION_ID,
        'customFields': [
            {'key': 'business_type', 'field_value': form.get('business_type', '')},
            {'key': 'business_description', 'field_value': form.get('business_description', '')},
        ],
    }


def create_contact(lead: Dict, form: Dict) -> str:
    """Create a CRM contact for a lead and return its contact id."""
    payload = {k: v for k, v in build_contact_payload(lead, form).items() if v is not None}
    resp = requests.post(
        f"{GOHIGHLEVEL_API_URL}/contacts/",
        headers=_headers(),
        json=payload,
        timeout=15,
    )
    if not resp.ok:
        logger.error("GoHighLevel contact creation failed: %d — %s", resp.status_code, resp.text[:200])
        raise CRMError(f"Contact creation failed: {resp.status_code}", status_code=resp.status_code)

    contact_id = (resp.json().get('contact') or {}).get('id')
    if not contact_id:
        raise CRMError("Contact creation response had no contact id", status_code=resp.status_code)
    return contact_id


def add_contact_to_workflow(contact_id: str, workflow_id: str) -> bool:
    """Enroll a contact in a marketing workflow. Returns True on success."""
    resp = requests.post(
        f"{GOHIGHLEVEL_API_URL}/contacts/{contact_id}/workflow/{workflow_id}",
        headers=_headers(),
        timeout=15,
    )
    if not resp.ok:
        logger.error("Failed to add contact %s to workflow %s: %d", contact_id, workflow_id, resp.status_code)
        return False
    logger.info("Added contact %s to workflow %s", contact_id, workflow_id)
    return True
