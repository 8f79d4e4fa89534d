"""
CRM sync job — best-effort push of a new lead into GoHighLevel.

Failure here is logged and swallowed; it never affects script generation or
the response already sent to the visitor.
"""
import logging
from typing import Dict

from app.config import GOHIGHLEVEL_WORKFLOW_ID
from app.services import gohighlevel
from app.services.db import get_lead, attach_crm_contact

logger = logging.getLogger('pipeline.crm')


def sync_lead_to_crm(lead_id: str, form: Dict, workflow_id: str = None):
    """
    Create a CRM contact for the lead, store its id, optionally enroll it in a workflow.

    Returns the CRM contact id, or None when skipped or failed.
    """
    if not gohighlevel.is_configured():
        logger.info("GoHighLevel integration not configured — skipping lead %s", lead_id)
        return None

    workflow_id = workflow_id or GOHIGHLEVEL_WORKFLOW_ID
    try:
        lead = get_lead(lead_id)
        if lead is None:
            logger.warning("Lead %s not found — CRM sync skipped", lead_id)
            return None

        contact_id = gohighlevel.create_contact(lead, form)
        if not attach_crm_contact(lead_id, contact_id):
            logger.warning("Could not store CRM contact %s on lead %s", contact_id, lead_id)

        if workflow_id:
            gohighlevel.add_contact_to_workflow(contact_id, workflow_id)

        logger.info("Lead %s synced to GoHighLevel as %s", lead_id, contact_id)
        return contact_id
    except Exception as e:
        logger.error("Error adding lead %s to GoHighLevel: %s", lead_id, e, exc_info=True)
        return None
