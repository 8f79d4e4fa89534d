"""
Pipeline Manager — hands a new lead to the background workers.

Two independent RQ jobs per lead:
  generate_scripts  → titles + scripts, persisted and published as they finish
  sync_lead_to_crm  → best-effort GoHighLevel contact + workflow

The intake request only enqueues; it never waits for either job. Workers run
with `rq worker --with-scheduler` so the generation Retry intervals fire.
"""
import logging
from typing import Dict

from app.config import GENERATION_JOB_TIMEOUT, GENERATION_JOB_RETRIES
from app.pipeline.crm import sync_lead_to_crm
from app.pipeline.generator import generate_scripts

logger = logging.getLogger('pipeline.manager')


# ── Lazy RQ queue (avoids import-time Redis connection) ───────────────────

_queue = None

def _get_queue():
    global _queue
    if _queue is None:
        from app.extensions import redis_client
        from rq import Queue
        _queue = Queue(connection=redis_client)
    return _queue


def _retry_policy():
    if GENERATION_JOB_RETRIES <= 0:
        return None
    from rq import Retry
    return Retry(max=GENERATION_JOB_RETRIES, interval=[30, 120])


# ── Public API ────────────────────────────────────────────────────────────────

def launch_lead_jobs(lead: Dict, form: Dict) -> Dict[str, str]:
    """
    Enqueue script generation and CRM sync for a freshly created lead.

    Returns {'generation': job_id, 'crm': job_id} for the jobs that were
    enqueued. Enqueue failures are logged and never raised: the visitor's
    lead is already saved.
    """
    jobs = {}
    lead_id = lead['id']

    try:
        job = _get_queue().enqueue(
            generate_scripts, lead_id, form,
            job_timeout=GENERATION_JOB_TIMEOUT,
            retry=_retry_policy(),
            description=f'generate_scripts:{lead_id}',
        )
        jobs['generation'] = job.id
        logger.info("Enqueued script generation for lead %s (job %s)", lead_id, job.id,
                    extra={'lead_id': lead_id, 'job_id': job.id})
    except Exception as e:
        logger.error("Error enqueuing script generation for lead %s: %s", lead_id, e,
                     exc_info=True, extra={'lead_id': lead_id})

    try:
        job = _get_queue().enqueue(
            sync_lead_to_crm, lead_id, form,
            job_timeout=120,
            description=f'sync_lead_to_crm:{lead_id}',
        )
        jobs['crm'] = job.id
    except Exception as e:
        logger.error("Error enqueuing CRM sync for lead %s: %s", lead_id, e,
                     exc_info=True, extra={'lead_id': lead_id})

    return jobs
