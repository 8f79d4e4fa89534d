"""
Script generator — turns one lead into SCRIPT_COUNT titled video scripts.

Runs as an RQ job (see pipeline.manager):
  TITLES → for each title, in order: SCRIPT BODY → INSERT ROW → PUBLISH

Titles are expanded strictly one after another with a small delay between
calls to stay under the provider's rate limit. A failed title gets a
placeholder row instead of aborting the batch; each row is inserted as soon
as it exists so readers see partial progress.
"""
import logging
import time
from dataclasses import dataclass
from typing import Dict

from rq import get_current_job

from app.config import SCRIPT_COUNT, SCRIPT_DELAY_SECONDS, PLACEHOLDER_SCRIPT_BODY
from app.services.db import insert_script, set_generation_status, existing_order_indexes
from app.services.openai_client import generate_titles, generate_script_body
from app.services.results_feed import publish_script, publish_status

logger = logging.getLogger('pipeline.generator')


class GenerationError(Exception):
    """Raised when a run ends without a row for every title; RQ may retry the job."""


@dataclass
class GenerationResult:
    titles: int = 0
    generated: int = 0
    placeholders: int = 0
    skipped: int = 0
    failed_inserts: int = 0


def _mark(lead_id: str, status: str):
    set_generation_status(lead_id, status)
    publish_status(lead_id, status)


def _failure_status() -> str:
    """'pending' while RQ still has a retry queued for this job, else 'failed'."""
    job = get_current_job()
    if job is not None and job.retries_left:
        return 'pending'
    return 'failed'


def generate_scripts(lead_id: str, form: Dict, count: int = SCRIPT_COUNT,
                     delay: float = SCRIPT_DELAY_SECONDS) -> GenerationResult:
    """
    Generate and persist up to `count` scripts for a lead.

    Positions already stored for the lead are skipped, so a retried job only
    fills in what is missing.

    Raises:
        GenerationError: the titles step failed or parsed nothing, or some
                         positions could not be saved. The lead is left
                         'pending' while RQ has a retry queued, 'failed' on
                         the last attempt.
    """
    log_extra = {'lead_id': lead_id}
    logger.info("Starting script generation for lead %s (%d scripts)", lead_id, count, extra=log_extra)
    _mark(lead_id, 'generating')

    try:
        titles = generate_titles(form, count)
    except Exception as e:
        logger.error("Title generation failed for lead %s: %s", lead_id, e, extra=log_extra)
        _mark(lead_id, _failure_status())
        raise GenerationError(f"Title generation failed for lead {lead_id}") from e

    if not titles:
        logger.error("No parsable titles for lead %s", lead_id, extra=log_extra)
        _mark(lead_id, _failure_status())
        raise GenerationError(f"No titles parsed for lead {lead_id}")

    result = GenerationResult(titles=len(titles))
    already_saved = existing_order_indexes(lead_id)

    for i, title in enumerate(titles):
        order_index = i + 1
        if order_index in already_saved:
            result.skipped += 1
            continue

        try:
            body = generate_script_body(title, form)
            placeholder = False
        except Exception as e:
            logger.error("Error generating script for title %r: %s", title, e,
                         extra={**log_extra, 'order_index': order_index})
            body = PLACEHOLDER_SCRIPT_BODY
            placeholder = True

        script = insert_script(lead_id, title, body, order_index)
        if script is None:
            result.failed_inserts += 1
        else:
            if placeholder:
                result.placeholders += 1
            else:
                result.generated += 1
                logger.info("Saved script %d: %s", order_index, title,
                            extra={**log_extra, 'order_index': order_index})
            publish_script(lead_id, script)

        if i < len(titles) - 1 and delay:
            time.sleep(delay)

    if result.failed_inserts:
        # A duplicate-position insert means another run already saved that row
        missing = set(range(1, len(titles) + 1)) - existing_order_indexes(lead_id)
        if missing:
            logger.error("Lead %s is missing scripts at positions %s", lead_id, sorted(missing),
                         extra=log_extra)
            _mark(lead_id, _failure_status())
            raise GenerationError(f"Could not save scripts {sorted(missing)} for lead {lead_id}")

    _mark(lead_id, 'completed')
    logger.info(
        "Generation complete for lead %s — %d generated, %d placeholders, %d skipped, %d insert failures",
        lead_id, result.generated, result.placeholders, result.skipped, result.failed_inserts,
        extra=log_extra,
    )
    return result
