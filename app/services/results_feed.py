"""
Results feed — per-lead change feed over Redis pub/sub.

The generator publishes every inserted script (and each generation status
change) on channel `scripts:<lead_id>`. Readers subscribe *before* reading
the rows that already exist, so nothing inserted in between is missed; the
overlap is removed by de-duplicating on script id.

Delivery is at-least-once for subscribers that are connected; publish
failures are logged and never affect generation.
"""
import json
import logging
import time
from typing import Dict, Iterator, List, Tuple

from app.config import SCRIPT_COUNT, RESULTS_STREAM_TIMEOUT
from app.extensions import redis_client as r
from app.services.db import list_scripts, get_lead

logger = logging.getLogger('services.results_feed')

TERMINAL_STATUSES = ('completed', 'failed')


def channel_for(lead_id: str) -> str:
    return f'scripts:{lead_id}'


def _publish(lead_id: str, payload: Dict):
    try:
        r.publish(channel_for(lead_id), json.dumps(payload, default=str))
    except Exception as e:
        logger.warning("Failed to publish %s event for lead %s: %s", payload.get('type'), lead_id, e)


def publish_script(lead_id: str, script: Dict):
    _publish(lead_id, {'type': 'script', 'script': script})


def publish_status(lead_id: str, status: str):
    _publish(lead_id, {'type': 'status', 'status': status})


class ScriptFeed:
    """Ordered, de-duplicated view of a lead's scripts as they arrive."""

    def __init__(self):
        self._by_id: Dict[str, Dict] = {}

    def add(self, script: Dict) -> bool:
        """Add a script; returns False if its id was already seen."""
        script_id = script.get('id')
        if not script_id or script_id in self._by_id:
            return False
        self._by_id[script_id] = script
        return True

    def extend(self, scripts) -> List[Dict]:
        """Add many; returns only the ones that were new."""
        return [s for s in scripts if self.add(s)]

    @property
    def scripts(self) -> List[Dict]:
        return sorted(self._by_id.values(), key=lambda s: s.get('order_index', 0))

    def __len__(self):
        return len(self._by_id)


def stream_scripts(
    lead_id: str,
    expected: int = SCRIPT_COUNT,
    timeout: int = RESULTS_STREAM_TIMEOUT,
    poll_interval: float = 1.0,
) -> Iterator[Tuple[str, Dict]]:
    """
    Yield ('script', script) for every not-yet-seen script of a lead, then
    ('status', {...}) events as generation progresses.

    Stops when generation reaches a terminal status, when `expected` scripts
    have been seen, or after `timeout` seconds.
    """
    feed = ScriptFeed()
    pubsub = None
    try:
        pubsub = r.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(channel_for(lead_id))
    except Exception as e:
        logger.warning("Live feed unavailable for lead %s, serving snapshot only: %s", lead_id, e)
        pubsub = None

    try:
        for script in feed.extend(list_scripts(lead_id)):
            yield 'script', script

        lead = get_lead(lead_id)
        status = lead['generation_status'] if lead else 'failed'
        if pubsub is None or status in TERMINAL_STATUSES or len(feed) >= expected:
            yield 'status', {'status': status, 'count': len(feed)}
            return

        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            message = pubsub.get_message(timeout=poll_interval)
            if not message or message.get('type') != 'message':
                continue
            try:
                payload = json.loads(message['data'])
            except (TypeError, ValueError):
                logger.warning("Dropping malformed feed message for lead %s", lead_id)
                continue

            if payload.get('type') == 'script':
                script = payload.get('script') or {}
                if feed.add(script):
                    yield 'script', script
                if len(feed) >= expected:
                    yield 'status', {'status': 'completed', 'count': len(feed)}
                    return
            elif payload.get('type') == 'status':
                status = payload.get('status')
                yield 'status', {'status': status, 'count': len(feed)}
                if status in TERMINAL_STATUSES:
                    return

        logger.info("Results stream for lead %s timed out after %ds", lead_id, timeout)
        yield 'status', {'status': 'timeout', 'count': len(feed)}
    finally:
        if pubsub is not None:
            try:
                pubsub.close()
            except Exception:
                logger.debug("Error closing pubsub for lead %s", lead_id, exc_info=True)
