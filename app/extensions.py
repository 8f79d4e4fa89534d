"""
Shared client instances — Redis, OpenAI (pointed at OpenRouter).

Importing this module is always safe: redis-py connects lazily on first
command and the LLM client is only built when an API key is present.
"""
import logging
import redis

from app.config import REDIS_URL, OPENROUTER_API_KEY, LLM_BASE_URL

logger = logging.getLogger('app.extensions')

# ── Redis ─────────────────────────────────────────────────────────────────────
redis_client = redis.from_url(REDIS_URL, decode_responses=True)

# ── OpenAI-compatible LLM client ─────────────────────────────────────────────
# SDK-level retries are disabled; services.openai_client owns the retry policy.
openai_client = None
if OPENROUTER_API_KEY:
    try:
        from openai import OpenAI
        openai_client = OpenAI(api_key=OPENROUTER_API_KEY, base_url=LLM_BASE_URL, max_retries=0)
        logger.info("LLM client initialized for %s", LLM_BASE_URL)
    except Exception as e:
        logger.error("Error initializing LLM client: %s", e)
else:
    logger.warning("OPENROUTER_API_KEY not set — script generation will fail")
