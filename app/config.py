"""
Centralized configuration — all env vars, limits, generation settings.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── LLM (OpenRouter, OpenAI-compatible) ──────────────────────────────────────
OPENROUTER_API_KEY = os.getenv('OPENROUTER_API_KEY')
LLM_BASE_URL = os.getenv('LLM_BASE_URL', 'https://openrouter.ai/api/v1')
LLM_MODEL = os.getenv('LLM_MODEL', 'openai/gpt-4.1-mini')
LLM_TEMPERATURE = float(os.getenv('LLM_TEMPERATURE', '0.7'))
LLM_MAX_ATTEMPTS = int(os.getenv('LLM_MAX_ATTEMPTS', '3'))
LLM_BACKOFF_SECONDS = float(os.getenv('LLM_BACKOFF_SECONDS', '1.0'))

# ── Script generation ────────────────────────────────────────────────────────
SCRIPT_COUNT = int(os.getenv('SCRIPT_COUNT', '5'))
SCRIPT_DELAY_SECONDS = float(os.getenv('SCRIPT_DELAY_SECONDS', '0.1'))
PLACEHOLDER_SCRIPT_BODY = 'Script generation failed. Please contact support.'
GENERATION_JOB_TIMEOUT = int(os.getenv('GENERATION_JOB_TIMEOUT', '1800'))
GENERATION_JOB_RETRIES = int(os.getenv('GENERATION_JOB_RETRIES', '2'))

# ── GoHighLevel CRM ──────────────────────────────────────────────────────────
GOHIGHLEVEL_API_KEY = os.getenv('GOHIGHLEVEL_API_KEY')
GOHIGHLEVEL_LOCATION_ID = os.getenv('GOHIGHLEVEL_LOCATION_ID')
GOHIGHLEVEL_WORKFLOW_ID = os.getenv('GOHIGHLEVEL_WORKFLOW_ID')
GOHIGHLEVEL_API_URL = os.getenv('GOHIGHLEVEL_API_URL', 'https://services.leadconnectorhq.com')
GOHIGHLEVEL_API_VERSION = os.getenv('GOHIGHLEVEL_API_VERSION', '2021-07-28')
CRM_SOURCE = os.getenv('CRM_SOURCE', 'Transformo AI Content Strategist')

# ── Rate limiting ────────────────────────────────────────────────────────────
RATE_LIMIT_STORAGE = os.getenv('RATE_LIMIT_STORAGE', 'redis')
GENERATE_RATE_LIMIT = int(os.getenv('GENERATE_RATE_LIMIT', '5'))
GENERATE_RATE_WINDOW = int(os.getenv('GENERATE_RATE_WINDOW', str(15 * 60)))
RESULTS_RATE_LIMIT = int(os.getenv('RESULTS_RATE_LIMIT', '60'))
RESULTS_RATE_WINDOW = int(os.getenv('RESULTS_RATE_WINDOW', '60'))

# ── Results stream ───────────────────────────────────────────────────────────
RESULTS_STREAM_TIMEOUT = int(os.getenv('RESULTS_STREAM_TIMEOUT', '300'))

# ── Auth ─────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

# ── Status values ────────────────────────────────────────────────────────────
GENERATION_STATUSES = [
    'pending',
    'generating',
    'completed',
    'failed',
]

LEAD_STATUSES = [
    'new',
    'contacted',
    'qualified',
    'closed',
]
