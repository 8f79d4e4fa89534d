"""
LLM helpers — title + script prompts for the chat-completion API, with retry logic.
"""
import logging
import re
import time
from typing import Dict, List

from app.config import (
    LLM_MODEL, LLM_TEMPERATURE, LLM_MAX_ATTEMPTS, LLM_BACKOFF_SECONDS,
)
from app.extensions import openai_client as client

logger = logging.getLogger('services.openai')

_NUMBERED_LINE = re.compile(r'^\d+\.')
_NUMBER_PREFIX = re.compile(r'^\d+\.\s*')


class LLMError(Exception):
    """Raised when every attempt at a chat completion has failed."""


def chat_completion(prompt: str, attempts: int = LLM_MAX_ATTEMPTS) -> str:
    """
    Send a single-message prompt and return the reply text.

    Any exception from the SDK (non-2xx status, timeout, connection error)
    or an empty reply counts as a failed attempt. Waits
    LLM_BACKOFF_SECONDS * attempt between attempts.
    """
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            if client is None:
                raise LLMError('LLM client is not configured (OPENROUTER_API_KEY missing)')
            response = client.chat.completions.create(
                model=LLM_MODEL,
                messages=[{'role': 'user', 'content': prompt}],
                temperature=LLM_TEMPERATURE,
            )
            content = response.choices[0].message.content
            if not content:
                raise LLMError('Empty completion content')
            return content
        except Exception as e:
            last_error = e
            logger.warning("LLM call attempt %d/%d failed: %s", attempt, attempts, e)
            if attempt < attempts:
                time.sleep(LLM_BACKOFF_SECONDS * attempt)

    logger.error("LLM call failed after %d attempts", attempts)
    raise LLMError(f'All {attempts} LLM call attempts failed: {last_error}') from last_error


# ── Prompts ──────────────────────────────────────────────────────────────────

def build_titles_prompt(form: Dict, count: int) -> str:
    return f"""Act as a market research expert. For a {form['business_type']} in {form['city']} that offers these services: {form['business_description']} plus any other core services offered by this type of business, find and list the top {count} questions their potential customers are typing into Google when they are looking to purchase. The questions should be phrased as compelling video titles that are SEO optimized.

Return only a numbered list of {count} titles, one per line, in this exact format:
1. [Title]
2. [Title]
...
{count}. [Title]"""


def build_script_prompt(title: str, form: Dict) -> str:
    company = form['company_name']
    return f"""You are an expert YouTube scriptwriter for a {form['business_type']} named {company} located in {form['city']}. Your task is to write a high-quality, 1-2 minute video script for the title: '{title}'.

Step 1: Research. Gather the most accurate, compelling, and up-to-date information on the topic '{title}'. Synthesize it into the core teaching points for the script.

Step 2: Write the Script. The script must be structured with the following distinct sections:

Teaser (QQPP Method): Start with the QQPP (Question, Question, Promise, Preview) method to create a powerful hook.
- Question 1: Ask a direct question that speaks to the viewer's pain point.
- Question 2: Ask a second, related question to confirm they are in the right place.
- Promise: State the value the viewer will get from watching the video.
- Preview: Briefly mention the key points you will cover.

Introduction: The presenter introduces themselves and the topic, setting expectations for the video. Their name is {form['first_name']} and they are from the company {company}.

Teaching Segments: Break the main content into 2-3 clear, educational segments. Each segment should teach one key aspect of the topic. Use simple language and provide actionable advice.

Summary: Briefly summarize the key teaching points covered in the video.

Call to Action (CTA): End with a clear, direct call to action: 'For more advice on this, contact {company} today for a free consultation.'

Return only the words the presenter will read. No headings, no stage directions, no comments. The text goes straight into a teleprompter."""


# ── Parsing ──────────────────────────────────────────────────────────────────

def parse_titles(text: str, count: int) -> List[str]:
    """Extract up to `count` titles from 'N. Title' lines, in original order."""
    titles = []
    for line in (text or '').splitlines():
        line = line.strip()
        if not _NUMBERED_LINE.match(line):
            continue
        title = _NUMBER_PREFIX.sub('', line).strip()
        if title:
            titles.append(title)
    return titles[:count]


# ── Generation steps ─────────────────────────────────────────────────────────

def generate_titles(form: Dict, count: int) -> List[str]:
    """Ask for `count` numbered video titles and parse them."""
    response = chat_completion(build_titles_prompt(form, count))
    titles = parse_titles(response, count)
    if len(titles) < count:
        logger.warning("Only generated %d titles instead of %d", len(titles), count)
    return titles


def generate_script_body(title: str, form: Dict) -> str:
    """Expand one title into a spoken-video script body."""
    return chat_completion(build_script_prompt(title, form)).strip()
