"""
Intake form validation — sanitization, email check, short hash generation.
"""
import re
import secrets
from typing import Any, Dict

MAX_TEXT_LENGTH = 1000
MAX_EMAIL_LENGTH = 254

_ENTITY_MAP = {
    '<': '&lt;',
    '>': '&gt;',
    '&': '&amp;',
    '"': '&quot;',
    "'": '&#39;',
}
_ENTITY_RE = re.compile(r'[<>&"\']')
_EMAIL_RE = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

# form key (JSON, camelCase) → (column name, max length, required)
FORM_FIELDS = [
    ('firstName',           'first_name',           50,   True),
    ('lastName',            'last_name',            50,   False),
    ('companyName',         'company_name',         100,  True),
    ('websiteUrl',          'website_url',          200,  False),
    ('email',               'email',                254,  True),
    ('businessType',        'business_type',        100,  True),
    ('businessDescription', 'business_description', 2000, True),
    ('marketingLocation',   'marketing_location',   100,  False),
    ('city',                'city',                 50,   True),
    ('country',             'country',              50,   False),
]


class ValidationError(Exception):
    """Raised when a submitted form cannot be accepted."""

    def __init__(self, message, field=None):
        self.message = message
        self.field = field
        super().__init__(message)


def sanitize_text(text: Any) -> str:
    """Trim, HTML-entity-escape, strip NUL bytes and cap length."""
    if not isinstance(text, str):
        return ''
    text = _ENTITY_RE.sub(lambda m: _ENTITY_MAP[m.group(0)], text.strip())
    return text.replace('\0', '')[:MAX_TEXT_LENGTH]


def validate_input(value: Any, max_length: int = 500) -> str:
    return sanitize_text(value)[:max_length]


def validate_email(email: Any) -> bool:
    if not isinstance(email, str):
        return False
    return bool(_EMAIL_RE.match(email)) and len(email) <= MAX_EMAIL_LENGTH


def generate_short_hash() -> str:
    """Public, non-sequential identifier for shareable results links."""
    return secrets.token_hex(16)


def validate_lead_form(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sanitize a submitted intake form.

    Accepts the camelCase keys the form posts and returns a dict keyed by
    lead column names. Optional fields that come out empty are returned as
    '' (website_url as None).

    Raises:
        ValidationError: a required field is empty after sanitization, or
                         the email is malformed.
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    form = {}
    missing = []
    for key, column, max_length, required in FORM_FIELDS:
        value = validate_input(data.get(key), max_length)
        if required and not value:
            missing.append(key)
        form[column] = value

    if missing:
        raise ValidationError(
            'All required fields must be provided and non-empty',
            field=', '.join(missing),
        )

    if not validate_email(form['email']):
        raise ValidationError('Invalid email format', field='email')

    form['website_url'] = form['website_url'] or None
    return form
