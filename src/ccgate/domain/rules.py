"""Rule normalization, validation, and the persisted RuleSet shape.

A rule maps an email domain to the admin address that must be CC'd on
tickets from that domain.  The persisted form is a JSON object
``{"acme.com": "erin@acme.com"}``; that shape is the only wire contract.

INVARIANT: Every RuleSet key is a normalized domain and every value a
normalized email.  Normalization happens on write and again on read.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

RuleSet = dict[str, str]

INVALID_DOMAIN_MESSAGE = 'Enter a valid domain like "acme.com".'
INVALID_EMAIL_MESSAGE = "Enter a valid admin email."


class RuleValidationError(ValueError):
    """Raised when a domain or admin email fails its shape check."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def normalize_domain(value: str | None) -> str:
    """Trim, lowercase, and drop a single leading ``@``.

    Examples:
        >>> normalize_domain("  @ACME.com ")
        'acme.com'
        >>> normalize_domain(None)
        ''
    """
    text = (value or "").strip().lower()
    if text.startswith("@"):
        text = text[1:]
    return text


def normalize_email(value: str | None) -> str:
    """Trim and lowercase an email address."""
    return (value or "").strip().lower()


def domain_of(email: str | None) -> str | None:
    """Return the part of *email* after the first ``@``, or None.

    Examples:
        >>> domain_of("bob@acme.com")
        'acme.com'
        >>> domain_of("odd@name@acme.com")
        'name@acme.com'
        >>> domain_of("nobody") is None
        True
    """
    if not email or "@" not in email:
        return None
    return email.split("@", 1)[1]


def is_valid_email(email: str) -> bool:
    """Exactly one ``@`` with non-empty local and domain parts."""
    if email.count("@") != 1:
        return False
    local, _, domain = email.partition("@")
    return bool(local) and bool(domain)


def validate_rule(domain: str, email: str) -> str | None:
    """Return an error message for an invalid (normalized) pair, else None."""
    if not domain or "." not in domain:
        return INVALID_DOMAIN_MESSAGE
    if not email or not is_valid_email(email):
        return INVALID_EMAIL_MESSAGE
    return None


class Rule(BaseModel):
    """A single domain → required admin association."""

    model_config = {"frozen": True}

    domain: str
    admin_email: str

    @classmethod
    def create(cls, domain: str | None, email: str | None) -> Rule:
        """Normalize and validate raw input, raising RuleValidationError."""
        norm_domain = normalize_domain(domain)
        norm_email = normalize_email(email)
        message = validate_rule(norm_domain, norm_email)
        if message == INVALID_DOMAIN_MESSAGE:
            raise RuleValidationError("domain", message)
        if message is not None:
            raise RuleValidationError("email", message)
        return cls(domain=norm_domain, admin_email=norm_email)


def normalize_ruleset(data: Any) -> RuleSet:
    """Coerce an arbitrary decoded payload into a normalized RuleSet.

    Non-object payloads become ``{}``; entries whose key or value is not a
    string are dropped.
    """
    if not isinstance(data, dict):
        return {}
    ruleset: RuleSet = {}
    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str):
            continue
        domain = normalize_domain(key)
        if domain:
            ruleset[domain] = normalize_email(value)
    return ruleset


def parse_ruleset(raw: str | None) -> RuleSet:
    """Decode the persisted JSON form.  Malformed input yields ``{}``."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return normalize_ruleset(data)


def dump_ruleset(ruleset: RuleSet) -> str:
    """Encode a RuleSet in its persisted JSON form."""
    return json.dumps(ruleset, sort_keys=True, separators=(",", ":"))
