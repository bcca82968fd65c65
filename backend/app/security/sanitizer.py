"""Input sanitizing and injection pattern detection."""

import re

SQL_INJECTION_PATTERN = re.compile(
    r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|EXECUTE|UNION|SCRIPT)\b",
    re.IGNORECASE,
)
XSS_PATTERN = re.compile(r"<[^>]*>|javascript:|on\w+\s*=", re.IGNORECASE)
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

MAX_EMAIL_LENGTH = 255


class InputSanitizer:
    """Normalizes free-text input and flags suspicious payloads."""

    def sanitize_string(self, value: str | None) -> str:
        """Trim and drop control characters; None and blanks become ""."""
        if value is None or not value.strip():
            return ""
        return CONTROL_CHARS.sub("", value.strip())

    def is_valid_email(self, email: str | None) -> bool:
        if not email or not email.strip():
            return False
        return bool(EMAIL_PATTERN.match(email)) and len(email) <= MAX_EMAIL_LENGTH

    def contains_sql_injection(self, value: str | None) -> bool:
        if not value or not value.strip():
            return False
        return SQL_INJECTION_PATTERN.search(value) is not None

    def contains_xss(self, value: str | None) -> bool:
        if not value or not value.strip():
            return False
        return XSS_PATTERN.search(value) is not None

    def is_suspicious(self, *values: str | None) -> bool:
        """True when any value matches an injection pattern."""
        return any(self.contains_sql_injection(v) or self.contains_xss(v) for v in values)
