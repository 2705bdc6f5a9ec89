import re
from datetime import UTC, datetime

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def normalize_email(value: str) -> str:
    return value.strip().lower()


def now() -> datetime:
    return datetime.now(UTC)
