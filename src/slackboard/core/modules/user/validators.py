from slackboard.errors import ValidationError
from slackboard.utils import is_email

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def validate_email(email: str) -> None:
    if not is_email(email):
        raise ValidationError(f"Invalid email address: '{email}'")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Not blank
    - At most 72 bytes when UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if not password.strip():
        raise ValidationError("Password cannot be blank")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
