"""
Email Builders and Validation

Builders stamp a category (email type) and the fields that category needs
onto an Email, so callers cannot forget them:

- welcome: requires link (verification link)
- password_reset: requires link (reset or magic login link)
- transactional: no additional fields required
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from rabbit_mailer.errors import ErrorKind
from rabbit_mailer.providers.email_adapter import Address, Email


class EmailType(str, Enum):
    WELCOME = 'welcome'
    PASSWORD_RESET = 'password_reset'
    TRANSACTIONAL = 'transactional'


REQUIRED_FIELDS: Dict[EmailType, Tuple[str, ...]] = {
    EmailType.WELCOME: ('link',),
    EmailType.PASSWORD_RESET: ('link',),
    EmailType.TRANSACTIONAL: (),
}


@dataclass
class ValidationResult:
    valid: bool
    email: Optional[Email] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


def _require_link(link) -> str:
    if not isinstance(link, str) or not link:
        raise ValueError(f'link must be a non-empty string, got {link!r}')
    return link


def _new_email(recipient: Address, email_type: EmailType, **private) -> Email:
    return Email(to=[recipient], private={'email_type': email_type.value, **private})


def welcome_email(recipient: Address, link: str) -> Email:
    """
    Builds a welcome email with the required verification link.

    Example:
        >>> email = welcome_email('user@example.com', 'https://example.com/verify/123')
    """
    return _new_email(recipient, EmailType.WELCOME, link=_require_link(link))


def password_reset_email(recipient: Address, link: str) -> Email:
    """Builds a password reset email with the required reset link."""
    return _new_email(recipient, EmailType.PASSWORD_RESET, link=_require_link(link))


def magic_link_email(recipient: Address, link: str) -> Email:
    """
    Builds a magic link login email.

    The email service handles these as password_reset emails, so this shares
    that type and its required link.
    """
    return password_reset_email(recipient, link)


def transactional_email(recipient: Address) -> Email:
    """Builds a transactional email (default type, no special fields required)."""
    return _new_email(recipient, EmailType.TRANSACTIONAL)


def set_email_type(email: Email, email_type: Union[EmailType, str]) -> Email:
    """
    Sets the email type explicitly.

    Note: this doesn't add required fields; validate_email checks them later.

    Raises:
        ValueError: If email_type is not a known type
    """
    try:
        resolved = EmailType(email_type)
    except ValueError:
        allowed = ', '.join(t.value for t in EmailType)
        raise ValueError(
            f'Unsupported email type: {email_type}. Allowed types: {allowed}'
        ) from None

    return email.put_private('email_type', resolved.value)


def add_link(email: Email, link: str) -> Email:
    """Adds the link used by welcome and password_reset emails."""
    if not isinstance(link, str):
        raise ValueError(f'link must be a string, got {link!r}')
    return email.put_private('link', link)


def validate_email(email: Email) -> ValidationResult:
    """
    Validates that an email has all required fields for its type.

    Only welcome and password_reset declare required fields. Transactional,
    untyped and unrecognised types always pass.
    """
    raw_type = email.private.get('email_type')
    try:
        email_type = EmailType(raw_type)
    except ValueError:
        return ValidationResult(valid=True, email=email)

    for field_name in REQUIRED_FIELDS[email_type]:
        value = email.private.get(field_name)
        if not isinstance(value, str) or not value:
            return ValidationResult(
                valid=False,
                error=f'{email_type.value} email missing required field: {field_name}',
                error_kind=ErrorKind.VALIDATION
            )

    return ValidationResult(valid=True, email=email)
