"""
Security Module

Provides authentication and security utilities:
- Bearer credential parsing
- Shared-secret verification for the cleanup trigger
- Secure random string generation for mailbox credentials
"""

import secrets
import string
from typing import Optional

from tempbox.config import get_settings


settings = get_settings()


# ===================================
# Bearer Credentials
# ===================================

def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    Args:
        authorization: Raw header value

    Returns:
        str: Token, or None if the header is missing or malformed
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


def verify_cron_secret(token: Optional[str]) -> bool:
    """
    Verify a cleanup trigger credential against the configured secret.

    Args:
        token: Bearer token supplied by the caller

    Returns:
        bool: True if valid
    """
    if not token:
        return False
    return secrets.compare_digest(token.encode("utf-8"), settings.CRON_SECRET.encode("utf-8"))


# ===================================
# Random String Generation
# ===================================

def generate_random_string(
    length: int = 32,
    include_uppercase: bool = True,
    include_lowercase: bool = True,
    include_digits: bool = True,
) -> str:
    """
    Generate a cryptographically secure random string.

    Args:
        length: Length of string
        include_uppercase: Include uppercase letters
        include_lowercase: Include lowercase letters
        include_digits: Include digits

    Returns:
        str: Random string
    """
    chars = ''

    if include_uppercase:
        chars += string.ascii_uppercase
    if include_lowercase:
        chars += string.ascii_lowercase
    if include_digits:
        chars += string.digits

    if not chars:
        raise ValueError("At least one character type must be included")

    return ''.join(secrets.choice(chars) for _ in range(length))


def generate_random_address(domain: str, length: Optional[int] = None) -> str:
    """
    Generate a random mailbox address on a Mail.tm domain.

    Args:
        domain: Email domain
        length: Length of the random local part

    Returns:
        str: Email address (e.g., k3j9x0a1bq@domain.com)
    """
    local_part = generate_random_string(
        length=length or settings.MAILTM_ADDRESS_LENGTH,
        include_uppercase=False,
    )
    return f"{local_part}@{domain}"


def generate_password(length: Optional[int] = None) -> str:
    """Generate a mailbox password."""
    return generate_random_string(length=length or settings.MAILTM_PASSWORD_LENGTH)

