"""Shared validation utilities"""

import re
import uuid
from typing import Optional

from .languages import SUPPORTED_LANGUAGES

_LANGUAGE_LOOKUP = {language.lower(): language for language in SUPPORTED_LANGUAGES}


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a phone number and strip formatting characters.

    Args:
        phone: Phone number string in various formats

    Returns:
        Phone number with spaces, dashes and brackets removed

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    compact = re.sub(r"[\s\-\(\)]", "", phone)

    if not re.match(r"^\+?[0-9]{10,15}$", compact):
        raise ValueError("Please enter a valid phone number")

    return compact


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

    if not re.match(email_pattern, email) or len(email) > 255:
        raise ValueError("Invalid email format")

    return email


def validate_languages(languages: list[str]) -> list[str]:
    """
    Normalize a list of spoken languages against the supported list.

    Matching is case-insensitive; duplicates are dropped and the canonical
    spelling is returned in the order given.

    Raises:
        ValueError: If the list is empty or contains an unknown language
    """
    normalized: list[str] = []
    for language in languages:
        key = (language or "").strip().lower()
        if not key:
            continue
        canonical = _LANGUAGE_LOOKUP.get(key)
        if not canonical:
            raise ValueError(f"Unsupported language: {language}")
        if canonical not in normalized:
            normalized.append(canonical)

    if not normalized:
        raise ValueError("At least one language is required")

    return normalized
