"""Validation utilities for short links."""

from typing import Tuple
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048
MAX_OWNER_ID_LENGTH = 255


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    if not result.netloc or not result.hostname:
        return False, "URL must have a valid domain"

    return True, ""


def is_valid_owner_id(owner_id: str) -> Tuple[bool, str]:
    """Validate an owner id handed over by the auth layer."""
    if owner_id is None or not str(owner_id).strip():
        return False, "Owner id is required"

    if len(str(owner_id)) > MAX_OWNER_ID_LENGTH:
        return False, f"Owner id is too long (max {MAX_OWNER_ID_LENGTH} characters)"

    return True, ""
