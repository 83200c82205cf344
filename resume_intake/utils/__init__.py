"""Utility exports."""

from .helpers import (
    dedupe,
    digits_only,
    extract_emails,
    is_placeholder_domain,
    is_placeholder_email,
    placeholder_email,
    title_case,
    truncate,
)
from .logger import get_logger

__all__ = [
    "get_logger",
    "extract_emails",
    "is_placeholder_domain",
    "is_placeholder_email",
    "placeholder_email",
    "title_case",
    "digits_only",
    "truncate",
    "dedupe",
]
