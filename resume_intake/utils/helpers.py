"""Helper utilities shared by the extraction stages."""

import re
import time
from typing import Iterable, List

EMAIL_PATTERN = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"

PLACEHOLDER_EMAIL_DOMAINS = ("example.com", "domain.com", "email.com")

_PLACEHOLDER_EMAIL_RE = re.compile(r"^candidate\d+@example\.com$")


def extract_emails(text: str) -> List[str]:
    """Extract email addresses from text using regex, first occurrence order."""
    if not text:
        return []
    return list(dict.fromkeys(re.findall(EMAIL_PATTERN, text)))


def is_placeholder_domain(email: str) -> bool:
    """True if the address contains one of the template domains resumes ship with (myemail.com counts)."""
    lowered = (email or "").lower()
    return any(d in lowered for d in PLACEHOLDER_EMAIL_DOMAINS)


def placeholder_email() -> str:
    """Time-seeded unique address for records with no email (candidate<unix_ms>@example.com)."""
    return f"candidate{time.time_ns() // 1_000_000}@example.com"


def is_placeholder_email(email: str) -> bool:
    return bool(email) and bool(_PLACEHOLDER_EMAIL_RE.match(email))


def title_case(words: Iterable[str]) -> str:
    """Capitalize the first letter of each word, lowercase the rest."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in words if w)


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def truncate(text: str, limit: int) -> str:
    """Strip and cut text to at most limit characters."""
    t = (text or "").strip()
    if len(t) > limit:
        t = t[:limit].rstrip()
    return t


def dedupe(items: Iterable[str]) -> List[str]:
    """Remove duplicates (case-insensitive) keeping first occurrence order."""
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        key = item.strip().lower()
        if key and key not in seen:
            seen.add(key)
            result.append(item.strip())
    return result
