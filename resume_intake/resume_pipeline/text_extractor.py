"""Obtain text from an uploaded resume (PDF, DOCX), trying increasingly degraded methods."""

import asyncio
import re
import unicodedata
from io import BytesIO
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Union

import pdfplumber
from docx import Document

from resume_intake.config import (
    BINARY_SCRAPE_MIN_LENGTH,
    MIN_TEXT_LENGTH,
    PDF_TIMEOUT_SECONDS,
)
from resume_intake.resume_pipeline.errors import TextExtractionError
from resume_intake.resume_pipeline.synthetic_resume import synthesize_resume_text
from resume_intake.schemas.extraction_result import AcquisitionMethod
from resume_intake.utils.logger import get_logger

logger = get_logger(__name__)

# pdfplumber extract_text() keyword sets: default first, then a layout-preserving retry
PDF_OPTION_SETS: List[dict] = [
    {"x_tolerance": 3, "y_tolerance": 3},
    {"layout": True, "x_tolerance": 1.5, "y_tolerance": 2},
]

_PAREN_TOKEN_RE = re.compile(r"\(([^)]+)\)")
_LETTER_RE = re.compile(r"[a-zA-Z]")


class AcquiredText(NamedTuple):
    text: str
    method: AcquisitionMethod


def _normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC) and replace problematic chars."""
    if not text:
        return ""
    t = unicodedata.normalize("NFC", text)
    return t.replace("\u00a0", " ").replace("\x00", "")


def clean_resume_text(text: str, max_chars: int = 50000) -> str:
    """Remove excessive whitespace and normalize unicode. Line breaks are kept."""
    if not text or not text.strip():
        return ""
    t = _normalize_unicode(text)
    t = t.replace("\r\n", "\n").replace("\r", "\n")
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r" *\n *", "\n", t)
    t = re.sub(r"\n\s*\n\s*\n", "\n\n", t)
    t = t.strip()
    if len(t) > max_chars:
        t = t[:max_chars]
    return t


def _extract_pdf(bytes_io: BytesIO, options: dict) -> str:
    with pdfplumber.open(bytes_io) as pdf:
        parts = []
        for page in pdf.pages:
            ptext = page.extract_text(**options)
            if ptext:
                parts.append(ptext)
        return "\n\n".join(parts)


def _extract_docx(bytes_io: BytesIO) -> str:
    doc = Document(bytes_io)
    return "\n".join(p.text for p in doc.paragraphs if p.text.strip())


def _is_docx(filename: str) -> bool:
    return (filename or "").lower().strip().endswith(".docx")


def extract_text_with_library(data: bytes, filename: str, options: Optional[dict] = None) -> str:
    """
    Extract and clean text with pdfplumber (or python-docx for .docx files).
    Raises TextExtractionError if the library fails.
    """
    bio = BytesIO(data)
    try:
        if _is_docx(filename):
            raw = _extract_docx(bio)
        else:
            raw = _extract_pdf(bio, options if options is not None else PDF_OPTION_SETS[0])
    except Exception as e:
        raise TextExtractionError(
            f"Library extraction failed: {e}",
            {"filename": filename, "error_type": type(e).__name__},
        ) from e
    return clean_resume_text(raw)


def scrape_binary_text(data: bytes) -> str:
    """
    Pull text tokens out of raw PDF bytes: substrings inside literal parentheses
    with more than one character and at least one letter, joined by spaces.
    """
    if not data:
        return ""
    raw = data.decode("latin-1")
    tokens = [
        t for t in _PAREN_TOKEN_RE.findall(raw)
        if len(t) > 1 and _LETTER_RE.search(t)
    ]
    return " ".join(tokens)


def is_quality_text(text: str, min_length: int = MIN_TEXT_LENGTH, min_letter_ratio: float = 0.3) -> bool:
    """Length and letter-density check used by the strict stage."""
    stripped = (text or "").strip()
    if len(stripped) < min_length:
        return False
    compact = re.sub(r"\s+", "", stripped)
    if not compact:
        return False
    letters = len(_LETTER_RE.findall(compact))
    return letters / len(compact) >= min_letter_ratio


def _read_file(file_path: str) -> Optional[bytes]:
    try:
        data = Path(file_path).read_bytes()
    except OSError as e:
        logger.warning("Could not read %s: %s", file_path, e)
        return None
    logger.info("Read %s (%s bytes)", file_path, len(data))
    return data


async def _library_attempt(data: bytes, filename: str, options: dict, timeout: float) -> Optional[str]:
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(extract_text_with_library, data, filename, options),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("Library extraction timed out after %ss for %s", timeout, filename)
    except TextExtractionError as e:
        logger.warning("%s", e)
    except Exception as e:
        logger.exception("Unexpected library extraction error for %s: %s", filename, e)
    return None


class UploadSource:
    """
    Bytes and library output for one uploaded file. The file is read once and each
    library attempt runs at most once, however many stages ask for it.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = str(file_path)
        self.filename = Path(self.file_path).name
        self._data: Optional[bytes] = None
        self._read = False
        self._library: Dict[int, Optional[str]] = {}

    def read(self) -> Optional[bytes]:
        if not self._read:
            self._data = _read_file(self.file_path)
            self._read = True
        return self._data

    @property
    def is_docx(self) -> bool:
        return _is_docx(self.filename)

    async def library_text(self, attempt: int, timeout: float = PDF_TIMEOUT_SECONDS) -> Optional[str]:
        """Output of library attempt number `attempt` (index into PDF_OPTION_SETS); None on failure."""
        if attempt not in self._library:
            data = self.read()
            self._library[attempt] = (
                await _library_attempt(data, self.filename, PDF_OPTION_SETS[attempt], timeout)
                if data else None
            )
        return self._library[attempt]


async def acquire_text(
    source: Union[str, UploadSource],
    *,
    min_length: int = MIN_TEXT_LENGTH,
    retry_library: bool = True,
    allow_binary: bool = True,
    allow_synthetic: bool = False,
    timeout: float = PDF_TIMEOUT_SECONDS,
) -> AcquiredText:
    """
    Try library extraction (optionally retried with alternate options), then binary
    scraping, then synthetic text. Never raises; the worst case is method NONE with "".
    Pass a shared UploadSource to reuse the bytes and library output of earlier calls.
    """
    if not isinstance(source, UploadSource):
        source = UploadSource(source)
    data = source.read()

    if data:
        attempts = len(PDF_OPTION_SETS) if retry_library and not source.is_docx else 1
        for attempt in range(attempts):
            text = await source.library_text(attempt, timeout)
            if text is not None and len(text.strip()) >= min_length:
                logger.info("Library extraction attempt %s succeeded: %s chars", attempt + 1, len(text))
                return AcquiredText(text, AcquisitionMethod.LIBRARY)
            if text is not None:
                logger.warning("Library extraction attempt %s too short: %s chars", attempt + 1, len(text.strip()))

        if allow_binary:
            text = scrape_binary_text(data)
            if len(text) > BINARY_SCRAPE_MIN_LENGTH:
                logger.info("Binary scrape succeeded: %s chars", len(text))
                return AcquiredText(text, AcquisitionMethod.BINARY_SCRAPE)
            logger.warning("Binary scrape insufficient: %s chars", len(text))

    if allow_synthetic:
        logger.warning("No text recovered from %s; using synthetic resume text", source.file_path)
        return AcquiredText(synthesize_resume_text(source.file_path), AcquisitionMethod.SYNTHETIC)

    logger.warning("No text recovered from %s", source.file_path)
    return AcquiredText("", AcquisitionMethod.NONE)
