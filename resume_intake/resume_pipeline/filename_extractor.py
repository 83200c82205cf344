"""Last-resort extraction: guess the candidate name from the uploaded file name."""

import re
from pathlib import PurePath
from typing import Optional

from resume_intake.schemas.extraction_result import (
    NO_PHONE,
    NO_SUMMARY,
    UNKNOWN_NAME,
    AcquisitionMethod,
    ExtractionResult,
    ExtractionStage,
)
from resume_intake.utils.helpers import placeholder_email, title_case
from resume_intake.utils.logger import get_logger

logger = get_logger(__name__)

_RESUME_WORDS_RE = re.compile(r"\b(?:resume|cv|curriculum|vitae)\b", re.IGNORECASE)


def clean_filename_name(file_path: str) -> Optional[str]:
    """
    Turn "uploads/1712_maria-lopez-resume.pdf" into "Maria Lopez".
    Returns None when the cleaned string is shorter than 3 or longer than 50 characters.
    """
    base = PurePath(str(file_path or "").replace("\\", "/")).name
    stem = re.sub(r"\.[^.]+$", "", base)
    # Separators and digit runs become spaces first so the word tokens match on boundaries
    cleaned = re.sub(r"[-_]+", " ", stem)
    cleaned = re.sub(r"\d+", " ", cleaned)
    cleaned = _RESUME_WORDS_RE.sub(" ", cleaned)
    cleaned = title_case(cleaned.split())
    if 3 <= len(cleaned) <= 50:
        return cleaned
    return None


def name_from_filename(file_path: str) -> str:
    """Filename-derived name, or the Unknown Candidate sentinel."""
    return clean_filename_name(file_path) or UNKNOWN_NAME


def extract_from_filename(file_path: str) -> ExtractionResult:
    """Minimal record for uploads with no usable text. Never raises."""
    name = name_from_filename(file_path)
    logger.info("Filename extraction for %s -> %r", file_path, name)
    return ExtractionResult(
        name=name,
        email=placeholder_email(),
        phone=NO_PHONE,
        summary=NO_SUMMARY,
        skills=[],
        experience=[],
        education=[],
        raw_text="",
        parse_error=True,
        extracted_from_pdf=False,
        extracted_from_filename=True,
        ai_enhanced=False,
        stage=ExtractionStage.FILENAME,
        acquisition_method=AcquisitionMethod.NONE,
    )
