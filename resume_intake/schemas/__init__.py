"""Schema exports."""

from .extraction_result import (
    NO_PHONE,
    NO_SUMMARY,
    UNKNOWN_NAME,
    AcquisitionMethod,
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    ExtractionStage,
)

__all__ = [
    "ExtractionResult",
    "ExperienceEntry",
    "EducationEntry",
    "AcquisitionMethod",
    "ExtractionStage",
    "UNKNOWN_NAME",
    "NO_PHONE",
    "NO_SUMMARY",
]
