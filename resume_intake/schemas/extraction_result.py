"""Structured resume data produced by the extraction pipeline for one upload."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from resume_intake.utils.helpers import is_placeholder_email

UNKNOWN_NAME = "Unknown Candidate"
NO_PHONE = "Not provided"
NO_SUMMARY = "No summary available"


class AcquisitionMethod(str, Enum):
    """How the text behind a result was obtained."""

    LIBRARY = "library"
    BINARY_SCRAPE = "binary_scrape"
    SYNTHETIC = "synthetic"
    NONE = "none"


class ExtractionStage(str, Enum):
    """Pipeline stage that produced a result."""

    AI = "ai"
    ROBUST = "robust"
    SAFE = "safe"
    FILENAME = "filename"


class ExperienceEntry(BaseModel):
    """One work history item. Regex stages fill only description with the raw section."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, description="Job title")
    company: Optional[str] = Field(default=None, description="Employer")
    duration: Optional[str] = Field(default=None, description="Time period, free-form")
    description: Optional[str] = Field(default=None, description="Details or raw section text")


class EducationEntry(BaseModel):
    """One education item. Regex stages fill only details with the raw section."""

    model_config = ConfigDict(extra="ignore")

    degree: Optional[str] = Field(default=None, description="Degree name")
    institution: Optional[str] = Field(default=None, description="School name")
    year: Optional[str] = Field(default=None, description="Graduation year or range")
    details: Optional[str] = Field(default=None, description="Raw section text")


class ExtractionResult(BaseModel):
    """Resume fields plus provenance. Name, email and phone are never empty; sentinels mark unknowns."""

    name: str = Field(default=UNKNOWN_NAME, min_length=1, description="Best-known display name")
    email: str = Field(..., min_length=3, description="Candidate email or time-seeded placeholder")
    phone: str = Field(default=NO_PHONE, min_length=1, description="Phone as written, or sentinel")
    summary: str = Field(default=NO_SUMMARY, description="Short prose summary, truncated per stage")
    skills: List[str] = Field(default_factory=list, description="Skills in vocabulary order")
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    raw_text: str = Field(default="", description="Text the fields were derived from")
    parse_error: bool = Field(default=False, description="True when no high-confidence data was found")
    extracted_from_pdf: bool = Field(default=False)
    extracted_from_filename: bool = Field(default=False)
    ai_enhanced: bool = Field(default=False)
    stage: ExtractionStage = Field(..., description="Stage that produced this result")
    acquisition_method: AcquisitionMethod = Field(default=AcquisitionMethod.NONE)

    @property
    def has_real_email(self) -> bool:
        return not is_placeholder_email(self.email)

    @property
    def needs_confirmation(self) -> bool:
        """Whether the caller should ask the candidate to confirm or fill in details."""
        return self.parse_error or self.extracted_from_filename or not self.has_real_email

    def candidate_update(self) -> Dict[str, str]:
        """Fields to merge into the candidate record. Sentinel email/phone are left out."""
        update = {"name": self.name}
        if self.has_real_email:
            update["email"] = self.email
        if self.phone != NO_PHONE:
            update["phone"] = self.phone
        return update

    def to_document(self) -> Dict[str, Any]:
        """camelCase shape stored on the resume record."""
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "summary": self.summary,
            "skills": list(self.skills),
            "experience": [e.model_dump(exclude_none=True) for e in self.experience],
            "education": [e.model_dump(exclude_none=True) for e in self.education],
            "rawText": self.raw_text,
            "parseError": self.parse_error,
            "extractedFromPDF": self.extracted_from_pdf,
            "extractedFromFilename": self.extracted_from_filename,
            "aiEnhanced": self.ai_enhanced,
            "stage": self.stage.value,
            "acquisitionMethod": self.acquisition_method.value,
        }
