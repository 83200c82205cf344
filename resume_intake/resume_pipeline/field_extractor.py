"""Regex field extraction from resume text: name, email, phone, summary, skills, sections.

Every extractor is deterministic and returns a sentinel instead of raising. The one
non-deterministic value is the placeholder email, which is time-seeded on purpose.
"""

import re
from typing import List, Optional, Pattern

from pydantic import BaseModel, ConfigDict, Field

from resume_intake.config import (
    SKILLS_VOCABULARY_ROBUST,
    SKILLS_VOCABULARY_SAFE,
    SKILLS_VOCABULARY_TEXT,
    SUMMARY_LIMIT_AI,
    SUMMARY_LIMIT_DEFAULT,
)
from resume_intake.schemas.extraction_result import (
    NO_PHONE,
    NO_SUMMARY,
    UNKNOWN_NAME,
    AcquisitionMethod,
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    ExtractionStage,
)
from resume_intake.utils.helpers import (
    digits_only,
    extract_emails,
    is_placeholder_domain,
    is_placeholder_email,
    placeholder_email,
    title_case,
    truncate,
)
from resume_intake.utils.logger import get_logger

logger = get_logger(__name__)

GENERAL_SKILLS_SENTINEL = "General Programming"


class ExtractionProfile(BaseModel):
    """Per-stage knobs for the shared field extractor."""

    model_config = ConfigDict(frozen=True)

    name: str
    summary_limit: int = SUMMARY_LIMIT_DEFAULT
    skills_vocabulary: List[str] = Field(default_factory=list)
    empty_skills: List[str] = Field(default_factory=list, description="Returned when no skill matches")
    include_sections: bool = True
    experience_limit: int = 500
    education_limit: int = 300


TEXT_PROFILE = ExtractionProfile(
    name="text",
    summary_limit=SUMMARY_LIMIT_AI,
    skills_vocabulary=SKILLS_VOCABULARY_TEXT,
)
ROBUST_PROFILE = ExtractionProfile(
    name="robust",
    summary_limit=SUMMARY_LIMIT_DEFAULT,
    skills_vocabulary=SKILLS_VOCABULARY_ROBUST,
)
SAFE_PROFILE = ExtractionProfile(
    name="safe",
    summary_limit=SUMMARY_LIMIT_DEFAULT,
    skills_vocabulary=SKILLS_VOCABULARY_SAFE,
    empty_skills=[GENERAL_SKILLS_SENTINEL],
    include_sections=False,
)

# ---- Name ----

# Words that mark a line as a resume heading or job title rather than a person
NAME_BLOCKLIST = frozenset({
    "resume", "cv", "curriculum", "vitae", "profile", "summary", "objective",
    "experience", "education", "skills", "software", "developer", "engineer",
    "manager", "contact", "information", "professional", "personal", "about",
    "technical", "projects", "work", "employment", "career", "qualifications",
    "certifications", "references", "history", "details",
})

NAME_SCAN_LINES = 10

_NAME_LABEL_RE = re.compile(
    r"^[ \t]*(?:full[ \t]+name|candidate[ \t]+name|candidate|name)[ \t]*:[ \t]*(.+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
# Name words are letters only, any script ("José", "García")
_LETTERS = r"[^\W\d_]{2,}"
_CAPITALIZED_NAME_RE = re.compile(rf"^{_LETTERS}(?:\s+{_LETTERS}){{1,2}}$")
_ALL_CAPS_NAME_RE = re.compile(rf"^{_LETTERS}\s+{_LETTERS}$")
_NAME_WORD_RE = re.compile(r"^[^\W\d_]+$")


def _is_capitalized_name_line(line: str) -> bool:
    return bool(_CAPITALIZED_NAME_RE.match(line)) and all(w[0].isupper() for w in line.split())


def _is_all_caps_name_line(line: str) -> bool:
    return bool(_ALL_CAPS_NAME_RE.match(line)) and line.isupper()


def _validate_name(candidate: str) -> Optional[str]:
    """Title-cased name if candidate is 2-3 plain words with none blocklisted, else None."""
    words = candidate.split()
    if not 2 <= len(words) <= 3:
        return None
    if not all(_NAME_WORD_RE.match(w) for w in words):
        return None
    if any(w.lower() in NAME_BLOCKLIST for w in words):
        logger.debug("Rejected name candidate %r: section word", candidate)
        return None
    return title_case(words)


def extract_name(text: str) -> str:
    """Labeled name, then the first 2-3 capitalized-word line, then an all-caps pair."""
    if not text:
        return UNKNOWN_NAME
    for match in _NAME_LABEL_RE.finditer(text):
        name = _validate_name(match.group(1))
        if name:
            return name

    lines = [line.strip() for line in text.splitlines() if line.strip()][:NAME_SCAN_LINES]
    for is_name_line in (_is_capitalized_name_line, _is_all_caps_name_line):
        for line in lines:
            if is_name_line(line):
                name = _validate_name(line)
                if name:
                    return name
    return UNKNOWN_NAME


# ---- Email ----

def extract_email(text: str) -> str:
    """First non-placeholder address, lower-cased; a unique placeholder when none is found."""
    for email in extract_emails(text or ""):
        if is_placeholder_domain(email):
            continue
        return email.lower()
    return placeholder_email()


# ---- Phone ----

_SEP = r"[-.\t ]?"
_PHONE_PATTERNS: List[Pattern[str]] = [
    # Labeled: "Phone: +1 (555) 123-4567"
    re.compile(
        r"\b(?:phone|tel|mobile|cell)(?:[ \t]*(?:no\.?|number))?[ \t]*[:.]?[ \t]*"
        r"(\+?1?" + _SEP + r"\(?\d{3}\)?" + _SEP + r"\d{3}" + _SEP + r"\d{4})",
        re.IGNORECASE,
    ),
    # International: "+44 20 7946 0958"
    re.compile(r"(\+\d{1,3}" + _SEP + r"\d{2,5}" + _SEP + r"\d{3,5}" + _SEP + r"\d{3,5})"),
    # Bare: "555-123-4567", "(555) 123 4567", "5551234567"
    re.compile(r"(?<!\d)(\(?\d{3}\)?" + _SEP + r"\d{3}" + _SEP + r"\d{4})(?!\d)"),
]


def extract_phone(text: str) -> str:
    """First phone match with 10-15 digits, in its original punctuation."""
    if not text:
        return NO_PHONE
    for pattern in _PHONE_PATTERNS:
        for match in pattern.finditer(text):
            phone = match.group(1).strip()
            if 10 <= len(digits_only(phone)) <= 15:
                return phone
    return NO_PHONE


# ---- Sections ----

def _header_re(labels: str) -> Pattern[str]:
    # Up to two leading words ("Professional Summary"), optional inline body after a colon
    return re.compile(
        r"^(?:[A-Za-z&/]+[ \t]+){0,2}(?:" + labels + r")[ \t]*(?::[ \t]*(?P<inline>.*))?$",
        re.IGNORECASE,
    )


SUMMARY_HEADER_RE = _header_re(r"summary|profile|about(?:[ \t]+me)?|objective")
SKILLS_HEADER_RE = _header_re(r"skills|technologies")
EXPERIENCE_HEADER_RE = _header_re(r"experience|employment(?:[ \t]+history)?|work[ \t]+history")
EDUCATION_HEADER_RE = _header_re(r"education|academics?|academic[ \t]+background")

_ALL_HEADERS = (SUMMARY_HEADER_RE, SKILLS_HEADER_RE, EXPERIENCE_HEADER_RE, EDUCATION_HEADER_RE)
_ALL_CAPS_HEADER_RE = re.compile(r"^[A-Z][A-Z&/ ]{3,}:?$")


def _is_section_header(line: str) -> bool:
    if _ALL_CAPS_HEADER_RE.match(line):
        return True
    for header in _ALL_HEADERS:
        match = header.match(line)
        if match and not (match.group("inline") or "").strip():
            return True
    return False


def find_section(text: str, header: Pattern[str]) -> Optional[str]:
    """
    Body of the first section whose heading matches header: inline text after the
    colon plus following lines, up to a blank line or the next heading.
    Returns None when there is no such heading, "" when the section is empty.
    """
    if not text:
        return None
    lines = text.splitlines()
    for i, line in enumerate(lines):
        match = header.match(line.strip())
        if not match:
            continue
        body: List[str] = []
        inline = (match.group("inline") or "").strip()
        if inline:
            body.append(inline)
        j = i + 1
        if not body:
            while j < len(lines) and not lines[j].strip():
                j += 1
        while j < len(lines):
            stripped = lines[j].strip()
            if not stripped or _is_section_header(stripped):
                break
            body.append(stripped)
            j += 1
        return "\n".join(body).strip()
    return None


def extract_summary(text: str, limit: int = SUMMARY_LIMIT_DEFAULT) -> str:
    """Labeled summary section, else the first paragraph after the first blank line."""
    section = find_section(text, SUMMARY_HEADER_RE)
    if section:
        return truncate(section, limit)
    paragraphs = re.split(r"\n[ \t]*\n", (text or "").strip())
    if len(paragraphs) > 1 and paragraphs[1].strip():
        return truncate(paragraphs[1], limit)
    return NO_SUMMARY


def extract_skills(
    text: str,
    vocabulary: List[str] = SKILLS_VOCABULARY_TEXT,
    empty: Optional[List[str]] = None,
) -> List[str]:
    """Vocabulary entries found (case-insensitive substring) in the skills section, in vocabulary order."""
    fallback = list(empty or [])
    section = find_section(text, SKILLS_HEADER_RE)
    if not section:
        return fallback
    haystack = section.lower()
    skills = list(dict.fromkeys(s for s in vocabulary if s.lower() in haystack))
    return skills or fallback


def extract_experience(text: str, limit: int = 500) -> List[ExperienceEntry]:
    section = find_section(text, EXPERIENCE_HEADER_RE)
    if not section:
        return []
    return [ExperienceEntry(description=truncate(section, limit))]


def extract_education(text: str, limit: int = 300) -> List[EducationEntry]:
    section = find_section(text, EDUCATION_HEADER_RE)
    if not section:
        return []
    return [EducationEntry(details=truncate(section, limit))]


# ---- Combined ----

class ExtractedFields(BaseModel):
    """Fields pulled from one text by one profile, before provenance is attached."""

    name: str
    email: str
    phone: str
    summary: str
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)

    @property
    def has_high_confidence(self) -> bool:
        """True if any of name, email or phone is a real value rather than a sentinel."""
        return (
            self.name != UNKNOWN_NAME
            or not is_placeholder_email(self.email)
            or self.phone != NO_PHONE
        )

    def to_result(
        self,
        raw_text: str,
        stage: ExtractionStage,
        method: AcquisitionMethod,
        ai_enhanced: bool = False,
    ) -> ExtractionResult:
        from_pdf = method in (AcquisitionMethod.LIBRARY, AcquisitionMethod.BINARY_SCRAPE)
        return ExtractionResult(
            **self.model_dump(),
            raw_text=raw_text,
            parse_error=not from_pdf or not self.has_high_confidence,
            extracted_from_pdf=from_pdf,
            extracted_from_filename=not from_pdf,
            ai_enhanced=ai_enhanced,
            stage=stage,
            acquisition_method=method,
        )


def extract_fields(text: str, known_name: str = "", profile: ExtractionProfile = TEXT_PROFILE) -> ExtractedFields:
    """Run every field extractor over text. A non-blank known_name replaces the extracted name."""
    text = text or ""
    name = (known_name or "").strip() or extract_name(text)
    fields = ExtractedFields(
        name=name,
        email=extract_email(text),
        phone=extract_phone(text),
        summary=extract_summary(text, profile.summary_limit),
        skills=extract_skills(text, profile.skills_vocabulary, profile.empty_skills),
        experience=extract_experience(text, profile.experience_limit) if profile.include_sections else [],
        education=extract_education(text, profile.education_limit) if profile.include_sections else [],
    )
    logger.info(
        "Regex extraction (%s): name=%r email=%r phone=%r skills=%s",
        profile.name, fields.name, fields.email, fields.phone, len(fields.skills),
    )
    return fields
