"""LLM-based extraction of a structured resume record from raw resume text."""

import asyncio
import json
import re
from typing import Any, List, Optional, Union

import httpx
from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from resume_intake.config import (
    AI_MAX_RETRIES,
    AI_MAX_TOKENS,
    AI_TEXT_LIMIT,
    AI_TIMEOUT_SECONDS,
    MODEL_NAME,
    OPENAI_API_KEY,
)
from resume_intake.resume_pipeline.field_extractor import (
    TEXT_PROFILE,
    ExtractedFields,
    ExtractionProfile,
    extract_fields,
)
from resume_intake.resume_pipeline.text_extractor import UploadSource, acquire_text
from resume_intake.schemas.extraction_result import (
    UNKNOWN_NAME,
    AcquisitionMethod,
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    ExtractionStage,
)
from resume_intake.utils.helpers import (
    EMAIL_PATTERN,
    dedupe,
    digits_only,
    is_placeholder_domain,
    truncate,
)
from resume_intake.utils.logger import get_logger

logger = get_logger(__name__)

RESUME_EXTRACTION_SYSTEM_PROMPT = (
    "You are a precise resume parser. Extract information accurately and return only valid JSON."
)

RESUME_EXTRACTION_USER_PROMPT = """Extract structured information from this resume. The candidate's name is "{name}".

Resume text:
{text}

Return only valid JSON matching this schema (no markdown, no code block):
{{
  "name": "{name}",
  "email": "string or null",
  "phone": "string or null",
  "summary": "string",
  "skills": ["string"],
  "experience": [
    {{"title": "string", "company": "string", "duration": "string", "description": "string"}}
  ],
  "education": [
    {{"degree": "string", "institution": "string", "year": "string"}}
  ]
}}
- Use the provided name: "{name}".
- email and phone: only if present in the resume, otherwise null.
- skills: technical and professional skills stated in the resume.
- Extract only what is clearly stated; do not invent details."""

_EMAIL_FULL_RE = re.compile(r"^" + EMAIL_PATTERN + r"$")


def build_llm_client(api_key: Optional[str] = None) -> Optional[AsyncOpenAI]:
    """AsyncOpenAI client with a bounded timeout, or None when no key is configured."""
    key = OPENAI_API_KEY if api_key is None else api_key
    if not key:
        logger.info("OPENAI_API_KEY is not set; AI-assisted extraction disabled")
        return None
    return AsyncOpenAI(
        api_key=key,
        timeout=httpx.Timeout(AI_TIMEOUT_SECONDS, connect=10.0),
        max_retries=AI_MAX_RETRIES,
    )


def _parse_llm_json(text: str) -> Optional[dict]:
    """Parse a JSON object from an LLM reply, stripping markdown code fences if present."""
    raw = (text or "").strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
        raw = re.sub(r"\s*```$", "", raw)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        # Replies sometimes wrap the object in prose; try the outermost braces
        start, end = raw.find("{"), raw.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(raw[start:end + 1])
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def _clean_email(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    email = value.strip().lower()
    if not _EMAIL_FULL_RE.match(email) or is_placeholder_domain(email):
        return None
    return email


def _clean_phone(value: Any) -> Optional[str]:
    if not isinstance(value, (str, int)):
        return None
    phone = str(value).strip()
    if not 10 <= len(digits_only(phone)) <= 15:
        return None
    return phone


def _clean_skills(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return dedupe(s for s in value if isinstance(s, str))


def _clean_entries(value: Any, model: type, text_field: str) -> list:
    """Validate a list of loosely structured entries; plain strings become text_field."""
    if not isinstance(value, list):
        return []
    entries = []
    for item in value:
        try:
            if isinstance(item, str) and item.strip():
                entries.append(model(**{text_field: item.strip()}))
            elif isinstance(item, dict):
                # Models return years as numbers; every entry field is a string
                values = {
                    k: str(v).strip() for k, v in item.items()
                    if isinstance(v, (str, int, float)) and str(v).strip()
                }
                if values:
                    entries.append(model.model_validate(values))
        except ValidationError as e:
            logger.debug("Dropped %s entry %r: %s", model.__name__, item, e)
    return entries


class AIResumeExtractor:
    """Ask the model for the resume record; fall back to regex extraction on any failure."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        model: str = MODEL_NAME,
        timeout: float = AI_TIMEOUT_SECONDS,
        text_limit: int = AI_TEXT_LIMIT,
        profile: ExtractionProfile = TEXT_PROFILE,
    ) -> None:
        self.client = client
        self.model = model
        self.timeout = timeout
        self.text_limit = text_limit
        self.profile = profile

    def regex_result(self, raw_text: str, candidate_name: str) -> ExtractionResult:
        """The regex-stage result on the same text, used whenever the model path fails."""
        fields = extract_fields(raw_text, candidate_name, self.profile)
        return fields.to_result(raw_text, ExtractionStage.AI, AcquisitionMethod.LIBRARY)

    async def _ask_model(self, raw_text: str, candidate_name: str) -> Optional[dict]:
        prompt = RESUME_EXTRACTION_USER_PROMPT.format(
            name=candidate_name or UNKNOWN_NAME,
            text=raw_text[: self.text_limit].strip(),
        )
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": RESUME_EXTRACTION_SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=0.1,
                    max_tokens=AI_MAX_TOKENS,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("AI extraction timed out after %ss", self.timeout)
            return None
        except OpenAIError as e:
            logger.warning("AI extraction request failed: %s", e)
            return None
        except Exception as e:
            logger.exception("AI extraction failed: %s", e)
            return None

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message or not choice.message.content:
            logger.warning("AI extraction returned an empty reply")
            return None
        parsed = _parse_llm_json(choice.message.content)
        if parsed is None:
            logger.warning("Failed to parse AI extraction reply as a JSON object")
        return parsed

    def _merge(self, parsed: dict, raw_text: str, candidate_name: str) -> ExtractionResult:
        """Model output with regex values filling whatever the model left out or got wrong."""
        regex: ExtractedFields = extract_fields(raw_text, candidate_name, self.profile)
        summary = parsed.get("summary")
        if isinstance(summary, str) and summary.strip():
            summary = truncate(summary, self.profile.summary_limit)
        else:
            summary = regex.summary
        merged = ExtractedFields(
            # The caller-confirmed name always wins over the model's guess
            name=regex.name,
            email=_clean_email(parsed.get("email")) or regex.email,
            phone=_clean_phone(parsed.get("phone")) or regex.phone,
            summary=summary,
            skills=_clean_skills(parsed.get("skills")) or regex.skills,
            experience=_clean_entries(parsed.get("experience"), ExperienceEntry, "description"),
            education=_clean_entries(parsed.get("education"), EducationEntry, "details"),
        )
        return merged.to_result(raw_text, ExtractionStage.AI, AcquisitionMethod.LIBRARY, ai_enhanced=True)

    async def extract_from_text(self, raw_text: str, candidate_name: str = "") -> ExtractionResult:
        """Structured record for raw_text. Never raises; aiEnhanced only on a parsed model reply."""
        if self.client is None:
            logger.info("No LLM client configured; using regex extraction")
            return self.regex_result(raw_text, candidate_name)

        parsed = await self._ask_model(raw_text, candidate_name)
        if parsed is None:
            return self.regex_result(raw_text, candidate_name)
        try:
            result = self._merge(parsed, raw_text, candidate_name)
        except ValidationError as e:
            logger.warning("AI extraction output failed validation: %s", e)
            return self.regex_result(raw_text, candidate_name)
        logger.info("AI extraction succeeded: skills=%s", len(result.skills))
        return result


async def extract_resume_with_ai(
    source: Union[str, UploadSource],
    candidate_name: str = "",
    client: Optional[AsyncOpenAI] = None,
) -> Optional[ExtractionResult]:
    """
    Library text extraction followed by AI-assisted (or, without a client, regex) field extraction.
    Returns None when no text could be extracted. source is a path or a shared UploadSource.
    """
    acquired = await acquire_text(source, retry_library=False, allow_binary=False)
    if acquired.method is AcquisitionMethod.NONE:
        return None
    logger.info("Resume text extracted for AI stage: %s chars", len(acquired.text))
    return await AIResumeExtractor(client).extract_from_text(acquired.text, candidate_name)
