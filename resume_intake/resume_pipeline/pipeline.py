"""Resume extraction pipeline: ordered fallback stages, first result wins."""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from openai import AsyncOpenAI
from pydantic import BaseModel, Field, PrivateAttr

from resume_intake.config import (
    ENABLE_SYNTHETIC_FALLBACK,
    HIGH_CONFIDENCE_TEXT_LENGTH,
    MIN_TEXT_LENGTH,
)
from resume_intake.resume_pipeline.ai_extractor import build_llm_client, extract_resume_with_ai
from resume_intake.resume_pipeline.field_extractor import (
    ROBUST_PROFILE,
    SAFE_PROFILE,
    extract_fields,
)
from resume_intake.resume_pipeline.filename_extractor import extract_from_filename
from resume_intake.resume_pipeline.text_extractor import UploadSource, acquire_text, is_quality_text
from resume_intake.schemas.extraction_result import (
    AcquisitionMethod,
    ExtractionResult,
    ExtractionStage,
)
from resume_intake.utils.logger import get_logger

logger = get_logger(__name__)


class ResumeUpload(BaseModel):
    """One uploaded resume as handed over by the upload handler."""

    file_path: str = Field(..., description="Path of the stored upload")
    candidate_name: str = Field(default="", description="Name the candidate already confirmed, if any")

    _source: Optional[UploadSource] = PrivateAttr(default=None)

    @property
    def source(self) -> UploadSource:
        """File bytes and library output shared by every stage for this upload."""
        if self._source is None:
            self._source = UploadSource(self.file_path)
        return self._source


class ExtractionStrategy(ABC):
    """One fallback stage. Returning None (or raising) hands the upload to the next stage."""

    stage: ExtractionStage

    @abstractmethod
    async def extract(self, upload: ResumeUpload) -> Optional[ExtractionResult]:
        ...


class AIExtractionStage(ExtractionStrategy):
    """Library text, then the LLM; regex on the same text when the LLM is unavailable or fails."""

    stage = ExtractionStage.AI

    def __init__(self, client: Optional[AsyncOpenAI] = None) -> None:
        self.client = client

    async def extract(self, upload: ResumeUpload) -> Optional[ExtractionResult]:
        return await extract_resume_with_ai(upload.source, upload.candidate_name, self.client)


class RobustExtractionStage(ExtractionStrategy):
    """Every acquisition method, including binary scraping and (optionally) synthetic text."""

    stage = ExtractionStage.ROBUST

    def __init__(self, allow_synthetic: bool = ENABLE_SYNTHETIC_FALLBACK) -> None:
        self.allow_synthetic = allow_synthetic

    async def extract(self, upload: ResumeUpload) -> Optional[ExtractionResult]:
        acquired = await acquire_text(
            upload.source,
            min_length=MIN_TEXT_LENGTH,
            allow_binary=True,
            allow_synthetic=self.allow_synthetic,
        )
        if acquired.method is AcquisitionMethod.NONE:
            return None
        fields = extract_fields(acquired.text, upload.candidate_name, ROBUST_PROFILE)
        return fields.to_result(acquired.text, self.stage, acquired.method)


class SafeExtractionStage(ExtractionStrategy):
    """Library text only, reusing earlier attempts; needs HIGH_CONFIDENCE_TEXT_LENGTH chars, mostly letters."""

    stage = ExtractionStage.SAFE

    async def extract(self, upload: ResumeUpload) -> Optional[ExtractionResult]:
        acquired = await acquire_text(
            upload.source,
            min_length=HIGH_CONFIDENCE_TEXT_LENGTH,
            allow_binary=False,
        )
        if acquired.method is AcquisitionMethod.NONE:
            return None
        if not is_quality_text(acquired.text):
            logger.warning("Extracted text failed quality validation (%s chars)", len(acquired.text))
            return None
        fields = extract_fields(acquired.text, upload.candidate_name, SAFE_PROFILE)
        return fields.to_result(acquired.text, self.stage, acquired.method)


class FilenameExtractionStage(ExtractionStrategy):
    """Name from the file name (or the confirmed name); everything else sentinel. Never fails."""

    stage = ExtractionStage.FILENAME

    async def extract(self, upload: ResumeUpload) -> Optional[ExtractionResult]:
        return filename_result(upload)


def filename_result(upload: ResumeUpload) -> ExtractionResult:
    result = extract_from_filename(upload.file_path)
    confirmed = upload.candidate_name.strip()
    if confirmed:
        result = result.model_copy(update={"name": confirmed})
    return result


def default_stages(
    client: Optional[AsyncOpenAI] = None,
    enable_synthetic: bool = ENABLE_SYNTHETIC_FALLBACK,
) -> List[ExtractionStrategy]:
    return [
        AIExtractionStage(client),
        RobustExtractionStage(allow_synthetic=enable_synthetic),
        SafeExtractionStage(),
        FilenameExtractionStage(),
    ]


class ResumeExtractionPipeline:
    """
    Runs the stages in order for one upload and returns the first result produced.
    A low-confidence result is still a result; only None or an exception advances.
    """

    def __init__(
        self,
        llm_client: Optional[AsyncOpenAI] = None,
        stages: Optional[Sequence[ExtractionStrategy]] = None,
        enable_synthetic: bool = ENABLE_SYNTHETIC_FALLBACK,
    ) -> None:
        self.llm_client = llm_client
        if stages is None:
            stages = default_stages(llm_client, enable_synthetic)
        self.stages = list(stages)

    async def run(self, file_path: str, candidate_name: str = "") -> ExtractionResult:
        """Extract one upload. Never raises; the worst case is a sentinel filename result."""
        upload = ResumeUpload(file_path=str(file_path), candidate_name=candidate_name or "")
        logger.info("Resume extraction started: %s", upload.file_path)
        for strategy in self.stages:
            try:
                result = await strategy.extract(upload)
            except Exception as e:
                logger.exception("Stage %s failed: %s", strategy.stage.value, e)
                continue
            if result is not None:
                logger.info(
                    "Resume extraction finished: stage=%s method=%s parse_error=%s ai_enhanced=%s",
                    result.stage.value, result.acquisition_method.value,
                    result.parse_error, result.ai_enhanced,
                )
                return result
            logger.info("Stage %s produced no result; trying next stage", strategy.stage.value)

        logger.warning("All stages exhausted for %s; using filename result", upload.file_path)
        return filename_result(upload)


def run_resume_pipeline(file_path: str, candidate_name: str = "") -> ExtractionResult:
    """
    Run the full pipeline with the LLM client configured from the environment.
    Uses its own event loop; safe to call from sync context (e.g. a request handler thread).
    """

    async def _run() -> ExtractionResult:
        client = build_llm_client()
        try:
            return await ResumeExtractionPipeline(llm_client=client).run(file_path, candidate_name)
        finally:
            if client is not None:
                await client.close()

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(_run())
    finally:
        loop.close()
