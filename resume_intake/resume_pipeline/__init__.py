"""Resume extraction pipeline: text acquisition (PDF/DOCX), regex and LLM field extraction, fallbacks."""

from resume_intake.resume_pipeline.ai_extractor import (
    AIResumeExtractor,
    build_llm_client,
    extract_resume_with_ai,
)
from resume_intake.resume_pipeline.field_extractor import extract_fields
from resume_intake.resume_pipeline.filename_extractor import extract_from_filename
from resume_intake.resume_pipeline.pipeline import ResumeExtractionPipeline, run_resume_pipeline
from resume_intake.resume_pipeline.text_extractor import acquire_text
from resume_intake.schemas.extraction_result import ExtractionResult

__all__ = [
    "ResumeExtractionPipeline",
    "run_resume_pipeline",
    "AIResumeExtractor",
    "build_llm_client",
    "extract_resume_with_ai",
    "extract_fields",
    "extract_from_filename",
    "acquire_text",
    "ExtractionResult",
]
