"""Exceptions raised inside the extraction stages. None of them leave the pipeline."""

from typing import Any, Optional


class ResumeExtractionError(Exception):
    """Base exception for resume extraction errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class TextExtractionError(ResumeExtractionError):
    """A text extraction library failed or returned unusable text."""

    pass
