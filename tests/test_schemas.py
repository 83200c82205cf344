"""Tests for ExtractionResult helpers used by the upload handler."""

import pytest
from pydantic import ValidationError

from resume_intake.schemas.extraction_result import (
    NO_PHONE,
    AcquisitionMethod,
    ExperienceEntry,
    ExtractionResult,
    ExtractionStage,
)


def _result(**overrides) -> ExtractionResult:
    values = dict(
        name="Jane Smith",
        email="jane@realmail.org",
        phone="555-111-2222",
        stage=ExtractionStage.ROBUST,
        acquisition_method=AcquisitionMethod.LIBRARY,
        extracted_from_pdf=True,
    )
    values.update(overrides)
    return ExtractionResult(**values)


def test_candidate_update_with_real_contact_details():
    assert _result().candidate_update() == {
        "name": "Jane Smith",
        "email": "jane@realmail.org",
        "phone": "555-111-2222",
    }


def test_candidate_update_leaves_out_sentinels():
    result = _result(email="candidate1712345678901@example.com", phone=NO_PHONE)
    assert result.candidate_update() == {"name": "Jane Smith"}
    assert not result.has_real_email


def test_needs_confirmation():
    assert not _result().needs_confirmation
    assert _result(parse_error=True).needs_confirmation
    assert _result(extracted_from_filename=True).needs_confirmation
    assert _result(email="candidate1@example.com").needs_confirmation


def test_to_document_shape():
    result = _result(
        experience=[ExperienceEntry(title="Engineer", company="Acme")],
        raw_text="Jane Smith",
        ai_enhanced=True,
    )
    doc = result.to_document()
    assert doc["rawText"] == "Jane Smith"
    assert doc["extractedFromPDF"] is True
    assert doc["extractedFromFilename"] is False
    assert doc["aiEnhanced"] is True
    assert doc["parseError"] is False
    assert doc["stage"] == "robust"
    assert doc["acquisitionMethod"] == "library"
    assert doc["experience"] == [{"title": "Engineer", "company": "Acme"}]


def test_empty_name_rejected():
    with pytest.raises(ValidationError):
        _result(name="")


def test_entries_ignore_unknown_keys():
    entry = ExperienceEntry.model_validate({"title": "Engineer", "location": "Remote"})
    assert entry.title == "Engineer"
