"""Tests for AI-assisted extraction and its regex fallback."""

import asyncio
import json

import httpx
import pytest
from openai import APIConnectionError, AsyncOpenAI

from resume_intake.resume_pipeline.ai_extractor import (
    AIResumeExtractor,
    _clean_entries,
    _parse_llm_json,
    build_llm_client,
    extract_resume_with_ai,
)
from resume_intake.resume_pipeline.field_extractor import TEXT_PROFILE, extract_fields
from resume_intake.schemas.extraction_result import (
    AcquisitionMethod,
    ExperienceEntry,
    ExtractionStage,
)

RESUME_TEXT = "Jane Smith\nEmail: jane.smith@mail.com\nPhone: 555-111-2222\nSKILLS\nPython, React"

FIELD_NAMES = {"name", "email", "phone", "summary", "skills", "experience", "education"}

MODEL_REPLY = {
    "name": "Someone Else",
    "email": None,
    "phone": "+1 555 987 6543",
    "summary": "Backend engineer focused on APIs.",
    "skills": ["Python", "python", "FastAPI"],
    "experience": [
        {"title": "Engineer", "company": "Acme", "duration": "2019 - 2024"},
        "Freelance consulting",
        42,
    ],
    "education": [{"degree": "BSc", "institution": "State University", "year": 2014}],
}


def _assert_regex_fallback(result, text=RESUME_TEXT, name=""):
    expected = extract_fields(text, name, TEXT_PROFILE)
    assert result.model_dump(include=FIELD_NAMES) == expected.model_dump()
    assert result.ai_enhanced is False
    assert result.stage is ExtractionStage.AI
    assert result.acquisition_method is AcquisitionMethod.LIBRARY


class TestParseLLMJson:

    def test_plain_object(self):
        assert _parse_llm_json('{"name": "Jane"}') == {"name": "Jane"}

    def test_fenced_object(self):
        assert _parse_llm_json('```json\n{"name": "Jane"}\n```') == {"name": "Jane"}

    def test_object_wrapped_in_prose(self):
        assert _parse_llm_json('Here you go: {"name": "Jane"} Hope it helps') == {"name": "Jane"}

    @pytest.mark.parametrize("reply", ["", "not json", "[1, 2]", "```json\n{not valid json\n```"])
    def test_unusable(self, reply):
        assert _parse_llm_json(reply) is None


def test_clean_entries_coerces_and_drops():
    entries = _clean_entries(MODEL_REPLY["experience"], ExperienceEntry, "description")
    assert entries == [
        ExperienceEntry(title="Engineer", company="Acme", duration="2019 - 2024"),
        ExperienceEntry(description="Freelance consulting"),
    ]
    assert _clean_entries("not a list", ExperienceEntry, "description") == []


class TestAIResumeExtractor:

    @pytest.mark.asyncio
    async def test_without_client_matches_regex(self):
        result = await AIResumeExtractor(None).extract_from_text(RESUME_TEXT)
        _assert_regex_fallback(result)
        assert result.parse_error is False
        assert result.extracted_from_pdf is True

    @pytest.mark.asyncio
    async def test_model_reply_is_merged(self, llm_client_factory):
        client = llm_client_factory(json.dumps(MODEL_REPLY))
        result = await AIResumeExtractor(client).extract_from_text(RESUME_TEXT, "Janet Smythe")

        assert result.ai_enhanced is True
        assert result.parse_error is False
        assert result.name == "Janet Smythe"
        # null email from the model falls back to the address in the text
        assert result.email == "jane.smith@mail.com"
        assert result.phone == "+1 555 987 6543"
        assert result.summary == "Backend engineer focused on APIs."
        assert result.skills == ["Python", "FastAPI"]
        assert [e.title for e in result.experience] == ["Engineer", None]
        assert result.education[0].year == "2014"
        assert result.raw_text == RESUME_TEXT

    @pytest.mark.asyncio
    async def test_model_name_guess_is_ignored(self, llm_client_factory):
        client = llm_client_factory(json.dumps(MODEL_REPLY))
        result = await AIResumeExtractor(client).extract_from_text(RESUME_TEXT)
        assert result.name == "Jane Smith"

    @pytest.mark.asyncio
    async def test_placeholder_and_bad_values_fall_back(self, llm_client_factory):
        reply = {"email": "john@example.com", "phone": "123", "summary": "", "skills": "Python"}
        client = llm_client_factory(json.dumps(reply))
        result = await AIResumeExtractor(client).extract_from_text(RESUME_TEXT)
        assert result.ai_enhanced is True
        assert result.email == "jane.smith@mail.com"
        assert result.phone == "555-111-2222"
        assert result.skills == ["Python", "React"]
        assert result.experience == []

    @pytest.mark.asyncio
    async def test_request_parameters(self, llm_client_factory):
        client = llm_client_factory(json.dumps(MODEL_REPLY))
        text = "Jane Smith\n" + "x" * 100 + "MARKER"
        await AIResumeExtractor(client, model="test-model", text_limit=40).extract_from_text(text, "Jane Smith")

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.1
        prompt = kwargs["messages"][1]["content"]
        assert '"Jane Smith"' in prompt
        assert "MARKER" not in prompt

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["```json\n{not valid json\n```", "", "[1, 2]"])
    async def test_unusable_reply_falls_back(self, llm_client_factory, reply):
        client = llm_client_factory(reply)
        result = await AIResumeExtractor(client).extract_from_text(RESUME_TEXT)
        _assert_regex_fallback(result)

    @pytest.mark.asyncio
    async def test_transport_error_falls_back(self, llm_client_factory):
        error = APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
        client = llm_client_factory(error=error)
        result = await AIResumeExtractor(client).extract_from_text(RESUME_TEXT, "Jane Smith")
        _assert_regex_fallback(result, name="Jane Smith")

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_back(self, llm_client_factory):
        client = llm_client_factory(error=RuntimeError("boom"))
        result = await AIResumeExtractor(client).extract_from_text(RESUME_TEXT)
        _assert_regex_fallback(result)

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, llm_client_factory):
        async def slow(**kwargs):
            await asyncio.sleep(1)

        client = llm_client_factory()
        client.chat.completions.create = slow
        result = await AIResumeExtractor(client, timeout=0.01).extract_from_text(RESUME_TEXT)
        _assert_regex_fallback(result)


class TestExtractResumeWithAI:

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        assert await extract_resume_with_ai(str(tmp_path / "missing.pdf")) is None

    @pytest.mark.asyncio
    async def test_unreadable_pdf(self, garbage_file):
        assert await extract_resume_with_ai(str(garbage_file(b"\x00\x01garbage"))) is None

    @pytest.mark.asyncio
    async def test_pdf_with_model(self, clean_pdf, llm_client_factory):
        client = llm_client_factory(json.dumps(MODEL_REPLY))
        result = await extract_resume_with_ai(str(clean_pdf), "Jane Smith", client)
        assert result.ai_enhanced is True
        assert result.name == "Jane Smith"
        assert "jane.smith@mail.com" in result.raw_text


def test_build_llm_client():
    assert build_llm_client("") is None
    assert isinstance(build_llm_client("sk-test"), AsyncOpenAI)


@pytest.mark.asyncio
async def test_model_reply_without_contact_details_keeps_parse_error(llm_client_factory):
    client = llm_client_factory(json.dumps({"summary": "Some prose", "email": None, "phone": None}))
    result = await AIResumeExtractor(client).extract_from_text("lorem ipsum dolor sit amet consectetur")
    assert result.ai_enhanced is True
    assert result.summary == "Some prose"
    assert result.name == "Unknown Candidate"
    assert result.phone == "Not provided"
    assert result.parse_error is True
