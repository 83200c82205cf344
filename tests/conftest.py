"""Shared fixtures: small real PDF/DOCX files and a stand-in LLM client."""

from pathlib import Path
from types import SimpleNamespace
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from docx import Document

CLEAN_RESUME_LINES = [
    "Jane Smith",
    "Email: jane.smith@mail.com",
    "Phone: 555-111-2222",
    "SKILLS",
    "Python, React",
]


def build_pdf(lines: List[str]) -> bytes:
    """Single-page PDF with one Helvetica text line per entry, uncompressed content stream."""

    def esc(s: str) -> str:
        return s.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")

    ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
    ops.extend(f"({esc(line)}) Tj T*" for line in lines)
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


@pytest.fixture
def pdf_factory(tmp_path: Path):
    def _make(lines: List[str], name: str = "resume.pdf") -> Path:
        path = tmp_path / name
        path.write_bytes(build_pdf(lines))
        return path

    return _make


@pytest.fixture
def clean_pdf(pdf_factory) -> Path:
    return pdf_factory(CLEAN_RESUME_LINES, "jane-smith-resume.pdf")


@pytest.fixture
def docx_factory(tmp_path: Path):
    def _make(lines: List[str], name: str = "resume.docx") -> Path:
        doc = Document()
        for line in lines:
            doc.add_paragraph(line)
        path = tmp_path / name
        doc.save(str(path))
        return path

    return _make


@pytest.fixture
def garbage_file(tmp_path: Path):
    def _make(content: bytes, name: str = "upload.pdf") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _make


def make_llm_client(content: Optional[str] = None, error: Optional[BaseException] = None) -> MagicMock:
    """Object shaped like AsyncOpenAI for chat.completions.create."""
    client = MagicMock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        response = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
        )
        client.chat.completions.create = AsyncMock(return_value=response)
    return client


@pytest.fixture
def llm_client_factory():
    return make_llm_client
