import io
from pathlib import Path

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from doclens.storage.file_storage import LocalFileStorage

from fakes import (
    FakeAssistant,
    FakeDocumentRepository,
    FakeExtractionResultRepository,
    FakeExtractor,
    FakeInteractionRepository,
    InMemoryDatabase,
)


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Invoice total 42.00 EUR")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    """A small blank PNG image."""
    buf = io.BytesIO()
    Image.new("RGB", (64, 32), color="white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture()
def doc_repo(memory_db: InMemoryDatabase) -> FakeDocumentRepository:
    return FakeDocumentRepository(memory_db)


@pytest.fixture()
def extraction_repo(memory_db: InMemoryDatabase) -> FakeExtractionResultRepository:
    return FakeExtractionResultRepository(memory_db)


@pytest.fixture()
def interaction_repo(memory_db: InMemoryDatabase) -> FakeInteractionRepository:
    return FakeInteractionRepository(memory_db)


@pytest.fixture()
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture()
def fake_assistant() -> FakeAssistant:
    return FakeAssistant()


@pytest.fixture()
def storage(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "uploads")
