import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from portfolio_review.sessions.memory_store import InMemorySessionStore


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
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
def portfolio_pdf_bytes() -> bytes:
    """Generate a statement-like PDF listing a few holdings."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    lines = [
        "Consolidated Account Statement",
        "Bluechip Equity Fund - Units 1200.50 - Value 150000.00",
        "Short Term Debt Fund - Units 800.00 - Value 98325.00",
        "Liquid Fund - Units 50.00 - Value 50000.00",
        "Total Portfolio Value 298325.00",
    ]
    y = 720
    for line in lines:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()


@pytest.fixture()
def memory_store() -> InMemorySessionStore:
    return InMemorySessionStore()
