import fitz
from conftest import extract_text_from_pdf, pdf_page_count

from certigest.errors import UnknownCity
from certigest.fallback import MAX_LINES, PAGE_SIZE, TITLE, WRAP_WIDTH, report_failure, wrap_message


def test_wrap_message_short():
    assert wrap_message("Template missing") == ["Template missing"]
    assert wrap_message("") == [""]


def test_wrap_message_respects_width_and_line_limit():
    lines = wrap_message("palabra " * 400)
    assert len(lines) == MAX_LINES
    assert all(len(line) <= WRAP_WIDTH for line in lines)
    assert lines[-1].endswith("...")


def test_wrap_message_keeps_line_breaks():
    assert wrap_message("first\nsecond") == ["first", "second"]


def test_report_failure_is_single_page():
    pdf_bytes = report_failure(UnknownCity("No certificate template configured for city 'LIMA'"))
    assert pdf_page_count(pdf_bytes) == 1

    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    assert (doc[0].rect.width, doc[0].rect.height) == PAGE_SIZE
    doc.close()

    text = extract_text_from_pdf(pdf_bytes)
    assert TITLE in text
    assert "UnknownCity" in text
    assert "LIMA" in text


def test_report_failure_accepts_plain_message():
    text = extract_text_from_pdf(report_failure("disk full"))
    assert "ERROR" in text
    assert "disk full" in text


def test_report_failure_is_deterministic():
    assert report_failure("same") == report_failure("same")
