"""Unit tests for the document generation pipeline."""

import pytest

from models import DocumentRequest, OutputFormat
from services import DocumentService, FormatConverter, TemplateRenderer
from services.exceptions import (
    ConversionNotSupported,
    DocumentValidationError,
    QuotaExceeded,
    TemplateNotFound,
    TemplateRenderError,
)
from services.plan_resolver import ANONYMOUS_CALLER


@pytest.fixture
def document_service(app_config, browser_manager, usage_meter) -> DocumentService:
    converter = FormatConverter(app_config, browser_manager)
    return DocumentService(usage_meter, TemplateRenderer(), converter)


def make_request(**fields) -> DocumentRequest:
    body = {"templateContent": "<h1>Hello {{ name }}</h1>", "data": {"name": "World"}, "format": "HTML"}
    body.update(fields)
    return DocumentRequest.model_validate(body)


class TestDocumentService:
    """Test cases for DocumentService."""

    @pytest.mark.asyncio
    async def test_html_generation(self, document_service, usage_meter) -> None:
        document = await document_service.generate(make_request(), ANONYMOUS_CALLER)

        assert document.content_type == "text/html"
        assert document.file_name == "document.html"
        assert b"<h1>Hello World</h1>" in document.content
        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 1

    @pytest.mark.asyncio
    async def test_pdf_generation_uses_browser(self, document_service, fake_launcher) -> None:
        request = make_request(format="pdf", options={"fileName": "hello.pdf"})

        document = await document_service.generate(request, "demo-key-123")

        assert document.content == b"%PDF-1.7 fake"
        assert document.content_type == "application/pdf"
        assert document.file_name == "hello.pdf"
        assert "<h1>Hello World</h1>" in fake_launcher.latest.pages[0].content

    @pytest.mark.asyncio
    async def test_missing_template_source(self, document_service, usage_meter) -> None:
        request = make_request(templateContent=None)

        with pytest.raises(DocumentValidationError, match="TemplateContent or TemplateId"):
            await document_service.generate(request, ANONYMOUS_CALLER)

        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 0

    @pytest.mark.asyncio
    async def test_quota_exhausted(self, document_service, usage_meter) -> None:
        await usage_meter.record_generation(ANONYMOUS_CALLER, 100)

        with pytest.raises(QuotaExceeded) as exc_info:
            await document_service.generate(make_request(), ANONYMOUS_CALLER)

        assert exc_info.value.status_code == 429
        assert exc_info.value.client_message() == "Monthly usage limit exceeded"
        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 100

    @pytest.mark.asyncio
    async def test_inline_content_wins_over_template_id(self, document_service) -> None:
        request = make_request(templateId="invoice")

        document = await document_service.generate(request, ANONYMOUS_CALLER)

        assert b"Hello World" in document.content
        assert b"INVOICE" not in document.content

    @pytest.mark.asyncio
    async def test_stored_template_lookup(self, document_service) -> None:
        request = make_request(
            templateContent=None,
            templateId="receipt",
            data={"company": {"name": "Shop"}, "receipt": {"number": "R-9", "barcode": "123"}},
        )

        document = await document_service.generate(request, ANONYMOUS_CALLER)

        assert b"RECEIPT" in document.content
        assert b"[BARCODE: 123]" in document.content

    @pytest.mark.asyncio
    async def test_unknown_template_id(self, document_service, usage_meter) -> None:
        request = make_request(templateContent=None, templateId="nope")

        with pytest.raises(TemplateNotFound):
            await document_service.generate(request, ANONYMOUS_CALLER)

        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 0

    @pytest.mark.asyncio
    async def test_render_failure_records_no_usage(self, document_service, usage_meter) -> None:
        request = make_request(templateContent="{% if %}")

        with pytest.raises(TemplateRenderError):
            await document_service.generate(request, ANONYMOUS_CALLER)

        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 0

    @pytest.mark.asyncio
    async def test_docx_records_no_usage(self, document_service, usage_meter, fake_launcher) -> None:
        with pytest.raises(ConversionNotSupported):
            await document_service.generate(make_request(format="DOCX"), ANONYMOUS_CALLER)

        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 0
        assert fake_launcher.calls == 0

    @pytest.mark.asyncio
    async def test_preview_forces_html(self, document_service, fake_launcher, usage_meter) -> None:
        request = make_request(format="PDF")

        document = await document_service.preview(request, ANONYMOUS_CALLER)

        assert document.content_type == "text/html"
        assert document.file_name == "document.html"
        assert request.format == OutputFormat.PDF
        assert fake_launcher.calls == 0
        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 1
