"""Document generation orchestration.

Generate runs: validate request, check the monthly quota, resolve the
template, render, convert, then record usage. Usage is recorded only after
conversion returned bytes, so a failed attempt never consumes quota. Rate
limiting happens earlier, in the HTTP middleware.
"""

import time

from models import DocumentRequest, OutputFormat, RenderedDocument
from utils import create_contextual_logger, log_exception, mask_caller_key
from .exceptions import DocumentGenerationError, DocumentValidationError, QuotaExceeded
from .format_converter import FormatConverter
from .health_metrics import documents_generated, generation_duration
from .template_renderer import TemplateRenderer
from .template_store import lookup_template
from .usage_meter import UsageMeter


class DocumentService:
    """Generate and preview documents for a caller."""

    def __init__(
        self,
        usage_meter: UsageMeter,
        renderer: TemplateRenderer,
        converter: FormatConverter,
    ) -> None:
        self.usage_meter = usage_meter
        self.renderer = renderer
        self.converter = converter
        self.logger = create_contextual_logger(__name__, service="document_service")

    async def generate(self, request: DocumentRequest, caller_key: str) -> RenderedDocument:
        context = {
            "caller_key": mask_caller_key(caller_key),
            "format": request.format.value,
            "template_id": request.template_id or None,
        }
        started = time.perf_counter()
        try:
            document = await self._generate(request, caller_key)
        except DocumentGenerationError as e:
            documents_generated.labels(format=request.format.value, status=e.error_code).inc()
            self.logger.warning(
                "Document generation failed",
                error_code=e.error_code,
                error=str(e),
                **context,
            )
            raise
        except Exception as e:
            documents_generated.labels(format=request.format.value, status="internal_error").inc()
            log_exception(self.logger, e, "Unexpected error generating document", **context)
            raise

        elapsed = time.perf_counter() - started
        documents_generated.labels(format=request.format.value, status="success").inc()
        generation_duration.labels(format=request.format.value).observe(elapsed)
        self.logger.info(
            "Document generated",
            size_bytes=len(document.content),
            duration_ms=round(elapsed * 1000, 1),
            **context,
        )
        return document

    async def preview(self, request: DocumentRequest, caller_key: str) -> RenderedDocument:
        """Generate with the format forced to HTML."""
        return await self.generate(request.model_copy(update={"format": OutputFormat.HTML}), caller_key)

    async def _generate(self, request: DocumentRequest, caller_key: str) -> RenderedDocument:
        if not request.has_template_source:
            raise DocumentValidationError("Either TemplateContent or TemplateId must be provided")

        if not await self.usage_meter.can_generate(caller_key):
            raise QuotaExceeded("Monthly usage limit exceeded")

        template_source = request.template_content or lookup_template(request.template_id)
        markup = self.renderer.render(template_source, request.data, request.options)
        content = await self.converter.convert(markup, request.format, request.options)

        await self.usage_meter.record_generation(caller_key, 1)

        return RenderedDocument(
            content=content,
            content_type=request.format.content_type,
            file_name=request.file_name(),
        )
