"""Domain-specific exceptions.

Every failure the document pipeline can surface derives from
``DocumentGenerationError``. Each class carries the HTTP status it maps to,
a stable ``error_code`` and whether a caller may reasonably resubmit the same
request (``retryable``). Nothing inside the service retries on its own.
"""

from typing import Optional


class DocumentGenerationError(Exception):
    error_code = "internal_error"
    status_code = 500
    retryable = False
    # Shown to callers instead of str(exc) when set
    public_message: Optional[str] = None

    def client_message(self) -> str:
        return self.public_message or str(self)


class DocumentValidationError(DocumentGenerationError):
    error_code = "validation_error"
    status_code = 400


class QuotaExceeded(DocumentGenerationError):
    error_code = "quota_exceeded"
    status_code = 429
    public_message = "Monthly usage limit exceeded"


class RateLimitExceeded(DocumentGenerationError):
    error_code = "rate_limited"
    status_code = 429

    def __init__(self, limit: int, reset_at: int) -> None:
        super().__init__(f"You have exceeded the rate limit of {limit} requests per minute")
        self.limit = limit
        self.reset_at = reset_at


class TemplateRenderError(DocumentGenerationError):
    error_code = "template_error"


class TemplateNotFound(TemplateRenderError):
    error_code = "template_not_found"
    status_code = 404

    def __init__(self, template_id: str) -> None:
        super().__init__(f"Template {template_id} not found")
        self.template_id = template_id


class ConversionError(DocumentGenerationError):
    error_code = "conversion_error"
    retryable = True
    public_message = "An error occurred while generating the document"


class ConversionTimeout(ConversionError):
    error_code = "conversion_timeout"


class EngineLaunchFailure(ConversionError):
    error_code = "engine_launch_failure"


class ConversionNotSupported(DocumentGenerationError):
    error_code = "conversion_not_supported"
    status_code = 501
