"""Document generation router for DocumentGen API."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from models import DocumentRequest, ErrorResponse, RenderedDocument, TemplateList
from services import ANONYMOUS_CALLER, DocumentService, list_templates
from services.exceptions import DocumentGenerationError
from utils import get_logger, log_exception, mask_caller_key

router = APIRouter(prefix="/api/v1/document", tags=["documents"])
logger = get_logger(__name__)


def get_document_service(request: Request) -> DocumentService:
    """Dependency to get the document service from application state."""
    return request.app.state.document_service  # type: ignore[no-any-return]


def get_caller_key(request: Request) -> str:
    """Caller key resolved by ApiKeyMiddleware."""
    return getattr(request.state, "caller_key", ANONYMOUS_CALLER)


def error_response(request: Request, status_code: int, error: str, error_code: str, retryable: bool = False) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        error_code=error_code,
        retryable=retryable,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


def file_response(document: RenderedDocument) -> Response:
    quoted = quote(document.file_name)
    if quoted != document.file_name:
        disposition = f"attachment; filename*=utf-8''{quoted}"
    else:
        disposition = f'attachment; filename="{document.file_name}"'
    return Response(
        content=document.content,
        media_type=document.content_type,
        headers={"Content-Disposition": disposition},
    )


async def _run(request: Request, document_request: DocumentRequest, service: DocumentService, preview: bool) -> Response:
    caller_key = get_caller_key(request)
    try:
        if preview:
            document = await service.preview(document_request, caller_key)
        else:
            document = await service.generate(document_request, caller_key)
    except DocumentGenerationError as e:
        return error_response(request, e.status_code, e.client_message(), e.error_code, e.retryable)
    except Exception as e:
        log_exception(
            logger,
            e,
            "Error generating document",
            endpoint=request.url.path,
            caller_key=mask_caller_key(caller_key),
        )
        return error_response(
            request, 500, "An error occurred while generating the document", "internal_error"
        )
    return file_response(document)


@router.post("/generate", response_class=Response)
async def generate_document(
    document_request: DocumentRequest,
    request: Request,
    service: DocumentService = Depends(get_document_service),
) -> Response:
    """Render a template and return it in the requested format."""
    return await _run(request, document_request, service, preview=False)


@router.post("/preview", response_class=Response)
async def preview_document(
    document_request: DocumentRequest,
    request: Request,
    service: DocumentService = Depends(get_document_service),
) -> Response:
    """Same as generate, always returning HTML."""
    return await _run(request, document_request, service, preview=True)


@router.get("/templates", response_model=TemplateList)
async def get_templates() -> TemplateList:
    """Identifiers accepted as ``templateId``."""
    return TemplateList(templates=list_templates())
