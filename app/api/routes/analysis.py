"""Document analysis API endpoints."""

from typing import Annotated, Any, Awaitable, Callable

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.core.config import settings
from app.core.exceptions import (
    DocumentReadError,
    ExtractionUnavailableError,
    UnsupportedDocumentError,
    ValidationError,
)
from app.dependencies import get_analysis_orchestrator
from app.schemas.analysis import (
    AnalyzeDocumentRequest,
    CombinedAnalysis,
    IdentifiedCharacters,
    KeyInformation,
    NarrativeSummary,
)
from app.services.analysis import DocumentAnalysisOrchestrator
from app.services.document_reader import ensure_document_text, read_document
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

router = APIRouter()

Orchestrator = Annotated[DocumentAnalysisOrchestrator, Depends(get_analysis_orchestrator)]


async def _run_analysis(
    orchestrator: DocumentAnalysisOrchestrator, document_text: str
) -> CombinedAnalysis:
    try:
        return await orchestrator.analyze(document_text)
    except Exception as e:
        LOGGER.error(
            "Document analysis failed unexpectedly",
            extra={"document_chars": len(document_text)},
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Document analysis failed: {str(e)}",
        ) from e


async def _run_single_operation(
    operation: Callable[[], Awaitable[Any]], operation_name: str
) -> Any:
    try:
        return await operation()
    except ExtractionUnavailableError as e:
        LOGGER.warning(
            "Extraction operation unavailable",
            extra={"operation": operation_name, "error": str(e)},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Extraction unavailable: {str(e)}",
        ) from e


@router.post(
    "",
    response_model=CombinedAnalysis,
    response_model_exclude_none=True,
    summary="Analyze document text",
    operation_id="analyze_document",
)
async def analyze_document(
    request: AnalyzeDocumentRequest,
    orchestrator: Orchestrator,
) -> CombinedAnalysis:
    """
    Analyze pasted document text.

    Returns the narrative summary (or a fallback placeholder), plus keywords,
    important points and identified characters when those extractions succeed.
    A failed extraction leaves its section out rather than failing the request.
    """
    return await _run_analysis(orchestrator, request.document_text)


@router.post(
    "/upload",
    response_model=CombinedAnalysis,
    response_model_exclude_none=True,
    summary="Analyze an uploaded document",
    operation_id="analyze_uploaded_document",
)
async def analyze_uploaded_document(
    orchestrator: Orchestrator,
    file: UploadFile = File(
        ...,
        description="Document to analyze (.txt, .md, .docx or .pdf)",
    ),
) -> CombinedAnalysis:
    """
    Decode an uploaded document and analyze its text.

    Rejects unsupported file types (415), oversized uploads (413), and files
    that cannot be read or contain no text (422).
    """
    # One byte past the limit is enough to tell an oversized upload
    content = await file.read(settings.max_upload_bytes + 1)

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.max_upload_bytes} byte upload limit",
        )

    try:
        document_text = ensure_document_text(
            read_document(file.filename, file.content_type, content)
        )
    except UnsupportedDocumentError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(e),
        ) from e
    except (DocumentReadError, ValidationError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    LOGGER.info(
        "Uploaded document decoded",
        extra={"document_name": file.filename, "document_chars": len(document_text)},
    )
    return await _run_analysis(orchestrator, document_text)


@router.post(
    "/summary",
    response_model=NarrativeSummary,
    summary="Generate a narrative summary",
    operation_id="summarize_document",
)
async def summarize_document(
    request: AnalyzeDocumentRequest,
    orchestrator: Orchestrator,
) -> NarrativeSummary:
    """Generate only the narrative summary. Fails with 502 if unavailable."""
    summary = await _run_single_operation(
        lambda: orchestrator.run_operation("summary", request.document_text),
        "summary",
    )
    return NarrativeSummary(summary=summary)


@router.post(
    "/key-information",
    response_model=KeyInformation,
    summary="Extract keywords and important points",
    operation_id="extract_key_information",
)
async def extract_key_information(
    request: AnalyzeDocumentRequest,
    orchestrator: Orchestrator,
) -> KeyInformation:
    """Extract only keywords and important points. Fails with 502 if unavailable."""
    return await _run_single_operation(
        lambda: orchestrator.run_operation("key_information", request.document_text),
        "key_information",
    )


@router.post(
    "/characters",
    response_model=IdentifiedCharacters,
    summary="Identify characters",
    operation_id="identify_characters",
)
async def identify_characters(
    request: AnalyzeDocumentRequest,
    orchestrator: Orchestrator,
) -> IdentifiedCharacters:
    """Identify only the characters. Fails with 502 if unavailable."""
    return await _run_single_operation(
        lambda: orchestrator.run_operation("identified_characters", request.document_text),
        "identified_characters",
    )
