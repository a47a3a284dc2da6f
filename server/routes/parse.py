"""Quote parsing endpoint."""

import os

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from models.errors import InternalError, QuoteParserError
from models.quote import FileRef, InputDocument
from orchestrator.core import QuoteOrchestrator
from server.dependencies import get_orchestrator
from server.schemas.responses import ErrorResponseDTO, QuoteResponseDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Parse"])


def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    stream = upload.file
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _build_file_ref(upload: UploadFile | None) -> FileRef | None:
    if upload is None or not upload.filename:
        return None
    return FileRef(
        filename=upload.filename,
        media_type=upload.content_type or "",
        size=_upload_size(upload),
        stream=upload.file,
    )


@router.post(
    "/parse",
    response_model=QuoteResponseDTO,
    responses={400: {"model": ErrorResponseDTO}, 500: {"model": ErrorResponseDTO}},
)
async def parse_quote(
    request: Request,
    emailText: str = Form(""),
    file: UploadFile | None = File(None),
    orchestrator: QuoteOrchestrator = Depends(get_orchestrator),
):
    """Extract guestroom, meeting room and F&B totals from pasted text and/or an uploaded file."""
    request_id = getattr(request.state, "request_id", None)
    file_ref = _build_file_ref(file)

    logger.info(
        "Parse request received",
        extra={
            "extra_fields": {
                "request_id": request_id,
                "text_length": len(emailText),
                "file_name": file_ref.filename if file_ref else None,
                "media_type": file_ref.media_type if file_ref else None,
                "file_size": file_ref.size if file_ref else None,
            }
        },
    )

    document = InputDocument(source_text=emailText, uploaded_file=file_ref)
    try:
        quote = await orchestrator.process(document, request_id=request_id)
    except QuoteParserError:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error while parsing quote: {e}",
            exc_info=True,
            extra={"extra_fields": {"request_id": request_id, "error_type": type(e).__name__}},
        )
        raise InternalError(details=str(e)) from e

    return QuoteResponseDTO.from_processed_quote(quote)
