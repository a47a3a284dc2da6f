"""Plain-text extraction for uploaded quote documents (PDF, HTML, text)."""

import asyncio
import io

from pypdf import PdfReader

from models.errors import ExtractionFailed, PayloadTooLarge, UnsupportedMediaType
from models.quote import FileRef
from utils.logger import get_logger

from .html_text import html_to_text

logger = get_logger(__name__)

PDF = "application/pdf"
HTML = "text/html"
PLAIN_TEXT = "text/plain"
OCTET_STREAM = "application/octet-stream"

ALLOWED_MEDIA_TYPES = frozenset({PDF, HTML, PLAIN_TEXT, OCTET_STREAM})
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
PDF_SIGNATURE = b"%PDF"


def normalize_media_type(media_type: str | None) -> str:
    """``"Text/HTML; charset=utf-8"`` -> ``"text/html"``."""
    return (media_type or "").split(";", 1)[0].strip().lower()


class TextExtractor:
    """
    Converts an uploaded file into plain text based on its declared media type.

    Validation happens before any byte is read, so rejected uploads are never
    decoded. Octet-stream uploads are sniffed: PDF bytes go through the PDF
    path, anything else is decoded as UTF-8.
    """

    def __init__(self, max_bytes: int = DEFAULT_MAX_BYTES):
        self.max_bytes = max_bytes

    def validate(self, file_ref: FileRef) -> str:
        """
        Check declared type and size.

        Returns:
            str: The normalized media type

        Raises:
            UnsupportedMediaType: Declared type is not accepted
            PayloadTooLarge: Declared size exceeds ``max_bytes``
        """
        media_type = normalize_media_type(file_ref.media_type)
        if media_type not in ALLOWED_MEDIA_TYPES:
            raise UnsupportedMediaType(details={"media_type": file_ref.media_type})
        if file_ref.size > self.max_bytes:
            raise PayloadTooLarge(
                f"File too large. Please upload files smaller than {self.max_bytes // (1024 * 1024)}MB.",
                details={"size": file_ref.size, "max_bytes": self.max_bytes},
            )
        return media_type

    def extract(self, file_ref: FileRef) -> str:
        media_type = self.validate(file_ref)
        data = self._read(file_ref)

        if media_type == PDF or (media_type == OCTET_STREAM and data.lstrip().startswith(PDF_SIGNATURE)):
            text = self._extract_pdf(data, file_ref.filename)
        elif media_type == HTML:
            text = html_to_text(data.decode("utf-8", errors="replace"))
        else:
            text = data.decode("utf-8", errors="replace")

        logger.info(
            "Extracted text from uploaded file",
            extra={
                "extra_fields": {
                    "file_name": file_ref.filename,
                    "media_type": media_type,
                    "size": len(data),
                    "text_length": len(text),
                }
            },
        )
        return text

    async def extract_async(self, file_ref: FileRef) -> str:
        """Run :meth:`extract` in a worker thread; PDF decoding is CPU-bound."""
        return await asyncio.to_thread(self.extract, file_ref)

    def _read(self, file_ref: FileRef) -> bytes:
        stream = file_ref.stream
        if stream.seekable():
            stream.seek(0)
        data = stream.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise PayloadTooLarge(details={"size": file_ref.size, "max_bytes": self.max_bytes})
        return data

    def _extract_pdf(self, data: bytes, filename: str) -> str:
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as err:
            logger.warning(
                "PDF extraction failed",
                extra={"extra_fields": {"file_name": filename, "error": str(err), "error_type": type(err).__name__}},
            )
            raise ExtractionFailed(details=f"PDF extraction failed: {err}") from err
        return "\n".join(page for page in pages if page)
