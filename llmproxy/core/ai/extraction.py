"""Plain-text extraction for attachments that cannot travel as binary."""

from __future__ import annotations

import io
import logging

import docx
import pdfplumber

from .attachments import DocumentKind, detect_kind
from .exceptions import AttachmentExtractionError, UnsupportedAttachmentError
from .types import Attachment

logger = logging.getLogger(__name__)


def extract_pdf_text(data: bytes) -> str:
    """Extract text from each PDF page and concatenate with newlines."""

    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        raise AttachmentExtractionError(f"Failed to extract text from PDF: {exc}") from exc
    return "\n".join(pages)


def extract_docx_text(data: bytes) -> str:
    """Extract paragraph text from a Word (.docx) document."""

    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as exc:
        raise AttachmentExtractionError(
            f"Failed to extract text from Word document: {exc}"
        ) from exc
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_plain_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise UnsupportedAttachmentError(
            "Attachment is not readable as text and no extractor supports its type"
        ) from exc


def extract_attachment_text(attachment: Attachment) -> str:
    """Convert *attachment* to plain text according to its detected kind."""

    kind = detect_kind(attachment.mime_type, attachment.file_name)
    logger.debug(
        "Extracting text from attachment",
        extra={"mime_type": attachment.mime_type, "kind": kind.value},
    )
    if kind is DocumentKind.PDF:
        return extract_pdf_text(attachment.data)
    if kind is DocumentKind.DOCX:
        return extract_docx_text(attachment.data)
    if kind is DocumentKind.LEGACY_DOC:
        raise UnsupportedAttachmentError(
            "Only .docx files are supported. Please convert .doc files to .docx format.",
            details={"file_name": attachment.file_name, "mime_type": attachment.mime_type},
        )
    if kind is DocumentKind.IMAGE:
        raise UnsupportedAttachmentError("Images cannot be converted to text")
    return extract_plain_text(attachment.data)


__all__ = (
    "extract_attachment_text",
    "extract_docx_text",
    "extract_pdf_text",
    "extract_plain_text",
)
