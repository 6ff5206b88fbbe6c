"""Attachment classification and data URL helpers."""

from __future__ import annotations

import re
from enum import Enum

from .types import ImageBlock

PDF_MIME_TYPE = "application/pdf"
DOC_MIME_TYPE = "application/msword"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
_DATA_URL_RE = re.compile(r"data:([^;]+);base64,(.+)")


class AttachmentStrategy(str, Enum):
    """How an attachment travels to the provider."""

    INLINE_BASE64 = "InlineBase64"
    FILES_API_REFERENCE = "FilesApiReference"
    EXTRACTED_TEXT = "ExtractedText"


class DocumentKind(str, Enum):
    """Content family detected from MIME type and file name."""

    IMAGE = "image"
    PDF = "pdf"
    DOCX = "docx"
    LEGACY_DOC = "doc"
    OTHER = "other"


def _normalise(mime_type: str | None, file_name: str | None) -> tuple[str, str]:
    return (mime_type or "").strip().lower(), (file_name or "").strip().lower()


def is_image(mime_type: str | None) -> bool:
    lowered = (mime_type or "").strip().lower()
    return lowered in _IMAGE_MIME_TYPES or lowered.startswith("image/")


def detect_kind(mime_type: str | None, file_name: str | None = None) -> DocumentKind:
    """Return the content family, keeping legacy ``.doc`` apart from ``.docx``."""

    mime, name = _normalise(mime_type, file_name)
    if mime == PDF_MIME_TYPE or name.endswith(".pdf"):
        return DocumentKind.PDF
    if is_image(mime):
        return DocumentKind.IMAGE
    if mime == DOCX_MIME_TYPE or name.endswith(".docx"):
        return DocumentKind.DOCX
    if mime == DOC_MIME_TYPE or name.endswith(".doc"):
        return DocumentKind.LEGACY_DOC
    return DocumentKind.OTHER


def classify(
    mime_type: str | None,
    file_name: str | None = None,
    *,
    prefer_upload: bool = False,
) -> AttachmentStrategy:
    """Decide how an attachment must travel to a provider.

    PDFs are always inlined because the upload endpoint rejects the vision
    purpose for non-image files. Images are inlined unless the caller opts into
    pre-upload. Word documents and every other type are converted to plain
    text before they reach a provider.
    """

    kind = detect_kind(mime_type, file_name)
    if kind is DocumentKind.PDF:
        return AttachmentStrategy.INLINE_BASE64
    if kind is DocumentKind.IMAGE:
        if prefer_upload:
            return AttachmentStrategy.FILES_API_REFERENCE
        return AttachmentStrategy.INLINE_BASE64
    return AttachmentStrategy.EXTRACTED_TEXT


def build_data_url(mime_type: str, data: str) -> str:
    return f"data:{mime_type};base64,{data}"


def parse_data_url(url: str | None) -> ImageBlock | None:
    """Decode ``data:<mime>;base64,<payload>``; any other shape yields ``None``."""

    if not isinstance(url, str):
        return None
    match = _DATA_URL_RE.fullmatch(url)
    if match is None:
        return None
    return ImageBlock(data=match.group(2), mime_type=match.group(1))


__all__ = (
    "AttachmentStrategy",
    "DOCX_MIME_TYPE",
    "DOC_MIME_TYPE",
    "DocumentKind",
    "PDF_MIME_TYPE",
    "build_data_url",
    "classify",
    "detect_kind",
    "is_image",
    "parse_data_url",
)
