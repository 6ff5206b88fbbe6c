"""Shared Pydantic models used across the application."""

from .ai import (
    AttachmentPayload,
    GenerateRequestPayload,
    GenerateResult,
    MessagePayload,
    ProvidersListing,
)
from .common import ErrorDetail, ResponseEnvelope

__all__ = (
    "ErrorDetail",
    "ResponseEnvelope",
    "AttachmentPayload",
    "GenerateRequestPayload",
    "GenerateResult",
    "MessagePayload",
    "ProvidersListing",
)
