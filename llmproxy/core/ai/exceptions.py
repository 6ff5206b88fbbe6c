"""Custom exceptions for AI provider orchestration and their normalised form."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Fixed set of failure categories surfaced to callers."""

    CONFIGURATION = "Configuration"
    NETWORK = "Network"
    PROVIDER_REJECTED = "ProviderRejected"
    EMPTY_RESPONSE = "EmptyResponse"
    INTERNAL = "Internal"


class AIServiceError(RuntimeError):
    """Base exception for AI service failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details


class ProviderConfigurationError(AIServiceError):
    """Raised when a provider is not correctly configured for use."""

    kind = ErrorKind.CONFIGURATION


class UnsupportedProviderError(ProviderConfigurationError):
    """Raised when a request names a provider outside the supported set."""

    def __init__(self, provider: Any) -> None:
        super().__init__(
            f"Unsupported provider: {provider}",
            details={"provider": str(provider)},
        )


class InvalidRequestError(ProviderConfigurationError):
    """Raised when a canonical request violates its own invariants."""


class AttachmentError(ProviderConfigurationError):
    """Raised when an attachment cannot be prepared for a provider."""


class UnsupportedAttachmentError(AttachmentError):
    """Raised when an attachment type cannot be sent or converted."""


class AttachmentExtractionError(AttachmentError):
    """Raised when text extraction from an attachment fails."""


class AIProviderError(AIServiceError):
    """Raised when a provider adapter encounters a request/response issue."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.provider = provider


class ProviderTransportError(AIProviderError):
    """Raised when the provider cannot be reached at the transport level."""

    kind = ErrorKind.NETWORK


class ProviderRejectedError(AIProviderError):
    """Raised when the provider answers with a non-success HTTP status."""

    kind = ErrorKind.PROVIDER_REJECTED

    def __init__(self, message: str, *, provider: str | None = None, status_code: int) -> None:
        super().__init__(
            message,
            provider=provider,
            details={"status_code": status_code},
        )
        self.status_code = status_code


class EmptyResponseError(AIProviderError):
    """Raised when a successful call carries unusable or absent content."""

    kind = ErrorKind.EMPTY_RESPONSE


@dataclass(frozen=True, slots=True)
class NormalizedError:
    """Uniform failure value returned to callers."""

    kind: ErrorKind
    message: str


def normalize_error(error: BaseException) -> NormalizedError:
    """Map any failure onto one of the fixed :class:`ErrorKind` values."""

    if isinstance(error, AIServiceError):
        return NormalizedError(kind=error.kind, message=str(error))
    if isinstance(error, httpx.RequestError):
        return NormalizedError(kind=ErrorKind.NETWORK, message="Provider request transport error")

    logger.exception("Unexpected failure while serving AI request", exc_info=error)
    return NormalizedError(
        kind=ErrorKind.INTERNAL,
        message=f"Unexpected internal error ({type(error).__name__})",
    )


__all__ = (
    "AIProviderError",
    "AIServiceError",
    "AttachmentError",
    "AttachmentExtractionError",
    "EmptyResponseError",
    "ErrorKind",
    "InvalidRequestError",
    "NormalizedError",
    "ProviderConfigurationError",
    "ProviderRejectedError",
    "ProviderTransportError",
    "UnsupportedAttachmentError",
    "UnsupportedProviderError",
    "normalize_error",
)
