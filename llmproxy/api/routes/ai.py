"""HTTP routes for provider-normalized text generation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ...core.ai.exceptions import AIServiceError, ErrorKind, NormalizedError, normalize_error
from ...core.ai.service import AIService
from ...core.ai.types import ProviderName
from ...models.ai import GenerateRequestPayload, GenerateResult, ProvidersListing
from ...models.common import ResponseEnvelope

router = APIRouter(prefix="/ai", tags=["ai"])

_STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NETWORK: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.PROVIDER_REJECTED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.EMPTY_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai_service


def _error_response(error: NormalizedError) -> JSONResponse:
    envelope = ResponseEnvelope.from_error(error)
    return JSONResponse(
        status_code=_STATUS_BY_KIND[error.kind], content=envelope.model_dump(mode="json")
    )


@router.get(
    "/providers",
    response_model=ResponseEnvelope[ProvidersListing],
    summary="List supported and configured providers",
)
async def list_providers(
    service: AIService = Depends(get_ai_service),
) -> ResponseEnvelope[ProvidersListing]:
    payload = ProvidersListing(
        supported=list(ProviderName),
        configured=service.available_providers(),
    )
    return ResponseEnvelope.success_payload(payload)


@router.post(
    "/generate",
    response_model=ResponseEnvelope[GenerateResult],
    summary="Generate text with the selected provider",
)
async def generate(
    payload: GenerateRequestPayload,
    service: AIService = Depends(get_ai_service),
) -> ResponseEnvelope[GenerateResult] | JSONResponse:
    try:
        request = payload.to_request()
    except AIServiceError as exc:
        return _error_response(normalize_error(exc))

    outcome = await service.complete(request)
    if isinstance(outcome, NormalizedError):
        return _error_response(outcome)

    return ResponseEnvelope.success_payload(GenerateResult.from_response(outcome))
