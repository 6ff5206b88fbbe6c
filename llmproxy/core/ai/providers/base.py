"""Base implementation for provider specific HTTP clients."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping, Sequence

import httpx

from ..config import ProviderAdapterSettings
from ..exceptions import (
    EmptyResponseError,
    ProviderConfigurationError,
    ProviderRejectedError,
    ProviderTransportError,
)
from ..normalizer import RequestNormalizer
from ..types import AIRequest, ProviderName, WireRequest

logger = logging.getLogger(__name__)


class BaseAIClient:
    """Shared HTTP transport and request handling for AI providers."""

    provider: ClassVar[ProviderName]
    label: ClassVar[str]
    default_base_url: ClassVar[str]
    normalizer_class: ClassVar[type[RequestNormalizer]]
    error_message_paths: ClassVar[Sequence[tuple[str, ...]]] = (("error", "message"),)

    supports_file_upload: ClassVar[bool] = False
    supports_images: ClassVar[bool] = True
    accepts_inline_pdf: ClassVar[bool] = True

    def __init__(self, config: ProviderAdapterSettings, *, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client
        self._normalizer = self.normalizer_class(config)

    @property
    def config(self) -> ProviderAdapterSettings:
        return self._config

    @property
    def base_url(self) -> str:
        return (self._config.base_url or self.default_base_url).rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self._config.api_key)

    def normalize(self, request: AIRequest) -> WireRequest:
        return self._normalizer.normalize(request)

    async def invoke(self, wire: WireRequest) -> Mapping[str, Any]:
        """POST the wire payload and return the parsed provider body."""

        api_key = self._require_api_key()
        try:
            response = await self._http.post(
                self._endpoint(wire),
                json=wire.payload,
                headers=self._headers(api_key),
                params=self._params(api_key),
                timeout=self._config.request_timeout,
            )
        except httpx.RequestError as exc:
            raise ProviderTransportError(
                f"{self.label} request transport error: {type(exc).__name__}",
                provider=self.provider.value,
            ) from exc

        self._raise_for_status(response)

        try:
            parsed = response.json()
        except ValueError as exc:
            raise EmptyResponseError(
                f"{self.label} returned invalid JSON", provider=self.provider.value
            ) from exc
        if not isinstance(parsed, Mapping):
            raise EmptyResponseError(
                f"{self.label} returned an unexpected response body", provider=self.provider.value
            )
        return parsed

    def extract(self, data: Mapping[str, Any]) -> str:
        """Reduce the provider body to a single text string."""

        raise NotImplementedError

    async def upload(self, data: bytes, file_name: str, mime_type: str) -> str:
        raise ProviderConfigurationError(f"{self.label} does not support file uploads")

    async def delete(self, file_id: str) -> None:
        raise ProviderConfigurationError(f"{self.label} does not support file uploads")

    def _require_api_key(self) -> str:
        if not self._config.api_key:
            raise ProviderConfigurationError(
                f"API key missing for provider '{self.provider.value}'",
                details={"provider": self.provider.value},
            )
        return self._config.api_key

    def _endpoint(self, wire: WireRequest) -> str:
        """Return the absolute URL to POST to."""

        raise NotImplementedError

    def _headers(self, api_key: str) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _params(self, api_key: str) -> dict[str, str]:
        return {}

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        logger.debug(
            "Provider %s responded with error %s: %s",
            self.provider.value,
            response.status_code,
            response.text,
        )
        raise ProviderRejectedError(
            self._error_message(response),
            provider=self.provider.value,
            status_code=response.status_code,
        )

    def _error_message(self, response: httpx.Response) -> str:
        """Read the provider's error envelope, falling back to the status line."""

        try:
            body: Any = response.json()
        except ValueError:
            body = None

        for path in self.error_message_paths:
            value: Any = body
            for key in path:
                value = value.get(key) if isinstance(value, Mapping) else None
            if isinstance(value, str) and value.strip():
                return value
        return response.reason_phrase or f"HTTP {response.status_code}"


__all__ = ("BaseAIClient",)
