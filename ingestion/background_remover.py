"""
Background-removal transports — remove.bg API and the JSON service boundary.

Implements the ``BackgroundTransport`` protocol from core. Lives in
ingestion/ because it performs network I/O (core/ must remain pure).

Two transports:

    RemoveBgApiTransport       posts the image straight to remove.bg
                               (multipart ``image_file``, ``X-Api-Key``)
    ServiceBackgroundTransport posts ``{"image": data-uri}`` to a service
                               that answers ``{"image": ...}`` or ``{"error": ...}``

Both raise ``BackgroundRemovalError`` for every failure they can classify;
``BackgroundRemover`` turns those into ``RemovalFailure`` values.

Usage::

    transport = create_background_transport()  # reads REMOVE_BG_SERVICE_URL / REMOVE_BG_API_KEY
    remover = BackgroundRemover(transport)
    result = await remover.remove_background(data_uri)
"""

from __future__ import annotations

import logging
import os

import httpx
from dotenv import load_dotenv

from core.config import DEFAULT_REMOVAL_CONFIG, BackgroundRemovalConfig
from core.diary.background import (
    BackgroundRemovalError,
    decode_image,
    image_from_service_body,
    to_data_uri,
)
from infrastructure.circuit_breaker import CircuitBreaker, CircuitOpenError

logger = logging.getLogger(__name__)


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class RemoveBgApiTransport:
    """
    Transport backed by the remove.bg HTTP API.

    Reads ``REMOVE_BG_API_KEY`` from the environment when no key is passed.
    A missing key is not an error at construction time: every call then
    fails with reason ``not_configured`` so the user keeps the original.

    Args:
        api_key: remove.bg API key override.
        config: Endpoint, timeout and output size.
        breaker: Optional circuit breaker wrapped around the HTTP call.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        config: BackgroundRemovalConfig = DEFAULT_REMOVAL_CONFIG,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        load_dotenv()
        self._api_key = api_key or os.environ.get("REMOVE_BG_API_KEY", "")
        self._config = config
        self._breaker = breaker

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def remove(self, image: str) -> str:
        """Remove the background of a data URI image.

        Returns:
            The result as a ``data:image/png;base64,`` URI.

        Raises:
            BackgroundRemovalError: ``not_configured``, ``invalid_image``,
                ``circuit_open``, ``transport_error``, ``bad_status`` or
                ``missing_image``.
        """
        if not self._api_key:
            raise BackgroundRemovalError("not_configured", "REMOVE_BG_API_KEY not configured")
        data = decode_image(image)

        if self._breaker is None:
            return await self._post(data)
        try:
            return await self._breaker.acall(self._post, data)
        except CircuitOpenError as exc:
            raise BackgroundRemovalError("circuit_open", str(exc)) from exc

    async def _post(self, data: bytes) -> str:
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
                response = await client.post(
                    self._config.endpoint,
                    headers={"X-Api-Key": self._api_key},
                    files={"image_file": ("image.png", data, "image/png")},
                    data={"size": self._config.output_size},
                )
        except httpx.HTTPError as exc:
            logger.warning("remove.bg request failed: %s", exc)
            raise BackgroundRemovalError("transport_error", str(exc)) from exc

        if not _is_success(response.status_code):
            logger.error("remove.bg API error %d: %s", response.status_code, response.text)
            raise BackgroundRemovalError(
                "bad_status",
                f"remove.bg API error: {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            raise BackgroundRemovalError("missing_image", "remove.bg returned an empty body")
        return to_data_uri(response.content)


class ServiceBackgroundTransport:
    """
    Transport for a JSON background-removal service (such as ``POST /remove-bg``).

    Reads ``REMOVE_BG_SERVICE_URL`` from the environment when no URL is
    passed. Any response without an ``image`` field is a failure, whatever
    its status code.

    Args:
        service_url: Full URL of the service endpoint.
        timeout_seconds: Transport timeout.
    """

    def __init__(
        self,
        service_url: str | None = None,
        *,
        timeout_seconds: float = DEFAULT_REMOVAL_CONFIG.timeout_seconds,
    ) -> None:
        load_dotenv()
        self._url = service_url or os.environ.get("REMOVE_BG_SERVICE_URL", "")
        self._timeout = timeout_seconds

    async def remove(self, image: str) -> str:
        if not self._url:
            raise BackgroundRemovalError("not_configured", "REMOVE_BG_SERVICE_URL not configured")
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, json={"image": image})
        except httpx.HTTPError as exc:
            logger.warning("background service request failed: %s", exc)
            raise BackgroundRemovalError("transport_error", str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not _is_success(response.status_code):
            error = body.get("error") if isinstance(body, dict) else None
            logger.warning(
                "background service returned %d: %s", response.status_code, error or "no detail"
            )
            raise BackgroundRemovalError(
                "bad_status",
                str(error or f"HTTP {response.status_code}"),
                status_code=response.status_code,
            )
        return image_from_service_body(body)


def create_background_transport(
    *,
    breaker: CircuitBreaker | None = None,
    config: BackgroundRemovalConfig = DEFAULT_REMOVAL_CONFIG,
) -> RemoveBgApiTransport | ServiceBackgroundTransport:
    """Factory: pick a transport based on configuration.

    Uses ``ServiceBackgroundTransport`` when ``REMOVE_BG_SERVICE_URL`` is set,
    otherwise calls remove.bg directly with ``REMOVE_BG_API_KEY``.

    Args:
        breaker: Circuit breaker for the direct remove.bg transport.
        config: remove.bg settings for the direct transport.
    """
    load_dotenv()
    service_url = os.environ.get("REMOVE_BG_SERVICE_URL", "").strip()
    if service_url:
        logger.info("background removal via service %s", service_url)
        return ServiceBackgroundTransport(service_url, timeout_seconds=config.timeout_seconds)
    return RemoveBgApiTransport(config=config, breaker=breaker)
