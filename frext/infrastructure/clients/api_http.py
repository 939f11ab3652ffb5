"""HTTP client for the frext backend API.

Every call returns an ``ApiResponse`` envelope. Transport failures, error
statuses and malformed bodies are folded into ``success=False`` envelopes
with a ``code``; nothing is retried.
"""

from __future__ import annotations

import time
from functools import lru_cache
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from frext.core.logging import get_logger, get_request_id
from frext.domain.models import ApiResponse, HealthStatus
from frext.observability.errors import message_for, to_error_response
from frext.observability.metrics import record_request

logger = get_logger(__name__)


class ClientConfig(BaseModel):
    """Connection settings shared by every request of one client."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "http://localhost:3001"
    api_prefix: str = "/api/v1"
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    headers: dict[str, str] = Field(default_factory=lambda: {"Content-Type": "application/json"})


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


class FrextApiClient:
    """Async frext-api client (httpx).

    Header state (the bearer token) belongs to the instance; use
    ``with_token`` to get an isolated client per auth context.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._headers: dict[str, str] = dict(self._config.headers)
        self._transport = transport
        if token:
            self.set_auth_token(token)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/") + self._config.api_prefix

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def auth_token(self) -> str | None:
        value = self._headers.get("Authorization")
        if value and value.startswith("Bearer "):
            return value[len("Bearer "):]
        return None

    def set_auth_token(self, token: str) -> None:
        self._headers["Authorization"] = f"Bearer {token}"

    def clear_auth_token(self) -> None:
        self._headers.pop("Authorization", None)

    def with_token(self, token: str | None) -> "FrextApiClient":
        return FrextApiClient(self._config, token=token, transport=self._transport)

    def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
        if not self._config.base_url:
            raise RuntimeError("frext-api base_url is not configured")
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else self._config.timeout_seconds,
            verify=self._config.verify_ssl,
            transport=self._transport,
        )

    def _merged_headers(self, overrides: Mapping[str, str] | None, *, multipart: bool) -> dict[str, str]:
        merged = {**self._headers, **(overrides or {})}
        if multipart:
            # httpx writes the multipart boundary itself
            merged.pop("Content-Type", None)
        rid = get_request_id()
        if rid != "-":
            merged["X-Request-ID"] = rid
        return merged

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        response_type: Any = None,
        json_body: Any = None,
        files: Mapping[str, Any] | None = None,
        data: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        route: str | None = None,
    ) -> ApiResponse[Any]:
        """Send one request and fold every outcome into an envelope.

        ``route`` is the path template (``/templates/{id}``) used for
        metrics and logs; it defaults to ``endpoint``.
        """
        label = route or endpoint
        merged = self._merged_headers(headers, multipart=files is not None)
        logger.info("api_request", extra={"method": method, "endpoint": endpoint})
        start = time.perf_counter()
        try:
            async with self._client(timeout) as client:
                resp = await client.request(
                    method,
                    endpoint,
                    json=json_body,
                    files=files,
                    data=data,
                    params=params,
                    headers=merged,
                )
        except httpx.TimeoutException as exc:
            return self._failed(method, label, start, "TIMEOUT", exc)
        except httpx.TransportError as exc:
            return self._failed(method, label, start, "NETWORK_ERROR", exc)
        except httpx.RequestError as exc:
            return self._failed(method, label, start, "REQUEST_FAILED", exc, message=str(exc) or None)
        except Exception as exc:
            # misconfiguration (empty or malformed base URL) and payload encoding errors
            return self._failed(method, label, start, "REQUEST_FAILED", exc, message=str(exc) or None)
        return self._to_envelope(method, label, start, resp, response_type)

    def _failed(
        self,
        method: str,
        endpoint: str,
        start: float,
        code: str,
        exc: BaseException | None = None,
        *,
        message: str | None = None,
        status_code: int | None = None,
    ) -> ApiResponse[Any]:
        record_request(endpoint, method, code.lower(), time.perf_counter() - start)
        logger.error(
            "api_request_failed",
            extra={
                "method": method,
                "endpoint": endpoint,
                "code": code,
                "status_code": status_code,
                "error": str(exc) if exc is not None else message,
            },
        )
        return to_error_response(code, message=message, status_code=status_code)

    def _to_envelope(
        self,
        method: str,
        endpoint: str,
        start: float,
        resp: httpx.Response,
        response_type: Any,
    ) -> ApiResponse[Any]:
        if not resp.is_success:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            msg = body.get("message") if isinstance(body, dict) else None
            if not isinstance(msg, str) or not msg:
                msg = f"HTTP {resp.status_code}: {resp.reason_phrase}"
            return self._failed(method, endpoint, start, "HTTP_ERROR", message=msg, status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as exc:
            return self._failed(method, endpoint, start, "INVALID_RESPONSE", exc, status_code=resp.status_code)
        if not isinstance(body, dict):
            return self._failed(
                method,
                endpoint,
                start,
                "INVALID_RESPONSE",
                message=f"{message_for('INVALID_RESPONSE')}: expected a JSON object",
                status_code=resp.status_code,
            )

        try:
            envelope = ApiResponse[Any].model_validate(body)
            if response_type is not None and envelope.data is not None:
                envelope = envelope.model_copy(update={"data": _adapter(response_type).validate_python(envelope.data)})
        except ValidationError as exc:
            return self._failed(method, endpoint, start, "INVALID_RESPONSE", exc, status_code=resp.status_code)

        outcome = "success" if envelope.success else "failure"
        record_request(endpoint, method, outcome, time.perf_counter() - start)
        logger.info(
            "api_request_succeeded",
            extra={"method": method, "endpoint": endpoint, "success": envelope.success},
        )
        return envelope

    async def get(
        self,
        endpoint: str,
        *,
        response_type: Any = None,
        params: Mapping[str, Any] | None = None,
        route: str | None = None,
    ) -> ApiResponse[Any]:
        return await self.request("GET", endpoint, response_type=response_type, params=params, route=route)

    async def post(self, endpoint: str, body: Any = None, *, response_type: Any = None) -> ApiResponse[Any]:
        return await self.request("POST", endpoint, response_type=response_type, json_body=body)

    async def post_form(
        self,
        endpoint: str,
        *,
        files: Mapping[str, Any],
        data: Mapping[str, str] | None = None,
        response_type: Any = None,
    ) -> ApiResponse[Any]:
        return await self.request("POST", endpoint, response_type=response_type, files=files, data=data)

    async def health_check(self) -> ApiResponse[Any]:
        return await self.get("/health", response_type=HealthStatus)

    async def ping(self, timeout: float = 5.0) -> bool:
        """Raw reachability check of /health: True iff the status is 2xx."""
        try:
            async with self._client(timeout) as client:
                resp = await client.get("/health", headers=self._merged_headers(None, multipart=False))
        except Exception as exc:
            logger.warning("api_ping_failed", extra={"error": str(exc)})
            return False
        return resp.is_success
