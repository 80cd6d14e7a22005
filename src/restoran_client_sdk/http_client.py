from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from .cancellation import CancellationToken, CancelledByToken
from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, RequestCancelledError, RequestTimeoutError, TransportError

logger = logging.getLogger(__name__)

ResponseHook = Callable[[httpx.Response], None]
RequestHook = Callable[[str, str, dict[str, Any]], None]

_UNSET: Any = object()


def _error_type_from_status(status_code: int) -> str:
    if status_code in {401, 403}:
        return "auth"
    if status_code in {400, 404, 422}:
        return "validation"
    if status_code == 409:
        return "conflict"
    if status_code in {408, 504}:
        return "timeout"
    if status_code <= 0:
        return "network"
    return "internal"


@dataclass(frozen=True)
class NormalizedError:
    code: str
    message: str
    type: str


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str


@dataclass
class HttpClient:
    config: ClientConfig
    transport: httpx.AsyncBaseTransport | None = None
    before_request: RequestHook | None = None
    after_response: ResponseHook | None = None
    last_operation: LastOperation | None = None
    _client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self._client is None:
            limits = httpx.Limits(
                max_connections=self.config.max_connections,
                max_keepalive_connections=self.config.max_connections,
            )
            self._client = httpx.AsyncClient(
                base_url=self.config.api_base_url,
                timeout=httpx.Timeout(
                    self.config.read_timeout_seconds,
                    connect=self.config.connect_timeout_seconds,
                ),
                verify=self.config.verify_ssl,
                limits=limits,
                transport=self.transport,
            )

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = _UNSET,
        cancel_token: CancellationToken | None = None,
        retry_mutation: bool = False,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> dict[str, Any] | list[Any] | None:
        """Send one request and return the decoded JSON body.

        ``timeout=None`` disables the client timeout for this call. When a
        ``cancel_token`` fires before the response arrives the call raises
        :class:`RequestCancelledError`. GET requests are retried on transport
        failures and 5xx answers; mutations only when ``retry_mutation`` is set.
        """
        if self._client is None:
            raise RuntimeError("HTTP client not initialized")
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        normalized_method = method.upper()
        normalized_path = path if path.startswith("/") else f"/{path}"
        request_context = {
            "headers": request_headers,
            "json_body": json_body,
            "params": params,
        }
        if self.before_request:
            self.before_request(normalized_method, normalized_path, request_context)

        extra: dict[str, Any] = {}
        if timeout is not _UNSET:
            extra["timeout"] = timeout

        can_retry = normalized_method in {"GET", "HEAD"} or retry_mutation
        attempts = self.config.retries + 1 if can_retry else 1
        started = time.monotonic()
        response: httpx.Response | None = None
        for attempt in range(attempts):
            if cancel_token is not None and cancel_token.cancelled:
                self._record_operation(module, operation, started, "cancelled")
                raise _cancelled_error("Request cancelled before dispatch")
            send = self._client.request(
                normalized_method,
                normalized_path,
                headers=request_headers,
                json=json_body,
                params=params,
                **extra,
            )
            try:
                if cancel_token is None:
                    response = await send
                else:
                    response = await cancel_token.guard(send)
            except CancelledByToken as exc:
                self._record_operation(module, operation, started, "cancelled")
                raise _cancelled_error("Request cancelled by caller") from exc
            except httpx.TimeoutException as exc:
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "timeout")
                    raise RequestTimeoutError(
                        code="REQUEST_TIMEOUT",
                        message=str(exc) or "Request timed out",
                        details={"type": type(exc).__name__},
                        status_code=0,
                        raw_payload=None,
                    ) from exc
            except httpx.TransportError as exc:
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "error")
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc) or "Network error",
                        details={"type": type(exc).__name__},
                        status_code=0,
                        raw_payload=None,
                    ) from exc
            except httpx.HTTPError as exc:
                # Decoding errors and redirect loops will not improve on retry.
                self._record_operation(module, operation, started, "error")
                raise TransportError(
                    code="RESPONSE_ERROR",
                    message=str(exc) or "Unreadable response",
                    details={"type": type(exc).__name__},
                    status_code=0,
                    raw_payload=None,
                ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            logger.debug("retrying %s %s (attempt %s)", normalized_method, normalized_path, attempt + 1)
            await asyncio.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request failed without response")

        if self.after_response:
            self.after_response(response)
        if response.is_success:
            if not response.content:
                self._record_operation(module, operation, started, "success")
                return None
            try:
                body = response.json()
            except ValueError as exc:
                self._record_operation(module, operation, started, "error")
                raise ApiError(
                    code="INVALID_RESPONSE",
                    message="Server returned a response that is not JSON",
                    details={"body": response.text[:200]},
                    status_code=response.status_code,
                    raw_payload=None,
                ) from exc
            self._record_operation(module, operation, started, "success")
            return body

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError):
            payload = {"error": response.text}
        if not isinstance(payload, dict):
            payload = {"details": payload}
        self._record_operation(module, operation, started, "error")
        raise map_error(response.status_code, payload)

    def normalize_error(self, error: Exception) -> NormalizedError:
        if isinstance(error, RequestTimeoutError):
            return NormalizedError(code=error.code, message=error.message, type="timeout")
        if isinstance(error, RequestCancelledError):
            return NormalizedError(code=error.code, message=error.message, type="cancelled")
        if isinstance(error, TransportError):
            return NormalizedError(code=error.code, message=error.message, type="network")
        code = getattr(error, "code", "UNKNOWN_ERROR")
        message = getattr(error, "message", str(error))
        status_code = int(getattr(error, "status_code", 0) or 0)
        return NormalizedError(
            code=str(code),
            message=str(message),
            type=_error_type_from_status(status_code),
        )

    def _record_operation(self, module: str, operation: str, started: float, result: str) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
        )
        logger.debug(
            "%s.%s finished: %s in %sms",
            module,
            operation,
            result,
            self.last_operation.duration_ms,
        )


def _cancelled_error(message: str) -> RequestCancelledError:
    return RequestCancelledError(
        code="REQUEST_CANCELLED",
        message=message,
        details={"type": "cancelled"},
        status_code=0,
        raw_payload=None,
    )
