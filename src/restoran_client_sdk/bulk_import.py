from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .bulk_import_validation import validate_bulk_import_request
from .cancellation import CancellationToken
from .clients.bulk_import_client import BulkImportClient
from .exceptions import ApiError, GatewayTimeoutError, RequestCancelledError, RequestTimeoutError
from .logger import get_logger, log_action
from .models_bulk_import import (
    BulkImportRequest,
    BulkImportResponse,
    CancellableOperationState,
    OperationStatus,
)
from .models_records import Actor

logger = get_logger(__name__)

StateListener = Callable[[CancellableOperationState], None]


def is_timeout_error(error: BaseException) -> bool:
    return isinstance(error, (RequestTimeoutError, GatewayTimeoutError))


def classify_outcome(response: BulkImportResponse | None, error: BaseException | None) -> OperationStatus:
    """Map how the request ended to exactly one terminal status.

    Cancellation is checked before timeouts, and both before generic failure,
    so an aborted or slow import is never reported as a plain error.
    """
    if error is None:
        if response is not None and response.cancelled:
            return OperationStatus.CANCELLED
        return OperationStatus.SUCCEEDED
    if isinstance(error, RequestCancelledError):
        return OperationStatus.CANCELLED
    if is_timeout_error(error):
        return OperationStatus.TIMED_OUT
    return OperationStatus.FAILED


@dataclass
class BulkImportHandle:
    token: CancellationToken
    task: asyncio.Task

    def cancel(self) -> None:
        self.token.cancel()

    @property
    def done(self) -> bool:
        return self.task.done()

    async def wait(self) -> CancellableOperationState:
        return await self.task


class BulkImportController:
    """Runs one bulk import at a time and tracks its state.

    The request is sent without a timeout unless one is configured, and can
    be cancelled through the returned handle.
    """

    def __init__(
        self,
        client: BulkImportClient,
        *,
        actor: Actor | None = None,
        on_change: StateListener | None = None,
    ) -> None:
        self._client = client
        self._actor = actor
        self._on_change = on_change
        self._state = CancellableOperationState()
        self._handle: BulkImportHandle | None = None

    @property
    def state(self) -> CancellableOperationState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.status is OperationStatus.RUNNING

    def start(self, payload: BulkImportRequest | Mapping[str, Any]) -> BulkImportHandle:
        if self.is_running:
            raise RuntimeError("A bulk import is already running")
        request = validate_bulk_import_request(payload)
        token = CancellationToken()
        self._set_state(CancellableOperationState(status=OperationStatus.RUNNING))
        task = asyncio.get_running_loop().create_task(self._run(request, token))
        self._handle = BulkImportHandle(token=token, task=task)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None and self.is_running:
            self._handle.cancel()

    def reset(self) -> None:
        if self.is_running:
            raise RuntimeError("Cannot reset while a bulk import is running")
        self._handle = None
        self._set_state(CancellableOperationState())

    async def _run(self, request: BulkImportRequest, token: CancellationToken) -> CancellableOperationState:
        log_action(
            logger,
            module="bulk_import",
            action="start",
            actor_role=self._actor.role if self._actor else None,
            branch_id=self._actor.branch_id if self._actor else None,
            outcome="running",
            prefix=request.prefix,
            start=request.start,
            end=request.end,
        )
        try:
            response = await self._client.import_b2b_products(request, cancel_token=token)
        except asyncio.CancelledError:
            self._set_state(CancellableOperationState(status=OperationStatus.CANCELLED))
            raise
        except Exception as exc:  # any failure still ends the run in a terminal state
            state = _state_from_error(exc)
        else:
            state = _state_from_response(response)
        self._set_state(state)
        log_action(
            logger,
            module="bulk_import",
            action="finish",
            actor_role=self._actor.role if self._actor else None,
            branch_id=self._actor.branch_id if self._actor else None,
            outcome=state.status.value,
            imported=state.imported,
            skipped=state.skipped,
            errors=len(state.errors),
        )
        return state

    def _set_state(self, state: CancellableOperationState) -> None:
        self._state = state
        if self._on_change:
            self._on_change(state)


def _state_from_response(response: BulkImportResponse) -> CancellableOperationState:
    return CancellableOperationState(
        status=classify_outcome(response, None),
        imported=response.imported,
        skipped=response.skipped,
        errors=tuple(response.errors),
    )


def _state_from_error(error: Exception) -> CancellableOperationState:
    partial = BulkImportResponse()
    payload = getattr(error, "raw_payload", None)
    if isinstance(payload, dict):
        errors = payload.get("errors")
        partial = BulkImportResponse(
            imported=_as_int(payload.get("imported")),
            skipped=_as_int(payload.get("skipped")),
            errors=[str(item) for item in errors] if isinstance(errors, list) else [],
        )
    message = error.message if isinstance(error, ApiError) else str(error) or type(error).__name__
    return CancellableOperationState(
        status=classify_outcome(None, error),
        imported=partial.imported,
        skipped=partial.skipped,
        errors=tuple(partial.errors),
        message=message,
    )


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
