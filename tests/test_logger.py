import asyncio
import json
import logging

import httpx

from restoran_client_sdk.clients.audit_logs_client import AuditLogClient
from restoran_client_sdk.logger import get_logger, log_action
from restoran_client_sdk.models_records import Actor
from restoran_client_sdk.undo_executor import UndoExecutor


class CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def test_log_action_contains_required_fields() -> None:
    logger = logging.getLogger("restoran_client_sdk.test.obs")
    logger.handlers = []
    logger.setLevel(logging.INFO)
    handler = CaptureHandler()
    logger.addHandler(handler)

    log_action(
        logger=logger,
        module="audit_logs",
        action="undo",
        actor_role="branch_admin",
        branch_id=10,
        outcome="success",
        log_id=55,
    )

    assert len(handler.messages) == 1
    payload = json.loads(handler.messages[0])
    for key in ["ts", "level", "module", "action", "actor_role", "branch_id", "outcome", "log_id"]:
        assert key in payload
    assert payload["level"] == "INFO"


def test_get_logger_adds_single_handler() -> None:
    name = "restoran_client_sdk.test.handlers"
    logging.getLogger(name).handlers = []

    first = get_logger(name)
    second = get_logger(name)

    assert first is second
    assert len(first.handlers) == 1


def test_undo_log_line_has_no_token(make_http) -> None:
    logger = logging.getLogger("restoran_client_sdk.undo_executor")
    handler = CaptureHandler()
    logger.addHandler(handler)

    def transport_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"message": "ok"})

    async def run():
        async with make_http(transport_handler) as http:
            client = AuditLogClient(http, access_token="secret-token")
            await UndoExecutor(client, actor=Actor(role="super_admin", user_id=1)).undo(8)

    try:
        asyncio.run(run())
    finally:
        logger.removeHandler(handler)

    assert len(handler.messages) == 1
    payload = json.loads(handler.messages[0])
    assert payload["outcome"] == "success"
    assert payload["log_id"] == 8
    assert payload["actor_role"] == "super_admin"
    assert "secret-token" not in handler.messages[0]
