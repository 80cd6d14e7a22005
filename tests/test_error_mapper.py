from __future__ import annotations

from restoran_client_sdk.error_mapper import error_message, map_error
from restoran_client_sdk.exceptions import (
    ForbiddenError,
    GatewayTimeoutError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)


def test_error_mapper_classes() -> None:
    assert isinstance(map_error(401, {"error": "bad token"}), UnauthorizedError)
    assert isinstance(map_error(403, {"error": "not your branch"}), ForbiddenError)
    assert isinstance(map_error(400, {"error": "already undone"}), ValidationError)
    assert isinstance(map_error(504, {}), GatewayTimeoutError)
    assert isinstance(map_error(408, {}), GatewayTimeoutError)


def test_error_mapper_reads_backend_error_field() -> None:
    err = map_error(403, {"error": "Bu işlemi sadece kendi şubenizdeki kayıtları geri alabilirsiniz"})
    assert err.message.startswith("Bu işlemi")
    assert err.status_code == 403
    assert "[403]" in str(err)


def test_error_mapper_common_failures() -> None:
    server = map_error(500, {"code": "SERVER_ERROR", "message": "oops"})
    assert isinstance(server, ServerError)
    assert server.message == "oops"
    assert server.code == "SERVER_ERROR"


def test_error_message_fallback() -> None:
    assert error_message({}) == "Request failed"
    assert error_message({"error": "  "}, default="x") == "x"
