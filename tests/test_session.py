from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from restoran_client_sdk.models_records import Actor, AnnotatedRecord, DomainRecord
from restoran_client_sdk.session import BackOfficeSession

SUPER_ADMIN = Actor(role="super_admin", user_id=1)
BRANCH_ADMIN = Actor(role="branch_admin", user_id=2, branch_id=10)

STOCK_ROWS = [
    {"id": 1, "branch_id": 10, "product_id": 4, "date": "2024-05-01", "quantity": 2, "created_at": "2024-05-01 09:00:12"},
    {"id": 2, "branch_id": 10, "product_id": 5, "date": "2024-05-01", "quantity": 6, "created_at": "2024-05-01 09:00:47"},
    {"id": 3, "branch_id": 10, "product_id": 4, "date": "2024-05-02", "quantity": 1, "created_at": "2024-05-02 10:15:00"},
]

STOCK_LOGS = [
    {
        "id": 100 + row["id"],
        "created_at": row["created_at"],
        "branch_id": 10,
        "user_id": 7,
        "user_name": "Mehmet",
        "entity_type": "stock_entry",
        "entity_id": row["id"],
        "action": "create",
        "is_undone": row["id"] == 2,
    }
    for row in STOCK_ROWS
]


def _router(requests: list[httpx.Request], *, records=None, logs=None):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if path == "/api/stock-entries":
            return records(request) if callable(records) else httpx.Response(200, json=STOCK_ROWS)
        if path == "/api/audit-logs":
            return logs(request) if callable(logs) else httpx.Response(200, json=STOCK_LOGS)
        if path.endswith("/undo"):
            return httpx.Response(200, json={"message": "ok"})
        return httpx.Response(404, json={"error": "not found"})

    return handler


def _session(config, actor, handler) -> BackOfficeSession:
    return BackOfficeSession(config=config, actor=actor, token="tok", transport=httpx.MockTransport(handler))


def _query(requests: list[httpx.Request], path: str) -> dict[str, str]:
    for request in requests:
        if request.url.path == path:
            return dict(request.url.params)
    raise AssertionError(f"no request to {path}")


def test_load_annotated_joins_records_and_logs(config) -> None:
    requests: list[httpx.Request] = []

    async def run():
        async with _session(config, BRANCH_ADMIN, _router(requests)) as session:
            return await session.load_annotated("stock_entry")

    annotated = asyncio.run(run())
    assert [item.log_id for item in annotated] == [101, 102, 103]
    assert [item.is_undone for item in annotated] == [False, True, False]
    assert _query(requests, "/api/audit-logs") == {"entity_type": "stock_entry", "branch_id": "10"}
    assert _query(requests, "/api/stock-entries") == {}
    assert all(request.headers["Authorization"] == "Bearer tok" for request in requests)


def test_super_admin_selected_branch_scopes_both_queries(config) -> None:
    requests: list[httpx.Request] = []

    async def run():
        async with _session(config, SUPER_ADMIN, _router(requests)) as session:
            await session.load_annotated("stock_entry", 30)

    asyncio.run(run())
    assert _query(requests, "/api/audit-logs")["branch_id"] == "30"
    assert _query(requests, "/api/stock-entries") == {"branch_id": "30"}


def test_super_admin_without_branch_sees_everything(config) -> None:
    requests: list[httpx.Request] = []

    async def run():
        async with _session(config, SUPER_ADMIN, _router(requests)) as session:
            await session.load_annotated("stock_entry")

    asyncio.run(run())
    assert _query(requests, "/api/audit-logs") == {"entity_type": "stock_entry"}


def test_failed_log_fetch_degrades_to_unannotated_records(config, caplog: pytest.LogCaptureFixture) -> None:
    requests: list[httpx.Request] = []
    handler = _router(requests, logs=lambda request: httpx.Response(500, json={"error": "db down"}))

    async def run():
        async with _session(config, BRANCH_ADMIN, handler) as session:
            return await session.load_annotated("stock_entry")

    with caplog.at_level(logging.WARNING):
        annotated = asyncio.run(run())

    assert [item.id for item in annotated] == [1, 2, 3]
    assert all(item.log_id is None and not item.is_undone for item in annotated)
    assert any('"outcome": "degraded"' in record.getMessage() for record in caplog.records)


def test_failed_record_fetch_degrades_to_empty_list(config) -> None:
    requests: list[httpx.Request] = []
    handler = _router(requests, records=lambda request: httpx.Response(403, json={"error": "yetkisiz"}))

    async def run():
        async with _session(config, BRANCH_ADMIN, handler) as session:
            return await session.load_annotated("stock_entry")

    assert asyncio.run(run()) == []


def test_load_stock_sessions_filters_by_business_date(config) -> None:
    requests: list[httpx.Request] = []

    async def run():
        async with _session(config, BRANCH_ADMIN, _router(requests)) as session:
            return (
                await session.load_stock_sessions(),
                await session.load_stock_sessions(business_date="2024-05-01"),
            )

    everything, first_day = asyncio.run(run())
    assert [session.date for session in everything] == ["2024-05-02", "2024-05-01"]
    assert len(first_day) == 1
    assert {entry.id for entry in first_day[0].entries} == {1, 2}
    assert first_day[0].user_name == "Mehmet"


def test_undo_session_skips_undone_entries(config) -> None:
    requests: list[httpx.Request] = []

    async def run():
        async with _session(config, BRANCH_ADMIN, _router(requests)) as session:
            sessions = await session.load_stock_sessions(business_date="2024-05-01")
            return await session.undo_session(sessions[0])

    result = asyncio.run(run())
    undo_paths = [request.url.path for request in requests if request.url.path.endswith("/undo")]
    assert undo_paths == ["/api/audit-logs/101/undo"]
    assert result.succeeded == 1
    assert result.skipped == 1


def test_undo_record_requires_create_log(config) -> None:
    record = AnnotatedRecord(record=DomainRecord.model_validate({"id": 9, "branch_id": 10}))

    async def run():
        async with _session(config, BRANCH_ADMIN, _router([])) as session:
            assert session.can_undo(record) is False
            await session.undo_record(record)

    with pytest.raises(ValueError):
        asyncio.run(run())
