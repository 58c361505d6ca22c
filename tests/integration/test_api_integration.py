"""API integration tests: HTTP contract of the browser, AI and history routes.

Uses the FastAPI ``TestClient`` with the shared browser session and AI
commander replaced through ``app.dependency_overrides`` so no real
Chromium or LLM is needed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from scout.api import dependencies as deps
from scout.api.app import create_app
from scout.exceptions import BrowserLaunchError, LLMResponseError, NavigationError
from scout.models.browser import BrowserState, ChatResponse

pytestmark = pytest.mark.integration


@pytest.fixture()
def fake_session():
    session = MagicMock()
    session.launch = AsyncMock()
    session.stop = AsyncMock()
    session.perform = AsyncMock(
        return_value=BrowserState(url="https://example.com/", title="Example Domain", screenshot="aGk=")
    )
    session.status = AsyncMock(return_value=BrowserState())
    return session


@pytest.fixture()
def fake_commander():
    commander = MagicMock()
    commander.command.return_value = ChatResponse.model_validate(
        {"message": "Opening it", "action": {"action": "navigate", "url": "https://example.com"}}
    )
    return commander


@pytest.fixture()
def client(fake_session, fake_commander, history_store, monkeypatch):
    """TestClient with the session, commander and history store swapped out."""
    monkeypatch.setattr("scout.api.app.close_browser_session", AsyncMock())
    app = create_app()
    app.dependency_overrides[deps.browser_session] = lambda: fake_session
    app.dependency_overrides[deps.commander] = lambda: fake_commander
    app.dependency_overrides[deps.history_store] = lambda: history_store
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Health and UI
# ---------------------------------------------------------------------------


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_index_page(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "/api/browser/status" in resp.text
    assert "const POLL_MS = 1000;" in resp.text


# ---------------------------------------------------------------------------
# Browser lifecycle
# ---------------------------------------------------------------------------


class TestLaunchStop:
    def test_launch(self, client: TestClient, fake_session) -> None:
        resp = client.post("/api/browser/launch")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Browser launched"}
        fake_session.launch.assert_awaited_once()

    def test_launch_failure(self, client: TestClient, fake_session) -> None:
        fake_session.launch.side_effect = BrowserLaunchError("Executable doesn't exist")
        resp = client.post("/api/browser/launch")
        assert resp.status_code == 500
        assert resp.json() == {"message": "Executable doesn't exist"}

    def test_stop(self, client: TestClient, fake_session) -> None:
        resp = client.post("/api/browser/stop")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Browser stopped"}
        fake_session.stop.assert_awaited_once()


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


class TestBrowserAction:
    def test_navigate_returns_state(self, client: TestClient, fake_session) -> None:
        resp = client.post("/api/browser/action", json={"action": "navigate", "url": "example.com"})

        assert resp.status_code == 200
        assert resp.json() == {
            "url": "https://example.com/",
            "title": "Example Domain",
            "screenshot": "aGk=",
            "isLoading": False,
        }
        req = fake_session.perform.await_args.args[0]
        assert req.action.value == "navigate"
        assert req.url == "example.com"

    def test_unknown_action_is_400(self, client: TestClient, fake_session) -> None:
        resp = client.post("/api/browser/action", json={"action": "teleport"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["field"] == "action"
        assert body["message"]
        fake_session.perform.assert_not_awaited()

    def test_missing_body_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/browser/action", json={})
        assert resp.status_code == 400
        assert resp.json()["field"] == "action"

    def test_non_numeric_coordinates_are_400(self, client: TestClient, fake_session) -> None:
        resp = client.post("/api/browser/action", json={"action": "click", "x": "10", "y": True})
        assert resp.status_code == 400
        assert resp.json()["field"] == "x"
        fake_session.perform.assert_not_awaited()

    def test_action_failure_is_500(self, client: TestClient, fake_session) -> None:
        fake_session.perform.side_effect = NavigationError("https://nope.invalid", "name not resolved")
        resp = client.post("/api/browser/action", json={"action": "navigate", "url": "https://nope.invalid"})
        assert resp.status_code == 500
        assert resp.json() == {"message": "Navigation to https://nope.invalid failed: name not resolved"}

    def test_evaluate_result_returned(self, client: TestClient, fake_session) -> None:
        fake_session.perform.return_value = BrowserState(url="https://a.test", title="A", result=[1, 2])
        resp = client.post("/api/browser/action", json={"action": "evaluate", "script": "() => [1, 2]"})
        assert resp.json()["result"] == [1, 2]


class TestBrowserStatus:
    def test_idle(self, client: TestClient) -> None:
        resp = client.get("/api/browser/status")
        assert resp.status_code == 200
        assert resp.json() == {"url": "", "title": "", "isLoading": False}

    def test_busy(self, client: TestClient, fake_session) -> None:
        fake_session.status.return_value = BrowserState(url="https://a.test", title="A", is_loading=True)
        assert client.get("/api/browser/status").json()["isLoading"] is True

    def test_failure(self, client: TestClient, fake_session) -> None:
        fake_session.status.side_effect = RuntimeError("Target closed")
        resp = client.get("/api/browser/status")
        assert resp.status_code == 500
        assert resp.json()["message"] == "Target closed"


# ---------------------------------------------------------------------------
# AI commands
# ---------------------------------------------------------------------------


class TestAICommand:
    def test_reply_with_action(self, client: TestClient, fake_commander) -> None:
        resp = client.post(
            "/api/ai/command",
            json={"message": "open example", "context": {"url": "about:blank", "title": "", "isLoading": False}},
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "message": "Opening it",
            "action": {"action": "navigate", "url": "https://example.com"},
        }
        req = fake_commander.command.call_args.args[0]
        assert req.context.url == "about:blank"

    def test_reply_without_action(self, client: TestClient, fake_commander) -> None:
        fake_commander.command.return_value = ChatResponse(message="Done")
        assert client.post("/api/ai/command", json={"message": "hi"}).json() == {"message": "Done"}

    def test_missing_message_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/ai/command", json={})
        assert resp.status_code == 400
        assert resp.json()["field"] == "message"

    def test_llm_failure_is_500(self, client: TestClient, fake_commander) -> None:
        fake_commander.command.side_effect = LLMResponseError("AI reply was not valid JSON")
        resp = client.post("/api/ai/command", json={"message": "hi"})
        assert resp.status_code == 500
        assert resp.json() == {"message": "AI reply was not valid JSON"}


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestHistory:
    def test_empty(self, client: TestClient) -> None:
        resp = client.get("/api/history")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_rows_newest_first(self, client: TestClient, history_store) -> None:
        history_store.add_entry(url="https://old.test", title="Old", visit_time=datetime(2024, 1, 1, tzinfo=timezone.utc))
        history_store.add_entry(url="https://new.test", title="New", visit_time=datetime(2024, 2, 1, tzinfo=timezone.utc))

        rows = client.get("/api/history").json()
        assert [r["url"] for r in rows] == ["https://new.test", "https://old.test"]
        assert set(rows[0]) == {"id", "url", "title", "visitTime", "screenshot"}
        assert rows[0]["visitTime"].startswith("2024-02-01")

    def test_limit(self, client: TestClient, history_store) -> None:
        for i in range(3):
            history_store.add_entry(url=f"https://{i}.test")
        assert len(client.get("/api/history", params={"limit": 2}).json()) == 2

    def test_bad_limit_is_400(self, client: TestClient) -> None:
        resp = client.get("/api/history", params={"limit": 0})
        assert resp.status_code == 400
        assert resp.json()["field"] == "limit"

    def test_store_failure_is_500(self, client: TestClient) -> None:
        broken = MagicMock()
        broken.list_entries.side_effect = RuntimeError("database is locked")
        client.app.dependency_overrides[deps.history_store] = lambda: broken
        resp = client.get("/api/history")
        assert resp.status_code == 500
        assert resp.json() == {"message": "database is locked"}


# ---------------------------------------------------------------------------
# App lifecycle and process-wide singletons
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_shutdown_stops_browser_and_commander(self, monkeypatch) -> None:
        close_session = AsyncMock()
        close_commander = MagicMock()
        monkeypatch.setattr("scout.api.app.close_browser_session", close_session)
        monkeypatch.setattr(deps, "close_commander", close_commander)

        with TestClient(create_app()) as c:
            assert c.get("/health").status_code == 200
            close_session.assert_not_awaited()

        close_session.assert_awaited_once()
        close_commander.assert_called_once()

    def test_cors_allows_configured_origin(self, client: TestClient) -> None:
        resp = client.options(
            "/api/browser/status",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"

    def test_cors_rejects_unknown_origin(self, client: TestClient) -> None:
        resp = client.get("/health", headers={"Origin": "http://evil.test"})
        assert "access-control-allow-origin" not in resp.headers


class TestSingletons:
    def test_close_commander_closes_and_clears(self, monkeypatch) -> None:
        commander = MagicMock()
        monkeypatch.setattr(deps, "_commander", commander)

        deps.close_commander()

        commander.close.assert_called_once()
        assert deps._commander is None
        deps.close_commander()
        commander.close.assert_called_once()

    def test_commander_built_once(self, monkeypatch) -> None:
        built = MagicMock()
        from_settings = MagicMock(return_value=built)
        monkeypatch.setattr(deps, "_commander", None)
        monkeypatch.setattr("scout.assistant.commander.BrowserCommander.from_settings", from_settings)

        assert deps.commander() is built
        assert deps.commander() is built
        from_settings.assert_called_once()
        deps.close_commander()

    @pytest.mark.anyio
    async def test_close_browser_session_stops_and_resets(self, monkeypatch) -> None:
        from scout.browser import session as session_mod

        existing = MagicMock()
        existing.stop = AsyncMock()
        monkeypatch.setattr(session_mod, "_singleton", existing)

        await session_mod.close_browser_session()

        existing.stop.assert_awaited_once()
        assert session_mod._singleton is None
        await session_mod.close_browser_session()
        existing.stop.assert_awaited_once()

    def test_get_browser_session_is_shared(self, monkeypatch, history_store) -> None:
        from scout.browser import session as session_mod

        monkeypatch.setattr(session_mod, "_singleton", None)
        monkeypatch.setattr("scout.store.build_history_store", lambda: history_store)

        first = session_mod.get_browser_session()
        assert session_mod.get_browser_session() is first
        assert first.history_store is history_store
        assert not first.is_running
