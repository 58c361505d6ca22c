"""Unit tests for the request / response models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from scout.models import BrowserActionRequest, BrowserActionType, BrowserState, ChatRequest, HistoryEntry


class TestBrowserActionRequest:
    def test_parses_navigate(self) -> None:
        req = BrowserActionRequest.model_validate({"action": "navigate", "url": "example.com"})
        assert req.action is BrowserActionType.NAVIGATE
        assert req.url == "example.com"
        assert req.selector is None

    def test_coordinates_are_floats(self) -> None:
        req = BrowserActionRequest.model_validate({"action": "click", "x": 10, "y": 20.5})
        assert req.x == 10.0
        assert req.y == 20.5

    @pytest.mark.parametrize("coords", [{"x": "10", "y": 20}, {"x": 10, "y": True}])
    def test_coordinates_must_be_numbers(self, coords: dict) -> None:
        with pytest.raises(ValidationError):
            BrowserActionRequest.model_validate({"action": "click", **coords})

    def test_unknown_action_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BrowserActionRequest.model_validate({"action": "teleport"})

    def test_action_required(self) -> None:
        with pytest.raises(ValidationError):
            BrowserActionRequest.model_validate({"url": "https://example.com"})


class TestBrowserState:
    def test_serialises_is_loading_as_camel_case(self) -> None:
        state = BrowserState(url="https://example.com", title="Example", is_loading=True)
        data = state.model_dump(by_alias=True, exclude_none=True)
        assert data == {"url": "https://example.com", "title": "Example", "isLoading": True}

    def test_accepts_alias_and_field_name(self) -> None:
        assert BrowserState.model_validate({"isLoading": True}).is_loading is True
        assert BrowserState(is_loading=True).is_loading is True

    def test_defaults(self) -> None:
        state = BrowserState()
        assert state.url == ""
        assert state.title == ""
        assert state.screenshot is None
        assert state.is_loading is False


class TestChatRequest:
    def test_context_optional(self) -> None:
        assert ChatRequest(message="hi").context is None

    def test_context_from_ui_payload(self) -> None:
        req = ChatRequest.model_validate(
            {"message": "search", "context": {"url": "https://a.test", "title": "A", "isLoading": False}}
        )
        assert req.context is not None
        assert req.context.url == "https://a.test"


class TestHistoryEntry:
    def test_visit_time_alias(self) -> None:
        ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        entry = HistoryEntry.model_validate({"id": 1, "url": "https://a.test", "title": None, "visit_time": ts})
        data = entry.model_dump(by_alias=True, mode="json")
        assert "visitTime" in data
        assert data["visitTime"].startswith("2024-01-02T03:04:05")
