"""Shared test fixtures for tasklink tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tasklink.contracts.config import TasklinkConfig
from tasklink.contracts.records import CanvasAccount, TodoistAccount
from tasklink.persistence import MemoryRecordStore
from tasklink.sdk import Tasklink
from tests.fakes.canvas import FakeCanvas
from tests.fakes.clock import USER_ID, fixed_clock
from tests.fakes.todoist import FakeTodoist


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def config(tmp_path: Path) -> TasklinkConfig:
    return TasklinkConfig(user_id=USER_ID, store_path=tmp_path / "store.json")


@pytest.fixture
def fake_canvas() -> FakeCanvas:
    return FakeCanvas()


@pytest.fixture
def fake_todoist() -> FakeTodoist:
    return FakeTodoist()


@pytest.fixture
def tasklink(
    store: MemoryRecordStore,
    config: TasklinkConfig,
    fake_canvas: FakeCanvas,
    fake_todoist: FakeTodoist,
) -> Tasklink:
    """SDK wired to the in-memory store and fakes, with both accounts connected."""
    store.upsert(CanvasAccount(user_id=USER_ID, base_url="https://canvas.test", access_token="canvas-token"))
    store.upsert(TodoistAccount(user_id=USER_ID, access_token="todoist-token"))
    return Tasklink(
        store=store,
        config=config,
        source_factory=lambda account: fake_canvas,
        destination_factory=lambda account: fake_todoist,
        clock=fixed_clock,
    )
