import re
from typing import Any, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_extraction_service, get_workout_store
from app.main import app
from app.services.adapter import AIResponse, OpenAICompatibleAdapter
from app.services.ai import ImageExtractionService
from app.services.sheets import SHEET_COLUMNS, WorkoutStore


class FakeWorksheet:
    """In-memory stand-in for a gspread Worksheet."""

    def __init__(self, rows: Optional[List[List[Any]]] = None):
        self.rows: List[List[Any]] = [list(SHEET_COLUMNS)] + [list(r) for r in rows or []]
        self.appended: List[List[Any]] = []

    def get_all_values(self) -> List[List[str]]:
        return [[str(cell) for cell in row] for row in self.rows]

    def row_values(self, row: int) -> List[str]:
        if row - 1 >= len(self.rows):
            return []
        return [str(cell) for cell in self.rows[row - 1]]

    def append_row(self, values, value_input_option=None, table_range=None):
        self.appended.append(list(values))
        self.rows.append(list(values))

    def update(self, values=None, range_name=None, value_input_option=None):
        row = int(re.match(r"A(\d+):", range_name).group(1))
        self.rows[row - 1] = list(values[0])

    def delete_rows(self, index: int):
        del self.rows[index - 1]


class FailingWorksheet:
    """Worksheet whose every call raises."""

    def __init__(self, message: str = "network unreachable"):
        self.message = message

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise RuntimeError(self.message)
        return fail


class FlakyWorksheet(FakeWorksheet):
    """Fails the appends whose 1-based position is listed in ``fail_on``."""

    def __init__(self, fail_on: List[int]):
        super().__init__()
        self.fail_on = set(fail_on)
        self.attempts = 0

    def append_row(self, values, value_input_option=None, table_range=None):
        self.attempts += 1
        if self.attempts in self.fail_on:
            raise RuntimeError("quota exceeded")
        super().append_row(values, value_input_option, table_range)


class FakeAdapter:
    """Records messages and returns a canned AI answer."""

    def __init__(self, content: str = "", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls = []

    async def chat_completion(self, messages, temperature=0.2):
        self.calls.append(messages)
        if self.error:
            raise self.error
        return AIResponse(content=self.content)


class CannedResponseAdapter(OpenAICompatibleAdapter):
    """OpenAI-style adapter whose HTTP call returns a fixed response."""

    def __init__(self, response: httpx.Response):
        super().__init__(api_key="test-key", base_url="http://ai.test/v1", model="test-model")
        self.response = response

    async def _send(self, client, messages, temperature):
        return self.response


SAMPLE_ROWS = [
    ["Monday", "Greg", "Gym", "45", "2024-01-15", "", "09:00", "09:45"],
    ["Monday", "Cortese", "HIIT", "30", "2024-01-15", "", "18:00", "18:30"],
]


@pytest.fixture
def worksheet():
    return FakeWorksheet(SAMPLE_ROWS)


@pytest.fixture
def store(worksheet):
    return WorkoutStore(worksheet=worksheet)


@pytest.fixture
def demo_store():
    return WorkoutStore()


@pytest.fixture
def api():
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api, store):
    api.dependency_overrides[get_workout_store] = lambda: store
    return TestClient(api)


@pytest.fixture
def demo_client(api, demo_store):
    api.dependency_overrides[get_workout_store] = lambda: demo_store
    return TestClient(api)


@pytest.fixture
def failing_client(api):
    failing = WorkoutStore(worksheet=FailingWorksheet("403 Forbidden: caller does not have permission"))
    api.dependency_overrides[get_workout_store] = lambda: failing
    return TestClient(api)


@pytest.fixture
def extraction_client(api):
    """Client whose image extraction answers with a fixed AI response."""

    def override(content: str = "", error: Optional[Exception] = None, adapter: Any = None):
        adapter = adapter or FakeAdapter(content=content, error=error)
        service = ImageExtractionService(adapter=adapter)
        api.dependency_overrides[get_extraction_service] = lambda: service
        return TestClient(api), adapter

    return override
