"""Shared fixtures for iClippy tests"""

from typing import List, Optional

import pytest

from iclippy.core.clipboard.provider import ClipboardProvider
from iclippy.core.storage import ClipboardRepository


class StepClock:
    """Clock that advances one second per reading"""

    def __init__(self, start: int = 1_700_000_000, step: int = 1):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return float(value)


class FakeProvider(ClipboardProvider):
    """In-memory clipboard with an explicit change counter"""

    def __init__(self, text: Optional[str] = None, token: int = 0):
        self.text = text
        self.token = token
        self.token_reads = 0
        self.text_reads = 0
        self.written: List[str] = []

    def change_token(self) -> int:
        self.token_reads += 1
        return self.token

    def read_text(self) -> Optional[str]:
        self.text_reads += 1
        return self.text

    def write_text(self, text: str) -> bool:
        self.written.append(text)
        self.text = text
        self.token += 1
        return True

    def copy(self, text: Optional[str]) -> None:
        """Simulate a user copy"""
        self.text = text
        self.token += 1


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test_iclippy.sqlite3"


@pytest.fixture
def repository(db_path, clock):
    repo = ClipboardRepository.open(db_path, clock=clock)
    yield repo
    repo.close()


@pytest.fixture
def provider():
    return FakeProvider()
