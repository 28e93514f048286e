"""Shared pytest fixtures: fake API session, client, cache and a no-wait sleep."""
from typing import List

import pytest

from docket_watch.cache import CommentCache
from docket_watch.regs_client import RegsGovClient
from tests.fixtures.fake_regs_api import FakeSession


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> RegsGovClient:
    return RegsGovClient("test-key", session=session)


@pytest.fixture
def cache() -> CommentCache:
    return CommentCache(verbose=False)


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()
