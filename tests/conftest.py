import pytest

from numberline.settings import Settings
from numberline.store.memory_repo import MemoryRepo
from numberline.transport.sessions import SessionTable


class FakeApp:
    def __init__(self, **settings):
        self.state = type("State", (), {})()
        self.state.settings = Settings(**settings)
        self.state.repo = MemoryRepo()
        self.state.sessions = SessionTable()


@pytest.fixture()
def app():
    return FakeApp()


@pytest.fixture()
def acks_app():
    return FakeApp(REJECTION_ACKS=True)


@pytest.fixture()
def small_app():
    return FakeApp(MAX_PLAYERS=2)
