import pytest

from duel.logic.battlefield import build_battlefield
from duel.server.app import create_app
from duel.server.settings import DuelServerSettings
from duel.session.manager import SessionManager


@pytest.fixture
def settings():
    return DuelServerSettings()


@pytest.fixture
def battlefield(settings):
    return build_battlefield(settings)


@pytest.fixture
def manager(battlefield):
    return SessionManager(battlefield)


@pytest.fixture
def app(settings, manager):
    return create_app(settings=settings, session_manager=manager)
