import pytest

from action_logger.app import create_app
from action_logger.dispatcher import LogDispatcher
from action_logger.persistence import EventStore
from action_logger.templates import TemplateRegistry


@pytest.fixture
def registry():
    reg = TemplateRegistry()
    reg.load_default_templates()
    reg.freeze()
    return reg


@pytest.fixture
def dispatcher():
    disp = LogDispatcher(None)
    yield disp
    disp.shutdown(timeout=5)


@pytest.fixture
def store(tmp_path):
    return EventStore(str(tmp_path / "data"))


@pytest.fixture
def app(dispatcher, registry, store):
    """Create a Flask test app."""
    application = create_app(dispatcher, registry, store)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
