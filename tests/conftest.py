import pytest

from app import app as flask_app


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True)
    saved = {key: flask_app.config[key] for key in ("MAX_TEXT_LENGTH", "MAX_ENCODED_LENGTH", "MAX_CONTENT_LENGTH")}
    yield flask_app
    flask_app.config.update(saved)


@pytest.fixture
def client(app):
    return app.test_client()
