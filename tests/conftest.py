import pytest

from consumer_gateway.factory import create_web_app
from consumer_gateway.services import datastore


@pytest.fixture()
def app():
    app = create_web_app()
    app.config['TESTING'] = True
    app.config['SESSION_COOKIE_SECURE'] = False
    with app.app_context():
        datastore.create_all()
    yield app
    with app.app_context():
        datastore.drop_all()


@pytest.fixture()
def app_context(app):
    with app.app_context():
        yield app
