"""Create all tables in the consumer database."""

from consumer_gateway.factory import create_web_app
from consumer_gateway.services import datastore

app = create_web_app()
with app.app_context():
    datastore.create_all()
