"""Application factory for the API consumer gateway."""

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException, Forbidden, Unauthorized, \
    BadRequest, MethodNotAllowed, InternalServerError, NotFound

from .app_logging import setup_logger
from .routes import api, ui
from .services import backend, datastore, mail


def create_web_app() -> Flask:
    """Initialize and configure the gateway application."""
    app = Flask('consumer_gateway')
    app.config.from_pyfile('config.py')
    setup_logger(app.config.get('LOGLEVEL', 'INFO'))

    datastore.init_app(app)
    backend.init_app(app)
    mail.init_app(app)

    # The API is served on its own subdomain when a server name is set.
    subdomain = None
    if app.config.get('SERVER_NAME'):
        subdomain = app.config.get('API_SUBDOMAIN')
    app.register_blueprint(api.blueprint, subdomain=subdomain)
    app.register_blueprint(ui.blueprint)

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()

    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(Forbidden)(jsonify_exception)
    app.errorhandler(Unauthorized)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)


def jsonify_exception(error: HTTPException) -> Response:
    """Render exceptions as JSON."""
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response
