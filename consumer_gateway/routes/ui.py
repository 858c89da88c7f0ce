"""
Provides the web app for API consumers.

Every consumer operation is forwarded to the backend API. The logged-in
consumer's token is kept in the session and is verified on every request
that uses it.
"""

import logging

from flask import Blueprint, Response, request, url_for

from ..context import current_session_store, request_context, token_manager
from ..controllers import web
from ..domain import RequestOrigin
from .decorators import admitted, is_admin, is_owner
from .util import request_params, respond

logger = logging.getLogger(__name__)

blueprint = Blueprint('ui', __name__, url_prefix='/api-consumer')

owner_only = admitted(RequestOrigin.WEB_APP, authorizer=is_owner)
admin_only = admitted(RequestOrigin.WEB_APP, check=is_admin)


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


@blueprint.route('', methods=['GET'])
def index() -> Response:
    """Show the logged-in consumer, if any."""
    token = token_manager().extract_token(
        request_context(request, RequestOrigin.WEB_APP)
    )
    return respond(*web.index(token, current_session_store()))


@blueprint.route('/register', methods=['POST'])
def register() -> Response:
    """Register a new API consumer."""
    return respond(*web.register(request_params(), current_session_store()))


@blueprint.route('/activate', methods=['POST'])
def activate() -> Response:
    """Activate a valid token."""
    return respond(*web.activate(request_params(), current_session_store()))


@blueprint.route('/reactivate', methods=['POST'])
def reactivate() -> Response:
    """Ask for the valid token to be sent again."""
    return respond(*web.reactivate(request_params(),
                                   current_session_store()))


@blueprint.route('/reset-key', methods=['POST'])
def reset_key() -> Response:
    """Ask for a reset key."""
    return respond(*web.reset_key(request_params(), current_session_store()))


@blueprint.route('/refresh-token', methods=['POST'])
def refresh_token() -> Response:
    """Exchange a reset key for a new valid token."""
    return respond(*web.refresh_token(request_params(),
                                      current_session_store()))


@blueprint.route('/access', methods=['POST'])
def access() -> Response:
    """Log in with an active token."""
    next_page = request.args.get('next_page', url_for('ui.index'))
    return respond(*web.access(request_params(), current_session_store(),
                               next_page))


@blueprint.route('/logout', methods=['GET', 'POST'])
def logout() -> Response:
    """Log out."""
    next_page = request.args.get('next_page', url_for('ui.index'))
    return respond(*web.logout(current_session_store(), next_page))


@blueprint.route('/<consumer_id>', methods=['GET'])
@owner_only
def show(consumer_id: str) -> Response:
    """Show the logged-in consumer's record."""
    return respond(*web.show(consumer_id, current_session_store()))


@blueprint.route('/<consumer_id>', methods=['PUT', 'POST'])
@owner_only
def update(consumer_id: str) -> Response:
    """Update the logged-in consumer's record."""
    return respond(*web.update(consumer_id, request_params(),
                               current_session_store()))


@blueprint.route('/<consumer_id>', methods=['DELETE'])
@owner_only
def delete(consumer_id: str) -> Response:
    """Delete the logged-in consumer's record."""
    return respond(*web.delete(consumer_id, current_session_store()))


@blueprint.route('/admin/consumers', methods=['GET'])
@admin_only
def admin_consumers() -> Response:
    """List all consumers."""
    return respond(*web.admin_consumers(current_session_store()))
