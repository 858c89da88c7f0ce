"""
Provides the backend API for API consumers.

Version 1 routes admit any active consumer token; the web app calls them
with the logged-in consumer's token, or with the system token. Version 2
routes are administrative, and admit only the admin consumer or the system
token.
"""

from flask import Blueprint, Response

from ..controllers import consumers
from ..domain import RequestOrigin
from .decorators import admitted, is_admin_or_system, is_consumer, is_owner
from .util import request_params, respond

blueprint = Blueprint('api', __name__, url_prefix='/api')

v1 = admitted(RequestOrigin.DIRECT_API, check=is_consumer)
v1_owner = admitted(RequestOrigin.DIRECT_API, check=is_consumer,
                    authorizer=is_owner)
v2 = admitted(RequestOrigin.DIRECT_API, check=is_admin_or_system)


@blueprint.route('/v1/api-consumer', methods=['POST'])
@v1
def register() -> Response:
    """Register a new API consumer."""
    return respond(*consumers.register(request_params()))


@blueprint.route('/v1/api-consumer/activate', methods=['POST'])
@v1
def activate() -> Response:
    """Activate a valid token."""
    return respond(*consumers.activate(request_params()))


@blueprint.route('/v1/api-consumer/reactivate', methods=['POST'])
@v1
def reactivate() -> Response:
    """Send the valid token again."""
    return respond(*consumers.reactivate(request_params()))


@blueprint.route('/v1/api-consumer/reset-key', methods=['POST'])
@v1
def reset_key() -> Response:
    """Issue a reset key."""
    return respond(*consumers.reset_key(request_params()))


@blueprint.route('/v1/api-consumer/refresh-token', methods=['POST'])
@v1
def refresh_token() -> Response:
    """Exchange a reset key for a new valid token."""
    return respond(*consumers.refresh_token(request_params()))


@blueprint.route('/v1/api-consumer/<consumer_id>', methods=['GET'])
@v1_owner
def show(consumer_id: str) -> Response:
    """Get the caller's own consumer record."""
    return respond(*consumers.show(consumer_id))


@blueprint.route('/v1/api-consumer/<consumer_id>', methods=['PUT'])
@v1_owner
def update(consumer_id: str) -> Response:
    """Update the caller's own consumer record."""
    return respond(*consumers.update(consumer_id, request_params()))


@blueprint.route('/v1/api-consumer/<consumer_id>', methods=['DELETE'])
@v1_owner
def delete(consumer_id: str) -> Response:
    """Delete the caller's own consumer record."""
    return respond(*consumers.delete(consumer_id))


@blueprint.route('/v2/api-consumer', methods=['GET'])
@v2
def admin_list() -> Response:
    """List all consumers."""
    return respond(*consumers.list_consumers())


@blueprint.route('/v2/api-consumer/<consumer_id>', methods=['GET'])
@v2
def admin_show(consumer_id: str) -> Response:
    """Get any consumer record."""
    return respond(*consumers.show(consumer_id))


@blueprint.route('/v2/api-consumer/<consumer_id>', methods=['DELETE'])
@v2
def admin_delete(consumer_id: str) -> Response:
    """Delete any consumer record."""
    return respond(*consumers.delete(consumer_id))
