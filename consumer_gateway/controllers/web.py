"""
Controllers for the web app.

The web app keeps no consumer state of its own: submissions are checked
against the same forms as the backend and then forwarded to the backend API
on behalf of the caller, using the credential picked for the audience. The
only local state is the consumer token held in the caller's session.
"""

import logging
from http import HTTPStatus
from typing import Optional

from werkzeug.datastructures import MultiDict

from .. import tokens
from ..context import token_manager
from ..domain import Audience
from ..exceptions import MalformedToken
from ..lifecycle import SESSION_TOKEN_KEY
from ..responses import ResponseData, error, from_backend, normalize
from ..services import backend
from ..services.sessions import SessionStore
from .forms import AccessForm, ActivationForm, ReactivationForm, \
    RefreshTokenForm, RegistrationForm, ResetKeyForm, UpdateForm, form_errors

logger = logging.getLogger(__name__)

COLLECTION = 'api-consumer'


def _proxy(method: str, path: str, session: SessionStore,
           body: Optional[dict] = None,
           audience: Audience = Audience.CONSUMER) -> ResponseData:
    result = backend.send(method, path, body=body, audience=audience,
                          session=session)
    return normalize(from_backend(result))


def index(token: Optional[str], session: SessionStore) -> ResponseData:
    """Show the logged-in consumer, if there is one."""
    if token is None:
        return {'data': None}, HTTPStatus.OK, {}
    try:
        consumer_id = tokens.parse(token).id
    except MalformedToken:
        return {'data': None}, HTTPStatus.OK, {}
    return _proxy('GET', f'{COLLECTION}/{consumer_id}', session)


def register(params: MultiDict, session: SessionStore) -> ResponseData:
    """Handle a registration request."""
    form = RegistrationForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    return _proxy('POST', COLLECTION, session, body={'email': form.email.data})


def activate(params: MultiDict, session: SessionStore) -> ResponseData:
    """Handle a request to activate a token."""
    form = ActivationForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    return _proxy('POST', f'{COLLECTION}/activate', session,
                  body={'api_token': form.api_token.data})


def reactivate(params: MultiDict, session: SessionStore) -> ResponseData:
    """Handle a request to send the activation token again."""
    form = ReactivationForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    return _proxy('POST', f'{COLLECTION}/reactivate', session,
                  body={'email': form.email.data})


def reset_key(params: MultiDict, session: SessionStore) -> ResponseData:
    """Handle a request for a reset key."""
    form = ResetKeyForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    return _proxy('POST', f'{COLLECTION}/reset-key', session,
                  body={'email': form.email.data})


def refresh_token(params: MultiDict, session: SessionStore) -> ResponseData:
    """Handle a request to exchange a reset key for a new token."""
    form = RefreshTokenForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    return _proxy('POST', f'{COLLECTION}/refresh-token', session,
                  body={'email': form.email.data,
                        'reset_key': form.reset_key.data})


def show(consumer_id: str, session: SessionStore) -> ResponseData:
    """Show a consumer's own record."""
    return _proxy('GET', f'{COLLECTION}/{consumer_id}', session)


def update(consumer_id: str, params: MultiDict,
           session: SessionStore) -> ResponseData:
    """Update a consumer's own record."""
    form = UpdateForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    return _proxy('PUT', f'{COLLECTION}/{consumer_id}', session,
                  body={'email': form.email.data})


def delete(consumer_id: str, session: SessionStore) -> ResponseData:
    """Delete a consumer's own record, and log them out."""
    data, code, headers = _proxy('DELETE', f'{COLLECTION}/{consumer_id}',
                                 session)
    if code < HTTPStatus.BAD_REQUEST:
        session.clear(SESSION_TOKEN_KEY)
    return data, code, headers


def admin_consumers(session: SessionStore) -> ResponseData:
    """List all consumers, with administrative credentials."""
    return _proxy('GET', COLLECTION, session, audience=Audience.ADMIN)


def access(params: MultiDict, session: SessionStore,
           next_page: str) -> ResponseData:
    """Log in with an active token."""
    form = AccessForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    token = form.api_token.data
    if not token_manager().verify(token):
        logger.debug('Login with a token that did not verify')
        return error('The API token is not valid', HTTPStatus.BAD_REQUEST)
    session.set(SESSION_TOKEN_KEY, token)
    return {}, HTTPStatus.SEE_OTHER, {'Location': next_page}


def logout(session: SessionStore, next_page: str) -> ResponseData:
    """Forget the token held in the session."""
    session.clear(SESSION_TOKEN_KEY)
    return {}, HTTPStatus.SEE_OTHER, {'Location': next_page}
