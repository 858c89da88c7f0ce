"""
Issue calls to the versioned backend API on behalf of a caller.

Every call goes through :class:`.CredentialSelector` to pick the credential
for its audience. Failures, whether the backend could not be reached or it
answered with an error, come back as a :class:`.GatewayError` value rather
than an exception. Calls are never retried.
"""

import json
import logging
from functools import wraps
from http import HTTPStatus
from typing import Any, Dict, Optional, Union

import requests
from flask import Flask, current_app, g

from ..credentials import CredentialSelector, version_for
from ..context import gateway_config
from ..domain import Audience, BackendResponse, CredentialMode, GatewayError
from ..lifecycle import QUERY_TOKEN_PARAM

logger = logging.getLogger(__name__)

Result = Union[BackendResponse, GatewayError]

TRANSPORT_FAILURE_STATUS = HTTPStatus.SERVICE_UNAVAILABLE
"""Reported when the backend could not be reached at all."""


class BackendSession(object):
    """
    An HTTP session with the backend API.

    Parameters
    ----------
    endpoint : str
        Base URL of the backend API, without the version segment.
    selector : :class:`.CredentialSelector`
    verify : bool
        Whether to verify TLS certificates.

    """

    def __init__(self, endpoint: str, selector: CredentialSelector,
                 verify: bool = True) -> None:
        self._endpoint = endpoint.rstrip('/')
        self._selector = selector
        self._session = requests.Session()
        self._session.verify = verify
        self._adapter = requests.adapters.HTTPAdapter(max_retries=0)
        self._session.mount('http://', self._adapter)
        self._session.mount('https://', self._adapter)
        logger.debug('New BackendSession at %s', self._endpoint)

    def url_for(self, path: str, audience: Audience) -> str:
        """Build the versioned URL for ``path``."""
        return f'{self._endpoint}/{version_for(audience)}/{path.lstrip("/")}'

    def send(self, method: str, path: str, body: Optional[dict] = None,
             audience: Audience = Audience.CONSUMER,
             mode: CredentialMode = CredentialMode.QUERY_PARAM,
             session: Optional[Any] = None) -> Result:
        """
        Make a call to the backend API.

        Parameters
        ----------
        method : str
            One of GET, POST, PUT, DELETE.
        path : str
            Route relative to the API version, e.g. ``api-consumer/42``.
        body : dict
            JSON payload for POST and PUT.
        audience : :class:`.Audience`
            Determines the credential and the API version.
        mode : :class:`.CredentialMode`
            Attach the credential as the ``api_access_token`` query parameter
            or as a bearer ``Authorization`` header.
        session : :class:`.services.sessions.SessionStore`
            The caller's session, if any.

        Returns
        -------
        :class:`.BackendResponse` or :class:`.GatewayError`

        """
        token = self._selector.select(audience, session)
        params: Dict[str, str] = {}
        headers: Dict[str, str] = {'Accept': 'application/json'}
        if token:
            if mode is CredentialMode.HEADER:
                headers['Authorization'] = f'Bearer {token}'
            else:
                params[QUERY_TOKEN_PARAM] = token
        else:
            logger.warning('No credential configured for %s', audience.value)

        url = self.url_for(path, audience)
        logger.debug('%s %s as %s', method, url, audience.value)
        try:
            response = self._session.request(method.upper(), url,
                                             params=params, json=body,
                                             headers=headers)
        except requests.exceptions.RequestException as e:
            logger.error('Backend call %s %s failed: %s', method, path, e)
            return GatewayError(status=TRANSPORT_FAILURE_STATUS,
                                message='Backend service is unavailable')

        data = self._decode(response)
        if not response.ok:
            logger.debug('Backend responded with status %i',
                         response.status_code)
            return self._error_from(response, data)
        return BackendResponse(status_code=response.status_code, data=data,
                               headers=dict(response.headers))

    def get(self, path: str, **kwargs: Any) -> Result:
        """Make a GET request."""
        return self.send('GET', path, **kwargs)

    def post(self, path: str, body: Optional[dict] = None,
             **kwargs: Any) -> Result:
        """Make a POST request."""
        return self.send('POST', path, body=body, **kwargs)

    def put(self, path: str, body: Optional[dict] = None,
            **kwargs: Any) -> Result:
        """Make a PUT request."""
        return self.send('PUT', path, body=body, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Result:
        """Make a DELETE request."""
        return self.send('DELETE', path, **kwargs)

    def _decode(self, response: requests.Response) -> Any:
        if response.status_code == HTTPStatus.NO_CONTENT \
                or not response.content:
            return None
        try:
            return response.json()
        except (json.decoder.JSONDecodeError, ValueError):
            logger.debug('Backend response could not be decoded')
            return None

    def _error_from(self, response: requests.Response, data: Any) \
            -> GatewayError:
        status = response.status_code
        message = response.reason or 'Backend request failed'
        if isinstance(data, dict):
            # Errors raised inside the backend carry their own code.
            code = data.get('status_code')
            if isinstance(code, int) and code >= HTTPStatus.BAD_REQUEST:
                status = code
            message = data.get('message') or data.get('reason') or message
        return GatewayError(status=status, message=str(message))


def init_app(app: Optional[Flask] = None) -> None:
    """Set required configuration defaults for the application."""
    if app is not None:
        app.config.setdefault('BACKEND_API_URL', 'http://localhost:8000/api')
        app.config.setdefault('BACKEND_VERIFY_TLS', True)


def get_session(app: Optional[Flask] = None) -> BackendSession:
    """Create a new :class:`.BackendSession`."""
    config = (app or current_app).config
    selector = CredentialSelector(gateway_config(app))
    return BackendSession(config['BACKEND_API_URL'], selector,
                          verify=bool(config.get('BACKEND_VERIFY_TLS', True)))


def current_session() -> BackendSession:
    """Get the backend session for this context (if there is one)."""
    if 'backend' not in g:
        g.backend = get_session()
    return g.backend    # type: ignore


@wraps(BackendSession.send)
def send(*args: Any, **kwargs: Any) -> Result:
    """Wrapper for :meth:`BackendSession.send`."""
    return current_session().send(*args, **kwargs)
