"""Tests for :mod:`consumer_gateway.services.backend`."""

from typing import Any
from unittest import TestCase, mock

import requests

from consumer_gateway.credentials import CredentialSelector
from consumer_gateway.domain import Audience, BackendResponse, \
    CredentialMode, GatewayConfig, GatewayError
from consumer_gateway.lifecycle import SESSION_TOKEN_KEY
from consumer_gateway.services import backend
from consumer_gateway.services.sessions import SessionStore

ENDPOINT = 'http://backend.local/api'
CONFIG = GatewayConfig(system_access_token='system_token',
                       admin_access_token='admin_token',
                       admin_email='admin@example.org')


def mock_response(status_code: int, payload: Any = None,
                  reason: str = '') -> mock.MagicMock:
    response = mock.MagicMock(status_code=status_code,
                              ok=status_code < 400,
                              reason=reason,
                              headers={'Content-Type': 'application/json'},
                              content=b'{}' if payload is not None else b'')
    response.json.return_value = payload
    return response


class BackendTestCase(TestCase):
    def session_returning(self, mock_session: Any,
                          response: Any) -> mock.MagicMock:
        instance = mock.MagicMock()
        instance.request.return_value = response
        mock_session.return_value = instance
        return instance


class TestSend(BackendTestCase):
    """Calls go to the versioned URL with the selected credential."""

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_consumer_call(self, mock_session: Any) -> None:
        """A consumer call goes to v1 with the session token."""
        instance = self.session_returning(
            mock_session, mock_response(200, {'data': {'id': '42'}})
        )
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        result = session.get(
            'api-consumer/42',
            session=SessionStore({SESSION_TOKEN_KEY: 'abc_42'})
        )

        self.assertIsInstance(result, BackendResponse)
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.data, {'data': {'id': '42'}})
        args, kwargs = instance.request.call_args
        self.assertEqual(args, ('GET', f'{ENDPOINT}/v1/api-consumer/42'))
        self.assertEqual(kwargs['params'], {'api_access_token': 'abc_42'})

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_admin_call(self, mock_session: Any) -> None:
        """An admin call goes to v2 with the admin token."""
        instance = self.session_returning(
            mock_session, mock_response(200, {'data': []})
        )
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        session.get('api-consumer', audience=Audience.ADMIN)

        args, kwargs = instance.request.call_args
        self.assertEqual(args, ('GET', f'{ENDPOINT}/v2/api-consumer'))
        self.assertEqual(kwargs['params'], {'api_access_token': 'admin_token'})

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_header_mode(self, mock_session: Any) -> None:
        """The credential can travel as a bearer header instead."""
        instance = self.session_returning(
            mock_session, mock_response(201, {'data': {'id': '1'}})
        )
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        session.post('api-consumer', body={'email': 'foo@example.org'},
                     mode=CredentialMode.HEADER)

        _, kwargs = instance.request.call_args
        self.assertEqual(kwargs['params'], {})
        self.assertEqual(kwargs['headers']['Authorization'],
                         'Bearer system_token')
        self.assertEqual(kwargs['json'], {'email': 'foo@example.org'})

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_no_content(self, mock_session: Any) -> None:
        """A 204 response has no data."""
        self.session_returning(mock_session, mock_response(204))
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        result = session.delete('api-consumer/42')
        self.assertEqual(result.status_code, 204)
        self.assertIsNone(result.data)


class TestSendFailures(BackendTestCase):
    """Failures come back as :class:`.GatewayError` values."""

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_not_found(self, mock_session: Any) -> None:
        """A 404 with a message in the payload keeps status and message."""
        self.session_returning(
            mock_session,
            mock_response(404, {'message': 'No API consumer found',
                                'status_code': 404}, reason='NOT FOUND')
        )
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        result = session.get('api-consumer/42')
        self.assertEqual(result, GatewayError(404, 'No API consumer found'))

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_error_without_payload(self, mock_session: Any) -> None:
        """Without a payload, the HTTP reason is the message."""
        self.session_returning(mock_session,
                               mock_response(500, reason='SERVER ERROR'))
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        result = session.get('api-consumer/42')
        self.assertEqual(result, GatewayError(500, 'SERVER ERROR'))

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_werkzeug_error(self, mock_session: Any) -> None:
        """Errors rendered by the backend error handlers carry a reason."""
        self.session_returning(
            mock_session,
            mock_response(401, {'reason': 'Missing API access token'})
        )
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        result = session.get('api-consumer/42')
        self.assertEqual(result, GatewayError(401, 'Missing API access token'))

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_unreachable(self, mock_session: Any) -> None:
        """If the backend cannot be reached, the result is a 503."""
        instance = mock.MagicMock()
        instance.request.side_effect = requests.exceptions.ConnectionError
        mock_session.return_value = instance
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        result = session.get('api-consumer/42')
        self.assertIsInstance(result, GatewayError)
        self.assertEqual(result.status, 503)
        self.assertEqual(instance.request.call_count, 1)

    @mock.patch('consumer_gateway.services.backend.requests.Session')
    def test_undecodable(self, mock_session: Any) -> None:
        """A body that is not JSON is treated as no data."""
        response = mock_response(200, {})
        response.json.side_effect = ValueError
        self.session_returning(mock_session, response)
        session = backend.BackendSession(ENDPOINT, CredentialSelector(CONFIG))
        result = session.get('api-consumer/42')
        self.assertIsNone(result.data)
