"""Tests for :mod:`consumer_gateway.controllers.web`."""

from typing import Any
from unittest import TestCase, mock

from werkzeug.datastructures import MultiDict

from consumer_gateway.controllers import web
from consumer_gateway.domain import Audience, BackendResponse, GatewayError
from consumer_gateway.factory import create_web_app
from consumer_gateway.lifecycle import SESSION_TOKEN_KEY
from consumer_gateway.services import datastore
from consumer_gateway.services.sessions import SessionStore

from test_controllers import activated_consumer


class WebTestCase(TestCase):
    def setUp(self):
        self.app = create_web_app()
        self.context = self.app.app_context()
        self.context.push()
        datastore.create_all()
        self.session = SessionStore({})

    def tearDown(self):
        datastore.drop_all()
        self.context.pop()


@mock.patch('consumer_gateway.services.backend.send')
class TestProxy(WebTestCase):
    """Submissions are validated and forwarded to the backend API."""

    def test_register(self, mock_send: Any) -> None:
        """Registration is forwarded, and the result passed back."""
        mock_send.return_value = BackendResponse(
            201, {'data': {'id': '1', 'api_token': 'abc_1'}}
        )
        data, code, _ = web.register(MultiDict({'email': 'foo@example.org'}),
                                     self.session)
        self.assertEqual(code, 201)
        self.assertEqual(data, {'data': {'id': '1', 'api_token': 'abc_1'}})
        mock_send.assert_called_once_with(
            'POST', 'api-consumer', body={'email': 'foo@example.org'},
            audience=Audience.CONSUMER, session=self.session
        )

    def test_invalid_submission(self, mock_send: Any) -> None:
        """Invalid submissions are not forwarded."""
        _, code, _ = web.register(MultiDict({'email': 'nope'}), self.session)
        self.assertEqual(code, 400)
        _, code, _ = web.refresh_token(
            MultiDict({'email': 'foo@example.org'}), self.session
        )
        self.assertEqual(code, 400)
        mock_send.assert_not_called()

    def test_backend_error(self, mock_send: Any) -> None:
        """Backend errors are passed back as error payloads."""
        mock_send.return_value = GatewayError(400, 'The reset key is not '
                                                   'valid')
        data, code, _ = web.refresh_token(
            MultiDict({'email': 'foo@example.org',
                       'reset_key': 'abcde_fghij_klmno'}),
            self.session
        )
        self.assertEqual(code, 400)
        self.assertEqual(data, {'message': 'The reset key is not valid',
                                'status_code': 400})

    def test_backend_unavailable(self, mock_send: Any) -> None:
        """A transport failure is reported as a 503."""
        mock_send.return_value = GatewayError(503, 'Backend service is '
                                                   'unavailable')
        _, code, _ = web.activate(MultiDict({'api_token': 'abc_1'}),
                                  self.session)
        self.assertEqual(code, 503)

    def test_admin_consumers(self, mock_send: Any) -> None:
        """The consumer list is requested with admin credentials."""
        mock_send.return_value = BackendResponse(200, {'data': [{'id': '1'}]})
        data, code, _ = web.admin_consumers(self.session)
        self.assertEqual(data, {'data': [{'id': '1'}]})
        _, kwargs = mock_send.call_args
        self.assertIs(kwargs['audience'], Audience.ADMIN)

    def test_delete_logs_out(self, mock_send: Any) -> None:
        """Deleting one's own record ends the session."""
        mock_send.return_value = BackendResponse(204, None)
        self.session.set(SESSION_TOKEN_KEY, 'abc_1')
        self.assertEqual(web.delete('1', self.session), ({}, 204, {}))
        self.assertFalse(self.session.has(SESSION_TOKEN_KEY))

    def test_failed_delete_keeps_session(self, mock_send: Any) -> None:
        """If the delete fails, the consumer stays logged in."""
        mock_send.return_value = GatewayError(403, 'Access denied')
        self.session.set(SESSION_TOKEN_KEY, 'abc_1')
        self.assertEqual(web.delete('1', self.session)[1], 403)
        self.assertTrue(self.session.has(SESSION_TOKEN_KEY))

    def test_index(self, mock_send: Any) -> None:
        """The index shows the logged-in consumer."""
        mock_send.return_value = BackendResponse(200, {'data': {'id': '7'}})
        data, _, _ = web.index('abc_7', self.session)
        self.assertEqual(data, {'data': {'id': '7'}})
        args, _ = mock_send.call_args
        self.assertEqual(args, ('GET', 'api-consumer/7'))

        self.assertEqual(web.index(None, self.session)[0], {'data': None})


class TestAccess(WebTestCase):
    """Consumers log in with an active token."""

    def test_access(self):
        """A valid token is kept in the session."""
        _, valid = activated_consumer('foo@example.org')
        _, code, headers = web.access(MultiDict({'api_token': valid}),
                                      self.session, '/next')
        self.assertEqual(code, 303)
        self.assertEqual(headers['Location'], '/next')
        self.assertEqual(self.session.get(SESSION_TOKEN_KEY), valid)

    def test_access_denied(self):
        """A token that does not verify is not kept."""
        _, code, _ = web.access(MultiDict({'api_token': 'abc_def_ghi_1'}),
                                self.session, '/next')
        self.assertEqual(code, 400)
        self.assertFalse(self.session.has(SESSION_TOKEN_KEY))

    def test_logout(self):
        """Logging out forgets the token."""
        self.session.set(SESSION_TOKEN_KEY, 'abc_1')
        _, code, _ = web.logout(self.session, '/next')
        self.assertEqual(code, 303)
        self.assertFalse(self.session.has(SESSION_TOKEN_KEY))
