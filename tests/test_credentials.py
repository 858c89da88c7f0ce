"""Tests for :mod:`consumer_gateway.credentials`."""

from unittest import TestCase

from consumer_gateway.credentials import CredentialSelector, version_for
from consumer_gateway.domain import Audience, GatewayConfig
from consumer_gateway.lifecycle import SESSION_TOKEN_KEY
from consumer_gateway.services.sessions import SessionStore

CONFIG = GatewayConfig(system_access_token='system_token',
                       admin_access_token='admin_token',
                       admin_email='admin@example.org')


class TestSelect(TestCase):
    """The credential depends on the audience and the session."""

    def setUp(self):
        self.selector = CredentialSelector(CONFIG)

    def test_admin(self):
        """Admin calls always use the admin token."""
        session = SessionStore({SESSION_TOKEN_KEY: 'consumer_token'})
        self.assertEqual(self.selector.select(Audience.ADMIN, session),
                         'admin_token')

    def test_system(self):
        """System calls always use the system token."""
        session = SessionStore({SESSION_TOKEN_KEY: 'consumer_token'})
        self.assertEqual(self.selector.select(Audience.SYSTEM, session),
                         'system_token')

    def test_consumer_logged_in(self):
        """Consumer calls use the session token when there is one."""
        session = SessionStore({SESSION_TOKEN_KEY: 'consumer_token'})
        self.assertEqual(self.selector.select(Audience.CONSUMER, session),
                         'consumer_token')

    def test_consumer_anonymous(self):
        """Consumer calls fall back to the system token."""
        self.assertEqual(self.selector.select(Audience.CONSUMER,
                                              SessionStore({})),
                         'system_token')
        self.assertEqual(self.selector.select(Audience.CONSUMER),
                         'system_token')

    def test_consumer_empty_session_token(self):
        """An empty session value is treated as absent."""
        session = SessionStore({SESSION_TOKEN_KEY: ''})
        self.assertEqual(self.selector.select(Audience.CONSUMER, session),
                         'system_token')

    def test_unconfigured(self):
        """Without configuration there may be no credential at all."""
        selector = CredentialSelector(GatewayConfig(None, None, None))
        self.assertIsNone(selector.select(Audience.ADMIN))
        self.assertIsNone(selector.select(Audience.CONSUMER))


class TestVersion(TestCase):
    """Consumer calls go to v1, others to v2."""

    def test_versions(self):
        """Each audience maps to an API version."""
        self.assertEqual(version_for(Audience.CONSUMER), 'v1')
        self.assertEqual(version_for(Audience.ADMIN), 'v2')
        self.assertEqual(version_for(Audience.SYSTEM), 'v2')
