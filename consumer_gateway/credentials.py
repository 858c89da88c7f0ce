"""Choose the credential to attach to an outgoing backend call."""

import logging
from typing import Optional

from .domain import Audience, GatewayConfig
from .lifecycle import SESSION_TOKEN_KEY

logger = logging.getLogger(__name__)

API_VERSIONS = {
    Audience.CONSUMER: 'v1',
    Audience.ADMIN: 'v2',
    Audience.SYSTEM: 'v2',
}
"""Backend API version used for each audience."""


class CredentialSelector(object):
    """
    Two-tier credential selection.

    Consumer-audience calls act as the logged-in consumer when possible, and
    as the system otherwise. Admin-audience calls always use the admin token,
    and system-audience calls always use the system token.
    """

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config

    def select(self, audience: Audience, session: Optional[object] = None) \
            -> Optional[str]:
        """
        Get the credential for a call made under ``audience``.

        Parameters
        ----------
        audience : :class:`.Audience`
        session : :class:`.services.sessions.SessionStore` or None
            The caller's session, if the call is made on behalf of a browser.

        """
        if audience is Audience.ADMIN:
            return self._config.admin_access_token
        if audience is Audience.SYSTEM:
            return self._config.system_access_token
        if session is not None and session.has(SESSION_TOKEN_KEY):
            token: Optional[str] = session.get(SESSION_TOKEN_KEY)
            if token:
                return token
        return self._config.system_access_token


def version_for(audience: Audience) -> str:
    """Get the backend API version for ``audience``."""
    return API_VERSIONS[audience]
