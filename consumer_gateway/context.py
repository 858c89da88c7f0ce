"""Bind the core to the Flask application and request."""

from typing import Optional

from flask import Flask, Request, current_app, g, session

from .domain import GatewayConfig, RequestContext, RequestOrigin
from .lifecycle import TokenManager
from .services import datastore
from .services.sessions import SessionStore


def gateway_config(app: Optional[Flask] = None) -> GatewayConfig:
    """Freeze the credential configuration of ``app``."""
    config = (app or current_app).config
    return GatewayConfig(
        system_access_token=config.get('SYSTEM_ACCESS_TOKEN'),
        admin_access_token=config.get('ADMIN_ACCESS_TOKEN'),
        admin_email=config.get('ADMIN_EMAIL')
    )


def token_manager() -> TokenManager:
    """Get the :class:`.TokenManager` for this context."""
    if 'token_manager' not in g:
        g.token_manager = TokenManager(datastore.get_consumer,
                                       gateway_config())
    return g.token_manager     # type: ignore


def current_session_store() -> SessionStore:
    """Get the session of the current caller."""
    return SessionStore(session)


def request_context(request: Request,
                    origin: RequestOrigin) -> RequestContext:
    """
    Describe ``request`` for the core.

    The API blueprint serves the direct API channel and the UI blueprint
    serves the web app, so ``origin`` is set by the blueprint handling the
    request rather than inferred from it.
    """
    return RequestContext(
        origin=origin,
        session=current_session_store(),
        params=request.args,
        headers=request.headers
    )
