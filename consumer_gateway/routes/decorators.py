"""
Admission checks for protected routes.

:func:`admitted` wraps a route so that it is only called if the request
carries a consumer token that passes a check, and (optionally) an authorizer
that can look at the route parameters. Checks and authorizers are called
with the :class:`.TokenManager` for the request and the extracted token.

.. code-block:: python

   @blueprint.route('/v1/api-consumer/<consumer_id>', methods=['GET'])
   @admitted(RequestOrigin.DIRECT_API, check=is_consumer,
             authorizer=is_owner)
   def show(consumer_id: str) -> Response:
       ...

If no token is present, or the check fails, :class:`.Unauthorized` is
raised. If the authorizer returns ``False``, :class:`.Forbidden` is raised.
The admitted token is available to the route as ``g.consumer_token``.
"""

import hmac
import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import g, request
from werkzeug.exceptions import Forbidden, Unauthorized

from ..context import gateway_config, request_context, token_manager
from ..domain import RequestOrigin
from ..lifecycle import TokenManager

logger = logging.getLogger(__name__)

Check = Callable[[TokenManager, str], bool]


def is_consumer(manager: TokenManager, token: str) -> bool:
    """The token belongs to an active consumer."""
    return manager.verify(token)


def is_admin(manager: TokenManager, token: str) -> bool:
    """The token belongs to the admin consumer."""
    return manager.verify_admin(token)


def is_admin_or_system(manager: TokenManager, token: str) -> bool:
    """The token belongs to the admin consumer, or is the system token."""
    system_token = gateway_config().system_access_token
    if system_token and hmac.compare_digest(token.encode('utf-8'),
                                            system_token.encode('utf-8')):
        return manager.verify(token)
    return manager.verify_admin(token)


def is_owner(manager: TokenManager, token: str, consumer_id: str,
             **kwargs: Any) -> bool:
    """The token belongs to the consumer identified in the route."""
    consumer = manager.resolve_consumer(token)
    return consumer is not None and consumer.consumer_id == consumer_id


def admitted(origin: RequestOrigin, check: Optional[Check] = None,
             authorizer: Optional[Callable] = None) -> Callable:
    """
    Generate a decorator that requires a consumer token.

    Parameters
    ----------
    origin : :class:`.RequestOrigin`
        Channel served by the decorated route; determines where the token
        is read from.
    check : function
        ``(manager, token) -> bool``. Tokens read from the web app session
        are always verified, so this may be omitted for web app routes that
        need no more than a logged-in consumer.
    authorizer : function
        ``(manager, token, *args, **kwargs) -> bool``, where ``*args`` and
        ``**kwargs`` are the parameters passed to the decorated function.

    """
    def protector(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            manager = token_manager()
            token = manager.extract_token(request_context(request, origin))
            if not token:
                logger.debug('No consumer token; aborting')
                raise Unauthorized('Missing API access token')
            if check is not None and not check(manager, token):
                logger.debug('Consumer token failed admission check')
                raise Unauthorized('Invalid API access token')
            if authorizer is not None \
                    and not authorizer(manager, token, *args, **kwargs):
                logger.debug('Authorizer returned negative result')
                raise Forbidden('Access denied')
            g.consumer_token = token
            return func(*args, **kwargs)
        return wrapper
    return protector
