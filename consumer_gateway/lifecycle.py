"""
Token lifecycle for API consumers.

A consumer's token moves through the following states::

    Unissued -> Starter -> Valid -> Active
                   ^                  |
                   +----- reset ------+

The starter token is generated at registration and stored in cleartext on the
consumer record. The consumer receives the valid token (the starter token with
their id appended) and submits it for activation, at which point the stored
field is replaced by a salted hash of the valid token. Only the hash is ever
compared against during verification.

A reset issues a one-time reset key; exchanging it puts a fresh starter token
on the record, which discards the previously active token.
"""

import hmac
import logging
from typing import Callable, Optional, Tuple

from . import hashing, tokens
from .domain import Consumer, GatewayConfig, RequestContext, RequestOrigin, \
    TokenStatus
from .exceptions import ActivationFailed, MalformedToken, ResetFailed

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = 'api_consumer_token'
"""Session key under which the web app keeps the logged-in consumer token."""

QUERY_TOKEN_PARAM = 'api_access_token'
"""Query parameter carrying the token on direct API requests."""

ConsumerLookup = Callable[[str], Optional[Consumer]]


class TokenManager(object):
    """
    Generates, activates, verifies and resets consumer tokens.

    Parameters
    ----------
    find_consumer : callable
        Takes a consumer id (str) and returns a :class:`.Consumer`, or None
        if there is no such consumer.
    config : :class:`.GatewayConfig`
    hash_token : callable
        One-way hash primitive, ``(plaintext) -> digest``.
    check_token : callable
        Verification primitive, ``(plaintext, digest) -> bool``.

    """

    def __init__(self, find_consumer: ConsumerLookup, config: GatewayConfig,
                 hash_token: Callable[[str], str] = hashing.hash_token,
                 check_token: Callable[[str, str], bool] = hashing.check_token
                 ) -> None:
        self._find_consumer = find_consumer
        self._config = config
        self._hash = hash_token
        self._check = check_token

    def generate_valid_token(self, consumer: Consumer) -> str:
        """
        Generate the valid token for ``consumer``.

        If the consumer still holds a starter token, the id is appended to
        it. Otherwise a fresh starter token is generated first, so that a
        valid token is always derived from a starter-shaped base.
        """
        stored = consumer.api_token or ''
        if stored and tokens.classify(stored) is TokenStatus.STARTER:
            starter_token = stored
        else:
            starter_token = tokens.generate_starter_token()
        return tokens.append_id(starter_token, str(consumer.consumer_id))

    def activate(self, valid_token: str) -> str:
        """Hash a valid token; the caller persists the digest."""
        return self._hash(valid_token)

    def resolve_consumer(self, token: str) -> Optional[Consumer]:
        """
        Get the consumer whose id is embedded in ``token``.

        Returns None if there is no such consumer, or if the embedded id is
        not exactly the id of the consumer it resolves to.

        Raises
        ------
        :class:`.MalformedToken`
            If no id can be separated from the token.

        """
        parsed = tokens.parse(token)
        consumer = self._find_consumer(parsed.id)
        if consumer is None or consumer.consumer_id != parsed.id:
            logger.debug('No consumer with id %s', parsed.id)
            return None
        return consumer

    def verify(self, token: str) -> bool:
        """Verify the validity of a consumer token."""
        consumer = self._resolve_quietly(token)
        if consumer is None:
            return False
        return self._check(token, consumer.api_token or '')

    def verify_admin(self, token: str) -> bool:
        """Verify that ``token`` is valid and belongs to the admin consumer."""
        consumer = self._resolve_quietly(token)
        if consumer is None:
            return False
        if not self._config.admin_email \
                or consumer.email != self._config.admin_email:
            return False
        return self._check(token, consumer.api_token or '')

    def token_status(self, token: str) -> TokenStatus:
        """Determine whether a stored token field is a starter or active."""
        return tokens.classify(token)

    def extract_token(self, context: RequestContext) -> Optional[str]:
        """
        Get the consumer token carried by a request, if there is one.

        On the web app the token comes from the session, and must also pass
        :meth:`verify`, since those requests are not behind the API
        admission check. On the direct API channel the token comes from the
        ``api_access_token`` query parameter, or failing that from a bearer
        ``Authorization`` header.
        """
        if context.origin is RequestOrigin.WEB_APP:
            if not context.session.has(SESSION_TOKEN_KEY):
                return None
            token = context.session.get(SESSION_TOKEN_KEY)
            if not token or not self.verify(token):
                logger.debug('Session token did not verify')
                return None
            return str(token)

        token = context.params.get(QUERY_TOKEN_PARAM)
        if token:
            return str(token)
        auth_header = context.headers.get('Authorization', '')
        scheme, _, credential = auth_header.partition(' ')
        if scheme.lower() == 'bearer' and credential.strip():
            return credential.strip()
        return None

    def check_activation(self, valid_token: str) -> Consumer:
        """
        Find the consumer that ``valid_token`` activates.

        The consumer must exist under exactly the embedded id and must still
        hold a starter token, which must be the one embedded in
        ``valid_token``.

        Raises
        ------
        :class:`.MalformedToken`
        :class:`.ActivationFailed`

        """
        parsed = tokens.parse(valid_token)
        if not parsed.id or not parsed.starter_token:
            raise MalformedToken('Token is missing a segment')
        consumer = self._find_consumer(parsed.id)
        if consumer is None or consumer.consumer_id != parsed.id:
            raise ActivationFailed('No such consumer')
        stored = consumer.api_token or ''
        if not stored or self.token_status(stored) is not TokenStatus.STARTER:
            raise ActivationFailed('Consumer is not awaiting activation')
        if not hmac.compare_digest(stored.encode('utf-8'),
                                   parsed.starter_token.encode('utf-8')):
            raise ActivationFailed('Token does not match')
        return consumer

    def reset(self, consumer: Consumer) -> Tuple[Consumer, str]:
        """
        Issue a reset key for ``consumer``.

        Returns the updated consumer, holding only the hash of the key, and
        the cleartext key for out-of-band delivery. Any earlier key is
        superseded.
        """
        reset_key = tokens.generate_reset_key()
        return consumer._replace(reset_key=self._hash(reset_key)), reset_key

    def refresh(self, consumer: Consumer, reset_key: str) \
            -> Tuple[Consumer, str]:
        """
        Exchange a reset key for a new valid token.

        The consumer is put back on a fresh starter token, which discards
        the active token, and the reset key is consumed.

        Raises
        ------
        :class:`.ResetFailed`

        """
        if not consumer.reset_key \
                or not self._check(reset_key, consumer.reset_key):
            raise ResetFailed('Reset key does not match')
        refreshed = consumer._replace(
            api_token=tokens.generate_starter_token(),
            reset_key=None
        )
        return refreshed, self.generate_valid_token(refreshed)

    def _resolve_quietly(self, token: str) -> Optional[Consumer]:
        try:
            return self.resolve_consumer(token)
        except MalformedToken:
            logger.debug('Malformed token')
            return None
