"""Core data structures for the API consumer gateway."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, NamedTuple, Optional


class TokenStatus(Enum):
    """Shape of a token, as determined by its length."""

    STARTER = 'starter'
    ACTIVE = 'active'


class Audience(Enum):
    """Trust tier under which a backend call is made."""

    CONSUMER = 'consumer'
    ADMIN = 'admin'
    SYSTEM = 'system'


class RequestOrigin(Enum):
    """Channel through which a request reached us."""

    WEB_APP = 'web_app'
    """Browser traffic; the consumer token lives in the session."""

    DIRECT_API = 'direct_api'
    """API traffic; the token travels with the request itself."""


class CredentialMode(Enum):
    """How a credential is attached to an outgoing backend call."""

    QUERY_PARAM = 'query_param'
    HEADER = 'header'


class Consumer(NamedTuple):
    """An external identity permitted to call the backend API."""

    email: str
    """Contact address; also used to recognize the admin consumer."""

    consumer_id: Optional[str] = None
    """Unique identifier, embedded as the last segment of valid tokens."""

    api_token: Optional[str] = None
    """
    Stored token field.

    Holds the cleartext starter token until activation, and the salted hash
    of the valid token afterwards.
    """

    reset_key: Optional[str] = None
    """Hash of the outstanding reset key, if a reset has been requested."""

    created: Optional[datetime] = None
    updated: Optional[datetime] = None


class ParsedToken(NamedTuple):
    """A token split into its consumer id and starter portion."""

    id: str
    starter_token: str


class GatewayConfig(NamedTuple):
    """Process-wide, read-only credential configuration."""

    system_access_token: Optional[str]
    """Token used for consumer-audience calls when nobody is logged in."""

    admin_access_token: Optional[str]
    """Token used for every admin-audience call."""

    admin_email: Optional[str]
    """Email address of the consumer that owns the admin token."""


class RequestContext(NamedTuple):
    """Everything the core needs to know about an inbound request."""

    origin: RequestOrigin
    session: Any
    """A :class:`.services.sessions.SessionStore` for the caller."""

    params: Mapping[str, str] = {}
    """Query string parameters."""

    headers: Mapping[str, str] = {}


class BackendResponse(NamedTuple):
    """A successful response from the backend API."""

    status_code: int
    data: Any
    headers: Dict[str, str] = {}


class GatewayError(NamedTuple):
    """A failed backend call, in the shape we report to callers."""

    status: int
    message: str
