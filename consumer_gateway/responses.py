"""
Shape backend results into a single outward response contract.

Every result is one of four variants (:class:`Entity`, :class:`Collection`,
:class:`ErrorPayload`, :class:`Empty`), and :func:`normalize` maps each of them
to a ``(data, status code, headers)`` tuple, the same contract used by the
controllers.
"""

import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, \
    Union

from .domain import BackendResponse, GatewayError

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]
Transformer = Callable[[Any], Dict[str, Any]]


class Entity(NamedTuple):
    """A single item."""

    item: Any
    status: int = HTTPStatus.OK


class Collection(NamedTuple):
    """A sequence of items."""

    items: List[Any]


class ErrorPayload(NamedTuple):
    """An error reported by the model layer or by the backend."""

    message: str
    status: int


class Empty(NamedTuple):
    """Nothing to return."""


BackendResult = Union[Entity, Collection, ErrorPayload, Empty]


def _identity(item: Any) -> Dict[str, Any]:
    return item     # type: ignore


def normalize(returned: BackendResult,
              transformer: Optional[Transformer] = None) -> ResponseData:
    """
    Get the outward response for a backend result.

    Parameters
    ----------
    returned : :class:`.BackendResult`
    transformer : callable
        Applied to each entity to produce its outward representation.

    Returns
    -------
    dict
        Response body.
    int
        Status code.
    dict
        Headers to add to the response.

    """
    transform = transformer or _identity
    if isinstance(returned, ErrorPayload):
        body = {'message': returned.message, 'status_code': returned.status}
        return body, int(returned.status), {}
    if isinstance(returned, Collection):
        items = [transform(item) for item in returned.items]
        return {'data': items}, HTTPStatus.OK, {}
    if isinstance(returned, Entity):
        return {'data': transform(returned.item)}, int(returned.status), {}
    if not isinstance(returned, Empty):
        logger.error('Unrecognized result shape: %s', type(returned).__name__)
    return {}, HTTPStatus.NO_CONTENT, {}


def error(message: str, status: int) -> ResponseData:
    """Shortcut for an error response."""
    return normalize(ErrorPayload(message=message, status=status))


def from_backend(result: Union[BackendResponse, GatewayError]) \
        -> BackendResult:
    """Classify the result of a backend call."""
    if isinstance(result, GatewayError):
        return ErrorPayload(message=result.message, status=result.status)
    if result.status_code >= HTTPStatus.BAD_REQUEST:
        message = 'Backend request failed'
        if isinstance(result.data, dict):
            message = result.data.get('message', message)
        return ErrorPayload(message=message, status=result.status_code)
    data = result.data
    # Payloads that we produced ourselves wrap their content in ``data``.
    if isinstance(data, dict) and set(data) == {'data'}:
        data = data['data']
    if isinstance(data, list):
        return Collection(items=data)
    if data:
        return Entity(item=data, status=result.status_code)
    return Empty()
