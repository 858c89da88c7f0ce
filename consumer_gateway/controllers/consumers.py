"""
Controllers for the API consumer lifecycle, served by the backend API.

Each controller returns a ``(data, status code, headers)`` tuple produced by
:func:`.responses.normalize`. Stored tokens and reset keys are never part of
the response; a valid token is returned only to the caller that caused it to
be issued.
"""

import logging
import smtplib
from http import HTTPStatus
from typing import Any, Callable, Dict, Tuple

from werkzeug.datastructures import MultiDict

from .. import tokens
from ..context import token_manager
from ..domain import Consumer, TokenStatus
from ..exceptions import ActivationFailed, MalformedToken, ResetFailed
from ..responses import Collection, Empty, Entity, ResponseData, error, \
    normalize
from ..services import datastore, mail
from ..services.datastore import DuplicateConsumer
from .forms import ActivationForm, ReactivationForm, RefreshTokenForm, \
    RegistrationForm, ResetKeyForm, UpdateForm, form_errors

logger = logging.getLogger(__name__)

NO_SUCH_CONSUMER = 'No API consumer found'


def transform_consumer(consumer: Consumer) -> Dict[str, Any]:
    """Get the outward representation of a consumer."""
    status = None
    if consumer.api_token:
        status = tokens.classify(consumer.api_token).value
    return {
        'id': consumer.consumer_id,
        'email': consumer.email,
        'token_status': status,
        'reset_requested': bool(consumer.reset_key),
        'created': consumer.created.isoformat() if consumer.created else None,
        'updated': consumer.updated.isoformat() if consumer.updated else None
    }


def _with_token(valid_token: str) -> Callable[[Consumer], Dict[str, Any]]:
    def transform(consumer: Consumer) -> Dict[str, Any]:
        data = transform_consumer(consumer)
        data['api_token'] = valid_token
        return data
    return transform


def _deliver(send: Callable[[str, str], None], email: str,
             secret: str) -> bool:
    try:
        send(email, secret)
    except (smtplib.SMTPException, OSError) as e:
        logger.error('Could not send mail to %s: %s', email, e)
        return False
    return True


def register(params: MultiDict) -> ResponseData:
    """
    Register a new consumer.

    The consumer is created with a starter token. The valid token, derived
    from the starter token and the new id, is emailed and returned.
    """
    form = RegistrationForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    try:
        consumer = datastore.save_consumer(Consumer(
            email=form.email.data,
            api_token=tokens.generate_starter_token()
        ))
    except DuplicateConsumer:
        return error('An API consumer with that email already exists',
                     HTTPStatus.BAD_REQUEST)
    logger.info('Registered consumer %s', consumer.consumer_id)
    valid_token = token_manager().generate_valid_token(consumer)
    _deliver(mail.send_valid_token, consumer.email, valid_token)
    return normalize(Entity(consumer, status=HTTPStatus.CREATED),
                     transformer=_with_token(valid_token))


def activate(params: MultiDict) -> ResponseData:
    """Activate a submitted valid token."""
    form = ActivationForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    manager = token_manager()
    valid_token = form.api_token.data
    try:
        consumer = manager.check_activation(valid_token)
    except MalformedToken:
        return error('The API token is malformed', HTTPStatus.BAD_REQUEST)
    except ActivationFailed as e:
        logger.debug('Activation failed: %s', e)
        return error('The API token cannot be activated',
                     HTTPStatus.BAD_REQUEST)
    consumer = datastore.save_consumer(
        consumer._replace(api_token=manager.activate(valid_token))
    )
    logger.info('Activated consumer %s', consumer.consumer_id)
    return normalize(Entity(consumer), transformer=transform_consumer)


def reactivate(params: MultiDict) -> ResponseData:
    """Send the valid token again to a consumer that has not activated."""
    form = ReactivationForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    consumer = datastore.get_consumer_by_email(form.email.data)
    if consumer is None:
        return error(NO_SUCH_CONSUMER, HTTPStatus.NOT_FOUND)
    manager = token_manager()
    if consumer.api_token and manager.token_status(consumer.api_token) \
            is not TokenStatus.STARTER:
        return error('The API token is already active; request a reset key',
                     HTTPStatus.BAD_REQUEST)
    if not consumer.api_token:
        consumer = datastore.save_consumer(
            consumer._replace(api_token=tokens.generate_starter_token())
        )
    valid_token = manager.generate_valid_token(consumer)
    if not _deliver(mail.send_valid_token, consumer.email, valid_token):
        return error('Could not send the API token',
                     HTTPStatus.SERVICE_UNAVAILABLE)
    return normalize(Entity(consumer), transformer=transform_consumer)


def reset_key(params: MultiDict) -> ResponseData:
    """Issue a reset key and send it to the consumer."""
    form = ResetKeyForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    consumer = datastore.get_consumer_by_email(form.email.data)
    if consumer is None:
        return error(NO_SUCH_CONSUMER, HTTPStatus.NOT_FOUND)
    consumer, key = token_manager().reset(consumer)
    consumer = datastore.save_consumer(consumer)
    logger.info('Issued reset key for consumer %s', consumer.consumer_id)
    if not _deliver(mail.send_reset_key, consumer.email, key):
        return error('Could not send the reset key',
                     HTTPStatus.SERVICE_UNAVAILABLE)
    return normalize(Entity(consumer), transformer=transform_consumer)


def refresh_token(params: MultiDict) -> ResponseData:
    """Exchange an email address and reset key for a new valid token."""
    form = RefreshTokenForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    consumer = datastore.get_consumer_by_email(form.email.data)
    if consumer is None:
        return error(NO_SUCH_CONSUMER, HTTPStatus.NOT_FOUND)
    try:
        consumer, valid_token = \
            token_manager().refresh(consumer, form.reset_key.data)
    except ResetFailed:
        return error('The reset key is not valid', HTTPStatus.BAD_REQUEST)
    consumer = datastore.save_consumer(consumer)
    logger.info('Refreshed token for consumer %s', consumer.consumer_id)
    _deliver(mail.send_valid_token, consumer.email, valid_token)
    return normalize(Entity(consumer), transformer=_with_token(valid_token))


def show(consumer_id: str) -> ResponseData:
    """Get a single consumer."""
    consumer = datastore.get_consumer(consumer_id)
    if consumer is None:
        return error(NO_SUCH_CONSUMER, HTTPStatus.NOT_FOUND)
    return normalize(Entity(consumer), transformer=transform_consumer)


def update(consumer_id: str, params: MultiDict) -> ResponseData:
    """Update the email address of a consumer."""
    consumer = datastore.get_consumer(consumer_id)
    if consumer is None:
        return error(NO_SUCH_CONSUMER, HTTPStatus.NOT_FOUND)
    form = UpdateForm(params)
    if not form.validate():
        return error(form_errors(form), HTTPStatus.BAD_REQUEST)
    try:
        consumer = datastore.save_consumer(
            consumer._replace(email=form.email.data)
        )
    except DuplicateConsumer:
        return error('An API consumer with that email already exists',
                     HTTPStatus.BAD_REQUEST)
    return normalize(Entity(consumer), transformer=transform_consumer)


def delete(consumer_id: str) -> ResponseData:
    """Delete a consumer."""
    if not datastore.delete_consumer(consumer_id):
        return error(NO_SUCH_CONSUMER, HTTPStatus.NOT_FOUND)
    logger.info('Deleted consumer %s', consumer_id)
    return normalize(Empty())


def provision(email: str) -> Tuple[Consumer, str]:
    """
    Create or re-key an active consumer, bypassing registration.

    Used to seed the system and admin consumers of a new deployment. Any
    earlier token of the consumer stops working.

    Returns
    -------
    :class:`.Consumer`
    str
        The valid token, which is not stored anywhere in cleartext.

    """
    manager = token_manager()
    consumer = datastore.get_consumer_by_email(email) or Consumer(email=email)
    consumer = datastore.save_consumer(consumer._replace(
        api_token=tokens.generate_starter_token(),
        reset_key=None
    ))
    valid_token = manager.generate_valid_token(consumer)
    consumer = manager.check_activation(valid_token)
    consumer = datastore.save_consumer(
        consumer._replace(api_token=manager.activate(valid_token))
    )
    logger.info('Provisioned consumer %s', consumer.consumer_id)
    return consumer, valid_token


def list_consumers() -> ResponseData:
    """Get all consumers."""
    return normalize(Collection(datastore.list_consumers()),
                     transformer=transform_consumer)
