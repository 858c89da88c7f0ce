"""Database integration for persisting API consumers."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from . import models, util
from ...domain import Consumer

logger = logging.getLogger(__name__)


class DuplicateConsumer(RuntimeError):
    """A consumer with the same email address already exists."""


init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all
transaction = util.transaction


def get_consumer(consumer_id: str) -> Optional[Consumer]:
    """
    Load a :class:`.Consumer` from the datastore.

    Returns None if there is no such consumer. Ids are the decimal strings
    embedded in tokens; anything else cannot match a consumer.
    """
    key = _primary_key(consumer_id)
    if key is None:
        return None
    with util.transaction() as dbsession:
        db_consumer = dbsession.get(models.DBConsumer, key)
        if db_consumer is None:
            return None
        return _to_domain(db_consumer)


def get_consumer_by_email(email: str) -> Optional[Consumer]:
    """Load a :class:`.Consumer` by email address, if there is one."""
    with util.transaction() as dbsession:
        db_consumer = dbsession.query(models.DBConsumer) \
            .filter(models.DBConsumer.email == email) \
            .first()
        if db_consumer is None:
            return None
        return _to_domain(db_consumer)


def list_consumers() -> List[Consumer]:
    """Load all consumers, oldest first."""
    with util.transaction() as dbsession:
        return [_to_domain(db_consumer) for db_consumer
                in dbsession.query(models.DBConsumer)
                .order_by(models.DBConsumer.consumer_id)]


def save_consumer(consumer: Consumer) -> Consumer:
    """
    Persist a :class:`.Consumer`.

    Consumers without an id are created; the returned consumer carries the
    newly assigned id.

    Raises
    ------
    :class:`.DuplicateConsumer`
        If another consumer already uses the email address.
    :class:`LookupError`
        If the consumer has an id that does not exist.

    """
    try:
        with util.transaction() as dbsession:
            if consumer.consumer_id:
                db_consumer = dbsession.get(models.DBConsumer,
                                            int(consumer.consumer_id))
                if db_consumer is None:
                    raise LookupError(
                        f'Consumer {consumer.consumer_id} does not exist'
                    )
            else:
                db_consumer = models.DBConsumer()
            db_consumer.email = consumer.email
            db_consumer.api_token = consumer.api_token
            db_consumer.reset_key = consumer.reset_key
            dbsession.add(db_consumer)
            dbsession.flush()
            saved = _to_domain(db_consumer)
    except IntegrityError as e:
        raise DuplicateConsumer(f'{consumer.email} is already registered') \
            from e
    logger.debug('Saved consumer %s', saved.consumer_id)
    return saved


def delete_consumer(consumer_id: str) -> bool:
    """Delete a consumer; returns False if there was no such consumer."""
    key = _primary_key(consumer_id)
    if key is None:
        return False
    with util.transaction() as dbsession:
        db_consumer = dbsession.get(models.DBConsumer, key)
        if db_consumer is None:
            return False
        dbsession.delete(db_consumer)
    logger.debug('Deleted consumer %s', consumer_id)
    return True


def _to_domain(db_consumer: models.DBConsumer) -> Consumer:
    return Consumer(
        consumer_id=str(db_consumer.consumer_id),
        email=db_consumer.email,
        api_token=db_consumer.api_token,
        reset_key=db_consumer.reset_key,
        created=db_consumer.created,
        updated=db_consumer.updated
    )


def _primary_key(consumer_id: str) -> Optional[int]:
    # Only the canonical decimal form of an id names a consumer.
    consumer_id = str(consumer_id)
    if not (consumer_id.isascii() and consumer_id.isdigit()):
        return None
    key = int(consumer_id)
    if str(key) != consumer_id:
        return None
    return key
