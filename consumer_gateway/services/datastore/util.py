"""Helpers and Flask application integration."""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from flask import Flask
from sqlalchemy.orm.session import Session

from .models import db

logger = logging.getLogger(__name__)


@contextmanager
def transaction(commit: bool = True) -> Generator[Session, None, None]:
    """Context manager for database transaction."""
    try:
        yield db.session
        if commit:
            db.session.commit()
    except Exception as e:
        logger.error('Commit failed, rolling back: %s', str(e))
        db.session.rollback()
        raise


def init_app(app: Optional[Flask]) -> None:
    """Set configuration defaults and attach session to the application."""
    if app is not None:
        app.config.setdefault('SQLALCHEMY_DATABASE_URI', 'sqlite://')
        app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
    db.init_app(app)


def current_session() -> Session:
    """Get/create database session for this context."""
    return db.session


def create_all() -> None:
    """Create all tables in the database."""
    db.create_all()


def drop_all() -> None:
    """Drop all tables in the database."""
    db.drop_all()
