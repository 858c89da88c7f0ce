"""SQLAlchemy models for database integration."""

from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Column, DateTime, Integer, String

db: SQLAlchemy = SQLAlchemy()


class DBConsumer(db.Model):    # type: ignore
    """Persistence for :class:`domain.Consumer`."""

    __tablename__ = 'api_consumer'

    consumer_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    api_token = Column(String(255), nullable=True)
    """Starter token before activation; hash of the valid token after."""

    reset_key = Column(String(255), nullable=True)
    """Hash of the outstanding reset key."""

    created = Column(DateTime, default=datetime.now)
    updated = Column(DateTime, default=datetime.now, onupdate=datetime.now)
