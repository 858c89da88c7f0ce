"""Deliver tokens and reset keys to consumers by email."""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from flask import Flask, current_app, g

logger = logging.getLogger(__name__)


class MailSession(object):
    """An SMTP service, connected to on demand."""

    def __init__(self, host: str, port: int, sender: str) -> None:
        self._host = host
        self._port = port
        self._sender = sender

    def send_message(self, recipient: str, subject: str, body: str) -> None:
        """Send a plain-text message to ``recipient``."""
        message = EmailMessage()
        message['From'] = self._sender
        message['To'] = recipient
        message['Subject'] = subject
        message.set_content(body)
        with smtplib.SMTP(host=self._host, port=self._port) as conn:
            conn.send_message(message)
        logger.debug('Sent "%s" to %s', subject, recipient)


def init_app(app: Optional[Flask] = None) -> None:
    """Set required configuration defaults for the application."""
    if app is not None:
        app.config.setdefault('MAIL_HOST', None)
        app.config.setdefault('MAIL_PORT', 25)
        app.config.setdefault('MAIL_SENDER', 'no-reply@localhost')


def is_configured() -> bool:
    """Mail is delivered only if an SMTP host is configured."""
    return bool(current_app.config.get('MAIL_HOST'))


def get_session(app: Optional[Flask] = None) -> MailSession:
    """Create a new :class:`.MailSession`."""
    config = (app or current_app).config
    return MailSession(config['MAIL_HOST'], int(config.get('MAIL_PORT', 25)),
                       config.get('MAIL_SENDER', 'no-reply@localhost'))


def current_session() -> MailSession:
    """Get the mail session for this context."""
    if 'mail' not in g:
        g.mail = get_session()
    return g.mail   # type: ignore


def send_valid_token(email: str, valid_token: str) -> None:
    """Send a consumer the token they need to activate."""
    if not is_configured():
        logger.info('Mail is not configured; not sending token to %s', email)
        return
    current_session().send_message(
        email,
        'Activate your API access token',
        'Your API access token is:\n\n'
        f'    {valid_token}\n\n'
        'Submit it on the activation page to start using the API. '
        'Keep it safe: it cannot be recovered once activated.'
    )


def send_reset_key(email: str, reset_key: str) -> None:
    """Send a consumer the key that authorizes a token refresh."""
    if not is_configured():
        logger.info('Mail is not configured; not sending reset key to %s',
                    email)
        return
    current_session().send_message(
        email,
        'Your API token reset key',
        f'Your reset key is:\n\n    {reset_key}\n\n'
        'Use it with your email address to generate a new API token.'
    )
