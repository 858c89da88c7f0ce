"""Flask configuration."""

import os

SECRET_KEY = os.environ.get('SECRET_KEY', 'asdf1234')
"""Signs the web app session cookie, which holds the consumer token."""

SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME',
                                     'api_consumer_session')
SESSION_COOKIE_SECURE = bool(int(os.environ.get('SESSION_COOKIE_SECURE', '1')))
SESSION_COOKIE_HTTPONLY = True

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')

SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite://')
SQLALCHEMY_TRACK_MODIFICATIONS = False
CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))

BACKEND_API_URL = os.environ.get('BACKEND_API_URL',
                                 'http://localhost:8000/api')
"""Base URL of the backend API, without the version segment."""

BACKEND_VERIFY_TLS = bool(int(os.environ.get('BACKEND_VERIFY_TLS', '1')))

API_SUBDOMAIN = os.environ.get('API_SUBDOMAIN', 'api')
"""Subdomain serving the API when ``SERVER_NAME`` is set."""

SERVER_NAME = os.environ.get('SERVER_NAME')

SYSTEM_ACCESS_TOKEN = os.environ.get('SYSTEM_ACCESS_TOKEN')
"""
Token the web app uses when no consumer is logged in.

Must be the valid token of an activated consumer. ``populate_consumers.py``
prints one for a new deployment.
"""

ADMIN_ACCESS_TOKEN = os.environ.get('ADMIN_ACCESS_TOKEN')
"""Token for administrative calls to the v2 API."""

ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL')
"""Only the consumer registered with this address is an administrator."""

MAIL_HOST = os.environ.get('MAIL_HOST')
"""SMTP host. If unset, tokens and reset keys are not emailed."""

MAIL_PORT = int(os.environ.get('MAIL_PORT', '25'))
MAIL_SENDER = os.environ.get('MAIL_SENDER', 'no-reply@localhost')
