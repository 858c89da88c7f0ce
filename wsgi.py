"""Web Server Gateway Interface entry-point."""

import os

from consumer_gateway.factory import create_web_app

__flask_app__ = create_web_app()


def application(environ, start_response):    # type: ignore
    """WSGI application."""
    for key, value in environ.items():
        # uWSGI may pass in the container hostname, which is not helpful for
        # building URLs; ``SERVER_NAME`` comes only from config.py.
        if key == 'SERVER_NAME':
            continue
        os.environ[key] = str(value)
        __flask_app__.config[key] = str(value)
    return __flask_app__(environ, start_response)
