"""Install the API consumer gateway."""

from setuptools import setup, find_packages

setup(
    name='consumer-gateway',
    version='0.1.0',
    packages=find_packages(include=['consumer_gateway',
                                    'consumer_gateway.*']),
    install_requires=[
        "flask",
        "werkzeug",
        "flask-sqlalchemy",
        "sqlalchemy",
        "requests",
        "wtforms",
        "python-json-logger",
        "click"
    ],
    extras_require={
        'test': ["pytest"]
    },
    zip_safe=False
)
