"""
Helper script for seeding the system and admin consumers.

Every call to the backend API needs an active consumer token, including
the registration calls the web app makes on behalf of new consumers. This
script creates the tables if needed, then creates (or re-keys) the two
consumers that the gateway itself uses, and prints the settings for them.

.. code-block:: bash

   $ SQLALCHEMY_DATABASE_URI=sqlite:///consumers.db \
         python populate_consumers.py
   System consumer email [system@localhost]:
   Admin consumer email [admin@localhost]: admin@example.org
   SYSTEM_ACCESS_TOKEN=Ab3dEfGh1_x9Kq2Lm_ZzYyXxWw7_1
   ADMIN_ACCESS_TOKEN=Qr5tUv8Wx_m3Nn4Bb_CcDdEeFf2_2
   ADMIN_EMAIL=admin@example.org

Running it again issues new tokens; the previous ones stop working.
"""

import click

from consumer_gateway.controllers import consumers
from consumer_gateway.factory import create_web_app
from consumer_gateway.services import datastore


@click.command()
@click.option('--system_email', prompt='System consumer email',
              default='system@localhost')
@click.option('--admin_email', prompt='Admin consumer email',
              default='admin@localhost')
def populate_consumers(system_email: str, admin_email: str) -> None:
    """Create the system and admin consumers, and print their tokens."""
    app = create_web_app()
    with app.app_context():
        datastore.create_all()
        _, system_token = consumers.provision(system_email)
        _, admin_token = consumers.provision(admin_email)
    click.echo(f'SYSTEM_ACCESS_TOKEN={system_token}')
    click.echo(f'ADMIN_ACCESS_TOKEN={admin_token}')
    click.echo(f'ADMIN_EMAIL={admin_email}')


if __name__ == '__main__':
    populate_consumers()
