"""
API consumer gateway.

The gateway is a Flask application that issues API tokens to consumers and
provides a web app through which consumers manage them. It has two parts.

The backend API (:mod:`.routes.api`) owns the consumer records. Consumers
register with an email address and receive a human-readable token, which
they submit once to activate it. Only a salted hash of the active token is
stored. A consumer who loses their token can request a one-time reset key
by email, and exchange it for a new token.

The web app (:mod:`.routes.ui`) keeps no consumer state. A consumer logs in
by submitting their token, which is kept in the session. Each action is then
forwarded to the backend API. The call uses the logged-in consumer's token
when there is one, and the system token otherwise. Administrative calls use
the admin token.

Context
-------
Requests to the backend API carry the token as the ``api_access_token``
query parameter or as a bearer ``Authorization`` header. Version 1 routes
accept any active consumer. Version 2 routes are administrative.

"""
