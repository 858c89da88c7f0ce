"""Integrations with the consumer store, session store, backend and mail."""
