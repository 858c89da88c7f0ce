"""Per-caller session state for the web app."""

from typing import Any, MutableMapping


class SessionStore(object):
    """
    Minimal session interface used by the core.

    Wraps any mutable mapping; in the web app that is :data:`flask.session`,
    which is scoped to the current caller.
    """

    def __init__(self, backing: MutableMapping[str, Any]) -> None:
        self._backing = backing

    def get(self, key: str) -> Any:
        """Get the value stored under ``key``, or None."""
        return self._backing.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        self._backing[key] = value

    def has(self, key: str) -> bool:
        """Check whether anything is stored under ``key``."""
        return key in self._backing

    def clear(self, key: str) -> None:
        """Forget whatever is stored under ``key``."""
        self._backing.pop(key, None)
