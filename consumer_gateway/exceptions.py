"""Exceptions."""


class MalformedToken(ValueError):
    """A token could not be split into a starter token and a consumer id."""


class ActivationFailed(RuntimeError):
    """A submitted token does not match any consumer awaiting activation."""


class ResetFailed(RuntimeError):
    """A reset key was missing or did not match."""
