"""Exceptions and warnings raised by the epicycle pipeline."""


class InvalidInput(ValueError):
    """Input cannot be traced: empty point set or malformed coordinates."""


class DegenerateSignal(UserWarning):
    """The traced signal has a single sample; its epicycle is a fixed point."""
