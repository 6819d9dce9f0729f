"""Exceptions shared across the scoring pipeline."""


class ConfigurationError(Exception):
    """Missing or invalid runtime configuration. Aborts the whole run."""
    pass


class MalformedOutputError(Exception):
    """Model content could not be parsed into the expected result shape."""
    pass
