"""Exception hierarchy for kypi.

All exceptions raised by kypi itself inherit from :class:`KypiError`, which
carries an ``exit_code`` attribute mapped to a constant from
:mod:`kypi.exit_codes`. Errors raised by the transport (``httpx.HTTPError``
and friends for the default transports) are never wrapped: the client hands
them to the ``on_error`` observer and re-raises them unchanged.

Subclass hierarchy::

    KypiError (exit 1)
    +-- InvalidUsageError        (exit 2)
    |   +-- MissingPathParamError
    +-- EndpointDefinitionError  (exit 2)
    +-- ConfigError              (exit 1)
"""

from kypi.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


class KypiError(Exception):
    """Base exception for all kypi errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(KypiError):
    """Raised when an endpoint is called with unusable input."""

    exit_code = EXIT_INVALID_USAGE


class MissingPathParamError(InvalidUsageError):
    """Raised before dispatch when a ``:token`` in the URL template has no value.

    Attributes:
        param: Name of the missing template token (without the colon).
    """

    def __init__(self, param: str):
        super().__init__(f"Missing param: {param}")
        self.param = param


class EndpointDefinitionError(KypiError):
    """Raised when an endpoint registry is malformed (bad method, cycle, stray leaf)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(KypiError):
    """Raised for configuration problems (invalid project file, bad credential source, bad import path)."""

    exit_code = EXIT_GENERIC_FAILURE
