"""Numeric process exit codes used by the ``kypi`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~kypi.exceptions.KypiError` subclass or by the
transport-error mapping in :func:`kypi.app.main`.

Example::

    $ kypi call users.get --params '{"id": 7}'
    $ echo $?
    4   # EXIT_HTTP_ERROR -- the server answered with a non-2xx status
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, a malformed registry, or a missing path parameter."""

EXIT_HTTP_ERROR = 4
"""The remote API answered with a non-2xx status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
