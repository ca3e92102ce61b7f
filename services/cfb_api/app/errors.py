"""Error types surfaced by the API.

Route handlers raise these; `main.py` registers exception handlers that render
them as `{"error": "<message>"}` with the matching status code.
"""

GENERIC_ERROR_MESSAGE = "Something went wrong."


class ApiError(Exception):
    """Base class for errors rendered as JSON error bodies."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFilterError(ApiError):
    """A required filter (or combination of filters) was not supplied."""

    status_code = 400


class QueryError(ApiError):
    """The database layer failed while executing a query.

    The message is always the generic one; the underlying exception is logged
    where it is caught and chained as `__cause__`.
    """

    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)
