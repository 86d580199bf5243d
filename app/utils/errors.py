"""
Domain errors raised by the service layer.

Controllers translate these into HTTP responses; every error is a ValueError so
callers that only care about "the request was rejected" can keep catching that.
"""


class BadRequestError(ValueError):
    """Invalid input or business-rule violation (400)"""


class AuthenticationError(ValueError):
    """Bad credentials or unverified account (401)"""


class NotFoundError(ValueError):
    """Referenced resource does not exist (404)"""


class ConflictError(ValueError):
    """Unique resource already exists (409)"""


class MailerError(ValueError):
    """Outgoing email could not be sent (500)"""


_STATUS_CODES = (
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (MailerError, 500),
)


def http_status_for(error: ValueError) -> int:
    """HTTP status for a service error; anything unrecognised is a 400"""
    for error_cls, status_code in _STATUS_CODES:
        if isinstance(error, error_cls):
            return status_code
    return 400
