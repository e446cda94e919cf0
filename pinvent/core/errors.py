"""
Error taxonomy shared by the services.

Services raise these; main.py maps them to JSON responses of the form
{"detail": message} with the status code carried by the class.
"""


class PinventError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PinventError):
    """Missing or malformed input."""
    status_code = 400


class ConflictError(PinventError):
    """Unique value (email) already taken."""
    status_code = 400


class AuthError(PinventError):
    """Credential mismatch."""
    status_code = 400


class UnauthorizedError(PinventError):
    """No valid session, or the resource belongs to another user."""
    status_code = 401


class NotFoundError(PinventError):
    status_code = 404


class InternalError(PinventError):
    """A downstream dependency (hashing, email, image storage) failed."""
    status_code = 500
