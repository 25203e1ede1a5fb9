# tvlocker/errors.py
"""Errors raised by the device lifecycle operations.

Each error carries the HTTP status it maps to, so the web layer can turn
it into a plain-text response without knowing about individual cases.
"""


class LifecycleError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(LifecycleError):
    status_code = 400


class Forbidden(LifecycleError):
    status_code = 403


class NotFound(LifecycleError):
    status_code = 404


class Conflict(LifecycleError):
    status_code = 409


class Internal(LifecycleError):
    status_code = 500
