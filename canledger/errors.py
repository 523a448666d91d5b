"""
Domain Exceptions
Raised by services and rendered as JSON by the application error handlers
"""


class CanLedgerError(Exception):
    """Base class for errors that map to an HTTP response"""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(CanLedgerError):
    """Missing or malformed request data"""
    status_code = 400


class NotFoundError(CanLedgerError):
    """Referenced record does not exist"""
    status_code = 404
