# pos_api/errors.py
"""
Domain errors raised by the catalog, sales and reporting services.

Each error carries the HTTP status the API layer answers with.
"""


class PosError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PosError):
    status_code = 400


class NotFoundError(PosError):
    status_code = 404


class InsufficientStockError(PosError):
    status_code = 400


class InvoiceNumberConflictError(PosError):
    status_code = 409
